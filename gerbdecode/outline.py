#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2022 Jan Sebastian Götte <gerbonara@jaseg.de>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

from .arcs import tessellate_arc, ARC_STEPS_PER_TURN
from .utils import points_close


class Outline:
    """ Vertex list of a region contour under construction.

    Straight segments add their end point, arcs are tessellated into straight segments at a fixed angular resolution of
    :py:data:`.ARC_STEPS_PER_TURN` steps per full turn. The outline counts as closed once its last vertex has been set to
    a copy of its first one by :py:meth:`close`; there is no separate flag.
    """

    def __init__(self, points=None, steps_per_turn=ARC_STEPS_PER_TURN):
        self.points = [] if points is None else list(points)
        self.steps_per_turn = steps_per_turn

    def begin(self, seed=None):
        """ Start a new, empty contour. If ``seed`` is given, it becomes the first vertex. """
        self.points = [] if seed is None else [tuple(seed)]

    def append_vertex(self, point):
        """ Add a straight segment from the current last vertex to ``point``. """
        self.points.append(tuple(point))

    def append_arc(self, start, end, rel_center, clockwise, multi_quadrant):
        """ Add a tessellated circular arc from ``start`` to ``end``. See :py:func:`.resolve_arc_center` for the meaning
        of the other arguments. The arc's first vertex is skipped when it coincides with the current last vertex. """
        points = tessellate_arc(start, end, rel_center, clockwise, multi_quadrant, steps_per_turn=self.steps_per_turn)

        if self.points and points_close(self.points[-1], points[0]):
            points = points[1:]

        self.points.extend(tuple(p) for p in points)

    def close(self):
        """ Append a copy of the first vertex so that the outline's head and tail coincide. """
        if self.points:
            self.points.append(self.points[0])

    @property
    def is_closed(self):
        return len(self.points) > 1 and self.points[0] == self.points[-1]

    @property
    def first(self):
        return self.points[0] if self.points else None

    @property
    def last(self):
        return self.points[-1] if self.points else None

    def offset(self, dx, dy):
        self.points = [ (x+dx, y+dy) for x, y in self.points ]

    def __len__(self):
        return len(self.points)

    def __bool__(self):
        return bool(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __eq__(self, other):
        if isinstance(other, Outline):
            return self.points == other.points
        if isinstance(other, (list, tuple)):
            return self.points == [tuple(p) for p in other]
        return NotImplemented

    def __repr__(self):
        return f'Outline({self.points!r})'
