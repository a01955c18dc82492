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

import math

from .utils import rotate_point, points_close

#: Arc tessellation resolution used for region outlines, in steps per full turn.
ARC_STEPS_PER_TURN = 36


def resolve_arc_center(start, end, rel_center, clockwise, multi_quadrant):
    """ Turn the I/J offset of a Gerber arc into an absolute center point.

    In multi-quadrant (G75) mode, ``rel_center`` is a signed offset from ``start`` and is used as-is. In single-quadrant
    (G74) mode the file only gives the magnitudes of the offset, and the signs have to be recovered from the quadrant
    the chord ``end - start`` points into, using the fact that the arc spans at most 90 degrees:

    .. code-block:: none

          Y
        2 | 1       Q1 (dx >= 0, dy >= 0): negate x
       ---S---X     Q4 (dx >= 0, dy <  0): unchanged
        3 | 4       Q2 (dx <  0, dy >= 0): negate x and y
                    Q3 (dx <  0, dy <  0): negate y

    This table gives the center of a counter-clockwise arc. A clockwise arc has its center on the opposite side of the
    chord, so the whole vector is negated.

    The returned point pair is ordered such that sweeping from the first to the second point always goes
    counter-clockwise (Y axis pointing up). Counter-clockwise arcs keep ``(start, end)``, clockwise arcs are returned
    as ``(end, start)``.

    :param tuple start: ``(x, y)`` start point
    :param tuple end: ``(x, y)`` end point
    :param tuple rel_center: ``(i, j)`` center offset from the file
    :param bool clockwise: ``True`` for G02 arcs, ``False`` for G03 arcs.
    :param bool multi_quadrant: ``True`` when 360 degree arcs are enabled (G75).
    :returns: ``(center, (first, second))``
    :rtype: tuple
    """
    (x1, y1), (x2, y2) = start, end
    i, j = rel_center

    if not multi_quadrant:
        dx, dy = x2 - x1, y2 - y1

        if dx >= 0 and dy >= 0:
            i = -i
        elif dx >= 0 and dy < 0:
            pass
        elif dx < 0 and dy >= 0:
            i, j = -i, -j
        else:
            j = -j

        if clockwise:
            i, j = -i, -j

    center = (x1 + i, y1 + j)

    if clockwise:
        return center, (end, start)
    else:
        return center, (start, end)


def arc_angles(center, first, second, full_circle=False):
    """ Start and end angle in degrees of the counter-clockwise sweep from ``first`` to ``second`` around ``center``.

    The end angle is always greater than or equal to the start angle. ``full_circle`` turns a sweep with coinciding end
    points into a full turn instead of an empty arc.
    """
    cx, cy = center
    start_angle = math.degrees(math.atan2(first[1] - cy, first[0] - cx))
    end_angle = math.degrees(math.atan2(second[1] - cy, second[0] - cx))

    if start_angle > end_angle:
        end_angle += 360

    if full_circle and points_close(first, second):
        end_angle = start_angle + 360

    return start_angle, end_angle


def tessellate_arc(start, end, rel_center, clockwise, multi_quadrant, steps_per_turn=ARC_STEPS_PER_TURN):
    """ Approximate a Gerber arc with a polyline at a fixed angular resolution.

    The step count is the arc's sweep divided by the step angle, rounded towards zero. The first returned point is
    ``start``, each further point is one step further along the arc in its actual direction, and the last point is
    exactly ``end`` instead of the last interpolated step so rounding errors do not accumulate.

    :returns: list of ``(x, y)`` tuples from ``start`` to ``end``, at least two entries long.
    """
    center, (first, second) = resolve_arc_center(start, end, rel_center, clockwise, multi_quadrant)
    full_circle = multi_quadrant and points_close(start, end)
    start_angle, end_angle = arc_angles(center, first, second, full_circle=full_circle)

    step = 360 / steps_per_turn
    # small epsilon so a sweep of exactly n steps is not lost to atan2 rounding
    count = int(abs(end_angle - start_angle) / step + 1e-9)

    # rotate_point rotates clockwise for positive angles
    direction = 1 if clockwise else -1
    points = [start]
    for n in range(1, count):
        points.append(rotate_point(*start, direction * math.radians(n * step), *center))
    points.append(end)
    return points
