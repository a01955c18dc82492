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

from .utils import MM, InterpMode


class InterpreterState:
    """ Mode and position state of one Gerber image while it is being decoded. A fresh instance is created for every
    image, so nothing leaks from one file into the next.
    """

    def __init__(self, unit=MM):
        self.reset(unit)

    def reset(self, unit=MM):
        #: Current pen position, ``(x, y)`` in millimeter.
        self.point = (0, 0)
        #: Pen position before the last coordinate update. Start point of the next stroke.
        self.previous_point = (0, 0)
        #: I/J offset of the next arc, ``(i, j)`` in millimeter.
        self.rel_center = (0, 0)
        #: Whether :py:attr:`rel_center` was set since the last arc was drawn.
        self.rel_center_pending = False
        #: Set by G01, G02 and G03. ``None`` means no usable mode, and D01 then draws nothing.
        self.interpolation_mode = InterpMode.LINEAR
        #: Unit of coordinates in the file. Changed by %MO, G70 and G71. Decoded coordinates are always millimeter.
        self.unit = unit
        #: ``True`` for G91 incremental coordinates
        self.relative = False
        #: ``True`` once G75 enabled 360 degree arcs. G74 (single quadrant) is the power-on default.
        self.multi_quadrant = False
        #: ``True`` between G36 and G37
        self.polygon_fill = False
        #: ``True`` while the pen is down. Inside a region, this means a region outline is open.
        self.exposure = False
        self.last_pen_command = None
        #: Currently selected tool (D code) number, ``None`` before the first tool select.
        self.current_tool = None
        #: Layer polarity set by %LP. ``True`` for dark.
        self.polarity_dark = True
        #: Object attributes (``%TO``) such as ``.N``, ``.P`` and ``.C``. Items get a copy of this on creation.
        self.object_attrs = {}
        #: ``.AperFunction`` aperture attribute value, attached to regions.
        self.aperture_function = None

    @property
    def is_metric(self):
        return self.unit == MM

    def update_point(self, x=None, y=None):
        """ Set the current point. Omitted coordinates keep their current value. In relative mode, ``x`` and ``y`` are
        added to the current point. Returns the old point. """
        old_point = self.point
        ox, oy = old_point

        if self.relative:
            x = ox + (x or 0)
            y = oy + (y or 0)
        else:
            x = ox if x is None else x
            y = oy if y is None else y

        self.point = (x, y)
        return old_point

    def set_rel_center(self, i=None, j=None):
        """ Set the I/J offset for the next arc and mark it as pending. Omitted offsets are zero. """
        self.rel_center = (i or 0, j or 0)
        self.rel_center_pending = True

    def advance(self):
        """ Make the current point the start point of the next stroke. """
        self.previous_point = self.point

    def __str__(self):
        return (f'<InterpreterState at {self.point} {self.interpolation_mode.name} unit={self.unit} '
                f'relative={self.relative} 360={self.multi_quadrant} region={self.polygon_fill} '
                f'exposure={self.exposure} tool={self.current_tool}>')
