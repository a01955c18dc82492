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
import copy
from enum import Enum
from dataclasses import dataclass, field, KW_ONLY

from .utils import MM, sum_bounds, points_bounds, offset_bounds
from .apertures import ApertureShape, DEFAULT_APERTURE_SIZE
from .outline import Outline


class SpotShape(Enum):
    """ Shape stamped by a :py:class:`.Flash`. """
    CIRCLE = 'circle'
    OVAL = 'oval'
    RECTANGLE = 'rectangle'
    POLYGON = 'polygon'
    MACRO = 'macro'


SPOT_SHAPES = {
        ApertureShape.CIRCLE: SpotShape.CIRCLE,
        ApertureShape.OVAL: SpotShape.OVAL,
        ApertureShape.RECTANGLE: SpotShape.RECTANGLE,
        ApertureShape.POLYGON: SpotShape.POLYGON,
        ApertureShape.MACRO: SpotShape.MACRO,
        }


@dataclass
class DrawItem:
    """ Base class for the items decoded from a Gerber image. Coordinates are in :py:attr:`unit` units, which is
    always millimeter for items produced by :py:class:`.GerberImage`.
    """
    _ : KW_ONLY
    #: ``(width, height)`` of the pen or flashed spot.
    size : tuple = DEFAULT_APERTURE_SIZE
    #: D code number of the aperture this item was drawn with. ``0`` for regions.
    dcode : int = 0
    #: ``True`` for dark (LPD) items, ``False`` for clear (LPC) items.
    polarity_dark : bool = True
    #: Snapshot of the object (net) attributes that were active when this item was created, e.g. ``{'.N': ('GND',)}``
    attrs : dict = field(default_factory=dict)
    unit : object = MM

    @property
    def start(self):
        raise NotImplementedError()

    @property
    def end(self):
        raise NotImplementedError()

    @property
    def net_name(self):
        """ Name of the net this item belongs to, from its ``.N`` attribute. ``None`` if there is none. """
        if (value := self.attrs.get('.N')):
            return value[0]
        return None

    def bounding_box(self):
        """ :returns: tuple of tuples of floats: ``(min_x, min_y), (max_x, max_y)`` """
        raise NotImplementedError()

    def offset(self, dx, dy):
        """ Move this item by ``(dx, dy)`` in place. """
        raise NotImplementedError()

    def offset_copy(self, dx, dy):
        obj = copy.deepcopy(self)
        obj.offset(dx, dy)
        return obj

    def _stroke_bounds(self, points):
        w, h = self.size
        (min_x, min_y), (max_x, max_y) = points_bounds(points)
        return (min_x - w/2, min_y - h/2), (max_x + w/2, max_y + h/2)


@dataclass
class Line(DrawItem):
    """ A straight stroke drawn with a D01 in linear interpolation mode. """
    #: X coordinate of start point
    x1 : float
    #: Y coordinate of start point
    y1 : float
    #: X coordinate of end point
    x2 : float
    #: Y coordinate of end point
    y2 : float

    @property
    def start(self):
        return self.x1, self.y1

    @property
    def end(self):
        return self.x2, self.y2

    def bounding_box(self):
        return self._stroke_bounds([self.start, self.end])

    def offset(self, dx, dy):
        self.x1 += dx
        self.y1 += dy
        self.x2 += dx
        self.y2 += dy

    def __str__(self):
        return f'<Line {self.x1:.4f},{self.y1:.4f} -> {self.x2:.4f},{self.y2:.4f} D{self.dcode}>'


@dataclass
class Arc(DrawItem):
    """ A circular stroke.

    ``(x1, y1)`` and ``(x2, y2)`` are stored in drawing order: the arc always sweeps counter-clockwise from
    ``(x1, y1)`` to ``(x2, y2)``. For an arc that was drawn clockwise in the file (G02), this means ``(x1, y1)`` is the
    point where the pen stopped. ``clockwise`` records the original direction.

    .. note:: Unlike the file's I/J values, ``cx`` and ``cy`` are **absolute** coordinates.
    """
    x1 : float
    y1 : float
    x2 : float
    y2 : float
    #: Absolute X coordinate of the arc center
    cx : float
    #: Absolute Y coordinate of the arc center
    cy : float
    #: ``True`` if the arc was drawn clockwise (G02)
    clockwise : bool = False

    @property
    def start(self):
        return self.x1, self.y1

    @property
    def end(self):
        return self.x2, self.y2

    @property
    def center(self):
        return self.cx, self.cy

    @property
    def pen_start(self):
        """ Point at which the plotter pen started drawing this arc. """
        return self.end if self.clockwise else self.start

    @property
    def pen_end(self):
        """ Point at which the plotter pen stopped drawing this arc. """
        return self.start if self.clockwise else self.end

    @property
    def radius(self):
        return math.dist(self.center, self.start)

    def bounding_box(self):
        # bounding box of the full circle
        r = self.radius
        w, h = self.size
        return (self.cx - r - w/2, self.cy - r - h/2), (self.cx + r + w/2, self.cy + r + h/2)

    def offset(self, dx, dy):
        self.x1 += dx
        self.y1 += dy
        self.x2 += dx
        self.y2 += dy
        self.cx += dx
        self.cy += dy

    def __str__(self):
        return f'<Arc {self.x1:.4f},{self.y1:.4f} -> {self.x2:.4f},{self.y2:.4f} around {self.cx:.4f},{self.cy:.4f} D{self.dcode}>'


@dataclass
class Flash(DrawItem):
    """ A flash is what happens when you "stamp" an aperture at some location (D03). """
    x : float
    y : float
    shape : SpotShape = SpotShape.CIRCLE
    #: For macro apertures, the cached bounding box of the flashed macro shape, if it could be computed.
    macro_bounds : tuple = None

    @property
    def start(self):
        return self.x, self.y

    @property
    def end(self):
        return self.x, self.y

    def bounding_box(self):
        if self.macro_bounds is not None:
            return self.macro_bounds

        w, h = self.size
        return (self.x - w/2, self.y - h/2), (self.x + w/2, self.y + h/2)

    def offset(self, dx, dy):
        self.x += dx
        self.y += dy
        if self.macro_bounds is not None:
            self.macro_bounds = offset_bounds(self.macro_bounds, dx, dy)

    def __str__(self):
        return f'<Flash {self.shape.value} at {self.x:.4f},{self.y:.4f} D{self.dcode}>'


@dataclass
class Region(DrawItem):
    """ A filled area built from the D01 commands inside a G36/G37 block. Arcs in the outline have been tessellated
    into straight segments. Once closed, the first and last outline points are identical. """
    outline : Outline = field(default_factory=Outline)
    #: ``.AperFunction`` aperture attribute active when the region was opened, e.g. ``('Conductor',)``
    aperture_function : tuple = None

    @property
    def start(self):
        return self.outline.first

    @property
    def end(self):
        return self.outline.last

    @property
    def points(self):
        return self.outline.points

    def bounding_box(self):
        return points_bounds(self.outline)

    def offset(self, dx, dy):
        self.outline.offset(dx, dy)

    def __len__(self):
        return len(self.outline)

    def __str__(self):
        return f'<Region with {len(self.outline)} points>'


def make_line(start, end, size, dcode, polarity_dark, attrs):
    """ Build a :py:class:`.Line` stroke. ``attrs`` is copied so later attribute changes do not affect the item. """
    return Line(*start, *end, size=size, dcode=dcode, polarity_dark=polarity_dark, attrs=copy.copy(attrs))


def make_arc(center, first, second, clockwise, size, dcode, polarity_dark, attrs):
    """ Build an :py:class:`.Arc` from the output of :py:func:`.resolve_arc_center`. """
    return Arc(*first, *second, *center, clockwise=clockwise, size=size, dcode=dcode, polarity_dark=polarity_dark,
               attrs=copy.copy(attrs))


def make_flash(position, aperture_shape, size, dcode, polarity_dark, attrs, aperture=None):
    """ Build a :py:class:`.Flash`. Circular flashes always get a square size of their diameter. For macro apertures,
    the macro's bounding box at ``position`` is cached on the item, falling back to the nominal ``size`` when
    ``aperture`` cannot provide one. """
    shape = SPOT_SHAPES[aperture_shape]
    if shape == SpotShape.CIRCLE:
        size = (size[0], size[0])

    macro_bounds = None
    if shape == SpotShape.MACRO:
        if aperture is not None:
            macro_bounds = aperture.macro_bounding_box(*position)

        if macro_bounds is None:
            (x, y), (w, h) = position, size
            macro_bounds = (x - w/2, y - h/2), (x + w/2, y + h/2)

    return Flash(*position, shape=shape, macro_bounds=macro_bounds, size=size, dcode=dcode,
                 polarity_dark=polarity_dark, attrs=copy.copy(attrs))


def make_region(polarity_dark, attrs, aperture_function=None):
    """ Build an empty :py:class:`.Region`. Its outline is filled in by the command dispatcher. """
    return Region(dcode=0, size=(0, 0), polarity_dark=polarity_dark, attrs=copy.copy(attrs),
                  aperture_function=aperture_function)


def items_bounding_box(items, default=None):
    return sum_bounds((b for item in items if (b := item.bounding_box()) is not None), default=default)
