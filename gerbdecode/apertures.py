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
from enum import Enum
from dataclasses import dataclass, field, KW_ONLY

from .utils import MM

#: Lowest D code number that selects a tool. D01 through D09 are pen commands.
FIRST_DCODE = 10
#: Number of tool slots. Tool numbers above the last slot are clamped to it.
TOOLS_MAX_COUNT = 1000
#: Pen size used when a D01 or D03 refers to a tool that was never defined, in millimeter.
DEFAULT_APERTURE_SIZE = (0.00015, 0.00015)


class ApertureShape(Enum):
    """ Shape of a Gerber aperture as given in its ``%AD`` definition. """
    CIRCLE = 'C'
    RECTANGLE = 'R'
    OVAL = 'O'
    POLYGON = 'P'
    MACRO = 'M'


@dataclass
class ApertureMacro:
    """ Aperture macro as read from an ``%AM`` statement. gerbdecode does not evaluate macros, it only keeps their
    body around. Anything passed as the ``macro`` of an :py:class:`.ApertureDefinition` that has a
    ``bounding_box(x, y, params)`` method can provide real bounding boxes for macro flashes.
    """
    name : str
    body : str = ''

    def bounding_box(self, x, y, params=()):
        """ Always ``None``, since the macro body is not evaluated. Flashes of this macro then fall back to the
        aperture's nominal size, which for macro apertures is the tiny :py:data:`.DEFAULT_APERTURE_SIZE`. Their bounds
        are a placeholder until the aperture is given a macro object that can compute real ones, so spatial queries
        and image bounding boxes do not see the full extent of macro pads. """
        return None


@dataclass
class ApertureDefinition:
    """ One entry of the aperture table.

    ``size`` is the ``(width, height)`` of the aperture's bounding box in :py:attr:`unit` units. For circles and regular
    polygons this is the outer diameter in both axes.
    """
    number : int
    shape : ApertureShape = ApertureShape.CIRCLE
    size : tuple = DEFAULT_APERTURE_SIZE
    _ : KW_ONLY
    unit : object = MM
    hole_dia : float = None
    vertices : int = None
    rotation : float = 0
    macro : object = None
    params : tuple = ()
    attrs : dict = field(default_factory=dict)
    #: Set by the command dispatcher once a tool select refers to this aperture.
    in_use : bool = False

    @classmethod
    def from_modifiers(kls, number, shape, modifiers, unit=MM, macro=None, attrs=None):
        """ Build an aperture from the comma/X separated modifier list of an ``%ADD`` statement. """
        attrs = dict(attrs or {})
        if shape == ApertureShape.CIRCLE:
            dia, hole, *_rest = *modifiers, None, None
            return kls(number, shape, (dia, dia), unit=unit, hole_dia=hole, attrs=attrs)

        elif shape in (ApertureShape.RECTANGLE, ApertureShape.OVAL):
            w, h, hole, *_rest = *modifiers, None, None, None
            return kls(number, shape, (w, h), unit=unit, hole_dia=hole, attrs=attrs)

        elif shape == ApertureShape.POLYGON:
            dia, n, rotation, hole, *_rest = *modifiers, None, None, None, None
            return kls(number, shape, (dia, dia), unit=unit, vertices=int(n) if n else None,
                       rotation=rotation or 0, hole_dia=hole, attrs=attrs)

        else:
            # placeholder size, see ApertureMacro.bounding_box
            return kls(number, ApertureShape.MACRO, DEFAULT_APERTURE_SIZE, unit=unit, macro=macro,
                       params=tuple(modifiers), attrs=attrs)

    def size_in(self, unit=MM):
        """ :py:attr:`size` converted into ``unit``. """
        w, h = self.size
        return self.unit.convert_to(unit, w), self.unit.convert_to(unit, h)

    def macro_bounding_box(self, x, y, unit=MM):
        """ Bounding box of a flash of this aperture at ``(x, y)`` as computed by its macro, or ``None`` when there is
        no macro or the macro cannot tell. """
        if self.macro is None or not hasattr(self.macro, 'bounding_box'):
            return None

        bounds = self.macro.bounding_box(self.unit(x, unit), self.unit(y, unit), self.params)
        return self.unit.convert_bounds_to(unit, bounds)

    def __str__(self):
        w, h = self.size
        if self.shape == ApertureShape.MACRO:
            name = getattr(self.macro, 'name', '?')
            return f'<D{self.number} macro {name}>'
        return f'<D{self.number} {self.shape.name.lower()} {w:.4}x{h:.4} [{self.unit}]>'


class ApertureTable:
    """ Maps D code numbers to :py:class:`.ApertureDefinition` instances. Lookups of undefined numbers return
    ``None`` instead of raising so the interpreter can fall back to a default pen. """

    def __init__(self, apertures=None):
        self._apertures = {}
        for ap in apertures or []:
            self.define(ap)

    def define(self, aperture):
        self._apertures[aperture.number] = aperture
        return aperture

    def get(self, number):
        return self._apertures.get(number)

    def __getitem__(self, number):
        return self._apertures[number]

    def __contains__(self, number):
        return number in self._apertures

    def __iter__(self):
        return iter(self._apertures.values())

    def __len__(self):
        return len(self._apertures)

    def in_use(self):
        """ Iterate over all apertures that were selected at least once. """
        return (ap for ap in self if ap.in_use)
