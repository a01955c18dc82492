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

import pytest

from ..outline import Outline


def test_straight_outline():
    outline = Outline()
    assert not outline
    assert outline.first is None

    outline.begin((0, 0))
    outline.append_vertex((10, 0))
    outline.append_vertex((10, 10))
    assert not outline.is_closed

    outline.close()
    assert outline.is_closed
    assert outline == [(0, 0), (10, 0), (10, 10), (0, 0)]
    assert outline.first == outline.last == (0, 0)
    assert len(outline) == 4


def test_close_empty_outline():
    outline = Outline()
    outline.close()
    assert len(outline) == 0
    assert not outline.is_closed


def test_begin_discards_previous_contour():
    outline = Outline([(1, 1), (2, 2)])
    outline.begin()
    assert outline == []


def test_arc_skips_coinciding_first_vertex():
    outline = Outline()
    outline.begin((10, 0))
    outline.append_arc((10, 0), (0, 10), (-10, 0), clockwise=False, multi_quadrant=True)

    assert outline.first == (10, 0)
    assert outline[1] != (10, 0)
    assert outline.last == (0, 10)
    # a quarter circle contributes nine more points after its start point
    assert len(outline) == 10
    for point in outline:
        assert math.isclose(math.dist(point, (0, 0)), 10)


def test_arc_into_empty_outline():
    outline = Outline()
    outline.append_arc((10, 0), (0, 10), (-10, 0), clockwise=False, multi_quadrant=True)
    assert len(outline) == 10
    assert outline.first == (10, 0)


def test_coarse_outline():
    outline = Outline(steps_per_turn=4)
    outline.append_arc((10, 0), (0, 10), (-10, 0), clockwise=False, multi_quadrant=True)
    assert outline == [(10, 0), (0, 10)]


def test_offset():
    outline = Outline([(0, 0), (1, 0), (0, 0)])
    outline.offset(5, -1)
    assert outline == [(5, -1), (6, -1), (5, -1)]
    assert outline.is_closed
