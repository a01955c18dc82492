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

from ..rs274x import GerberImage
from ..cam import FileSettings
from ..utils import MM, Inch, UnknownStatementWarning, UnknownCommandWarning
from ..apertures import ApertureShape, DEFAULT_APERTURE_SIZE
from ..draw_items import Line, Arc, Flash, Region, SpotShape


HEADER = '''G04 test file*
%FSLAX24Y24*%
%MOMM*%
%ADD10C,0.2*%
%ADD11R,1.0X0.5*%
'''


def parse(body, header=HEADER, **kwargs):
    return GerberImage.from_string(header + body, **kwargs)


def test_zero_suppression():
    settings = FileSettings(number_format=(2,5), zeros='leading')
    test_cases = [
        ("1", 0.00001),
        ("10", 0.0001),
        ("100000", 1.0),
        ("1000000", 10.0),
        ("-1000000", -10.0),
        ("0", 0.0),
        ("1.5", 1.5),
    ]
    for string, value in test_cases:
        assert math.isclose(settings.parse_gerber_value(string), value)

    settings = FileSettings(number_format=(2,5), zeros='trailing')
    test_cases = [
        ("1", 10.0),
        ("01", 1.0),
        ("001", 0.1),
        ("0000001", 0.00001),
        ("0", 0.0),
    ]
    for string, value in test_cases:
        assert math.isclose(settings.parse_gerber_value(string), value)

    assert settings.parse_gerber_value('') is None


def test_file_settings_validation():
    with pytest.raises(ValueError):
        FileSettings(unit='furlong')
    with pytest.raises(ValueError):
        FileSettings(notation='sideways')
    with pytest.raises(ValueError):
        FileSettings(number_format=(8, 8))
    assert FileSettings.defaults().is_metric


def test_simple_line():
    image = parse('D10*\nX0Y0D02*\nX100000Y0D01*\nM02*\n')

    assert image.messages == []
    line, = image.items
    assert isinstance(line, Line)
    assert line.start == (0, 0)
    assert line.end == pytest.approx((10, 0))
    assert line.size == (0.2, 0.2)
    assert line.dcode == 10
    assert image.import_settings.number_format == (2, 4)
    assert image.import_settings.zeros == 'leading'
    assert image.apertures[10].in_use
    assert not image.apertures[11].in_use


def test_one_line_statements():
    image = parse('G01X0Y0D02*G54D11*X10000Y20000D03*M02*')
    flash, = image.items
    assert isinstance(flash, Flash)
    assert (flash.x, flash.y) == pytest.approx((1, 2))
    assert flash.shape == SpotShape.RECTANGLE
    assert flash.size == (1.0, 0.5)


def test_rejected_g54_does_not_run_pen_command():
    with pytest.warns(SyntaxWarning, match='G54 command failed'):
        image = parse('D10*\nX0Y0D02*\nG54D01X100000Y0*\nM02*\n')

    assert image.items == []
    assert any('Invalid tool number D1' in msg for msg in image.messages)


def test_region():
    image = parse('G36*\nX0Y0D02*\nX100000Y0D01*\nX100000Y100000D01*\nX0Y100000D01*\nG37*\nM02*\n')
    region, = image.items
    assert isinstance(region, Region)
    assert region.outline == [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]


def test_arc():
    image = parse('D10*G75*G02*X0Y0D02*X100000Y0I50000J0D01*M02*')
    arc, = image.items
    assert isinstance(arc, Arc)
    assert arc.center == pytest.approx((5, 0))
    assert arc.clockwise


def test_unit_switch_keeps_existing_items():
    header = '%FSLAX24Y24*%\n%ADD10C,0.1*%\n'
    image = parse('D10*\nG71*\nX0Y0D02*\nX10000Y0D01*\nG70*\nX10000Y10000D01*\nM02*\n', header=header)

    first, second = image.items
    assert first.start == (0, 0)
    assert first.end == pytest.approx((1, 0))
    assert second.start == pytest.approx((1, 0))
    assert second.end == pytest.approx((25.4, 25.4))


def test_inch_file():
    header = '%MOIN*%\n%FSLAX24Y24*%\n%ADD10C,0.01*%\n'
    image = parse('D10*\nX10000Y0D03*\nM02*\n', header=header)
    flash, = image.items
    assert flash.x == pytest.approx(25.4)
    assert flash.size == pytest.approx((0.254, 0.254))
    assert image.import_settings.unit == Inch
    assert image.bounding_box(unit=Inch)[1][0] == pytest.approx(1.005)


def test_incremental_coordinates():
    header = '%FSLIX24Y24*%\n%MOMM*%\n%ADD10C,0.2*%\n'
    image = parse('D10*\nX10000Y10000D02*\nX10000D01*\nY10000D01*\nM02*\n', header=header)
    first, second = image.items
    assert first.start == pytest.approx((1, 1))
    assert first.end == pytest.approx((2, 1))
    assert second.end == pytest.approx((2, 2))


def test_implicit_operation_repeats_last_d_code():
    with pytest.warns(SyntaxWarning, match='without explicit operation code'):
        image = parse('D10*\nX0Y0D02*\nX10000Y0D01*\nX20000Y0*\nM02*\n')
    assert len(image.items) == 2
    assert image.items[1].end == pytest.approx((2, 0))


def test_structured_comment_and_nets():
    body = '''G04 #@! TO.N,GND*
D10*
X0Y0D02*
X10000Y0D01*
%TD*%
X20000Y0D01*
%TO.N,VCC*%
X30000Y0D01*
M02*
'''
    image = parse(body)
    first, second, third = image.items
    assert first.net_name == 'GND'
    assert second.net_name is None
    assert third.net_name == 'VCC'
    assert image.nets() == {'GND': [first], 'VCC': [third]}


def test_file_attributes():
    image = parse('%TF.FileFunction,Copper,L1,Top*%\nG04 #@! TF.Part,Single*\nM02*\n')
    assert image.file_attrs == {'.FileFunction': ('Copper', 'L1', 'Top'), '.Part': ('Single',)}


def test_aperture_function_on_region():
    body = '%TA.AperFunction,Conductor*%\nG36*\nX0Y0D02*\nX10000Y0D01*\nX0Y10000D01*\nG37*\nM02*\n'
    region, = parse(body).items
    assert region.aperture_function == ('Conductor',)


def test_aperture_definitions():
    header = HEADER + '%ADD12O,1X2*%\n%ADD13P,1.5X6X30*%\n%AMTHERMAL*\n7,0,0,1,0.8,0.1,45*%\n%ADD14THERMAL,1.2*%\n'
    image = parse('D14*\nX0Y0D03*\nM02*\n', header=header)

    assert image.apertures[12].shape == ApertureShape.OVAL
    assert image.apertures[12].size == (1, 2)
    assert image.apertures[13].vertices == 6
    assert image.apertures[13].rotation == 30
    assert image.apertures[14].shape == ApertureShape.MACRO
    assert image.apertures[14].macro.name == 'THERMAL'
    assert image.apertures[14].params == (1.2,)

    flash, = image.items
    assert flash.shape == SpotShape.MACRO
    assert flash.dcode == 14
    # macros are not evaluated, so the flash only covers the placeholder aperture size
    w, h = DEFAULT_APERTURE_SIZE
    assert flash.bounding_box() == ((-w/2, -h/2), (w/2, h/2))


def test_aperture_without_size():
    with pytest.warns(SyntaxWarning, match='missing its size'):
        image = parse('M02*\n', header=HEADER + '%ADD15C*%\n')
    assert image.apertures[15].size == DEFAULT_APERTURE_SIZE


def test_polarity():
    image = parse('D10*\n%LPC*%\nX0Y0D03*\n%LPD*%\nX10000Y0D03*\nM02*\n')
    clear, dark = image.items
    assert not clear.polarity_dark
    assert dark.polarity_dark


def test_step_repeat():
    image = parse('%SRX2Y1I5.0J0*%\nD10*\nX0Y0D03*\n%SR*%\nX0Y10000D03*\nM02*\n')
    assert [ (item.x, item.y) for item in image.items ] == [(0, 0), (5, 0), (0, 1)]


def test_deprecated_statements():
    with pytest.warns(DeprecationWarning):
        image = parse('%LNTOP*%\n%INBOARD*%\n%IPNEG*%\nM02*\n')
    assert image.layer_name == 'TOP'
    assert image.image_name == 'BOARD'
    assert image.image_polarity == 'negative'


def test_missing_eof():
    with pytest.warns(SyntaxWarning):
        image = parse('D10*\n')
    assert any('M02' in msg for msg in image.messages)


def test_open_region_at_eof():
    with pytest.warns(SyntaxWarning):
        image = parse('G36*\nX0Y0D02*\nX10000Y0D01*\nX0Y10000D01*\nM02*\n')
    region, = image.items
    assert region.outline.is_closed
    assert any('Region' in msg for msg in image.messages)


def test_unknown_statement():
    with pytest.warns(UnknownStatementWarning):
        image = parse('%XY123*%\nM02*\n')
    assert len(image.messages) == 1


def test_unknown_g_code_is_soft():
    with pytest.warns(UnknownCommandWarning):
        image = parse('G99*\nD10*\nX0Y0D03*\nM02*\n')
    assert len(image.items) == 1
    assert 'G99 command not handled' in image.messages


def test_unsupported_pen_command_is_soft():
    with pytest.warns(SyntaxWarning):
        image = parse('D10*\nX0Y0D04*\nX0Y0D03*\nM02*\n')
    assert len(image.items) == 1
    assert any('D04' in msg for msg in image.messages)


def test_strict_mode():
    with pytest.raises(SyntaxError):
        parse('G99*\nM02*\n', strict=True)

    with pytest.raises(SyntaxError):
        parse('D10*\nX0Y0D04*\nM02*\n', strict=True)

    with pytest.raises(SyntaxError):
        parse('%SRX0Y1I1J1*%\nM02*\n', strict=True)


def test_override_settings():
    settings = FileSettings(unit=Inch, number_format=(2, 3))
    header = '%FSLAX24Y24*%\n%MOMM*%\n%ADD10C,0.01*%\n'
    with pytest.warns(SyntaxWarning):
        image = parse('D10*\nX1000Y0D03*\nM02*\n', header=header, override_settings=settings)
    flash, = image.items
    assert flash.x == pytest.approx(25.4)
    # the caller's settings object is not modified
    assert settings.zeros is None


def test_open(tmp_path):
    path = tmp_path / 'board.gbr'
    path.write_text(HEADER + 'D10*\nX0Y0D03*\nM02*\n')
    image = GerberImage.open(path)
    assert len(image) == 1
    assert image.original_path == path
    assert 'board.gbr' in str(image)
