#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023 Jan Sebastian Götte <gerbonara@jaseg.de>
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


import json

import pytest
from click.testing import CliRunner

from .. import cli
from .. import __version__


EXAMPLE = '''G04 example*
%FSLAX24Y24*%
%MOMM*%
%TF.FileFunction,Copper,L1,Top*%
%ADD10C,0.2*%
%ADD11R,1.0X0.5*%
%TO.N,GND*%
D10*
X0Y0D02*
X100000Y0D01*
%TD*%
G04 #@! TO.N,VCC*
D11*
X50000Y50000D03*
%TD*%
G36*
X0Y0D02*
X10000Y0D01*
X10000Y10000D01*
G37*
M02*
'''


@pytest.fixture()
def example_file(gerber_file):
    return gerber_file(EXAMPLE, 'example.gbr')


def invoke(command, *args):
    runner = CliRunner()
    res = runner.invoke(command, list(map(str, args)))
    if res.exception and not isinstance(res.exception, SystemExit):
        raise res.exception
    return res


def test_version():
    res = invoke(cli.cli, '--version')
    assert res.exit_code == 0
    assert res.output.startswith('Version ')
    assert __version__ in res.output


class TestItems:
    def test_text(self, example_file):
        res = invoke(cli.cli, 'items', '--warnings=ignore', example_file)
        assert res.exit_code == 0
        lines = res.output.strip().splitlines()
        assert len(lines) == 3
        assert lines[0] == '<Line 0.0000,0.0000 -> 10.0000,0.0000 D10>'
        assert lines[1].startswith('<Flash rectangle at 5.0000,5.0000')
        assert lines[2].startswith('<Region')

    def test_json(self, example_file):
        res = invoke(cli.cli, 'items', '--warnings=ignore', '--format=json', example_file)
        assert res.exit_code == 0
        data = json.loads(res.output)
        assert data['unit'] == 'mm'
        assert data['messages'] == []

        line, flash, region = data['items']
        assert line['type'] == 'line'
        assert line['net'] == 'GND'
        assert line['end'] == [10, 0]
        assert flash['shape'] == 'rectangle'
        assert flash['net'] == 'VCC'
        assert region['type'] == 'region'
        assert region['points'][0] == region['points'][-1]
        assert 'net' not in region

    def test_json_units(self, example_file):
        res = invoke(cli.cli, 'items', '--warnings=ignore', '--format=json', '--units=us-customary', example_file)
        data = json.loads(res.output)
        assert data['unit'] == 'in'
        assert data['items'][1]['start'] == pytest.approx([5/25.4, 5/25.4])

    def test_at(self, example_file):
        res = invoke(cli.cli, 'items', '--warnings=ignore', '--at', '5', '5', example_file)
        assert res.exit_code == 0
        assert res.output.strip().startswith('<Flash')
        assert len(res.output.strip().splitlines()) == 1

    def test_input_override(self, gerber_file):
        path = gerber_file('%ADD10C,0.1*%\nD10*\nX10000Y0D03*\nM02*\n')
        res = invoke(cli.cli, 'items', '--warnings=ignore', '--input-number-format=2.3', '--input-units=metric',
                     '--input-zero-suppression=leading', path)
        assert res.exit_code == 0
        assert '10.0000,0.0000' in res.output

    def test_warnings(self, gerber_file):
        path = gerber_file('%ADD10C,0.1*%\nD10*\nX0Y0D03*\n')
        with pytest.warns(SyntaxWarning):
            invoke(cli.cli, 'items', '--warnings=once', path)

    def test_strict(self, gerber_file):
        path = gerber_file('%ADD10C,0.1*%\nD10*\nX0Y0D04*\nM02*\n')
        res = invoke(cli.cli, 'items', '--warnings=ignore', '--strict', path)
        assert res.exit_code == 1
        assert 'D04' in res.output

        res = invoke(cli.cli, 'items', '--warnings=ignore', path)
        assert res.exit_code == 0


def test_nets(example_file):
    res = invoke(cli.cli, 'nets', '--warnings=ignore', example_file)
    assert res.exit_code == 0
    assert res.output.strip().splitlines() == ['GND: 1 items', 'VCC: 1 items']

    res = invoke(cli.cli, 'nets', '--warnings=ignore', '--format=json', example_file)
    assert json.loads(res.output) == {'GND': 1, 'VCC': 1}


def test_bounding_box(example_file):
    res = invoke(cli.cli, 'bounding-box', '--warnings=ignore', example_file)
    assert res.exit_code == 0
    assert res.output.strip() == '-0.100000 -0.100000 10.100000 5.250000 [mm]'


def test_missing_file(tmp_path):
    res = invoke(cli.cli, 'items', tmp_path / 'nope.gbr')
    assert res.exit_code == 2
