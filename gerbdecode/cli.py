#! /usr/bin/env python
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
import sys
import warnings
from pathlib import Path

import click

from .utils import MM, Inch
from .cam import FileSettings
from .rs274x import GerberImage
from .index import ItemIndex
from . import draw_items as di
from . import __version__


def _showwarning(message, category, filename, lineno, file=None, line=None):
    if file is None:
        file = sys.stderr

    filename = Path(filename)
    gerbdecode_module_install_location = Path(__file__).parent.parent
    if filename.is_relative_to(gerbdecode_module_install_location):
        filename = filename.relative_to(gerbdecode_module_install_location)

    print(f'{filename}:{lineno}: {message}', file=file)
warnings.showwarning = _showwarning

def _print_version(ctx, param, value):
    if value and not ctx.resilient_parsing:
        click.echo(f'Version {__version__}')
        ctx.exit()


class Unit(click.Choice):
    name = 'unit'

    def __init__(self):
        super().__init__(['metric', 'us-customary'])

    def convert(self, value, param, ctx):
        value = super().convert(value, param, ctx)
        return MM if value == 'metric' else Inch


def _input_options(fun):
    """ Options shared by all commands that read a Gerber file. """
    fun = click.argument('infile', type=click.Path(exists=True, dir_okay=False, path_type=Path))(fun)
    fun = click.option('--strict', is_flag=True, help='Abort on the first command that fails instead of skipping it')(fun)
    fun = click.option('--input-zero-suppression', type=click.Choice(['off', 'leading', 'trailing']), help='Override zero suppression setting of input file')(fun)
    fun = click.option('--input-units', type=Unit(), help='Override units of input file')(fun)
    fun = click.option('--input-number-format', help='Override number format of input file, e.g. "2.4"')(fun)
    fun = click.option('--warnings', 'format_warnings', type=click.Choice(['default', 'ignore', 'once']), default='default',
              help='''Enable or disable file format warnings during parsing (default: on)''')(fun)
    return fun


def _load(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict):
    input_settings = FileSettings()
    if input_number_format:
        a, _, b = input_number_format.partition('.')
        input_settings.number_format = (int(a), int(b))

    if input_zero_suppression:
        input_settings.zeros = None if input_zero_suppression == 'off' else input_zero_suppression

    input_settings.unit = input_units

    with warnings.catch_warnings():
        warnings.simplefilter(format_warnings)
        try:
            return GerberImage.open(infile, override_settings=input_settings, strict=strict)
        except SyntaxError as e:
            raise click.ClickException(str(e))


def _item_dict(item, unit=MM):
    """ JSON-friendly description of a draw item, with lengths in ``unit``. """
    def conv(*values):
        return [ round(unit(value, MM), 9) for value in values ]

    out = {
        'type': type(item).__name__.lower(),
        'dcode': item.dcode,
        'polarity': 'dark' if item.polarity_dark else 'clear',
        'size': conv(*item.size),
        'start': conv(*item.start) if item.start else None,
        'end': conv(*item.end) if item.end else None,
        }

    if isinstance(item, di.Arc):
        out['center'] = conv(*item.center)
        out['clockwise'] = item.clockwise

    elif isinstance(item, di.Flash):
        out['shape'] = item.shape.name.lower()

    elif isinstance(item, di.Region):
        out['points'] = [ conv(*point) for point in item.points ]
        if item.aperture_function:
            out['aperture_function'] = list(item.aperture_function)

    if item.net_name is not None:
        out['net'] = item.net_name
    if item.attrs:
        out['attrs'] = { key: list(value) for key, value in item.attrs.items() }
    return out


@click.group()
@click.option('--version', is_flag=True, callback=_print_version, expose_value=False, is_eager=True)
def cli():
    """ The gerbdecode CLI reads RS-274D and RS-274X Gerber files and prints the lines, arcs, flashes and regions they
    draw. """
    pass


@cli.command()
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text', help='Output format')
@click.option('--units', type=Unit(), default='metric', help='Output coordinates in this unit (default: millimeter)')
@click.option('--at', 'at_point', nargs=2, type=float, help='Only list items whose bounding box contains this point')
@_input_options
def items(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict, output_format,
          units, at_point):
    """ List all draw items of a Gerber file in file order. """
    image = _load(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict)

    selected = image.items
    if at_point:
        x, y = (MM(value, units) for value in at_point)
        selected = ItemIndex.from_image(image).at(x, y)

    if output_format == 'json':
        click.echo(json.dumps({
            'unit': str(units),
            'items': [ _item_dict(item, units) for item in selected ],
            'messages': image.messages,
            }, indent=2))

    else:
        for item in selected:
            click.echo(str(item))


@cli.command()
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text', help='Output format')
@_input_options
def nets(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict, output_format):
    """ Print the net names found in ``.N`` object attributes, with the number of items on each net. """
    image = _load(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict)
    net_items = image.nets()

    if output_format == 'json':
        click.echo(json.dumps({ name: len(items) for name, items in sorted(net_items.items()) }, indent=2))

    else:
        for name, items in sorted(net_items.items()):
            click.echo(f'{name}: {len(items)} items')


@cli.command()
@click.option('--units', type=Unit(), default='metric', help='Output bounding box in this unit (default: millimeter)')
@_input_options
def bounding_box(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict, units):
    """ Print the bounding box of a gerber file in "[x_min] [y_min] [x_max] [y_max]" format. The bounding box contains
    all draw items in this file, including the width of strokes.
    """
    image = _load(infile, format_warnings, input_number_format, input_units, input_zero_suppression, strict)

    (x_min, y_min), (x_max, y_max) = image.bounding_box(unit=units, default=((0, 0), (0, 0)))
    click.echo(f'{x_min:.6f} {y_min:.6f} {x_max:.6f} {y_max:.6f} [{units}]')


if __name__ == '__main__':
    cli()
