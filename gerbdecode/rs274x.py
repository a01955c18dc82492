#! /usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2013-2014 Paulo Henrique Silva <ph.silva@gmail.com>
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
""" This module reads Gerber files (RS-274D and RS-274X) into lists of draw items.
"""

import re
import warnings
from collections import defaultdict
from pathlib import Path

from .cam import FileSettings
from .utils import MM, Inch, UnknownStatementWarning
from .apertures import ApertureTable, ApertureDefinition, ApertureMacro, ApertureShape, FIRST_DCODE, \
        TOOLS_MAX_COUNT, DEFAULT_APERTURE_SIZE
from .attributes import AttributeExecutor
from .state import InterpreterState
from .step_repeat import StepAndRepeat
from .rs274d import CommandDispatcher
from .draw_items import items_bounding_box


class GerberImage:
    """ The decoded contents of a single Gerber file.

    :ivar items: List of :py:class:`.DrawItem` instances in file order. Step-and-repeat copies follow the item they
                 were copied from.
    :ivar messages: List of strings with diagnostic messages produced while reading the file.
    :ivar apertures: :py:class:`.ApertureTable` with all apertures defined in the file.
    :ivar file_attrs: Dict of Gerber X2 file attributes. Values are tuples of strings.
    :ivar import_settings: :py:class:`.FileSettings` the file was read with.
    """

    def __init__(self, items=None, messages=None, apertures=None, file_attrs=None, import_settings=None,
                 original_path=None):
        self.items = items if items is not None else []
        self.messages = messages if messages is not None else []
        self.apertures = apertures if apertures is not None else ApertureTable()
        self.file_attrs = file_attrs or {}
        self.import_settings = import_settings
        self.original_path = original_path
        self.image_name = None
        self.layer_name = None
        self.image_polarity = 'positive'

    @classmethod
    def open(kls, filename, override_settings=None, strict=False):
        """ Load a Gerber file from the file system.

        :param filename: str or :py:class:`pathlib.Path`
        :param override_settings: :py:class:`.FileSettings` to use instead of what the file says. Fields set to
                                  ``None`` are still taken from the file.
        :param bool strict: Raise :py:obj:`SyntaxError` on the first command that fails instead of skipping it.

        :rtype: :py:class:`.GerberImage`
        """
        filename = Path(filename)
        with open(filename, "r") as f:
            return kls.from_string(f.read(), filename=filename, override_settings=override_settings, strict=strict)

    @classmethod
    def from_string(kls, data, filename=None, override_settings=None, strict=False):
        """ Parse given string as Gerber file content. For the meaning of the parameters, see
        :py:meth:`~.GerberImage.open`. """
        obj = kls()
        parser = GerberParser(obj, override_settings=override_settings, strict=strict)
        parser.parse(data, filename=filename)
        return obj

    def bounding_box(self, unit=MM, default=None):
        """ Bounding box of all items as ``((min_x, min_y), (max_x, max_y))``, or ``default`` for an empty image. """
        bounds = items_bounding_box(self.items)
        if bounds is None:
            return default
        return MM.convert_bounds_to(unit, bounds)

    def nets(self):
        """ Map of net name to the list of items on that net. Items without a net are left out. """
        nets = defaultdict(list)
        for item in self.items:
            if (name := item.net_name) is not None:
                nets[name].append(item)
        return dict(nets)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __str__(self):
        name = f'{self.original_path.name} ' if self.original_path else ''
        return f'<GerberImage {name}with {len(self.apertures)} apertures, {len(self.items)} items>'


class GerberParser:
    """ Reads the statements of a Gerber file and feeds them to a :py:class:`.CommandDispatcher`.

    Extended (``%...%``) statements are handled here, each by the ``_parse_<name>`` method belonging to the first
    matching entry of :py:attr:`STATEMENT_REGEXES`. Plain word blocks such as ``G01X100Y200D01*`` are split into words.
    G codes are executed in order. Coordinates are collected and applied before the block's D code runs.
    """

    NUMBER = r"[\+-]?\d+"
    DECIMAL = r"[\+-]?\d+([.]?\d+)?"
    NAME = r"[a-zA-Z_$\.][a-zA-Z_$\.0-9+\-]+"

    STATEMENT_REGEXES = {
        'unit_mode': r"MO(?P<unit>(MM|IN))$",
        'format_spec': r"FS(?P<zero>(L|T|D))?(?P<notation>(A|I))[NG0-9]*X(?P<x>[0-7][0-7])Y(?P<y>[0-7][0-7])[DM0-9]*$",
        'load_polarity': r"LP(?P<polarity>(D|C))$",
        'load_name': r"LN(?P<name>.*)",
        'image_name': r"IN(?P<name>.*)",
        'image_polarity': r"IP(?P<polarity>(POS|NEG))$",
        'aperture_definition': fr"ADD(?P<number>\d+)(?P<shape>C|R|O|P|{NAME})(,(?P<modifiers>[^,%]*))?$",
        'aperture_macro': fr"AM(?P<name>{NAME})\*(?P<macro>[^%]*)",
        'step_repeat': fr'SR(?P<coords>X(?P<X>[0-9]+)Y(?P<Y>[0-9]+)I(?P<I>{DECIMAL})J(?P<J>{DECIMAL}))?$',
        'attribute': r"(?P<type>TF|TA|TO|TD)",
        }

    WORD_REGEX = re.compile(r'\s*(?P<letter>[A-Z])(?P<value>[\+-]?[0-9.]*)')

    def __init__(self, target, override_settings=None, strict=False):
        self.target = target
        self.strict = strict
        self.file_settings = override_settings.copy() if override_settings else FileSettings()
        self.override_unit = self.file_settings.unit
        self.state = InterpreterState(unit=self.file_settings.unit or MM)
        self.state.relative = self.file_settings.is_incremental
        self.step_repeat = StepAndRepeat(target.items)
        self.attributes = AttributeExecutor(self.state, file_attrs=target.file_attrs, warn=self._report)
        self.dispatcher = CommandDispatcher(self.state, target.items, target.apertures,
                step_repeat=self.step_repeat,
                execute_metadata=self._execute_metadata,
                messages=target.messages,
                warn=self.warn)
        self.macros = {}
        self.eof_found = False
        self.implicit_op_warned = False
        self.filename = None
        self.line = None
        self.lineno = 0

    def _shorten_line(self):
        line_joined = self.line.replace('\r', '').replace('\n', '\\n')
        if len(line_joined) > 80:
            return f'{line_joined[:20]}[...]{line_joined[-20:]}'
        else:
            return line_joined

    def warn(self, msg, kls=SyntaxWarning):
        warnings.warn(f'{self.filename}:{self.lineno} "{self._shorten_line()}": {msg}', kls)

    def _report(self, msg, kls=SyntaxWarning):
        self.target.messages.append(msg)
        self.warn(msg, kls)

    def _split_commands(self, data):
        """ Yield ``(extended, statement)`` tuples. ``extended`` is ``True`` for ``%...%`` blocks. """
        # Ignore '%' signs within G04 commments because eagle likes to put completely broken file attributes inside G04
        # comments, and those contain % signs. Best of all, they're not even balanced.
        self.lineno = 1
        for match in re.finditer(r'G04.*?\*\s*|%.*?%\s*|[^*%]*\*\s*', data, re.DOTALL):
            cmd = match[0]
            newlines = cmd.count('\n')
            cmd = cmd.strip()
            extended = cmd.startswith('%')
            cmd = cmd.strip('%').strip().rstrip('*')
            if cmd:
                # Expensive, but only used in case something goes wrong.
                self.line = cmd
                yield extended, cmd
            self.lineno += newlines
        self.lineno = 0
        self.line = ''

    def parse(self, data, filename=None):
        # filename arg is for error messages
        self.filename = str(filename or '<unknown>')

        regex_cache = [ (re.compile(exp), getattr(self, f'_parse_{name}')) for name, exp in self.STATEMENT_REGEXES.items() ]

        for extended, line in self._split_commands(data):
            try:
                if extended:
                    self._parse_extended(line, regex_cache)
                else:
                    self._parse_word_block(line)
            except ValueError as e:
                if self.strict:
                    raise SyntaxError(f'{self.filename}:{self.lineno} "{self._shorten_line()}": {e}') from e
                self._report(f'{e}, ignoring.')

        self.dispatcher.end_of_image()

        self.target.import_settings = self.file_settings
        self.target.file_attrs = self.attributes.file_attrs
        if filename is not None:
            self.target.original_path = Path(filename)

        if not self.eof_found:
            self._report('File is missing mandatory M02 EOF marker. File may be truncated.')

    def _parse_extended(self, line, regex_cache):
        # Aperture macros span several "*"-terminated lines, everything else is one statement per "*".
        statements = [line] if line.startswith('AM') else [ stmt.strip() for stmt in line.split('*') ]

        for stmt in statements:
            if not stmt:
                continue

            for le_regex, fun in regex_cache:
                if (match := le_regex.match(stmt)):
                    fun(match)
                    break

            else:
                self._report(f'Unknown statement found: "{self._shorten_line()}", ignoring.', UnknownStatementWarning)

    def _parse_word_block(self, block):
        coords = {}
        d_code = None
        pos = 0

        while pos < len(block):
            if not (match := self.WORD_REGEX.match(block, pos)):
                if block[pos:].strip():
                    self._report(f'Unknown statement found: "{self._shorten_line()}", ignoring.',
                                 UnknownStatementWarning)
                break

            letter, value = match['letter'], match['value']
            pos = match.end()

            if letter in 'GDM' and not value.isdigit():
                raise ValueError(f'Malformed {letter} code "{letter}{value}"')

            if letter == 'G':
                ok = self.dispatcher.execute_g_command(int(value), block[pos:])
                pos += self.dispatcher.consumed
                if not ok:
                    self._command_failed(f'G{value}')

            elif letter == 'D':
                d_code = int(value)

            elif letter == 'M':
                self._execute_m_code(int(value))

            elif letter in 'XYIJ':
                coords[letter] = self._decode(value)

            else:
                self._report(f'Unknown word "{letter}{value}" found, ignoring.', UnknownStatementWarning)

        self._apply_coords(coords)

        if d_code is None and coords:
            if self.state.last_pen_command is None:
                # A bare coordinate block before any pen command is a move.
                self.state.advance()
                return

            if not self.implicit_op_warned:
                self.warn('Coordinate statement without explicit operation code. Repeating the last operation, this '
                          'warning is only shown once.')
                self.implicit_op_warned = True
            d_code = self.state.last_pen_command

        if d_code is not None:
            if not self.dispatcher.execute_d_command(d_code):
                self._command_failed(f'D{d_code:02d}')

    def _decode(self, value):
        """ Parse a coordinate word value and convert it into millimeter, using the unit active right now. """
        value = self.file_settings.parse_gerber_value(value)
        return MM(value, self.state.unit)

    def _apply_coords(self, coords):
        if 'X' in coords or 'Y' in coords:
            self.state.update_point(coords.get('X'), coords.get('Y'))

        if 'I' in coords or 'J' in coords:
            self.state.set_rel_center(coords.get('I'), coords.get('J'))

    def _command_failed(self, command):
        err = self.dispatcher.last_error
        if err is not None:
            self._report(f'{command} command failed: {err}')

        if self.strict:
            raise SyntaxError(f'{self.filename}:{self.lineno} "{self._shorten_line()}": {err or f"{command} failed"}')

    def _execute_m_code(self, code):
        if code in (0, 2):
            self.eof_found = True
        elif code == 1:
            pass # optional stop
        else:
            self._report(f'M{code:02d} command not handled, ignoring.', UnknownStatementWarning)

    def _execute_metadata(self, command_id, command):
        if command_id in self.attributes.handlers:
            self.attributes.execute(command)
        else:
            self._report(f'Unknown metadata command "{command}" in structured comment, ignoring.',
                         UnknownStatementWarning)

    def _parse_format_spec(self, match):
        if self.file_settings.zeros is not None:
            self.warn('Re-definition of zero suppression setting. Ignoring.')
        else:
            # This is a common problem in Eagle files, so just suppress it
            self.file_settings.zeros = {'L': 'leading', 'T': 'trailing'}.get(match['zero'], 'leading')

        self.file_settings.notation = 'incremental' if match['notation'] == 'I' else 'absolute'
        self.state.relative = self.file_settings.is_incremental

        if match['x'] != match['y']:
            raise ValueError(f'FS specifies different coordinate formats for X and Y ({match["x"]} != {match["y"]})')

        if self.file_settings.number_format != (None, None):
            self.warn('Re-definition of number format setting. Ignoring.')
        else:
            self.file_settings.number_format = int(match['x'][0]), int(match['x'][1])

    def _parse_unit_mode(self, match):
        if self.override_unit is not None:
            self.warn('File unit is overridden by settings. Ignoring MO statement.')
            return

        unit = MM if match['unit'] == 'MM' else Inch
        if self.file_settings.unit is None:
            self.file_settings.unit = unit
        self.state.unit = unit

    def _parse_load_polarity(self, match):
        self.state.polarity_dark = match['polarity'] == 'D'

    def _parse_load_name(self, match):
        self.warn('Deprecated LN (load name) statement found. This deprecated since rev. I4 (Oct 2013).', DeprecationWarning)
        self.target.layer_name = match['name']

    def _parse_image_name(self, match):
        self.warn('Deprecated IN (image name) statement found. This deprecated since rev. I4 (Oct 2013).', DeprecationWarning)
        self.target.image_name = match['name']

    def _parse_image_polarity(self, match):
        polarity = dict(POS='positive', NEG='negative')[match['polarity']]
        if polarity != 'positive':
            self.warn('Deprecated IP (image polarity) statement found. This deprecated since rev. I4 (Oct 2013).', DeprecationWarning)
        self.target.image_polarity = polarity

    def _parse_aperture_definition(self, match):
        # number, shape, modifiers
        modifiers = [ float(val) for val in match['modifiers'].strip(' ,').split('X') ] if match['modifiers'] else []
        number = int(match['number'])
        if number < FIRST_DCODE:
            raise ValueError(f'Invalid aperture number {number}: Aperture number must be >= {FIRST_DCODE}.')
        number = min(number, TOOLS_MAX_COUNT - 1)

        unit = self.state.unit
        attrs = self.attributes.aperture_attrs
        if match['shape'] in ('C', 'R', 'O', 'P'):
            shape = ApertureShape(match['shape'])
            macro = None
        else:
            shape = ApertureShape.MACRO
            if (macro := self.macros.get(match['shape'])) is None:
                self._report(f'Aperture D{number} uses undefined aperture macro "{match["shape"]}".')
                macro = ApertureMacro(match['shape'])

        aperture = ApertureDefinition.from_modifiers(number, shape, modifiers, unit=unit, macro=macro, attrs=attrs)

        if None in aperture.size:
            self.warn(f'Aperture D{number} definition is missing its size, using default size.')
            aperture.size = tuple(unit(default, MM) if value is None else value
                                  for value, default in zip(aperture.size, DEFAULT_APERTURE_SIZE))

        if number in self.target.apertures:
            self.warn(f'Re-definition of aperture D{number}.')
        self.target.apertures.define(aperture)

    def _parse_aperture_macro(self, match):
        self.macros[match['name']] = ApertureMacro(match['name'], match['macro'].strip())

    def _parse_step_repeat(self, match):
        if match['coords']:
            if self.step_repeat.active:
                self.warn('SR step-repeat called inside ongoing SR step-repeat')

            x, y = int(match['X']), int(match['Y'])
            i, j = MM(float(match['I']), self.state.unit), MM(float(match['J']), self.state.unit)
            self.step_repeat.set_grid(x, y, i, j)

        else:
            self.step_repeat.reset()

    def _parse_attribute(self, match):
        self.attributes.execute(match.string + '*%')
