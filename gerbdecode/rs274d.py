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

"""
RS-274D command interpretation: G codes set modes, D codes move the pen, select tools and produce draw items.

Notes on the G codes found in RS-274D and RS-274X files, some of them long deprecated:

 * G01 linear interpolation, G02 clockwise arc, G03 counter-clockwise arc
 * G04 comment. Since 2014, ``G04 #@! `` comments may carry X2 attributes ("structured comments").
 * G36 / G37 start and end a region ("polygon fill")
 * G54 tool select prefix (``G54D10``), G55 flash prefix. Both are redundant today.
 * G70 / G71 units inch / millimeter
 * G74 single-quadrant arcs, G75 360 degree arcs
 * G90 / G91 absolute / incremental coordinates

D01 draws (pen down), D02 moves (pen up), D03 flashes. D10 and up select a tool.
"""

import re
import warnings
from enum import IntEnum

from .utils import InterpMode, MM, Inch, UnknownCommandWarning, InvalidToolSelect, UnsupportedPenCommand, CommandError
from .apertures import ApertureShape, FIRST_DCODE, TOOLS_MAX_COUNT, DEFAULT_APERTURE_SIZE
from .arcs import resolve_arc_center
from .attributes import command_id
from . import draw_items as di


class GCode(IntEnum):
    LINEAR = 1
    CIRCULAR_CW = 2
    CIRCULAR_CCW = 3
    COMMENT = 4
    REGION_START = 36
    REGION_END = 37
    SELECT_TOOL = 54
    PHOTO_MODE = 55
    INCHES = 70
    MILLIMETERS = 71
    SINGLE_QUADRANT = 74
    MULTI_QUADRANT = 75
    ABSOLUTE = 90
    RELATIVE = 91


STRUCTURED_COMMENT_MARKER = ' #@! '


class CommandDispatcher:
    """ The Gerber command state machine.

    Every call to :py:meth:`execute_g_command` or :py:meth:`execute_d_command` handles exactly one command. The
    dispatcher reads and updates ``state`` (an :py:class:`.InterpreterState`) and appends finished items to ``items``.

    Collaborators:

    :param apertures: :py:class:`.ApertureTable` used to look up tools.
    :param step_repeat: callable that is handed every finished item, usually a :py:class:`.StepAndRepeat`.
    :param execute_metadata: callable ``(command_id, command)`` receiving metadata commands from structured comments.
    :param messages: list that diagnostic messages are appended to.
    :param warn: callable ``(message, category)`` used to emit warnings. Defaults to :py:func:`warnings.warn`.

    Both execute methods return ``True`` on success. A failed command never changes the state. Unknown G codes are
    reported right away. For other failures, the reason is left in :py:attr:`last_error` for the caller to report.
    """

    def __init__(self, state, items, apertures, step_repeat=None, execute_metadata=None, messages=None, warn=None):
        self.state = state
        self.items = items
        self.apertures = apertures
        self.step_repeat = step_repeat
        self.execute_metadata = execute_metadata
        self.messages = [] if messages is None else messages
        self.warn = warn or (lambda msg, kls=SyntaxWarning: warnings.warn(msg, kls))
        #: Region currently being built between G36 and G37, if exposure is on.
        self.current_region = None
        #: :py:class:`.CommandError` describing why the last command failed, or ``None``.
        self.last_error = None
        #: Number of characters of the ``text`` argument the last command consumed.
        self.consumed = 0

        self._g_handlers = {
                GCode.PHOTO_MODE: self._g_noop,
                GCode.LINEAR: self._g_interpolation(InterpMode.LINEAR),
                GCode.CIRCULAR_CW: self._g_interpolation(InterpMode.CIRCULAR_CW),
                GCode.CIRCULAR_CCW: self._g_interpolation(InterpMode.CIRCULAR_CCW),
                GCode.COMMENT: self._g_comment,
                GCode.SELECT_TOOL: self._g_select_tool,
                GCode.INCHES: self._g_units,
                GCode.MILLIMETERS: self._g_units,
                GCode.SINGLE_QUADRANT: self._g_single_quadrant,
                GCode.MULTI_QUADRANT: self._g_multi_quadrant,
                GCode.ABSOLUTE: self._g_notation,
                GCode.RELATIVE: self._g_notation,
                GCode.REGION_START: self._g_region_start,
                GCode.REGION_END: self._g_region_end,
                }

    def add_message(self, msg, kls=SyntaxWarning):
        self.messages.append(msg)
        self.warn(msg, kls)

    def execute_g_command(self, code, text=''):
        """ Execute G code ``code``. ``text`` is the rest of the current line after the code. """
        self.consumed = 0
        self.last_error = None

        if (handler := self._g_handlers.get(code)) is None:
            self.add_message(f'G{code:02d} command not handled', UnknownCommandWarning)
            return False

        try:
            handler(code, text)
        except CommandError as e:
            self.last_error = e
            return False
        return True

    def execute_d_command(self, code, text=''):
        """ Execute D code ``code``: a tool select for ``code >= 10``, a pen command otherwise. """
        self.consumed = 0
        self.last_error = None

        try:
            if code >= FIRST_DCODE:
                self.select_tool(code)
            elif self.state.polygon_fill:
                self._region_pen_command(code)
            else:
                self._stroke_pen_command(code)
        except CommandError as e:
            self.last_error = e
            return False
        return True

    def select_tool(self, number):
        if number < FIRST_DCODE:
            raise InvalidToolSelect(f'Invalid tool number D{number}: tool numbers must be >= {FIRST_DCODE}.')

        number = min(number, TOOLS_MAX_COUNT - 1)
        self.state.current_tool = number
        if (aperture := self.apertures.get(number)) is not None:
            aperture.in_use = True

    def end_of_image(self):
        """ Called once after the last command of an image. A region that is still open at this point is closed with a
        warning instead of being dropped. """
        if self.state.polygon_fill and self.state.exposure and self.current_region is not None:
            self.add_message('Region still open at end of file, closing it.')
            self._close_region()
        self.state.polygon_fill = False
        self.state.exposure = False

    # G codes

    def _g_noop(self, code, text):
        pass

    def _g_interpolation(self, mode):
        def handler(code, text):
            self.state.interpolation_mode = mode
        return handler

    def _g_comment(self, code, text):
        # A comment starting with "G04 #@! " is a structured comment carrying an X2 command. The X2 command is what
        # follows the marker, but it lacks the "*%" terminator of a regular extended command, so we add it back.
        if text.startswith(STRUCTURED_COMMENT_MARKER):
            body, _, _rest = text[len(STRUCTURED_COMMENT_MARKER):].partition('*')
            command = body + '*%'
            if self.execute_metadata is not None:
                self.execute_metadata(command_id(command), command)

        end = text.find('*')
        self.consumed = len(text) if end < 0 else end

    def _g_select_tool(self, code, text):
        match = re.match(r'D(\d+)', text)
        number = int(match[1]) if match else 0
        # The tool number is consumed even if it is rejected, so it is not read again as a pen command.
        self.consumed = match.end() if match else 0
        self.select_tool(number)

    def _g_units(self, code, text):
        self.state.unit = MM if code == GCode.MILLIMETERS else Inch

    def _g_single_quadrant(self, code, text):
        self.state.multi_quadrant = False
        self.state.interpolation_mode = InterpMode.LINEAR

    def _g_multi_quadrant(self, code, text):
        self.state.multi_quadrant = True

    def _g_notation(self, code, text):
        self.state.relative = code == GCode.RELATIVE

    def _g_region_start(self, code, text):
        self.state.polygon_fill = True
        self.state.exposure = False

    def _g_region_end(self, code, text):
        if self.state.exposure and self.current_region is not None:
            self._close_region()

        self.state.exposure = False
        self.state.polygon_fill = False
        self.state.interpolation_mode = InterpMode.LINEAR

    # D codes

    def _tool(self):
        """ Return ``(aperture, size, dcode, shape)`` of the current tool, with a small round default pen if the tool
        is not defined. """
        number = self.state.current_tool
        if number is None or (aperture := self.apertures.get(number)) is None:
            return None, DEFAULT_APERTURE_SIZE, 0, ApertureShape.CIRCLE
        return aperture, aperture.size_in(MM), aperture.number, aperture.shape

    def _emit(self, item):
        self.items.append(item)
        if self.step_repeat is not None:
            self.step_repeat(item)

    def _stroke_pen_command(self, code):
        if code not in (1, 2, 3):
            raise UnsupportedPenCommand(f'Unsupported pen command D{code:02d}')

        st = self.state
        st.last_pen_command = code

        if code == 1:
            st.exposure = True
            _aperture, size, dcode, _shape = self._tool()
            mode = st.interpolation_mode
            item = None

            if mode == InterpMode.LINEAR:
                item = di.make_line(st.previous_point, st.point, size, dcode, st.polarity_dark, st.object_attrs)

            elif mode is not None and mode.is_arc:
                if st.rel_center_pending:
                    center, (first, second) = resolve_arc_center(st.previous_point, st.point, st.rel_center,
                            mode == InterpMode.CIRCULAR_CW, st.multi_quadrant)
                    item = di.make_arc(center, first, second, mode == InterpMode.CIRCULAR_CW,
                            size, dcode, st.polarity_dark, st.object_attrs)
                    st.rel_center_pending = False
                else:
                    item = di.make_line(st.previous_point, st.point, size, dcode, st.polarity_dark, st.object_attrs)

            else:
                self.add_message(f'D01 command: interpolation error (mode {mode!r})')

            if item is not None:
                self._emit(item)

        elif code == 2:
            st.exposure = False

        else:
            aperture, size, dcode, shape = self._tool()
            self._emit(di.make_flash(st.point, shape, size, dcode, st.polarity_dark, st.object_attrs,
                                     aperture=aperture))

        st.advance()

    def _region_pen_command(self, code):
        if code not in (1, 2):
            raise UnsupportedPenCommand(f'Unsupported pen command D{code:02d} inside region')

        st = self.state
        st.last_pen_command = code

        if code == 1:
            if not st.exposure or self.current_region is None:
                st.exposure = True
                self.current_region = di.make_region(st.polarity_dark, st.object_attrs, st.aperture_function)
                self.items.append(self.current_region)

            outline = self.current_region.outline
            if st.interpolation_mode is not None and st.interpolation_mode.is_arc:
                outline.append_arc(st.previous_point, st.point, st.rel_center,
                        st.interpolation_mode == InterpMode.CIRCULAR_CW, st.multi_quadrant)
                st.rel_center_pending = False
            else:
                if not outline:
                    outline.begin(st.previous_point)
                outline.append_vertex(st.point)

        else:
            if st.exposure and self.current_region is not None:
                self._close_region()
            st.exposure = False

        st.advance()

    def _close_region(self):
        region, self.current_region = self.current_region, None
        region.outline.close()
        if self.step_repeat is not None:
            self.step_repeat(region)
