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

import re
import warnings


def command_id(command):
    """ Two-letter identifier of an extended command, e.g. ``'TO'`` for ``'TO.N,GND*%'``. """
    return command.lstrip('%')[:2].upper()


class AttributeExecutor:
    """ Executes Gerber X2 attribute commands (``TF``, ``TA``, ``TO`` and ``TD``).

    Commands may come from regular ``%...%`` blocks or from structured ``G04 #@! `` comments. In both cases they are
    passed in with their ``*%`` terminator, e.g. ``'TO.N,GND*%'``.

    File attributes end up in :py:attr:`file_attrs`, aperture attributes in :py:attr:`aperture_attrs` (and the
    ``.AperFunction`` value additionally in the interpreter state), object attributes in the state's
    ``object_attrs`` dict, which is what draw items take their net information from.
    """

    # NOTE: The Gerber standard allows names to be empty or contain commas. We don't support that.
    ATTRIBUTE_REGEX = re.compile(r'(?P<type>TF|TA|TO|TD)(?P<name>[._$a-zA-Z][._$a-zA-Z0-9]*)?(,(?P<value>[^*]*))?')

    def __init__(self, state, file_attrs=None, aperture_attrs=None, warn=None):
        self.state = state
        self.file_attrs = {} if file_attrs is None else file_attrs
        self.aperture_attrs = {} if aperture_attrs is None else aperture_attrs
        self.warn = warn or (lambda msg, kls=SyntaxWarning: warnings.warn(msg, kls))
        self.handlers = {
                'TF': self._execute_set,
                'TA': self._execute_set,
                'TO': self._execute_set,
                'TD': self._execute_delete,
                }

    def execute(self, command):
        """ Execute one attribute command. Returns ``False`` if the command is unknown or malformed. """
        command = command.strip().lstrip('%')
        if command.endswith('%'):
            command = command[:-1]
        command = command.rstrip('*')

        if (handler := self.handlers.get(command_id(command))) is None:
            self.warn(f'Unknown metadata command "{command}", ignoring.')
            return False

        if not (match := self.ATTRIBUTE_REGEX.fullmatch(command)):
            self.warn(f'Malformed attribute command "{command}", ignoring.')
            return False

        return handler(match)

    def _execute_set(self, match):
        if not match['name']:
            self.warn(f'{match["type"]} attribute command without attribute name, ignoring.')
            return False

        value = tuple(match['value'].split(',')) if match['value'] is not None else ()
        target = {'TF': self.file_attrs, 'TO': self.state.object_attrs, 'TA': self.aperture_attrs}[match['type']]
        target[match['name']] = value

        if match['type'] == 'TA' and match['name'] == '.AperFunction':
            self.state.aperture_function = value
        return True

    def _execute_delete(self, match):
        if match['value']:
            self.warn('TD attribute deletion command must not contain attribute fields')
            return False

        if not (name := match['name']):
            self.state.object_attrs.clear()
            self.aperture_attrs.clear()
            self.state.aperture_function = None
            return True

        if name in self.state.object_attrs:
            del self.state.object_attrs[name]
        elif name in self.aperture_attrs:
            del self.aperture_attrs[name]
            if name == '.AperFunction':
                self.state.aperture_function = None
        elif name in self.file_attrs:
            self.warn(f'Attempt to TD delete file attribute {name}. This does not make sense, ignoring.')
            return False
        else:
            self.warn(f'Attempt to TD delete previously undefined attribute {name}.')
            return False
        return True
