#! /usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2014 Hamilton Kibbe <ham@hamiltonkib.be>
# Copyright 2022 Jan Götte <code@jaseg.de>
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

from dataclasses import dataclass
from copy import deepcopy

from .utils import LengthUnit, MM, Inch


@dataclass
class FileSettings:
    ''' Coordinate format settings of a Gerber file, as given by its ``%FS`` and ``%MO`` statements.

    Any field left at ``None`` is filled in from the file. Set a field to override what the file says, e.g. for old
    RS-274D files that do not specify their format at all.
    '''
    #: Coordinate notation. ``'absolute'`` or ``'incremental'``. Absolute mode is universally used today. Incremental
    #: (relative) mode is technically still supported, but exceedingly rare in the wild.
    notation : str = None
    #: File unit. :py:attr:`~.utils.MM` or :py:attr:`~.utils.Inch`
    unit : LengthUnit = None
    #: Zero suppression settings. ``'leading'``, ``'trailing'`` or ``None`` for none.
    zeros : str = None
    #: Number format. ``(integer, decimal)`` tuple of number of integer and decimal digits. At most ``(6,7)`` per the Gerber standard.
    number_format : tuple = (None, None)

    # input validation
    def __setattr__(self, name, value):
        if name == 'unit' and value not in [None, MM, Inch]:
            raise ValueError(f'Unit must be either Inch or MM, not {value}')
        elif name == 'notation' and value not in [None, 'absolute', 'incremental']:
            raise ValueError(f'Notation must be either "absolute" or "incremental", not {value}')
        elif name == 'zeros' and value not in [None, 'leading', 'trailing']:
            raise ValueError(f'zeros must be either "leading" or "trailing" or None, not {value}')
        elif name == 'number_format':
            if len(value) != 2:
                raise ValueError(f'Number format must be a (integer, fractional) tuple of integers, not {value}')

            if value != (None, None) and (value[0] > 6 or value[1] > 7):
                raise ValueError(f'Requested precision of {value} is too high. Only up to 6.7 digits are allowed in Gerber files.')

        super().__setattr__(name, value)

        if name in ('zeros', 'number_format'):
            num = self.number_format[1 if self.zeros == 'leading' else 0] or 0
            self._pad = '0'*num

    @classmethod
    def defaults(kls):
        """ Settings assumed for files that do not say otherwise: millimeter, 3.4 format, leading zero suppression. """
        return kls(notation='absolute', unit=MM, zeros='leading', number_format=(3, 4))

    @property
    def is_metric(self):
        return self.unit == MM

    @property
    def is_inch(self):
        return self.unit == Inch

    @property
    def is_incremental(self):
        return self.notation == 'incremental'

    def copy(self):
        return deepcopy(self)

    def __str__(self):
        notation = f'notation={self.notation} ' if self.notation != 'absolute' else ''
        return f'<File settings: unit={self.unit} {notation}zeros={self.zeros} number_format={self.number_format}>'

    def parse_gerber_value(self, value):
        """ Parse a numeric string in gerber format using this file's settings. """
        if not value:
            return None

        sign = -1 if value[0] == '-' else 1
        value = value.lstrip('+-')

        if '.' in value or value == '00':
            return sign * float(value)

        integer_digits, decimal_digits = self.number_format
        if integer_digits is None:
            integer_digits = 3
        if decimal_digits is None:
            decimal_digits = 4

        if self.zeros == 'trailing':
            value = value + '0'*integer_digits # pad with zeros to ensure we have enough integer digits
            return sign * float(value[:integer_digits] + '.' + value[integer_digits:])

        else: # leading or no zero suppression
            value = '0'*decimal_digits + value # pad with zeros to ensure we have enough decimals
            return sign * float(value[:-decimal_digits] + '.' + value[-decimal_digits:])
