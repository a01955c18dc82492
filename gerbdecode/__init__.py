#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2022 Jan Sebastian Götte <code@jaseg.de>
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
gerbdecode
==========

gerbdecode interprets Gerber (RS-274D and RS-274X) photoplotter files. It runs the file's G and D codes through a
plotter state machine and reconstructs what they draw as a list of lines, arcs, flashes and filled regions, with the
net names from X2 object attributes attached.
"""

from .rs274x import GerberImage
from .rs274d import CommandDispatcher
from .state import InterpreterState
from .apertures import ApertureTable, ApertureDefinition
from .draw_items import Line, Arc, Flash, Region
from .index import ItemIndex
from .cam import FileSettings
from .utils import MM, Inch

__version__ = '0.3.0'
