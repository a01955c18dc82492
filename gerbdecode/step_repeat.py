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

class StepAndRepeat:
    """ Replicates finished draw items on an ``%SR`` grid.

    The original item stays at grid position ``(0, 0)``. Handing an item to :py:meth:`replicate` appends one offset copy
    per remaining grid position to ``items``. With the default 1x1 grid, this does nothing.
    """

    def __init__(self, items, x_repeat=1, y_repeat=1, x_step=0.0, y_step=0.0):
        self.items = items
        self.set_grid(x_repeat, y_repeat, x_step, y_step)

    def set_grid(self, x_repeat=1, y_repeat=1, x_step=0.0, y_step=0.0):
        if x_repeat < 1 or y_repeat < 1:
            raise ValueError('SR step-repeat X and Y values must be at least 1')

        self.x_repeat, self.y_repeat = x_repeat, y_repeat
        self.x_step, self.y_step = x_step, y_step

    def reset(self):
        self.set_grid()

    @property
    def active(self):
        return self.x_repeat > 1 or self.y_repeat > 1

    def offsets(self):
        # X-major order, the same order in which copies are appended
        return [ (self.x_step*nx, self.y_step*ny)
                for nx in range(self.x_repeat) for ny in range(self.y_repeat)
                if nx or ny ]

    def replicate(self, item):
        """ Append copies of ``item`` for every grid position except the origin. Returns the list of copies. """
        copies = [ item.offset_copy(dx, dy) for dx, dy in self.offsets() ]
        self.items.extend(copies)
        return copies

    __call__ = replicate

    def __str__(self):
        return f'<StepAndRepeat {self.x_repeat}x{self.y_repeat} step {self.x_step}, {self.y_step}>'
