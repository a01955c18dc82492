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

import rtree.index


class ItemIndex:
    """ R-tree over the bounding boxes of a list of draw items.

    The index is a snapshot. Call :py:meth:`rebuild` after changing the item list. Query results are returned in the
    order the items appear in the list.
    """

    def __init__(self, items):
        self.items = items
        self.rebuild()

    @classmethod
    def from_image(kls, image):
        return kls(image.items)

    def rebuild(self):
        idx = self._index = rtree.index.Index()
        self._items = list(self.items)
        for obj_id, item in enumerate(self._items):
            if (bounds := item.bounding_box()) is None:
                continue

            (min_x, min_y), (max_x, max_y) = bounds
            idx.insert(obj_id, (min_x, min_y, max_x, max_y))

    def _lookup(self, ids):
        return [ self._items[obj_id] for obj_id in sorted(ids) ]

    def at(self, x, y, tol=1e-6):
        """ Items whose bounding box contains the point ``(x, y)``, with tolerance ``tol``. """
        return self._lookup(self._index.intersection((x-tol, y-tol, x+tol, y+tol)))

    def in_box(self, min_x, min_y, max_x, max_y):
        """ Items whose bounding box overlaps the given box. """
        return self._lookup(self._index.intersection((min_x, min_y, max_x, max_y)))

    def nearest(self, x, y, n=1):
        """ The ``n`` items whose bounding boxes are closest to ``(x, y)``. Ties may return more than ``n`` items. """
        return self._lookup(self._index.nearest((x, y, x, y), n))

    def by_net(self, net_name):
        """ All items carrying the ``.N`` object attribute ``net_name``. """
        return [ item for item in self._items if item.net_name == net_name ]

    def __len__(self):
        return len(self._items)
