# -*- mode: python; indent-tabs-mode: nil -*-

# Part of tdoa-locator: a TDOA multilateration library
# Copyright (C) 2026  The tdoa-locator authors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""
Fixed station positions, for observations that don't carry their own.
"""

import json
import logging
import math
from contextlib import closing

from tdoa import geodesy

glogger = logging.getLogger("registry")


class StationRegistry(object):
    """Maps station id -> (x, y, z) position in metres."""

    def __init__(self):
        self._positions = {}

    def add(self, station_id, position):
        position = tuple(float(v) for v in position)
        if len(position) != 3 or not all(math.isfinite(v) for v in position):
            raise ValueError('station {0}: position must be three finite coordinates'.format(station_id))
        self._positions[station_id] = position

    def add_llh(self, station_id, llh):
        self.add(station_id, geodesy.llh2ecef(llh))

    def position(self, station_id):
        return self._positions[station_id]

    def __contains__(self, station_id):
        return station_id in self._positions

    def __len__(self):
        return len(self._positions)

    @classmethod
    def load(cls, filename):
        """Read a registry from a JSON file of the form

          {"station id": {"ecef": [x, y, z]}, "other id": {"llh": [lat, lon, alt]}, ...}
        """

        with closing(open(filename, 'r')) as f:
            entries = json.load(f)

        registry = cls()
        for station_id, entry in entries.items():
            if 'ecef' in entry:
                registry.add(station_id, entry['ecef'])
            elif 'llh' in entry:
                registry.add_llh(station_id, entry['llh'])
            else:
                raise ValueError('station {0}: needs an "ecef" or "llh" position'.format(station_id))

        glogger.info("Read {n} station positions from {f}".format(n=len(registry), f=filename))
        return registry
