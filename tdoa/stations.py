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
Ground stations with a resolved range, and the per-epoch collection of them.
"""

import math
import collections
import numpy


DelayStats = collections.namedtuple('DelayStats', ('min', 'mean', 'max'))


class Station(collections.namedtuple('Station', ('station_id', 'x', 'y', 'z', 'range', 'delay'))):
    """A fixed station at (x, y, z) metres, range metres from the emitter
    at the time of transmission. delay is an optional per-station delay /
    quality figure carried through for reporting."""

    __slots__ = ()

    def __new__(cls, station_id, x, y, z, range, delay=None):
        x, y, z, range = float(x), float(y), float(z), float(range)
        if not all(math.isfinite(v) for v in (x, y, z)):
            raise ValueError('station {0}: position must be finite'.format(station_id))
        if not math.isfinite(range) or range < 0:
            raise ValueError('station {0}: range must be finite and >= 0, not {1}'.format(station_id, range))
        if delay is not None:
            delay = float(delay)
        return super().__new__(cls, station_id, x, y, z, range, delay)

    @property
    def position(self):
        return numpy.array((self.x, self.y, self.z))


def delay_stats(stations):
    """Return DelayStats over the stations that carry a delay, or None."""

    delays = [s.delay for s in stations if s.delay is not None]
    if not delays:
        return None
    return DelayStats(min(delays), sum(delays) / len(delays), max(delays))


class StationSet(object):
    """The ordered stations of one epoch.

    Stations may only be added until freeze() is called; after that the set
    is read-only. Insertion order defines combination ids, so it is kept.
    """

    def __init__(self, stations=()):
        self._stations = []
        self._index = {}
        self._frozen = False
        for station in stations:
            self.add(station)

    def add(self, station):
        if self._frozen:
            raise RuntimeError('station set is frozen')
        if not isinstance(station, Station):
            raise TypeError('expected a Station, not {0!r}'.format(station))
        if station.station_id in self._index:
            raise ValueError('station {0} is already present'.format(station.station_id))

        self._index[station.station_id] = len(self._stations)
        self._stations.append(station)

    def freeze(self):
        self._frozen = True
        return self

    @property
    def frozen(self):
        return self._frozen

    def __len__(self):
        return len(self._stations)

    def __iter__(self):
        return iter(self._stations)

    def __getitem__(self, index):
        return self._stations[index]

    def __contains__(self, station_id):
        return station_id in self._index

    def by_id(self, station_id):
        return self._stations[self._index[station_id]]

    def index_of(self, station_id):
        return self._index[station_id]

    @property
    def station_ids(self):
        return tuple(s.station_id for s in self._stations)

    @property
    def positions(self):
        return numpy.array([(s.x, s.y, s.z) for s in self._stations], dtype=float).reshape((-1, 3))

    @property
    def ranges(self):
        return numpy.array([s.range for s in self._stations], dtype=float)

    def position_known(self, x, y, z):
        """True if some station already sits at exactly (x, y, z)."""
        return any(s.x == x and s.y == y and s.z == z for s in self._stations)

    def __repr__(self):
        return 'StationSet({0!r}{1})'.format(list(self.station_ids), ', frozen' if self._frozen else '')
