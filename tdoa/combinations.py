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
Deterministic enumeration of the station subsets that get solved.
"""

import collections
import itertools
import math

from tdoa import constants
from tdoa.errors import InsufficientStations

# combination_id: rank of the subset in lexicographic order of station indices
# stations: the Stations of the subset, first one is the reference station
Combination = collections.namedtuple('Combination', ('combination_id', 'stations'))


def count_combinations(n, k):
    return math.comb(n, k)


def enumerate_combinations(station_set, group_size):
    """Return every group_size-subset of station_set exactly once, in
    lexicographic order of insertion index, numbered from 0.

    Raises InsufficientStations if the set is smaller than group_size."""

    if group_size < constants.MIN_GROUP_SIZE:
        raise ValueError('group size must be at least {m}, not {k}'.format(
            m=constants.MIN_GROUP_SIZE, k=group_size))

    stations = list(station_set)
    if len(stations) < group_size:
        raise InsufficientStations(available=len(stations), required=group_size)

    return [Combination(combination_id, tuple(stations[i] for i in indices))
            for combination_id, indices in enumerate(itertools.combinations(range(len(stations)), group_size))]
