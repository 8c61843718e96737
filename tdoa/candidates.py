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
Candidate positions produced while solving one epoch.
"""

import collections

import numpy
import scipy.spatial.distance

from tdoa import geodesy


class PositionCandidate(collections.namedtuple('PositionCandidate', (
        'x', 'y', 'z', 'range', 'combination_id', 'residual', 'station_ids'))):
    """One solved position.

    x, y, z: the position, metres
    range: distance from the combination's reference station, metres
    combination_id: integer id of the combination that produced it
    residual: RMS range error over all stations of the combination, metres
    station_ids: ids of the combination's stations
    """

    __slots__ = ()

    @property
    def position(self):
        return numpy.array((self.x, self.y, self.z))


class CandidateStore(object):
    """Every candidate of one epoch, in arrival order.

    Nothing is deduplicated: several combinations landing on nearly the same
    point is exactly the redundancy that consensus looks for. Once seal()
    has been called the store is read-only.
    """

    def __init__(self, candidates=()):
        self._candidates = []
        self._sealed = False
        self.extend(candidates)

    def add(self, candidate):
        if self._sealed:
            raise RuntimeError('candidate store is sealed')
        if not isinstance(candidate, PositionCandidate):
            raise TypeError('expected a PositionCandidate, not {0!r}'.format(candidate))
        self._candidates.append(candidate)

    def extend(self, candidates):
        for candidate in candidates:
            self.add(candidate)

    def seal(self):
        self._sealed = True
        return self

    @property
    def sealed(self):
        return self._sealed

    def __len__(self):
        return len(self._candidates)

    def __iter__(self):
        return iter(self._candidates)

    def __getitem__(self, index):
        return self._candidates[index]

    @property
    def positions(self):
        return numpy.array([(c.x, c.y, c.z) for c in self._candidates], dtype=float).reshape((-1, 3))

    @property
    def combination_ids(self):
        return tuple(c.combination_id for c in self._candidates)

    def distance(self, i, j):
        """Euclidean distance between candidates i and j."""
        return geodesy.ecef_distance(self._candidates[i].position, self._candidates[j].position)

    def distance_matrix(self):
        """Square matrix of all pairwise distances."""
        if len(self._candidates) < 2:
            return numpy.zeros((len(self._candidates), len(self._candidates)))
        return scipy.spatial.distance.squareform(scipy.spatial.distance.pdist(self.positions))

    def centroid(self, indices=None):
        """Unweighted mean position of the given candidates (all if None)."""

        if indices is None:
            indices = range(len(self._candidates))
        indices = list(indices)
        if not indices:
            raise ValueError('centroid of no candidates')
        return numpy.mean(self.positions[indices], axis=0)
