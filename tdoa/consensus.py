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
Reduce the candidates of one epoch to a single position.

Candidates are linked when they lie closer together than the cluster
distance threshold; clusters are the connected components of that graph
(single linkage). The biggest cluster wins, and its centroid is the answer.
"""

import collections
import enum
import logging

import numpy
import scipy.sparse
import scipy.sparse.csgraph
import scipy.spatial

from tdoa import geodesy, profile
from tdoa.stations import delay_stats
from tdoa.errors import NoSolution

glogger = logging.getLogger("consensus")


_connected_components = profile.trackcpu(scipy.sparse.csgraph.connected_components)


class Confidence(enum.Enum):
    HIGH = 'high'
    LOW = 'low'


FinalEstimate = collections.namedtuple('FinalEstimate', (
    'emitter_id',                # emitter of the signal
    'timestamp',                 # nominal transmission time, Decimal seconds
    'x', 'y', 'z',               # consensus position, metres
    'confidence',                # Confidence
    'partial',                   # True if finalised before all combinations were solved
    'contributing_station_ids',  # stations of the winning cluster's combinations
    'delay_stats',               # DelayStats over those stations, or None
    'cluster_size',              # members in the winning cluster
    'spread',                    # max member distance from the centroid, metres
    'candidate_count'))          # candidates considered


def cluster_candidates(store, threshold):
    """Partition the candidates of store into single-linkage clusters.

    Returns a list of clusters, each a sorted list of candidate indices.
    Two candidates share a cluster iff a chain of candidates, each closer
    than threshold to the next, connects them.
    """

    n = len(store)
    if n == 0:
        return []

    # query_pairs links pairs at exactly the radius too; links must be strictly closer
    radius = numpy.nextafter(threshold, 0.0)
    tree = scipy.spatial.cKDTree(store.positions)
    pairs = tree.query_pairs(radius, output_type='ndarray').reshape((-1, 2))
    adjacency = scipy.sparse.coo_matrix((numpy.ones(len(pairs), dtype=numpy.int8), (pairs[:, 0], pairs[:, 1])),
                                        shape=(n, n))

    _, labels = _connected_components(adjacency, directed=False)

    members = collections.defaultdict(list)
    for node, label in enumerate(labels):
        members[int(label)].append(node)

    return sorted(members.values(), key=lambda m: m[0])


class ConsensusEstimator(object):
    """Picks one position out of a CandidateStore, see module docstring.

    config supplies cluster_distance_threshold, min_cluster_size and
    cluster_spread_tolerance.
    """

    def __init__(self, config):
        self.config = config

    def _rank(self, store, cluster):
        mean_residual = sum(store[i].residual for i in cluster) / len(cluster)
        first_id = min(store[i].combination_id for i in cluster)
        return (-len(cluster), mean_residual, first_id)

    @profile.trackcpu
    def estimate(self, emitter_id, timestamp, station_set, store, partial=False):
        """Return a FinalEstimate for one epoch.

        station_set: the StationSet the candidates were solved from
        store: the epoch's CandidateStore
        partial: True if solving stopped before every combination was tried

        Raises NoSolution if store is empty.
        """

        if not len(store):
            raise NoSolution(emitter_id, timestamp, attempted=0)

        clusters = cluster_candidates(store, self.config.cluster_distance_threshold)
        winner = min(clusters, key=lambda cluster: self._rank(store, cluster))

        centroid = store.centroid(winner)
        spread = float(numpy.max(geodesy.ranges_from(centroid, store.positions[winner])))

        if len(winner) < self.config.min_cluster_size or spread > self.config.cluster_spread_tolerance:
            confidence = Confidence.LOW
        else:
            confidence = Confidence.HIGH

        contributing = set()
        for i in winner:
            contributing.update(store[i].station_ids)
        contributing_stations = [s for s in station_set if s.station_id in contributing]

        glogger.debug("{e}@{t}: {c} clusters from {n} candidates, winner has {w} members, spread {s:.1f}m".format(
            e=emitter_id, t=timestamp, c=len(clusters), n=len(store), w=len(winner), s=spread))

        return FinalEstimate(emitter_id=emitter_id,
                             timestamp=timestamp,
                             x=float(centroid[0]),
                             y=float(centroid[1]),
                             z=float(centroid[2]),
                             confidence=confidence,
                             partial=bool(partial),
                             contributing_station_ids=tuple(s.station_id for s in contributing_stations),
                             delay_stats=delay_stats(contributing_stations),
                             cluster_size=len(winner),
                             spread=spread,
                             candidate_count=len(store))
