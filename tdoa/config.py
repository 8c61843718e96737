# -*- mode: python; indent-tabs-mode: nil -*-

# Part of tdoa-locator: a TDOA multilateration library
# Copyright (C) 2015  Oliver Jowett <oliver@mutability.co.uk>
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

"""Poor man's configuration system, plus a per-run override object."""

# number of stations solved together in one combination
GROUP_SIZE = 4

# candidates closer than this are linked into the same cluster, metres
CLUSTER_DISTANCE_THRESHOLD = 500.0

# winning clusters smaller than this are flagged low-confidence
MIN_CLUSTER_SIZE = 3

# winning clusters whose members lie further than this from the centroid
# are flagged low-confidence, metres
CLUSTER_SPREAD_TOLERANCE = 250.0

# coefficient matrices with a condition number above this are degenerate
MAX_CONDITION = 1e10

# polish each linear solution with a non-linear least-squares fit?
REFINE = False

# maxfev (maximum function evaluations) for the refinement
SOLVER_MAXFEV = 50

# how long to wait to accumulate observations of one epoch, seconds
EPOCH_DELAY = 2.5


class SolverConfig(object):
    """Settings for one run of the pipeline.

    Any field not given takes the module-level default above. Instances are
    plain data and may be shipped to worker processes.
    """

    def __init__(self,
                 group_size=None,
                 cluster_distance_threshold=None,
                 min_cluster_size=None,
                 cluster_spread_tolerance=None,
                 max_condition=None,
                 refine=None,
                 solver_maxfev=None):
        self.group_size = GROUP_SIZE if group_size is None else int(group_size)
        self.cluster_distance_threshold = float(CLUSTER_DISTANCE_THRESHOLD if cluster_distance_threshold is None
                                                else cluster_distance_threshold)
        self.min_cluster_size = MIN_CLUSTER_SIZE if min_cluster_size is None else int(min_cluster_size)
        self.cluster_spread_tolerance = float(CLUSTER_SPREAD_TOLERANCE if cluster_spread_tolerance is None
                                              else cluster_spread_tolerance)
        self.max_condition = float(MAX_CONDITION if max_condition is None else max_condition)
        self.refine = REFINE if refine is None else bool(refine)
        self.solver_maxfev = SOLVER_MAXFEV if solver_maxfev is None else int(solver_maxfev)

        if self.group_size < 4:
            raise ValueError('group size must be at least 4, not {0}'.format(self.group_size))
        if self.cluster_distance_threshold <= 0:
            raise ValueError('cluster distance threshold must be positive')
        if self.min_cluster_size < 1:
            raise ValueError('minimum cluster size must be at least 1')
        if self.cluster_spread_tolerance < 0:
            raise ValueError('cluster spread tolerance must not be negative')
        if self.max_condition <= 1:
            raise ValueError('condition number limit must be greater than 1')
        if self.solver_maxfev < 1:
            raise ValueError('solver maxfev must be at least 1')

    def __repr__(self):
        return ('SolverConfig(group_size={0.group_size}, '
                'cluster_distance_threshold={0.cluster_distance_threshold}, '
                'min_cluster_size={0.min_cluster_size}, '
                'cluster_spread_tolerance={0.cluster_spread_tolerance}, '
                'max_condition={0.max_condition}, '
                'refine={0.refine}, '
                'solver_maxfev={0.solver_maxfev})'.format(self))
