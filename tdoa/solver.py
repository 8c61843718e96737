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

"""
The bit where all the magic happens: take the stations of one combination,
each with a known range to the emitter, and intersect their spheres.
"""

import logging

import numpy
import scipy.optimize

from tdoa import geodesy, profile
from tdoa.candidates import PositionCandidate
from tdoa.errors import DegenerateGeometry

glogger = logging.getLogger("solver")


def _linear_system(positions, ranges):
    """Build A, b such that A.p = b, with p relative to positions[0].

    Subtracting the reference sphere |p|^2 = r0^2 from each other sphere
    |p - d_i|^2 = r_i^2 (d_i = s_i - s_0) cancels the quadratic term:

      2 d_i . p = |d_i|^2 + r0^2 - r_i^2

    Working relative to the reference station keeps the numbers small;
    subtracting squared ECEF magnitudes directly loses several digits.
    """

    d = positions[1:] - positions[0]
    a = 2.0 * d
    b = numpy.sum(d * d, axis=1) + ranges[0] ** 2 - ranges[1:] ** 2
    return a, b


def _rms_residual(position, positions, ranges):
    errors = geodesy.ranges_from(position, positions) - ranges
    return float(numpy.sqrt(numpy.mean(errors * errors)))


def _range_residuals(position_guess, positions, ranges):
    """Return an array of range residuals for a position guess."""
    return geodesy.ranges_from(position_guess, positions) - ranges


def _refine(position, positions, ranges, maxfev):
    """Non-linear least-squares polish of a linear solution. Returns the
    refined position, or None if the solver gave up."""

    x_est, cov_x, infodict, mesg, ler = scipy.optimize.leastsq(
        _range_residuals,
        position,
        args=(positions, ranges),
        full_output=True,
        maxfev=maxfev)

    if ler in (1, 2, 3, 4) and numpy.all(numpy.isfinite(x_est)):
        return x_est

    glogger.debug("refinement failed: {0} {1}".format(ler, mesg))
    return None


@profile.trackcpu
def solve_combination(combination, config):
    """Solve one combination of stations for the emitter position.

    combination: a Combination; its first station is the reference
    config: a SolverConfig (max_condition, refine, solver_maxfev)

    Returns a PositionCandidate. Raises DegenerateGeometry if the stations
    do not constrain a single point.
    """

    combination_id, stations = combination
    if len(stations) < 4:
        raise ValueError('need at least 4 stations to solve, not {0}'.format(len(stations)))

    positions = numpy.array([(s.x, s.y, s.z) for s in stations], dtype=float)
    ranges = numpy.array([s.range for s in stations], dtype=float)
    a, b = _linear_system(positions, ranges)

    singular = numpy.linalg.svd(a, compute_uv=False)
    if singular[-1] <= 0.0 or singular[0] / singular[-1] > config.max_condition:
        condition = numpy.inf if singular[-1] <= 0.0 else singular[0] / singular[-1]
        raise DegenerateGeometry(combination_id, condition)
    condition = singular[0] / singular[-1]

    try:
        if a.shape[0] == 3:
            relative = numpy.linalg.solve(a, b)
        else:
            relative, _, rank, _ = numpy.linalg.lstsq(a, b, rcond=None)
            if rank < 3:
                raise DegenerateGeometry(combination_id, condition)
    except numpy.linalg.LinAlgError:
        raise DegenerateGeometry(combination_id, condition)

    position = positions[0] + relative
    if not numpy.all(numpy.isfinite(position)):
        raise DegenerateGeometry(combination_id, condition)

    residual = _rms_residual(position, positions, ranges)

    if config.refine:
        refined = _refine(position, positions, ranges, config.solver_maxfev)
        if refined is not None:
            refined_residual = _rms_residual(refined, positions, ranges)
            if refined_residual < residual:
                position, residual = refined, refined_residual

    return PositionCandidate(x=float(position[0]),
                             y=float(position[1]),
                             z=float(position[2]),
                             range=float(geodesy.ecef_distance(position, positions[0])),
                             combination_id=combination_id,
                             residual=residual,
                             station_ids=tuple(s.station_id for s in stations))


def solve_all(combinations, config, expired=None):
    """Solve each combination in turn.

    Returns (candidates, failed, stopped) where failed lists the ids of
    degenerate combinations. A degenerate combination never stops the
    others; if expired is given and returns True before a combination is
    started, solving stops there and stopped is True.
    """

    candidates = []
    failed = []
    for combination in combinations:
        if expired is not None and expired():
            return candidates, failed, True

        try:
            candidates.append(solve_combination(combination, config))
        except DegenerateGeometry as e:
            glogger.debug(str(e))
            failed.append(combination.combination_id)

    return candidates, failed, False
