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
Failures of the locating pipeline.

Each is scoped: InvalidTiming to one observation, DegenerateGeometry to one
station combination, InsufficientStations and NoSolution to one epoch.
All are ValueErrors so callers that only care about "bad input" can catch
that.
"""


class LocatorError(ValueError):
    pass


class InvalidTiming(LocatorError):
    """A signal was received before it was sent (negative range)."""

    def __init__(self, t0, t, station_id=None):
        self.t0 = t0
        self.t = t
        self.station_id = station_id
        super().__init__('station {s}: receive time {t} precedes transmit time {t0}'.format(
            s=station_id, t=t, t0=t0))

    def __reduce__(self):
        return (self.__class__, (self.t0, self.t, self.station_id))


class InsufficientStations(LocatorError):
    """Fewer usable stations than the combination size."""

    def __init__(self, available, required):
        self.available = available
        self.required = required
        super().__init__('{a} stations available, {r} required'.format(a=available, r=required))

    def __reduce__(self):
        return (self.__class__, (self.available, self.required))


class DegenerateGeometry(LocatorError):
    """The stations of one combination do not pin down a point."""

    def __init__(self, combination_id, condition):
        self.combination_id = combination_id
        self.condition = condition
        super().__init__('combination {c}: degenerate geometry (condition number {k:.3g})'.format(
            c=combination_id, k=condition))

    def __reduce__(self):
        return (self.__class__, (self.combination_id, self.condition))


class NoSolution(LocatorError):
    """No combination of an epoch produced a candidate."""

    def __init__(self, emitter_id, timestamp, attempted):
        self.emitter_id = emitter_id
        self.timestamp = timestamp
        self.attempted = attempted
        super().__init__('{e} @ {t}: no candidates from {n} combinations'.format(
            e=emitter_id, t=timestamp, n=attempted))

    def __reduce__(self):
        return (self.__class__, (self.emitter_id, self.timestamp, self.attempted))
