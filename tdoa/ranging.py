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
Timestamps and slant ranges.

One metre of range is about 3.3ns of time, and absolute timestamps are
around 1e9 seconds, so a double cannot hold them to the precision we need.
Timestamps are therefore carried as Decimal seconds everywhere and only the
(small) resulting range is converted to a float.
"""

from decimal import Decimal, InvalidOperation

from tdoa import constants
from tdoa.errors import InvalidTiming


def as_timestamp(value):
    """Convert value (Decimal, int, decimal string or float seconds) to a
    Decimal timestamp. Floats go through their shortest repr, so 0.1 becomes
    Decimal('0.1') rather than its binary expansion."""

    if isinstance(value, Decimal):
        t = value
    elif isinstance(value, bool):
        raise TypeError('not a timestamp: {0!r}'.format(value))
    elif isinstance(value, int):
        t = Decimal(value)
    elif isinstance(value, float):
        t = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            t = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError('not a timestamp: {0!r}'.format(value))
    else:
        raise TypeError('not a timestamp: {0!r}'.format(value))

    if not t.is_finite():
        raise ValueError('timestamp must be finite, not {0}'.format(t))
    return t


def resolve_range(t0, t, station_id=None):
    """Slant range in metres of a signal sent at t0 and received at t.

    Raises InvalidTiming if t < t0."""

    t0 = as_timestamp(t0)
    t = as_timestamp(t)
    dt = t - t0
    if dt < 0:
        raise InvalidTiming(t0, t, station_id=station_id)
    return float(dt * constants.C_DECIMAL)
