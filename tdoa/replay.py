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
Reads recorded observations back in, one JSON object per line:

  {"emitter": "sat-7", "t0": 1700000000.0, "station": "A",
   "position": [x, y, z], "time": 1700000000.000071, "delay": 0.4}

"position" may be left out when a station registry knows the station;
"range" (metres) may be given instead of "time". JSON numbers are read as
Decimal so timestamps keep every digit that was written.
"""

import json
import logging
from contextlib import closing
from decimal import Decimal

from tdoa import profile

glogger = logging.getLogger("replay")

_REQUIRED = ('emitter', 't0', 'station')


def parse_observation(line):
    """Parse one line. Returns a dict of EpochTracker.observation() keyword
    arguments. Raises ValueError on malformed input."""

    record = json.loads(line, parse_float=Decimal)
    if not isinstance(record, dict):
        raise ValueError('expected a JSON object')

    for key in _REQUIRED:
        if key not in record:
            raise ValueError('missing "{0}"'.format(key))
    if 'time' not in record and 'range' not in record:
        raise ValueError('need "time" or "range"')

    position = record.get('position')
    if position is not None:
        position = tuple(float(v) for v in position)

    return {
        'emitter_id': record['emitter'],
        'timestamp': record['t0'],
        'station_id': record['station'],
        'position': position,
        'receive_time': record.get('time'),
        'delay': None if record.get('delay') is None else float(record['delay']),
        'range': None if record.get('range') is None else float(record['range']),
    }


def read_observations(f):
    """Yield parsed observations from an open file, skipping bad lines."""

    for lineno, line in enumerate(f, 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        try:
            yield parse_observation(line)
        except (ValueError, TypeError) as e:
            glogger.warning("line {n}: skipped: {e}".format(n=lineno, e=e))


@profile.trackcpu
def replay_file(filename, tracker):
    """Feed every observation in filename to tracker. Returns the count fed."""

    count = 0
    with closing(open(filename, 'r')) as f:
        for kwargs in read_observations(f):
            try:
                tracker.observation(**kwargs)
            except (ValueError, TypeError) as e:
                glogger.warning("{f}: skipped observation from {s}: {e}".format(f=filename, s=kwargs['station_id'], e=e))
                continue
            count += 1

    glogger.info("Read {n} observations from {f}".format(n=count, f=filename))
    return count
