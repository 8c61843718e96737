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
The epoch tracker: collects observations of the same transmission (same
emitter, same nominal transmit time) from a stream, waits a little for
stragglers, and passes each complete group on to be located.
"""

import logging
import time

from tdoa import config as tdoa_config
from tdoa import epoch, profile
from tdoa.errors import InsufficientStations, NoSolution
from tdoa.ranging import as_timestamp

glogger = logging.getLogger("epochtrack")


class PendingEpoch:
    def __init__(self, signal):
        self.signal = signal
        self.handle = None


class EpochTracker(object):
    """Groups observations by (emitter_id, timestamp) and locates each group.

    If loop is given, a group is resolved delay seconds after its first
    observation arrives; otherwise groups wait for flush(). Each EpochResult
    is passed to every output handler. Epochs that cannot be located are
    counted and logged, never raised.
    """

    def __init__(self, solver_config=None, registry=None, loop=None, delay=None,
                 executor=None, epoch_timeout=None):
        self.solver_config = solver_config or tdoa_config.SolverConfig()
        self.registry = registry
        self.loop = loop
        self.delay = tdoa_config.EPOCH_DELAY if delay is None else delay
        self.executor = executor
        self.epoch_timeout = epoch_timeout
        self.pending = {}
        self.output_handlers = []

        self.located_count = 0
        self.insufficient_count = 0
        self.unsolved_count = 0

    def add_output_handler(self, handler):
        self.output_handlers.append(handler)

    def remove_output_handler(self, handler):
        self.output_handlers.remove(handler)

    @profile.trackcpu
    def observation(self, emitter_id, timestamp, station_id, position=None, receive_time=None,
                    delay=None, range=None):
        key = (emitter_id, as_timestamp(timestamp))
        group = self.pending.get(key)
        if not group:
            group = self.pending[key] = PendingEpoch(epoch.Signal(emitter_id, key[1]))
            if self.loop is not None:
                group.handle = self.loop.call_later(self.delay, self._resolve, key)

        group.signal.add_observation(station_id,
                                     position=position,
                                     receive_time=receive_time,
                                     delay=delay,
                                     range=range)

    def flush(self):
        """Resolve every pending group now, oldest transmit time first."""
        for key in sorted(self.pending, key=lambda k: (k[1], str(k[0]))):
            group = self.pending[key]
            if group.handle is not None:
                group.handle.cancel()
            self._resolve(key)

    def close(self):
        for group in self.pending.values():
            if group.handle is not None:
                group.handle.cancel()
        self.pending.clear()

    @profile.trackcpu
    def _resolve(self, key):
        group = self.pending.pop(key)
        signal = group.signal

        deadline = None
        if self.epoch_timeout is not None:
            deadline = time.monotonic() + self.epoch_timeout

        try:
            result = epoch.locate(signal,
                                  config=self.solver_config,
                                  registry=self.registry,
                                  executor=self.executor,
                                  deadline=deadline)
        except InsufficientStations as e:
            self.insufficient_count += 1
            glogger.info("{e}@{t}: not located, {m}".format(e=signal.emitter_id, t=signal.timestamp, m=e))
            return
        except NoSolution as e:
            self.unsolved_count += 1
            glogger.info("not located: {m}".format(m=e))
            return

        self.located_count += 1
        for handler in self.output_handlers[:]:
            try:
                handler(result)
            except Exception:
                glogger.exception("Output handler failed for {e}@{t}".format(e=signal.emitter_id, t=signal.timestamp))
                # eat the exception so it doesn't break our caller
