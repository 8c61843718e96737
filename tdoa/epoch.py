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
One epoch, start to finish: turn a signal's observations into a station
set, solve every station combination, and reduce the candidates to a
single estimate.
"""

import collections
import concurrent.futures
import logging
import math
import time

from tdoa import config as tdoa_config
from tdoa import combinations, consensus, profile, solver, util
from tdoa.candidates import CandidateStore
from tdoa.errors import DegenerateGeometry, InvalidTiming, NoSolution
from tdoa.ranging import as_timestamp, resolve_range
from tdoa.stations import Station, StationSet

glogger = logging.getLogger("epoch")


# position is None if the station registry supplies it; range is set
# instead of receive_time for stations whose range is already known
Observation = collections.namedtuple('Observation', ('station_id', 'position', 'receive_time', 'delay', 'range'))

Rejection = collections.namedtuple('Rejection', ('observation', 'reason'))

EpochResult = collections.namedtuple('EpochResult', (
    'estimate',              # FinalEstimate
    'candidates',            # sealed CandidateStore
    'station_set',           # frozen StationSet used for solving
    'rejected',              # [Rejection, ...] observations left out of the station set
    'failed_combinations'))  # ids of degenerate combinations


class Signal(object):
    """One transmission of one emitter and the observations of it."""

    def __init__(self, emitter_id, timestamp):
        self.emitter_id = emitter_id
        self.timestamp = as_timestamp(timestamp)
        self._observations = []

    def add_observation(self, station_id, position=None, receive_time=None, delay=None, range=None):
        if receive_time is None and range is None:
            raise ValueError('station {0}: need a receive time or a range'.format(station_id))

        if position is not None:
            position = tuple(float(v) for v in position)
            if len(position) != 3 or not all(math.isfinite(v) for v in position):
                raise ValueError('station {0}: position must be three finite coordinates'.format(station_id))
        if receive_time is not None:
            receive_time = as_timestamp(receive_time)
        if range is not None:
            range = float(range)
        if delay is not None:
            delay = float(delay)

        observation = Observation(station_id, position, receive_time, delay, range)
        self._observations.append(observation)
        return observation

    @property
    def observations(self):
        return tuple(self._observations)

    def position_known(self, x, y, z):
        """True if some observation was made at exactly (x, y, z)."""
        return any(o.position == (x, y, z) for o in self._observations)

    def __len__(self):
        return len(self._observations)

    def __repr__(self):
        return 'Signal({0!r}, {1!r}, {2} observations)'.format(self.emitter_id, self.timestamp, len(self))


def build_station_set(signal, registry=None):
    """Resolve the observations of signal into a frozen StationSet.

    Observations that cannot be used are left out rather than failing the
    epoch: a receive time before the transmit time (InvalidTiming), a
    station with no known position, or a repeat of a station already seen.

    Returns (station_set, rejected).
    """

    logger = util.TaggingLogger(glogger, {'tag': util.epoch_tag(signal.emitter_id, signal.timestamp)})
    station_set = StationSet()
    rejected = []

    for observation in signal.observations:
        station_id = observation.station_id
        if station_id in station_set:
            logger.warning("ignoring repeated observation from station {s}".format(s=station_id))
            rejected.append(Rejection(observation, 'duplicate station'))
            continue

        position = observation.position
        if position is None:
            if registry is None or station_id not in registry:
                logger.warning("ignoring station {s}: position unknown".format(s=station_id))
                rejected.append(Rejection(observation, 'unknown station position'))
                continue
            position = registry.position(station_id)

        if observation.range is not None:
            r = observation.range
        else:
            try:
                r = resolve_range(signal.timestamp, observation.receive_time, station_id=station_id)
            except InvalidTiming as e:
                logger.warning("ignoring station {s}: {e}".format(s=station_id, e=e))
                rejected.append(Rejection(observation, str(e)))
                continue

        try:
            station_set.add(Station(station_id, position[0], position[1], position[2], r, observation.delay))
        except ValueError as e:
            logger.warning("ignoring station {s}: {e}".format(s=station_id, e=e))
            rejected.append(Rejection(observation, str(e)))

    return station_set.freeze(), rejected


def _solve_serially(combination_list, config, expired, store, failed):
    candidates, degenerate, stopped = solver.solve_all(combination_list, config, expired)
    store.extend(candidates)
    failed.extend(degenerate)
    return stopped


def _solve_with_executor(combination_list, config, executor, deadline, clock, expired, store, failed):
    partial = False
    futures = {}
    for combination in combination_list:
        if expired():
            partial = True
            break
        futures[executor.submit(solver.solve_combination, combination, config)] = combination.combination_id

    timeout = None if deadline is None else max(0.0, deadline - clock())
    done, not_done = concurrent.futures.wait(futures, timeout=timeout)
    if not_done:
        partial = True
        for future in not_done:
            future.cancel()

    # merge in id order so the store is reproducible
    for future in sorted(done, key=futures.get):
        try:
            store.add(future.result())
        except DegenerateGeometry as e:
            glogger.debug(str(e))
            failed.append(futures[future])

    return partial


@profile.trackcpu
def locate(signal, config=None, registry=None, executor=None, deadline=None, clock=time.monotonic):
    """Locate the emitter of one signal.

    config: SolverConfig, defaults from tdoa.config if None
    registry: StationRegistry for observations that carry no position
    executor: optional concurrent.futures.Executor to solve combinations on
    deadline: optional time on clock's scale; once reached, no more
      combinations are solved and the estimate is built from what exists,
      marked partial
    clock: callable returning the current time

    Returns an EpochResult. Raises InsufficientStations if too few stations
    survive, NoSolution if no combination yields a candidate.
    """

    if config is None:
        config = tdoa_config.SolverConfig()

    logger = util.TaggingLogger(glogger, {'tag': util.epoch_tag(signal.emitter_id, signal.timestamp)})

    station_set, rejected = build_station_set(signal, registry)
    combination_list = combinations.enumerate_combinations(station_set, config.group_size)

    def expired():
        return deadline is not None and clock() >= deadline

    store = CandidateStore()
    failed = []
    if executor is None:
        partial = _solve_serially(combination_list, config, expired, store, failed)
    else:
        partial = _solve_with_executor(combination_list, config, executor, deadline, clock, expired, store, failed)
    store.seal()

    if partial:
        logger.info("deadline reached after {n} of {t} combinations".format(
            n=len(store) + len(failed), t=len(combination_list)))

    if not len(store):
        raise NoSolution(signal.emitter_id, signal.timestamp, attempted=len(failed))

    estimate = consensus.ConsensusEstimator(config).estimate(signal.emitter_id,
                                                             signal.timestamp,
                                                             station_set,
                                                             store,
                                                             partial=partial)

    logger.debug("{n} stations, {c} candidates, {f} degenerate combinations, confidence {q}".format(
        n=len(station_set), c=len(store), f=len(failed), q=estimate.confidence.value))

    return EpochResult(estimate, store, station_set, tuple(rejected), tuple(failed))
