# -*- mode: python; indent-tabs-mode: nil -*-

import asyncio

import numpy.testing

from tdoa.epochtrack import EpochTracker
from tdoa.ranging import as_timestamp

from conftest import EMITTER, STATION_POSITIONS, T0, receive_time


def feed(tracker, emitter_id, t0, station_ids):
    for station_id in station_ids:
        position = STATION_POSITIONS[station_id]
        tracker.observation(emitter_id, t0, station_id,
                            position=position,
                            receive_time=receive_time(position, t0=as_timestamp(t0)))


def test_groups_by_emitter_and_time():
    tracker = EpochTracker()
    results = []
    tracker.add_output_handler(results.append)

    # interleave two transmissions
    feed(tracker, 'sat-1', T0, 'ABC')
    feed(tracker, 'sat-2', T0 + 1, 'ABCDEF')
    feed(tracker, 'sat-1', T0, 'DEF')
    assert len(tracker.pending) == 2

    tracker.flush()

    assert not tracker.pending
    assert [r.estimate.emitter_id for r in results] == ['sat-1', 'sat-2']
    assert results[1].estimate.timestamp == T0 + 1
    for r in results:
        numpy.testing.assert_allclose((r.estimate.x, r.estimate.y, r.estimate.z), EMITTER, rtol=1e-6, atol=1e-3)
    assert tracker.located_count == 2


def test_string_and_decimal_times_share_a_group():
    tracker = EpochTracker()
    feed(tracker, 'sat-1', T0, 'AB')
    feed(tracker, 'sat-1', str(T0), 'CD')

    assert len(tracker.pending) == 1
    assert len(tracker.pending[('sat-1', T0)].signal) == 4


def test_failures_are_counted_not_raised():
    tracker = EpochTracker()
    results = []
    tracker.add_output_handler(results.append)

    feed(tracker, 'sat-1', T0, 'ABC')
    tracker.flush()

    assert results == []
    assert tracker.insufficient_count == 1
    assert tracker.located_count == 0


def test_broken_handler_does_not_stop_others():
    tracker = EpochTracker()
    results = []

    def broken(result):
        raise RuntimeError('boom')

    tracker.add_output_handler(broken)
    tracker.add_output_handler(results.append)

    feed(tracker, 'sat-1', T0, 'ABCDEF')
    tracker.flush()

    assert len(results) == 1


def test_resolves_after_delay_on_loop():
    loop = asyncio.new_event_loop()
    try:
        tracker = EpochTracker(loop=loop, delay=0.01)
        results = []
        tracker.add_output_handler(results.append)

        feed(tracker, 'sat-1', T0, 'ABCDEF')
        assert results == []

        loop.run_until_complete(asyncio.sleep(0.1))

        assert len(results) == 1
        assert not tracker.pending
    finally:
        loop.close()


def test_close_cancels_pending():
    loop = asyncio.new_event_loop()
    try:
        tracker = EpochTracker(loop=loop, delay=0.01)
        results = []
        tracker.add_output_handler(results.append)

        feed(tracker, 'sat-1', T0, 'ABCDEF')
        tracker.close()
        loop.run_until_complete(asyncio.sleep(0.05))

        assert results == []
    finally:
        loop.close()
