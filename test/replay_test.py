# -*- mode: python; indent-tabs-mode: nil -*-

import io
import json
from decimal import Decimal

import pytest

from tdoa.epochtrack import EpochTracker
from tdoa.replay import parse_observation, read_observations, replay_file

from conftest import STATION_POSITIONS, T0, receive_time


def test_parse_keeps_timestamp_digits():
    obs = parse_observation('{"emitter": "sat-1", "t0": 1700000000.000000001, "station": "A", '
                            '"position": [1.5, 2, 3], "time": 1700000000.000071234, "delay": 0.25}')

    assert obs['timestamp'] == Decimal('1700000000.000000001')
    assert obs['receive_time'] == Decimal('1700000000.000071234')
    assert obs['position'] == (1.5, 2.0, 3.0)
    assert obs['delay'] == 0.25
    assert obs['range'] is None


@pytest.mark.parametrize('line', [
    'not json',
    '[1, 2, 3]',
    '{"t0": 1, "station": "A", "time": 2}',
    '{"emitter": "x", "t0": 1, "station": "A"}',
])
def test_parse_rejects_malformed(line):
    with pytest.raises(ValueError):
        parse_observation(line)


def test_read_skips_bad_lines():
    f = io.StringIO('# comment\n'
                    '\n'
                    '{"emitter": "x", "t0": 1, "station": "A", "range": 10.0}\n'
                    'garbage\n'
                    '{"emitter": "x", "t0": 1, "station": "B", "range": 20.0}\n')

    assert [o['station_id'] for o in read_observations(f)] == ['A', 'B']


def test_replay_file(tmp_path):
    path = tmp_path / 'observations.jsonl'
    with open(str(path), 'w') as f:
        for station_id, position in sorted(STATION_POSITIONS.items()):
            json.dump({'emitter': 'sat-1',
                       't0': str(T0),
                       'station': station_id,
                       'position': list(position),
                       'time': str(receive_time(position))}, f)
            f.write('\n')

    tracker = EpochTracker()
    results = []
    tracker.add_output_handler(results.append)

    assert replay_file(str(path), tracker) == 6
    tracker.flush()

    assert len(results) == 1
    assert results[0].estimate.cluster_size == 15
