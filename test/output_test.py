# -*- mode: python; indent-tabs-mode: nil -*-

import json
from decimal import Decimal
import logging

import pytest

from tdoa import output
from tdoa.epoch import Signal, locate
from tdoa.epochtrack import EpochTracker

from conftest import STATION_POSITIONS, T0, receive_time


@pytest.fixture
def result():
    signal = Signal('sat-1', T0)
    for n, (station_id, position) in enumerate(sorted(STATION_POSITIONS.items()), 1):
        signal.add_observation(station_id, position=position, receive_time=receive_time(position), delay=0.5 * n)
    return locate(signal)


def test_csv_quote():
    assert output.csv_quote(None) == ''
    assert output.csv_quote('plain') == 'plain'
    assert output.csv_quote('A,B') == '"A,B"'
    assert output.csv_quote('say "hi"') == '"say ""hi"""'


def test_format_time():
    assert output.format_time(3661.25) == '01:01:01.250'
    assert output.format_time(Decimal('1700000000.9996')) == '22:13:20.999'
    assert output.format_date(0) == '1970/01/01'


def test_csv_writer(tmp_path, result):
    path = str(tmp_path / 'out.csv')
    tracker = EpochTracker()
    writer = output.LocalCSVWriter(tracker, path)
    writer.write_result(result)
    writer.close()

    with open(path) as f:
        line = f.readline().rstrip('\n')

    fields = line.split(',')
    assert fields[0] == str(T0)
    assert fields[1] == 'sat-1'
    assert fields[5] == 'high'
    assert fields[6] == '0'
    assert fields[7] == '15'
    assert line.count('"A,B,C,D,E,F"') == 1
    assert fields[-3:] == ['0.500', '1.750', '3.000']
    assert writer.write_result not in tracker.output_handlers


def test_candidate_dumper(tmp_path, result):
    path = str(tmp_path / 'candidates.jsonl')
    tracker = EpochTracker()
    dumper = output.CandidateDumper(tracker, path)
    dumper.write_result(result)
    dumper.close()

    with open(path) as f:
        state = json.loads(f.readline())

    assert state['emitter'] == 'sat-1'
    assert state['t0'] == str(T0)
    assert len(state['stations']) == 6
    assert [c[4] for c in state['candidates']] == list(range(15))
    assert state['estimate']['confidence'] == 'high'


def test_describe(result):
    assert output.describe_stations(result.station_set)[0].startswith('A: 0.0, 0.0, 0.0, ')

    candidates = output.describe_candidates(result.candidates)
    assert candidates[0] == '15 candidate positions:'
    assert candidates[-1].startswith('Average position: 12000.0, 18000.0, 9000.0')

    estimate = output.describe_estimate(result.estimate)
    assert 'confidence=high' in estimate[0]
    assert estimate[1] == 'Delays after clustering: mean 1.750 min 0.500 max 3.000'


def test_describe_signal():
    signal = Signal('sat-1', T0)
    signal.add_observation('A', position=(1, 2, 3), receive_time=T0)
    signal.add_observation('B', range=42.0)

    lines = output.describe_signal(signal)
    assert lines[0] == 'Emitter sat-1, sent at {0}'.format(T0)
    assert lines[1].startswith('1. Station A at (1.0, 2.0, 3.0)')
    assert 'registry position' in lines[2]
    assert 'range 42.0' in lines[2]


def test_log_reporter(result, caplog):
    tracker = EpochTracker()
    reporter = output.LogReporter(tracker, verbose=True)

    with caplog.at_level(logging.INFO, logger='report'):
        for handler in tracker.output_handlers:
            handler(result)

    reporter.close()
    assert any('Delays before clustering' in r.getMessage() for r in caplog.records)
    assert any('Average position' in r.getMessage() for r in caplog.records)
    assert not tracker.output_handlers
