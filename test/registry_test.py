# -*- mode: python; indent-tabs-mode: nil -*-

import json

import pytest

from tdoa import geodesy
from tdoa.registry import StationRegistry


def test_load(tmp_path):
    path = tmp_path / 'stations.json'
    path.write_text(json.dumps({'A': {'ecef': [1.0, 2.0, 3.0]},
                                'B': {'llh': [0.0, 0.0, 0.0]}}))

    registry = StationRegistry.load(str(path))

    assert len(registry) == 2
    assert registry.position('A') == (1.0, 2.0, 3.0)
    assert registry.position('B') == pytest.approx((geodesy.WGS84_A, 0.0, 0.0))
    assert 'C' not in registry


def test_load_rejects_entries_without_position(tmp_path):
    path = tmp_path / 'stations.json'
    path.write_text(json.dumps({'A': {'somewhere': True}}))

    with pytest.raises(ValueError):
        StationRegistry.load(str(path))


def test_add_validates():
    with pytest.raises(ValueError):
        StationRegistry().add('A', (1.0, 2.0))
