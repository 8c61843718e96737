# -*- mode: python; indent-tabs-mode: nil -*-

import pickle
from decimal import Decimal

import pytest

from tdoa.errors import DegenerateGeometry, InsufficientStations, InvalidTiming, LocatorError, NoSolution


@pytest.mark.parametrize('error', [
    InvalidTiming(Decimal('2'), Decimal('1'), station_id='A'),
    InsufficientStations(3, 4),
    DegenerateGeometry(12, float('inf')),
    NoSolution('sat-1', Decimal('5'), 15),
])
def test_errors_survive_pickling(error):
    # worker processes send these back to the parent
    copy = pickle.loads(pickle.dumps(error))

    assert type(copy) is type(error)
    assert str(copy) == str(error)
    assert isinstance(copy, LocatorError)
    assert isinstance(copy, ValueError)
