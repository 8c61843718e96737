# -*- mode: python; indent-tabs-mode: nil -*-

from decimal import Decimal

import numpy
import pytest

from tdoa import constants
from tdoa.stations import Station, StationSet

# Six stations spread out in all three dimensions, metres
STATION_POSITIONS = {
    'A': (0.0, 0.0, 0.0),
    'B': (60000.0, 0.0, 5000.0),
    'C': (0.0, 60000.0, 12000.0),
    'D': (60000.0, 60000.0, -4000.0),
    'E': (-40000.0, 25000.0, 20000.0),
    'F': (25000.0, -45000.0, -15000.0),
}

EMITTER = numpy.array((12000.0, 18000.0, 9000.0))

T0 = Decimal('1700000000.000000000')


def exact_range(position, emitter=EMITTER):
    return float(numpy.linalg.norm(numpy.array(position) - emitter))


def receive_time(position, emitter=EMITTER, t0=T0):
    """Arrival time of a signal sent from emitter at t0."""
    return t0 + Decimal(repr(exact_range(position, emitter))) / constants.C_DECIMAL


def make_station(station_id, emitter=EMITTER, delay=None):
    x, y, z = STATION_POSITIONS[station_id]
    return Station(station_id, x, y, z, exact_range((x, y, z), emitter), delay)


@pytest.fixture
def station_set():
    return StationSet(make_station(s, delay=0.1 * n) for n, s in enumerate(sorted(STATION_POSITIONS), 1)).freeze()
