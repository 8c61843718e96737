# -*- mode: python; indent-tabs-mode: nil -*-

from decimal import Decimal

import pytest

from tdoa import constants
from tdoa.errors import InvalidTiming
from tdoa.ranging import as_timestamp, resolve_range


def test_as_timestamp_keeps_nanoseconds():
    t = as_timestamp('1700000000.000000001')
    assert t - Decimal(1700000000) == Decimal('1e-9')


def test_as_timestamp_conversions():
    assert as_timestamp(5) == Decimal(5)
    assert as_timestamp(0.1) == Decimal('0.1')
    assert as_timestamp(Decimal('2.5')) == Decimal('2.5')


@pytest.mark.parametrize('bad', [None, True, [1.0]])
def test_as_timestamp_rejects_other_types(bad):
    with pytest.raises(TypeError):
        as_timestamp(bad)


@pytest.mark.parametrize('bad', ['soon', 'nan', 'inf'])
def test_as_timestamp_rejects_bad_values(bad):
    with pytest.raises(ValueError):
        as_timestamp(bad)


def test_range_is_delay_times_c():
    assert resolve_range('100', '101') == pytest.approx(constants.C)
    assert resolve_range(0, Decimal('1e-9')) == pytest.approx(0.299792458)


def test_range_resolves_metres_at_epoch_scale():
    t0 = Decimal('1700000000.123456789')
    # 1ns difference on a 1.7e9 second timestamp is still ~0.3m
    assert resolve_range(t0, t0 + Decimal('1e-9')) == pytest.approx(0.299792458, rel=1e-12)


def test_zero_delay_is_zero_range():
    assert resolve_range('7.5', '7.5') == 0.0


def test_negative_delay_is_invalid_timing():
    with pytest.raises(InvalidTiming) as info:
        resolve_range('10.000001', '10.0', station_id='X')

    assert info.value.station_id == 'X'
    assert info.value.t < info.value.t0
