# -*- mode: python; indent-tabs-mode: nil -*-

import numpy.testing
import pytest

from tdoa import geodesy


@pytest.mark.parametrize('llh', [(0.0, 0.0, 0.0), (51.5, -0.12, 45.0), (-33.9, 151.2, 1200.0), (89.0, 10.0, 0.0)])
def test_llh_round_trip(llh):
    lat, lon, alt = geodesy.ecef2llh(geodesy.llh2ecef(llh))
    numpy.testing.assert_allclose((lat, lon), llh[:2], atol=1e-7)
    assert alt == pytest.approx(llh[2], abs=1e-2)


def test_equator():
    numpy.testing.assert_allclose(geodesy.llh2ecef((0.0, 90.0, 0.0)), (0.0, geodesy.WGS84_A, 0.0), atol=1e-6)


def test_bad_latitude():
    with pytest.raises(ValueError):
        geodesy.llh2ecef((91.0, 0.0, 0.0))


def test_ranges_from():
    numpy.testing.assert_allclose(geodesy.ranges_from((0, 0, 0), [(3, 4, 0), (0, 0, -2)]), (5.0, 2.0))
    assert geodesy.ecef_distance((1, 1, 1), (1, 1, 4)) == pytest.approx(3.0)
