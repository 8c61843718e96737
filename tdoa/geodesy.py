# -*- mode: python; indent-tabs-mode: nil -*-

"""WGS84 conversions and Cartesian distances."""

import math
import numpy
import scipy.spatial.distance
from .constants import DTOR, RTOD

# WGS84 ellipsoid Earth parameters
WGS84_A = 6378137.0
WGS84_F = 1.0/298.257223563
WGS84_B = WGS84_A * (1 - WGS84_F)
WGS84_ECC_SQ = 1 - WGS84_B * WGS84_B / (WGS84_A * WGS84_A)

# Some derived values
_wgs84_ep2_b = (WGS84_A**2 - WGS84_B**2) / WGS84_B
_wgs84_e2_a = WGS84_ECC_SQ * WGS84_A


def llh2ecef(llh):
    """Converts from WGS84 lat/lon/height (degrees, degrees, metres) to ECEF"""

    lat, lng, alt = llh
    if not -90.0 <= lat <= 90.0:
        raise ValueError('invalid latitude {0}, should be -90 .. 90'.format(lat))

    slat = math.sin(lat * DTOR)
    clat = math.cos(lat * DTOR)
    slng = math.sin(lng * DTOR)
    clng = math.cos(lng * DTOR)

    rn = WGS84_A / math.sqrt(1 - slat * slat * WGS84_ECC_SQ)

    return ((rn + alt) * clat * clng,
            (rn + alt) * clat * slng,
            (rn * (1 - WGS84_ECC_SQ) + alt) * slat)


def ecef2llh(ecef):
    "Converts from ECEF to WGS84 lat/lon/height"

    x, y, z = ecef

    lon = math.atan2(y, x)

    p = math.hypot(x, y)
    th = math.atan2(WGS84_A * z, WGS84_B * p)
    lat = math.atan2(z + _wgs84_ep2_b * math.sin(th)**3,
                     p - _wgs84_e2_a * math.cos(th)**3)

    n = WGS84_A / math.sqrt(1 - WGS84_ECC_SQ * math.sin(lat)**2)
    alt = p / math.cos(lat) - n

    return (lat*RTOD, lon*RTOD, alt)


ecef_distance = scipy.spatial.distance.euclidean


def ranges_from(point, positions):
    """Distances from point to each row of an (n, 3) array of positions."""
    return numpy.linalg.norm(numpy.asarray(positions, dtype=float) - numpy.asarray(point, dtype=float), axis=1)
