# -*- mode: python; indent-tabs-mode: nil -*-

import math
from decimal import Decimal

# signal propagation speed in metres per second (vacuum; no atmospheric model)
C = 299792458

# exact copy for Decimal timestamp arithmetic
C_DECIMAL = Decimal(C)

# degrees to radians
DTOR = math.pi / 180.0
# radians to degrees
RTOD = 180.0 / math.pi

# smallest meaningful group: three coordinates from three sphere differences
MIN_GROUP_SIZE = 4
