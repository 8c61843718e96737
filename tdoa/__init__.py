# -*- mode: python; indent-tabs-mode: nil -*-

# Part of tdoa-locator: a TDOA multilateration library
# Copyright (C) 2026  The tdoa-locator authors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""
Locate a transmitter from the arrival times of its signal at fixed ground
stations: resolve ranges, solve every station combination by sphere
intersection, and reduce the candidates to one consensus estimate per epoch.
"""

__version__ = '0.1.0'
