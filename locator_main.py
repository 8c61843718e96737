#!/usr/bin/env python3
# -*- mode: python; indent-tabs-mode: nil -*-

# Part of tdoa-locator: a TDOA multilateration library
# Copyright (C) 2015  Oliver Jowett <oliver@mutability.co.uk>
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

import logging
import sys

import tdoa.main


def main():
    logging.basicConfig(level=logging.INFO,
                        style='{',
                        format='{asctime}.{msecs:03.0f}  {levelname:8s} {name:20s} {message}',
                        datefmt='%Y%m%d %H:%M:%S')

    return tdoa.main.LocatorApp().run()


if __name__ == '__main__':
    sys.exit(main())
