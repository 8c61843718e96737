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

"""
Optional per-function CPU accounting, enabled by setting TDOA_CPU_PROFILE=1
in the environment. When disabled, trackcpu is the identity.
"""

import os


if not int(os.environ.get('TDOA_CPU_PROFILE', '0')):
    enabled = False

    def trackcpu(f, **kwargs):
        return f

    def dump_cpu_profiles(tofile=None):
        pass
else:
    import sys
    import time
    import operator
    import functools

    _cpu_tracking = []
    enabled = True
    baseline_cpu = time.process_time()
    baseline_wall = time.monotonic()

    def trackcpu(f, name=None, **kwargs):
        if name is None:
            name = f.__module__ + '.' + f.__qualname__

        tracking = [name, 0, 0.0]
        _cpu_tracking.append(tracking)

        @functools.wraps(f)
        def cpu_measurement_wrapper(*args, **kwargs):
            start = time.thread_time()
            try:
                return f(*args, **kwargs)
            finally:
                tracking[1] += 1
                tracking[2] += time.thread_time() - start

        return cpu_measurement_wrapper

    def dump_cpu_profiles(tofile=sys.stderr):
        elapsed_cpu = max(time.process_time() - baseline_cpu, 1e-9)
        elapsed_wall = max(time.monotonic() - baseline_wall, 1e-9)

        print('Elapsed: {wall:.1f}   CPU: {cpu:.1f} ({percent:.0f}%)'.format(
            wall=elapsed_wall,
            cpu=elapsed_cpu,
            percent=100.0 * elapsed_cpu / elapsed_wall), file=tofile)
        print('{rank:4s} {name:50s} {count:8s} {total:8s} {each:8s} {fraction:6s}'.format(
            rank='#',
            name='Function',
            count='Calls',
            total='Total(s)',
            each='Each(us)',
            fraction='Frac'), file=tofile)

        ranked = [t for t in sorted(_cpu_tracking, key=operator.itemgetter(2), reverse=True) if t[1] > 0]
        for rank, (name, count, total) in enumerate(ranked, 1):
            print('{rank:4d} {name:50s} {count:8d} {total:8.3f} {each:8.0f} {fraction:6.1f}'.format(
                rank=rank,
                name=name,
                count=count,
                total=total,
                each=total * 1e6 / count,
                fraction=100.0 * total / elapsed_cpu), file=tofile)

        tofile.flush()
