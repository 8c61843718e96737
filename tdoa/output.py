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
Various output methods for located epochs.

Everything here only reads the results it is given; nothing in the
locating pipeline prints or formats anything itself.
"""

import json
import logging
import math
import time

from tdoa import geodesy
from tdoa.stations import delay_stats


def format_time(timestamp):
    timestamp = float(timestamp)
    return time.strftime("%H:%M:%S", time.gmtime(timestamp)) + ".{0:03d}".format(int(math.modf(timestamp)[0] * 1000))


def format_date(timestamp):
    return time.strftime("%Y/%m/%d", time.gmtime(float(timestamp)))


def csv_quote(s):
    if s is None:
        return ''
    if s.find('\n') == -1 and s.find('"') == -1 and s.find(',') == -1:
        return s
    else:
        return '"' + s.replace('"', '""') + '"'


def _opt(value, fmt='{0:.3f}'):
    return '' if value is None else fmt.format(value)


def describe_delays(label, stats):
    if stats is None:
        return '{label}: no delays'.format(label=label)
    return '{label}: mean {s.mean:.3f} min {s.min:.3f} max {s.max:.3f}'.format(label=label, s=stats)


def describe_signal(signal):
    lines = ['Emitter {e}, sent at {t}'.format(e=signal.emitter_id, t=signal.timestamp)]
    for n, o in enumerate(signal.observations, 1):
        if o.position is None:
            where = 'registry position'
        else:
            where = '({p[0]:.1f}, {p[1]:.1f}, {p[2]:.1f})'.format(p=o.position)
        lines.append('{n}. Station {s} at {w}, received {t}, range {r}, delay {d}'.format(
            n=n,
            s=o.station_id,
            w=where,
            t=o.receive_time,
            r=_opt(o.range, '{0:.1f}') or '-',
            d=_opt(o.delay) or '-'))
    return lines


def describe_stations(station_set):
    return ['{s.station_id}: {s.x:.1f}, {s.y:.1f}, {s.z:.1f}, {s.range:.1f}'.format(s=s) for s in station_set]


def describe_candidates(store):
    lines = ['{n} candidate positions:'.format(n=len(store))]
    for c in store:
        lines.append('  #{c.combination_id}: {c.x:.1f}, {c.y:.1f}, {c.z:.1f} (residual {c.residual:.2f}m)'.format(c=c))
    if len(store):
        x, y, z = store.centroid()
        lines.append('Average position: {0:.1f}, {1:.1f}, {2:.1f}'.format(x, y, z))
    return lines


def describe_estimate(estimate):
    return ['{e} {d} {t}: {x:.1f}, {y:.1f}, {z:.1f} confidence={c}{p} cluster={n}/{m} spread={s:.1f}m'.format(
        e=estimate.emitter_id,
        d=format_date(estimate.timestamp),
        t=format_time(estimate.timestamp),
        x=estimate.x,
        y=estimate.y,
        z=estimate.z,
        c=estimate.confidence.value,
        p=' (partial)' if estimate.partial else '',
        n=estimate.cluster_size,
        m=estimate.candidate_count,
        s=estimate.spread),
            describe_delays('Delays after clustering', estimate.delay_stats)]


class LogReporter(object):
    """Logs a summary of every located epoch; with verbose, also the
    stations and every candidate."""

    def __init__(self, tracker, verbose=False):
        self.logger = logging.getLogger("report")
        self.tracker = tracker
        self.verbose = verbose
        self.tracker.add_output_handler(self.report)

    def close(self):
        self.tracker.remove_output_handler(self.report)

    def report(self, result):
        if self.verbose:
            for line in describe_stations(result.station_set):
                self.logger.info(line)
            self.logger.info(describe_delays('Delays before clustering', delay_stats(result.station_set)))
            for line in describe_candidates(result.candidates):
                self.logger.info(line)

        for line in describe_estimate(result.estimate):
            self.logger.info(line)


class LocalCSVWriter(object):
    """Writes located epochs to a local CSV file"""

    TEMPLATE = '{t},{emitter},{x:.3f},{y:.3f},{z:.3f},{confidence},{partial},{n},{m},{spread:.3f},{stations},{dmin},{dmean},{dmax}\n'  # noqa
    GTEMPLATE = '{t},{emitter},{x:.3f},{y:.3f},{z:.3f},{confidence},{partial},{n},{m},{spread:.3f},{stations},{dmin},{dmean},{dmax},{lat:.6f},{lon:.6f},{alt:.1f}\n'  # noqa

    def __init__(self, tracker, filename, geodetic=False):
        self.logger = logging.getLogger("csv")
        self.tracker = tracker
        self.filename = filename
        self.geodetic = geodetic
        self.f = open(filename, 'a')
        self.tracker.add_output_handler(self.write_result)

    def close(self):
        self.tracker.remove_output_handler(self.write_result)
        self.f.close()

    def reopen(self):
        try:
            self.f.close()
            self.f = open(self.filename, 'a')
            self.logger.info("Reopened {filename}".format(filename=self.filename))
        except Exception:
            self.logger.exception("Failed to reopen {filename}".format(filename=self.filename))

    def write_result(self, result):
        try:
            estimate = result.estimate
            stats = estimate.delay_stats
            fields = dict(t=estimate.timestamp,
                          emitter=csv_quote(str(estimate.emitter_id)),
                          x=estimate.x,
                          y=estimate.y,
                          z=estimate.z,
                          confidence=estimate.confidence.value,
                          partial=1 if estimate.partial else 0,
                          n=estimate.cluster_size,
                          m=estimate.candidate_count,
                          spread=estimate.spread,
                          stations=csv_quote(','.join(str(s) for s in estimate.contributing_station_ids)),
                          dmin=_opt(stats and stats.min),
                          dmean=_opt(stats and stats.mean),
                          dmax=_opt(stats and stats.max))

            if self.geodetic:
                lat, lon, alt = geodesy.ecef2llh((estimate.x, estimate.y, estimate.z))
                line = self.GTEMPLATE.format(lat=lat, lon=lon, alt=alt, **fields)
            else:
                line = self.TEMPLATE.format(**fields)

            self.f.write(line)

        except Exception:
            self.logger.exception("Failed to write result")
            # swallow the exception so we don't affect our caller


def candidates_to_json(result):
    """A JSON-friendly snapshot of one epoch's stations, candidates and
    estimate, for replaying the consensus step offline."""

    estimate = result.estimate
    return {
        'emitter': estimate.emitter_id,
        't0': str(estimate.timestamp),
        'stations': [[s.station_id, s.x, s.y, s.z, s.range, s.delay] for s in result.station_set],
        'candidates': [[c.x, c.y, c.z, c.range, c.combination_id, c.residual, list(c.station_ids)]
                       for c in result.candidates],
        'failed': list(result.failed_combinations),
        'estimate': {
            'position': [estimate.x, estimate.y, estimate.z],
            'confidence': estimate.confidence.value,
            'partial': estimate.partial,
            'stations': list(estimate.contributing_station_ids),
            'delays': None if estimate.delay_stats is None else list(estimate.delay_stats),
        },
    }


class CandidateDumper(object):
    """Appends candidates_to_json() of each located epoch to a file, one
    JSON object per line."""

    def __init__(self, tracker, filename):
        self.logger = logging.getLogger("dump")
        self.tracker = tracker
        self.f = open(filename, 'a')
        self.tracker.add_output_handler(self.write_result)

    def close(self):
        self.tracker.remove_output_handler(self.write_result)
        self.f.close()

    def write_result(self, result):
        try:
            json.dump(candidates_to_json(result), self.f)
            self.f.write('\n')
        except Exception:
            self.logger.exception("Failed to dump candidates")
