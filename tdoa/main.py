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
Top level application object, arg parsing, etc.
"""

import argparse
import concurrent.futures
import logging
import sys

from tdoa import config, epochtrack, output, profile, registry, replay


def positive_float(s):
    try:
        v = float(s)
        if v <= 0:
            raise ValueError()
        return v
    except ValueError:
        raise argparse.ArgumentTypeError("{} should be a positive number".format(s))


def group_size(s):
    try:
        v = int(s)
        if v < 4:
            raise ValueError()
        return v
    except ValueError:
        raise argparse.ArgumentTypeError("{} should be an integer of at least 4".format(s))


class LocatorApp(object):
    """Replays recorded observations through the locator.

    Derive from this if you want to add options, etc.
    """

    def __init__(self):
        self.tracker = None
        self.executor = None

    def add_input_args(self, parser):
        parser.add_argument('observations',
                            help="JSON-lines observation files to replay.",
                            nargs='+')
        parser.add_argument('--stations',
                            help="JSON file of station positions, for observations that don't carry one.")

    def add_solver_args(self, parser):
        parser.add_argument('--group-size',
                            help="number of stations solved together (default: %(default)s).",
                            type=group_size,
                            default=config.GROUP_SIZE)
        parser.add_argument('--cluster-distance',
                            help="maximum distance between linked candidates, metres (default: %(default)s).",
                            type=positive_float,
                            default=config.CLUSTER_DISTANCE_THRESHOLD)
        parser.add_argument('--min-cluster-size',
                            help="smallest winning cluster accepted as high confidence (default: %(default)s).",
                            type=int,
                            default=config.MIN_CLUSTER_SIZE)
        parser.add_argument('--spread-tolerance',
                            help="largest cluster spread accepted as high confidence, metres (default: %(default)s).",
                            type=positive_float,
                            default=config.CLUSTER_SPREAD_TOLERANCE)
        parser.add_argument('--refine',
                            help="polish each candidate with a non-linear least-squares fit.",
                            action='store_true',
                            default=config.REFINE)

    def add_output_args(self, parser):
        parser.add_argument('--write-csv',
                            help="write estimates in CSV format to a local file.",
                            action='append',
                            default=[])
        parser.add_argument('--geodetic',
                            help="positions are ECEF; add lat/lon/alt columns to CSV output.",
                            action='store_true',
                            default=False)
        parser.add_argument('--dump-candidates',
                            help="dump every epoch's candidates in json format to a file.")
        parser.add_argument('--verbose',
                            help="log stations and candidates of every epoch, not just the estimate.",
                            action='store_true',
                            default=False)

    def add_util_args(self, parser):
        parser.add_argument('--workers',
                            help="solve combinations on this many worker processes (default: solve in-process).",
                            type=int,
                            default=0)
        parser.add_argument('--deadline',
                            help="finalise an epoch on the candidates found so far after this many seconds.",
                            type=positive_float)

    def make_arg_parser(self):
        parser = argparse.ArgumentParser(description="TDOA multilateration of recorded observations.")

        self.add_input_args(parser.add_argument_group('Input'))
        self.add_solver_args(parser.add_argument_group('Solver options'))
        self.add_output_args(parser.add_argument_group('Output methods'))
        self.add_util_args(parser.add_argument_group('Utility options'))

        return parser

    def make_solver_config(self, args):
        return config.SolverConfig(group_size=args.group_size,
                                   cluster_distance_threshold=args.cluster_distance,
                                   min_cluster_size=args.min_cluster_size,
                                   cluster_spread_tolerance=args.spread_tolerance,
                                   refine=args.refine)

    def make_outputs(self, args):
        outputs = [output.LogReporter(self.tracker, verbose=args.verbose)]

        for filename in args.write_csv:
            outputs.append(output.LocalCSVWriter(self.tracker, filename, geodetic=args.geodetic))

        if args.dump_candidates:
            outputs.append(output.CandidateDumper(self.tracker, args.dump_candidates))

        return outputs

    def run(self, argv=None):
        args = self.make_arg_parser().parse_args(argv)

        try:
            solver_config = self.make_solver_config(args)
        except ValueError as e:
            logging.error("Bad solver options: {0}".format(e))
            return 2

        station_registry = registry.StationRegistry.load(args.stations) if args.stations else None

        if args.workers > 0:
            self.executor = concurrent.futures.ProcessPoolExecutor(max_workers=args.workers)

        self.tracker = epochtrack.EpochTracker(solver_config=solver_config,
                                               registry=station_registry,
                                               executor=self.executor,
                                               epoch_timeout=args.deadline)
        outputs = self.make_outputs(args)

        try:
            for filename in args.observations:
                replay.replay_file(filename, self.tracker)
            self.tracker.flush()
        finally:
            for o in reversed(outputs):
                o.close()
            self.tracker.close()
            if self.executor is not None:
                self.executor.shutdown()

        logging.info("{n} epochs located, {i} with too few stations, {u} unsolvable".format(
            n=self.tracker.located_count,
            i=self.tracker.insufficient_count,
            u=self.tracker.unsolved_count))

        if profile.enabled:
            profile.dump_cpu_profiles(sys.stderr)

        return 0
