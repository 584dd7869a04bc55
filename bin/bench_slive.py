"""
bench_slive.py: Run the load driver against a local directory or an in-memory
filesystem and print the report.
"""

import argparse
import functools
import logging
import sys

import slive.fs as fs
from slive.config import ConfigError, apply_overrides, load_options
from slive.job import Job
from slive.log import configure_logging
from slive.report import ReportWriter

# Command line flag -> option name
OVERRIDES = [
    ('duration', 'duration'),
    ('seed', 'seed'),
    ('sleep', 'sleep'),
    ('ops', 'ops'),
    ('workers', 'workers'),
    ('base_dir', 'base_dir'),
    ('files', 'files'),
    ('dir_size', 'dir_size'),
    ('block_size', 'block_size'),
    ('write_size', 'write_size'),
    ('append_size', 'append_size'),
    ('read_size', 'read_size'),
    ('replication', 'replication'),
    ('result_file', 'result_file'),
    ('exit_on_error', 'exit_on_error'),
]


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument('-c', '--config', help="YAML option file")
    parser.add_argument('-d', '--duration', type=float, help="Duration of each worker (s)")
    parser.add_argument('-s', '--seed', type=int,
                        help="random seed; worker i uses seed + i")
    parser.add_argument('--sleep', help="sleep range between operations (ms), 'min,max'")
    parser.add_argument('-e', '--exit-on-error', action=argparse.BooleanOptionalAction,
                        help="stop a worker at its first failed operation")
    parser.add_argument('-o', '--ops', type=int,
                        help="total operation ceiling, split between kinds by percent")
    parser.add_argument('-w', '--workers', type=int, help="number of workers")
    parser.add_argument('--base-dir', help="namespace root")
    parser.add_argument('--files', type=int, help="number of files in the namespace")
    parser.add_argument('--dir-size', type=int, help="files per directory")
    parser.add_argument('--block-size', help="block size range, e.g. '64m,64m'")
    parser.add_argument('--write-size', help="create size range")
    parser.add_argument('--append-size', help="append size range")
    parser.add_argument('--read-size', help="read size range")
    parser.add_argument('--replication', help="replication range, e.g. '1,3'")
    parser.add_argument('--result-file', help="report output file name")
    parser.add_argument('--fs', default='local', choices=['local', 'memory'],
                        help="filesystem backend")
    parser.add_argument('--root', default='slive-data', help="root directory of the local backend")
    parser.add_argument('-p', '--processes', type=int, help="worker processes (0 runs inline)")
    parser.add_argument('--progress', action='store_true', help="Display progress bar")
    parser.add_argument('-v', '--verbose', action='store_true', help="log every operation")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else logging.INFO,
                      quiet=[] if args.verbose else ['slive.worker'])

    if args.fs == 'local':
        fs_factory = functools.partial(fs.LocalFileSystem, args.root)
    else:
        fs_factory = fs.MemoryFileSystem

    try:
        options = load_options(args.config) if args.config else {}
        options = apply_overrides(options, dict((option, getattr(args, flag))
                                                for flag, option in OVERRIDES))
        job = Job(options, fs_factory, processes=args.processes, progress=args.progress)
    except ConfigError as e:
        print("error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    outputs = job.run()

    writer = ReportWriter(outputs)
    if job.config.result_file:
        with open(job.config.result_file, 'w') as f:
            writer.write(f)
    else:
        writer.write(sys.stdout)
