# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for licensekit.

Exit codes:
    0  Success.
    1  A configuration, provider, attribution, or drift error occurred.

Usage::

    licensekit dump                  # print the CSV table to stdout
    licensekit dump --format table   # human-readable table
    licensekit write                 # (re)write LICENSE-3rdparty.csv
    licensekit check                 # fail if LICENSE-3rdparty.csv is stale
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from rich.console import Console

from licensekit import __version__
from licensekit._types import Record
from licensekit.config import CONFIG_FILENAME
from licensekit.drift import check_records, print_mismatches
from licensekit.errors import DriftError, LicenseToolError
from licensekit.logging import configure_logging, get_logger
from licensekit.pipeline import build_everything
from licensekit.table import (
    DEST_FILENAME,
    load_table,
    print_records_table,
    records_to_json,
    write_table,
    write_table_atomic,
)

logger = get_logger(__name__)

__all__ = [
    'build_parser',
    'main',
]


def _cmd_dump(args: argparse.Namespace, records: list[Record]) -> int:
    if args.format == 'table':
        print_records_table(records)
    elif args.format == 'json':
        sys.stdout.write(records_to_json(records) + '\n')
    else:
        write_table(records, sys.stdout)
    return 0


def _cmd_write(args: argparse.Namespace, records: list[Record]) -> int:
    write_table_atomic(records, args.output)
    return 0


def _cmd_check(args: argparse.Namespace, records: list[Record]) -> int:
    persisted = load_table(args.output)
    try:
        check_records(records, persisted, filename=str(args.output))
    except DriftError as exc:
        print_mismatches(exc.mismatches, exc.filename, console=Console())
        raise
    return 0


_COMMANDS: dict[str, Callable[[argparse.Namespace, list[Record]], int]] = {
    'dump': _cmd_dump,
    'write': _cmd_write,
    'check': _cmd_check,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``licensekit`` command."""
    parser = argparse.ArgumentParser(
        prog='licensekit',
        description='Generate and check the LICENSE-3rdparty.csv file for a Cargo workspace.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        '-c',
        '--config',
        type=Path,
        metavar='FILENAME',
        help=f'Load a configuration file containing package overrides. Defaults to "{CONFIG_FILENAME}".',
    )
    parser.add_argument(
        '--manifest-path',
        type=Path,
        metavar='PATH',
        help='Path to Cargo.toml. Defaults to "Cargo.toml".',
    )
    parser.add_argument(
        '-o',
        '--output',
        type=Path,
        default=Path(DEST_FILENAME),
        metavar='FILENAME',
        help=f'License table written by "write" and compared by "check". Defaults to "{DEST_FILENAME}".',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log JSON lines instead of console output.')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND', required=True)
    dump = subparsers.add_parser('dump', help='Dump the generated license data to standard output.')
    dump.add_argument(
        '--format',
        choices=('csv', 'table', 'json'),
        default='csv',
        help='Output format. Defaults to "csv".',
    )
    subparsers.add_parser('write', help='Write the generated license data to the file.')
    subparsers.add_parser('check', help='Check that the license data is up to date.')
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        records = build_everything(args.config, args.manifest_path)
        return _COMMANDS[args.command](args, records)
    except LicenseToolError as exc:
        logger.error('licensekit_failed', command=args.command, error=str(exc))
        return 1
