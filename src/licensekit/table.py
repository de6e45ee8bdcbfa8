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

"""Read and write the ``LICENSE-3rdparty.csv`` table.

The file is plain CSV with a fixed header and one row per record::

    Component,Origin,License,Copyright
    serde,https://github.com/serde-rs/serde,MIT OR Apache-2.0,"Copyright (c) 2014 ..."

Writes go to a temporary file in the destination directory that is then
renamed over the destination, so readers never observe a half-written
table.
"""

from __future__ import annotations

import csv
import json
import os
import tempfile
from collections.abc import Iterable
from io import StringIO
from pathlib import Path
from typing import Final, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from licensekit._types import Record
from licensekit.errors import TableError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'DEST_FILENAME',
    'HEADER',
    'format_records_table',
    'load_table',
    'print_records_table',
    'read_table',
    'records_to_json',
    'write_table',
    'write_table_atomic',
]

#: Well-known name of the persisted table.
DEST_FILENAME: Final[str] = 'LICENSE-3rdparty.csv'

#: Column names, in file order.
HEADER: Final[tuple[str, ...]] = ('Component', 'Origin', 'License', 'Copyright')


def write_table(records: Iterable[Record], stream: TextIO) -> None:
    """Write the header and one CSV row per record to *stream*."""
    writer = csv.writer(stream, lineterminator='\n')
    writer.writerow(HEADER)
    for record in records:
        writer.writerow((record.component, record.origin, record.license, record.copyright))


def read_table(stream: TextIO, *, source: str = DEST_FILENAME) -> list[Record]:
    """Parse records written by :func:`write_table`.

    Raises:
        TableError: If the header or a row is malformed.
    """
    reader = csv.reader(stream)
    try:
        header = next(reader, None)
        if header is None:
            return []
        if tuple(header) != HEADER:
            raise TableError(f'Could not read current {source!r}: unexpected header {header!r}')
        records: list[Record] = []
        for row in reader:
            if len(row) != len(HEADER):
                raise TableError(
                    f'Could not read current {source!r}: line {reader.line_num} has {len(row)} fields, '
                    f'expected {len(HEADER)}'
                )
            records.append(Record(*row))
    except csv.Error as exc:
        raise TableError(f'Could not read current {source!r}: {exc}') from exc
    return records


def load_table(path: Path) -> set[Record]:
    """Load the persisted table as a set; a missing file is empty.

    Raises:
        TableError: If the file exists but cannot be read or parsed.
    """
    try:
        with path.open(encoding='utf-8', newline='') as f:
            records = read_table(f, source=str(path))
    except FileNotFoundError:
        logger.debug('table_not_found', path=str(path))
        return set()
    except (OSError, UnicodeDecodeError) as exc:
        raise TableError(f'Could not read {str(path)!r}: {exc}') from exc
    logger.debug('loaded_table', path=str(path), records=len(records))
    return set(records)


def write_table_atomic(records: Iterable[Record], path: Path) -> None:
    """Persist the table to *path* via temporary file and rename.

    On any failure the temporary file is removed and *path* is left as
    it was.

    Raises:
        TableError: If the destination directory cannot be written.
    """
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f'{path.name}.tmp.', dir=path.parent)
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            write_table(records, f)
        # mkstemp creates the file 0600.
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        if isinstance(exc, OSError):
            raise TableError(f'Could not write {str(path)!r}: {exc}') from exc
        raise
    logger.info('wrote_license_table', path=str(path))


def records_to_json(records: Iterable[Record], *, indent: int = 2) -> str:
    """Serialize records to a JSON list keyed by the column names."""
    rows = [dict(zip(HEADER, (r.component, r.origin, r.license, r.copyright))) for r in records]
    return json.dumps(rows, indent=indent)


def print_records_table(records: Iterable[Record], console: Console | None = None) -> None:
    """Print records as a Rich table.

    Args:
        records: Records to show.
        console: Rich :class:`Console` to print to.  When ``None``,
            a default ``Console()`` is created (auto-detects TTY).
    """
    if console is None:
        console = Console()

    table = Table(
        show_header=True,
        header_style='bold',
        show_edge=False,
        pad_edge=False,
        expand=True,
    )
    table.add_column(HEADER[0], min_width=16, style='bold')
    table.add_column(HEADER[1], ratio=2)
    table.add_column(HEADER[2], min_width=12)
    table.add_column(HEADER[3], ratio=2, style='dim')

    count = 0
    for record in records:
        cells = (record.component, record.origin, record.license, record.copyright)
        table.add_row(*(escape(value) for value in cells))
        count += 1

    console.print(table)
    console.print(f'\n{count} component(s).')


def format_records_table(records: Iterable[Record], *, color: bool = False) -> str:
    """Render :func:`print_records_table` output to a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, width=160)
    print_records_table(records, console=console)
    return buf.getvalue().rstrip('\n')
