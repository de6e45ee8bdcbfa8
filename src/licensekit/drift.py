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

"""Detect drift between a computed license table and the committed one.

Comparison uses whole-record equality: a freshly computed record either
has an exact match in the persisted table or it is reported as *missing
or changed*. Persisted records left without a match are *extraneous*.
Every mismatch is collected before failing.

Usage::

    from licensekit.drift import check_records

    check_records(fresh, load_table(Path('LICENSE-3rdparty.csv')))
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from io import StringIO

from rich.console import Console
from rich.markup import escape

from licensekit._types import Record
from licensekit.errors import DriftError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'Mismatch',
    'MismatchKind',
    'check_records',
    'compare_records',
    'format_mismatches',
    'print_mismatches',
]


class MismatchKind(str, enum.Enum):
    """How a record disagrees with the persisted table."""

    MISSING_OR_CHANGED = 'missing_or_changed'
    EXTRANEOUS = 'extraneous'


@dataclass(frozen=True)
class Mismatch:
    """A single discrepancy between fresh and persisted records.

    Attributes:
        kind: The kind of discrepancy.
        component: Component name of the offending record.
    """

    kind: MismatchKind
    component: str

    @property
    def message(self) -> str:
        """Human-readable description of the mismatch."""
        if self.kind == MismatchKind.MISSING_OR_CHANGED:
            return f'Record for {self.component!r} is missing or changed.'
        return f'Extraneous record for {self.component!r}.'


def compare_records(fresh: Iterable[Record], persisted: Iterable[Record]) -> list[Mismatch]:
    """Compare records with set semantics.

    Args:
        fresh: Records computed from the current dependency graph.
        persisted: Records loaded from the committed table.

    Returns:
        Missing-or-changed mismatches in *fresh* order, followed by
        extraneous mismatches in record order.
    """
    remaining = set(persisted)
    mismatches: list[Mismatch] = []
    for record in fresh:
        if record in remaining:
            remaining.remove(record)
        else:
            mismatches.append(Mismatch(MismatchKind.MISSING_OR_CHANGED, record.component))
    mismatches.extend(Mismatch(MismatchKind.EXTRANEOUS, record.component) for record in sorted(remaining))
    return mismatches


def check_records(
    fresh: Iterable[Record],
    persisted: Iterable[Record],
    *,
    filename: str = 'LICENSE-3rdparty.csv',
) -> None:
    """Fail if the persisted records differ from the fresh ones.

    Raises:
        DriftError: Carrying every mismatch, if there is at least one.
    """
    mismatches = compare_records(fresh, persisted)
    for mismatch in mismatches:
        logger.debug('record_mismatch', kind=mismatch.kind.value, component=mismatch.component)
    if mismatches:
        raise DriftError(filename, mismatches)
    logger.info('license_table_up_to_date', filename=filename)


def print_mismatches(
    mismatches: list[Mismatch],
    filename: str,
    console: Console | None = None,
) -> None:
    """Print mismatches as Rust-style diagnostics with Rich.

    Args:
        mismatches: Mismatches from :func:`compare_records`.
        filename: Name of the persisted table, for the summary line.
        console: Rich :class:`Console` to print to.  When ``None``,
            a default ``Console()`` is created (auto-detects TTY).
    """
    if console is None:
        console = Console()

    for mismatch in mismatches:
        if mismatch.kind == MismatchKind.MISSING_OR_CHANGED:
            console.print(f'[bold red]error\\[{mismatch.kind.value}][/][bold]: {escape(mismatch.message)}[/]')
        else:
            console.print(f'[bold yellow]error\\[{mismatch.kind.value}][/][bold]: {escape(mismatch.message)}[/]')

    if mismatches:
        console.print(f'  [cyan]-->[/] {filename}')
        console.print("   [cyan]=[/] [green]help[/]: run 'licensekit write' to regenerate the file.")


def format_mismatches(mismatches: list[Mismatch], filename: str) -> str:
    """Render :func:`print_mismatches` output to a plain string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=120)
    print_mismatches(mismatches, filename, console=console)
    return buf.getvalue().rstrip('\n')
