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

r"""Turn normalized packages into deduplicated license table records.

Many crates published from one repository share the same license and
copyright story (``tokio``, ``tokio-macros``, ``tokio-util`` ...). Such
packages produce records that differ only in the component name, so
they are grouped and, where the repository name points at one of them,
collapsed into a single row::

    ┌───────────────┬──────────────────────────────────┐
    │ component     │ origin                           │
    ├───────────────┼──────────────────────────────────┤
    │ foo           │ https://github.com/org/foo       │ ─┐
    │ foo-derive    │ https://github.com/org/foo       │  ├─▶ foo
    │ foo-rs        │ https://github.com/org/foo       │ ─┘
    └───────────────┴──────────────────────────────────┘

The repository's last path segment is matched against the group's names
by a first-match-wins cascade: the segment itself, the segment without a
leading ``rust-``, then the segment without a trailing ``-rs``. Groups
with no match keep every name.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from licensekit._types import Package, Record
from licensekit.errors import InternalConsistencyError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'RecordSets',
    'build_records',
    'collect_record_sets',
    'package_to_record',
    'reduce_names',
]

#: Record (with an empty component) → names of the packages that produced it.
RecordSets = dict[Record, set[str]]

# Prefixes and suffixes commonly added to a repository name to form the
# name of its primary crate.
_NAME_PREFIXES: tuple[str, ...] = ('rust-',)
_NAME_SUFFIXES: tuple[str, ...] = ('-rs',)


def package_to_record(package: Package) -> Record:
    """Extract the output record fields from a normalized package.

    Raises:
        InternalConsistencyError: If the package was not normalized or
            its copyright was not looked up.
    """
    if not package.repository or not package.license:
        raise InternalConsistencyError(f'Package {package.key} reached record synthesis without origin or license')
    if package.copyright is None:
        raise InternalConsistencyError(f'Copyright for {package.name!r} should have been set')
    return Record(
        component=package.name,
        origin=package.repository,
        license=package.license.replace('/', ' OR '),
        copyright=package.copyright,
    )


def collect_record_sets(records: Iterable[Record]) -> RecordSets:
    """Group records that are identical except for the component name."""
    sets: RecordSets = {}
    for record in records:
        key = dataclasses.replace(record, component='')
        sets.setdefault(key, set()).add(record.component)
    return sets


def _name_candidates(origin: str) -> list[str]:
    """Names to try, in order, derived from the origin's last segment."""
    if '/' not in origin:
        return []
    suffix = origin.rsplit('/', 1)[1]
    candidates = [suffix]
    for prefix in _NAME_PREFIXES:
        if suffix.startswith(prefix):
            candidates.append(suffix[len(prefix) :])
    for ending in _NAME_SUFFIXES:
        if suffix.endswith(ending):
            candidates.append(suffix[: -len(ending)])
    return candidates


def reduce_names(record: Record, names: set[str]) -> list[Record]:
    """Rehydrate a grouped record, reducing it to one row where possible.

    Args:
        record: The group key (its component is ignored).
        names: Component names that share the record's other fields.

    Returns:
        A single record when there is one name or the origin identifies
        the primary name; otherwise one record per name, sorted.
    """
    if len(names) == 1:
        return [dataclasses.replace(record, component=next(iter(names)))]

    for candidate in _name_candidates(record.origin):
        if candidate in names:
            logger.debug('reduced_names', component=candidate, names=sorted(names))
            return [dataclasses.replace(record, component=candidate)]

    return [dataclasses.replace(record, component=name) for name in sorted(names)]


def build_records(packages: Iterable[Package]) -> list[Record]:
    """Translate packages into the final, sorted list of records."""
    sets = collect_record_sets(package_to_record(package) for package in packages)
    result = [reduced for record, names in sets.items() for reduced in reduce_names(record, names)]
    result.sort()
    logger.debug('built_records', groups=len(sets), records=len(result))
    return result
