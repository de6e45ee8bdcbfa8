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

r"""Find the copyright holder of a package from its source files.

Cargo manifests have no copyright field, so the holder is scraped from
the files shipped next to ``Cargo.toml``. Candidates are searched in
order and the first copyright line that is not license boilerplate
wins:

1. The declared ``license-file``, if any.
2. :data:`COPYRIGHT_LOCATIONS` (``LICENSE``, ``COPYING``, ``NOTICE``,
   ``README.md`` ...).

If nothing is found, the declared authors are used, or
``"The {name} Authors"`` if there are none.

Usage::

    from licensekit.copyright import annotate_copyrights

    packages = annotate_copyrights(packages)
    packages[0].copyright  # 'Copyright (c) 2014 The Rust Project Developers'
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from licensekit._types import Package
from licensekit.errors import CopyrightScanError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'COPYRIGHT_LOCATIONS',
    'annotate_copyrights',
    'find_copyright',
    'lookup_copyright',
    'lookup_copyrights',
]

#: Files searched for copyright notices, in priority order.
COPYRIGHT_LOCATIONS: Final[tuple[str, ...]] = (
    'license',
    'LICENSE',
    'license.md',
    'LICENSE.md',
    'LICENSE.txt',
    'License.txt',
    'license.txt',
    'LICENSE-APACHE',
    'LICENSE-MIT',
    'COPYING',
    'NOTICE',
    'README',
    'README.md',
    'README.mdown',
    'README.markdown',
    'COPYRIGHT',
    'COPYRIGHT.txt',
)

# Anything that looks like a copyright declaration, up to the end of that line.
# Compiled once at module load.
_COPYRIGHT_RE: Final[re.Pattern[str]] = re.compile(
    r'copyright[ \t]+(?:©|\(c\)[ \t]+)?(?:(?:[0-9 ,-]|present)+[ \t]+)?(?:by[ \t]+)?.*$',
    re.IGNORECASE | re.MULTILINE,
)

# Matches that are not owners, mostly from boilerplate license texts.
# Applied to the start of a _COPYRIGHT_RE match.
_COPYRIGHT_IGNORE_RE: Final[re.Pattern[str]] = re.compile(
    r'^(?:'
    r'copyright(?::? and license)?$'
    r'|copyright :?(?:holder|owner|notice|license|statement)'
    r'|copyright & license -'
    r'|copyright .yyyy. .name of copyright owner'
    r')',
    re.IGNORECASE,
)


def find_copyright(text: str) -> str | None:
    """Return the first non-boilerplate copyright line in *text*."""
    for match in _COPYRIGHT_RE.finditer(text):
        found = match.group(0).rstrip()
        if not _COPYRIGHT_IGNORE_RE.match(found):
            return found
    return None


def lookup_copyright(path: Path) -> str | None:
    """Scan a single file for a copyright line.

    Raises:
        CopyrightScanError: If the file exists but cannot be read.
    """
    try:
        text = path.read_text(encoding='utf-8', errors='replace')
    except OSError as exc:
        raise CopyrightScanError(f'Could not read {str(path)!r}: {exc}') from exc
    return find_copyright(text)


def _candidate_paths(package: Package) -> list[Path]:
    source_dir = Path(package.manifest_path).parent
    candidates: list[Path] = []
    if package.license_file:
        candidates.append(source_dir / package.license_file)
    candidates.extend(source_dir / location for location in COPYRIGHT_LOCATIONS)
    return candidates


def lookup_copyrights(package: Package) -> str:
    """Find the copyright holder for *package*, with author fallback."""
    for path in _candidate_paths(package):
        if not path.is_file():
            continue
        found = lookup_copyright(path)
        if found is not None:
            logger.debug('found_copyright', package=package.key, path=path.name)
            return found

    logger.debug('copyright_from_authors', package=package.key, authors=len(package.authors))
    if package.authors:
        return ', '.join(package.authors)
    return f'The {package.name} Authors'


def annotate_copyrights(packages: Iterable[Package]) -> list[Package]:
    """Return *packages* with :attr:`Package.copyright` set on each."""
    return [dataclasses.replace(package, copyright=lookup_copyrights(package)) for package in packages]
