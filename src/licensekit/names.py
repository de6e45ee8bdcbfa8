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

"""Recover each package's self-declared name from its ``Cargo.toml``.

The name cargo resolves a package under can differ from the name in the
package's own manifest (renamed dependencies, registry normalization).
The attribution uses the latter.
"""

from __future__ import annotations

import dataclasses
import sys
from collections.abc import Iterable
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit._types import Package
from licensekit.errors import ProviderError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'fixup_names',
    'read_manifest_name',
]


def read_manifest_name(manifest_path: Path) -> str:
    """Return ``package.name`` from a ``Cargo.toml``.

    Raises:
        ProviderError: If the manifest cannot be read, parsed, or has no
            package name.
    """
    try:
        with manifest_path.open('rb') as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ProviderError(f'Could not read manifest in {str(manifest_path)!r}: {exc}') from exc
    except tomllib.TOMLDecodeError as exc:
        raise ProviderError(f'Could not parse manifest in {str(manifest_path)!r}: {exc}') from exc

    name = data.get('package', {}).get('name')
    if not isinstance(name, str) or not name:
        raise ProviderError(f'Manifest {str(manifest_path)!r} has no package name')
    return name


def fixup_names(packages: Iterable[Package]) -> list[Package]:
    """Replace every package name with its manifest-declared name."""
    result: list[Package] = []
    for package in packages:
        name = read_manifest_name(Path(package.manifest_path))
        if name != package.name:
            logger.debug('renamed_package', package=package.key, name=name)
            package = dataclasses.replace(package, name=name)
        result.append(package)
    return result
