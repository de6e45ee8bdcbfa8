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

"""Apply overrides and canonicalize package origins.

Every shipped package needs an origin and a license. The origin is taken
from, in order:

1. An ``origin`` override from ``license-tool.toml``.
2. The declared ``repository``, minus a trailing ``.git`` and ``/``.
3. A ``git+`` source, minus its query string and commit fragment.
4. The declared ``homepage``, verbatim.

Failures are not fatal one at a time: every package is checked, every
problem is logged, and a single :class:`AttributionError` is raised at
the end so the user can fix all of them in one go.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping

from licensekit._types import Override, Package
from licensekit.errors import AttributionError, NormalizationError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'apply_override',
    'canonical_origin',
    'find_override',
    'normalize_package',
    'normalize_packages',
    'strip_git',
]

# Source prefixes whose remainder is a clonable repository URL.
_VCS_PREFIXES: tuple[str, ...] = ('git+',)


def find_override(package: Package, overrides: Mapping[str, Override]) -> Override | None:
    """Look up ``"{name}-{version}"``, falling back to the bare name."""
    override = overrides.get(package.key)
    if override is None:
        override = overrides.get(package.name)
    return override


def apply_override(package: Package, override: Override) -> Package:
    """Return *package* with the override's values substituted verbatim."""
    changes: dict[str, str] = {}
    if override.license is not None:
        changes['license'] = override.license
    if override.origin is not None:
        changes['repository'] = override.origin
    return dataclasses.replace(package, **changes) if changes else package


def _strip_suffix(s: str, suffix: str) -> str:
    return s[: -len(suffix)] if s.endswith(suffix) else s


def strip_git(url: str) -> str:
    """Strip a trailing ``.git`` and then a trailing ``/`` from *url*."""
    return _strip_suffix(_strip_suffix(url, '.git'), '/')


def _vcs_base(source: str) -> str | None:
    for prefix in _VCS_PREFIXES:
        if source.startswith(prefix):
            base = source[len(prefix) :]
            for sep in ('?', '#'):
                base = base.split(sep, 1)[0]
            return base
    return None


def canonical_origin(package: Package) -> str | None:
    """Derive the canonical origin URL of *package*.

    Returns:
        The origin, or ``None`` if the package declares no repository,
        has no VCS source and no homepage.
    """
    if package.repository:
        return strip_git(package.repository)
    if package.source:
        base = _vcs_base(package.source)
        if base:
            return strip_git(base)
    if package.homepage:
        return package.homepage
    return None


def normalize_package(package: Package, overrides: Mapping[str, Override]) -> Package:
    """Apply overrides and fix up the origin of a single package.

    Local packages only get their override applied; they are never
    attributed.

    Raises:
        NormalizationError: If the package has no derivable origin or
            no license.
    """
    override = find_override(package, overrides)
    if override is not None:
        logger.debug('applied_override', package=package.key)
        package = apply_override(package, override)

    if package.is_local:
        return package

    origin = canonical_origin(package)
    if not origin:
        raise NormalizationError(package.key, 'missing a repository')
    if not package.license:
        raise NormalizationError(package.key, 'missing a license')
    return dataclasses.replace(package, repository=origin)


def normalize_packages(
    packages: Iterable[Package],
    overrides: Mapping[str, Override],
) -> list[Package]:
    """Normalize every package, reporting all failures at once.

    Raises:
        AttributionError: If any package failed; carries every failure.
    """
    normalized: list[Package] = []
    errors: list[NormalizationError] = []
    for package in packages:
        try:
            normalized.append(normalize_package(package, overrides))
        except NormalizationError as exc:
            logger.error('package_not_attributable', package=exc.package, reason=exc.reason)
            errors.append(exc)
    if errors:
        raise AttributionError(errors)
    return normalized
