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

"""Exception hierarchy for licensekit.

Every user-facing failure derives from :class:`LicenseToolError`; the
CLI turns those into a logged error and exit status 1.

:class:`InternalConsistencyError` is not a
:class:`LicenseToolError`: it signals a broken contract between two
pipeline stages and surfaces as a traceback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from licensekit.drift import Mismatch

__all__ = [
    'AttributionError',
    'ConfigError',
    'CopyrightScanError',
    'DriftError',
    'InternalConsistencyError',
    'LicenseToolError',
    'NormalizationError',
    'ProviderError',
    'TableError',
]


class LicenseToolError(Exception):
    """Base class for fatal, user-facing licensekit errors."""


class ConfigError(LicenseToolError):
    """The override configuration file exists but is malformed."""


class ProviderError(LicenseToolError):
    """``cargo metadata`` or a package manifest could not be read."""


class CopyrightScanError(LicenseToolError):
    """A candidate copyright file exists but could not be read."""


class TableError(LicenseToolError):
    """The persisted license table could not be read."""


class NormalizationError(LicenseToolError):
    """A single package lacks a derivable origin or license.

    Attributes:
        package: The ``name-version`` key of the failing package.
        reason: Human-readable reason, e.g. ``"missing a license"``.
    """

    def __init__(self, package: str, reason: str) -> None:
        self.package = package
        self.reason = reason
        super().__init__(f'Package {package} is {reason}')


class AttributionError(LicenseToolError):
    """One or more shipped packages could not be attributed.

    Attributes:
        errors: Every per-package failure, in package order.
    """

    def __init__(self, errors: list[NormalizationError]) -> None:
        self.errors = errors
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'Could not fix up package details for {len(errors)} package(s):\n{bullet_list}')


class DriftError(LicenseToolError):
    """The persisted license table does not match the computed one.

    Attributes:
        mismatches: Every discrepancy that was found.
    """

    def __init__(self, filename: str, mismatches: list[Mismatch]) -> None:
        self.filename = filename
        self.mismatches = mismatches
        super().__init__(f'Current {filename!r} is not up to date ({len(mismatches)} mismatch(es)).')


class InternalConsistencyError(RuntimeError):
    """Two pipeline stages disagree about data one of them guarantees."""
