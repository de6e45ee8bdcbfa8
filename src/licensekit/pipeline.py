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

"""Compute the license records for a Cargo workspace.

Data Flow::

    ┌────────────────┐   ┌──────────────┐   ┌─────────────────┐
    │ cargo metadata │──▶│ filter_deps  │──▶│ lookup_deps     │
    └────────────────┘   └──────────────┘   └────────┬────────┘
                                                     ▼
    ┌────────────────┐   ┌──────────────┐   ┌─────────────────┐
    │ build_records  │◀──│ copyrights   │◀──│ normalize/names │
    └────────────────┘   └──────────────┘   └─────────────────┘
"""

from __future__ import annotations

from pathlib import Path

from licensekit._types import Package, Record, ResolvedGraph
from licensekit.config import Config, load_config
from licensekit.copyright import annotate_copyrights
from licensekit.graph import shipped_packages
from licensekit.logging import get_logger
from licensekit.metadata import load_cargo_metadata
from licensekit.names import fixup_names
from licensekit.normalize import normalize_packages
from licensekit.records import build_records

logger = get_logger(__name__)

__all__ = [
    'build_everything',
    'build_from_metadata',
]


def build_from_metadata(
    graph: ResolvedGraph,
    packages: list[Package],
    config: Config,
) -> list[Record]:
    """Run every pipeline stage after the provider.

    Raises:
        AttributionError: If a shipped package cannot be attributed.
        ProviderError: If a package manifest cannot be read.
        CopyrightScanError: If a candidate copyright file cannot be read.
    """
    shipped = shipped_packages(graph, packages)
    logger.info('selected_shipped_packages', total=len(packages), shipped=len(shipped))

    normalized = normalize_packages(shipped, config.overrides)
    named = fixup_names(normalized)
    annotated = annotate_copyrights(named)

    records = build_records(annotated)
    logger.info('built_license_records', packages=len(annotated), records=len(records))
    return records


def build_everything(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
) -> list[Record]:
    """Load the config, query cargo, and build the sorted record list.

    Args:
        config_path: Override file. Defaults to ``license-tool.toml``.
        manifest_path: Workspace manifest. Defaults to ``Cargo.toml``.

    Raises:
        LicenseToolError: On any configuration, provider, or
            attribution failure.
    """
    config = load_config(config_path)
    graph, packages = load_cargo_metadata(manifest_path or Path('Cargo.toml'))
    return build_from_metadata(graph, packages, config)
