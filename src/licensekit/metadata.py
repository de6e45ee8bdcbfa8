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

"""Read the resolved dependency graph from ``cargo metadata``.

``cargo metadata --format-version 1`` prints one JSON document with:

- ``packages``: every package in the build, with its declared
  ``license``, ``repository``, ``homepage``, ``authors``, ``source``
  and ``manifest_path``.
- ``resolve.nodes``: the resolved graph; each node lists its ``deps``
  with ``dep_kinds`` (``kind`` is ``null`` for normal dependencies,
  ``"dev"`` or ``"build"`` otherwise).
- ``resolve.root``: the root package id, ``null`` in a virtual
  workspace.
- ``workspace_members``: the ids of the workspace packages.

Usage::

    from licensekit.metadata import load_cargo_metadata

    graph, packages = load_cargo_metadata(Path('Cargo.toml'))
"""

from __future__ import annotations

import json
import shutil
import subprocess  # noqa: S404 - intentional use for cargo metadata
from pathlib import Path
from typing import Any, Final

from licensekit._types import DepEdge, DepKind, Node, Package, ResolvedGraph
from licensekit.errors import ProviderError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'CARGO_METADATA_TIMEOUT',
    'load_cargo_metadata',
    'parse_metadata',
    'run_cargo_metadata',
]

#: Seconds to wait for ``cargo metadata``; it may need to fetch the index.
CARGO_METADATA_TIMEOUT: Final[int] = 600

_KIND_MAP: Final[dict[str | None, DepKind]] = {
    None: DepKind.NORMAL,
    'normal': DepKind.NORMAL,
    'dev': DepKind.DEV,
    'build': DepKind.BUILD,
}


def run_cargo_metadata(manifest_path: Path, *, cargo: str = 'cargo') -> dict[str, Any]:
    """Run ``cargo metadata`` and return the decoded JSON document.

    Args:
        manifest_path: Path to the workspace ``Cargo.toml``.
        cargo: The cargo executable to run.

    Raises:
        ProviderError: If cargo is missing, fails, times out, or prints
            something that is not JSON.
    """
    if not shutil.which(cargo):
        raise ProviderError(f'Running `cargo metadata` failed: {cargo!r} was not found on PATH')

    cmd = [cargo, 'metadata', '--format-version', '1', '--manifest-path', str(manifest_path)]
    logger.debug('running_cargo_metadata', cmd=cmd)
    try:
        proc = subprocess.run(  # noqa: S603 - intentional subprocess call
            cmd,
            capture_output=True,
            text=True,
            timeout=CARGO_METADATA_TIMEOUT,
        )
    except subprocess.TimeoutExpired as exc:
        raise ProviderError(f'Running `cargo metadata` timed out after {CARGO_METADATA_TIMEOUT} seconds') from exc
    except OSError as exc:
        raise ProviderError(f'Running `cargo metadata` failed: {exc}') from exc

    if proc.returncode != 0:
        raise ProviderError(f'Running `cargo metadata` failed (exit {proc.returncode}):\n{proc.stderr.strip()}')

    try:
        data = json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise ProviderError(f'`cargo metadata` printed invalid JSON: {exc}') from exc
    if not isinstance(data, dict):
        raise ProviderError('`cargo metadata` printed an unexpected JSON document')
    return data


def _parse_kinds(raw_kinds: list[dict[str, Any]] | None) -> frozenset[DepKind]:
    # Cargo older than 1.41 does not report dep_kinds; treat as normal.
    if not raw_kinds:
        return frozenset({DepKind.NORMAL})
    kinds: set[DepKind] = set()
    for raw in raw_kinds:
        kind = _KIND_MAP.get(raw.get('kind'))
        if kind is None:
            raise ProviderError(f'Unknown dependency kind {raw.get("kind")!r}')
        kinds.add(kind)
    return frozenset(kinds)


def _parse_node(raw: dict[str, Any]) -> Node:
    deps = tuple(DepEdge(pkg=dep['pkg'], kinds=_parse_kinds(dep.get('dep_kinds'))) for dep in raw.get('deps', []))
    return Node(id=raw['id'], deps=deps)


def _parse_package(raw: dict[str, Any]) -> Package:
    return Package(
        id=raw['id'],
        name=raw['name'],
        version=raw['version'],
        license=raw.get('license') or None,
        repository=raw.get('repository') or None,
        homepage=raw.get('homepage') or None,
        license_file=raw.get('license_file') or None,
        authors=tuple(raw.get('authors') or ()),
        source=raw.get('source'),
        manifest_path=raw.get('manifest_path', ''),
    )


def parse_metadata(data: dict[str, Any]) -> tuple[ResolvedGraph, list[Package]]:
    """Convert decoded ``cargo metadata`` JSON into graph and packages.

    Raises:
        ProviderError: If the document has no dependency tree or an
            entry lacks a required field.
    """
    resolve = data.get('resolve')
    if not resolve:
        raise ProviderError('Metadata is missing a dependency tree')

    try:
        nodes = [_parse_node(raw) for raw in resolve.get('nodes', [])]
        packages = [_parse_package(raw) for raw in data.get('packages', [])]
    except KeyError as exc:
        raise ProviderError(f'Metadata entry is missing field {exc.args[0]!r}') from exc

    graph = ResolvedGraph(
        nodes={node.id: node for node in nodes},
        root=resolve.get('root'),
        workspace_members=tuple(data.get('workspace_members', ())),
    )
    logger.debug(
        'parsed_cargo_metadata',
        nodes=len(graph.nodes),
        packages=len(packages),
        workspace=len(graph.workspace_members),
        virtual=graph.root is None,
    )
    return graph, packages


def load_cargo_metadata(manifest_path: Path) -> tuple[ResolvedGraph, list[Package]]:
    """Run ``cargo metadata`` for *manifest_path* and parse its output."""
    return parse_metadata(run_cargo_metadata(manifest_path))
