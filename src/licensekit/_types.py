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

"""Shared leaf-level types used across licensekit.

This module must have **zero** imports from other ``licensekit``
modules to avoid circular-import chains.  It is safe to import from
any module in the project.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ PackageId           │ Cargo's opaque id for one (name, version,      │
    │                     │ source) triple. Only used as a lookup key.     │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ DepEdge             │ "A needs B", tagged with why: normal, build    │
    │                     │ script or tests. Only normal edges ship.       │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Record              │ One row of LICENSE-3rdparty.csv.               │
    └─────────────────────┴────────────────────────────────────────────────┘
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

__all__ = [
    'DepEdge',
    'DepKind',
    'Node',
    'Override',
    'Package',
    'PackageId',
    'Record',
    'ResolvedGraph',
]

#: Opaque Cargo package identifier, e.g.
#: ``"registry+https://github.com/rust-lang/crates.io-index#serde@1.0.200"``.
PackageId = str


class DepKind(str, enum.Enum):
    """Why a dependency edge exists."""

    NORMAL = 'normal'
    DEV = 'dev'
    BUILD = 'build'


@dataclass(frozen=True)
class DepEdge:
    """A directed edge from a consuming package to one of its dependencies.

    Attributes:
        pkg: Id of the dependency.
        kinds: Every kind the dependency is declared with. Cargo merges
            ``[dependencies]`` and ``[dev-dependencies]`` entries for the
            same package into a single edge with several kinds.
    """

    pkg: PackageId
    kinds: frozenset[DepKind] = frozenset({DepKind.NORMAL})

    @property
    def is_normal(self) -> bool:
        """``True`` if the dependency ends up in the shipped artifact."""
        return DepKind.NORMAL in self.kinds


@dataclass(frozen=True)
class Node:
    """A package in the resolved graph plus its outgoing edges."""

    id: PackageId
    deps: tuple[DepEdge, ...] = ()


@dataclass
class ResolvedGraph:
    """The resolved dependency graph of a Cargo build.

    Attributes:
        nodes: Map of package id → :class:`Node`.
        root: The root package id, or ``None`` for a virtual workspace.
        workspace_members: Ids of the workspace member packages.
    """

    nodes: dict[PackageId, Node] = field(default_factory=dict)
    root: PackageId | None = None
    workspace_members: tuple[PackageId, ...] = ()


@dataclass(frozen=True)
class Package:
    """A package's metadata as reported by ``cargo metadata``.

    Attributes:
        id: The package id (graph key).
        name: Package name.
        version: Version string.
        license: Declared license, possibly a ``/``-joined composite
            such as ``"MIT/Apache-2.0"``.
        repository: Declared repository URL.
        homepage: Declared homepage URL.
        license_file: License file path relative to the manifest.
        authors: Declared authors, in manifest order.
        source: Source descriptor (``"registry+..."``, ``"git+..."``).
            ``None`` for local and workspace packages.
        manifest_path: Absolute path to the package's ``Cargo.toml``.
        copyright: Copyright holder, set once by the copyright scanner
            before records are built.
    """

    id: PackageId
    name: str
    version: str
    license: str | None = None
    repository: str | None = None
    homepage: str | None = None
    license_file: str | None = None
    authors: tuple[str, ...] = ()
    source: str | None = None
    manifest_path: str = ''
    copyright: str | None = None

    @property
    def is_local(self) -> bool:
        """``True`` for path and workspace packages (no source)."""
        return self.source is None

    @property
    def key(self) -> str:
        """The ``name-version`` key used in overrides and diagnostics."""
        return f'{self.name}-{self.version}'


@dataclass(frozen=True)
class Override:
    """User-supplied replacement values for a package.

    Attributes:
        license: Replaces the declared license verbatim.
        origin: Replaces the repository URL verbatim.
    """

    license: str | None = None
    origin: str | None = None


@dataclass(frozen=True, order=True)
class Record:
    """One attribution row of the third-party license table.

    Field order matters: records sort by component name first, which
    keeps the written file stable and reviewable.
    """

    component: str
    origin: str
    license: str
    copyright: str
