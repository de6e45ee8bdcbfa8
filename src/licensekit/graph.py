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

"""Select the packages that end up in a shipped artifact.

``cargo metadata`` reports every dependency edge of the build, including
the ones that only exist for build scripts (``[build-dependencies]``)
and tests (``[dev-dependencies]``). Neither kind is distributed, so the
walk only follows edges that carry the *normal* kind::

    my-app ──normal──▶ serde ──normal──▶ serde_derive     shipped
       │
       ├──dev────────▶ proptest ──normal──▶ rand          not shipped
       │
       └──build──────▶ cc                                  not shipped

A package reachable through at least one all-normal path is shipped,
even if it is also reachable through dev or build edges.

Usage::

    from licensekit.graph import filter_deps, lookup_deps

    ids = filter_deps(graph)
    packages = lookup_deps(ids, all_packages)
"""

from __future__ import annotations

from collections.abc import Iterable

from licensekit._types import Package, PackageId, ResolvedGraph
from licensekit.errors import InternalConsistencyError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'default_roots',
    'filter_deps',
    'lookup_deps',
    'shipped_packages',
]


def default_roots(graph: ResolvedGraph) -> list[PackageId]:
    """Return the roots to walk when the caller names none.

    The root package if there is one; for a virtual workspace, every
    workspace member; for a graph with neither, every node.
    """
    if graph.root is not None:
        return [graph.root]
    if graph.workspace_members:
        return list(graph.workspace_members)
    return list(graph.nodes)


def filter_deps(
    graph: ResolvedGraph,
    roots: Iterable[PackageId] | None = None,
) -> set[PackageId]:
    """Compute the set of packages reachable through normal edges only.

    Iterative depth-first walk from every root. Each node's edges are
    expanded at most once, so the walk is linear in the number of edges
    even when many paths lead to the same package.

    Args:
        graph: The resolved dependency graph.
        roots: Package ids to start from. Defaults to
            :func:`default_roots`. Roots themselves are not part of
            the result unless another root depends on them.

    Returns:
        Ids of every package reachable from a root via normal edges.

    Raises:
        InternalConsistencyError: If a root or an edge target is missing
            from the graph.
    """
    start = default_roots(graph) if roots is None else list(roots)
    filtered: set[PackageId] = set()
    expanded: set[PackageId] = set()
    stack: list[PackageId] = list(reversed(start))

    while stack:
        current = stack.pop()
        if current in expanded:
            continue
        expanded.add(current)

        node = graph.nodes.get(current)
        if node is None:
            raise InternalConsistencyError(f'Dependency graph is missing node {current!r}')

        for edge in node.deps:
            if not edge.is_normal:
                continue
            filtered.add(edge.pkg)
            if edge.pkg not in expanded:
                stack.append(edge.pkg)

    logger.debug('filtered_deps', roots=len(start), visited=len(expanded), shipped=len(filtered))
    return filtered


def lookup_deps(
    package_ids: Iterable[PackageId],
    packages: Iterable[Package],
) -> list[Package]:
    """Resolve package ids to packages, dropping local packages.

    Path and workspace packages have no source and are never attributed;
    their own normal dependencies were still walked by
    :func:`filter_deps`.

    Args:
        package_ids: Ids produced by :func:`filter_deps`.
        packages: Every package reported by the provider.

    Returns:
        The matching non-local packages, sorted by id.

    Raises:
        InternalConsistencyError: If an id has no matching package.
    """
    by_id = {package.id: package for package in packages}
    result: list[Package] = []
    for package_id in sorted(package_ids):
        package = by_id.get(package_id)
        if package is None:
            raise InternalConsistencyError(f'Missing package {package_id!r}')
        if package.is_local:
            logger.debug('skipped_local_package', package=package.key)
            continue
        result.append(package)
    return result


def shipped_packages(
    graph: ResolvedGraph,
    packages: Iterable[Package],
    roots: Iterable[PackageId] | None = None,
) -> list[Package]:
    """Return the external packages distributed in the built artifact."""
    return lookup_deps(filter_deps(graph, roots), packages)
