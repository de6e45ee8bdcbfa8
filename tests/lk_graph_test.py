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

"""Tests for the normal-edge dependency graph filter."""

from __future__ import annotations

import pytest
from licensekit._types import DepEdge, DepKind, Node, Package, ResolvedGraph
from licensekit.errors import InternalConsistencyError
from licensekit.graph import default_roots, filter_deps, lookup_deps, shipped_packages

_REGISTRY = 'registry+https://github.com/rust-lang/crates.io-index'

NORMAL = frozenset({DepKind.NORMAL})
DEV = frozenset({DepKind.DEV})
BUILD = frozenset({DepKind.BUILD})

# ── Helpers ──────────────────────────────────────────────────────────


def _edge(pkg: str, kinds: frozenset[DepKind] = NORMAL) -> DepEdge:
    """Build a dependency edge."""
    return DepEdge(pkg=pkg, kinds=kinds)


def _graph(
    edges: dict[str, list[DepEdge]],
    *,
    root: str | None = 'app',
    members: tuple[str, ...] = (),
) -> ResolvedGraph:
    """Build a ResolvedGraph from an adjacency dict."""
    return ResolvedGraph(
        nodes={name: Node(id=name, deps=tuple(deps)) for name, deps in edges.items()},
        root=root,
        workspace_members=members,
    )


def _pkg(name: str, *, local: bool = False) -> Package:
    """Build a package whose id is its name."""
    return Package(id=name, name=name, version='1.0.0', source=None if local else _REGISTRY)


def _make_graph() -> ResolvedGraph:
    """A small app graph mixing normal, dev and build edges.

    app ──▶ serde ──▶ serde_derive ──(build)──▶ cc
     │──(dev)──▶ proptest ──▶ rand
     │──(build)──▶ autocfg
     └──▶ log
    """
    return _graph({
        'app': [
            _edge('serde'),
            _edge('proptest', DEV),
            _edge('autocfg', BUILD),
            _edge('log'),
        ],
        'serde': [_edge('serde_derive')],
        'serde_derive': [_edge('cc', BUILD)],
        'cc': [],
        'proptest': [_edge('rand')],
        'rand': [],
        'autocfg': [],
        'log': [],
    })


# ── default_roots ────────────────────────────────────────────────────


class TestDefaultRoots:
    """Tests for default_roots."""

    def test_root_package(self) -> None:
        """A graph with a root package walks from that root only."""
        assert default_roots(_make_graph()) == ['app']

    def test_virtual_workspace_uses_members(self) -> None:
        """A virtual workspace walks from every member."""
        graph = _graph({'a': [], 'b': [], 'dep': []}, root=None, members=('a', 'b'))
        assert default_roots(graph) == ['a', 'b']

    def test_no_root_no_members_uses_all_nodes(self) -> None:
        """Without root or members every node is a root."""
        graph = _graph({'a': [], 'b': []}, root=None)
        assert sorted(default_roots(graph)) == ['a', 'b']


# ── filter_deps ──────────────────────────────────────────────────────


class TestFilterDeps:
    """Tests for filter_deps."""

    def test_follows_normal_edges_transitively(self) -> None:
        """Normal dependencies are included transitively."""
        assert filter_deps(_make_graph()) == {'serde', 'serde_derive', 'log'}

    def test_dev_only_dependency_excluded(self) -> None:
        """A dev-only dependency and everything below it is pruned."""
        result = filter_deps(_make_graph())
        assert 'proptest' not in result
        assert 'rand' not in result

    def test_build_only_dependency_excluded(self) -> None:
        """Build-only dependencies are pruned at any depth."""
        result = filter_deps(_make_graph())
        assert 'autocfg' not in result
        assert 'cc' not in result

    def test_root_not_included(self) -> None:
        """The root itself is not a dependency."""
        assert 'app' not in filter_deps(_make_graph())

    def test_normal_path_wins_over_dev_path(self) -> None:
        """A package reachable by a dev edge and a normal path is shipped."""
        graph = _graph({
            'app': [_edge('rand', DEV), _edge('lib')],
            'lib': [_edge('rand')],
            'rand': [],
        })
        assert filter_deps(graph) == {'lib', 'rand'}

    def test_edge_with_mixed_kinds_is_normal(self) -> None:
        """An edge tagged both dev and normal is followed."""
        graph = _graph({
            'app': [_edge('both', frozenset({DepKind.DEV, DepKind.NORMAL}))],
            'both': [],
        })
        assert filter_deps(graph) == {'both'}

    def test_edge_with_dev_and_build_is_pruned(self) -> None:
        """An edge tagged only dev and build is not followed."""
        graph = _graph({
            'app': [_edge('tool', frozenset({DepKind.DEV, DepKind.BUILD}))],
            'tool': [_edge('inner')],
            'inner': [],
        })
        assert filter_deps(graph) == set()

    def test_explicit_roots(self) -> None:
        """Explicit roots replace the graph's default roots."""
        assert filter_deps(_make_graph(), roots=['proptest']) == {'rand'}

    def test_multiple_roots_union(self) -> None:
        """Results from several roots are unioned."""
        graph = _graph(
            {
                'a': [_edge('x')],
                'b': [_edge('y'), _edge('z', DEV)],
                'x': [],
                'y': [],
                'z': [],
            },
            root=None,
            members=('a', 'b'),
        )
        assert filter_deps(graph) == {'x', 'y'}

    def test_workspace_member_dev_deps_not_walked(self) -> None:
        """A dev-dependency's own normal deps stay out in a workspace."""
        graph = _graph(
            {
                'member': [_edge('criterion', DEV)],
                'criterion': [_edge('plotters')],
                'plotters': [],
            },
            root=None,
            members=('member',),
        )
        assert filter_deps(graph) == set()

    def test_workspace_member_depending_on_member(self) -> None:
        """A member depended on by another member is part of the result."""
        graph = _graph(
            {'a': [_edge('b')], 'b': [_edge('dep')], 'dep': []},
            root=None,
            members=('a', 'b'),
        )
        assert filter_deps(graph) == {'b', 'dep'}

    def test_no_roots(self) -> None:
        """An empty root list yields an empty result."""
        assert filter_deps(_make_graph(), roots=[]) == set()

    def test_diamond_expands_each_node_once(self) -> None:
        """Shared subgraphs are walked once, not once per path."""
        layers = 12
        edges: dict[str, list[DepEdge]] = {'app': [_edge('l0a'), _edge('l0b')]}
        for i in range(layers):
            nxt = [_edge(f'l{i + 1}a'), _edge(f'l{i + 1}b')] if i + 1 < layers else []
            edges[f'l{i}a'] = nxt
            edges[f'l{i}b'] = list(nxt)
        result = filter_deps(_graph(edges))
        assert len(result) == 2 * layers

    def test_deep_chain_does_not_recurse(self) -> None:
        """A chain deeper than the recursion limit is handled."""
        depth = 5000
        edges = {f'n{i}': [_edge(f'n{i + 1}')] for i in range(depth)}
        edges[f'n{depth}'] = []
        result = filter_deps(_graph(edges, root='n0'))
        assert len(result) == depth

    def test_missing_node_is_internal_error(self) -> None:
        """An edge to a node absent from the graph is fatal."""
        graph = _graph({'app': [_edge('ghost')]})
        with pytest.raises(InternalConsistencyError, match='ghost'):
            filter_deps(graph)

    def test_missing_root_is_internal_error(self) -> None:
        """A root absent from the graph is fatal."""
        with pytest.raises(InternalConsistencyError):
            filter_deps(_make_graph(), roots=['nope'])


# ── lookup_deps ──────────────────────────────────────────────────────


class TestLookupDeps:
    """Tests for lookup_deps."""

    def test_resolves_ids(self) -> None:
        """Ids are mapped to their packages, sorted by id."""
        packages = [_pkg('b'), _pkg('a'), _pkg('c')]
        result = lookup_deps({'b', 'a'}, packages)
        assert [p.name for p in result] == ['a', 'b']

    def test_local_packages_dropped(self) -> None:
        """Packages without a source are not attributed."""
        packages = [_pkg('ext'), _pkg('local', local=True)]
        result = lookup_deps({'ext', 'local'}, packages)
        assert [p.name for p in result] == ['ext']

    def test_missing_package_is_internal_error(self) -> None:
        """An id with no package is fatal."""
        with pytest.raises(InternalConsistencyError, match='ghost'):
            lookup_deps({'ghost'}, [_pkg('a')])


# ── shipped_packages ─────────────────────────────────────────────────


class TestShippedPackages:
    """Tests for shipped_packages."""

    def test_local_package_edges_still_followed(self) -> None:
        """A local path dependency is excluded but its deps are shipped."""
        graph = _graph({
            'app': [_edge('local-util')],
            'local-util': [_edge('itoa')],
            'itoa': [],
        })
        packages = [_pkg('app', local=True), _pkg('local-util', local=True), _pkg('itoa')]
        result = shipped_packages(graph, packages)
        assert [p.name for p in result] == ['itoa']

    def test_end_to_end_selection(self) -> None:
        """Only normal external packages come out of the full selection."""
        graph = _make_graph()
        packages = [_pkg(node_id, local=node_id == 'app') for node_id in graph.nodes]
        result = shipped_packages(graph, packages)
        assert [p.name for p in result] == ['log', 'serde', 'serde_derive']
