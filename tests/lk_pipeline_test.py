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

"""End-to-end tests for the record pipeline over a fake crate tree."""

from __future__ import annotations

from pathlib import Path

import pytest
from licensekit import pipeline
from licensekit._types import DepEdge, DepKind, Node, Override, Package, Record, ResolvedGraph
from licensekit.config import Config
from licensekit.errors import AttributionError
from licensekit.pipeline import build_everything, build_from_metadata

_REGISTRY = 'registry+https://github.com/rust-lang/crates.io-index'


def _crate(
    root: Path,
    name: str,
    *,
    manifest_name: str | None = None,
    license_text: str | None = None,
    **fields: object,
) -> Package:
    """Create ``root/name/Cargo.toml`` (and LICENSE) and return its package."""
    crate_dir = root / name
    crate_dir.mkdir(parents=True)
    (crate_dir / 'Cargo.toml').write_text(f'[package]\nname = "{manifest_name or name}"\n', encoding='utf-8')
    if license_text is not None:
        (crate_dir / 'LICENSE').write_text(license_text, encoding='utf-8')
    fields.setdefault('source', _REGISTRY)
    return Package(
        id=name,
        name=name,
        version='0.1.0',
        manifest_path=str(crate_dir / 'Cargo.toml'),
        **fields,  # type: ignore[arg-type]
    )


def _workspace(tmp_path: Path) -> tuple[ResolvedGraph, list[Package]]:
    """A root app with two crates from one repo, a dev-only tool and a license-less crate.

    app ──▶ foo ──▶ foo-derive
     │──▶ bare
     └──(dev)──▶ devtool
    """
    packages = [
        _crate(tmp_path, 'app', source=None),
        _crate(
            tmp_path,
            'foo',
            license='MIT/Apache-2.0',
            repository='https://github.com/org/foo.git',
            license_text='MIT License\n\nCopyright (c) 2020 Foo Developers\n',
        ),
        _crate(
            tmp_path,
            'foo-derive',
            license='MIT/Apache-2.0',
            repository='https://github.com/org/foo/',
            license_text='Copyright (c) 2020 Foo Developers\n',
        ),
        _crate(tmp_path, 'bare', manifest_name='bare_crate', authors=('Bare Author',)),
        _crate(tmp_path, 'devtool', license='MIT', repository='https://github.com/org/devtool'),
    ]
    graph = ResolvedGraph(
        nodes={
            'app': Node(
                'app',
                (
                    DepEdge('foo'),
                    DepEdge('bare'),
                    DepEdge('devtool', frozenset({DepKind.DEV})),
                ),
            ),
            'foo': Node('foo', (DepEdge('foo-derive'),)),
            'foo-derive': Node('foo-derive'),
            'bare': Node('bare'),
            'devtool': Node('devtool'),
        },
        root='app',
        workspace_members=('app',),
    )
    return graph, packages


_BARE_OVERRIDE = {'bare-0.1.0': Override(license='ISC', origin='https://example.com/bare.git')}


class TestBuildFromMetadata:
    """Tests for build_from_metadata."""

    def test_full_pipeline(self, tmp_path: Path) -> None:
        """Selection, overrides, renames, copyrights and reduction all apply."""
        graph, packages = _workspace(tmp_path)
        records = build_from_metadata(graph, packages, Config(overrides=_BARE_OVERRIDE))
        assert records == [
            Record('bare_crate', 'https://example.com/bare', 'ISC', 'Bare Author'),
            Record('foo', 'https://github.com/org/foo', 'MIT OR Apache-2.0', 'Copyright (c) 2020 Foo Developers'),
        ]

    def test_unattributable_package_fails(self, tmp_path: Path) -> None:
        """Without its override the license-less crate fails the run."""
        graph, packages = _workspace(tmp_path)
        with pytest.raises(AttributionError) as excinfo:
            build_from_metadata(graph, packages, Config())
        assert [e.package for e in excinfo.value.errors] == ['bare-0.1.0']


class TestBuildEverything:
    """Tests for build_everything."""

    def test_reads_config_and_metadata(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The config file and manifest path are both honored."""
        graph, packages = _workspace(tmp_path)
        config_path = tmp_path / 'license-tool.toml'
        config_path.write_text(
            '[overrides]\n"bare-0.1.0" = { license = "ISC", origin = "https://example.com/bare" }\n',
            encoding='utf-8',
        )
        seen: list[Path] = []

        def fake_load(manifest_path: Path) -> tuple[ResolvedGraph, list[Package]]:
            seen.append(manifest_path)
            return graph, packages

        monkeypatch.setattr(pipeline, 'load_cargo_metadata', fake_load)
        records = build_everything(config_path, tmp_path / 'Cargo.toml')
        assert seen == [tmp_path / 'Cargo.toml']
        assert [r.component for r in records] == ['bare_crate', 'foo']

    def test_default_manifest_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a manifest path, Cargo.toml in the working directory is used."""
        seen: list[Path] = []

        def fake_load(manifest_path: Path) -> tuple[ResolvedGraph, list[Package]]:
            seen.append(manifest_path)
            return ResolvedGraph(nodes={'app': Node('app')}, root='app'), []

        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(pipeline, 'load_cargo_metadata', fake_load)
        assert build_everything() == []
        assert seen == [Path('Cargo.toml')]
