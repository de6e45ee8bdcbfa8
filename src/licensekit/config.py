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

r"""Load package overrides from ``license-tool.toml``.

Some crates declare no license or repository, or declare a wrong one.
The config file fixes them up, keyed by ``"name-version"`` (wins) or
by bare ``name``::

    [overrides]
    "ring-0.17.8" = { license = "ISC AND MIT AND OpenSSL" }
    "webpki-roots" = { origin = "https://github.com/rustls/webpki-roots" }

A missing file is an empty configuration. A file that exists but does
not parse, or whose entries have the wrong shape, is a
:class:`ConfigError`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit._types import Override
from licensekit.errors import ConfigError
from licensekit.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    'CONFIG_FILENAME',
    'Config',
    'load_config',
    'parse_config',
]

#: Default configuration file name, relative to the working directory.
CONFIG_FILENAME: Final[str] = 'license-tool.toml'

_OVERRIDE_FIELDS: Final[frozenset[str]] = frozenset({'license', 'origin'})


@dataclass(frozen=True)
class Config:
    """Parsed ``license-tool.toml``.

    Attributes:
        overrides: Map of ``"name-version"`` or ``"name"`` →
            :class:`Override`.
    """

    overrides: dict[str, Override] = field(default_factory=dict)


def _parse_override(key: str, raw: Any, errors: list[str]) -> Override | None:  # noqa: ANN401
    if not isinstance(raw, dict):
        errors.append(f'overrides.{key}: expected a table, got {type(raw).__name__}')
        return None
    values: dict[str, str | None] = {}
    for name in sorted(_OVERRIDE_FIELDS):
        value = raw.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f'overrides.{key}.{name}: expected a string, got {type(value).__name__}')
            continue
        values[name] = value
    unknown = sorted(set(raw) - _OVERRIDE_FIELDS)
    if unknown:
        logger.warning('unknown_override_fields', key=key, fields=unknown)
    return Override(license=values.get('license'), origin=values.get('origin'))


def parse_config(data: dict[str, Any], *, source: str = CONFIG_FILENAME) -> Config:
    """Build a :class:`Config` from already-decoded TOML data.

    Raises:
        ConfigError: Listing every malformed entry.
    """
    raw_overrides = data.get('overrides', {})
    if not isinstance(raw_overrides, dict):
        raise ConfigError(f'Could not parse {source!r}: [overrides] must be a table')

    errors: list[str] = []
    overrides: dict[str, Override] = {}
    for key, raw in raw_overrides.items():
        override = _parse_override(key, raw, errors)
        if override is not None:
            overrides[key] = override

    if errors:
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        raise ConfigError(f'Could not parse {source!r}:\n{bullet_list}')
    return Config(overrides=overrides)


def load_config(path: Path | None = None) -> Config:
    """Load the override configuration.

    Args:
        path: Config file to read. Defaults to :data:`CONFIG_FILENAME`
            in the current directory.

    Returns:
        The parsed configuration; empty if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    path = path or Path(CONFIG_FILENAME)
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug('config_not_found', path=str(path))
        return Config()
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'Could not parse {str(path)!r}: {exc}') from exc
    except OSError as exc:
        raise ConfigError(f'Could not load from {str(path)!r}: {exc}') from exc

    config = parse_config(data, source=str(path))
    logger.debug('loaded_config', path=str(path), overrides=len(config.overrides))
    return config
