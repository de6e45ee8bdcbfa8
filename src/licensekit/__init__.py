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

r"""Third-party license attribution for Cargo workspaces.

licensekit builds ``LICENSE-3rdparty.csv`` from the resolved dependency
graph of a Rust build: only dependencies that are compiled into the
shipped artifact are listed, each with its origin repository, license
expression, and copyright holder.

Usage::

    from licensekit.pipeline import build_everything
    from licensekit.table import write_table_atomic

    records = build_everything()
    write_table_atomic(records, Path('LICENSE-3rdparty.csv'))
"""

__version__ = '1.0.3'

__all__ = [
    '__version__',
]
