# Copyright 2025 Roger Cibrian
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

"""Configuration loading and merging for methd.

This package provides the typed configuration document and the cascade that
builds the effective configuration from layered YAML files:

  - Compiled-in defaults
  - The root file (e.g. /etc/methd/methd.yaml)
  - Fragments (<root dir>/<daemon.config_dir>/*.yaml)

Daemon settings merge field by field and peer entries replace each other
whole (last wins). See methd.config.model and methd.config.loader.

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from methd.config import resolve

        config = resolve(Path("/etc/methd/methd.yaml"))
        print(config.daemon.endpoint)
        ```
"""

from .loader import (
    FRAGMENT_PATTERN,
    discover_fragments,
    fragment_dir_for,
    load_document,
    resolve,
    resolve_config,
)
from .model import (
    DEFAULT_CONFIG_YAML,
    ConfigDocument,
    DaemonSettings,
    PeerSettings,
    default_document,
    merge,
    parse,
    serialize,
)

__all__ = [
    "DEFAULT_CONFIG_YAML",
    "FRAGMENT_PATTERN",
    "ConfigDocument",
    "DaemonSettings",
    "PeerSettings",
    "default_document",
    "discover_fragments",
    "fragment_dir_for",
    "load_document",
    "merge",
    "parse",
    "resolve",
    "resolve_config",
    "serialize",
]
