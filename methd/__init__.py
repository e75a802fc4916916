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

"""methd - configuration for the methd peer daemon

methd manages a set of named peers, each identified by a public key and an
optional network endpoint. This package materializes the daemon's effective
configuration from layered YAML documents:

- Compiled-in defaults
- A root configuration file
- Any number of fragment files in a directory named by the configuration

Quick Start:
Print the effective configuration:

    $ methd-config show /etc/methd/methd.yaml

Check every file strictly:

    $ methd-config validate /etc/methd/methd.yaml

For more details, see the individual module docstrings.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "methd - layered configuration for the methd peer daemon"

# Re-export commonly used functions for convenience
from methd.config import (
    ConfigDocument,
    DaemonSettings,
    PeerSettings,
    default_document,
    merge,
    parse,
    resolve,
    resolve_config,
    serialize,
)
from methd.exceptions import (
    ConfigError,
    GlobError,
    MethdError,
    ParseError,
    ReadError,
)
from methd.results import ResolveResult, ValidationResult
from methd.validation import validate_config

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ConfigDocument",
    "DaemonSettings",
    "PeerSettings",
    "ResolveResult",
    "ValidationResult",
    "default_document",
    "merge",
    "parse",
    "resolve",
    "resolve_config",
    "serialize",
    "validate_config",
    "MethdError",
    "ConfigError",
    "ReadError",
    "ParseError",
    "GlobError",
]
