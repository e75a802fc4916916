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

"""Exception hierarchy for methd.

This module defines the errors raised while reading, parsing and discovering
configuration documents. All exceptions inherit from MethdError, allowing
users to catch every methd error with a single except clause if needed.

The cascade resolver (methd.config.resolve) never lets these escape: it
falls back to the compiled-in defaults instead. They are visible to callers
of the lower-level helpers (parse, load_document, discover_fragments).

Example:
    Loading a single document strictly:
        ```python
        from pathlib import Path
        from methd.config import load_document
        from methd.exceptions import ParseError, ReadError

        try:
            doc = load_document(Path("/etc/methd/methd.yaml"))
        except ReadError as e:
            print(f"Cannot read: {e}")
        except ParseError as e:
            print(f"Bad syntax: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "MethdError",
    "ConfigError",
    "ReadError",
    "ParseError",
    "GlobError",
]


class MethdError(Exception):
    """Base exception for all methd errors."""

    pass


class ConfigError(MethdError):
    """Raised for configuration-related errors.

    Parent of the read, parse and discovery errors below, so callers that
    do not care which step failed can catch this one class.
    """

    pass


class ReadError(ConfigError):
    """Raised when a configuration file is missing or cannot be read.

    Wraps OSError and UnicodeDecodeError; the original error is chained.
    """

    pass


class ParseError(ConfigError):
    """Raised for malformed or type-mismatched configuration text.

    This exception is raised when:

    - The YAML itself cannot be parsed
    - The top level, daemon section, peers table or a peer entry is not a
        mapping
    - A field holds something other than a string
    - A peer entry has no public_key

    Example:
        ```python
        from methd.config import parse
        from methd.exceptions import ParseError

        try:
            parse("daemon: [1, 2]")
        except ParseError as e:
            print(e)  # daemon: expected a mapping, got list
        ```
    """

    pass


class GlobError(ConfigError):
    """Raised when fragment files cannot be enumerated."""

    pass
