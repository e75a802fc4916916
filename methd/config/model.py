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

"""Typed configuration documents for methd.

A configuration document holds the daemon's own settings and a table of
named peers. Every field is optional: a missing field means "no opinion",
and the value is inherited from a lower layer when documents are merged.

Document Layout:
    ```yaml
    daemon:
      endpoint: "0.0.0.0:4040"
      key_path: "methd.key"
      config_dir: "methd.d"
    peers:
      alice:
        public_key: "q8Zc..."
        endpoint: "10.0.0.2:4040"
    ```

Merge Behavior:
    merge(base, override) never mutates its inputs and returns a new document.

    - **daemon**: Field by field; a non-null override value wins, a null one
        inherits the base value
    - **peers**: Whole-entry replacement; an override entry replaces the base
        entry of the same name, base-only entries are kept
    - Peer entries are never merged field by field

Example:
    ```python
    from methd.config import default_document, merge, parse

    doc = merge(default_document(), parse(text))
    print(doc.daemon.config_dir)
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from typing import Any

import yaml

from methd.exceptions import ParseError

__all__ = [
    "DEFAULT_CONFIG_YAML",
    "DaemonSettings",
    "PeerSettings",
    "ConfigDocument",
    "parse",
    "merge",
    "serialize",
    "default_document",
]

# Compiled-in defaults. Must always parse and must set daemon.config_dir.
DEFAULT_CONFIG_YAML = """\
daemon:
  endpoint: "0.0.0.0:4040"
  key_path: "methd.key"
  config_dir: "methd.d"
"""

# -------------------------------
# YAML loader
# -------------------------------


class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that keeps scalar mapping keys as the text written.

    Peer names like 1, no or on stay the strings "1", "no" and "on"
    instead of becoming ints or bools. Values are resolved as usual.
    """

    def construct_mapping(self, node, deep=False):
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found a non-scalar key",
                    key_node.start_mark,
                )
            mapping[key_node.value] = self.construct_object(value_node, deep=deep)
        return mapping


# -------------------------------
# Field helpers
# -------------------------------


def _expect_mapping(where: str, value: Any) -> dict[Any, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _optional_str(where: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ParseError(f"{where}: expected a string, got {type(value).__name__}")


def _prune(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None (absent fields are not written)."""
    return {k: v for k, v in data.items() if v is not None}


# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class DaemonSettings:
    """Settings for the daemon process itself.

    Attributes:
        endpoint: Address the daemon listens on (e.g., "0.0.0.0:4040").
        key_path: Path to the daemon's private key file.
        config_dir: Fragment directory, relative to the root config file.
    """

    endpoint: str | None = None
    key_path: str | None = None
    config_dir: str | None = None

    def merge(self, other: DaemonSettings) -> DaemonSettings:
        """Returns these settings overridden by the non-null fields of other."""
        return DaemonSettings(
            endpoint=other.endpoint if other.endpoint is not None else self.endpoint,
            key_path=other.key_path if other.key_path is not None else self.key_path,
            config_dir=(
                other.config_dir if other.config_dir is not None else self.config_dir
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "endpoint": self.endpoint,
                "key_path": self.key_path,
                "config_dir": self.config_dir,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> DaemonSettings:
        data = _expect_mapping("daemon", data)
        return cls(
            endpoint=_optional_str("daemon.endpoint", data.get("endpoint")),
            key_path=_optional_str("daemon.key_path", data.get("key_path")),
            config_dir=_optional_str("daemon.config_dir", data.get("config_dir")),
        )


@dataclass(frozen=True)
class PeerSettings:
    """A single named peer.

    Attributes:
        public_key: The peer's public key (opaque string, not validated here).
        endpoint: Optional address the peer can be reached at.
    """

    public_key: str
    endpoint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune({"public_key": self.public_key, "endpoint": self.endpoint})

    @classmethod
    def from_dict(cls, name: str, data: Any) -> PeerSettings:
        where = f"peers.{name}"
        data = _expect_mapping(where, data)
        public_key = _optional_str(f"{where}.public_key", data.get("public_key"))
        if public_key is None:
            raise ParseError(f"{where}: missing required field 'public_key'")
        return cls(
            public_key=public_key,
            endpoint=_optional_str(f"{where}.endpoint", data.get("endpoint")),
        )


@dataclass(frozen=True)
class ConfigDocument:
    """One configuration document (or the result of merging several).

    Attributes:
        daemon: Daemon settings, or None if the document has no daemon section.
        peers: Peer table keyed by peer name, or None if the document has no
            peers section.
    """

    daemon: DaemonSettings | None = None
    peers: dict[str, PeerSettings] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Returns the plain mapping form of this document."""
        data: dict[str, Any] = {}
        if self.daemon is not None:
            data["daemon"] = self.daemon.to_dict()
        if self.peers is not None:
            data["peers"] = {
                name: peer.to_dict() for name, peer in self.peers.items()
            }
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ConfigDocument:
        """Builds a document from its plain mapping form.

        Unknown keys are ignored. No defaults are applied.

        Raises:
            ParseError: If a section or field has the wrong type, or a peer
                entry lacks public_key.
        """
        if data is None:
            return cls()
        data = _expect_mapping("document", data)

        daemon_raw = data.get("daemon")
        daemon = None if daemon_raw is None else DaemonSettings.from_dict(daemon_raw)

        peers: dict[str, PeerSettings] | None = None
        peers_raw = data.get("peers")
        if peers_raw is not None:
            peers = {}
            for name, entry in _expect_mapping("peers", peers_raw).items():
                if not isinstance(name, str):
                    raise ParseError(
                        f"peers: peer names must be strings, got {name!r}"
                    )
                peers[name] = PeerSettings.from_dict(name, entry)

        return cls(daemon=daemon, peers=peers)


# -------------------------------
# Public API
# -------------------------------


def parse(text: str) -> ConfigDocument:
    """Parses YAML text into a ConfigDocument.

    Empty text yields an empty document. Nothing is defaulted: every field
    missing from the text is None in the result.

    Args:
        text: The YAML document.

    Returns:
        The parsed document.

    Raises:
        ParseError: On YAML syntax errors or wrong field types.
    """
    try:
        data = yaml.load(text, Loader=_DocumentLoader)
    except yaml.YAMLError as err:
        raise ParseError(f"invalid YAML: {err}") from err
    return ConfigDocument.from_dict(data)


def merge(base: ConfigDocument, override: ConfigDocument) -> ConfigDocument:
    """Merges two documents, override winning wherever it has a value.

    Args:
        base: The lower-priority document.
        override: The higher-priority document.

    Returns:
        A new document. Neither input is modified.
    """
    if base.daemon is None:
        daemon = override.daemon
    elif override.daemon is None:
        daemon = base.daemon
    else:
        daemon = base.daemon.merge(override.daemon)

    peers: dict[str, PeerSettings] | None = None
    if base.peers is not None or override.peers is not None:
        # Whole entries replace; PeerSettings are immutable so sharing is safe
        peers = dict(base.peers or {})
        peers.update(override.peers or {})

    return ConfigDocument(daemon=daemon, peers=peers)


def serialize(doc: ConfigDocument) -> str:
    """Renders a document as YAML text that parse() reads back unchanged."""
    return yaml.safe_dump(doc.to_dict(), default_flow_style=False, sort_keys=False)


@cache
def default_document() -> ConfigDocument:
    """Returns the compiled-in default document.

    Parsed once per process; documents are immutable so the cached instance
    is shared by every caller.
    """
    return parse(DEFAULT_CONFIG_YAML)
