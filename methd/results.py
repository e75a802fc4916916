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

"""Public API return types for methd.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Inspecting where the effective configuration came from:
        ```python
        from pathlib import Path
        from methd.config import resolve_config

        result = resolve_config(Path("/etc/methd/methd.yaml"))
        for path in result.applied_fragments:
            print(f"applied {path}")
        ```

Note:
    Only public API return types belong in this module. Domain types (like
    ConfigDocument) stay with their related logic in methd.config.model.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from methd.config.model import ConfigDocument


@dataclass(frozen=True)
class ResolveResult:
    """Result from resolving the configuration cascade.

    Attributes:
        config: The effective configuration document.
        root_path: The root configuration file that was requested.
        used_defaults: True when the root file could not be read or parsed
            and the compiled-in defaults were returned instead.
        fragment_dir: Directory searched for fragments, or None when the
            search never happened (root failure).
        applied_fragments: Fragments merged into config, in merge order.
        skipped_fragments: Fragments that could not be read or parsed.
    """

    config: ConfigDocument
    root_path: Path
    used_defaults: bool
    fragment_dir: Path | None
    applied_fragments: tuple[Path, ...] = ()
    skipped_fragments: tuple[Path, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a configuration tree.

    Attributes:
        status: "valid" or "invalid".
        errors: Error messages (empty when valid).
        warnings: Advisory messages that do not make the tree invalid.
        peer_count: Number of peers in the effective configuration.
        fragment_count: Number of fragment files found.
        config_path: String path to the validated root file.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    peer_count: int
    fragment_count: int
    config_path: str
