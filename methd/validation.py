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

"""Configuration validation module.

The resolver is deliberately forgiving: a broken root file silently turns
into the defaults (plus a warning) and a broken fragment simply disappears.
This module is the strict counterpart, meant for operators and CI checks
before a daemon is (re)started. It walks the same cascade but reports every
problem instead of absorbing it.

Validation Checks:

- Root file exists and is readable
- Root file and every fragment parse as configuration documents
- Fragment directory can be listed (warning if it does not exist)
- Peers without an endpoint (warning)

Example:
    Validate a configuration tree:
        ```python
        from pathlib import Path
        from methd.validation import validate_config

        result = validate_config(Path("/etc/methd/methd.yaml"))
        if result.status == "valid":
            print(f"OK, {result.peer_count} peer(s)")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path

from methd.config.loader import discover_fragments, fragment_dir_for, load_document
from methd.config.model import default_document, merge
from methd.exceptions import ConfigError, GlobError
from methd.logging import Logger, get_global_logger
from methd.results import ValidationResult

__all__ = ["validate_config"]


def validate_config(root_path: Path, *, logger: Logger | None = None) -> ValidationResult:
    """Validates a root configuration file and its fragments.

    Does NOT check key material or whether endpoints are reachable.

    Args:
        root_path: Path to the root configuration file.
        logger: Logger to report progress through. Defaults to the global
            logger.

    Returns:
        A ValidationResult. status is "valid" when errors is empty.
    """
    if logger is None:
        logger = get_global_logger()
    root_path = Path(root_path)

    errors: list[str] = []
    warnings: list[str] = []

    logger.verbose("VALIDATE", f"Validating root config: {root_path}")

    if not root_path.exists():
        errors.append(f"Config file not found: {root_path}")
        return ValidationResult(
            status="invalid",
            errors=errors,
            warnings=warnings,
            peer_count=0,
            fragment_count=0,
            config_path=str(root_path),
        )

    try:
        root = load_document(root_path)
    except ConfigError as err:
        errors.append(str(err))
        return ValidationResult(
            status="invalid",
            errors=errors,
            warnings=warnings,
            peer_count=0,
            fragment_count=0,
            config_path=str(root_path),
        )

    effective = merge(default_document(), root)
    fragment_dir = fragment_dir_for(root_path, effective)

    fragment_paths: list[Path] = []
    if not fragment_dir.is_dir():
        warnings.append(f"Fragment directory not found: {fragment_dir}")
    else:
        try:
            fragment_paths = discover_fragments(fragment_dir)
        except GlobError as err:
            errors.append(str(err))

    for path in fragment_paths:
        logger.verbose("VALIDATE", f"Checking fragment: {path.name}")
        try:
            fragment = load_document(path)
        except ConfigError as err:
            errors.append(f"Fragment {path.name}: {err}")
            continue
        effective = merge(effective, fragment)

    peers = effective.peers or {}
    for name, peer in peers.items():
        if peer.endpoint is None:
            warnings.append(f"Peer '{name}' has no endpoint")

    return ValidationResult(
        status="valid" if not errors else "invalid",
        errors=errors,
        warnings=warnings,
        peer_count=len(peers),
        fragment_count=len(fragment_paths),
        config_path=str(root_path),
    )
