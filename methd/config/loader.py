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

"""Configuration cascade resolution for methd.

This module turns a root configuration path into the effective configuration
the daemon runs with, by merging three kinds of layers in order.

Configuration Layers:
    1. **Compiled-in defaults** (DEFAULT_CONFIG_YAML)
       - Always present; guarantees daemon.config_dir is set

    2. **Root file** (path supplied by the caller, e.g. /etc/methd/methd.yaml)
       - Expected to exist and be well-formed
       - Overrides the defaults

    3. **Fragments** (<root dir>/<daemon.config_dir>/*.yaml)
       - Optional; any number of files
       - Merged in file name order, each overriding everything before it

Failure Policy:
    - Root file unreadable or malformed: a warning is logged and the
        compiled-in defaults are returned. Fragments are not searched.
    - Fragment unreadable or malformed: skipped without a warning.
    - Fragment directory cannot be listed: treated as empty.

    resolve() therefore never raises; it always returns a usable document.

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from methd.config import resolve

        cfg = resolve(Path("/etc/methd/methd.yaml"))
        print(cfg.daemon.endpoint)
        for name, peer in (cfg.peers or {}).items():
            print(name, peer.public_key)
        ```

Note:
    Nothing is cached; every call reads the filesystem again.
"""

from __future__ import annotations

from pathlib import Path

from methd.config.model import ConfigDocument, default_document, merge, parse
from methd.exceptions import ConfigError, GlobError, ParseError, ReadError
from methd.logging import Logger, get_global_logger
from methd.results import ResolveResult

__all__ = [
    "FRAGMENT_PATTERN",
    "load_document",
    "discover_fragments",
    "fragment_dir_for",
    "resolve_config",
    "resolve",
]

FRAGMENT_PATTERN = "*.yaml"

# -------------------------------
# File helpers
# -------------------------------


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ReadError(f"could not read {path}: {err}") from err


def load_document(path: Path) -> ConfigDocument:
    """Reads and parses a single configuration file.

    Args:
        path: Path to a YAML configuration file.

    Returns:
        The parsed document (no defaults applied).

    Raises:
        ReadError: If the file is missing or unreadable.
        ParseError: If the file is not a valid configuration document.
    """
    return parse(_read_text(path))


# -------------------------------
# Fragment discovery
# -------------------------------


def fragment_dir_for(root_path: Path, config: ConfigDocument) -> Path:
    """Returns the fragment directory for a root file and its merged config.

    The config must already have the defaults merged in, so that
    daemon.config_dir is set.

    Raises:
        ConfigError: If daemon.config_dir is missing.
    """
    if config.daemon is None or config.daemon.config_dir is None:
        raise ConfigError("daemon.config_dir is not set; merge the defaults first")
    # The filesystem root is its own parent
    return root_path.parent / config.daemon.config_dir


def discover_fragments(fragment_dir: Path) -> list[Path]:
    """Lists fragment files in a directory, sorted by file name.

    A directory that does not exist simply has no fragments.

    Raises:
        GlobError: If the directory cannot be enumerated.
    """
    try:
        return sorted(fragment_dir.glob(FRAGMENT_PATTERN))
    except (OSError, ValueError) as err:
        raise GlobError(f"could not list fragments in {fragment_dir}: {err}") from err


# -------------------------------
# Public API
# -------------------------------


def resolve_config(root_path: Path, *, logger: Logger | None = None) -> ResolveResult:
    """Resolves the configuration cascade and reports how it was built.

    Performs the following operations:

    1. Read and parse the root file (on failure: warn, return defaults)
    2. Merge: defaults -> root
    3. Locate the fragment directory relative to the root file
    4. Merge each readable, well-formed fragment in file name order

    Args:
        root_path: Path to the root configuration file.
        logger: Logger to report through. Defaults to the global logger.

    Returns:
        A ResolveResult holding the effective document and its provenance.
    """
    if logger is None:
        logger = get_global_logger()
    root_path = Path(root_path)

    logger.verbose("CONFIG", f"Loading root config: {root_path}")
    try:
        root = load_document(root_path)
    except ReadError as err:
        logger.warning("CONFIG", f"Could not load the configuration: {err}")
        return ResolveResult(
            config=default_document(),
            root_path=root_path,
            used_defaults=True,
            fragment_dir=None,
        )
    except ParseError as err:
        logger.warning("CONFIG", f"Configuration syntax problems: {err}")
        return ResolveResult(
            config=default_document(),
            root_path=root_path,
            used_defaults=True,
            fragment_dir=None,
        )

    effective = merge(default_document(), root)

    fragment_dir = fragment_dir_for(root_path, effective)
    logger.verbose("CONFIG", f"Searching fragments in: {fragment_dir}")
    try:
        fragment_paths = discover_fragments(fragment_dir)
    except GlobError as err:
        logger.debug("CONFIG", str(err))
        fragment_paths = []

    applied: list[Path] = []
    skipped: list[Path] = []
    for path in fragment_paths:
        try:
            fragment = load_document(path)
        except ConfigError as err:
            # Fragments are optional; a broken one is dropped quietly
            logger.debug("FRAGMENT", f"Skipping {path.name}: {err}")
            skipped.append(path)
            continue
        logger.verbose("FRAGMENT", f"Merging: {path.name}")
        effective = merge(effective, fragment)
        applied.append(path)

    logger.verbose(
        "CONFIG",
        f"Merged {2 + len(applied)} layer(s), {len(effective.peers or {})} peer(s)",
    )

    return ResolveResult(
        config=effective,
        root_path=root_path,
        used_defaults=False,
        fragment_dir=fragment_dir,
        applied_fragments=tuple(applied),
        skipped_fragments=tuple(skipped),
    )


def resolve(root_path: Path, *, logger: Logger | None = None) -> ConfigDocument:
    """Loads the effective configuration for the daemon.

    Never raises: root failures fall back to the compiled-in defaults (with
    a warning) and broken fragments are skipped.

    Args:
        root_path: Path to the root configuration file.
        logger: Logger to report through. Defaults to the global logger.

    Returns:
        The effective configuration document.
    """
    return resolve_config(root_path, logger=logger).config
