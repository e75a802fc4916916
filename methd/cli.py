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

"""Command-line interface for methd configuration.

This module provides the methd-config entry point, used to inspect and check
the configuration a methd daemon would run with.

Commands:

    show: Resolve the cascade and print the effective configuration
    validate: Check the root file and all fragments strictly

Example:
    Print the effective configuration:
        ```bash
        $ methd-config show /etc/methd/methd.yaml
        ```

    Show which fragments were applied:
        ```bash
        $ methd-config show /etc/methd/methd.yaml --verbose
        ```

    Check a configuration tree before restarting the daemon:
        ```bash
        $ methd-config validate /etc/methd/methd.yaml
        ```

Exit Codes:

- 0: Success
- 1: Validation failure

Note:
    show never fails on a broken root file; like the daemon, it falls back
    to the compiled-in defaults and prints a warning. Warnings and the
    --verbose summary go to stderr, so stdout is always plain YAML.

"""

from __future__ import annotations

import argparse
from importlib.metadata import version
from pathlib import Path
import sys

from methd.config import resolve_config, serialize
from methd.logging import get_logger, set_global_logger
from methd.validation import validate_config


def cmd_show(args: argparse.Namespace) -> int:
    """Handler for 'methd-config show' command.

    Args:
        args: Parsed command-line arguments containing the config path and
            verbosity flags.

    Returns:
        Exit code (always 0).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    config_path = Path(args.config).resolve()
    result = resolve_config(config_path, logger=logger)

    if args.verbose or args.debug:
        print("=" * 70, file=sys.stderr)
        print("EFFECTIVE CONFIGURATION", file=sys.stderr)
        print("=" * 70, file=sys.stderr)
        print(f"Root:        {result.root_path}", file=sys.stderr)
        source = "fallback" if result.used_defaults else "merged"
        print(f"Defaults:    {source}", file=sys.stderr)
        if result.fragment_dir is not None:
            print(f"Fragments:   {result.fragment_dir}", file=sys.stderr)
        for path in result.applied_fragments:
            print(f"  [APPLIED] {path.name}", file=sys.stderr)
        for path in result.skipped_fragments:
            print(f"  [SKIPPED] {path.name}", file=sys.stderr)
        print("=" * 70, file=sys.stderr)

    print(serialize(result.config), end="")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'methd-config validate' command.

    Args:
        args: Parsed command-line arguments containing the config path and
            verbose flag.

    Returns:
        Exit code (0 for a valid tree, 1 for invalid).
    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    config_path = Path(args.config).resolve()

    print(f"Validating config: {config_path}")
    print()

    result = validate_config(config_path, logger=logger)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Config:      {result.config_path}")
    print(f"Status:      {result.status.upper()}")
    print(f"Fragments:   {result.fragment_count}")
    print(f"Peers:       {result.peer_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Configuration is valid!")
        return 0
    else:
        print()
        print(
            f"[FAILED] Configuration validation failed with {len(result.errors)} error(s)."
        )
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="methd-config",
        description="Inspect and validate methd daemon configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"methd-config {version('methd')}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'show' command
    parser_show = subparsers.add_parser(
        "show",
        help="Print the effective configuration",
        description="Merge defaults, the root file and its fragments, then print the result as YAML.",
    )
    parser_show.add_argument(
        "config",
        help="Path to the root configuration file",
    )
    parser_show.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show which layers and fragments were merged",
    )
    parser_show.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show skipped fragments and why (implies --verbose)",
    )
    parser_show.set_defaults(func=cmd_show)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate the root file and all fragments",
        description="Report every unreadable or malformed file instead of skipping it.",
    )
    parser_validate.add_argument(
        "config",
        help="Path to the root configuration file",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress",
    )
    parser_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the methd-config CLI.

    This function is registered as the 'methd-config' console script in
    pyproject.toml.
    """
    args = build_parser().parse_args(argv)
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
