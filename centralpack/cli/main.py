# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for centralpack.

Every operation is a subcommand of `centralpack`. No interactive prompts.

The global options (--config, --log-level, --dry-run, --project-root) are
inherited by every subcommand through argparse's parent parser mechanism.

Usage:
    centralpack <subcommand> [options]
    centralpack bundle --config release.yaml
    centralpack verify --config release.yaml --strict
    centralpack info
"""

import argparse
import sys
from typing import Optional, Sequence

from centralpack.cli.commands import (
    handle_bundle,
    handle_check,
    handle_info,
    handle_lib,
    handle_verify,
)
from centralpack.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so help text doesn't collide between the parent and the
    subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity. Overrides global.log_level from the config.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Show what would be done without writing anything.",
    )
    parent.add_argument(
        "--project-root",
        type=str,
        default=None,
        dest="project_root",
        help="Directory that relative config paths resolve against (default: the config file's directory).",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands; each sets its handler via set_defaults(func=...)."""
    commands = [
        ("bundle", "Stage, checksum, sign and archive a release bundle.", handle_bundle),
        ("verify", "Check a staged bundle for completeness and integrity.", handle_verify),
        ("lib", "Copy the primary artifact into the local library folder.", handle_lib),
        ("check", "Run pre-flight environment checks.", handle_check),
        ("info", "Display environment and config info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    verify_parser = subparsers.choices["verify"]
    verify_parser.add_argument(
        "--bundle-dir",
        type=str,
        default=None,
        dest="bundle_dir",
        help="Component version directory to verify (default: derived from the config).",
    )
    verify_parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Fail if the bundle contains any placeholder file.",
    )
    verify_parser.add_argument(
        "--check-signatures",
        action="store_true",
        default=False,
        dest="check_signatures",
        help="Verify real signatures with gpg.",
    )


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="centralpack",
        description="centralpack: assemble Maven Central release bundles.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, show help and exit with USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args(argv)

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
