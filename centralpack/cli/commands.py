# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the centralpack CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code from centralpack.cli.exit_codes. A bundle that contains placeholders is
still a successful run; the report and the warnings say so.

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

from centralpack.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from centralpack.config.exceptions import ConfigError
from centralpack.config.loader import load_config
from centralpack.config.schema import BundleConfig, CentralPackConfig
from centralpack.logging.logger import get_logger
from centralpack.release.exceptions import StagingError
from centralpack.runtime.bootstrap import bootstrap


def _project_root(args: argparse.Namespace) -> Path:
    """--project-root, else the config file's directory, else the cwd."""
    if args.project_root is not None:
        return Path(args.project_root).expanduser().resolve()
    if args.config is not None:
        return Path(args.config).expanduser().resolve().parent
    return Path.cwd()


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, CentralPackConfig | None, Path, logging.Logger]:
    """
    The shared setup that every command needs: load config, run bootstrap.

    Returns (exit_code, config, project_root, logger). If exit_code is not
    SUCCESS, the caller should return it immediately.
    """
    logger = get_logger(f"centralpack.cli.{command_name}", log_level=args.log_level)
    project_root = _project_root(args)

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, project_root, logger

    if config is not None:
        try:
            bootstrap(config.global_config, project_root, log_level=args.log_level)
        except ValueError as err:
            logger.error("Invalid logging configuration", extra={"error": str(err)})
            return CONFIG_ERROR, None, project_root, logger
        except RuntimeError as err:
            logger.error("Unsupported runtime", extra={"error": str(err)})
            return RUNTIME_ERROR, None, project_root, logger
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, project_root, logger


def _require_bundle(
    config: CentralPackConfig | None,
    logger: logging.Logger,
    command_name: str,
) -> Optional[BundleConfig]:
    if config is None or config.bundle is None:
        logger.error(
            "This command needs a config file with a 'bundle' section",
            extra={"command": command_name},
        )
        return None
    return config.bundle


def _log_bundle_plan(bundle_config: BundleConfig, project_root: Path, logger: logging.Logger) -> None:
    from centralpack.release.artifacts.resolver import build_artifact_specs
    from centralpack.release.packaging.packager import bundle_paths

    paths = bundle_paths(bundle_config, project_root)
    logger.info(
        "Dry run, would stage bundle",
        extra={
            "staging_dir": str(paths.staging_dir),
            "version_dir": str(paths.version_dir),
            "archive": str(paths.archive_path),
            "algorithms": list(bundle_config.checksums.algorithms),
        },
    )
    for spec in build_artifact_specs(bundle_config, project_root):
        exists = spec.source_path.is_file()
        log_fn = logger.info if exists else logger.warning
        log_fn(
            "Dry run, artifact",
            extra={
                "artifact": spec.name,
                "source": str(spec.source_path),
                "destination": spec.destination_name,
                "exists": exists,
            },
        )


def handle_bundle(args: argparse.Namespace) -> int:
    """Stage, checksum, sign and archive a release bundle."""
    exit_code, config, project_root, logger = _load_and_bootstrap(args, "bundle")
    if exit_code != SUCCESS:
        return exit_code

    bundle_config = _require_bundle(config, logger, "bundle")
    if bundle_config is None:
        return USER_ERROR

    try:
        if args.dry_run:
            _log_bundle_plan(bundle_config, project_root, logger)
            return SUCCESS

        from centralpack.release.packaging.packager import assemble_bundle
        from centralpack.release.reporting.report import render_report
        from centralpack.release.signing.signer import resolve_signing_credentials

        credentials = resolve_signing_credentials(bundle_config.signing, project_root)
        bundle = assemble_bundle(bundle_config, project_root, credentials=credentials)

        if bundle.report is not None:
            logger.info("Release report", extra={"report": render_report(bundle.report)})
        logger.info(
            "Bundle complete",
            extra={
                "archive": str(bundle.archive_path) if bundle.archive_path else None,
                "version_dir": str(bundle.version_dir),
                "warnings": len(bundle.warnings),
            },
        )
        return SUCCESS

    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "bundle", "error": str(err)})
        return CONFIG_ERROR
    except ValueError as err:
        logger.error("Invalid bundle paths", extra={"error": str(err)})
        return CONFIG_ERROR
    except StagingError as err:
        logger.error("Staging failed", extra={"error": str(err)})
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Bundle failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_verify(args: argparse.Namespace) -> int:
    """Check a staged bundle for completeness and integrity."""
    exit_code, config, project_root, logger = _load_and_bootstrap(args, "verify")
    if exit_code != SUCCESS:
        return exit_code

    bundle_config = _require_bundle(config, logger, "verify")
    if bundle_config is None:
        return USER_ERROR

    try:
        from centralpack.release.packaging.packager import bundle_paths
        from centralpack.release.signing.signer import Signer, resolve_signing_credentials
        from centralpack.release.verification.verifier import verify_bundle

        if args.bundle_dir is not None:
            version_dir = Path(args.bundle_dir)
        else:
            version_dir = bundle_paths(bundle_config, project_root).version_dir

        signer = None
        if args.check_signatures:
            credentials = resolve_signing_credentials(bundle_config.signing, project_root)
            signer = Signer.from_config(bundle_config.signing, project_root, credentials)

        logger.info("Starting verification", extra={"bundle_dir": str(version_dir)})
        report = verify_bundle(
            version_dir,
            bundle_config.coordinates,
            algorithms=bundle_config.checksums.algorithms,
            signer=signer,
            checksum_signatures=bundle_config.signing.checksum_signatures,
        )

        if not report.is_valid:
            logger.error(
                "Verification failed",
                extra={"checks_failed": report.checks_failed, "errors": report.errors},
            )
            return VALIDATION_ERROR

        if report.placeholders:
            logger.warning(
                "Bundle contains placeholders",
                extra={"placeholders": report.placeholders, "strict": args.strict},
            )
            if args.strict:
                return VALIDATION_ERROR

        logger.info("Verification complete", extra={"checks_passed": report.checks_passed})
        return SUCCESS

    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "verify", "error": str(err)})
        return CONFIG_ERROR
    except ValueError as err:
        logger.error("Invalid bundle paths", extra={"error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Verification failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_lib(args: argparse.Namespace) -> int:
    """Copy the primary build output into the local library folder."""
    exit_code, config, project_root, logger = _load_and_bootstrap(args, "lib")
    if exit_code != SUCCESS:
        return exit_code

    bundle_config = _require_bundle(config, logger, "lib")
    if bundle_config is None:
        return USER_ERROR

    try:
        from centralpack.release.packaging.library import copy_library_artifact, library_destination

        if args.dry_run:
            logger.info(
                "Dry run, would copy library artifact",
                extra={"destination": str(library_destination(bundle_config, project_root))},
            )
            return SUCCESS

        copy_library_artifact(bundle_config, project_root)
        return SUCCESS

    except FileNotFoundError as err:
        logger.error("Library artifact missing", extra={"error": str(err)})
        return USER_ERROR
    except ValueError as err:
        logger.error("Invalid library destination", extra={"error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Library copy failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_check(args: argparse.Namespace) -> int:
    """
    Run the pre-flight environment checks.

    A missing signing tool is reported but does not fail the command; bundle
    runs fall back to placeholder signatures without it.
    """
    exit_code, config, project_root, logger = _load_and_bootstrap(args, "check")
    if exit_code != SUCCESS:
        return exit_code

    from centralpack.release.environment.validator import validate_environment
    from centralpack.utils.paths import resolve_path

    output_dir = None
    gpg_binary = "gpg"
    if config is not None and config.bundle is not None:
        output_dir = resolve_path(config.bundle.output.publish_dir, project_root)
        gpg_binary = config.bundle.signing.gpg_binary

    checks = validate_environment(output_dir=output_dir, gpg_binary=gpg_binary)
    blocking = [c.name for c in checks if not c.passed and c.name != "signing_tool"]
    if blocking:
        logger.error("Environment not ready", extra={"failed_checks": blocking})
        return VALIDATION_ERROR
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("centralpack.cli.info", log_level=args.log_level)

    from centralpack import __version__
    from centralpack.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "centralpack_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "config": args.config,
            "project_root": str(_project_root(args)),
        },
    )
    return SUCCESS
