"""ltspin - pin npm dependencies to mature, policy-selected versions.

    Rewrites package.json so direct dependencies sit one major (or minor) line
    behind the latest release and transitive ones are forced two minor
    releases back through ``overrides``, then reinstalls.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import parse_args
from cli_config import ConfigError, apply_cli_overrides, apply_config, find_config, load_config
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from installers import InstallerError
from pinning import pin_project
from registry.npm.manifest import ManifestError


def _setup_logging(args) -> None:
    """Configure logging; the CLI --loglevel wins over LTSPIN_LOG_LEVEL."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        try:
            add_file_handler(log_file)
        except OSError as e:
            logging.error("Couldn't open log file %s: %s", log_file, e)
            sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    _setup_logging(args)

    target_dir = os.path.abspath(args.TARGET_DIR) if args.TARGET_DIR else os.getcwd()

    try:
        apply_config(load_config(find_config(target_dir, getattr(args, "CONFIG", None))))
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", target=target_dir)
        )

    logging.info("Starting LTS pinning process in %s", target_dir)

    try:
        pin_project(target_dir, install=not args.NO_INSTALL)
    except ManifestError as e:
        logging.error("Error updating package.json in %s: %s", target_dir, e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except InstallerError as e:
        logging.error("Reinstall failed: %s", e)
        logging.error("package.json was updated but the lockfile may be stale.")
        sys.exit(ExitCodes.INSTALL_ERROR.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
