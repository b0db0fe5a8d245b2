"""Package-manager detection and reinstall invocation.

The lockfile present in the project directory selects the package manager;
each manager gets its own install command line.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from constants import Constants, PackageManagers

logger = logging.getLogger(__name__)


class InstallerError(Exception):
    """Raised when the reinstall command cannot be run or exits non-zero."""


@dataclass
class InstallCommand:
    """Command line used to reinstall a project with one package manager."""

    manager: PackageManagers
    extra_args: List[str] = field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.manager.value, "install"] + list(self.extra_args)


def detect_package_manager(dir_path: str) -> PackageManagers:
    """Select the package manager from the lockfile present in ``dir_path``.

    Lockfiles are checked in ``Constants.LOCKFILES`` order; with none present
    the default manager (npm) is used.
    """
    for lockfile, manager in Constants.LOCKFILES:
        if os.path.isfile(os.path.join(dir_path, lockfile)):
            logger.debug("Found %s in %s", lockfile, dir_path)
            return manager
    return Constants.DEFAULT_PACKAGE_MANAGER


def get_install_command(manager: PackageManagers) -> InstallCommand:
    return InstallCommand(
        manager=manager,
        extra_args=list(Constants.INSTALL_ARGS.get(manager.value, [])),
    )


def run_install(
    dir_path: str,
    manager: Optional[PackageManagers] = None,
    runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
) -> InstallCommand:
    """Reinstall dependencies in ``dir_path`` so the lockfile matches package.json.

    Blocks until the package manager exits. Its output goes straight to the
    terminal.

    Args:
        dir_path: Project directory.
        manager: Package manager to use; detected from lockfiles when omitted.
        runner: ``subprocess.run`` compatible callable, for tests.

    Returns:
        The command that was run.

    Raises:
        InstallerError: executable missing or non-zero exit status.
    """
    if manager is None:
        manager = detect_package_manager(dir_path)
        logger.info("Detected %s as package manager.", manager.value)

    command = get_install_command(manager)
    logger.info("Running: %s", " ".join(command.argv))
    try:
        result = (runner or subprocess.run)(command.argv, cwd=dir_path, check=False)  # noqa: S603
    except FileNotFoundError as e:
        raise InstallerError(f"{manager.value} executable not found") from e
    except OSError as e:
        raise InstallerError(f"Couldn't run {manager.value}: {e}") from e

    if result.returncode != 0:
        raise InstallerError(
            f"'{' '.join(command.argv)}' exited with status {result.returncode}"
        )
    return command
