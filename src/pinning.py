"""Pinning run orchestration.

Sequence of one run:

1. read package.json;
2. pin every direct dependency (``dependencies``, ``devDependencies``,
   ``peerDependencies``) with the previous-major-or-minor policy;
3. walk node_modules and pin every other installed package through
   ``overrides`` with the two-minor-step-down policy;
4. write package.json;
5. reinstall with the detected package manager.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from constants import Constants
from installers import run_install
from registry.npm.manifest import (
    direct_dependency_names,
    read_manifest,
    section,
    sections_declaring,
    write_manifest,
)
from registry.npm.pins import apply_pin
from registry.npm.scan import collect_installed_packages
from versioning.cache import CatalogCache
from versioning.models import ItemResult, PinDecision, VersionCatalog
from versioning.policy import decide_direct, decide_transitive

logger = logging.getLogger(__name__)


@dataclass
class PinReport:
    """What a run changed, keyed by package name."""

    manifest_path: str = ""
    direct: Dict[str, str] = field(default_factory=dict)
    overrides: Dict[str, str] = field(default_factory=dict)
    skipped: Dict[str, str] = field(default_factory=dict)
    package_manager: Optional[str] = None

    def summary(self) -> str:
        return (
            f"{len(self.direct)} direct pin(s), {len(self.overrides)} override(s), "
            f"{len(self.skipped)} skipped"
        )


def _resolve(cache: CatalogCache, pkg_name: str, report: PinReport) -> Optional[VersionCatalog]:
    result: ItemResult[VersionCatalog] = cache.lookup(pkg_name)
    if not result.is_ok:
        report.skipped[pkg_name] = result.skip_reason or "unresolvable"
        return None
    return result.value


def pin_direct_dependencies(
    manifest: Dict[str, Any],
    cache: CatalogCache,
    report: PinReport,
    pin_style: Optional[str] = None,
) -> None:
    """Rewrite every direct dependency entry with its policy pin.

    A package declared in several direct sections is pinned in each of them.
    Unresolvable packages keep their declared range.
    """
    for pkg_name in direct_dependency_names(manifest):
        catalog = _resolve(cache, pkg_name, report)
        if catalog is None:
            continue
        decision: PinDecision = decide_direct(catalog, pin_style=pin_style)
        for name in sections_declaring(manifest, pkg_name):
            report.direct[pkg_name] = apply_pin(manifest, name, decision)


def pin_transitive_dependencies(
    manifest: Dict[str, Any],
    installed: Iterable[str],
    cache: CatalogCache,
    report: PinReport,
) -> None:
    """Add an ``overrides`` entry for each installed package not pinned directly.

    Skipped: the project itself, packages declared in a direct section, and
    packages that already have an override.
    """
    own_name = manifest.get("name")
    direct = set(direct_dependency_names(manifest))
    existing = set(section(manifest, Constants.OVERRIDES_SECTION))

    for pkg_name in sorted(installed):
        if pkg_name == own_name or pkg_name in direct:
            continue
        if pkg_name in existing:
            logger.debug("Keeping existing override for %s", pkg_name)
            continue
        catalog = _resolve(cache, pkg_name, report)
        if catalog is None:
            continue
        report.overrides[pkg_name] = apply_pin(
            manifest, Constants.OVERRIDES_SECTION, decide_transitive(catalog)
        )


def pin_project(
    target_dir: str,
    cache: Optional[CatalogCache] = None,
    install: bool = True,
    pin_style: Optional[str] = None,
) -> PinReport:
    """Pin direct and transitive dependencies of the project in ``target_dir``.

    Args:
        target_dir: Directory holding package.json.
        cache: Catalog cache to use; a fresh registry-backed cache by default.
        install: Run the package manager after writing package.json.
        pin_style: Direct pin style override (``below-next-major`` or ``compatible``).

    Returns:
        PinReport describing the changes.

    Raises:
        ManifestError: package.json cannot be read, parsed or written.
        InstallerError: the reinstall failed (package.json is already rewritten).
    """
    cache = cache if cache is not None else CatalogCache()
    report = PinReport()

    manifest = read_manifest(target_dir)
    pin_direct_dependencies(manifest, cache, report, pin_style=pin_style)

    installed = collect_installed_packages(os.path.join(target_dir, Constants.NODE_MODULES_DIR))
    logger.info("Discovered %d installed package(s).", len(installed))
    pin_transitive_dependencies(manifest, installed, cache, report)

    report.manifest_path = write_manifest(target_dir, manifest)

    if install:
        command = run_install(target_dir)
        report.package_manager = command.manager.value
    else:
        logger.info("Skipping reinstall; run your package manager to refresh the lockfile.")

    for pkg_name, reason in sorted(report.skipped.items()):
        logger.warning("Left %s unchanged: %s", pkg_name, reason)
    logger.info("Pinning finished: %s", report.summary())
    return report
