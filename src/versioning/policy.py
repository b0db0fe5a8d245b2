"""Version selection policy.

Three selection strategies over a ``VersionCatalog``:

- ``previous_major_or_minor`` for direct dependencies: one major (or, failing
  that, one minor line) behind the latest release.
- ``two_minor_step_down`` for transitive dependencies: two minor releases
  behind within the current major line.
- ``latest_passthrough`` for whitelisted packages.

0.x lines are never downgraded; they are treated as a single floating line.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Optional

from constants import Constants, PinKinds
from versioning.models import PinDecision, VersionCatalog, major_of, minor_of

logger = logging.getLogger(__name__)


def previous_major_or_minor(catalog: VersionCatalog) -> str:
    """Pick the newest release of the previous major, else of a previous minor.

    Args:
        catalog: Catalog of stable versions, newest first.

    Returns:
        The selected version string; ``catalog.latest`` when no downgrade applies.
    """
    latest = catalog.latest
    latest_major = major_of(latest)
    if latest_major == 0:
        return latest

    for current in catalog.ordered_versions[1:]:
        current_major = major_of(current)
        if current_major < latest_major:
            if current_major == 0:
                logger.debug("Previous major of %s is 0.x, using latest: %s", catalog.pkg_name, latest)
                return latest
            logger.debug("Found previous major version for %s: %s", catalog.pkg_name, current)
            return current

    latest_minor = minor_of(latest)
    for current in catalog.ordered_versions[1:]:
        if major_of(current) == latest_major and minor_of(current) < latest_minor:
            logger.debug("No previous major, using previous minor version for %s: %s", catalog.pkg_name, current)
            return current

    logger.debug("No previous major or minor version for %s, using latest: %s", catalog.pkg_name, latest)
    return latest


def two_minor_step_down(catalog: VersionCatalog) -> str:
    """Pick the newest release at least two minors below latest in the same major.

    Falls back to the previous major line (or latest when there is none) when
    the current major line has fewer than three minor lines.
    """
    latest = catalog.latest
    latest_major = major_of(latest)
    if latest_major == 0:
        return latest

    ceiling = minor_of(latest) - 2
    for current in catalog.ordered_versions:
        if major_of(current) == latest_major and minor_of(current) <= ceiling:
            return current

    return catalog.previous_major


def latest_passthrough(catalog: VersionCatalog) -> str:
    return catalog.latest


def is_whitelisted(pkg_name: str, whitelist: Optional[AbstractSet[str]] = None) -> bool:
    allowed = Constants.WHITELIST if whitelist is None else whitelist
    return pkg_name in allowed


def decide_direct(
    catalog: VersionCatalog,
    pin_style: Optional[str] = None,
    whitelist: Optional[AbstractSet[str]] = None,
) -> PinDecision:
    """Build the pin for a package declared directly in the manifest.

    Args:
        catalog: Catalog of the package.
        pin_style: ``below-next-major`` (default) or ``compatible``.
        whitelist: Override of ``Constants.WHITELIST``, for tests.
    """
    if is_whitelisted(catalog.pkg_name, whitelist):
        return PinDecision(catalog.pkg_name, latest_passthrough(catalog), PinKinds.AT_LEAST)

    style = pin_style or Constants.DIRECT_PIN_STYLE
    kind = PinKinds.COMPATIBLE if style == PinKinds.COMPATIBLE.value else PinKinds.BELOW_NEXT_MAJOR
    return PinDecision(catalog.pkg_name, previous_major_or_minor(catalog), kind)


def decide_transitive(
    catalog: VersionCatalog,
    whitelist: Optional[AbstractSet[str]] = None,
) -> PinDecision:
    """Build the ``overrides`` pin for a package found only in the installed tree."""
    if is_whitelisted(catalog.pkg_name, whitelist):
        return PinDecision(catalog.pkg_name, latest_passthrough(catalog), PinKinds.AT_LEAST)
    return PinDecision(catalog.pkg_name, two_minor_step_down(catalog), PinKinds.EXACT)
