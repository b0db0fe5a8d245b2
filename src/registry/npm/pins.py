"""Render pin decisions into package.json range strings and write them."""

from __future__ import annotations

import logging
from typing import Any, Dict

from constants import Constants, PinKinds
from versioning.models import PinDecision, major_of

logger = logging.getLogger(__name__)


def render_range(decision: PinDecision) -> str:
    """Render a decision as an npm range string.

    ``compatible`` -> ``~1.5.0``, ``below-next-major`` -> ``<2``,
    ``at-least`` -> ``>=1.5.0``, ``exact`` -> ``1.5.0``.
    """
    if decision.kind == PinKinds.COMPATIBLE:
        return f"~{decision.version}"
    if decision.kind == PinKinds.BELOW_NEXT_MAJOR:
        return f"<{major_of(decision.version) + 1}"
    if decision.kind == PinKinds.AT_LEAST:
        return f">={decision.version}"
    if decision.kind == PinKinds.EXACT:
        return decision.version
    raise ValueError(f"Unsupported pin kind: {decision.kind}")


def render_override(decision: PinDecision) -> str:
    """Overrides force a resolution: exact version, or a floor for whitelisted packages."""
    if decision.kind == PinKinds.AT_LEAST:
        return f">={decision.version}"
    return decision.version


def apply_pin(manifest: Dict[str, Any], section: str, decision: PinDecision) -> str:
    """Write ``decision`` into ``manifest[section]`` and return the rendered value.

    Direct sections must already declare the package; the ``overrides``
    section is created when missing.

    Raises:
        ValueError: when a direct section does not declare the package, or the
            section exists but is not a mapping.
    """
    if section == Constants.OVERRIDES_SECTION:
        overrides = manifest.setdefault(Constants.OVERRIDES_SECTION, {})
        if not isinstance(overrides, dict):
            raise ValueError(f"'{section}' is not a mapping")
        rendered = render_override(decision)
        overrides[decision.pkg_name] = rendered
        logger.info("Overriding %s to %s", decision.pkg_name, rendered)
        return rendered

    if section not in Constants.DIRECT_SECTIONS:
        raise ValueError(f"Unknown manifest section: {section}")
    entries = manifest.get(section)
    if not isinstance(entries, dict) or decision.pkg_name not in entries:
        raise ValueError(f"{decision.pkg_name} is not declared in '{section}'")

    rendered = render_range(decision)
    entries[decision.pkg_name] = rendered
    logger.info("Pinning %s to %s in %s", decision.pkg_name, rendered, section)
    return rendered
