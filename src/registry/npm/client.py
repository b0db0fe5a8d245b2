"""NPM registry client: published version listings."""

from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import quote

from constants import Constants
from common.http_client import fetch_json
from common.logging_utils import extra_context, safe_url

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when the registry cannot provide a version listing for a package."""


def package_url(pkg_name: str, registry_url: str = "") -> str:
    """Build the packument URL for a (possibly scoped) package name.

    Scoped names keep the leading ``@`` and encode the separating slash,
    e.g. ``@babel/core`` -> ``@babel%2Fcore``.
    """
    base = registry_url or Constants.REGISTRY_URL_NPM
    if not base.endswith("/"):
        base += "/"
    return base + quote(pkg_name, safe="@")


def fetch_published_versions(pkg_name: str) -> Dict[str, Any]:
    """Return the ``versions`` mapping of a package's packument.

    Only the keys are meaningful to callers; the metadata values are passed
    through untouched.

    Raises:
        RegistryError: network failure, unknown package, non-2xx response or a
            document without a ``versions`` mapping.
    """
    if not pkg_name:
        raise RegistryError("empty package name")

    url = package_url(pkg_name, Constants.REGISTRY_URL_NPM)
    headers = {"Accept": Constants.REGISTRY_ACCEPT_HEADER}
    response = fetch_json(url, headers=headers)
    status_code = response.status_code

    if not response.reachable:
        raise RegistryError(f"{pkg_name}: registry unreachable ({response.error})")
    if status_code == 404:
        raise RegistryError(f"{pkg_name}: not found in registry")
    if not response.ok:
        logger.warning(
            "Registry returned status %d for %s",
            status_code,
            pkg_name,
            extra=extra_context(
                event="http_response",
                outcome="handled_non_2xx",
                status_code=status_code,
                target=safe_url(url),
                package_manager="npm"
            )
        )
        raise RegistryError(f"{pkg_name}: unexpected status code {status_code}")
    data = response.data
    if not isinstance(data, dict):
        raise RegistryError(f"{pkg_name}: malformed registry response")

    versions = data.get("versions")
    if not isinstance(versions, dict):
        raise RegistryError(f"{pkg_name}: registry response has no versions")
    return versions
