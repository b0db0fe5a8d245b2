"""Per-run memoizing cache of version catalogs."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import ItemResult, VersionCatalog

logger = logging.getLogger(__name__)

VersionFetcher = Callable[[str], Mapping[str, Any]]


def _default_fetcher(pkg_name: str) -> Mapping[str, Any]:
    from registry.npm.client import fetch_published_versions  # pylint: disable=import-outside-toplevel
    return fetch_published_versions(pkg_name)


class CatalogCache:
    """Catalog lookups keyed by package name, populated on demand.

    Entries live for the lifetime of the cache object and are never
    invalidated. Unresolvable packages are cached as skips so the registry is
    asked at most once per name.
    """

    def __init__(self, fetcher: Optional[VersionFetcher] = None):
        """Initialize the cache.

        Args:
            fetcher: Callable returning the published-versions mapping for a
                package name; raises on failure. Defaults to the npm registry.
        """
        self._fetcher = fetcher or _default_fetcher
        self._entries: Dict[str, ItemResult[VersionCatalog]] = {}
        self.fetch_count = 0

    def seed(self, pkg_name: str, versions: Iterable[str]) -> Optional[VersionCatalog]:
        """Pre-populate the cache from a known version list."""
        catalog = VersionCatalog.from_versions(pkg_name, versions)
        if catalog is None:
            self._entries[pkg_name] = ItemResult.skip("no stable versions published")
        else:
            self._entries[pkg_name] = ItemResult.ok(catalog)
        return catalog

    def lookup(self, pkg_name: str) -> ItemResult[VersionCatalog]:
        """Return the cached outcome for ``pkg_name``, fetching it on first use."""
        cached = self._entries.get(pkg_name)
        if cached is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Catalog cache hit",
                    extra=extra_context(event="cache_hit", component="catalog_cache", package=pkg_name)
                )
            return cached

        result = self._load(pkg_name)
        self._entries[pkg_name] = result
        return result

    def fetch_catalog(self, pkg_name: str) -> Optional[VersionCatalog]:
        """Return the catalog for ``pkg_name`` or None when it cannot be resolved."""
        return self.lookup(pkg_name).value

    def _load(self, pkg_name: str) -> ItemResult[VersionCatalog]:
        self.fetch_count += 1
        try:
            versions = self._fetcher(pkg_name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Error fetching versions for %s: %s", pkg_name, exc)
            return ItemResult.skip(f"version lookup failed: {exc}")

        catalog = VersionCatalog.from_versions(pkg_name, list(versions or ()))
        if catalog is None:
            logger.warning("No stable versions published for %s; leaving its pin unchanged.", pkg_name)
            return ItemResult.skip("no stable versions published")

        if is_debug_enabled(logger):
            logger.debug(
                "Catalog built",
                extra=extra_context(
                    event="catalog_built",
                    component="catalog_cache",
                    package=pkg_name,
                    count=len(catalog.ordered_versions),
                    latest=catalog.latest
                )
            )
        return ItemResult.ok(catalog)
