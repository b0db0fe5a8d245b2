"""Data models for version catalogs and pin decisions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Tuple, TypeVar

import semantic_version

from constants import PinKinds

T = TypeVar("T")


@dataclass(frozen=True)
class VersionCatalog:
    """Stable published versions of one package, newest first.

    Built with ``from_versions``; a catalog is never empty.
    """
    pkg_name: str
    ordered_versions: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.ordered_versions:
            raise ValueError(f"empty version catalog for {self.pkg_name}")

    @classmethod
    def from_versions(cls, pkg_name: str, raw_versions: Iterable[str]) -> Optional["VersionCatalog"]:
        """Filter to valid non-prerelease versions and sort descending.

        Returns None when nothing survives the filter.
        """
        parsed: List[Tuple[semantic_version.Version, str]] = []
        for raw in raw_versions:
            try:
                ver = semantic_version.Version(raw)
            except ValueError:
                continue
            if ver.prerelease:
                continue
            parsed.append((ver, raw))

        if not parsed:
            return None

        # Build metadata carries no precedence; the raw string breaks the tie.
        parsed.sort(key=lambda item: (item[0].major, item[0].minor, item[0].patch, item[1]), reverse=True)
        return cls(pkg_name=pkg_name, ordered_versions=tuple(raw for _, raw in parsed))

    @property
    def latest(self) -> str:
        return self.ordered_versions[0]

    @property
    def previous_major(self) -> str:
        """Most recent release of an earlier major line, or ``latest``.

        A 0.x predecessor does not count as a real major line.
        """
        latest_major = major_of(self.latest)
        for version in self.ordered_versions[1:]:
            if major_of(version) < latest_major:
                return self.latest if major_of(version) == 0 else version
        return self.latest


@dataclass(frozen=True)
class PinDecision:
    """Chosen version and the range syntax to write for one package."""
    pkg_name: str
    version: str
    kind: PinKinds


@dataclass(frozen=True)
class ItemResult(Generic[T]):
    """Per-item outcome: a value, or the reason the item was skipped."""
    value: Optional[T] = None
    skip_reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "ItemResult[T]":
        return cls(value=value)

    @classmethod
    def skip(cls, reason: str) -> "ItemResult[T]":
        return cls(skip_reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.skip_reason is None


def parse_version(version: str) -> semantic_version.Version:
    return semantic_version.Version(version)


def major_of(version: str) -> int:
    return parse_version(version).major


def minor_of(version: str) -> int:
    return parse_version(version).minor
