"""Tests for VersionCatalog construction and derived values."""

import pytest

from versioning.models import ItemResult, VersionCatalog, major_of, minor_of


class TestFromVersions:
    """Filtering and ordering of published versions."""

    def test_sorts_descending_by_precedence(self):
        """Versions are ordered newest first by semver precedence."""
        catalog = VersionCatalog.from_versions("pkg", ["1.2.0", "1.10.0", "1.9.3", "0.1.0"])
        assert catalog.ordered_versions == ("1.10.0", "1.9.3", "1.2.0", "0.1.0")

    def test_drops_prereleases(self):
        """Prerelease versions never enter the catalog."""
        catalog = VersionCatalog.from_versions("pkg", ["2.0.0-beta.1", "1.4.0", "2.0.0-rc.2"])
        assert catalog.ordered_versions == ("1.4.0",)
        assert catalog.latest == "1.4.0"

    def test_drops_invalid_versions(self):
        """Strings that are not full semver are ignored."""
        catalog = VersionCatalog.from_versions("pkg", ["latest", "1.0", "v", "1.0.1"])
        assert catalog.ordered_versions == ("1.0.1",)

    def test_no_stable_versions_returns_none(self):
        """No catalog is built without a stable version."""
        assert VersionCatalog.from_versions("pkg", ["1.0.0-alpha", "garbage"]) is None
        assert VersionCatalog.from_versions("pkg", []) is None

    def test_direct_construction_rejects_empty(self):
        """An empty catalog cannot be constructed directly."""
        with pytest.raises(ValueError):
            VersionCatalog(pkg_name="pkg", ordered_versions=())


class TestPreviousMajor:
    """previous_major derived value."""

    def test_highest_version_of_lower_major(self):
        """The newest release of the nearest lower major is returned."""
        catalog = VersionCatalog.from_versions("pkg", ["3.1.0", "3.0.0", "2.9.1", "2.0.0", "1.0.0"])
        assert catalog.previous_major == "2.9.1"

    def test_single_major_returns_latest(self):
        """Without a lower major the latest release is returned."""
        catalog = VersionCatalog.from_versions("pkg", ["4.2.0", "4.1.0"])
        assert catalog.previous_major == "4.2.0"

    def test_zero_major_predecessor_is_not_a_real_major(self):
        """A 0.x predecessor does not count as a previous major."""
        catalog = VersionCatalog.from_versions("pkg", ["1.1.0", "1.0.0", "0.9.0"])
        # 1.0.0 shares the major; the only lower major is 0.x
        assert catalog.previous_major == "1.1.0"


class TestHelpers:
    """Small version helpers and ItemResult."""

    def test_major_and_minor(self):
        """Major and minor numbers are read from a version string."""
        assert major_of("12.4.1") == 12
        assert minor_of("12.4.1") == 4

    def test_item_result(self):
        """ItemResult carries either a value or a skip reason."""
        ok = ItemResult.ok("x")
        skipped = ItemResult.skip("no data")
        assert ok.is_ok and ok.value == "x"
        assert not skipped.is_ok
        assert skipped.value is None
        assert skipped.skip_reason == "no data"
