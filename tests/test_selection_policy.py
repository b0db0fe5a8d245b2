"""Tests for the version selection policies and pin decisions."""

import pytest

from constants import Constants, PinKinds
from versioning.models import VersionCatalog
from versioning.policy import (
    decide_direct,
    decide_transitive,
    is_whitelisted,
    latest_passthrough,
    previous_major_or_minor,
    two_minor_step_down,
)


def catalog(*versions, name="pkg"):
    return VersionCatalog.from_versions(name, list(versions))


class TestPreviousMajorOrMinor:
    """Direct dependency policy."""

    def test_highest_version_below_latest_major(self):
        """Pick the newest release of the previous major."""
        assert previous_major_or_minor(catalog("2.1.0", "2.0.0", "1.5.0", "1.0.0")) == "1.5.0"

    def test_all_zero_major_keeps_latest(self):
        """0.x packages keep their latest release."""
        assert previous_major_or_minor(catalog("0.9.0", "0.8.0")) == "0.9.0"

    def test_single_version(self):
        """A single published version is returned as-is."""
        assert previous_major_or_minor(catalog("1.0.0")) == "1.0.0"

    def test_previous_minor_when_no_lower_major(self):
        """Fall back to the previous minor line within the major."""
        assert previous_major_or_minor(catalog("1.3.0", "1.2.0", "1.1.0")) == "1.2.0"

    def test_previous_minor_prefers_most_recent_patch(self):
        """The previous minor line resolves to its newest patch."""
        assert previous_major_or_minor(catalog("1.3.0", "1.2.5", "1.2.4", "1.1.0")) == "1.2.5"

    def test_zero_major_predecessor_returns_latest(self):
        """A 0.x predecessor leaves latest in place."""
        # Lower-major candidate is 0.x: no genuine prior major, and the minor scan is not reached.
        assert previous_major_or_minor(catalog("1.2.0", "1.1.0", "0.9.0")) == "1.2.0"

    def test_patch_only_history_returns_latest(self):
        """Patch-only history has nothing to step back to."""
        assert previous_major_or_minor(catalog("2.0.2", "2.0.1", "2.0.0")) == "2.0.2"

    def test_skips_back_multiple_majors_only_to_the_nearest(self):
        """Only the nearest lower major is considered."""
        assert previous_major_or_minor(catalog("5.0.0", "3.2.1", "3.2.0", "2.0.0")) == "3.2.1"


class TestTwoMinorStepDown:
    """Transitive dependency policy."""

    def test_two_minors_back(self):
        """Step back exactly two minor lines."""
        assert two_minor_step_down(catalog("3.4.0", "3.3.0", "3.2.0", "3.1.0", "3.0.0")) == "3.2.0"

    def test_picks_highest_patch_at_or_below_ceiling(self):
        """The newest patch at or below the ceiling wins."""
        assert two_minor_step_down(catalog("3.4.0", "3.2.7", "3.2.1", "3.1.9")) == "3.2.7"

    def test_gap_in_minor_lines(self):
        """Missing minor lines are skipped over."""
        assert two_minor_step_down(catalog("2.9.0", "2.8.0", "2.5.3", "2.5.0")) == "2.5.3"

    def test_zero_major_returns_latest(self):
        """0.x packages keep their latest release."""
        assert two_minor_step_down(catalog("0.12.0", "0.10.0", "0.9.0")) == "0.12.0"

    def test_single_version(self):
        """A single published version is returned as-is."""
        assert two_minor_step_down(catalog("1.0.0")) == "1.0.0"

    def test_falls_back_to_previous_major(self):
        """A short major line falls back to the previous major."""
        assert two_minor_step_down(catalog("4.1.0", "4.0.0", "3.7.2", "3.7.0")) == "3.7.2"

    def test_short_major_line_without_predecessor_keeps_latest(self):
        """No previous major and too few minors keeps latest."""
        assert two_minor_step_down(catalog("1.1.0", "1.0.3", "1.0.0")) == "1.1.0"


class TestLatestPassthrough:
    """Whitelist policy."""

    def test_returns_latest(self):
        """Whitelisted packages track latest."""
        assert latest_passthrough(catalog("4.2.0", "3.0.0")) == "4.2.0"


class TestDecisions:
    """Pairing of chosen versions with pin kinds."""

    def test_direct_default_style(self):
        """Direct pins default to the below-next-major style."""
        decision = decide_direct(catalog("2.1.0", "2.0.0", "1.5.0", "1.0.0"))
        assert decision.version == "1.5.0"
        assert decision.kind == PinKinds.BELOW_NEXT_MAJOR

    def test_direct_compatible_style(self):
        """The compatible style is honoured when requested."""
        decision = decide_direct(catalog("1.3.0", "1.2.0"), pin_style="compatible")
        assert decision.version == "1.2.0"
        assert decision.kind == PinKinds.COMPATIBLE

    def test_direct_style_from_constants(self):
        """The configured default pin style is used."""
        Constants.DIRECT_PIN_STYLE = PinKinds.COMPATIBLE.value
        assert decide_direct(catalog("1.3.0", "1.2.0")).kind == PinKinds.COMPATIBLE

    def test_direct_whitelisted(self):
        """Whitelisted direct dependencies get an at-least pin on latest."""
        decision = decide_direct(catalog("4.2.0", "3.9.0", name="typescript"))
        assert decision.version == "4.2.0"
        assert decision.kind == PinKinds.AT_LEAST

    def test_transitive(self):
        """Transitive pins are exact two-minor step downs."""
        decision = decide_transitive(catalog("3.4.0", "3.3.0", "3.2.0"))
        assert decision.version == "3.2.0"
        assert decision.kind == PinKinds.EXACT

    def test_transitive_whitelisted(self):
        """Whitelisted transitive dependencies get an at-least pin."""
        decision = decide_transitive(catalog("1.0.30001", "1.0.30000", name="caniuse-lite"))
        assert decision.version == "1.0.30001"
        assert decision.kind == PinKinds.AT_LEAST

    @pytest.mark.parametrize("name", sorted(Constants.WHITELIST))
    def test_builtin_whitelist(self, name):
        """Built-in whitelist entries are recognised."""
        assert is_whitelisted(name)

    def test_custom_whitelist(self):
        """An explicit whitelist replaces the built-in one."""
        assert is_whitelisted("left-pad", {"left-pad"})
        assert not is_whitelisted("typescript", set())
        decision = decide_direct(catalog("2.0.0", "1.0.0", name="left-pad"), whitelist={"left-pad"})
        assert decision.kind == PinKinds.AT_LEAST
