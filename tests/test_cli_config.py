"""Tests for configuration loading and overrides."""

from types import SimpleNamespace

import pytest

from cli_config import ConfigError, apply_cli_overrides, apply_config, find_config, load_config
from constants import Constants


class TestFindConfig:
    """Config file discovery."""

    def test_explicit_path_wins(self, tmp_path):
        """An explicit --config path is used as given."""
        (tmp_path / ".ltspin.yml").write_text("{}")
        assert find_config(str(tmp_path), "other.yml") == "other.yml"

    def test_project_default(self, tmp_path):
        """.ltspin.yml in the project is picked up."""
        (tmp_path / ".ltspin.yml").write_text("{}")
        assert find_config(str(tmp_path)) == str(tmp_path / ".ltspin.yml")

    def test_none(self, tmp_path):
        """No config is used when none exists."""
        assert find_config(str(tmp_path)) is None


class TestLoadConfig:
    """YAML parsing."""

    def test_namespaced_section(self, tmp_path):
        """Settings under the ltspin key are returned."""
        path = tmp_path / "c.yml"
        path.write_text("ltspin:\n  registry_url: http://localhost:4873\n")
        assert load_config(str(path)) == {"registry_url": "http://localhost:4873"}

    def test_flat_document(self, tmp_path):
        """A flat document is treated as the settings."""
        path = tmp_path / "c.yml"
        path.write_text("request_timeout: 10\n")
        assert load_config(str(path)) == {"request_timeout": 10}

    def test_empty_document(self, tmp_path):
        """An empty file yields no settings."""
        path = tmp_path / "c.yml"
        path.write_text("")
        assert load_config(str(path)) == {}

    def test_no_path(self):
        """No path yields no settings."""
        assert load_config(None) == {}

    def test_missing_file(self, tmp_path):
        """A missing config file raises ConfigError."""
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yml"))

    def test_invalid_yaml(self, tmp_path):
        """Invalid YAML raises ConfigError."""
        path = tmp_path / "c.yml"
        path.write_text("ltspin: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_mapping(self, tmp_path):
        """A non-mapping document raises ConfigError."""
        path = tmp_path / "c.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(str(path))


class TestApplyConfig:
    """Applying settings onto Constants."""

    def test_recognised_keys(self):
        """Every recognised key is applied onto Constants."""
        apply_config({
            "registry_url": "http://localhost:4873",
            "request_timeout": "12",
            "http_retry_max": 2,
            "pin_style": "Compatible",
            "install_args": {"npm": "--legacy-peer-deps --no-audit", "pnpm": ["--no-frozen-lockfile"]},
        })
        assert Constants.REGISTRY_URL_NPM == "http://localhost:4873/"
        assert Constants.REQUEST_TIMEOUT == 12
        assert Constants.HTTP_RETRY_MAX == 2
        assert Constants.DIRECT_PIN_STYLE == "compatible"
        assert Constants.INSTALL_ARGS["npm"] == ["--legacy-peer-deps", "--no-audit"]
        assert Constants.INSTALL_ARGS["pnpm"] == ["--no-frozen-lockfile"]

    def test_unknown_key_is_ignored(self, caplog):
        """Unknown keys are logged and ignored."""
        apply_config({"whitelist": ["left-pad"]})
        assert "left-pad" not in Constants.WHITELIST
        assert "Ignoring unknown config key: whitelist" in caplog.text

    @pytest.mark.parametrize(
        "settings",
        [
            {"request_timeout": "soon"},
            {"http_retry_max": 0},
            {"pin_style": "caret"},
            {"install_args": ["--x"]},
            {"install_args": {"cargo": []}},
        ],
    )
    def test_invalid_values(self, settings):
        """Invalid values raise ConfigError."""
        with pytest.raises(ConfigError):
            apply_config(settings)

    def test_cli_override(self):
        """CLI flags override config and unset flags change nothing."""
        apply_cli_overrides(SimpleNamespace(PIN_STYLE="compatible"))
        assert Constants.DIRECT_PIN_STYLE == "compatible"
        apply_cli_overrides(SimpleNamespace(PIN_STYLE=None))
        assert Constants.DIRECT_PIN_STYLE == "compatible"
