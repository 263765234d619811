"""Unit tests for command helper functions."""

from unittest.mock import Mock

import pytest

from siteflow.exceptions import ConfigError
from siteflow.lib.command_helpers import (
    get_api_config,
    get_site_name,
    get_watch_interval,
    require_config,
)


def _ctx(config, site=None):
    return {
        "config": config,
        "verbose": False,
        "quiet": False,
        "output_format": "normal",
        "args": Mock(site=site),
    }


class TestRequireConfig:
    def test_returns_config(self, mock_config):
        assert require_config(_ctx(mock_config)) is mock_config

    def test_missing_config(self):
        with pytest.raises(ConfigError, match="Configuration not loaded"):
            require_config(_ctx(None))


class TestGetApiConfig:
    """Test API configuration extraction."""

    def test_full_config(self, mock_config):
        assert get_api_config(_ctx(mock_config)) == {
            "token": "test-token",
            "base_url": "https://api.test/api",
            "timeout": 10.0,
        }

    def test_token_only(self):
        assert get_api_config(_ctx({"api": {"token": "abc"}})) == {"token": "abc"}

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="API token not configured"):
            get_api_config(_ctx({"api": {"base_url": "https://api.test"}}))

    def test_timeout_from_env_string(self):
        api_config = get_api_config(_ctx({"api": {"token": "abc", "timeout": "2.5"}}))

        assert api_config["timeout"] == 2.5

    @pytest.mark.parametrize("timeout", ["soon", 0, -1])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ConfigError, match="api.timeout"):
            get_api_config(_ctx({"api": {"token": "abc", "timeout": timeout}}))


class TestGetSiteName:
    """Test target site selection."""

    def test_site_argument_wins(self, mock_config):
        assert get_site_name(_ctx(mock_config, site="other-site")) == "other-site"

    def test_default_site(self, mock_config):
        assert get_site_name(_ctx(mock_config)) == "test-site"

    def test_no_site(self):
        with pytest.raises(ConfigError, match="No site specified"):
            get_site_name(_ctx({"api": {"token": "abc"}}))


class TestGetWatchInterval:
    """Test watch interval configuration."""

    def test_configured(self):
        assert get_watch_interval(_ctx({"watch": {"interval": "2"}}), 5) == 2.0

    def test_default(self):
        assert get_watch_interval(_ctx({}), 5) == 5.0

    def test_invalid(self):
        with pytest.raises(ConfigError, match="watch.interval must be greater than zero"):
            get_watch_interval(_ctx({"watch": {"interval": 0}}), 5)
