"""
Unit tests for the app configuration.
"""

import importlib
import os
from unittest.mock import patch

import pytest

import infra_cdk.config as config_module


def _reload_config():
    """
    Reload the infra_cdk.config module to ensure environment changes are picked up.
    """
    importlib.reload(config_module)
    return config_module.Config


class TestConfig:
    """Test configuration defaults and validation."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        """Test default values when nothing is set."""
        Config = _reload_config()
        assert Config.AWS_REGION == "ap-northeast-1"
        assert Config.DOMAIN_NAME == "example.com"
        assert Config.HOSTED_ZONE_ID == ""
        assert Config.PROJECT_TAG == "infra-cdk"
        assert Config.WAF_REGION == "us-east-1"

    @patch.dict(os.environ, {"CDK_DEFAULT_REGION": "eu-west-1", "CDK_DEFAULT_ACCOUNT": "111122223333"}, clear=True)
    def test_falls_back_to_cdk_environment(self):
        """Test that CDK CLI variables are used when AWS ones are unset."""
        Config = _reload_config()
        assert Config.AWS_REGION == "eu-west-1"
        assert Config.AWS_ACCOUNT_ID == "111122223333"

    @patch.dict(os.environ, {
        "AWS_DEFAULT_REGION": "us-west-2",
        "CDK_DEFAULT_REGION": "eu-west-1",
        "DOMAIN_NAME": "  Shop.Example.COM ",
    }, clear=True)
    def test_explicit_values_win(self):
        """Test that explicit variables take precedence and the domain is normalized."""
        Config = _reload_config()
        assert Config.AWS_REGION == "us-west-2"
        assert Config.DOMAIN_NAME == "shop.example.com"

    @patch.dict(os.environ, {"AWS_DEFAULT_REGION": ""}, clear=True)
    def test_validate_missing_region(self):
        """Test config validation with an empty region."""
        Config = _reload_config()
        with pytest.raises(ValueError) as exc_info:
            Config.validate()

        assert "AWS_DEFAULT_REGION" in str(exc_info.value)

    @patch.dict(os.environ, {"DOMAIN_NAME": "localhost"}, clear=True)
    def test_validate_invalid_domain(self):
        """Test that a host name without a dot is rejected."""
        Config = _reload_config()
        with pytest.raises(ValueError) as exc_info:
            Config.validate()

        assert "DOMAIN_NAME 'localhost'" in str(exc_info.value)

    @patch.dict(os.environ, {"NOTIFICATION_EMAIL": "not-an-email"}, clear=True)
    def test_validate_invalid_email(self):
        """Test that a malformed notification address is rejected."""
        Config = _reload_config()
        with pytest.raises(ValueError) as exc_info:
            Config.validate()

        assert "NOTIFICATION_EMAIL" in str(exc_info.value)

    @patch.dict(os.environ, {
        "AWS_DEFAULT_REGION": "",
        "DOMAIN_NAME": "bad_domain",
        "NOTIFICATION_EMAIL": "nope",
    }, clear=True)
    def test_errors_lists_every_problem(self):
        """Test that all problems are reported together."""
        Config = _reload_config()
        problems = Config.errors()
        assert len(problems) == 4

    @patch.dict(os.environ, {"NOTIFICATION_EMAIL": "ops@example.com", "HOSTED_ZONE_ID": " Z123 "}, clear=True)
    def test_validate_success(self):
        """Test successful config validation."""
        Config = _reload_config()
        Config.validate()
        assert Config.NOTIFICATION_EMAIL == "ops@example.com"
        assert Config.HOSTED_ZONE_ID == "Z123"

    @patch.dict(os.environ, {"AWS_ACCOUNT_ID": "", "CDK_DEFAULT_ACCOUNT": "", "HOSTED_ZONE_ID": ""}, clear=True)
    def test_validate_account_required_for_zone_lookup(self):
        """Test that a zone lookup without an account is rejected up front."""
        Config = _reload_config()
        with pytest.raises(ValueError) as exc_info:
            Config.validate()

        assert "AWS_ACCOUNT_ID (or CDK_DEFAULT_ACCOUNT) is required when HOSTED_ZONE_ID is not set" in str(
            exc_info.value
        )

    @patch.dict(os.environ, {"CDK_DEFAULT_ACCOUNT": "111122223333"}, clear=True)
    def test_validate_account_enables_zone_lookup(self):
        """Test that an account alone is enough to look up the zone."""
        Config = _reload_config()
        Config.validate()

    @patch.dict(os.environ, {"HOSTED_ZONE_ID": "Z123"}, clear=True)
    def test_validate_zone_id_without_account(self):
        """Test that a known zone id needs no account."""
        Config = _reload_config()
        Config.validate()
