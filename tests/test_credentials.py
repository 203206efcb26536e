"""
Tests for credential resolution and the credential provider.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError

from gads_mcp.auth.credentials import (
    GOOGLE_ADS_API_VERSION,
    CredentialProvider,
    GoogleAdsConfig,
    config_from_files,
    customer_id_digits,
    format_customer_id,
    resolve_config,
)
from gads_mcp.errors import AuthConfigurationError, ValidationError


class TestResolveConfig:
    """Precedence between explicit config, environment and files."""

    def test_explicit_wins_over_environment(self):
        config = resolve_config(
            {"developer_token": "explicit"},
            environ={"GOOGLE_ADS_DEVELOPER_TOKEN": "from-env", "GOOGLE_ADS_CLIENT_ID": "env-client"},
            config_paths=[],
        )
        assert config.developer_token == "explicit"
        assert config.client_id == "env-client"

    def test_camel_case_keys_accepted(self):
        config = resolve_config(
            {"clientId": "abc", "loginCustomerId": 1112223333},
            environ={},
            config_paths=[],
        )
        assert config.client_id == "abc"
        assert config.login_customer_id == "1112223333"

    def test_file_used_when_no_primary_credential(self, tmp_path):
        path = tmp_path / "google-ads-config.json"
        path.write_text(json.dumps({"clientId": "file-client", "developerToken": "file-token"}))

        config = resolve_config({"developer_token": "explicit"}, environ={}, config_paths=[path])

        assert config.client_id == "file-client"
        assert config.developer_token == "explicit"

    def test_file_ignored_when_client_id_known(self, tmp_path):
        path = tmp_path / "google-ads-config.json"
        path.write_text(json.dumps({"clientId": "file-client", "developerToken": "file-token"}))

        config = resolve_config({"client_id": "explicit"}, environ={}, config_paths=[path])

        assert config.client_id == "explicit"
        assert config.developer_token is None

    def test_api_version_defaults(self):
        config = resolve_config({}, environ={}, config_paths=[])
        assert config.api_version == GOOGLE_ADS_API_VERSION

    def test_inline_service_account_key_parsed(self):
        config = resolve_config(
            {},
            environ={"GOOGLE_ADS_SERVICE_ACCOUNT_KEY": json.dumps({"type": "service_account"})},
            config_paths=[],
        )
        assert config.service_account_key == {"type": "service_account"}

    def test_malformed_inline_key_dropped(self):
        config = GoogleAdsConfig.from_mapping({"service_account_key": "{not json"})
        assert config.service_account_key is None


class TestConfigFiles:
    """Best-effort loading of well-known credential files."""

    def test_first_existing_file_wins(self, tmp_path):
        first = tmp_path / "a.json"
        second = tmp_path / "b.json"
        second.write_text(json.dumps({"clientId": "second"}))

        assert config_from_files([first, second]).client_id == "second"

    def test_malformed_file_skipped(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("not json")
        good = tmp_path / "good.json"
        good.write_text(json.dumps({"clientId": "good"}))

        assert config_from_files([broken, good]).client_id == "good"

    def test_non_object_file_skipped(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")

        assert config_from_files([path]) == GoogleAdsConfig()


class TestCustomerIds:

    def test_format_with_dashes(self):
        assert format_customer_id("1234567890") == "123-456-7890"
        assert format_customer_id("123-456-7890") == "123-456-7890"

    def test_digits(self):
        assert customer_id_digits("123-456-7890") == "1234567890"

    def test_wrong_length_rejected(self):
        with pytest.raises(ValidationError, match="10 digits"):
            format_customer_id("123-456-789")

    def test_none_rejected(self):
        with pytest.raises(ValidationError):
            format_customer_id(None)


class TestCredentialProvider:
    """Auth method selection and token handling."""

    def test_service_account_takes_precedence(self):
        provider = CredentialProvider(GoogleAdsConfig(
            refresh_token="rt", service_account_key_path="/tmp/key.json"
        ))
        assert provider.auth_method == "service_account"

    def test_oauth_selected_with_refresh_token(self, config):
        assert CredentialProvider(config).auth_method == "oauth"

    def test_no_method_configured(self):
        provider = CredentialProvider(GoogleAdsConfig(developer_token="dev"))
        with pytest.raises(AuthConfigurationError, match="No valid authentication method"):
            provider.get_access_token()

    def test_oauth_without_secret(self):
        provider = CredentialProvider(GoogleAdsConfig(client_id="id", refresh_token="rt"))
        with pytest.raises(AuthConfigurationError, match="OAuth credentials not properly configured"):
            provider.get_access_token()

    def test_missing_service_account_file(self, tmp_path):
        provider = CredentialProvider(GoogleAdsConfig(service_account_key_path=str(tmp_path / "missing.json")))
        with pytest.raises(AuthConfigurationError, match="Service account credentials not usable"):
            provider.get_access_token()

    def test_refresh_only_when_invalid(self, config):
        creds = MagicMock(valid=False, token="fresh-token")
        request_factory = MagicMock()
        with patch("gads_mcp.auth.credentials.oauth2_credentials.Credentials", return_value=creds) as factory:
            provider = CredentialProvider(config, request_factory=request_factory)
            assert provider.get_access_token() == "fresh-token"
            creds.valid = True
            assert provider.get_access_token() == "fresh-token"

        factory.assert_called_once()
        creds.refresh.assert_called_once_with(request_factory.return_value)

    def test_refresh_failure(self, config):
        creds = MagicMock(valid=False, token=None)
        creds.refresh.side_effect = RefreshError("invalid_grant")
        with patch("gads_mcp.auth.credentials.oauth2_credentials.Credentials", return_value=creds):
            provider = CredentialProvider(config, request_factory=MagicMock())
            with pytest.raises(AuthConfigurationError, match="OAuth authentication failed"):
                provider.get_access_token()

    def test_developer_token_required(self):
        with pytest.raises(AuthConfigurationError, match="Developer token not configured"):
            CredentialProvider(GoogleAdsConfig()).get_developer_token()

    def test_login_customer_id_digits(self, config):
        assert CredentialProvider(config).get_login_customer_id() == "1112223333"
        assert CredentialProvider(GoogleAdsConfig()).get_login_customer_id() is None

    def test_login_customer_id_must_be_ten_digits(self):
        provider = CredentialProvider(GoogleAdsConfig(login_customer_id="123"))
        with pytest.raises(ValidationError, match="10 digits"):
            provider.get_login_customer_id()
