"""
Shared fixtures for the Google Ads MCP test suite.

Nothing here talks to Google: the REST client runs against a mocked
``requests.Session`` and the operation builders against a mocked client.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.auth.credentials import CredentialProvider, GoogleAdsConfig


@pytest.fixture
def config():
    return GoogleAdsConfig(
        client_id="client-id",
        client_secret="client-secret",
        refresh_token="refresh-token",
        developer_token="dev-token",
        login_customer_id="111-222-3333",
        api_version="v19",
    )


@pytest.fixture
def provider(config):
    """Credential provider that hands out a fixed token without network access."""
    provider = CredentialProvider(config)
    provider.get_access_token = MagicMock(return_value="access-token")
    return provider


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api_client(provider, session):
    return GoogleAdsClient(provider, session=session)


@pytest.fixture
def client():
    """Mocked client for the operation builders; queries return no rows by default."""
    mock = MagicMock(spec=GoogleAdsClient)
    mock.search_stream.return_value = []
    return mock


@pytest.fixture
def http_response():
    """Factory for fake ``requests.Response`` objects."""

    def make(status_code=200, payload=None, reason="OK"):
        response = MagicMock()
        response.status_code = status_code
        response.reason = reason
        if payload is None:
            response.text = "<html>oops</html>"
            response.json.side_effect = ValueError("not json")
        else:
            response.text = json.dumps(payload)
            response.json.return_value = payload
        return response

    return make


@pytest.fixture
def mutate_response():
    """Factory for ``googleAds:mutate`` bodies: one entry per resource name (None = failed)."""

    def make(result_key, *resource_names, failures=None):
        entries = [
            {result_key: {"resourceName": name}} if name else {}
            for name in resource_names
        ]
        response = {"mutateOperationResponses": entries}
        if failures:
            response["partialFailureError"] = {
                "code": 3,
                "message": "Multiple errors in 'details'.",
                "details": [{
                    "errors": [
                        {
                            "message": message,
                            "location": {"fieldPathElements": [
                                {"fieldName": "mutate_operations", "index": index},
                            ]},
                        }
                        for index, message in failures.items()
                    ]
                }],
            }
        return response

    return make
