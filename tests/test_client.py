"""
Tests for the Google Ads REST client.
"""

import pytest
import requests

from gads_mcp.api.client import REQUEST_TIMEOUT, GoogleAdsClient
from gads_mcp.api.mutations import MutateOperation, OperationKind
from gads_mcp.auth.credentials import CredentialProvider, GoogleAdsConfig
from gads_mcp.errors import AuthConfigurationError, UpstreamApiError, ValidationError

CUSTOMER_ID = "123-456-7890"
CID = "1234567890"

BASE_URL = "https://googleads.googleapis.com/v19"


class TestHeaders:
    """Every request carries the three Google Ads headers."""

    def test_headers_sent(self, api_client, session, http_response):
        session.request.return_value = http_response(payload=[{"results": []}])

        api_client.search_stream(CUSTOMER_ID, "SELECT customer.id FROM customer")

        session.request.assert_called_once_with(
            "POST",
            f"{BASE_URL}/customers/{CID}/googleAds:searchStream",
            headers={
                "Authorization": "Bearer access-token",
                "developer-token": "dev-token",
                "login-customer-id": "1112223333",
                "Content-Type": "application/json",
            },
            json={"query": "SELECT customer.id FROM customer"},
            timeout=REQUEST_TIMEOUT,
        )

    def test_missing_login_customer_id_sends_nothing(self, session):
        provider = CredentialProvider(GoogleAdsConfig(developer_token="dev-token", refresh_token="rt"))
        client = GoogleAdsClient(provider, session=session)

        with pytest.raises(AuthConfigurationError, match="Login customer ID"):
            client.search_stream(CUSTOMER_ID, "SELECT customer.id FROM customer")

        session.request.assert_not_called()

    def test_missing_login_customer_id_blocks_mutate(self, session):
        provider = CredentialProvider(GoogleAdsConfig(developer_token="dev-token", refresh_token="rt"))
        client = GoogleAdsClient(provider, session=session)

        with pytest.raises(AuthConfigurationError, match="Login customer ID"):
            client.mutate(CUSTOMER_ID, [{"labelOperation": {"remove": f"customers/{CID}/labels/2"}}])

        session.request.assert_not_called()

    @pytest.mark.parametrize("login_customer_id", ["123", "111-222-33334"])
    def test_short_login_customer_id_blocks_search(self, session, login_customer_id):
        provider = CredentialProvider(
            GoogleAdsConfig(developer_token="dev-token", refresh_token="rt", login_customer_id=login_customer_id)
        )
        client = GoogleAdsClient(provider, session=session)

        with pytest.raises(ValidationError, match="10 digits"):
            client.search_stream(CUSTOMER_ID, "SELECT customer.id FROM customer")

        session.request.assert_not_called()

    def test_short_login_customer_id_blocks_mutate(self, session):
        provider = CredentialProvider(
            GoogleAdsConfig(developer_token="dev-token", refresh_token="rt", login_customer_id="123")
        )
        client = GoogleAdsClient(provider, session=session)

        with pytest.raises(ValidationError, match="10 digits"):
            client.mutate(CUSTOMER_ID, [{"labelOperation": {"remove": f"customers/{CID}/labels/2"}}])

        session.request.assert_not_called()

    def test_missing_developer_token_sends_nothing(self, session):
        provider = CredentialProvider(GoogleAdsConfig(login_customer_id="1112223333"))
        client = GoogleAdsClient(provider, session=session)

        with pytest.raises(AuthConfigurationError, match="Developer token"):
            client.list_accessible_customers()

        session.request.assert_not_called()

    def test_bad_customer_id_rejected_before_request(self, api_client, session):
        with pytest.raises(ValidationError):
            api_client.search_stream("12345", "SELECT customer.id FROM customer")
        session.request.assert_not_called()


class TestQueries:

    def test_only_first_chunk_returned(self, api_client, session, http_response):
        session.request.return_value = http_response(payload=[
            {"results": [{"campaign": {"id": "1"}}]},
            {"results": [{"campaign": {"id": "2"}}]},
        ])
        assert api_client.search_stream(CUSTOMER_ID, "q") == [{"campaign": {"id": "1"}}]

    def test_empty_stream(self, api_client, session, http_response):
        session.request.return_value = http_response(payload=[])
        assert api_client.search_stream(CUSTOMER_ID, "q") == []

    def test_execute_query_table(self, api_client, session, http_response):
        session.request.return_value = http_response(payload=[
            {"results": [{"campaign": {"id": "1", "name": "Brand"}}]},
        ])
        assert api_client.execute_query(CUSTOMER_ID, "q", "table") == "campaign.id\tcampaign.name\n1\tBrand"

    def test_list_accessible_customers(self, api_client, session, http_response):
        session.request.return_value = http_response(payload={"resourceNames": ["customers/1234567890"]})

        assert api_client.list_accessible_customers() == ["customers/1234567890"]
        args, kwargs = session.request.call_args
        assert args == ("GET", f"{BASE_URL}/customers:listAccessibleCustomers")
        assert kwargs["json"] is None


class TestMutate:

    def test_payload(self, api_client, session, http_response):
        session.request.return_value = http_response(payload={"mutateOperationResponses": []})
        op = MutateOperation.create(OperationKind.LABEL, {"name": "Brand"})

        api_client.mutate(CUSTOMER_ID, [op, {"labelOperation": {"remove": "customers/1/labels/2"}}], partial_failure=True)

        args, kwargs = session.request.call_args
        assert args[1] == f"{BASE_URL}/customers/{CID}/googleAds:mutate"
        assert kwargs["json"] == {
            "mutateOperations": [
                {"labelOperation": {"create": {"name": "Brand"}}},
                {"labelOperation": {"remove": "customers/1/labels/2"}},
            ],
            "partialFailure": True,
        }

    def test_no_partial_failure_flag_by_default(self, api_client, session, http_response):
        session.request.return_value = http_response(payload={"mutateOperationResponses": []})
        api_client.mutate(CUSTOMER_ID, [])
        assert "partialFailure" not in session.request.call_args[1]["json"]


class TestErrors:
    """Upstream failures become UpstreamApiError with structured details."""

    def test_api_error_details(self, api_client, session, http_response):
        session.request.return_value = http_response(400, {
            "error": {
                "code": 400,
                "message": "Request contains an invalid argument.",
                "status": "INVALID_ARGUMENT",
                "details": [{
                    "errors": [{"errorCode": {"queryError": "UNRECOGNIZED_FIELD"}, "message": "Unrecognized field"}],
                }],
            }
        }, reason="Bad Request")

        with pytest.raises(UpstreamApiError) as exc_info:
            api_client.search_stream(CUSTOMER_ID, "SELECT nope FROM campaign")

        error = exc_info.value
        assert error.status_code == 400
        assert str(error).startswith("Google Ads API error 400: Request contains an invalid argument.")
        assert error.details["apiStatus"] == "INVALID_ARGUMENT"
        assert error.details["errors"] == [
            {"errorCode": {"queryError": "UNRECOGNIZED_FIELD"}, "message": "Unrecognized field"},
        ]
        assert error.details["headers"] == {
            "developer-token": "[PRESENT]",
            "authorization": "[PRESENT]",
            "login-customer-id": "1112223333",
        }

    def test_non_json_error_body(self, api_client, session, http_response):
        session.request.return_value = http_response(502, None, reason="Bad Gateway")
        with pytest.raises(UpstreamApiError, match="Google Ads API error 502") as exc_info:
            api_client.list_accessible_customers()
        assert exc_info.value.details["errors"] == []

    def test_transport_error(self, api_client, session):
        session.request.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(UpstreamApiError, match="request failed"):
            api_client.list_accessible_customers()

    def test_non_json_success_body(self, api_client, session, http_response):
        session.request.return_value = http_response(200, None)
        with pytest.raises(UpstreamApiError, match="non-JSON"):
            api_client.list_accessible_customers()
