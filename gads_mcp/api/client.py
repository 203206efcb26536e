"""
Google Ads REST client.

Thin wrapper over ``requests`` for the three call shapes the tools use
(``googleAds:searchStream``, ``googleAds:mutate``,
``customers:listAccessibleCustomers``) plus the handful of service
endpoints that sit outside GoogleAdsService (keyword planning, offline
data jobs, recommendations, conversion uploads, manager links).

Every request carries the bearer token, developer token and login
customer id. A request without a configured login customer id fails
before anything is sent. No retries; one fixed timeout per call.
"""

import json
import logging
from typing import Any, Iterable, Optional, Union

import requests

from gads_mcp.api.mutations import MutateOperation
from gads_mcp.auth.credentials import GOOGLE_ADS_API_VERSION, CredentialProvider, customer_id_digits
from gads_mcp.errors import AuthConfigurationError, UpstreamApiError
from gads_mcp.report.normalize import format_results

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


class GoogleAdsClient:
    """Google Ads API client bound to one credential provider."""

    def __init__(
        self,
        credentials: CredentialProvider,
        session: Optional[requests.Session] = None,
        api_version: Optional[str] = None,
    ):
        self.credentials = credentials
        self.session = session or requests.Session()
        self.api_version = api_version or credentials.config.api_version or GOOGLE_ADS_API_VERSION
        self.base_url = f"https://googleads.googleapis.com/{self.api_version}"

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _headers(self) -> dict[str, str]:
        login_customer_id = self.credentials.get_login_customer_id()
        if not login_customer_id:
            raise AuthConfigurationError(
                "Login customer ID (manager account) must be configured to access accounts"
            )
        developer_token = self.credentials.get_developer_token()
        access_token = self.credentials.get_access_token()
        return {
            "Authorization": f"Bearer {access_token}",
            "developer-token": developer_token,
            "login-customer-id": login_customer_id,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _header_presence(headers: dict[str, str]) -> dict[str, str]:
        return {
            "developer-token": "[PRESENT]" if headers.get("developer-token") else "[MISSING]",
            "authorization": "[PRESENT]" if headers.get("Authorization") else "[MISSING]",
            "login-customer-id": headers.get("login-customer-id") or "[MISSING]",
        }

    def _api_error(self, response: requests.Response, method: str, path: str, headers: dict) -> UpstreamApiError:
        try:
            payload = response.json()
        except ValueError:
            payload = {"raw": response.text}

        error = payload.get("error", {}) if isinstance(payload, dict) else {}
        api_message = error.get("message") or response.text or response.reason
        failures = []
        for detail in error.get("details") or []:
            for item in detail.get("errors") or []:
                failures.append({"errorCode": item.get("errorCode"), "message": item.get("message")})

        details = {
            "status": response.status_code,
            "statusText": response.reason,
            "apiStatus": error.get("status"),
            "message": api_message,
            "errors": failures,
            "method": method,
            "path": path,
            "headers": self._header_presence(headers),
        }
        return UpstreamApiError(
            f"Google Ads API error {response.status_code}: {api_message}\n"
            f"Details: {json.dumps(details, indent=2, default=str)}",
            status_code=response.status_code,
            details=details,
        )

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> Any:
        headers = self._headers()
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"{method} /{path.lstrip('/')}")

        try:
            response = self.session.request(method, url, headers=headers, json=body, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            details = {"method": method, "path": path, "headers": self._header_presence(headers)}
            raise UpstreamApiError(f"Google Ads API request failed: {e}", details=details) from e

        if response.status_code != 200:
            raise self._api_error(response, method, path, headers)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamApiError(
                "Google Ads API returned a non-JSON response", status_code=response.status_code
            ) from e

    def post(self, path: str, body: Optional[dict] = None) -> Any:
        return self._request("POST", path, body or {})

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def search_stream(self, customer_id: str, query: str) -> list:
        """Run a GAQL query; only the first stream chunk's results are returned."""
        cid = customer_id_digits(customer_id)
        data = self.post(f"customers/{cid}/googleAds:searchStream", {"query": query})
        if isinstance(data, list):
            return data[0].get("results", []) if data else []
        return (data or {}).get("results", [])

    def execute_query(self, customer_id: str, query: str, output_format: str = "json"):
        return format_results(self.search_stream(customer_id, query), output_format)

    def list_accessible_customers(self) -> list[str]:
        data = self.get("customers:listAccessibleCustomers")
        return data.get("resourceNames", [])

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def mutate(
        self,
        customer_id: str,
        operations: Iterable[Union[MutateOperation, dict]],
        partial_failure: bool = False,
    ) -> dict:
        """Submit operations in one ``googleAds:mutate`` call."""
        cid = customer_id_digits(customer_id)
        payload = {
            "mutateOperations": [
                op.to_dict() if isinstance(op, MutateOperation) else op for op in operations
            ]
        }
        if partial_failure:
            payload["partialFailure"] = True
        return self.post(f"customers/{cid}/googleAds:mutate", payload)
