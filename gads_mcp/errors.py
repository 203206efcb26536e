"""
Error taxonomy for the Google Ads MCP server.

Every class here is an in-band failure: the dispatch layer catches it, logs
it and turns it into an ``isError`` tool result. Protocol-level failures
(unknown tool, unknown resource or prompt) are raised as the SDK's
``McpError`` instead and are allowed to reach the transport.
"""

from typing import Any, Optional


class GoogleAdsMcpError(Exception):
    """Base class for every tool-level failure."""


class AuthConfigurationError(GoogleAdsMcpError):
    """Missing or unusable credentials, developer token or login customer id."""


class ValidationError(GoogleAdsMcpError):
    """Malformed identifiers, arguments or out-of-range collections."""


class ArgumentsRequiredError(ValidationError):
    """Argument bag is absent, not an object, or lacks a required key."""

    def __init__(self, message: str = "Arguments are required for this tool"):
        super().__init__(message)


class DependencyCreationError(GoogleAdsMcpError):
    """A prerequisite step of a multi-step write returned no resource name."""


class UpstreamApiError(GoogleAdsMcpError):
    """The Google Ads API call failed or answered with an error payload."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}
