#!/usr/bin/env python3
# =============================================================================
# Google Ads MCP Server
# =============================================================================
"""
MCP (Model Context Protocol) server exposing the Google Ads API over stdio.

Tools are listed from ``TOOL_DEFINITIONS`` and executed through
``ToolDispatcher``. One resource (``gaql://reference``) and two prompts
(``analyze_campaign``, ``gaql_help``) are also served.

Usage:
    google-ads-mcp --login-customer-id 123-456-7890
    # or
    python -m gads_mcp
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from gads_mcp import __version__
from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.auth.credentials import CredentialProvider, default_config_paths, load_env, resolve_config
from gads_mcp.mcp import resources
from gads_mcp.mcp.dispatch import ToolDispatcher
from gads_mcp.mcp.tools import TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

SERVER_NAME = "google-ads-mcp"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class GoogleAdsMCPServer:
    """Wires credentials, the REST client and the MCP request handlers together."""

    def __init__(self, explicit_config: Optional[dict[str, Any]] = None, config_paths: Optional[list[Path]] = None):
        config = resolve_config(explicit_config, config_paths=config_paths)
        self.credentials = CredentialProvider(config)
        self.client = GoogleAdsClient(self.credentials)
        self.dispatcher = ToolDispatcher(self.client)
        self.server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    def _register_handlers(self) -> None:
        server = self.server

        @server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [types.Tool(**definition) for definition in TOOL_DEFINITIONS]

        @server.list_resources()
        async def list_resources() -> list[types.Resource]:
            return resources.RESOURCES

        @server.read_resource()
        async def read_resource(uri) -> list[ReadResourceContents]:
            return [ReadResourceContents(content=resources.read_resource(uri), mime_type="text/markdown")]

        @server.list_prompts()
        async def list_prompts() -> list[types.Prompt]:
            return resources.PROMPTS

        @server.get_prompt()
        async def get_prompt(name: str, arguments: Optional[dict[str, str]]) -> types.GetPromptResult:
            return resources.get_prompt(name, arguments)

        # Raw handler: arguments reach the dispatcher as sent, None included.
        async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
            result = await asyncio.to_thread(
                self.dispatcher.dispatch, request.params.name, request.params.arguments
            )
            return types.ServerResult(result)

        server.request_handlers[types.CallToolRequest] = call_tool

    async def run(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"Google Ads MCP server started ({len(TOOL_DEFINITIONS)} tools)")
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())


# =============================================================================
# CLI
# =============================================================================


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Google Ads MCP server (stdio)")
    parser.add_argument("--config", "-c", help="Path to a JSON config file")
    parser.add_argument("--client-id", help="OAuth client ID")
    parser.add_argument("--client-secret", help="OAuth client secret")
    parser.add_argument("--refresh-token", help="OAuth refresh token")
    parser.add_argument("--developer-token", help="Google Ads developer token")
    parser.add_argument("--login-customer-id", help="Manager account customer ID")
    parser.add_argument("--service-account-key-path", help="Path to a service account key file")
    parser.add_argument(
        "--log-level",
        default=os.getenv("GOOGLE_ADS_MCP_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (stderr)",
    )
    return parser.parse_args(argv)


def explicit_config(args: argparse.Namespace) -> dict[str, Any]:
    """CLI flags that were actually given."""
    values = {
        "client_id": args.client_id,
        "client_secret": args.client_secret,
        "refresh_token": args.refresh_token,
        "developer_token": args.developer_token,
        "login_customer_id": args.login_customer_id,
        "service_account_key_path": args.service_account_key_path,
    }
    return {k: v for k, v in values.items() if v is not None}


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    # stdout carries the protocol; logs go to stderr only.
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT, stream=sys.stderr)
    load_env()

    config_paths = default_config_paths()
    if args.config:
        config_paths.insert(0, Path(args.config).expanduser())

    try:
        mcp_server = GoogleAdsMCPServer(explicit_config(args), config_paths)
        asyncio.run(mcp_server.run())
    except KeyboardInterrupt:
        logger.info("Shutting down Google Ads MCP server...")
    except Exception as e:
        logger.error(f"Failed to start Google Ads MCP server: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
