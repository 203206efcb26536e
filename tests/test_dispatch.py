"""
Tests for tool dispatch, the tool registry and the failure boundary.
"""

import json
from unittest.mock import MagicMock

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from gads_mcp.errors import UpstreamApiError, ValidationError
from gads_mcp.mcp.dispatch import ToolDispatcher
from gads_mcp.mcp.tools import TOOL_DEFINITIONS, TOOL_REGISTRY

CID = "1234567890"


def result_text(result: types.CallToolResult) -> str:
    return result.content[0].text


class TestRegistry:
    """Every registered handler has exactly one schema, and vice versa."""

    def test_tool_count(self):
        assert len(TOOL_REGISTRY) == 76
        assert len(TOOL_DEFINITIONS) == 76

    def test_names_match(self):
        names = [d["name"] for d in TOOL_DEFINITIONS]
        assert len(set(names)) == len(names)
        assert set(names) == set(TOOL_REGISTRY)

    def test_customer_id_required_everywhere_but_list_accounts(self):
        for definition in TOOL_DEFINITIONS:
            required = definition["inputSchema"]["required"]
            if definition["name"] == "list_accounts":
                assert "customerId" not in required
            else:
                assert required[0] == "customerId", definition["name"]

    def test_required_keys_are_declared(self):
        for definition in TOOL_DEFINITIONS:
            schema = definition["inputSchema"]
            assert set(schema["required"]) <= set(schema["properties"]), definition["name"]

    def test_definitions_are_valid_tools(self):
        tools = [types.Tool(**d) for d in TOOL_DEFINITIONS]
        assert tools[0].name == "list_accounts"


class TestFailureBoundary:
    """Known tools never raise; unknown tools are protocol errors."""

    def test_unknown_tool(self):
        dispatcher = ToolDispatcher(MagicMock(), registry={})
        with pytest.raises(McpError) as exc_info:
            dispatcher.dispatch("launch_rockets", {})
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Unknown tool: launch_rockets"

    def test_missing_arguments(self):
        handler = MagicMock()
        dispatcher = ToolDispatcher(MagicMock(), registry={"get_campaigns": handler})

        result = dispatcher.dispatch("get_campaigns", None)

        assert result.isError is True
        assert result_text(result) == "Error: Arguments are required for this tool"
        handler.assert_not_called()

    def test_non_object_arguments(self):
        dispatcher = ToolDispatcher(MagicMock(), registry={"get_campaigns": MagicMock()})
        assert dispatcher.dispatch("get_campaigns", ["123"]).isError is True

    def test_handler_error_becomes_result(self):
        handler = MagicMock(side_effect=ValidationError("campaignId must be numeric. Got: 'x'"))
        dispatcher = ToolDispatcher(MagicMock(), registry={"get_ad_groups": handler})

        result = dispatcher.dispatch("get_ad_groups", {"customerId": CID, "campaignId": "x"})

        assert result.isError is True
        assert result_text(result) == "Error: campaignId must be numeric. Got: 'x'"

    def test_unexpected_error_becomes_result(self):
        dispatcher = ToolDispatcher(MagicMock(), registry={"get_ads": MagicMock(side_effect=KeyError("ad"))})
        result = dispatcher.dispatch("get_ads", {"customerId": CID})
        assert result.isError is True
        assert result_text(result).startswith("Error: ")

    def test_success(self):
        client = MagicMock()
        handler = MagicMock(return_value="ok")
        dispatcher = ToolDispatcher(client, registry={"get_ads": handler})

        result = dispatcher.dispatch("get_ads", {"customerId": CID})

        assert result.isError is False
        assert result_text(result) == "ok"
        handler.assert_called_once_with(client, {"customerId": CID})


class TestToolHandlers:
    """End-to-end through the real registry with a mocked client."""

    def test_required_argument_missing(self, client):
        result = ToolDispatcher(client).dispatch("get_campaigns", {})
        assert result_text(result) == "Error: Missing required argument: customerId"
        client.search_stream.assert_not_called()

    def test_create_campaign(self, client, mutate_response):
        client.mutate.side_effect = [
            mutate_response("campaignBudgetResult", f"customers/{CID}/campaignBudgets/77"),
            mutate_response("campaignResult", f"customers/{CID}/campaigns/456"),
        ]

        result = ToolDispatcher(client).dispatch("create_campaign", {
            "customerId": "123-456-7890",
            "name": "Spring Sale",
            "budgetAmountMicros": 5_000_000,
        })

        assert result.isError is False
        assert result_text(result) == "Campaign created successfully. ID: 456"

    def test_add_keywords_summary(self, client, mutate_response):
        client.mutate.return_value = mutate_response(
            "adGroupCriterionResult", f"customers/{CID}/adGroupCriteria/3~1", None, failures={1: "Too long."}
        )

        result = ToolDispatcher(client).dispatch("add_keywords", {
            "customerId": CID,
            "adGroupId": "3",
            "keywords": [{"text": "shoes"}, {"text": "x" * 200}],
        })

        text = result_text(result)
        assert text.startswith("Added 1 keywords successfully\n1 of 2 failed:\n  - item 1: Too long.\n\n")
        assert json.loads(text.split("\n\n", 1)[1])["items"][1] == {
            "index": 1, "input": {"text": "x" * 200}, "error": "Too long.",
        }

    def test_created_labels_are_listed(self, client, mutate_response):
        client.mutate.return_value = mutate_response(
            "labelResult", f"customers/{CID}/labels/901", f"customers/{CID}/labels/902"
        )

        result = ToolDispatcher(client).dispatch("create_labels", {
            "customerId": CID,
            "labels": [{"name": "Brand"}, {"name": "Generic"}],
        })

        text = result_text(result)
        assert text.startswith("Created 2 labels successfully\n\n")
        batch = json.loads(text.split("\n\n", 1)[1])
        assert batch["succeeded"] == 2
        assert [item["id"] for item in batch["items"]] == ["901", "902"]
        assert batch["items"][0]["resourceName"] == f"customers/{CID}/labels/901"

    def test_upstream_error(self, client):
        client.search_stream.side_effect = UpstreamApiError("Google Ads API error 403: The caller does not have permission")
        result = ToolDispatcher(client).dispatch("get_campaigns", {"customerId": CID})
        assert result.isError is True
        assert "403" in result_text(result)

    def test_gaql_output_format(self, client):
        client.execute_query.return_value = "campaign.id\n1"
        result = ToolDispatcher(client).dispatch("execute_gaql_query", {
            "customerId": CID, "query": "SELECT campaign.id FROM campaign", "outputFormat": "table",
        })
        assert result_text(result) == "campaign.id\n1"

    def test_gaql_bad_output_format(self, client):
        result = ToolDispatcher(client).dispatch("execute_gaql_query", {
            "customerId": CID, "query": "SELECT campaign.id FROM campaign", "outputFormat": "xml",
        })
        assert result.isError is True
        client.execute_query.assert_not_called()

    def test_json_results(self, client):
        client.search_stream.return_value = [{"userList": {"id": "44", "name": "VIPs"}}]
        result = ToolDispatcher(client).dispatch("get_audiences", {"customerId": CID})
        assert '"name": "VIPs"' in result_text(result)
