"""
Reporting, budget and bidding tools.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import CHANGE_EVENT_RANGES, DEFAULT_DATE_RANGE
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.schema import array, date_range, integer, number, obj, string, tool
from gads_mcp.ops import budgets, reporting
from gads_mcp.report.normalize import to_text

# =============================================================================
# REPORTS
# =============================================================================


def get_search_term_report(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_search_term_report(
        client,
        customer_id(args),
        optional(args, "dateRange", DEFAULT_DATE_RANGE),
        optional(args, "minImpressions"),
        optional(args, "campaignIds"),
        optional(args, "limit"),
    ))


def get_demographic_report(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_demographic_report(
        client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE), optional(args, "campaignIds")
    ))


def get_geographic_report(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_geographic_report(
        client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE), optional(args, "campaignIds")
    ))


def get_auction_insights(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_auction_insights(
        client, customer_id(args), optional(args, "campaignId"), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def get_change_history(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_change_history(client, customer_id(args), optional(args, "dateRange", "LAST_7_DAYS")))


def generate_forecast_metrics(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.generate_forecast_metrics(
        client,
        customer_id(args),
        require(args, "keywordTexts"),
        optional(args, "maxCpcBidMicros"),
        optional(args, "startDate"),
        optional(args, "endDate"),
    ))


def get_click_view_report(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_click_view_report(client, customer_id(args), optional(args, "date")))


def get_video_report(client: GoogleAdsClient, args: dict) -> str:
    return to_text(reporting.get_video_report(client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE)))


# =============================================================================
# BUDGETS AND BIDDING
# =============================================================================


def get_shared_budgets(client: GoogleAdsClient, args: dict) -> str:
    return to_text(budgets.get_shared_budgets(client, customer_id(args)))


def create_shared_budget(client: GoogleAdsClient, args: dict) -> str:
    resource_name = budgets.create_shared_budget(
        client, customer_id(args), require(args, "name"), require(args, "amountMicros"), optional(args, "deliveryMethod")
    )
    return f"Shared budget created successfully. Resource: {resource_name}"


def get_bidding_strategies(client: GoogleAdsClient, args: dict) -> str:
    return to_text(budgets.get_bidding_strategies(client, customer_id(args)))


def create_bidding_strategy(client: GoogleAdsClient, args: dict) -> str:
    resource_name = budgets.create_bidding_strategy(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "type"),
        optional(args, "targetCpa"),
        optional(args, "targetRoas"),
    )
    return f"Bidding strategy created successfully. Resource: {resource_name}"


def get_bid_simulations(client: GoogleAdsClient, args: dict) -> str:
    return to_text(budgets.get_bid_simulations(
        client, customer_id(args), require(args, "resourceId"), optional(args, "resourceType", "campaign")
    ))


def update_bid_adjustments(client: GoogleAdsClient, args: dict) -> str:
    result = budgets.update_bid_adjustments(client, customer_id(args), require(args, "adjustments"))
    return result.report("bid adjustments", verb="Updated")


def get_budget_recommendations(client: GoogleAdsClient, args: dict) -> str:
    return to_text(budgets.get_budget_recommendations(client, customer_id(args), optional(args, "campaignId")))


HANDLERS = {
    "get_search_term_report": get_search_term_report,
    "get_demographic_report": get_demographic_report,
    "get_geographic_report": get_geographic_report,
    "get_auction_insights": get_auction_insights,
    "get_change_history": get_change_history,
    "generate_forecast_metrics": generate_forecast_metrics,
    "get_click_view_report": get_click_view_report,
    "get_video_report": get_video_report,
    "get_shared_budgets": get_shared_budgets,
    "create_shared_budget": create_shared_budget,
    "get_bidding_strategies": get_bidding_strategies,
    "create_bidding_strategy": create_bidding_strategy,
    "get_bid_simulations": get_bid_simulations,
    "update_bid_adjustments": update_bid_adjustments,
    "get_budget_recommendations": get_budget_recommendations,
}


# =============================================================================
# SCHEMAS
# =============================================================================

SCHEMAS = [
    tool(
        "get_search_term_report",
        "Get the search terms that triggered ads",
        {
            "dateRange": date_range(),
            "minImpressions": integer("Minimum impressions"),
            "campaignIds": array("Campaign IDs to include"),
            "limit": integer("Maximum rows (default 100)"),
        },
    ),
    tool(
        "get_demographic_report",
        "Get performance by age range and gender",
        {"dateRange": date_range(), "campaignIds": array("Campaign IDs to include")},
    ),
    tool(
        "get_geographic_report",
        "Get performance by country and location type",
        {"dateRange": date_range(), "campaignIds": array("Campaign IDs to include")},
    ),
    tool(
        "get_auction_insights",
        "Get search impression share and where it was lost",
        {"campaignId": string("Campaign ID (optional)"), "dateRange": date_range()},
    ),
    tool(
        "get_change_history",
        "Get recent account changes (last 30 days at most)",
        {"dateRange": date_range("LAST_7_DAYS", CHANGE_EVENT_RANGES)},
    ),
    tool(
        "generate_forecast_metrics",
        "Forecast traffic for a set of keywords",
        {
            "keywordTexts": array("Keywords to forecast"),
            "maxCpcBidMicros": integer("Max CPC bid in micros (default 1,000,000)"),
            "startDate": string("Forecast start (YYYY-MM-DD, default tomorrow)"),
            "endDate": string("Forecast end (YYYY-MM-DD, default 30 days after start)"),
        },
        ["keywordTexts"],
    ),
    tool(
        "get_click_view_report",
        "Get click-level data for a single day",
        {"date": string("Day to report (YYYY-MM-DD, default yesterday)")},
    ),
    tool("get_video_report", "Get video campaign performance", {"dateRange": date_range()}),
    tool("get_shared_budgets", "Get shared campaign budgets"),
    tool(
        "create_shared_budget",
        "Create a shared campaign budget",
        {
            "name": string("Budget name"),
            "amountMicros": integer("Daily amount in micros"),
            "deliveryMethod": string("Delivery method (default STANDARD)", enum=list(budgets.DELIVERY_METHODS)),
        },
        ["name", "amountMicros"],
    ),
    tool("get_bidding_strategies", "Get portfolio bidding strategies"),
    tool(
        "create_bidding_strategy",
        "Create a portfolio bidding strategy",
        {
            "name": string("Strategy name"),
            "type": string("Strategy type", enum=list(budgets.STRATEGY_TYPES)),
            "targetCpa": number("Target CPA in currency units"),
            "targetRoas": number("Target ROAS as a ratio (e.g. 3.5)"),
        },
        ["name", "type"],
    ),
    tool(
        "get_bid_simulations",
        "Get CPC bid simulations for a campaign or ad group",
        {
            "resourceId": string("Campaign or ad group ID"),
            "resourceType": string("Resource type (default campaign)", enum=list(budgets.SIMULATION_RESOURCES)),
        },
        ["resourceId"],
    ),
    tool(
        "update_bid_adjustments",
        "Set device bid modifiers on campaigns",
        {
            "adjustments": array("Device bid adjustments", obj({
                "resourceId": string("Campaign ID"),
                "device": string("Device", enum=list(budgets.DEVICE_CRITERIA)),
                "bidModifier": number("Bid modifier (e.g. 1.2 for +20%)"),
            }, ["resourceId", "device", "bidModifier"])),
        },
        ["adjustments"],
    ),
    tool(
        "get_budget_recommendations",
        "Get budget recommendations",
        {"campaignId": string("Campaign ID (optional)")},
    ),
]
