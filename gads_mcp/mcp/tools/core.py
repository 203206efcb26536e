"""
Core account, campaign, ad group, ad and keyword tools plus raw GAQL.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE
from gads_mcp.errors import ValidationError
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.schema import array, date_range, integer, obj, string, tool
from gads_mcp.ops import accounts, ad_groups, ads, assets, campaigns, keywords
from gads_mcp.report.normalize import OUTPUT_FORMATS, to_text

# =============================================================================
# HANDLERS
# =============================================================================


def list_accounts(client: GoogleAdsClient, args: dict) -> str:
    return to_text(accounts.list_accounts(client))


def get_campaigns(client: GoogleAdsClient, args: dict) -> str:
    return to_text(campaigns.get_campaigns(client, customer_id(args)))


def get_campaign_performance(client: GoogleAdsClient, args: dict) -> str:
    return to_text(campaigns.get_campaign_performance(
        client,
        customer_id(args),
        optional(args, "campaignId"),
        optional(args, "dateRange", DEFAULT_DATE_RANGE),
    ))


def get_ad_groups(client: GoogleAdsClient, args: dict) -> str:
    return to_text(ad_groups.get_ad_groups(client, customer_id(args), optional(args, "campaignId")))


def get_ads(client: GoogleAdsClient, args: dict) -> str:
    return to_text(ads.get_ads(client, customer_id(args), optional(args, "adGroupId")))


def get_keywords(client: GoogleAdsClient, args: dict) -> str:
    return to_text(keywords.get_keywords(client, customer_id(args), optional(args, "adGroupId")))


def execute_gaql_query(client: GoogleAdsClient, args: dict) -> str:
    output_format = optional(args, "outputFormat", "json")
    if output_format not in OUTPUT_FORMATS:
        raise ValidationError(f"Invalid outputFormat: {output_format}. Must be one of: {list(OUTPUT_FORMATS)}")
    return to_text(client.execute_query(customer_id(args), require(args, "query"), output_format))


def get_image_assets(client: GoogleAdsClient, args: dict) -> str:
    return to_text(assets.get_image_assets(client, customer_id(args)))


def create_campaign(client: GoogleAdsClient, args: dict) -> str:
    campaign_id = campaigns.create_campaign(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "budgetAmountMicros"),
        optional(args, "advertisingChannelType", "SEARCH"),
        optional(args, "startDate"),
        optional(args, "endDate"),
    )
    return f"Campaign created successfully. ID: {campaign_id}"


def update_campaign_status(client: GoogleAdsClient, args: dict) -> str:
    campaign_id = require(args, "campaignId")
    status = require(args, "status")
    campaigns.update_campaign_status(client, customer_id(args), campaign_id, status)
    return f"Campaign {campaign_id} status updated to {status}"


def create_ad_group(client: GoogleAdsClient, args: dict) -> str:
    ad_group_id = ad_groups.create_ad_group(
        client,
        customer_id(args),
        require(args, "campaignId"),
        require(args, "name"),
        optional(args, "cpcBidMicros"),
    )
    return f"Ad group created successfully. ID: {ad_group_id}"


def create_responsive_search_ad(client: GoogleAdsClient, args: dict) -> str:
    ad_id = ads.create_responsive_search_ad(
        client,
        customer_id(args),
        require(args, "adGroupId"),
        require(args, "headlines"),
        require(args, "descriptions"),
        require(args, "finalUrls"),
    )
    return f"Responsive search ad created successfully. ID: {ad_id}"


def add_keywords(client: GoogleAdsClient, args: dict) -> str:
    result = keywords.add_keywords(client, customer_id(args), require(args, "adGroupId"), require(args, "keywords"))
    return result.report("keywords", verb="Added")


def add_negative_keywords(client: GoogleAdsClient, args: dict) -> str:
    result = keywords.add_negative_keywords(
        client, customer_id(args), require(args, "adGroupId"), require(args, "keywords")
    )
    return result.report("negative keywords", verb="Added")


HANDLERS = {
    "list_accounts": list_accounts,
    "get_campaigns": get_campaigns,
    "get_campaign_performance": get_campaign_performance,
    "get_ad_groups": get_ad_groups,
    "get_ads": get_ads,
    "get_keywords": get_keywords,
    "execute_gaql_query": execute_gaql_query,
    "get_image_assets": get_image_assets,
    "create_campaign": create_campaign,
    "update_campaign_status": update_campaign_status,
    "create_ad_group": create_ad_group,
    "create_responsive_search_ad": create_responsive_search_ad,
    "add_keywords": add_keywords,
    "add_negative_keywords": add_negative_keywords,
}


# =============================================================================
# SCHEMAS
# =============================================================================

SCHEMAS = [
    tool("list_accounts", "List all accessible Google Ads accounts", customer=False),
    tool("get_campaigns", "Get all campaigns for a customer"),
    tool(
        "get_campaign_performance",
        "Get performance metrics for campaigns",
        {"campaignId": string("Specific campaign ID (optional)"), "dateRange": date_range()},
    ),
    tool("get_ad_groups", "Get ad groups for a customer or campaign", {"campaignId": string("Campaign ID (optional)")}),
    tool("get_ads", "Get ads for a customer or ad group", {"adGroupId": string("Ad group ID (optional)")}),
    tool("get_keywords", "Get keywords for a customer or ad group", {"adGroupId": string("Ad group ID (optional)")}),
    tool(
        "execute_gaql_query",
        "Execute a custom GAQL (Google Ads Query Language) query",
        {
            "query": string("GAQL query to execute"),
            "outputFormat": string("Output format (default json)", enum=list(OUTPUT_FORMATS)),
        },
        ["query"],
    ),
    tool("get_image_assets", "Get image assets for a customer"),
    tool(
        "create_campaign",
        "Create a new campaign (created PAUSED)",
        {
            "name": string("Campaign name"),
            "budgetAmountMicros": integer("Daily budget in micros (1,000,000 = 1 unit of currency)"),
            "advertisingChannelType": string("Channel type", enum=list(campaigns.CHANNEL_TYPES)),
            "startDate": string("Start date (YYYY-MM-DD)"),
            "endDate": string("End date (YYYY-MM-DD)"),
        },
        ["name", "budgetAmountMicros"],
    ),
    tool(
        "update_campaign_status",
        "Update campaign status",
        {
            "campaignId": string("Campaign ID"),
            "status": string("New status", enum=list(campaigns.CAMPAIGN_STATUSES)),
        },
        ["campaignId", "status"],
    ),
    tool(
        "create_ad_group",
        "Create a new ad group (created PAUSED)",
        {
            "campaignId": string("Campaign ID"),
            "name": string("Ad group name"),
            "cpcBidMicros": integer("Default max CPC bid in micros (default 1,000,000)"),
        },
        ["campaignId", "name"],
    ),
    tool(
        "create_responsive_search_ad",
        "Create a responsive search ad (created PAUSED)",
        {
            "adGroupId": string("Ad group ID"),
            "headlines": array("Headlines (3-15, max 30 characters each)"),
            "descriptions": array("Descriptions (2-4, max 90 characters each)"),
            "finalUrls": array("Final URLs"),
        },
        ["adGroupId", "headlines", "descriptions", "finalUrls"],
    ),
    tool(
        "add_keywords",
        "Add keywords to an ad group",
        {
            "adGroupId": string("Ad group ID"),
            "keywords": array("Keywords to add", obj({
                "text": string("Keyword text"),
                "matchType": string("Match type (default BROAD)", enum=list(keywords.MATCH_TYPES)),
                "cpcBidMicros": integer("Max CPC bid in micros"),
            }, ["text"])),
        },
        ["adGroupId", "keywords"],
    ),
    tool(
        "add_negative_keywords",
        "Add negative keywords (broad match) to an ad group",
        {"adGroupId": string("Ad group ID"), "keywords": array("Negative keyword texts")},
        ["adGroupId", "keywords"],
    ),
]
