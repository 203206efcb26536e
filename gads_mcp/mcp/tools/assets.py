"""
Asset and advanced campaign tools.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.schema import array, date_range, integer, number, obj, string, tool
from gads_mcp.ops import advanced_campaigns, assets
from gads_mcp.report.normalize import to_text

SITELINK = obj({
    "linkText": string("Link text (max 25 characters)"),
    "finalUrls": array("Final URLs"),
    "description1": string("First description line (max 35 characters)"),
    "description2": string("Second description line (max 35 characters)"),
}, ["linkText", "finalUrls"])
CALLOUT = obj({"calloutText": string("Callout text (max 25 characters)")}, ["calloutText"])


# =============================================================================
# ASSETS
# =============================================================================


def upload_image_asset(client: GoogleAdsClient, args: dict) -> str:
    resource_name = assets.upload_image_asset(client, customer_id(args), require(args, "imageData"), require(args, "name"))
    return f"Image asset uploaded successfully. Resource: {resource_name}"


def get_video_assets(client: GoogleAdsClient, args: dict) -> str:
    return to_text(assets.get_video_assets(client, customer_id(args)))


def create_asset_group(client: GoogleAdsClient, args: dict) -> str:
    resource_name = assets.create_asset_group(
        client, customer_id(args), require(args, "campaignId"), require(args, "name"), require(args, "finalUrls")
    )
    return f"Asset group created successfully. Resource: {resource_name}"


def get_asset_performance(client: GoogleAdsClient, args: dict) -> str:
    return to_text(assets.get_asset_performance(
        client, customer_id(args), optional(args, "assetId"), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def create_sitelink_assets(client: GoogleAdsClient, args: dict) -> str:
    return assets.create_sitelink_assets(client, customer_id(args), require(args, "sitelinks")).report("sitelink assets")


def create_callout_assets(client: GoogleAdsClient, args: dict) -> str:
    return assets.create_callout_assets(client, customer_id(args), require(args, "callouts")).report("callout assets")


def create_structured_snippet_assets(client: GoogleAdsClient, args: dict) -> str:
    result = assets.create_structured_snippet_assets(client, customer_id(args), require(args, "snippets"))
    return result.report("structured snippet assets")


# =============================================================================
# ADVANCED CAMPAIGNS
# =============================================================================


def create_performance_max_campaign(client: GoogleAdsClient, args: dict) -> str:
    resource_name = advanced_campaigns.create_performance_max_campaign(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "budgetAmountMicros"),
        optional(args, "biddingStrategyType"),
        optional(args, "targetCpaMicros"),
        optional(args, "targetRoas"),
    )
    return f"Performance Max campaign created successfully. Resource: {resource_name}"


def create_demand_gen_campaign(client: GoogleAdsClient, args: dict) -> str:
    resource_name = advanced_campaigns.create_demand_gen_campaign(
        client, customer_id(args), require(args, "name"), require(args, "budgetAmountMicros")
    )
    return f"Demand Gen campaign created successfully. Resource: {resource_name}"


def create_app_campaign(client: GoogleAdsClient, args: dict) -> str:
    resource_name = advanced_campaigns.create_app_campaign(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "appId"),
        require(args, "appStore"),
        require(args, "budgetAmountMicros"),
        optional(args, "targetCpaMicros"),
    )
    return f"App campaign created successfully. Resource: {resource_name}"


def create_smart_campaign(client: GoogleAdsClient, args: dict) -> str:
    resource_name = advanced_campaigns.create_smart_campaign(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "budgetAmountMicros"),
        require(args, "businessName"),
        require(args, "finalUrl"),
    )
    return f"Smart campaign created successfully. Resource: {resource_name}"


def get_campaign_experiments(client: GoogleAdsClient, args: dict) -> str:
    return to_text(advanced_campaigns.get_campaign_experiments(client, customer_id(args)))


def create_campaign_experiment(client: GoogleAdsClient, args: dict) -> str:
    resource_name = advanced_campaigns.create_campaign_experiment(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "baseCampaignId"),
        optional(args, "trafficSplitPercent", 50),
    )
    return f"Campaign experiment created successfully. Resource: {resource_name}"


HANDLERS = {
    "upload_image_asset": upload_image_asset,
    "get_video_assets": get_video_assets,
    "create_asset_group": create_asset_group,
    "get_asset_performance": get_asset_performance,
    "create_sitelink_assets": create_sitelink_assets,
    "create_callout_assets": create_callout_assets,
    "create_structured_snippet_assets": create_structured_snippet_assets,
    "create_performance_max_campaign": create_performance_max_campaign,
    "create_demand_gen_campaign": create_demand_gen_campaign,
    "create_app_campaign": create_app_campaign,
    "create_smart_campaign": create_smart_campaign,
    "get_campaign_experiments": get_campaign_experiments,
    "create_campaign_experiment": create_campaign_experiment,
}


# =============================================================================
# SCHEMAS
# =============================================================================

SCHEMAS = [
    tool(
        "upload_image_asset",
        "Upload an image asset",
        {"imageData": string("Base64-encoded image bytes"), "name": string("Asset name")},
        ["imageData", "name"],
    ),
    tool("get_video_assets", "Get YouTube video assets"),
    tool(
        "create_asset_group",
        "Create a Performance Max asset group (created PAUSED)",
        {"campaignId": string("Campaign ID"), "name": string("Asset group name"), "finalUrls": array("Final URLs")},
        ["campaignId", "name", "finalUrls"],
    ),
    tool(
        "get_asset_performance",
        "Get performance labels and metrics for ad assets",
        {"assetId": string("Asset ID (optional)"), "dateRange": date_range()},
    ),
    tool("create_sitelink_assets", "Create sitelink assets", {"sitelinks": array("Sitelinks", SITELINK)}, ["sitelinks"]),
    tool("create_callout_assets", "Create callout assets", {"callouts": array("Callouts", CALLOUT)}, ["callouts"]),
    tool(
        "create_structured_snippet_assets",
        "Create structured snippet assets",
        {
            "snippets": array("Structured snippets", obj({
                "header": string("Snippet header", enum=list(assets.SNIPPET_HEADERS)),
                "values": array("Snippet values (3-10)"),
            }, ["header", "values"])),
        },
        ["snippets"],
    ),
    tool(
        "create_performance_max_campaign",
        "Create a Performance Max campaign (created PAUSED)",
        {
            "name": string("Campaign name"),
            "budgetAmountMicros": integer("Daily budget in micros"),
            "biddingStrategyType": string(
                "Bidding strategy (default MAXIMIZE_CONVERSIONS)", enum=list(advanced_campaigns.PMAX_BIDDING)
            ),
            "targetCpaMicros": integer("Target CPA in micros"),
            "targetRoas": number("Target ROAS as a ratio"),
        },
        ["name", "budgetAmountMicros"],
    ),
    tool(
        "create_demand_gen_campaign",
        "Create a Demand Gen campaign (created PAUSED)",
        {"name": string("Campaign name"), "budgetAmountMicros": integer("Daily budget in micros")},
        ["name", "budgetAmountMicros"],
    ),
    tool(
        "create_app_campaign",
        "Create an App campaign (created PAUSED)",
        {
            "name": string("Campaign name"),
            "appId": string("App ID (package name or App Store ID)"),
            "appStore": string("App store", enum=list(advanced_campaigns.APP_STORES)),
            "budgetAmountMicros": integer("Daily budget in micros"),
            "targetCpaMicros": integer("Target cost per install in micros"),
        },
        ["name", "appId", "appStore", "budgetAmountMicros"],
    ),
    tool(
        "create_smart_campaign",
        "Create a Smart campaign (created PAUSED)",
        {
            "name": string("Campaign name"),
            "budgetAmountMicros": integer("Daily budget in micros"),
            "businessName": string("Business name"),
            "finalUrl": string("Landing page URL"),
        },
        ["name", "budgetAmountMicros", "businessName", "finalUrl"],
    ),
    tool("get_campaign_experiments", "Get campaign experiments"),
    tool(
        "create_campaign_experiment",
        "Create a campaign experiment with control and treatment arms",
        {
            "name": string("Experiment name"),
            "baseCampaignId": string("Campaign to experiment on"),
            "trafficSplitPercent": integer("Treatment traffic share, 1-99 (default 50)"),
        },
        ["name", "baseCampaignId"],
    ),
]
