"""
Geographic, demographic and language targeting tools.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.schema import array, date_range, number, obj, string, tool
from gads_mcp.ops import targeting
from gads_mcp.report.normalize import to_text


def get_geographic_performance(client: GoogleAdsClient, args: dict) -> str:
    return to_text(targeting.get_geographic_performance(
        client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def add_location_targets(client: GoogleAdsClient, args: dict) -> str:
    result = targeting.add_location_targets(client, customer_id(args), require(args, "campaignId"), require(args, "locations"))
    return result.report("location targets", verb="Added")


def add_demographic_targets(client: GoogleAdsClient, args: dict) -> str:
    result = targeting.add_demographic_targets(
        client, customer_id(args), require(args, "adGroupId"), require(args, "demographics")
    )
    return result.report("demographic targets", verb="Added")


def get_location_insights(client: GoogleAdsClient, args: dict) -> str:
    return to_text(targeting.get_location_insights(client, customer_id(args), require(args, "locationIds")))


def set_location_bid_adjustments(client: GoogleAdsClient, args: dict) -> str:
    result = targeting.set_location_bid_adjustments(client, customer_id(args), require(args, "adjustments"))
    return result.report("location bid adjustments", verb="Updated")


def manage_language_targets(client: GoogleAdsClient, args: dict) -> str:
    result = targeting.manage_language_targets(
        client, customer_id(args), require(args, "campaignId"), require(args, "languageCodes")
    )
    return result.report("language targets", verb="Added")


HANDLERS = {
    "get_geographic_performance": get_geographic_performance,
    "add_location_targets": add_location_targets,
    "add_demographic_targets": add_demographic_targets,
    "get_location_insights": get_location_insights,
    "set_location_bid_adjustments": set_location_bid_adjustments,
    "manage_language_targets": manage_language_targets,
}

SCHEMAS = [
    tool("get_geographic_performance", "Get performance by user location", {"dateRange": date_range()}),
    tool(
        "add_location_targets",
        "Target geographic locations in a campaign",
        {
            "campaignId": string("Campaign ID"),
            "locations": array("Locations to target", obj({
                "locationId": string("Geo target constant ID (e.g. 2840 for United States)"),
                "bidModifier": number("Bid modifier"),
            }, ["locationId"])),
        },
        ["campaignId", "locations"],
    ),
    tool(
        "add_demographic_targets",
        "Add age range and gender criteria to an ad group",
        {
            "adGroupId": string("Ad group ID"),
            "demographics": array("Demographic criteria", obj({
                "ageRange": string("Age range", enum=list(targeting.AGE_RANGES)),
                "gender": string("Gender", enum=list(targeting.GENDERS)),
                "bidModifier": number("Bid modifier"),
            })),
        },
        ["adGroupId", "demographics"],
    ),
    tool(
        "get_location_insights",
        "Look up geo target constants",
        {"locationIds": array("Geo target constant IDs")},
        ["locationIds"],
    ),
    tool(
        "set_location_bid_adjustments",
        "Update bid modifiers on targeted locations",
        {
            "adjustments": array("Location bid adjustments", obj({
                "campaignId": string("Campaign ID"),
                "locationId": string("Geo target constant ID"),
                "bidModifier": number("Bid modifier"),
            }, ["campaignId", "locationId", "bidModifier"])),
        },
        ["adjustments"],
    ),
    tool(
        "manage_language_targets",
        "Target languages in a campaign",
        {"campaignId": string("Campaign ID"), "languageCodes": array("Language codes (e.g. en, es)")},
        ["campaignId", "languageCodes"],
    ),
]
