"""
Extension, recommendation, label, bulk edit and account-link tools.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.assets import CALLOUT, SITELINK
from gads_mcp.mcp.tools.schema import array, date_range, obj, string, tool
from gads_mcp.ops import accounts, extensions, management, recommendations
from gads_mcp.report.normalize import to_text

CAMPAIGN_ID = string("Campaign to attach to (omit for account level)")


# =============================================================================
# EXTENSIONS AND RECOMMENDATIONS
# =============================================================================


def create_sitelink_extensions(client: GoogleAdsClient, args: dict) -> str:
    result = extensions.create_sitelink_extensions(
        client, customer_id(args), require(args, "sitelinks"), optional(args, "campaignId")
    )
    return result.report("sitelink extensions")


def create_call_extensions(client: GoogleAdsClient, args: dict) -> str:
    result = extensions.create_call_extensions(
        client, customer_id(args), require(args, "callExtensions"), optional(args, "campaignId")
    )
    return result.report("call extensions")


def create_callout_extensions(client: GoogleAdsClient, args: dict) -> str:
    result = extensions.create_callout_extensions(
        client, customer_id(args), require(args, "callouts"), optional(args, "campaignId")
    )
    return result.report("callout extensions")


def get_extension_performance(client: GoogleAdsClient, args: dict) -> str:
    return to_text(extensions.get_extension_performance(
        client, customer_id(args), optional(args, "extensionType"), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def get_recommendations(client: GoogleAdsClient, args: dict) -> str:
    return to_text(recommendations.get_recommendations(client, customer_id(args), optional(args, "types")))


def apply_recommendation(client: GoogleAdsClient, args: dict) -> str:
    recommendations.apply_recommendation(client, customer_id(args), require(args, "recommendationId"))
    return "Recommendation applied successfully"


def dismiss_recommendation(client: GoogleAdsClient, args: dict) -> str:
    recommendations.dismiss_recommendation(client, customer_id(args), require(args, "recommendationId"))
    return "Recommendation dismissed successfully"


def get_keyword_ideas(client: GoogleAdsClient, args: dict) -> str:
    return to_text(recommendations.get_keyword_ideas(client, customer_id(args), require(args, "keywordSeed")))


# =============================================================================
# ORGANIZATION
# =============================================================================


def create_labels(client: GoogleAdsClient, args: dict) -> str:
    return management.create_labels(client, customer_id(args), require(args, "labels")).report("labels")


def apply_labels(client: GoogleAdsClient, args: dict) -> str:
    result = management.apply_labels(
        client,
        customer_id(args),
        require(args, "resourceType"),
        require(args, "resourceIds"),
        require(args, "labelIds"),
    )
    return result.report("labels", verb="Applied")


def get_labeled_resources(client: GoogleAdsClient, args: dict) -> str:
    return to_text(management.get_labeled_resources(client, customer_id(args), require(args, "labelId")))


def bulk_edit_operations(client: GoogleAdsClient, args: dict) -> str:
    result = management.bulk_edit_operations(client, customer_id(args), require(args, "operations"))
    return result.report("bulk operations", verb="Completed")


def get_account_hierarchy(client: GoogleAdsClient, args: dict) -> str:
    return to_text(accounts.get_account_hierarchy(client, customer_id(args)))


def manage_link_invitations(client: GoogleAdsClient, args: dict) -> str:
    action = str(require(args, "action")).upper()
    resource_name = accounts.manage_link_invitation(client, customer_id(args), require(args, "targetCustomerId"), action)
    return f"Account link invitation {action.lower()}ed successfully. Resource: {resource_name}"


HANDLERS = {
    "create_sitelink_extensions": create_sitelink_extensions,
    "create_call_extensions": create_call_extensions,
    "create_callout_extensions": create_callout_extensions,
    "get_extension_performance": get_extension_performance,
    "get_recommendations": get_recommendations,
    "apply_recommendation": apply_recommendation,
    "dismiss_recommendation": dismiss_recommendation,
    "get_keyword_ideas": get_keyword_ideas,
    "create_labels": create_labels,
    "apply_labels": apply_labels,
    "get_labeled_resources": get_labeled_resources,
    "bulk_edit_operations": bulk_edit_operations,
    "get_account_hierarchy": get_account_hierarchy,
    "manage_link_invitations": manage_link_invitations,
}


# =============================================================================
# SCHEMAS
# =============================================================================

SCHEMAS = [
    tool(
        "create_sitelink_extensions",
        "Create sitelink extensions",
        {"sitelinks": array("Sitelinks", SITELINK), "campaignId": CAMPAIGN_ID},
        ["sitelinks"],
    ),
    tool(
        "create_call_extensions",
        "Create call extensions",
        {
            "callExtensions": array("Phone numbers", obj({
                "phoneNumber": string("Phone number"),
                "countryCode": string("Two-letter country code"),
            }, ["phoneNumber", "countryCode"])),
            "campaignId": CAMPAIGN_ID,
        },
        ["callExtensions"],
    ),
    tool(
        "create_callout_extensions",
        "Create callout extensions",
        {"callouts": array("Callouts", CALLOUT), "campaignId": CAMPAIGN_ID},
        ["callouts"],
    ),
    tool(
        "get_extension_performance",
        "Get performance of campaign extensions",
        {
            "extensionType": string("Extension type (optional)", enum=list(extensions.EXTENSION_TYPES)),
            "dateRange": date_range(),
        },
    ),
    tool("get_recommendations", "Get active recommendations", {"types": array("Recommendation types to include")}),
    tool(
        "apply_recommendation",
        "Apply a recommendation",
        {"recommendationId": string("Recommendation ID")},
        ["recommendationId"],
    ),
    tool(
        "dismiss_recommendation",
        "Dismiss a recommendation",
        {"recommendationId": string("Recommendation ID")},
        ["recommendationId"],
    ),
    tool(
        "get_keyword_ideas",
        "Generate keyword ideas from seed keywords",
        {"keywordSeed": array("Seed keywords")},
        ["keywordSeed"],
    ),
    tool(
        "create_labels",
        "Create labels",
        {
            "labels": array("Labels", obj({
                "name": string("Label name"),
                "description": string("Label description"),
                "backgroundColor": string("Hex color, e.g. #FF0000"),
            }, ["name"])),
        },
        ["labels"],
    ),
    tool(
        "apply_labels",
        "Apply labels to campaigns, ad groups or ads",
        {
            "resourceType": string("Resource type", enum=list(management.LABEL_TARGETS)),
            "resourceIds": array("Resource IDs (ads as adGroupId~adId)"),
            "labelIds": array("Label IDs"),
        },
        ["resourceType", "resourceIds", "labelIds"],
    ),
    tool(
        "get_labeled_resources",
        "Get campaigns, ad groups and ads carrying a label",
        {"labelId": string("Label ID")},
        ["labelId"],
    ),
    tool(
        "bulk_edit_operations",
        "Perform bulk create, update and remove operations",
        {
            "operations": array("Operation groups", obj({
                "operationType": string("Operation type", enum=list(management.OPERATION_TYPES)),
                "resourceType": string("Resource type, e.g. campaign or ad_group_criterion"),
                "operations": {"type": "array", "description": "Payloads, or resource names for REMOVE"},
            }, ["operationType", "resourceType", "operations"])),
        },
        ["operations"],
    ),
    tool("get_account_hierarchy", "Get account structure and hierarchy"),
    tool(
        "manage_link_invitations",
        "Manage account linking invitations",
        {
            "targetCustomerId": string("Target customer ID"),
            "action": string("Action", enum=list(accounts.LINK_ACTIONS)),
        },
        ["targetCustomerId", "action"],
    ),
]
