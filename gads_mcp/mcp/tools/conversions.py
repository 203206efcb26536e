"""
Conversion tracking and audience tools.
"""

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE
from gads_mcp.mcp.tools.args import customer_id, optional, require
from gads_mcp.mcp.tools.schema import array, date_range, integer, number, obj, string, tool
from gads_mcp.ops import audiences, conversions
from gads_mcp.report.normalize import to_text

# =============================================================================
# CONVERSIONS
# =============================================================================


def get_conversions(client: GoogleAdsClient, args: dict) -> str:
    return to_text(conversions.get_conversions(client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE)))


def create_conversion_action(client: GoogleAdsClient, args: dict) -> str:
    resource_name = conversions.create_conversion_action(
        client,
        customer_id(args),
        require(args, "name"),
        require(args, "category"),
        require(args, "type"),
        optional(args, "defaultValue"),
        optional(args, "countingType"),
    )
    return f"Conversion action created successfully. Resource: {resource_name}"


def update_conversion_action(client: GoogleAdsClient, args: dict) -> str:
    conversions.update_conversion_action(client, customer_id(args), require(args, "conversionId"), require(args, "updates"))
    return "Conversion action updated successfully"


def get_conversion_attribution(client: GoogleAdsClient, args: dict) -> str:
    return to_text(conversions.get_conversion_attribution(client, customer_id(args), optional(args, "conversionId")))


def get_conversion_path_data(client: GoogleAdsClient, args: dict) -> str:
    return to_text(conversions.get_conversion_path_data(
        client, customer_id(args), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def import_offline_conversions(client: GoogleAdsClient, args: dict) -> str:
    result = conversions.import_offline_conversions(
        client, customer_id(args), require(args, "conversionActionId"), require(args, "conversions")
    )
    return result.report("offline conversions", verb="Imported")


# =============================================================================
# AUDIENCES
# =============================================================================


def get_audiences(client: GoogleAdsClient, args: dict) -> str:
    return to_text(audiences.get_audiences(client, customer_id(args)))


def create_custom_audience(client: GoogleAdsClient, args: dict) -> str:
    resource_name = audiences.create_custom_audience(
        client,
        customer_id(args),
        require(args, "name"),
        optional(args, "description"),
        optional(args, "membershipDurationDays"),
        optional(args, "urlContains"),
    )
    return f"Custom audience created successfully. Resource: {resource_name}"


def add_audience_to_campaign(client: GoogleAdsClient, args: dict) -> str:
    resource_name = audiences.add_audience_to_campaign(
        client, customer_id(args), require(args, "campaignId"), require(args, "audienceId")
    )
    return f"Audience added to campaign successfully. Resource: {resource_name}"


def remove_audience_from_campaign(client: GoogleAdsClient, args: dict) -> str:
    audiences.remove_audience_from_campaign(client, customer_id(args), require(args, "campaignId"), require(args, "audienceId"))
    return "Audience removed from campaign successfully"


def get_audience_insights(client: GoogleAdsClient, args: dict) -> str:
    return to_text(audiences.get_audience_insights(
        client, customer_id(args), optional(args, "audienceId"), optional(args, "dateRange", DEFAULT_DATE_RANGE)
    ))


def create_customer_match_list(client: GoogleAdsClient, args: dict) -> str:
    resource_name = audiences.create_customer_match_list(
        client, customer_id(args), require(args, "name"), require(args, "uploadKeyType")
    )
    return f"Customer match list created successfully. Resource: {resource_name}"


def upload_customer_match_data(client: GoogleAdsClient, args: dict) -> str:
    job = audiences.upload_customer_match_data(
        client, customer_id(args), require(args, "userListId"), require(args, "customerData")
    )
    text = f"Customer data uploaded successfully to list ({job['submitted']} records, job {job['job']})"
    if job["partialFailure"]:
        text += f"\nPartial failure: {job['partialFailure']}"
    return text


def create_lookalike_audience(client: GoogleAdsClient, args: dict) -> str:
    resource_name = audiences.create_lookalike_audience(
        client,
        customer_id(args),
        require(args, "seedAudienceId"),
        require(args, "name"),
        optional(args, "expansionLevel", "BALANCED"),
        optional(args, "countryCodes"),
    )
    return f"Lookalike audience created successfully. Resource: {resource_name}"


HANDLERS = {
    "get_conversions": get_conversions,
    "create_conversion_action": create_conversion_action,
    "update_conversion_action": update_conversion_action,
    "get_conversion_attribution": get_conversion_attribution,
    "get_conversion_path_data": get_conversion_path_data,
    "import_offline_conversions": import_offline_conversions,
    "get_audiences": get_audiences,
    "create_custom_audience": create_custom_audience,
    "add_audience_to_campaign": add_audience_to_campaign,
    "remove_audience_from_campaign": remove_audience_from_campaign,
    "get_audience_insights": get_audience_insights,
    "create_customer_match_list": create_customer_match_list,
    "upload_customer_match_data": upload_customer_match_data,
    "create_lookalike_audience": create_lookalike_audience,
}


# =============================================================================
# SCHEMAS
# =============================================================================

SCHEMAS = [
    tool("get_conversions", "Get conversion actions and their totals", {"dateRange": date_range()}),
    tool(
        "create_conversion_action",
        "Create a conversion action",
        {
            "name": string("Conversion action name"),
            "category": string("Conversion category", enum=list(conversions.CATEGORIES)),
            "type": string("Conversion type", enum=list(conversions.TYPES)),
            "defaultValue": number("Default conversion value (currency units)"),
            "countingType": string("Counting type", enum=list(conversions.COUNTING_TYPES)),
        },
        ["name", "category", "type"],
    ),
    tool(
        "update_conversion_action",
        "Update fields of a conversion action",
        {
            "conversionId": string("Conversion action ID"),
            "updates": {"type": "object", "description": "Fields to update, in API (camelCase) shape"},
        },
        ["conversionId", "updates"],
    ),
    tool(
        "get_conversion_attribution",
        "Get attribution model settings for conversion actions",
        {"conversionId": string("Conversion action ID (optional)")},
    ),
    tool("get_conversion_path_data", "Get conversions per campaign by conversion lag", {"dateRange": date_range()}),
    tool(
        "import_offline_conversions",
        "Upload offline click conversions",
        {
            "conversionActionId": string("Conversion action ID the conversions belong to"),
            "conversions": array("Click conversions", obj({
                "gclid": string("Google click ID"),
                "gbraid": string("App-to-web click ID"),
                "wbraid": string("Web-to-app click ID"),
                "conversionDateTime": string("yyyy-mm-dd hh:mm:ss+|-hh:mm"),
                "conversionValue": number("Conversion value (currency units)"),
                "currencyCode": string("ISO 4217 currency code"),
                "orderId": string("Order ID"),
            }, ["conversionDateTime"])),
        },
        ["conversionActionId", "conversions"],
    ),
    tool("get_audiences", "Get audience lists"),
    tool(
        "create_custom_audience",
        "Create a website visitor audience",
        {
            "name": string("Audience name"),
            "description": string("Audience description"),
            "membershipDurationDays": integer("Membership duration in days (default 30)"),
            "urlContains": string("Only visitors of URLs containing this text (default: every page)"),
        },
        ["name"],
    ),
    tool(
        "add_audience_to_campaign",
        "Target an audience list in a campaign",
        {"campaignId": string("Campaign ID"), "audienceId": string("User list ID")},
        ["campaignId", "audienceId"],
    ),
    tool(
        "remove_audience_from_campaign",
        "Stop targeting an audience list in a campaign",
        {"campaignId": string("Campaign ID"), "audienceId": string("User list ID")},
        ["campaignId", "audienceId"],
    ),
    tool(
        "get_audience_insights",
        "Get performance of audiences targeted in campaigns",
        {"audienceId": string("User list ID (optional)"), "dateRange": date_range()},
    ),
    tool(
        "create_customer_match_list",
        "Create a Customer Match list",
        {"name": string("List name"), "uploadKeyType": string("Upload key type", enum=list(audiences.UPLOAD_KEY_TYPES))},
        ["name", "uploadKeyType"],
    ),
    tool(
        "upload_customer_match_data",
        "Upload hashed customer data to a Customer Match list",
        {
            "userListId": string("User list ID"),
            "customerData": array("Customer records", obj({
                "hashedEmail": string("SHA-256 of normalized email"),
                "hashedPhoneNumber": string("SHA-256 of E.164 phone number"),
                "mobileId": string("Mobile advertising ID"),
                "crmId": string("Third-party CRM ID"),
            })),
        },
        ["userListId", "customerData"],
    ),
    tool(
        "create_lookalike_audience",
        "Create a lookalike audience from a seed list",
        {
            "seedAudienceId": string("Seed user list ID"),
            "name": string("Audience name"),
            "expansionLevel": string("Expansion level (default BALANCED)", enum=list(audiences.EXPANSION_LEVELS)),
            "countryCodes": array("Two-letter country codes"),
        },
        ["seedAudienceId", "name"],
    ),
]
