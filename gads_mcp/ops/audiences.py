"""
Audience lists, campaign audience targeting and Customer Match uploads.

Customer Match uploads run as an offline user data job in three
sequential calls (create job, add operations, run). If the job create
returns no resource name nothing else is sent.
"""

from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate, quote
from gads_mcp.api.mutations import MutateOperation, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import DependencyCreationError, ValidationError
from gads_mcp.ops.common import create_one, metrics_summary, require_created, require_items

UPLOAD_KEY_TYPES = ("CONTACT_INFO", "CRM_ID", "MOBILE_ADVERTISING_ID")
EXPANSION_LEVELS = ("NARROW", "BALANCED", "BROAD")
DEFAULT_MEMBERSHIP_DAYS = 30
CUSTOMER_MATCH_LIFESPAN = 10000

# customerData key -> UserIdentifier field
IDENTIFIER_FIELDS = {
    "hashedEmail": "hashedEmail",
    "hashedPhoneNumber": "hashedPhoneNumber",
    "mobileId": "mobileId",
    "crmId": "thirdPartyUserId",
}


# =============================================================================
# READS
# =============================================================================


def get_audiences(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = GaqlQuery("user_list", [
        "user_list.id",
        "user_list.name",
        "user_list.description",
        "user_list.type",
        "user_list.membership_status",
        "user_list.membership_life_span",
        "user_list.size_for_display",
        "user_list.size_for_search",
    ]).order_by("user_list.name")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        u = row.get("userList", {})
        records.append({
            "id": u.get("id"),
            "name": u.get("name"),
            "description": u.get("description", ""),
            "type": u.get("type"),
            "membershipStatus": u.get("membershipStatus"),
            "membershipLifeSpan": u.get("membershipLifeSpan"),
            "sizeForDisplay": u.get("sizeForDisplay"),
            "sizeForSearch": u.get("sizeForSearch"),
        })
    return records


def get_audience_insights(
    client: GoogleAdsClient,
    customer_id: str,
    audience_id: Optional[str] = None,
    date_range: str = DEFAULT_DATE_RANGE,
) -> list[dict]:
    cid = customer_id_digits(customer_id)
    query = GaqlQuery("campaign_audience_view", [
        "campaign.id",
        "campaign.name",
        "campaign_criterion.criterion_id",
        "campaign_criterion.user_list.user_list",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where(date_predicate(date_range))
    if audience_id:
        user_list = OperationKind.USER_LIST.resource_name(cid, audience_id)
        query.where(f"campaign_criterion.user_list.user_list = {quote(user_list)}")
    query.order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(cid, query.build()):
        c = row.get("campaign", {})
        crit = row.get("campaignCriterion", {})
        records.append({
            "campaignId": c.get("id"),
            "campaignName": c.get("name"),
            "criterionId": crit.get("criterionId"),
            "userList": crit.get("userList", {}).get("userList"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records


# =============================================================================
# LISTS
# =============================================================================


def create_custom_audience(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    description: Optional[str] = None,
    membership_duration_days: Optional[int] = None,
    url_contains: Optional[str] = None,
) -> str:
    """Rule-based website visitor list; without ``url_contains`` every visitor qualifies."""
    rule = {
        "ruleItemGroups": [{
            "ruleItems": [{
                "name": "url__",
                "stringRuleItem": {"operator": "CONTAINS", "value": url_contains or "/"},
            }]
        }]
    }
    payload = {
        "name": name,
        "membershipStatus": "OPEN",
        "membershipLifeSpan": int(membership_duration_days or DEFAULT_MEMBERSHIP_DAYS),
        "ruleBasedUserList": {
            "prepopulationStatus": "REQUESTED",
            "flexibleRuleUserList": {
                "inclusiveRuleOperator": "AND",
                "inclusiveOperands": [{"rule": rule}],
            },
        },
    }
    if description:
        payload["description"] = description
    return create_one(client, customer_id, OperationKind.USER_LIST, payload, "custom audience")


def create_customer_match_list(client: GoogleAdsClient, customer_id: str, name: str, upload_key_type: str) -> str:
    key_type = str(upload_key_type or "").upper()
    if key_type not in UPLOAD_KEY_TYPES:
        raise ValidationError(f"Invalid uploadKeyType: {upload_key_type}. Must be one of: {list(UPLOAD_KEY_TYPES)}")
    payload = {
        "name": name,
        "membershipStatus": "OPEN",
        "membershipLifeSpan": CUSTOMER_MATCH_LIFESPAN,
        "crmBasedUserList": {"uploadKeyType": key_type, "dataSourceType": "FIRST_PARTY"},
    }
    return create_one(client, customer_id, OperationKind.USER_LIST, payload, "customer match list")


def create_lookalike_audience(
    client: GoogleAdsClient,
    customer_id: str,
    seed_audience_id: str,
    name: str,
    expansion_level: str = "BALANCED",
    country_codes: Optional[list] = None,
) -> str:
    level = str(expansion_level or "BALANCED").upper()
    if level not in EXPANSION_LEVELS:
        raise ValidationError(f"Invalid expansionLevel: {expansion_level}. Must be one of: {list(EXPANSION_LEVELS)}")
    cid = customer_id_digits(customer_id)
    lookalike = {
        "seedUserLists": [OperationKind.USER_LIST.resource_name(cid, seed_audience_id)],
        "expansionLevel": level,
    }
    if country_codes:
        lookalike["countryCodes"] = list(country_codes)
    payload = {"name": name, "lookalikeUserList": lookalike}
    return create_one(client, cid, OperationKind.USER_LIST, payload, "lookalike audience")


def upload_customer_match_data(client: GoogleAdsClient, customer_id: str, user_list_id: str, customer_data: list) -> dict:
    require_items(customer_data, "customerData", 1)
    cid = customer_id_digits(customer_id)

    operations = []
    for entry in customer_data:
        identifiers = [
            {field: entry[key]}
            for key, field in IDENTIFIER_FIELDS.items()
            if isinstance(entry, dict) and entry.get(key)
        ]
        if not identifiers:
            raise ValidationError(f"customerData entries need one of: {list(IDENTIFIER_FIELDS)}")
        operations.append({"create": {"userIdentifiers": identifiers}})

    job = client.post(f"customers/{cid}/offlineUserDataJobs:create", {
        "job": {
            "type": "CUSTOMER_MATCH_USER_LIST",
            "customerMatchUserListMetadata": {
                "userList": OperationKind.USER_LIST.resource_name(cid, user_list_id),
            },
        }
    })
    job_resource = job.get("resourceName")
    if not job_resource:
        raise DependencyCreationError("Failed to create offline user data job")

    added = client.post(f"{job_resource}:addOperations", {"operations": operations, "enablePartialFailure": True})
    client.post(f"{job_resource}:run", {})
    return {
        "job": job_resource,
        "submitted": len(operations),
        "partialFailure": (added.get("partialFailureError") or {}).get("message"),
    }


# =============================================================================
# CAMPAIGN TARGETING
# =============================================================================


def add_audience_to_campaign(client: GoogleAdsClient, customer_id: str, campaign_id: str, audience_id: str) -> str:
    cid = customer_id_digits(customer_id)
    payload = {
        "campaign": OperationKind.CAMPAIGN.resource_name(cid, campaign_id),
        "userList": {"userList": OperationKind.USER_LIST.resource_name(cid, audience_id)},
    }
    return create_one(client, cid, OperationKind.CAMPAIGN_CRITERION, payload, "audience targeting")


def remove_audience_from_campaign(client: GoogleAdsClient, customer_id: str, campaign_id: str, audience_id: str) -> str:
    """Find the campaign criterion carrying the list and remove it."""
    cid = customer_id_digits(customer_id)
    campaign = OperationKind.CAMPAIGN.resource_name(cid, campaign_id)
    user_list = OperationKind.USER_LIST.resource_name(cid, audience_id)
    query = (
        GaqlQuery("campaign_criterion", ["campaign_criterion.criterion_id"])
        .where(f"campaign_criterion.campaign = {quote(campaign)}")
        .where(f"campaign_criterion.user_list.user_list = {quote(user_list)}")
        .where("campaign_criterion.status != 'REMOVED'")
    )
    rows = client.search_stream(cid, query.build())
    if not rows:
        raise ValidationError(f"Audience {audience_id} is not targeted by campaign {campaign_id}")

    criterion_id = rows[0].get("campaignCriterion", {}).get("criterionId")
    resource_name = OperationKind.CAMPAIGN_CRITERION.resource_name(cid, campaign_id, criterion_id)
    response = client.mutate(cid, [MutateOperation.remove(OperationKind.CAMPAIGN_CRITERION, resource_name)])
    return require_created(response, OperationKind.CAMPAIGN_CRITERION, "audience removal")
