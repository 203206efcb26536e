"""
Location, demographic and language targeting.
"""

from typing import Any

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate, in_list, quote, validate_id, validate_ids
from gads_mcp.api.mutations import BatchResult, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import create_many, metrics_summary, require_items, update_many
from gads_mcp.report.normalize import to_num

AGE_RANGES = (
    "AGE_RANGE_18_24",
    "AGE_RANGE_25_34",
    "AGE_RANGE_35_44",
    "AGE_RANGE_45_54",
    "AGE_RANGE_55_64",
    "AGE_RANGE_65_UP",
    "AGE_RANGE_UNDETERMINED",
)
GENDERS = ("MALE", "FEMALE", "UNDETERMINED")


def _geo_target(location_id: Any) -> str:
    return f"geoTargetConstants/{validate_id(location_id, 'locationId')}"


def get_geographic_performance(client: GoogleAdsClient, customer_id: str, date_range: str = DEFAULT_DATE_RANGE) -> list[dict]:
    """Performance by where users physically were."""
    query = GaqlQuery("user_location_view", [
        "user_location_view.country_criterion_id",
        "user_location_view.targeting_location",
        "campaign.id",
        "campaign.name",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where(date_predicate(date_range)).order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        view = row.get("userLocationView", {})
        records.append({
            "countryCriterionId": view.get("countryCriterionId"),
            "targetingLocation": view.get("targetingLocation"),
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records


def get_location_insights(client: GoogleAdsClient, customer_id: str, location_ids: list) -> list[dict]:
    ids = validate_ids(require_items(location_ids, "locationIds", 1), "locationIds")
    query = GaqlQuery("geo_target_constant", [
        "geo_target_constant.id",
        "geo_target_constant.name",
        "geo_target_constant.canonical_name",
        "geo_target_constant.country_code",
        "geo_target_constant.target_type",
        "geo_target_constant.status",
    ]).where(in_list("geo_target_constant.id", ids))

    records = []
    for row in client.search_stream(customer_id, query.build()):
        g = row.get("geoTargetConstant", {})
        records.append({
            "id": g.get("id"),
            "name": g.get("name"),
            "canonicalName": g.get("canonicalName"),
            "countryCode": g.get("countryCode"),
            "targetType": g.get("targetType"),
            "status": g.get("status"),
        })
    return records


def add_location_targets(client: GoogleAdsClient, customer_id: str, campaign_id: str, locations: list) -> BatchResult:
    require_items(locations, "locations", 1)
    cid = customer_id_digits(customer_id)
    campaign = OperationKind.CAMPAIGN.resource_name(cid, campaign_id)

    payloads = []
    for loc in locations:
        if not isinstance(loc, dict):
            raise ValidationError("Each location must be an object")
        payload = {"campaign": campaign, "location": {"geoTargetConstant": _geo_target(loc.get("locationId"))}}
        if loc.get("bidModifier") is not None:
            payload["bidModifier"] = to_num(loc["bidModifier"])
        payloads.append(payload)

    return create_many(client, cid, OperationKind.CAMPAIGN_CRITERION, payloads, locations)


def set_location_bid_adjustments(client: GoogleAdsClient, customer_id: str, adjustments: list) -> BatchResult:
    """Update bid modifiers on existing location criteria (``campaignId~locationId``)."""
    require_items(adjustments, "adjustments", 1)
    cid = customer_id_digits(customer_id)

    payloads = []
    for adj in adjustments:
        if not isinstance(adj, dict) or adj.get("bidModifier") is None:
            raise ValidationError("Each adjustment needs 'campaignId', 'locationId' and 'bidModifier'")
        payloads.append({
            "resourceName": OperationKind.CAMPAIGN_CRITERION.resource_name(cid, adj.get("campaignId"), adj.get("locationId")),
            "bidModifier": to_num(adj["bidModifier"]),
        })

    return update_many(client, cid, OperationKind.CAMPAIGN_CRITERION, payloads, adjustments)


def add_demographic_targets(client: GoogleAdsClient, customer_id: str, ad_group_id: str, demographics: list) -> BatchResult:
    """One ad group criterion per age range or gender given."""
    require_items(demographics, "demographics", 1)
    cid = customer_id_digits(customer_id)
    ad_group = OperationKind.AD_GROUP.resource_name(cid, ad_group_id)

    payloads, inputs = [], []
    for demo in demographics:
        if not isinstance(demo, dict) or not (demo.get("ageRange") or demo.get("gender")):
            raise ValidationError("Each demographic needs an 'ageRange' or a 'gender'")
        criteria = []
        if demo.get("ageRange"):
            age = str(demo["ageRange"]).upper()
            if age not in AGE_RANGES:
                raise ValidationError(f"Invalid ageRange: {demo['ageRange']}. Must be one of: {list(AGE_RANGES)}")
            criteria.append({"ageRange": {"type": age}})
        if demo.get("gender"):
            gender = str(demo["gender"]).upper()
            if gender not in GENDERS:
                raise ValidationError(f"Invalid gender: {demo['gender']}. Must be one of: {list(GENDERS)}")
            criteria.append({"gender": {"type": gender}})

        for criterion in criteria:
            payload = {"adGroup": ad_group, **criterion}
            if demo.get("bidModifier") is not None:
                payload["bidModifier"] = to_num(demo["bidModifier"])
            payloads.append(payload)
            inputs.append(criterion)

    return create_many(client, cid, OperationKind.AD_GROUP_CRITERION, payloads, inputs)


def manage_language_targets(client: GoogleAdsClient, customer_id: str, campaign_id: str, language_codes: list) -> BatchResult:
    """Resolve language codes to language constants, then target them."""
    require_items(language_codes, "languageCodes", 1)
    cid = customer_id_digits(customer_id)
    codes = [str(c).strip().lower() for c in language_codes]

    query = GaqlQuery("language_constant", [
        "language_constant.resource_name",
        "language_constant.code",
    ]).where(in_list("language_constant.code", [quote(c) for c in codes]))
    constants = {}
    for row in client.search_stream(cid, query.build()):
        lang = row.get("languageConstant", {})
        constants[str(lang.get("code", "")).lower()] = lang.get("resourceName")

    unknown = [c for c in codes if not constants.get(c)]
    if unknown:
        raise ValidationError(f"Unknown language codes: {unknown}")

    campaign = OperationKind.CAMPAIGN.resource_name(cid, campaign_id)
    payloads = [{"campaign": campaign, "language": {"languageConstant": constants[c]}} for c in codes]
    return create_many(client, cid, OperationKind.CAMPAIGN_CRITERION, payloads, codes)
