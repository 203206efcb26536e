"""
Conversion tracking: conversion actions, attribution settings, lag buckets
and offline click-conversion uploads.

Conversion values (``defaultValue``, ``conversionValue``) are plain
currency amounts; the API fields are doubles, not micros.
"""

from typing import Any, Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate, validate_id
from gads_mcp.api.mutations import BatchResult, MutateOperation, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import create_one, require_created, require_items
from gads_mcp.report.normalize import to_num

CATEGORIES = ("DEFAULT", "PAGE_VIEW", "PURCHASE", "SIGNUP", "LEAD", "DOWNLOAD")
TYPES = ("WEBPAGE", "PHONE_CALL_FROM_ADS", "APP_INSTALLS", "IMPORT")
COUNTING_TYPES = ("ONE_PER_CLICK", "MANY_PER_CLICK")


def _check(value: Optional[str], allowed: tuple, name: str) -> str:
    value = str(value or "").upper()
    if value not in allowed:
        raise ValidationError(f"Invalid {name}: {value}. Must be one of: {list(allowed)}")
    return value


# =============================================================================
# READS
# =============================================================================


def get_conversions(client: GoogleAdsClient, customer_id: str, date_range: str = DEFAULT_DATE_RANGE) -> list[dict]:
    query = (
        GaqlQuery("conversion_action", [
            "conversion_action.id",
            "conversion_action.name",
            "conversion_action.category",
            "conversion_action.type",
            "conversion_action.status",
            "conversion_action.counting_type",
            "conversion_action.value_settings.default_value",
            "metrics.all_conversions",
            "metrics.all_conversions_value",
        ])
        .where("conversion_action.status != 'REMOVED'")
        .where(date_predicate(date_range))
        .order_by("metrics.all_conversions DESC")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        a = row.get("conversionAction", {})
        m = row.get("metrics", {})
        records.append({
            "id": a.get("id"),
            "name": a.get("name"),
            "category": a.get("category"),
            "type": a.get("type"),
            "status": a.get("status"),
            "countingType": a.get("countingType"),
            "defaultValue": a.get("valueSettings", {}).get("defaultValue"),
            "conversions": to_num(m.get("allConversions")),
            "conversionValue": to_num(m.get("allConversionsValue")),
        })
    return records


def get_conversion_attribution(client: GoogleAdsClient, customer_id: str, conversion_id: Optional[str] = None) -> list[dict]:
    query = GaqlQuery("conversion_action", [
        "conversion_action.id",
        "conversion_action.name",
        "conversion_action.attribution_model_settings.attribution_model",
        "conversion_action.attribution_model_settings.data_driven_model_status",
        "conversion_action.click_through_lookback_window_days",
        "conversion_action.view_through_lookback_window_days",
    ]).where("conversion_action.status != 'REMOVED'")
    if conversion_id:
        query.where(f"conversion_action.id = {validate_id(conversion_id, 'conversionId')}")
    query.order_by("conversion_action.name")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        a = row.get("conversionAction", {})
        settings = a.get("attributionModelSettings", {})
        records.append({
            "id": a.get("id"),
            "name": a.get("name"),
            "attributionModel": settings.get("attributionModel"),
            "dataDrivenModelStatus": settings.get("dataDrivenModelStatus"),
            "clickThroughLookbackWindowDays": a.get("clickThroughLookbackWindowDays"),
            "viewThroughLookbackWindowDays": a.get("viewThroughLookbackWindowDays"),
        })
    return records


def get_conversion_path_data(client: GoogleAdsClient, customer_id: str, date_range: str = DEFAULT_DATE_RANGE) -> list[dict]:
    """Conversions per campaign split by time from first click to conversion."""
    query = (
        GaqlQuery("campaign", [
            "campaign.id",
            "campaign.name",
            "segments.conversion_lag_bucket",
            "metrics.conversions",
            "metrics.conversions_value",
        ])
        .where(date_predicate(date_range))
        .where("metrics.conversions > 0")
        .order_by("campaign.id")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        c = row.get("campaign", {})
        m = row.get("metrics", {})
        records.append({
            "campaignId": c.get("id"),
            "campaignName": c.get("name"),
            "conversionLagBucket": row.get("segments", {}).get("conversionLagBucket"),
            "conversions": to_num(m.get("conversions")),
            "conversionValue": to_num(m.get("conversionsValue")),
        })
    return records


# =============================================================================
# WRITES
# =============================================================================


def create_conversion_action(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    category: str,
    conversion_type: str,
    default_value: Optional[Any] = None,
    counting_type: Optional[str] = None,
) -> str:
    payload = {
        "name": name,
        "category": _check(category, CATEGORIES, "category"),
        "type": _check(conversion_type, TYPES, "type"),
        "status": "ENABLED",
    }
    if counting_type:
        payload["countingType"] = _check(counting_type, COUNTING_TYPES, "countingType")
    if default_value is not None:
        payload["valueSettings"] = {"defaultValue": to_num(default_value), "alwaysUseDefaultValue": True}
    return create_one(client, customer_id, OperationKind.CONVERSION_ACTION, payload, "conversion action")


def update_conversion_action(client: GoogleAdsClient, customer_id: str, conversion_id: str, updates: dict) -> str:
    """Apply API-shaped (camelCase) field updates; the mask covers every leaf given."""
    if not isinstance(updates, dict) or not updates:
        raise ValidationError("updates must be a non-empty object")

    cid = customer_id_digits(customer_id)
    payload = {k: v for k, v in updates.items() if k != "resourceName"}
    payload["resourceName"] = OperationKind.CONVERSION_ACTION.resource_name(cid, conversion_id)
    response = client.mutate(cid, [MutateOperation.update(OperationKind.CONVERSION_ACTION, payload)])
    return require_created(response, OperationKind.CONVERSION_ACTION, "conversion action update")


def import_offline_conversions(
    client: GoogleAdsClient,
    customer_id: str,
    conversion_action_id: str,
    conversions: list,
) -> BatchResult:
    """Upload click conversions against one conversion action."""
    require_items(conversions, "conversions", 1)
    cid = customer_id_digits(customer_id)
    action = OperationKind.CONVERSION_ACTION.resource_name(cid, conversion_action_id)

    payloads = []
    for conv in conversions:
        if not isinstance(conv, dict) or not conv.get("conversionDateTime"):
            raise ValidationError("Each conversion needs a 'conversionDateTime'")
        if not any(conv.get(k) for k in ("gclid", "gbraid", "wbraid")):
            raise ValidationError("Each conversion needs a 'gclid', 'gbraid' or 'wbraid'")
        payload = {"conversionAction": action, "conversionDateTime": conv["conversionDateTime"]}
        for key in ("gclid", "gbraid", "wbraid", "currencyCode", "orderId"):
            if conv.get(key):
                payload[key] = conv[key]
        if conv.get("conversionValue") is not None:
            payload["conversionValue"] = to_num(conv["conversionValue"])
        payloads.append(payload)

    response = client.post(
        f"customers/{cid}:uploadClickConversions",
        {"conversions": payloads, "partialFailure": True},
    )
    # Accepted conversions echo back; rejected ones come back empty.
    return BatchResult.from_response(
        conversions, response, results_key="results", name_of=lambda entry: entry.get("conversionAction")
    )
