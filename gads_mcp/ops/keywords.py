"""
Keyword reads and bulk keyword writes.

Both write operations submit every keyword in one partial-failure mutate;
a keyword the API rejects does not abort the others and shows up in the
returned BatchResult with its failure reason.
"""

from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, quote
from gads_mcp.api.mutations import BatchResult, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import create_many, micros_int, require_items
from gads_mcp.report.normalize import id_from_resource_name, micros_to_currency

MATCH_TYPES = ("EXACT", "PHRASE", "BROAD")
DEFAULT_MATCH_TYPE = "BROAD"


def get_keywords(client: GoogleAdsClient, customer_id: str, ad_group_id: Optional[str] = None) -> list[dict]:
    cid = customer_id_digits(customer_id)
    query = (
        GaqlQuery("ad_group_criterion", [
            "ad_group_criterion.criterion_id",
            "ad_group_criterion.ad_group",
            "ad_group_criterion.keyword.text",
            "ad_group_criterion.keyword.match_type",
            "ad_group_criterion.cpc_bid_micros",
            "ad_group_criterion.status",
        ])
        .where("ad_group_criterion.type = 'KEYWORD'")
        .where("ad_group_criterion.status != 'REMOVED'")
    )
    if ad_group_id:
        query.where(f"ad_group_criterion.ad_group = {quote(OperationKind.AD_GROUP.resource_name(cid, ad_group_id))}")

    records = []
    for row in client.search_stream(cid, query.build()):
        k = row.get("adGroupCriterion", {})
        keyword = k.get("keyword", {})
        records.append({
            "id": k.get("criterionId"),
            "adGroupId": id_from_resource_name(k.get("adGroup")),
            "text": keyword.get("text"),
            "matchType": keyword.get("matchType"),
            "cpcBidMicros": k.get("cpcBidMicros"),
            "cpcBid": micros_to_currency(k.get("cpcBidMicros")),
            "status": k.get("status"),
        })
    return records


def _match_type(value: Optional[str]) -> str:
    match_type = (value or DEFAULT_MATCH_TYPE).upper()
    if match_type not in MATCH_TYPES:
        raise ValidationError(f"Invalid matchType: {value}. Must be one of: {list(MATCH_TYPES)}")
    return match_type


def add_keywords(client: GoogleAdsClient, customer_id: str, ad_group_id: str, keywords: list) -> BatchResult:
    require_items(keywords, "keywords", 1)
    cid = customer_id_digits(customer_id)
    ad_group = OperationKind.AD_GROUP.resource_name(cid, ad_group_id)

    payloads = []
    for kw in keywords:
        if not isinstance(kw, dict) or not kw.get("text"):
            raise ValidationError("Each keyword needs a 'text' value")
        payload = {
            "adGroup": ad_group,
            "status": "ENABLED",
            "keyword": {"text": kw["text"], "matchType": _match_type(kw.get("matchType"))},
        }
        if kw.get("cpcBidMicros"):
            payload["cpcBidMicros"] = micros_int(kw["cpcBidMicros"], "cpcBidMicros")
        payloads.append(payload)

    return create_many(client, cid, OperationKind.AD_GROUP_CRITERION, payloads, keywords)


def add_negative_keywords(client: GoogleAdsClient, customer_id: str, ad_group_id: str, keywords: list) -> BatchResult:
    require_items(keywords, "keywords", 1)
    cid = customer_id_digits(customer_id)
    ad_group = OperationKind.AD_GROUP.resource_name(cid, ad_group_id)

    payloads = []
    for text in keywords:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Negative keywords must be non-empty strings")
        payloads.append({
            "adGroup": ad_group,
            "negative": True,
            "keyword": {"text": text, "matchType": DEFAULT_MATCH_TYPE},
        })

    return create_many(client, cid, OperationKind.AD_GROUP_CRITERION, payloads, keywords)
