"""
Ad extensions built on assets.

Each extension write runs in two steps: the assets are created in one
partial-failure mutate, then every asset that came back with a resource
name is linked to the campaign (when ``campaign_id`` is given) or to the
account. Assets that failed to create are reported and never linked.
"""

from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate
from gads_mcp.api.mutations import BatchResult, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.assets import callout_payload, sitelink_payload
from gads_mcp.ops.common import create_many, metrics_summary, require_items
from gads_mcp.report.normalize import id_from_resource_name

EXTENSION_TYPES = ("SITELINK", "CALL", "CALLOUT", "STRUCTURED_SNIPPET", "PROMOTION", "PRICE")


def _link_assets(
    client: GoogleAdsClient,
    cid: str,
    created: BatchResult,
    field_type: str,
    campaign_id: Optional[str],
) -> BatchResult:
    """Link every created asset; the result pairs inputs with the asset's outcome."""
    if not created.succeeded:
        return created

    if campaign_id:
        kind = OperationKind.CAMPAIGN_ASSET
        campaign = OperationKind.CAMPAIGN.resource_name(cid, campaign_id)
        payloads = [{"campaign": campaign, "asset": rn, "fieldType": field_type} for rn in created.resource_names]
    else:
        kind = OperationKind.CUSTOMER_ASSET
        payloads = [{"asset": rn, "fieldType": field_type} for rn in created.resource_names]

    links = create_many(client, cid, kind, payloads)
    for item, link in zip(created.succeeded, links.items):
        if not link.succeeded:
            item.error = f"Asset created but not linked: {link.error}"
            item.resource_name = None
    return created


def create_sitelink_extensions(
    client: GoogleAdsClient,
    customer_id: str,
    sitelinks: list,
    campaign_id: Optional[str] = None,
) -> BatchResult:
    require_items(sitelinks, "sitelinks", 1)
    cid = customer_id_digits(customer_id)
    created = create_many(client, cid, OperationKind.ASSET, [sitelink_payload(s) for s in sitelinks], sitelinks)
    return _link_assets(client, cid, created, "SITELINK", campaign_id)


def create_call_extensions(
    client: GoogleAdsClient,
    customer_id: str,
    call_extensions: list,
    campaign_id: Optional[str] = None,
) -> BatchResult:
    require_items(call_extensions, "callExtensions", 1)
    cid = customer_id_digits(customer_id)

    payloads = []
    for call in call_extensions:
        if not isinstance(call, dict) or not call.get("phoneNumber") or not call.get("countryCode"):
            raise ValidationError("Each call extension needs 'phoneNumber' and 'countryCode'")
        payloads.append({
            "callAsset": {"phoneNumber": str(call["phoneNumber"]), "countryCode": str(call["countryCode"]).upper()}
        })

    created = create_many(client, cid, OperationKind.ASSET, payloads, call_extensions)
    return _link_assets(client, cid, created, "CALL", campaign_id)


def create_callout_extensions(
    client: GoogleAdsClient,
    customer_id: str,
    callouts: list,
    campaign_id: Optional[str] = None,
) -> BatchResult:
    require_items(callouts, "callouts", 1)
    cid = customer_id_digits(customer_id)
    created = create_many(client, cid, OperationKind.ASSET, [callout_payload(c) for c in callouts], callouts)
    return _link_assets(client, cid, created, "CALLOUT", campaign_id)


def get_extension_performance(
    client: GoogleAdsClient,
    customer_id: str,
    extension_type: Optional[str] = None,
    date_range: str = DEFAULT_DATE_RANGE,
) -> list[dict]:
    query = GaqlQuery("campaign_asset", [
        "campaign.id",
        "campaign.name",
        "campaign_asset.asset",
        "campaign_asset.field_type",
        "campaign_asset.status",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where("campaign_asset.status != 'REMOVED'").where(date_predicate(date_range))
    if extension_type:
        field_type = str(extension_type).upper()
        if field_type not in EXTENSION_TYPES:
            raise ValidationError(f"Invalid extensionType: {extension_type}. Must be one of: {list(EXTENSION_TYPES)}")
        query.where(f"campaign_asset.field_type = '{field_type}'")
    query.order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        link = row.get("campaignAsset", {})
        records.append({
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            "assetId": id_from_resource_name(link.get("asset")),
            "extensionType": link.get("fieldType"),
            "status": link.get("status"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records
