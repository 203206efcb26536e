from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, quote
from gads_mcp.api.mutations import OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.ops.common import PAUSED, create_one, micros_int
from gads_mcp.report.normalize import id_from_resource_name, micros_to_currency

DEFAULT_CPC_BID_MICROS = 1_000_000


def get_ad_groups(client: GoogleAdsClient, customer_id: str, campaign_id: Optional[str] = None) -> list[dict]:
    cid = customer_id_digits(customer_id)
    query = GaqlQuery("ad_group", [
        "ad_group.id",
        "ad_group.name",
        "ad_group.campaign",
        "ad_group.status",
        "ad_group.cpc_bid_micros",
    ]).where("ad_group.status != 'REMOVED'")
    if campaign_id:
        query.where(f"ad_group.campaign = {quote(OperationKind.CAMPAIGN.resource_name(cid, campaign_id))}")
    query.order_by("ad_group.name")

    records = []
    for row in client.search_stream(cid, query.build()):
        g = row.get("adGroup", {})
        records.append({
            "id": g.get("id"),
            "name": g.get("name"),
            "campaignId": id_from_resource_name(g.get("campaign")),
            "status": g.get("status"),
            "cpcBidMicros": g.get("cpcBidMicros"),
            "cpcBid": micros_to_currency(g.get("cpcBidMicros")),
        })
    return records


def create_ad_group(
    client: GoogleAdsClient,
    customer_id: str,
    campaign_id: str,
    name: str,
    cpc_bid_micros=None,
) -> str:
    """Create a PAUSED standard search ad group. Returns the ad group id."""
    cid = customer_id_digits(customer_id)
    payload = {
        "name": name,
        "campaign": OperationKind.CAMPAIGN.resource_name(cid, campaign_id),
        "status": PAUSED,
        "type": "SEARCH_STANDARD",
        "cpcBidMicros": micros_int(cpc_bid_micros, "cpcBidMicros") if cpc_bid_micros else DEFAULT_CPC_BID_MICROS,
    }
    return id_from_resource_name(create_one(client, cid, OperationKind.AD_GROUP, payload, "ad group"))
