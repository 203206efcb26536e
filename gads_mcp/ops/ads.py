from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, quote
from gads_mcp.api.mutations import OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import PAUSED, create_one, require_items
from gads_mcp.report.normalize import id_from_resource_name

MIN_HEADLINES, MAX_HEADLINES = 3, 15
MIN_DESCRIPTIONS, MAX_DESCRIPTIONS = 2, 4
MAX_HEADLINE_LENGTH = 30
MAX_DESCRIPTION_LENGTH = 90


def get_ads(client: GoogleAdsClient, customer_id: str, ad_group_id: Optional[str] = None) -> list[dict]:
    cid = customer_id_digits(customer_id)
    query = GaqlQuery("ad_group_ad", [
        "ad_group_ad.ad.id",
        "ad_group_ad.ad_group",
        "ad_group_ad.ad.type",
        "ad_group_ad.ad.final_urls",
        "ad_group_ad.status",
        "ad_group_ad.ad.responsive_search_ad.headlines",
        "ad_group_ad.ad.responsive_search_ad.descriptions",
    ]).where("ad_group_ad.status != 'REMOVED'")
    if ad_group_id:
        query.where(f"ad_group_ad.ad_group = {quote(OperationKind.AD_GROUP.resource_name(cid, ad_group_id))}")

    records = []
    for row in client.search_stream(cid, query.build()):
        aga = row.get("adGroupAd", {})
        ad = aga.get("ad", {})
        rsa = ad.get("responsiveSearchAd", {})
        records.append({
            "id": ad.get("id"),
            "adGroupId": id_from_resource_name(aga.get("adGroup")),
            "type": ad.get("type"),
            "finalUrls": ad.get("finalUrls", []),
            "headlines": [h.get("text") for h in rsa.get("headlines", [])],
            "descriptions": [d.get("text") for d in rsa.get("descriptions", [])],
            "status": aga.get("status"),
        })
    return records


def _text_assets(values: list, name: str, max_length: int) -> list[dict]:
    assets = []
    for value in values:
        text = str(value or "").strip()
        if not text:
            raise ValidationError(f"{name} entries must not be empty")
        if len(text) > max_length:
            raise ValidationError(f"{name} entry exceeds {max_length} characters: {text!r}")
        assets.append({"text": text})
    return assets


def create_responsive_search_ad(
    client: GoogleAdsClient,
    customer_id: str,
    ad_group_id: str,
    headlines: list,
    descriptions: list,
    final_urls: list,
) -> str:
    """Create a PAUSED responsive search ad. Returns the ad id."""
    require_items(headlines, "headlines", MIN_HEADLINES, MAX_HEADLINES)
    require_items(descriptions, "descriptions", MIN_DESCRIPTIONS, MAX_DESCRIPTIONS)
    require_items(final_urls, "finalUrls", 1)

    cid = customer_id_digits(customer_id)
    payload = {
        "adGroup": OperationKind.AD_GROUP.resource_name(cid, ad_group_id),
        "status": PAUSED,
        "ad": {
            "finalUrls": final_urls,
            "responsiveSearchAd": {
                "headlines": _text_assets(headlines, "headlines", MAX_HEADLINE_LENGTH),
                "descriptions": _text_assets(descriptions, "descriptions", MAX_DESCRIPTION_LENGTH),
            },
        },
    }
    resource_name = create_one(client, cid, OperationKind.AD_GROUP_AD, payload, "responsive search ad")
    # adGroupAds/{adGroupId}~{adId}
    return id_from_resource_name(resource_name).split("~")[-1]
