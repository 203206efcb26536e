"""
Creative assets: images, videos, asset groups and the text assets
(sitelinks, callouts, structured snippets) that back ad extensions.
"""

import base64
import binascii
from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate, validate_id
from gads_mcp.api.mutations import BatchResult, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import PAUSED, create_many, create_one, metrics_summary, require_items
from gads_mcp.report.normalize import id_from_resource_name

MAX_SITELINK_TEXT = 25
MAX_SITELINK_DESCRIPTION = 35
MAX_CALLOUT_TEXT = 25
MIN_SNIPPET_VALUES, MAX_SNIPPET_VALUES = 3, 10

# Structured snippet headers are sent as their display text.
SNIPPET_HEADERS = {
    "BRANDS": "Brands",
    "COURSES": "Courses",
    "DEGREE_PROGRAMS": "Degree programs",
    "DESTINATIONS": "Destinations",
    "FEATURED_HOTELS": "Featured hotels",
    "INSURANCE_COVERAGE": "Insurance coverage",
    "MODELS": "Models",
    "NEIGHBORHOODS": "Neighborhoods",
    "SERVICE_CATALOG": "Service catalog",
    "SHOWS": "Shows",
    "STYLES": "Styles",
    "TYPES": "Types",
}


def _text(value, name: str, max_length: int) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{name} must not be empty")
    if len(text) > max_length:
        raise ValidationError(f"{name} exceeds {max_length} characters: {text!r}")
    return text


# =============================================================================
# IMAGES AND VIDEOS
# =============================================================================


def get_image_assets(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = GaqlQuery("asset", [
        "asset.id",
        "asset.name",
        "asset.type",
        "asset.image_asset.full_size.url",
        "asset.image_asset.full_size.width_pixels",
        "asset.image_asset.full_size.height_pixels",
        "asset.image_asset.file_size",
    ]).where("asset.type = 'IMAGE'").order_by("asset.name")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        a = row.get("asset", {})
        image = a.get("imageAsset", {})
        full = image.get("fullSize", {})
        records.append({
            "id": a.get("id"),
            "name": a.get("name", ""),
            "type": a.get("type"),
            "url": full.get("url"),
            "width": full.get("widthPixels"),
            "height": full.get("heightPixels"),
            "fileSize": image.get("fileSize"),
        })
    return records


def upload_image_asset(client: GoogleAdsClient, customer_id: str, image_data: str, name: str) -> str:
    """Create an image asset from base64 data. Returns the asset resource name."""
    try:
        base64.b64decode(str(image_data or ""), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("imageData must be base64 encoded") from e
    if not image_data:
        raise ValidationError("imageData must not be empty")

    payload = {"name": name, "type": "IMAGE", "imageAsset": {"data": image_data}}
    return create_one(client, customer_id, OperationKind.ASSET, payload, "image asset")


def get_video_assets(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = GaqlQuery("asset", [
        "asset.id",
        "asset.name",
        "asset.youtube_video_asset.youtube_video_id",
        "asset.youtube_video_asset.youtube_video_title",
    ]).where("asset.type = 'YOUTUBE_VIDEO'").order_by("asset.name")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        a = row.get("asset", {})
        video = a.get("youtubeVideoAsset", {})
        records.append({
            "id": a.get("id"),
            "name": a.get("name", ""),
            "youtubeVideoId": video.get("youtubeVideoId"),
            "title": video.get("youtubeVideoTitle"),
        })
    return records


# =============================================================================
# ASSET GROUPS AND PERFORMANCE
# =============================================================================


def create_asset_group(client: GoogleAdsClient, customer_id: str, campaign_id: str, name: str, final_urls: list) -> str:
    """PAUSED asset group under a Performance Max campaign."""
    require_items(final_urls, "finalUrls", 1)
    cid = customer_id_digits(customer_id)
    payload = {
        "campaign": OperationKind.CAMPAIGN.resource_name(cid, campaign_id),
        "name": name,
        "finalUrls": final_urls,
        "status": PAUSED,
    }
    return create_one(client, cid, OperationKind.ASSET_GROUP, payload, "asset group")


def get_asset_performance(
    client: GoogleAdsClient,
    customer_id: str,
    asset_id: Optional[str] = None,
    date_range: str = DEFAULT_DATE_RANGE,
) -> list[dict]:
    query = GaqlQuery("ad_group_ad_asset_view", [
        "ad_group_ad_asset_view.asset",
        "ad_group_ad_asset_view.field_type",
        "ad_group_ad_asset_view.performance_label",
        "ad_group_ad_asset_view.ad_group_ad",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where(date_predicate(date_range))
    if asset_id:
        query.where(f"asset.id = {validate_id(asset_id, 'assetId')}")
    query.order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        view = row.get("adGroupAdAssetView", {})
        records.append({
            "assetId": id_from_resource_name(view.get("asset")),
            "fieldType": view.get("fieldType"),
            "performanceLabel": view.get("performanceLabel"),
            "adGroupAd": view.get("adGroupAd"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records


# =============================================================================
# TEXT ASSETS
# =============================================================================


def sitelink_payload(sitelink: dict) -> dict:
    if not isinstance(sitelink, dict):
        raise ValidationError("Each sitelink must be an object")
    final_urls = require_items(sitelink.get("finalUrls"), "sitelink finalUrls", 1)
    body = {"linkText": _text(sitelink.get("linkText"), "linkText", MAX_SITELINK_TEXT)}
    for key in ("description1", "description2"):
        if sitelink.get(key):
            body[key] = _text(sitelink[key], key, MAX_SITELINK_DESCRIPTION)
    return {"finalUrls": final_urls, "sitelinkAsset": body}


def callout_payload(callout: dict) -> dict:
    if not isinstance(callout, dict):
        raise ValidationError("Each callout must be an object")
    return {"calloutAsset": {"calloutText": _text(callout.get("calloutText"), "calloutText", MAX_CALLOUT_TEXT)}}


def create_sitelink_assets(client: GoogleAdsClient, customer_id: str, sitelinks: list) -> BatchResult:
    require_items(sitelinks, "sitelinks", 1)
    payloads = [sitelink_payload(s) for s in sitelinks]
    return create_many(client, customer_id_digits(customer_id), OperationKind.ASSET, payloads, sitelinks)


def create_callout_assets(client: GoogleAdsClient, customer_id: str, callouts: list) -> BatchResult:
    require_items(callouts, "callouts", 1)
    payloads = [callout_payload(c) for c in callouts]
    return create_many(client, customer_id_digits(customer_id), OperationKind.ASSET, payloads, callouts)


def create_structured_snippet_assets(client: GoogleAdsClient, customer_id: str, snippets: list) -> BatchResult:
    require_items(snippets, "snippets", 1)

    payloads = []
    for snippet in snippets:
        if not isinstance(snippet, dict):
            raise ValidationError("Each snippet must be an object")
        header = str(snippet.get("header") or "").upper()
        if header not in SNIPPET_HEADERS:
            raise ValidationError(f"Invalid header: {snippet.get('header')}. Must be one of: {list(SNIPPET_HEADERS)}")
        values = require_items(snippet.get("values"), "snippet values", MIN_SNIPPET_VALUES, MAX_SNIPPET_VALUES)
        payloads.append({
            "structuredSnippetAsset": {"header": SNIPPET_HEADERS[header], "values": [str(v) for v in values]}
        })

    return create_many(client, customer_id_digits(customer_id), OperationKind.ASSET, payloads, snippets)
