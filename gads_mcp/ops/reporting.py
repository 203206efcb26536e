"""
Read-only reports: search terms, demographics, geography, auction
position, change history, clicks, video and keyword forecasts.
"""

from datetime import date, timedelta
from typing import Any, Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import (
    CHANGE_EVENT_RANGES,
    DEFAULT_DATE_RANGE,
    GaqlQuery,
    date_predicate,
    in_list,
    validate_date,
    validate_ids,
)
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import metrics_summary, micros_int, require_items
from gads_mcp.report.normalize import micros_to_currency, to_num

DEFAULT_SEARCH_TERM_LIMIT = 100
CHANGE_HISTORY_LIMIT = 1000
CLICK_VIEW_LIMIT = 1000
FORECAST_DAYS = 30
DEFAULT_MAX_CPC_MICROS = 1_000_000


def _campaign_filter(query: GaqlQuery, campaign_ids: Optional[list]) -> GaqlQuery:
    if campaign_ids:
        query.where(in_list("campaign.id", validate_ids(campaign_ids, "campaignIds")))
    return query


def get_search_term_report(
    client: GoogleAdsClient,
    customer_id: str,
    date_range: str = DEFAULT_DATE_RANGE,
    min_impressions: Optional[Any] = None,
    campaign_ids: Optional[list] = None,
    limit: Optional[Any] = None,
) -> list[dict]:
    query = GaqlQuery("search_term_view", [
        "search_term_view.search_term",
        "search_term_view.status",
        "campaign.id",
        "campaign.name",
        "ad_group.id",
        "ad_group.name",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where(date_predicate(date_range))
    if min_impressions is not None:
        query.where(f"metrics.impressions >= {int(to_num(min_impressions))}")
    _campaign_filter(query, campaign_ids)
    query.order_by("metrics.impressions DESC").limit(limit or DEFAULT_SEARCH_TERM_LIMIT)

    records = []
    for row in client.search_stream(customer_id, query.build()):
        view = row.get("searchTermView", {})
        records.append({
            "searchTerm": view.get("searchTerm"),
            "status": view.get("status"),
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            "adGroupId": row.get("adGroup", {}).get("id"),
            "adGroupName": row.get("adGroup", {}).get("name"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records


def get_demographic_report(
    client: GoogleAdsClient,
    customer_id: str,
    date_range: str = DEFAULT_DATE_RANGE,
    campaign_ids: Optional[list] = None,
) -> dict:
    """Age and gender breakdowns, one query per view."""
    metric_fields = [
        "campaign.id",
        "campaign.name",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]
    report = {}
    for key, view, field, criterion_key in (
        ("ageRanges", "age_range_view", "ad_group_criterion.age_range.type", "ageRange"),
        ("genders", "gender_view", "ad_group_criterion.gender.type", "gender"),
    ):
        query = GaqlQuery(view, [field] + metric_fields).where(date_predicate(date_range))
        _campaign_filter(query, campaign_ids).order_by("metrics.impressions DESC")
        rows = []
        for row in client.search_stream(customer_id, query.build()):
            criterion = row.get("adGroupCriterion", {})
            rows.append({
                "segment": criterion.get(criterion_key, {}).get("type"),
                "campaignId": row.get("campaign", {}).get("id"),
                "campaignName": row.get("campaign", {}).get("name"),
                **metrics_summary(row.get("metrics", {})),
            })
        report[key] = rows
    return report


def get_geographic_report(
    client: GoogleAdsClient,
    customer_id: str,
    date_range: str = DEFAULT_DATE_RANGE,
    campaign_ids: Optional[list] = None,
) -> list[dict]:
    query = GaqlQuery("geographic_view", [
        "geographic_view.country_criterion_id",
        "geographic_view.location_type",
        "campaign.id",
        "campaign.name",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.cost_micros",
        "metrics.conversions",
    ]).where(date_predicate(date_range))
    _campaign_filter(query, campaign_ids).order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        geo = row.get("geographicView", {})
        records.append({
            "countryCriterionId": geo.get("countryCriterionId"),
            "locationType": geo.get("locationType"),
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            **metrics_summary(row.get("metrics", {})),
        })
    return records


def get_auction_insights(
    client: GoogleAdsClient,
    customer_id: str,
    campaign_id: Optional[str] = None,
    date_range: str = DEFAULT_DATE_RANGE,
) -> list[dict]:
    """Impression-share position of each campaign in the auction."""
    query = (
        GaqlQuery("campaign", [
            "campaign.id",
            "campaign.name",
            "metrics.search_impression_share",
            "metrics.search_top_impression_share",
            "metrics.search_absolute_top_impression_share",
            "metrics.search_rank_lost_impression_share",
            "metrics.search_budget_lost_impression_share",
        ])
        .where("campaign.status != 'REMOVED'")
        .where("campaign.advertising_channel_type = 'SEARCH'")
        .where(date_predicate(date_range))
    )
    if campaign_id:
        _campaign_filter(query, [campaign_id])
    query.order_by("metrics.search_impression_share DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        m = row.get("metrics", {})
        records.append({
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            "impressionShare": to_num(m.get("searchImpressionShare")),
            "topImpressionShare": to_num(m.get("searchTopImpressionShare")),
            "absoluteTopImpressionShare": to_num(m.get("searchAbsoluteTopImpressionShare")),
            "lostToRank": to_num(m.get("searchRankLostImpressionShare")),
            "lostToBudget": to_num(m.get("searchBudgetLostImpressionShare")),
        })
    return records


def get_change_history(client: GoogleAdsClient, customer_id: str, date_range: str = "LAST_7_DAYS") -> list[dict]:
    if str(date_range or "").upper() not in CHANGE_EVENT_RANGES:
        raise ValidationError(f"Invalid date range for change history: {date_range}. Must be one of: {CHANGE_EVENT_RANGES}")
    query = GaqlQuery("change_event", [
        "change_event.change_date_time",
        "change_event.change_resource_type",
        "change_event.change_resource_name",
        "change_event.resource_change_operation",
        "change_event.changed_fields",
        "change_event.user_email",
        "change_event.client_type",
    ]).where(date_predicate(date_range, field="change_event.change_date_time"))
    query.order_by("change_event.change_date_time DESC").limit(CHANGE_HISTORY_LIMIT)

    records = []
    for row in client.search_stream(customer_id, query.build()):
        e = row.get("changeEvent", {})
        records.append({
            "changedAt": e.get("changeDateTime"),
            "resourceType": e.get("changeResourceType"),
            "resourceName": e.get("changeResourceName"),
            "operation": e.get("resourceChangeOperation"),
            "changedFields": e.get("changedFields"),
            "userEmail": e.get("userEmail"),
            "clientType": e.get("clientType"),
        })
    return records


def get_click_view_report(client: GoogleAdsClient, customer_id: str, day: Optional[str] = None) -> list[dict]:
    """Click-level rows for a single day (click_view only accepts one date)."""
    day = validate_date(day, "date") if day else (date.today() - timedelta(days=1)).isoformat()
    query = GaqlQuery("click_view", [
        "click_view.gclid",
        "click_view.ad_group_ad",
        "click_view.keyword_info.text",
        "click_view.keyword_info.match_type",
        "click_view.area_of_interest.city",
        "click_view.location_of_presence.city",
        "click_view.page_number",
        "campaign.id",
        "ad_group.id",
        "segments.device",
        "segments.date",
    ]).where(f"segments.date = '{day}'").limit(CLICK_VIEW_LIMIT)

    records = []
    for row in client.search_stream(customer_id, query.build()):
        click = row.get("clickView", {})
        records.append({
            "gclid": click.get("gclid"),
            "date": row.get("segments", {}).get("date"),
            "device": row.get("segments", {}).get("device"),
            "campaignId": row.get("campaign", {}).get("id"),
            "adGroupId": row.get("adGroup", {}).get("id"),
            "adGroupAd": click.get("adGroupAd"),
            "keyword": click.get("keywordInfo", {}).get("text"),
            "matchType": click.get("keywordInfo", {}).get("matchType"),
            "areaOfInterestCity": click.get("areaOfInterest", {}).get("city"),
            "locationOfPresenceCity": click.get("locationOfPresence", {}).get("city"),
            "pageNumber": click.get("pageNumber"),
        })
    return records


def get_video_report(client: GoogleAdsClient, customer_id: str, date_range: str = DEFAULT_DATE_RANGE) -> list[dict]:
    query = GaqlQuery("video", [
        "video.id",
        "video.title",
        "video.duration_millis",
        "campaign.id",
        "campaign.name",
        "metrics.impressions",
        "metrics.video_views",
        "metrics.video_view_rate",
        "metrics.average_cpv",
        "metrics.cost_micros",
        "metrics.video_quartile_p100_rate",
    ]).where(date_predicate(date_range)).order_by("metrics.video_views DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        v = row.get("video", {})
        m = row.get("metrics", {})
        records.append({
            "videoId": v.get("id"),
            "title": v.get("title"),
            "durationMillis": v.get("durationMillis"),
            "campaignId": row.get("campaign", {}).get("id"),
            "campaignName": row.get("campaign", {}).get("name"),
            "impressions": int(to_num(m.get("impressions"))),
            "videoViews": int(to_num(m.get("videoViews"))),
            "viewRate": to_num(m.get("videoViewRate")),
            "averageCpv": micros_to_currency(m.get("averageCpv")),
            "cost": micros_to_currency(m.get("costMicros")),
            "completionRate": to_num(m.get("videoQuartileP100Rate")),
        })
    return records


def generate_forecast_metrics(
    client: GoogleAdsClient,
    customer_id: str,
    keyword_texts: list,
    max_cpc_bid_micros: Optional[Any] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> dict:
    """Traffic forecast for a hypothetical search campaign over the given keywords."""
    require_items(keyword_texts, "keywordTexts", 1)
    cid = customer_id_digits(customer_id)
    max_cpc = micros_int(max_cpc_bid_micros, "maxCpcBidMicros") if max_cpc_bid_micros else DEFAULT_MAX_CPC_MICROS

    tomorrow = date.today() + timedelta(days=1)
    start = validate_date(start_date, "startDate") if start_date else tomorrow.isoformat()
    end = validate_date(end_date, "endDate") if end_date else (tomorrow + timedelta(days=FORECAST_DAYS)).isoformat()
    if end < start:
        raise ValidationError("endDate must not be before startDate")

    body = {
        "forecastPeriod": {"startDate": start, "endDate": end},
        "campaign": {
            "keywordPlanNetwork": "GOOGLE_SEARCH",
            "biddingStrategy": {"manualCpcBiddingStrategy": {"maxCpcBidMicros": max_cpc}},
            "adGroups": [{
                "biddableKeywords": [
                    {"keyword": {"text": text, "matchType": "BROAD"}, "maxCpcBidMicros": max_cpc}
                    for text in keyword_texts
                ]
            }],
        },
    }
    response = client.post(f"customers/{cid}:generateKeywordForecastMetrics", body)
    forecast = response.get("campaignForecastMetrics", {})
    return {
        "forecastPeriod": {"startDate": start, "endDate": end},
        "impressions": to_num(forecast.get("impressions")),
        "clicks": to_num(forecast.get("clicks")),
        "ctr": to_num(forecast.get("clickThroughRate")),
        "averageCpc": micros_to_currency(forecast.get("averageCpcMicros")),
        "cost": micros_to_currency(forecast.get("costMicros")),
        "conversions": to_num(forecast.get("conversions")),
    }
