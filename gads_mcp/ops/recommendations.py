"""
Recommendations and keyword planning.
"""

import re
from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, in_list, quote
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import UpstreamApiError, ValidationError
from gads_mcp.report.normalize import micros_to_currency, to_num

_TYPE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")
_RECOMMENDATION_ID_RE = re.compile(r"^[A-Za-z0-9_~\-]+$")

DEFAULT_LANGUAGE = "languageConstants/1000"
DEFAULT_GEO_TARGET = "geoTargetConstants/2840"


def _recommendation_resource(cid: str, recommendation_id: str) -> str:
    text = str(recommendation_id or "").strip()
    if not _RECOMMENDATION_ID_RE.match(text):
        raise ValidationError(f"Invalid recommendationId: {recommendation_id!r}")
    return f"customers/{cid}/recommendations/{text}"


def get_recommendations(client: GoogleAdsClient, customer_id: str, types: Optional[list] = None) -> list[dict]:
    query = GaqlQuery("recommendation", [
        "recommendation.resource_name",
        "recommendation.type",
        "recommendation.campaign",
        "recommendation.ad_group",
        "recommendation.impact.base_metrics.impressions",
        "recommendation.impact.base_metrics.clicks",
        "recommendation.impact.potential_metrics.impressions",
        "recommendation.impact.potential_metrics.clicks",
    ]).where("recommendation.dismissed = FALSE")
    if types:
        names = [str(t).upper() for t in types]
        for name in names:
            if not _TYPE_RE.match(name):
                raise ValidationError(f"Invalid recommendation type: {name!r}")
        query.where(in_list("recommendation.type", [quote(n) for n in names]))

    records = []
    for row in client.search_stream(customer_id, query.build()):
        r = row.get("recommendation", {})
        impact = r.get("impact", {})
        base = impact.get("baseMetrics", {})
        potential = impact.get("potentialMetrics", {})
        records.append({
            "resourceName": r.get("resourceName"),
            "type": r.get("type"),
            "campaign": r.get("campaign"),
            "adGroup": r.get("adGroup"),
            "impact": {
                "baseImpressions": to_num(base.get("impressions")),
                "baseClicks": to_num(base.get("clicks")),
                "potentialImpressions": to_num(potential.get("impressions")),
                "potentialClicks": to_num(potential.get("clicks")),
            },
        })
    return records


def _recommendation_call(client: GoogleAdsClient, customer_id: str, recommendation_id: str, verb: str) -> str:
    cid = customer_id_digits(customer_id)
    resource_name = _recommendation_resource(cid, recommendation_id)
    response = client.post(
        f"customers/{cid}/recommendations:{verb}",
        {"operations": [{"resourceName": resource_name}]},
    )
    results = response.get("results") or []
    if not results or not results[0].get("resourceName"):
        raise UpstreamApiError(f"Recommendation {verb} returned no resource name")
    return results[0]["resourceName"]


def apply_recommendation(client: GoogleAdsClient, customer_id: str, recommendation_id: str) -> str:
    return _recommendation_call(client, customer_id, recommendation_id, "apply")


def dismiss_recommendation(client: GoogleAdsClient, customer_id: str, recommendation_id: str) -> str:
    return _recommendation_call(client, customer_id, recommendation_id, "dismiss")


def get_keyword_ideas(client: GoogleAdsClient, customer_id: str, keyword_seed: list) -> list[dict]:
    """Keyword Planner ideas for English / United States."""
    if isinstance(keyword_seed, str):
        keyword_seed = [keyword_seed]
    if not keyword_seed:
        raise ValidationError("keywordSeed must contain at least one keyword")

    cid = customer_id_digits(customer_id)
    body = {
        "language": DEFAULT_LANGUAGE,
        "geoTargetConstants": [DEFAULT_GEO_TARGET],
        "keywordPlanNetwork": "GOOGLE_SEARCH",
        "keywordSeed": {"keywords": [str(k) for k in keyword_seed]},
    }
    response = client.post(f"customers/{cid}:generateKeywordIdeas", body)

    ideas = []
    for result in response.get("results") or []:
        metrics = result.get("keywordIdeaMetrics", {})
        ideas.append({
            "keyword": result.get("text"),
            "avgMonthlySearches": int(to_num(metrics.get("avgMonthlySearches"))),
            "competition": metrics.get("competition"),
            "competitionIndex": metrics.get("competitionIndex"),
            "lowTopOfPageBid": micros_to_currency(metrics.get("lowTopOfPageBidMicros")),
            "highTopOfPageBid": micros_to_currency(metrics.get("highTopOfPageBidMicros")),
        })
    return ideas
