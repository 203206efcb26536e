"""
Campaign reads and writes.

New campaigns are always created PAUSED. Budgets are created first and
the campaign references the budget's returned resource name; if the
budget step yields no resource name the campaign call is never made.
"""

from typing import Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import DEFAULT_DATE_RANGE, GaqlQuery, date_predicate, validate_date, validate_id
from gads_mcp.api.mutations import MutateOperation, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import UpstreamApiError, ValidationError
from gads_mcp.ops.common import PAUSED, create_budget, require_created, require_dependency
from gads_mcp.report.normalize import id_from_resource_name, micros_to_currency, to_num

CHANNEL_TYPES = ("SEARCH", "DISPLAY", "SHOPPING", "VIDEO")
CAMPAIGN_STATUSES = ("ENABLED", "PAUSED", "REMOVED")


# =============================================================================
# READS
# =============================================================================


def get_campaigns(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = (
        GaqlQuery("campaign", [
            "campaign.id",
            "campaign.name",
            "campaign.status",
            "campaign.advertising_channel_type",
            "campaign.bidding_strategy_type",
            "campaign_budget.amount_micros",
            "campaign.start_date",
            "campaign.end_date",
        ])
        .where("campaign.status != 'REMOVED'")
        .order_by("campaign.name")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        c = row.get("campaign", {})
        budget = row.get("campaignBudget", {})
        records.append({
            "id": c.get("id"),
            "name": c.get("name"),
            "status": c.get("status"),
            "advertisingChannelType": c.get("advertisingChannelType"),
            "biddingStrategyType": c.get("biddingStrategyType"),
            "budget": micros_to_currency(budget.get("amountMicros")),
            "startDate": c.get("startDate"),
            "endDate": c.get("endDate"),
        })
    return records


def get_campaign_performance(
    client: GoogleAdsClient,
    customer_id: str,
    campaign_id: Optional[str] = None,
    date_range: str = DEFAULT_DATE_RANGE,
) -> list[dict]:
    query = GaqlQuery("campaign", [
        "campaign.id",
        "campaign.name",
        "metrics.impressions",
        "metrics.clicks",
        "metrics.ctr",
        "metrics.average_cpc",
        "metrics.cost_micros",
        "metrics.conversions",
        "metrics.conversions_from_interactions_rate",
        "metrics.conversions_value",
    ]).where(date_predicate(date_range))
    if campaign_id:
        query.where(f"campaign.id = {validate_id(campaign_id, 'campaignId')}")
    query.order_by("metrics.impressions DESC")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        c = row.get("campaign", {})
        m = row.get("metrics", {})
        records.append({
            "campaignId": c.get("id"),
            "campaignName": c.get("name"),
            "metrics": {
                "impressions": int(to_num(m.get("impressions"))),
                "clicks": int(to_num(m.get("clicks"))),
                "ctr": to_num(m.get("ctr")),
                "averageCpc": micros_to_currency(m.get("averageCpc")),
                "costMicros": int(to_num(m.get("costMicros"))),
                "cost": micros_to_currency(m.get("costMicros")),
                "conversions": to_num(m.get("conversions")),
                "conversionRate": to_num(m.get("conversionsFromInteractionsRate")),
                "conversionValue": to_num(m.get("conversionsValue")),
            },
        })
    return records


# =============================================================================
# WRITES
# =============================================================================


def create_campaign(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    budget_amount_micros,
    advertising_channel_type: str = "SEARCH",
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> str:
    """Create budget then campaign (PAUSED). Returns the campaign id."""
    channel = (advertising_channel_type or "SEARCH").upper()
    if channel not in CHANNEL_TYPES:
        raise ValidationError(f"Invalid advertisingChannelType: {channel}. Must be one of: {list(CHANNEL_TYPES)}")

    campaign = {
        "name": name,
        "status": PAUSED,
        "advertisingChannelType": channel,
    }
    if channel in ("SEARCH", "DISPLAY"):
        campaign["manualCpc"] = {}
    if start_date:
        campaign["startDate"] = validate_date(start_date, "startDate")
    if end_date:
        campaign["endDate"] = validate_date(end_date, "endDate")

    cid = customer_id_digits(customer_id)
    budget_response = create_budget(client, cid, f"{name} Budget", budget_amount_micros)
    campaign["campaignBudget"] = require_dependency(budget_response, OperationKind.CAMPAIGN_BUDGET, "campaign budget")

    response = client.mutate(cid, [MutateOperation.create(OperationKind.CAMPAIGN, campaign)])
    return id_from_resource_name(require_created(response, OperationKind.CAMPAIGN, "campaign"))


def update_campaign_status(client: GoogleAdsClient, customer_id: str, campaign_id: str, status: str) -> None:
    status = str(status or "").upper()
    if status not in CAMPAIGN_STATUSES:
        raise ValidationError(f"Invalid status: {status}. Must be one of: {list(CAMPAIGN_STATUSES)}")

    cid = customer_id_digits(customer_id)
    operation = MutateOperation.update(OperationKind.CAMPAIGN, {
        "resourceName": OperationKind.CAMPAIGN.resource_name(cid, campaign_id),
        "status": status,
    })
    response = client.mutate(cid, [operation])
    entries = response.get("mutateOperationResponses") or []
    if not entries or OperationKind.CAMPAIGN.result_key not in entries[0]:
        raise UpstreamApiError("Failed to update campaign status")
