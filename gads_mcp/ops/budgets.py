"""
Shared budgets, portfolio bidding strategies, bid simulations and
device bid adjustments.
"""

from typing import Any, Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, in_list, quote, validate_id
from gads_mcp.api.mutations import BatchResult, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import create_budget, create_one, require_created, require_items, update_many
from gads_mcp.report.normalize import currency_to_micros, micros_to_currency, to_num

DELIVERY_METHODS = ("STANDARD", "ACCELERATED")
STRATEGY_TYPES = ("TARGET_CPA", "TARGET_ROAS", "MAXIMIZE_CONVERSIONS", "MAXIMIZE_CONVERSION_VALUE")
SIMULATION_RESOURCES = ("campaign", "ad_group")

# Device criterion ids are fixed across every account.
DEVICE_CRITERIA = {"DESKTOP": "30000", "MOBILE": "30001", "TABLET": "30002"}

BUDGET_RECOMMENDATION_TYPES = ("CAMPAIGN_BUDGET", "FORECASTING_CAMPAIGN_BUDGET", "MARGINAL_ROI_CAMPAIGN_BUDGET")


# =============================================================================
# BUDGETS
# =============================================================================


def get_shared_budgets(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = (
        GaqlQuery("campaign_budget", [
            "campaign_budget.id",
            "campaign_budget.name",
            "campaign_budget.amount_micros",
            "campaign_budget.delivery_method",
            "campaign_budget.reference_count",
            "campaign_budget.status",
        ])
        .where("campaign_budget.explicitly_shared = TRUE")
        .where("campaign_budget.status != 'REMOVED'")
        .order_by("campaign_budget.name")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        b = row.get("campaignBudget", {})
        records.append({
            "id": b.get("id"),
            "name": b.get("name"),
            "amountMicros": b.get("amountMicros"),
            "amount": micros_to_currency(b.get("amountMicros")),
            "deliveryMethod": b.get("deliveryMethod"),
            "referenceCount": int(to_num(b.get("referenceCount"))),
            "status": b.get("status"),
        })
    return records


def create_shared_budget(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    amount_micros: Any,
    delivery_method: Optional[str] = None,
) -> str:
    method = (delivery_method or "STANDARD").upper()
    if method not in DELIVERY_METHODS:
        raise ValidationError(f"Invalid deliveryMethod: {delivery_method}. Must be one of: {list(DELIVERY_METHODS)}")
    cid = customer_id_digits(customer_id)
    response = create_budget(client, cid, name, amount_micros, method, explicitly_shared=True)
    return require_created(response, OperationKind.CAMPAIGN_BUDGET, "shared budget")


def get_budget_recommendations(client: GoogleAdsClient, customer_id: str, campaign_id: Optional[str] = None) -> list[dict]:
    cid = customer_id_digits(customer_id)
    query = (
        GaqlQuery("recommendation", [
            "recommendation.resource_name",
            "recommendation.type",
            "recommendation.campaign",
            "recommendation.campaign_budget_recommendation.current_budget_amount_micros",
            "recommendation.campaign_budget_recommendation.recommended_budget_amount_micros",
        ])
        .where(in_list("recommendation.type", [quote(t) for t in BUDGET_RECOMMENDATION_TYPES]))
        .where("recommendation.dismissed = FALSE")
    )
    if campaign_id:
        query.where(f"recommendation.campaign = {quote(OperationKind.CAMPAIGN.resource_name(cid, campaign_id))}")

    records = []
    for row in client.search_stream(cid, query.build()):
        r = row.get("recommendation", {})
        budget = r.get("campaignBudgetRecommendation", {})
        records.append({
            "resourceName": r.get("resourceName"),
            "type": r.get("type"),
            "campaign": r.get("campaign"),
            "currentBudget": micros_to_currency(budget.get("currentBudgetAmountMicros")),
            "recommendedBudget": micros_to_currency(budget.get("recommendedBudgetAmountMicros")),
        })
    return records


# =============================================================================
# BIDDING
# =============================================================================


def get_bidding_strategies(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = (
        GaqlQuery("bidding_strategy", [
            "bidding_strategy.id",
            "bidding_strategy.name",
            "bidding_strategy.type",
            "bidding_strategy.status",
            "bidding_strategy.campaign_count",
            "bidding_strategy.target_cpa.target_cpa_micros",
            "bidding_strategy.target_roas.target_roas",
        ])
        .where("bidding_strategy.status != 'REMOVED'")
        .order_by("bidding_strategy.name")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        s = row.get("biddingStrategy", {})
        target_cpa = s.get("targetCpa", {}).get("targetCpaMicros")
        records.append({
            "id": s.get("id"),
            "name": s.get("name"),
            "type": s.get("type"),
            "status": s.get("status"),
            "campaignCount": int(to_num(s.get("campaignCount"))),
            "targetCpa": micros_to_currency(target_cpa) if target_cpa is not None else None,
            "targetRoas": s.get("targetRoas", {}).get("targetRoas"),
        })
    return records


def create_bidding_strategy(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    strategy_type: str,
    target_cpa: Optional[Any] = None,
    target_roas: Optional[Any] = None,
) -> str:
    """Portfolio strategy. ``target_cpa`` is a currency amount; ``target_roas`` a ratio."""
    kind = str(strategy_type or "").upper()
    if kind not in STRATEGY_TYPES:
        raise ValidationError(f"Invalid type: {strategy_type}. Must be one of: {list(STRATEGY_TYPES)}")
    if kind == "TARGET_CPA" and not target_cpa:
        raise ValidationError("targetCpa is required for TARGET_CPA")
    if kind == "TARGET_ROAS" and not target_roas:
        raise ValidationError("targetRoas is required for TARGET_ROAS")

    payload: dict[str, Any] = {"name": name}
    if kind == "TARGET_CPA":
        payload["targetCpa"] = {"targetCpaMicros": currency_to_micros(target_cpa)}
    elif kind == "TARGET_ROAS":
        payload["targetRoas"] = {"targetRoas": to_num(target_roas)}
    elif kind == "MAXIMIZE_CONVERSIONS":
        payload["maximizeConversions"] = (
            {"targetCpaMicros": currency_to_micros(target_cpa)} if target_cpa else {}
        )
    else:
        payload["maximizeConversionValue"] = {"targetRoas": to_num(target_roas)} if target_roas else {}

    return create_one(client, customer_id, OperationKind.BIDDING_STRATEGY, payload, "bidding strategy")


def get_bid_simulations(client: GoogleAdsClient, customer_id: str, resource_id: str, resource_type: str = "campaign") -> list[dict]:
    """CPC bid landscape for one campaign or ad group."""
    level = str(resource_type or "campaign").lower()
    if level not in SIMULATION_RESOURCES:
        raise ValidationError(f"Invalid resourceType: {resource_type}. Must be one of: {list(SIMULATION_RESOURCES)}")
    rid = validate_id(resource_id, "resourceId")
    view = f"{level}_simulation"

    query = GaqlQuery(view, [
        f"{view}.{level}_id",
        f"{view}.type",
        f"{view}.modification_method",
        f"{view}.start_date",
        f"{view}.end_date",
        f"{view}.cpc_bid_point_list.points",
    ]).where(f"{view}.{level}_id = {rid}")

    row_key = "campaignSimulation" if level == "campaign" else "adGroupSimulation"
    records = []
    for row in client.search_stream(customer_id, query.build()):
        sim = row.get(row_key, {})
        points = []
        for point in sim.get("cpcBidPointList", {}).get("points", []):
            points.append({
                "cpcBid": micros_to_currency(point.get("cpcBidMicros")),
                "clicks": to_num(point.get("clicks")),
                "impressions": to_num(point.get("impressions")),
                "cost": micros_to_currency(point.get("costMicros")),
                "conversions": to_num(point.get("biddableConversions")),
            })
        records.append({
            "resourceId": rid,
            "type": sim.get("type"),
            "modificationMethod": sim.get("modificationMethod"),
            "startDate": sim.get("startDate"),
            "endDate": sim.get("endDate"),
            "points": points,
        })
    return records


def update_bid_adjustments(client: GoogleAdsClient, customer_id: str, adjustments: list) -> BatchResult:
    """Campaign device bid modifiers; ``resourceId`` is the campaign id."""
    require_items(adjustments, "adjustments", 1)
    cid = customer_id_digits(customer_id)

    payloads = []
    for adj in adjustments:
        if not isinstance(adj, dict):
            raise ValidationError("Each adjustment must be an object")
        device = str(adj.get("device") or "").upper()
        if device not in DEVICE_CRITERIA:
            raise ValidationError(f"Invalid device: {adj.get('device')}. Must be one of: {list(DEVICE_CRITERIA)}")
        if adj.get("bidModifier") is None:
            raise ValidationError("Each adjustment needs a 'bidModifier'")
        payloads.append({
            "resourceName": OperationKind.CAMPAIGN_CRITERION.resource_name(
                cid, adj.get("resourceId"), DEVICE_CRITERIA[device]
            ),
            "bidModifier": to_num(adj["bidModifier"]),
        })

    return update_many(client, cid, OperationKind.CAMPAIGN_CRITERION, payloads, adjustments)
