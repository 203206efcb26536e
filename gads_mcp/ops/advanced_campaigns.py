"""
Performance Max, Demand Gen, App and Smart campaigns, plus experiments.

Every campaign here follows the same chain as ``create_campaign``: the
budget is created first and its resource name feeds the campaign. A
missing budget resource name stops the chain with DependencyCreationError.
All campaigns are created PAUSED.
"""

from datetime import date
from typing import Any, Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, validate_date
from gads_mcp.api.mutations import MutateOperation, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import PAUSED, create_budget, micros_int, require_created, require_dependency
from gads_mcp.report.normalize import id_from_resource_name, to_num

PMAX_BIDDING = ("MAXIMIZE_CONVERSIONS", "MAXIMIZE_CONVERSION_VALUE")
APP_STORES = ("GOOGLE_APP_STORE", "APPLE_APP_STORE")
SMART_LANGUAGE = "en"


def _budget_then_campaign(client: GoogleAdsClient, customer_id: str, campaign: dict, budget_amount_micros: Any) -> str:
    """Create the budget, then the campaign referencing it. Returns the campaign resource name."""
    cid = customer_id_digits(customer_id)
    budget_response = create_budget(client, cid, f"{campaign['name']} Budget", budget_amount_micros)
    campaign["campaignBudget"] = require_dependency(budget_response, OperationKind.CAMPAIGN_BUDGET, "campaign budget")
    response = client.mutate(cid, [MutateOperation.create(OperationKind.CAMPAIGN, campaign)])
    return require_created(response, OperationKind.CAMPAIGN, "campaign")


def create_performance_max_campaign(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    budget_amount_micros: Any,
    bidding_strategy_type: Optional[str] = None,
    target_cpa_micros: Optional[Any] = None,
    target_roas: Optional[Any] = None,
) -> str:
    bidding = (bidding_strategy_type or "MAXIMIZE_CONVERSIONS").upper()
    if bidding not in PMAX_BIDDING:
        raise ValidationError(f"Invalid biddingStrategyType: {bidding_strategy_type}. Must be one of: {list(PMAX_BIDDING)}")

    campaign: dict[str, Any] = {"name": name, "status": PAUSED, "advertisingChannelType": "PERFORMANCE_MAX"}
    if bidding == "MAXIMIZE_CONVERSIONS":
        campaign["maximizeConversions"] = (
            {"targetCpaMicros": micros_int(target_cpa_micros, "targetCpaMicros")} if target_cpa_micros else {}
        )
    else:
        campaign["maximizeConversionValue"] = {"targetRoas": to_num(target_roas)} if target_roas else {}
    return _budget_then_campaign(client, customer_id, campaign, budget_amount_micros)


def create_demand_gen_campaign(client: GoogleAdsClient, customer_id: str, name: str, budget_amount_micros: Any) -> str:
    campaign = {
        "name": name,
        "status": PAUSED,
        "advertisingChannelType": "DEMAND_GEN",
        "maximizeConversions": {},
    }
    return _budget_then_campaign(client, customer_id, campaign, budget_amount_micros)


def create_app_campaign(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    app_id: str,
    app_store: str,
    budget_amount_micros: Any,
    target_cpa_micros: Optional[Any] = None,
) -> str:
    store = str(app_store or "").upper()
    if store not in APP_STORES:
        raise ValidationError(f"Invalid appStore: {app_store}. Must be one of: {list(APP_STORES)}")
    if not app_id:
        raise ValidationError("appId is required")

    campaign: dict[str, Any] = {
        "name": name,
        "status": PAUSED,
        "advertisingChannelType": "MULTI_CHANNEL",
        "advertisingChannelSubType": "APP_CAMPAIGN",
        "appCampaignSetting": {
            "appId": app_id,
            "appStore": store,
            "biddingStrategyGoalType": "OPTIMIZE_INSTALLS_TARGET_INSTALL_COST",
        },
    }
    if target_cpa_micros:
        campaign["targetCpa"] = {"targetCpaMicros": micros_int(target_cpa_micros, "targetCpaMicros")}
    else:
        campaign["appCampaignSetting"]["biddingStrategyGoalType"] = "OPTIMIZE_INSTALLS_WITHOUT_TARGET_INSTALL_COST"
        campaign["maximizeConversions"] = {}
    return _budget_then_campaign(client, customer_id, campaign, budget_amount_micros)


def create_smart_campaign(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    budget_amount_micros: Any,
    business_name: str,
    final_url: str,
) -> str:
    """Budget, campaign, then the campaign's smart setting (business name and landing page)."""
    if not business_name or not final_url:
        raise ValidationError("businessName and finalUrl are required")

    campaign = {"name": name, "status": PAUSED, "advertisingChannelType": "SMART", "advertisingChannelSubType": "SMART_CAMPAIGN"}
    campaign_resource = _budget_then_campaign(client, customer_id, campaign, budget_amount_micros)

    cid = customer_id_digits(customer_id)
    setting = MutateOperation.update(OperationKind.SMART_CAMPAIGN_SETTING, {
        "resourceName": OperationKind.SMART_CAMPAIGN_SETTING.resource_name(cid, id_from_resource_name(campaign_resource)),
        "businessName": business_name,
        "finalUrl": final_url,
        "advertisingLanguageCode": SMART_LANGUAGE,
    })
    response = client.mutate(cid, [setting])
    require_created(response, OperationKind.SMART_CAMPAIGN_SETTING, "smart campaign setting")
    return campaign_resource


# =============================================================================
# EXPERIMENTS
# =============================================================================


def get_campaign_experiments(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    query = (
        GaqlQuery("experiment", [
            "experiment.experiment_id",
            "experiment.name",
            "experiment.type",
            "experiment.status",
            "experiment.start_date",
            "experiment.end_date",
        ])
        .where("experiment.status != 'REMOVED'")
        .order_by("experiment.name")
    )

    records = []
    for row in client.search_stream(customer_id, query.build()):
        e = row.get("experiment", {})
        records.append({
            "id": e.get("experimentId"),
            "name": e.get("name"),
            "type": e.get("type"),
            "status": e.get("status"),
            "startDate": e.get("startDate"),
            "endDate": e.get("endDate"),
        })
    return records


def create_campaign_experiment(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    base_campaign_id: str,
    traffic_split_percent: Any = 50,
    start_date: Optional[str] = None,
) -> str:
    """Experiment shell plus control and treatment arms over ``base_campaign_id``."""
    try:
        split = int(traffic_split_percent if traffic_split_percent is not None else 50)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"trafficSplitPercent must be an integer. Got: {traffic_split_percent!r}") from e
    if not 1 <= split <= 99:
        raise ValidationError(f"trafficSplitPercent must be between 1 and 99. Got: {split}")

    cid = customer_id_digits(customer_id)
    base_campaign = OperationKind.CAMPAIGN.resource_name(cid, base_campaign_id)
    experiment = {
        "name": name,
        "type": "SEARCH_CUSTOM",
        "status": "SETUP",
        "startDate": validate_date(start_date, "startDate") if start_date else date.today().isoformat(),
    }
    response = client.mutate(cid, [MutateOperation.create(OperationKind.EXPERIMENT, experiment)])
    experiment_resource = require_dependency(response, OperationKind.EXPERIMENT, "experiment")

    arms = [
        MutateOperation.create(OperationKind.EXPERIMENT_ARM, {
            "experiment": experiment_resource,
            "name": f"{name} control",
            "control": True,
            "trafficSplit": 100 - split,
            "campaigns": [base_campaign],
        }),
        MutateOperation.create(OperationKind.EXPERIMENT_ARM, {
            "experiment": experiment_resource,
            "name": f"{name} treatment",
            "control": False,
            "trafficSplit": split,
        }),
    ]
    arms_response = client.mutate(cid, arms)
    require_created(arms_response, OperationKind.EXPERIMENT_ARM, "experiment arms")
    return experiment_resource
