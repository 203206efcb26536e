"""
Typed mutate operations for ``googleAds:mutate``.

Each entry of ``mutateOperations`` is a one-key object such as
``{"campaignOperation": {"create": {...}}}``. The set of supported keys is
closed and lives in ``OperationKind``; builders never assemble those keys
from strings.

Bulk writes return a ``BatchResult`` that pairs every input with either the
resource name the API returned for it or the reason it failed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from gads_mcp.api.gaql import validate_id
from gads_mcp.errors import ValidationError
from gads_mcp.report.normalize import id_from_resource_name, to_text

NO_RESOURCE_NAME = "No resource name returned"


# =============================================================================
# OPERATION KINDS
# =============================================================================


class OperationKind(Enum):
    """resource type, mutate operation key, response result key, URL collection."""

    CAMPAIGN_BUDGET = ("campaign_budget", "campaignBudgetOperation", "campaignBudgetResult", "campaignBudgets")
    CAMPAIGN = ("campaign", "campaignOperation", "campaignResult", "campaigns")
    AD_GROUP = ("ad_group", "adGroupOperation", "adGroupResult", "adGroups")
    AD_GROUP_AD = ("ad_group_ad", "adGroupAdOperation", "adGroupAdResult", "adGroupAds")
    AD_GROUP_CRITERION = ("ad_group_criterion", "adGroupCriterionOperation", "adGroupCriterionResult", "adGroupCriteria")
    CAMPAIGN_CRITERION = ("campaign_criterion", "campaignCriterionOperation", "campaignCriterionResult", "campaignCriteria")
    CONVERSION_ACTION = ("conversion_action", "conversionActionOperation", "conversionActionResult", "conversionActions")
    USER_LIST = ("user_list", "userListOperation", "userListResult", "userLists")
    ASSET = ("asset", "assetOperation", "assetResult", "assets")
    ASSET_GROUP = ("asset_group", "assetGroupOperation", "assetGroupResult", "assetGroups")
    CAMPAIGN_ASSET = ("campaign_asset", "campaignAssetOperation", "campaignAssetResult", "campaignAssets")
    CUSTOMER_ASSET = ("customer_asset", "customerAssetOperation", "customerAssetResult", "customerAssets")
    BIDDING_STRATEGY = ("bidding_strategy", "biddingStrategyOperation", "biddingStrategyResult", "biddingStrategies")
    LABEL = ("label", "labelOperation", "labelResult", "labels")
    CAMPAIGN_LABEL = ("campaign_label", "campaignLabelOperation", "campaignLabelResult", "campaignLabels")
    AD_GROUP_LABEL = ("ad_group_label", "adGroupLabelOperation", "adGroupLabelResult", "adGroupLabels")
    AD_GROUP_AD_LABEL = ("ad_group_ad_label", "adGroupAdLabelOperation", "adGroupAdLabelResult", "adGroupAdLabels")
    SMART_CAMPAIGN_SETTING = (
        "smart_campaign_setting", "smartCampaignSettingOperation", "smartCampaignSettingResult", "smartCampaignSettings"
    )
    EXPERIMENT = ("experiment", "experimentOperation", "experimentResult", "experiments")
    EXPERIMENT_ARM = ("experiment_arm", "experimentArmOperation", "experimentArmResult", "experimentArms")

    def __init__(self, resource_type: str, operation_key: str, result_key: str, collection: str):
        self.resource_type = resource_type
        self.operation_key = operation_key
        self.result_key = result_key
        self.collection = collection

    @classmethod
    def from_resource_type(cls, resource_type: str) -> "OperationKind":
        """Look up a kind by its snake_case resource type (``ad_group``)."""
        normalized = str(resource_type or "").strip().lower()
        for kind in cls:
            if kind.resource_type == normalized:
                return kind
        supported = sorted(k.resource_type for k in cls)
        raise ValidationError(f"Unsupported resource type: {resource_type}. Must be one of: {supported}")

    def resource_name(self, customer_id: str, *ids: Any) -> str:
        """``customers/{cid}/{collection}/{id}`` with composite ids joined by '~'."""
        parts = [validate_id(i, f"{self.resource_type} id") for i in ids]
        return f"customers/{customer_id}/{self.collection}/{'~'.join(parts)}"


# =============================================================================
# OPERATIONS
# =============================================================================


def _mask_paths(payload: dict[str, Any], prefix: str = "") -> list[str]:
    paths = []
    for key, value in payload.items():
        path = f"{prefix}.{key}" if prefix else key
        # An empty message (e.g. maximizeConversions: {}) is itself the field being set.
        if isinstance(value, dict) and value:
            paths.extend(_mask_paths(value, path))
        else:
            paths.append(path)
    return paths


def update_mask_for(payload: dict[str, Any]) -> str:
    """Comma-separated field paths of every leaf in an update payload."""
    return ",".join(p for p in _mask_paths(payload) if p != "resourceName")


@dataclass
class MutateOperation:
    kind: OperationKind
    action: str
    payload: Any
    update_mask: Optional[str] = None

    @classmethod
    def create(cls, kind: OperationKind, payload: dict[str, Any]) -> "MutateOperation":
        return cls(kind, "create", payload)

    @classmethod
    def update(cls, kind: OperationKind, payload: dict[str, Any], update_mask: Optional[str] = None) -> "MutateOperation":
        if not payload.get("resourceName"):
            raise ValidationError(f"{kind.resource_type} update requires a resourceName")
        mask = update_mask or update_mask_for(payload)
        if not mask:
            raise ValidationError(f"{kind.resource_type} update has no fields to change")
        return cls(kind, "update", payload, mask)

    @classmethod
    def remove(cls, kind: OperationKind, resource_name: str) -> "MutateOperation":
        return cls(kind, "remove", resource_name)

    def to_dict(self) -> dict[str, Any]:
        body = {self.action: self.payload}
        if self.action == "update":
            body["updateMask"] = self.update_mask
        return {self.kind.operation_key: body}


# =============================================================================
# RESPONSES
# =============================================================================


def result_resource_name(entry: Any, kind: Optional[OperationKind] = None) -> Optional[str]:
    """Resource name inside one response entry, if any."""
    if not isinstance(entry, dict):
        return None
    if kind is not None:
        result = entry.get(kind.result_key)
        return result.get("resourceName") if isinstance(result, dict) else None
    if entry.get("resourceName"):
        return entry["resourceName"]
    for value in entry.values():
        if isinstance(value, dict) and value.get("resourceName"):
            return value["resourceName"]
    return None


def first_resource_name(response: dict, kind: OperationKind) -> Optional[str]:
    entries = response.get("mutateOperationResponses") or []
    return result_resource_name(entries[0], kind) if entries else None


def partial_failure_reasons(response: dict) -> dict[int, str]:
    """Map operation index -> error message from a ``partialFailureError``."""
    reasons: dict[int, str] = {}
    failure = response.get("partialFailureError") or {}
    for detail in failure.get("details") or []:
        for error in detail.get("errors") or []:
            elements = (error.get("location") or {}).get("fieldPathElements") or []
            index = next((e["index"] for e in elements if "index" in e), None)
            if index is None:
                continue
            reasons.setdefault(int(index), error.get("message") or failure.get("message") or "Unknown error")
    return reasons


@dataclass
class BatchItem:
    index: int
    input: Any
    resource_name: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return bool(self.resource_name)

    @property
    def id(self) -> str:
        return id_from_resource_name(self.resource_name)

    def to_dict(self) -> dict[str, Any]:
        if self.succeeded:
            return {"index": self.index, "input": self.input, "resourceName": self.resource_name, "id": self.id}
        return {"index": self.index, "input": self.input, "error": self.error}


@dataclass
class BatchResult:
    items: list[BatchItem] = field(default_factory=list)

    @classmethod
    def from_response(
        cls,
        inputs: list[Any],
        response: dict,
        kind: Optional[OperationKind] = None,
        results_key: str = "mutateOperationResponses",
        name_of: Optional[Callable[[dict], Optional[str]]] = None,
    ) -> "BatchResult":
        """Pair each input with its response entry by position."""
        entries = response.get(results_key) or []
        reasons = partial_failure_reasons(response)
        items = []
        for index, item_input in enumerate(inputs):
            entry = entries[index] if index < len(entries) else None
            if name_of is not None:
                name = name_of(entry) if isinstance(entry, dict) and entry else None
            else:
                name = result_resource_name(entry, kind)
            error = None if name else reasons.get(index, NO_RESOURCE_NAME)
            items.append(BatchItem(index, item_input, name, error))
        return cls(items)

    @property
    def succeeded(self) -> list[BatchItem]:
        return [i for i in self.items if i.succeeded]

    @property
    def failed(self) -> list[BatchItem]:
        return [i for i in self.items if not i.succeeded]

    @property
    def resource_names(self) -> list[str]:
        return [i.resource_name for i in self.succeeded]

    @property
    def ids(self) -> list[str]:
        return [i.id for i in self.succeeded]

    def summary(self, noun: str, verb: str = "Created") -> str:
        """One-line outcome followed by per-item failures, if any."""
        lines = [f"{verb} {len(self.succeeded)} {noun} successfully"]
        if self.failed:
            lines.append(f"{len(self.failed)} of {len(self.items)} failed:")
            lines.extend(f"  - item {i.index}: {i.error}" for i in self.failed)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "items": [i.to_dict() for i in self.items],
        }

    def report(self, noun: str, verb: str = "Created") -> str:
        """Tool text: the summary line, then every item with its resource name or error."""
        return f"{self.summary(noun, verb)}\n\n{to_text(self.to_dict())}"
