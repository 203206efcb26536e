"""
Labels and bulk edits.

``bulk_edit_operations`` accepts groups of the form::

    {"operationType": "CREATE" | "UPDATE" | "REMOVE",
     "resourceType": "campaign" | "ad_group" | ...,
     "operations": [...]}

CREATE items are API-shaped payloads, UPDATE items carry a
``resourceName`` plus the fields to change, REMOVE items are resource
names (or objects holding one). Every item from every group goes out in
one partial-failure mutate.
"""

import re
from typing import Any

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, quote
from gads_mcp.api.mutations import BatchResult, MutateOperation, OperationKind
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import ValidationError
from gads_mcp.ops.common import PAUSED, create_many, require_items

OPERATION_TYPES = ("CREATE", "UPDATE", "REMOVE")
LABEL_TARGETS = {
    "campaign": (OperationKind.CAMPAIGN_LABEL, OperationKind.CAMPAIGN, "campaign"),
    "ad_group": (OperationKind.AD_GROUP_LABEL, OperationKind.AD_GROUP, "adGroup"),
    "ad": (OperationKind.AD_GROUP_AD_LABEL, OperationKind.AD_GROUP_AD, "adGroupAd"),
}
PAUSED_ON_CREATE = (
    OperationKind.CAMPAIGN,
    OperationKind.AD_GROUP,
    OperationKind.AD_GROUP_AD,
    OperationKind.ASSET_GROUP,
)

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


# =============================================================================
# LABELS
# =============================================================================


def create_labels(client: GoogleAdsClient, customer_id: str, labels: list) -> BatchResult:
    require_items(labels, "labels", 1)

    payloads = []
    for label in labels:
        if not isinstance(label, dict) or not label.get("name"):
            raise ValidationError("Each label needs a 'name'")
        text_label = {}
        if label.get("backgroundColor"):
            if not _COLOR_RE.match(str(label["backgroundColor"])):
                raise ValidationError(f"backgroundColor must be a hex color like #FF0000. Got: {label['backgroundColor']!r}")
            text_label["backgroundColor"] = label["backgroundColor"]
        if label.get("description"):
            text_label["description"] = label["description"]
        payload = {"name": label["name"]}
        if text_label:
            payload["textLabel"] = text_label
        payloads.append(payload)

    return create_many(client, customer_id_digits(customer_id), OperationKind.LABEL, payloads, labels)


def apply_labels(
    client: GoogleAdsClient,
    customer_id: str,
    resource_type: str,
    resource_ids: list,
    label_ids: list,
) -> BatchResult:
    """Attach every label to every resource. Ad ids are ``adGroupId~adId``."""
    target = str(resource_type or "").lower()
    if target not in LABEL_TARGETS:
        raise ValidationError(f"Invalid resourceType: {resource_type}. Must be one of: {list(LABEL_TARGETS)}")
    require_items(resource_ids, "resourceIds", 1)
    require_items(label_ids, "labelIds", 1)

    cid = customer_id_digits(customer_id)
    link_kind, owner_kind, owner_field = LABEL_TARGETS[target]
    payloads, inputs = [], []
    for resource_id in resource_ids:
        ids = str(resource_id).split("~") if target == "ad" else [resource_id]
        if target == "ad" and len(ids) != 2:
            raise ValidationError(f"Ad ids must look like adGroupId~adId. Got: {resource_id!r}")
        owner = owner_kind.resource_name(cid, *ids)
        for label_id in label_ids:
            payloads.append({owner_field: owner, "label": OperationKind.LABEL.resource_name(cid, label_id)})
            inputs.append({"resourceId": resource_id, "labelId": label_id})

    return create_many(client, cid, link_kind, payloads, inputs)


def get_labeled_resources(client: GoogleAdsClient, customer_id: str, label_id: str) -> dict:
    cid = customer_id_digits(customer_id)
    label = quote(OperationKind.LABEL.resource_name(cid, label_id))

    campaigns = GaqlQuery("campaign_label", ["campaign.id", "campaign.name", "campaign.status"])
    ad_groups = GaqlQuery("ad_group_label", ["ad_group.id", "ad_group.name", "ad_group.status"])
    ads = GaqlQuery("ad_group_ad_label", ["ad_group.id", "ad_group_ad.ad.id", "ad_group_ad.status"])

    return {
        "campaigns": [
            {
                "id": row.get("campaign", {}).get("id"),
                "name": row.get("campaign", {}).get("name"),
                "status": row.get("campaign", {}).get("status"),
            }
            for row in client.search_stream(cid, campaigns.where(f"campaign_label.label = {label}").build())
        ],
        "adGroups": [
            {
                "id": row.get("adGroup", {}).get("id"),
                "name": row.get("adGroup", {}).get("name"),
                "status": row.get("adGroup", {}).get("status"),
            }
            for row in client.search_stream(cid, ad_groups.where(f"ad_group_label.label = {label}").build())
        ],
        "ads": [
            {
                "adGroupId": row.get("adGroup", {}).get("id"),
                "id": row.get("adGroupAd", {}).get("ad", {}).get("id"),
                "status": row.get("adGroupAd", {}).get("status"),
            }
            for row in client.search_stream(cid, ads.where(f"ad_group_ad_label.label = {label}").build())
        ],
    }


# =============================================================================
# BULK EDITS
# =============================================================================


def _bulk_operation(action: str, kind: OperationKind, item: Any) -> MutateOperation:
    if action == "REMOVE":
        resource_name = item.get("resourceName") if isinstance(item, dict) else item
        if not isinstance(resource_name, str) or not resource_name:
            raise ValidationError("REMOVE items must be resource names")
        return MutateOperation.remove(kind, resource_name)

    if not isinstance(item, dict):
        raise ValidationError(f"{action} items must be objects")
    payload = dict(item)
    if action == "UPDATE":
        return MutateOperation.update(kind, payload)
    if kind in PAUSED_ON_CREATE and "status" not in payload:
        payload["status"] = PAUSED
    return MutateOperation.create(kind, payload)


def bulk_edit_operations(client: GoogleAdsClient, customer_id: str, operations: list) -> BatchResult:
    require_items(operations, "operations", 1)

    mutate_ops, inputs = [], []
    for group in operations:
        if not isinstance(group, dict):
            raise ValidationError("Each operation group must be an object")
        action = str(group.get("operationType") or "").upper()
        if action not in OPERATION_TYPES:
            raise ValidationError(f"Invalid operationType: {group.get('operationType')}. Must be one of: {list(OPERATION_TYPES)}")
        kind = OperationKind.from_resource_type(group.get("resourceType"))
        for item in require_items(group.get("operations"), "operations", 1):
            mutate_ops.append(_bulk_operation(action, kind, item))
            inputs.append({"operationType": action, "resourceType": kind.resource_type, "operation": item})

    cid = customer_id_digits(customer_id)
    response = client.mutate(cid, mutate_ops, partial_failure=True)
    return BatchResult.from_response(inputs, response)
