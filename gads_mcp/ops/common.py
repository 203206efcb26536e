"""Shared helpers for the operation builders."""

from typing import Any, Optional

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.mutations import BatchResult, MutateOperation, OperationKind, first_resource_name
from gads_mcp.errors import DependencyCreationError, UpstreamApiError, ValidationError
from gads_mcp.report.normalize import micros_to_currency, to_num

PAUSED = "PAUSED"


def require_dependency(response: dict, kind: OperationKind, what: str) -> str:
    """Resource name of a prerequisite step; aborts the chain when missing."""
    resource_name = first_resource_name(response, kind)
    if not resource_name:
        raise DependencyCreationError(f"Failed to create {what}")
    return resource_name


def require_created(response: dict, kind: OperationKind, what: str) -> str:
    resource_name = first_resource_name(response, kind)
    if not resource_name:
        raise UpstreamApiError(f"Failed to create {what}: no resource name returned")
    return resource_name


def create_one(client: GoogleAdsClient, customer_id: str, kind: OperationKind, payload: dict, what: str) -> str:
    response = client.mutate(customer_id, [MutateOperation.create(kind, payload)])
    return require_created(response, kind, what)


def create_many(
    client: GoogleAdsClient,
    customer_id: str,
    kind: OperationKind,
    payloads: list[dict],
    inputs: Optional[list[Any]] = None,
) -> BatchResult:
    """Submit N creates in one partial-failure mutate and pair the results."""
    operations = [MutateOperation.create(kind, p) for p in payloads]
    response = client.mutate(customer_id, operations, partial_failure=True)
    return BatchResult.from_response(inputs if inputs is not None else payloads, response, kind)


def update_many(
    client: GoogleAdsClient,
    customer_id: str,
    kind: OperationKind,
    payloads: list[dict],
    inputs: Optional[list[Any]] = None,
) -> BatchResult:
    operations = [MutateOperation.update(kind, p) for p in payloads]
    response = client.mutate(customer_id, operations, partial_failure=True)
    return BatchResult.from_response(inputs if inputs is not None else payloads, response, kind)


def create_budget(
    client: GoogleAdsClient,
    customer_id: str,
    name: str,
    amount_micros: Any,
    delivery_method: str = "STANDARD",
    explicitly_shared: bool = False,
) -> dict:
    """Submit a campaign budget create and return the raw mutate response."""
    payload = {
        "name": name,
        "amountMicros": micros_int(amount_micros, "budgetAmountMicros"),
        "deliveryMethod": delivery_method,
        "explicitlyShared": explicitly_shared,
    }
    return client.mutate(customer_id, [MutateOperation.create(OperationKind.CAMPAIGN_BUDGET, payload)])


def micros_int(value: Any, name: str) -> int:
    """Caller-supplied amount that is already in micros; passed through as an int."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{name} must be an integer amount in micros. Got: {value!r}")
    try:
        micros = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"{name} must be an integer amount in micros. Got: {value!r}") from e
    if micros <= 0:
        raise ValidationError(f"{name} must be positive. Got: {micros}")
    return micros


def require_items(values: Any, name: str, min_items: int = 1, max_items: Optional[int] = None) -> list:
    if not isinstance(values, list):
        raise ValidationError(f"{name} must be a list")
    if len(values) < min_items or (max_items is not None and len(values) > max_items):
        bounds = f"between {min_items} and {max_items}" if max_items is not None else f"at least {min_items}"
        raise ValidationError(f"{name} must contain {bounds} items. Got: {len(values)}")
    return values


def metrics_summary(metrics: dict) -> dict:
    """Common metric block with cost in currency units."""
    return {
        "impressions": int(to_num(metrics.get("impressions"))),
        "clicks": int(to_num(metrics.get("clicks"))),
        "ctr": to_num(metrics.get("ctr")),
        "cost": micros_to_currency(metrics.get("costMicros")),
        "conversions": to_num(metrics.get("conversions")),
    }
