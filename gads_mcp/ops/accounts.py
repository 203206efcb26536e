"""
Account discovery and manager/client links.
"""

import logging

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.api.gaql import GaqlQuery, quote
from gads_mcp.auth.credentials import customer_id_digits
from gads_mcp.errors import GoogleAdsMcpError, UpstreamApiError, ValidationError
from gads_mcp.report.normalize import id_from_resource_name

logger = logging.getLogger(__name__)

LINK_ACTIONS = ("LINK", "UNLINK")


def get_customer_info(client: GoogleAdsClient, customer_id: str) -> dict:
    query = GaqlQuery("customer", [
        "customer.id",
        "customer.descriptive_name",
        "customer.currency_code",
        "customer.time_zone",
        "customer.manager",
    ]).limit(1)

    results = client.search_stream(customer_id, query.build())
    data = results[0].get("customer", {}) if results else {}
    return {
        "id": data.get("id"),
        "descriptiveName": data.get("descriptiveName", ""),
        "currencyCode": data.get("currencyCode", "USD"),
        "timeZone": data.get("timeZone", ""),
        "manager": data.get("manager", False),
    }


def list_accounts(client: GoogleAdsClient) -> list[dict]:
    """Every accessible customer, with a basic record where details are unreadable."""
    customers = []
    for resource_name in client.list_accessible_customers():
        customer_id = id_from_resource_name(resource_name)
        try:
            customers.append(get_customer_info(client, customer_id))
        except GoogleAdsMcpError as e:
            logger.warning(f"Cannot access details for customer {customer_id}: {e}")
            customers.append({
                "id": customer_id,
                "descriptiveName": f"Customer {customer_id}",
                "currencyCode": "USD",
                "timeZone": "",
                "manager": False,
            })
    return customers


def get_account_hierarchy(client: GoogleAdsClient, customer_id: str) -> list[dict]:
    """Direct children of a manager account (level 0 is the account itself)."""
    query = GaqlQuery("customer_client", [
        "customer_client.client_customer",
        "customer_client.id",
        "customer_client.descriptive_name",
        "customer_client.level",
        "customer_client.manager",
        "customer_client.currency_code",
        "customer_client.time_zone",
        "customer_client.status",
    ]).where("customer_client.level <= 1").order_by("customer_client.level", "customer_client.id")

    records = []
    for row in client.search_stream(customer_id, query.build()):
        c = row.get("customerClient", {})
        records.append({
            "id": c.get("id"),
            "descriptiveName": c.get("descriptiveName", ""),
            "level": int(c.get("level", 0)),
            "manager": c.get("manager", False),
            "currencyCode": c.get("currencyCode"),
            "timeZone": c.get("timeZone"),
            "status": c.get("status"),
        })
    return records


def manage_link_invitation(client: GoogleAdsClient, customer_id: str, target_customer_id: str, action: str) -> str:
    """Invite a client account (LINK) or end an existing link (UNLINK).

    ``customer_id`` is the manager. Returns the customer client link resource name.
    """
    action = str(action or "").upper()
    if action not in LINK_ACTIONS:
        raise ValidationError(f"Invalid action: {action}. Must be one of: {list(LINK_ACTIONS)}")

    manager_id = customer_id_digits(customer_id)
    client_resource = f"customers/{customer_id_digits(target_customer_id)}"
    path = f"customers/{manager_id}/customerClientLinks:mutate"

    if action == "LINK":
        body = {"operation": {"create": {"clientCustomer": client_resource, "status": "PENDING"}}}
    else:
        query = (
            GaqlQuery("customer_client_link", [
                "customer_client_link.resource_name",
                "customer_client_link.status",
            ])
            .where(f"customer_client_link.client_customer = {quote(client_resource)}")
            .where("customer_client_link.status IN ('ACTIVE', 'PENDING')")
        )
        rows = client.search_stream(manager_id, query.build())
        if not rows:
            raise ValidationError(f"No active link to customer {target_customer_id} found")
        link_resource = rows[0].get("customerClientLink", {}).get("resourceName")
        body = {
            "operation": {
                "update": {"resourceName": link_resource, "status": "INACTIVE"},
                "updateMask": "status",
            }
        }

    response = client.post(path, body)
    resource_name = (response.get("result") or {}).get("resourceName")
    if not resource_name:
        raise UpstreamApiError(f"Account link {action.lower()} returned no resource name")
    return resource_name
