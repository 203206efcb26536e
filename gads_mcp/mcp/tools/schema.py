"""
JSON-schema builders for tool definitions.

Every tool except ``list_accounts`` takes ``customerId`` and lists it as
required.
"""

from typing import Any, Optional

from gads_mcp.api.gaql import DATE_RANGES

CUSTOMER_ID = {"type": "string", "description": "Google Ads customer ID (10 digits, dashes allowed)"}


def tool(
    name: str,
    description: str,
    properties: Optional[dict[str, Any]] = None,
    required: Optional[list[str]] = None,
    customer: bool = True,
) -> dict[str, Any]:
    props = {"customerId": CUSTOMER_ID} if customer else {}
    props.update(properties or {})
    req = (["customerId"] if customer else []) + list(required or [])
    return {
        "name": name,
        "description": description,
        "inputSchema": {"type": "object", "properties": props, "required": req},
    }


def string(description: str, enum: Optional[list[str]] = None) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string", "description": description}
    if enum:
        prop["enum"] = list(enum)
    return prop


def integer(description: str) -> dict[str, Any]:
    return {"type": "integer", "description": description}


def number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def array(description: str, items: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return {"type": "array", "description": description, "items": items or {"type": "string"}}


def obj(properties: dict[str, Any], required: Optional[list[str]] = None, description: str = "") -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        prop["required"] = required
    if description:
        prop["description"] = description
    return prop


def date_range(default: str = "LAST_30_DAYS", choices: Optional[list[str]] = None) -> dict[str, Any]:
    return string(f"Date range (default {default})", enum=choices or DATE_RANGES)
