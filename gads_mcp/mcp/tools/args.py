"""Argument-bag accessors shared by every tool handler."""

from typing import Any

from gads_mcp.errors import ArgumentsRequiredError


def require(args: dict[str, Any], key: str) -> Any:
    value = args.get(key)
    if value is None or value == "":
        raise ArgumentsRequiredError(f"Missing required argument: {key}")
    return value


def optional(args: dict[str, Any], key: str, default: Any = None) -> Any:
    value = args.get(key)
    return default if value is None or value == "" else value


def customer_id(args: dict[str, Any]) -> str:
    return str(require(args, "customerId"))
