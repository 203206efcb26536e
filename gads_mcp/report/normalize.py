"""
Response Normalizer - Google Ads

Turns nested API rows into the shapes callers see: flat dotted-key records,
tab-separated tables, CSV, and currency amounts instead of micros.

Known limitations kept on purpose:
    - table/CSV headers come from the first row only, so rows with a
      different key shape come out ragged
    - CSV values are wrapped in double quotes with no escaping of quotes
      inside the value
    - an empty table is the sentinel "No results found"; an empty CSV is ""
"""

import json
from typing import Any, Optional

MICROS_PER_UNIT = 1_000_000
NO_RESULTS = "No results found"

OUTPUT_FORMATS = ("json", "table", "csv")


# =============================================================================
# FLATTENING
# =============================================================================


def flatten(record: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested objects into dotted keys. Lists are left as leaves."""
    flattened = {}
    for key, value in record.items():
        new_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flattened.update(flatten(value, new_key))
        else:
            flattened[new_key] = value
    return flattened


def _cell(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(_cell(v) for v in value)
    return str(value)


def format_table(results: list[dict]) -> str:
    if not results:
        return NO_RESULTS

    headers = list(flatten(results[0]).keys())
    lines = ["\t".join(headers)]
    for row in results:
        lines.append("\t".join(_cell(v) for v in flatten(row).values()))
    return "\n".join(lines)


def format_csv(results: list[dict]) -> str:
    if not results:
        return ""

    headers = list(flatten(results[0]).keys())
    lines = [",".join(headers)]
    for row in results:
        lines.append(",".join(f'"{_cell(v)}"' for v in flatten(row).values()))
    return "\n".join(lines)


def format_results(results: list[dict], output_format: str = "json"):
    """Render query rows. JSON returns the rows themselves."""
    if output_format == "table":
        return format_table(results)
    if output_format == "csv":
        return format_csv(results)
    return results


def to_text(data: Any) -> str:
    """Text payload for a tool result."""
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, default=str)


# =============================================================================
# UNITS AND IDENTIFIERS
# =============================================================================


def micros_to_currency(micros: Any) -> float:
    """Convert an API micros amount (int or numeric string) to currency units."""
    return to_num(micros) / MICROS_PER_UNIT


def currency_to_micros(amount: Any) -> int:
    """Convert a currency amount to integer micros."""
    if amount in (None, ""):
        return 0
    return int(round(float(amount) * MICROS_PER_UNIT))


def id_from_resource_name(resource_name: Optional[str]) -> str:
    """Extract ID from resource name like 'customers/123/campaigns/456' -> '456'."""
    if not resource_name:
        return ""
    return resource_name.split("/")[-1]


def to_num(value: Any, default: float = 0) -> float:
    """API metrics arrive as strings for int64 fields."""
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
