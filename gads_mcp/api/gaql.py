"""
GAQL query composition.

Queries are assembled from a fixed SELECT list plus optional predicates.
Every predicate after the first is joined with ``AND`` so optional filters
can be appended without caring what came before. Any identifier or date
that ends up inside a query is validated first.

Usage:
    query = (
        GaqlQuery("campaign", ["campaign.id", "campaign.name"])
        .where("campaign.status != 'REMOVED'")
        .where(date_predicate("LAST_7_DAYS"))
        .order_by("campaign.name")
        .build()
    )
"""

import re
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from gads_mcp.errors import ValidationError

# =============================================================================
# DATE RANGES
# =============================================================================

DURING_RANGES = frozenset({
    "TODAY",
    "YESTERDAY",
    "LAST_7_DAYS",
    "LAST_14_DAYS",
    "LAST_30_DAYS",
    "LAST_BUSINESS_WEEK",
    "THIS_MONTH",
    "LAST_MONTH",
    "THIS_WEEK_SUN_TODAY",
    "THIS_WEEK_MON_TODAY",
    "LAST_WEEK_SUN_SAT",
    "LAST_WEEK_MON_SUN",
})
# GAQL has no DURING literal for 90 days; it becomes an explicit BETWEEN.
COMPUTED_RANGES = {"LAST_90_DAYS": 90}
ALL_TIME = "ALL_TIME"
DATE_RANGES = sorted(DURING_RANGES | set(COMPUTED_RANGES) | {ALL_TIME})
DEFAULT_DATE_RANGE = "LAST_30_DAYS"
# change_event rows are only kept for 30 days and must be date-bounded.
CHANGE_EVENT_RANGES = sorted(DURING_RANGES - {"LAST_MONTH"})

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ID_RE = re.compile(r"^\d+$")


def date_predicate(
    date_range: Optional[str],
    field: str = "segments.date",
    today: Optional[date] = None,
) -> Optional[str]:
    """Predicate scoping ``field`` to a named range, or None for ALL_TIME."""
    value = (date_range or DEFAULT_DATE_RANGE).upper()
    if value == ALL_TIME:
        return None
    if value in COMPUTED_RANGES:
        today = today or date.today()
        start = today - timedelta(days=COMPUTED_RANGES[value])
        end = today - timedelta(days=1)
        return f"{field} BETWEEN '{start.isoformat()}' AND '{end.isoformat()}'"
    if value in DURING_RANGES:
        return f"{field} DURING {value}"
    raise ValidationError(f"Invalid date range: {date_range}. Must be one of: {DATE_RANGES}")


def validate_date(value: Any, name: str = "date") -> str:
    text = str(value or "")
    if not _DATE_RE.match(text):
        raise ValidationError(f"{name} must be YYYY-MM-DD. Got: {value!r}")
    try:
        date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"{name} is not a valid date: {value!r}") from e
    return text


# =============================================================================
# IDENTIFIERS AND LITERALS
# =============================================================================


def validate_id(value: Any, name: str = "id") -> str:
    """Numeric resource id as a string; anything else is rejected."""
    text = str(value).strip() if value is not None else ""
    if not _ID_RE.match(text):
        raise ValidationError(f"{name} must be numeric. Got: {value!r}")
    return text


def validate_ids(values: Any, name: str = "ids") -> list[str]:
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{name} must be a list")
    return [validate_id(v, name) for v in values]


def quote(value: Any) -> str:
    """Single-quoted GAQL string literal."""
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def in_list(field: str, values: Iterable[str]) -> str:
    return f"{field} IN ({', '.join(values)})"


# =============================================================================
# QUERY BUILDER
# =============================================================================


class GaqlQuery:
    """Composable SELECT statement."""

    def __init__(self, resource: str, fields: Iterable[str]):
        self.resource = resource
        self.fields = list(fields)
        self.conditions: list[str] = []
        self.ordering: list[str] = []
        self.row_limit: Optional[int] = None

    def where(self, condition: Optional[str]) -> "GaqlQuery":
        """Append a predicate; None is ignored so optional filters chain cleanly."""
        if condition:
            self.conditions.append(condition)
        return self

    def order_by(self, *clauses: str) -> "GaqlQuery":
        self.ordering.extend(clauses)
        return self

    def limit(self, n: Optional[Any]) -> "GaqlQuery":
        if n is None:
            return self
        try:
            value = int(n)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"limit must be an integer. Got: {n!r}") from e
        if value <= 0:
            raise ValidationError(f"limit must be positive. Got: {value}")
        self.row_limit = value
        return self

    def build(self) -> str:
        lines = ["SELECT"]
        lines.append(",\n".join(f"    {f}" for f in self.fields))
        lines.append(f"FROM {self.resource}")
        if self.conditions:
            lines.append(f"WHERE {self.conditions[0]}")
            lines.extend(f"    AND {c}" for c in self.conditions[1:])
        if self.ordering:
            lines.append(f"ORDER BY {', '.join(self.ordering)}")
        if self.row_limit is not None:
            lines.append(f"LIMIT {self.row_limit}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.build()
