"""
Static MCP resources and prompt templates.
"""

from typing import Optional

from mcp import types
from mcp.shared.exceptions import McpError

GAQL_REFERENCE_URI = "gaql://reference"

GAQL_REFERENCE = """# Google Ads Query Language (GAQL) Reference

## Basic Syntax
```sql
SELECT
  field1,
  field2
FROM resource
WHERE condition
ORDER BY field
LIMIT n
```

## Common Resources
- campaign
- ad_group
- ad_group_ad
- ad_group_criterion
- customer
- asset
- campaign_budget

## Common Fields
- campaign.name
- campaign.status
- metrics.impressions
- metrics.clicks
- metrics.cost_micros
- metrics.conversions

## Date Ranges
Use `segments.date DURING LAST_30_DAYS` (also TODAY, YESTERDAY, LAST_7_DAYS,
LAST_14_DAYS, THIS_MONTH, LAST_MONTH, ...) or an explicit
`segments.date BETWEEN '2024-01-01' AND '2024-01-31'`.

Money fields ending in `_micros` are in millionths of the account currency.

## Example Queries

### Get Campaign Performance
```sql
SELECT
  campaign.name,
  metrics.impressions,
  metrics.clicks,
  metrics.cost_micros
FROM campaign
WHERE segments.date DURING LAST_30_DAYS
```

### Get Keywords
```sql
SELECT
  ad_group_criterion.keyword.text,
  ad_group_criterion.keyword.match_type,
  metrics.impressions
FROM ad_group_criterion
WHERE ad_group_criterion.type = 'KEYWORD'
```
"""

RESOURCES = [
    types.Resource(
        uri=GAQL_REFERENCE_URI,
        name="GAQL Reference",
        description="Google Ads Query Language reference and examples",
        mimeType="text/markdown",
    ),
]

PROMPTS = [
    types.Prompt(
        name="analyze_campaign",
        description="Analyze campaign performance and provide recommendations",
        arguments=[types.PromptArgument(name="customerId", description="Google Ads customer ID", required=True)],
    ),
    types.Prompt(
        name="gaql_help",
        description="Get help with writing GAQL queries",
        arguments=[types.PromptArgument(name="objective", description="What you want to query", required=True)],
    ),
]


def read_resource(uri: str) -> str:
    if str(uri).rstrip("/") == GAQL_REFERENCE_URI:
        return GAQL_REFERENCE
    raise McpError(types.ErrorData(code=types.INVALID_REQUEST, message=f"Resource not found: {uri}"))


def _user_message(text: str) -> types.PromptMessage:
    return types.PromptMessage(role="user", content=types.TextContent(type="text", text=text))


def get_prompt(name: str, arguments: Optional[dict[str, str]] = None) -> types.GetPromptResult:
    args = arguments or {}
    if name == "analyze_campaign":
        return types.GetPromptResult(
            description="Analyze campaign performance",
            messages=[_user_message(
                f"Analyze the Google Ads campaigns for customer {args.get('customerId')} "
                "and provide recommendations for improvement."
            )],
        )
    if name == "gaql_help":
        return types.GetPromptResult(
            description="Help with GAQL queries",
            messages=[_user_message(f"Help me write a GAQL query to: {args.get('objective')}")],
        )
    raise McpError(types.ErrorData(code=types.INVALID_REQUEST, message=f"Unknown prompt: {name}"))
