"""Google Ads MCP server: GAQL reads and mutate writes exposed as MCP tools."""

__version__ = "1.0.0"
