# =============================================================================
# Google Ads MCP Tools
# =============================================================================
"""
Tool registry.

Each tool module exports ``HANDLERS`` (name -> ``fn(client, args) -> str``)
and ``SCHEMAS`` (tool definitions in registration order). This package
merges them into the two tables the server reads.
"""

from gads_mcp.mcp.tools import assets, conversions, core, management, reporting, targeting

_MODULES = (core, conversions, reporting, assets, targeting, management)

# Tool registry: maps tool names to handler functions
TOOL_REGISTRY = {}
for _module in _MODULES:
    TOOL_REGISTRY.update(_module.HANDLERS)

# Tool definitions for discovery
TOOL_DEFINITIONS = [schema for _module in _MODULES for schema in _module.SCHEMAS]

__all__ = ["TOOL_REGISTRY", "TOOL_DEFINITIONS"]
