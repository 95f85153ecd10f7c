"""
Presentation Layer - External interfaces

Contains:
- mcp_server: FastMCP server exposing the engine as tools
"""
