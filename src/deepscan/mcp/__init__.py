"""MCP server surface for deepscan."""

from deepscan.mcp.server import DeepScanMCPServer
from deepscan.mcp.tools import MCPToolExecutor

__all__ = ["DeepScanMCPServer", "MCPToolExecutor"]
