"""MCP server implementation for deepscan.

Exposes the scans and the live task log to MCP clients.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from deepscan.config import DeepScanConfig
from deepscan.core.logging import get_logger
from deepscan.mcp.tools import MCPToolExecutor

LOGGER = get_logger(__name__)

_RESULTS_PATH = {
    "type": "string",
    "description": "Optional directory receiving the result files",
}


def tool_definitions() -> List[Tool]:
    """Tools offered by the server."""
    return [
        Tool(
            name="scan_package",
            description=(
                "Scan a published npm package for license policy violations. "
                "Blocks until the scan finishes; poll get_tasks for progress."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "package_name": {"type": "string", "description": "npm package name"},
                    "package_version": {"type": "string", "description": "Package version"},
                    "ort_config_repo_url": {
                        "type": "string",
                        "description": "Git URL of the policy configuration repository",
                    },
                    "results_path": _RESULTS_PATH,
                },
                "required": ["package_name", "package_version"],
            },
        ),
        Tool(
            name="scan_project",
            description="Scan a local project directory for license policy violations.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_path": {"type": "string", "description": "Project directory"},
                    "project_config_path": {
                        "type": "string",
                        "description": "Directory holding the policy configuration",
                    },
                    "results_path": _RESULTS_PATH,
                },
                "required": ["project_path", "project_config_path"],
            },
        ),
        Tool(
            name="scan_git_project",
            description="Clone a git project and scan it for license policy violations.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_url": {"type": "string", "description": "Clone URL of the project"},
                    "project_config_url": {
                        "type": "string",
                        "description": "Clone URL of the policy configuration repository",
                    },
                    "project_branch": {"type": "string", "default": "main"},
                    "project_config_branch": {"type": "string", "default": "main"},
                    "project_config_folder": {
                        "type": "string",
                        "description": "Subfolder of the configuration repository",
                    },
                    "results_path": _RESULTS_PATH,
                    "enable_long_path": {
                        "type": "boolean",
                        "description": "On Windows, enable long path support when it is off",
                        "default": False,
                    },
                },
                "required": ["project_url", "project_config_url"],
            },
        ),
        Tool(
            name="get_tasks",
            description="Get the current task log of the running or last scan.",
            inputSchema={
                "type": "object",
                "properties": {
                    "detailed": {
                        "type": "boolean",
                        "description": "Include task ids and statuses in the text",
                        "default": False,
                    },
                },
            },
        ),
        Tool(
            name="get_violations",
            description="Get the policy violations found by the running or last scan.",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="clear_log",
            description="Clear tasks and violations of the last scan.",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


class DeepScanMCPServer:
    """MCP server exposing deepscan tools."""

    def __init__(self, config: DeepScanConfig, executor: MCPToolExecutor | None = None):
        """Initialize DeepScanMCPServer.

        Args:
            config: deepscan configuration.
            executor: Tool executor (default: one with a fresh stream logger).
        """
        self.config = config
        self.executor = executor or MCPToolExecutor(config)
        self.server = Server("deepscan")
        self._register_tools()

    async def dispatch(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Run one tool call and return its JSON-ready result."""
        executor = self.executor
        if name == "scan_package":
            return await executor.scan_package(
                package_name=arguments["package_name"],
                package_version=arguments["package_version"],
                ort_config_repo_url=arguments.get("ort_config_repo_url"),
                results_path=arguments.get("results_path"),
            )
        elif name == "scan_project":
            return await executor.scan_project(
                project_path=arguments["project_path"],
                project_config_path=arguments["project_config_path"],
                results_path=arguments.get("results_path"),
            )
        elif name == "scan_git_project":
            return await executor.scan_git_project(
                project_url=arguments["project_url"],
                project_config_url=arguments["project_config_url"],
                project_branch=arguments.get("project_branch"),
                project_config_branch=arguments.get("project_config_branch"),
                project_config_folder=arguments.get("project_config_folder"),
                results_path=arguments.get("results_path"),
                enable_long_path=arguments.get("enable_long_path", False),
            )
        elif name == "get_tasks":
            return await executor.get_tasks(detailed=arguments.get("detailed", False))
        elif name == "get_violations":
            return await executor.get_violations()
        elif name == "clear_log":
            return await executor.clear_log()
        return {"error": f"Unknown tool: {name}"}

    def _register_tools(self):
        """Register MCP tools."""

        @self.server.list_tools()
        async def list_tools() -> List[Tool]:
            return tool_definitions()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            try:
                result = await self.dispatch(name, arguments or {})
            except Exception as e:
                LOGGER.error(f"Tool {name} failed: {e}")
                result = {"error": str(e)}
            return [TextContent(
                type="text",
                text=json.dumps(result, indent=2, default=str),
            )]

    async def run(self):
        LOGGER.info("deepscan MCP server starting")

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
