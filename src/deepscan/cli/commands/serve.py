"""Serve command implementation."""

from __future__ import annotations

import asyncio
from argparse import Namespace

from deepscan.cli.commands import Command
from deepscan.cli.exit_codes import EXIT_SUCCESS
from deepscan.config.models import DeepScanConfig
from deepscan.core.logging import get_logger

LOGGER = get_logger(__name__)


class ServeCommand(Command):
    """Runs the MCP server over stdio until the client disconnects."""

    def __init__(self, version: str):
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "serve"

    def execute(self, args: Namespace, config: DeepScanConfig | None = None) -> int:
        # Imported here so the CLI starts without loading the MCP SDK
        from deepscan.mcp.server import DeepScanMCPServer

        server = DeepScanMCPServer(config or DeepScanConfig())
        LOGGER.info(f"Serving deepscan {self._version} over stdio")
        try:
            asyncio.run(server.run())
        except KeyboardInterrupt:
            LOGGER.info("MCP server stopped")
        return EXIT_SUCCESS
