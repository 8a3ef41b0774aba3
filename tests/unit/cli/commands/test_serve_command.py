"""Tests for the serve command."""

from __future__ import annotations

from argparse import Namespace
from unittest.mock import patch

from deepscan.cli.commands.serve import ServeCommand
from deepscan.cli.exit_codes import EXIT_SUCCESS
from deepscan.config.models import DeepScanConfig


class TestServeCommand:
    """Tests for ServeCommand."""

    def test_runs_server(self) -> None:
        config = DeepScanConfig()
        with patch("deepscan.mcp.server.DeepScanMCPServer") as server_cls, \
             patch("deepscan.cli.commands.serve.asyncio.run") as run:
            assert ServeCommand(version="1").execute(Namespace(), config) == EXIT_SUCCESS

        server_cls.assert_called_once_with(config)
        run.assert_called_once()

    def test_keyboard_interrupt(self) -> None:
        with patch("deepscan.mcp.server.DeepScanMCPServer"), \
             patch("deepscan.cli.commands.serve.asyncio.run", side_effect=KeyboardInterrupt):
            assert ServeCommand(version="1").execute(Namespace()) == EXIT_SUCCESS
