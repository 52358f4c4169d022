"""Entry point for ``python -m calcchat.mcp``."""

from __future__ import annotations

import asyncio

from calcchat.config.loader import load_config
from calcchat.logging_setup import configure_logging
from calcchat.mcp.server import run_server

if __name__ == "__main__":
    configure_logging(load_config().logging)
    asyncio.run(run_server())
