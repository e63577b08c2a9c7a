"""
Main entry point for Graph Memory MCP Server.

This module provides the main() function and server initialization.
"""

import asyncio

import structlog
from mcp.server.stdio import stdio_server

from .config import Settings, settings
from .index import ExternalIndex, LocalIndex
from .logging import configure_logging
from .operations import GraphOperations
from .storage import MemoryStore
from .tools import create_server
from .unified import UnifiedIndex
from .utils import IndexConstructionError

logger = structlog.get_logger(__name__)


async def build_unified_index(config: Settings) -> UnifiedIndex:
    """Build the local index and, when a vault is configured, the external one."""
    local = await LocalIndex.create(config.memory_path)
    if not config.vault_path:
        return UnifiedIndex(local)

    try:
        external = await ExternalIndex.create(config.vault_path)
    except IndexConstructionError:
        local.close()
        raise
    return UnifiedIndex(local, external)


async def run(config: Settings) -> None:
    """Build the indexes and serve MCP over stdio until the client disconnects."""
    index = await build_unified_index(config)
    logger.info(
        "server_starting",
        memory_path=str(config.memory_path),
        vault_path=str(config.vault_path) if config.vault_path else None,
    )

    operations = GraphOperations(MemoryStore(config.memory_path), index, config)
    server = create_server(operations)

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        index.close()
        logger.info("server_stopped")


def main():
    """Main entry point."""
    configure_logging(settings.log_level)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
