"""Main entry point and server startup for the catalog WebSocket server.

This module provides:
- start_server: Async method to start the WebSocket server
- main: Main entry point function
"""

import asyncio
import sys
import traceback
from typing import TYPE_CHECKING, Optional

import websockets

from ..core.config import setup_logging

if TYPE_CHECKING:
    from .core import CatalogWebSocketServer

logger = setup_logging(__name__)


async def start_server(
    server: "CatalogWebSocketServer",
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:
    """Start the WebSocket server.

    Loads the store if needed and starts the change watcher (when the
    server has one) before accepting connections.

    Args:
        server: The CatalogWebSocketServer instance
        host: Host to bind to (optional, uses server default)
        port: Port to bind to (optional, uses server default)
    """
    server_host = host or server.host
    server_port = port or server.port

    if not server.store.is_ready:
        report = await server.store.load()
        for filename, error in report.errors.items():
            logger.warning(f"Skipped {filename}: {error}")

    logger.info(f"Translation files directory: {server.store.file_set.messages_dir}")
    logger.info(f"Available locales: {', '.join(server.store.locales)}")

    if server.watcher is not None:
        await server.watcher.start()

    server_kwargs = {
        "ping_interval": 30,
        "ping_timeout": 10,
        "max_size": server.config.max_message_bytes,
    }

    try:
        async with websockets.serve(server.handle_client, server_host, server_port, **server_kwargs):
            logger.info(f"Starting WebSocket server on ws://{server_host}:{server_port}")
            logger.info("Translation Manager is ready for connections!")

            # Keep server running
            await asyncio.Future()
    finally:
        if server.watcher is not None:
            await server.watcher.stop()


def main(messages_dir: Optional[str] = None) -> None:
    """Main function to start the server."""
    from ..catalog import ChangeWatcher, TranslationStore
    from ..core.config import get_config
    from .core import CatalogWebSocketServer

    config = get_config()
    store = TranslationStore.from_config(config, messages_dir=messages_dir)
    watcher = ChangeWatcher.from_config(store, config) if config.watcher_enabled else None
    server = CatalogWebSocketServer(store, config, watcher=watcher)

    try:
        asyncio.run(server.start_server())
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        logger.exception(traceback.format_exc())
        sys.exit(1)
