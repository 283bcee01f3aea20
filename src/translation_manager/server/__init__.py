"""WebSocket server package for the translation catalog.

Public API:
    - CatalogWebSocketServer: Main WebSocket server class
    - main: Main entry point function
"""

from .core import CatalogWebSocketServer
from .main import main, start_server

__all__ = ["CatalogWebSocketServer", "main", "start_server"]
