"""Core WebSocket server class for the translation catalog.

This module contains the CatalogWebSocketServer class which exposes the
store operations over JSON text frames. It imports handlers from the
handlers module and wires them together.
"""

import json
import traceback
import uuid

import websockets
from pydantic import BaseModel, ValidationError

from ..catalog.exceptions import CatalogError, InvalidArgumentError
from ..core.config import ConfigLoader, get_config, setup_logging
from ..schemas.responses import ErrorMessage, ResultMessage, WireModel
from . import handlers
from .main import start_server as _start_server

logger = setup_logging(__name__)

UNKNOWN_OPERATION = "unknown_operation"
INVALID_REQUEST = "invalid_request"
INVALID_ARGUMENT = "invalid_argument"
INVALID_JSON = "invalid_json"
INTERNAL_ERROR = "internal_error"


def error_payload(code: str, message: str, request_id: str | None = None) -> dict:
    return ErrorMessage(code=code, message=message, request_id=request_id).model_dump()


def _describe_validation_error(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "request"
        details.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(details)


class CatalogWebSocketServer:
    """WebSocket front end for a TranslationStore.

    Every request is a JSON object whose ``type`` names the operation.
    Responses echo the optional ``request_id`` so clients can pipeline.
    """

    def __init__(self, store, config: ConfigLoader | None = None, watcher=None):
        self.config = config or get_config()
        self.store = store
        self.watcher = watcher
        self.host = self.config.websocket_bind_host
        self.port = self.config.websocket_port

        # Client tracking
        self.connected_clients = set()

        # Set up message handlers dictionary
        self.message_handlers = {
            "ping": self._wrap_handler(handlers.handle_ping),
            "list_unreviewed": self._wrap_handler(handlers.handle_list_unreviewed),
            "update": self._wrap_handler(handlers.handle_update),
            "mark_checked": self._wrap_handler(handlers.handle_mark_checked),
            "list_reviewed": self._wrap_handler(handlers.handle_list_reviewed),
            "list_incomplete": self._wrap_handler(handlers.handle_list_incomplete),
            "list_by_prefix": self._wrap_handler(handlers.handle_list_by_prefix),
            "add": self._wrap_handler(handlers.handle_add),
            "status_summary": self._wrap_handler(handlers.handle_status_summary),
            "delete_by_prefix": self._wrap_handler(handlers.handle_delete_by_prefix),
            "apply_typography": self._wrap_handler(handlers.handle_apply_typography),
            "reload": self._wrap_handler(handlers.handle_reload),
        }

        logger.debug(f"Initializing server on ws://{self.host}:{self.port}")

    def _wrap_handler(self, handler):
        """Wrap a handler to inject self as the first argument."""

        async def wrapped(data, client_id):
            return await handler(self, data, client_id)

        return wrapped

    async def handle_client(self, websocket, path=None):
        """Handle individual WebSocket client connections.

        Args:
            websocket: The WebSocket connection
            path: Optional path (for compatibility)

        """
        client_id = str(uuid.uuid4())[:8]
        remote = getattr(websocket, "remote_address", None)
        client_ip = remote[0] if remote else "unknown"

        try:
            self.connected_clients.add(websocket)
            logger.debug(f"Client {client_id} connected from {client_ip}")

            await websocket.send(
                json.dumps(
                    {
                        "type": "welcome",
                        "message": "Connected to Translation Manager",
                        "client_id": client_id,
                        "server_ready": self.store.is_ready,
                        "locales": list(self.store.locales),
                    }
                )
            )

            async for message in websocket:
                if isinstance(message, bytes):
                    await self.send_payload(
                        websocket, error_payload(INVALID_REQUEST, "Binary frames are not supported")
                    )
                    continue

                try:
                    data = json.loads(message)
                except json.JSONDecodeError:
                    await self.send_payload(websocket, error_payload(INVALID_JSON, "Invalid JSON format"))
                    continue

                response = await self.process_message(data, client_id)
                await self.send_payload(websocket, response)

        except websockets.exceptions.ConnectionClosed:
            logger.debug(f"Client {client_id} disconnected")
        except Exception as e:
            logger.exception(f"Error handling client {client_id}: {e}")
            logger.exception(traceback.format_exc())
        finally:
            self.connected_clients.discard(websocket)
            logger.debug(f"Client {client_id} removed")

    async def process_message(self, data, client_id: str = "local") -> dict:
        """Dispatch one request object and build the response envelope.

        Args:
            data: Parsed JSON message data
            client_id: Client identifier

        Returns:
            A result envelope or an error envelope

        """
        if not isinstance(data, dict):
            return error_payload(INVALID_REQUEST, "Request must be a JSON object")

        message_type = data.get("type")
        request_id = data.get("request_id", data.get("requestId"))
        if request_id is not None:
            request_id = str(request_id)

        handler = self.message_handlers.get(message_type)
        if handler is None:
            return error_payload(UNKNOWN_OPERATION, f"Unknown message type: {message_type}", request_id)

        try:
            result = await handler(data, client_id)
        except ValidationError as e:
            return error_payload(INVALID_REQUEST, _describe_validation_error(e), request_id)
        except InvalidArgumentError as e:
            return error_payload(INVALID_ARGUMENT, str(e), request_id)
        except CatalogError as e:
            logger.error(f"Client {client_id}: {message_type} failed: {e}")
            return error_payload(INTERNAL_ERROR, str(e), request_id)
        except Exception as e:
            logger.exception(f"Error processing {message_type} from {client_id}: {e}")
            return error_payload(INTERNAL_ERROR, f"Processing error: {e!s}", request_id)

        if isinstance(result, WireModel):
            result = result.to_wire()
        elif isinstance(result, BaseModel):
            result = result.model_dump()
        return ResultMessage(operation=message_type, request_id=request_id, result=result).model_dump()

    async def send_payload(self, websocket, payload: dict):
        """Send one JSON payload, tolerating clients that went away."""
        try:
            await websocket.send(json.dumps(payload, ensure_ascii=False))
        except websockets.exceptions.ConnectionClosed as e:
            logger.warning(f"WebSocket connection closed while sending response: {e}")

    async def send_error(self, websocket, code: str, message: str, request_id: str | None = None):
        """Send error message to client."""
        await self.send_payload(websocket, error_payload(code, message, request_id))

    async def start_server(self, host=None, port=None):
        """Start the WebSocket server.

        Args:
            host: Host to bind to (optional)
            port: Port to bind to (optional)

        """
        await _start_server(self, host, port)
