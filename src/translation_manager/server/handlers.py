"""Operation handlers for the catalog WebSocket protocol.

Each handler validates its request with the matching pydantic model, calls
one store operation and returns the result payload. Envelopes and error
mapping live in :mod:`.core`.
"""

import time
from typing import TYPE_CHECKING, Any

from ..core.config import setup_logging
from ..schemas.requests import (
    AddRequest,
    ApplyTypographyRequest,
    DeleteByPrefixRequest,
    ListByPrefixRequest,
    ListIncompleteRequest,
    ListReviewedRequest,
    ListUnreviewedRequest,
    MarkCheckedRequest,
    PingRequest,
    ReloadRequest,
    StatusSummaryRequest,
    UpdateRequest,
)
from ..schemas.responses import (
    AddResponse,
    DeleteResponse,
    IncompleteItem,
    IncompletePage,
    MarkCheckedResponse,
    PongResult,
    PrefixPage,
    ReloadResponse,
    ReviewedKeysResponse,
    StatusSummaryResponse,
    TypographyResponse,
    UpdateResponse,
)

if TYPE_CHECKING:
    from .core import CatalogWebSocketServer

logger = setup_logging(__name__)


def _page_size(server: "CatalogWebSocketServer", requested: int | None) -> int:
    return requested if requested is not None else server.config.page_size


async def handle_ping(server: "CatalogWebSocketServer", data: dict, client_id: str) -> PongResult:
    """Handle ping messages."""
    PingRequest.model_validate(data)
    return PongResult(timestamp=time.time(), ready=server.store.is_ready)


async def handle_list_unreviewed(server: "CatalogWebSocketServer", data: dict, client_id: str) -> dict[str, Any]:
    request = ListUnreviewedRequest.model_validate(data)
    limit = request.n if request.n is not None else server.config.unreviewed_limit
    return server.store.get_unreviewed(limit)


async def handle_update(server: "CatalogWebSocketServer", data: dict, client_id: str) -> UpdateResponse:
    request = UpdateRequest.model_validate(data)
    result = await server.store.update(request.updates)
    logger.debug(f"Client {client_id}: updated {result.updated_keys} translations, skipped {result.skipped}")
    return UpdateResponse(
        success=result.success, updated_keys=result.updated_keys, skipped=result.skipped, error=result.error
    )


async def handle_mark_checked(server: "CatalogWebSocketServer", data: dict, client_id: str) -> MarkCheckedResponse:
    request = MarkCheckedRequest.model_validate(data)
    result = await server.store.mark_checked(request.keys)
    return MarkCheckedResponse(success=result.success, marked_count=result.marked_count, error=result.error)


async def handle_list_reviewed(server: "CatalogWebSocketServer", data: dict, client_id: str) -> ReviewedKeysResponse:
    ListReviewedRequest.model_validate(data)
    keys = server.store.get_reviewed_keys()
    return ReviewedKeysResponse(count=len(keys), keys=keys)


async def handle_list_incomplete(server: "CatalogWebSocketServer", data: dict, client_id: str) -> IncompletePage:
    request = ListIncompleteRequest.model_validate(data)
    page = server.store.get_incomplete(request.page, _page_size(server, request.page_size))
    return IncompletePage(
        count=page.count,
        total_pages=page.total_pages,
        current_page=page.current_page,
        page_size=page.page_size,
        keys=[
            IncompleteItem(
                key=item.key,
                missing_locales=item.missing_locales,
                existing_translations=item.existing_translations,
            )
            for item in page.items
        ],
    )


async def handle_list_by_prefix(server: "CatalogWebSocketServer", data: dict, client_id: str) -> PrefixPage:
    request = ListByPrefixRequest.model_validate(data)
    page = server.store.get_by_prefix(request.prefix, request.page, _page_size(server, request.page_size))
    return PrefixPage(
        count=page.count,
        total_pages=page.total_pages,
        current_page=page.current_page,
        page_size=page.page_size,
        keys=dict(page.items),
    )


async def handle_add(server: "CatalogWebSocketServer", data: dict, client_id: str) -> AddResponse:
    request = AddRequest.model_validate(data)
    result = await server.store.add(request.translations)
    logger.debug(f"Client {client_id}: added {result.added_keys} keys")
    return AddResponse(
        success=result.success, added_keys=result.added_keys, added_locales=result.added_locales, error=result.error
    )


async def handle_status_summary(
    server: "CatalogWebSocketServer", data: dict, client_id: str
) -> StatusSummaryResponse:
    StatusSummaryRequest.model_validate(data)
    summary = server.store.get_status_summary()
    return StatusSummaryResponse(
        total=summary.total,
        missing_translations=summary.missing_translations,
        waiting_for_check=summary.waiting_for_check,
    )


async def handle_delete_by_prefix(server: "CatalogWebSocketServer", data: dict, client_id: str) -> DeleteResponse:
    request = DeleteByPrefixRequest.model_validate(data)
    result = await server.store.delete_by_prefix(request.prefix, request.locales)
    logger.debug(f"Client {client_id}: deleted {result.deleted_count} item(s) with prefix {request.prefix}")
    return DeleteResponse(success=result.success, deleted_count=result.deleted_count, error=result.error)


async def handle_apply_typography(
    server: "CatalogWebSocketServer", data: dict, client_id: str
) -> TypographyResponse:
    ApplyTypographyRequest.model_validate(data)
    result = await server.store.apply_typography_to_all()
    return TypographyResponse(
        success=result.success,
        total_keys=result.total_keys,
        total_locales=result.total_locales,
        updated_translations=result.updated_translations,
        error=result.error,
    )


async def handle_reload(server: "CatalogWebSocketServer", data: dict, client_id: str) -> ReloadResponse:
    """Force an immediate reload from disk, bypassing the watcher's debounce."""
    ReloadRequest.model_validate(data)
    logger.info(f"Client {client_id}: reload requested")
    report = await server.store.reload()
    return ReloadResponse(
        key_count=report.key_count, locales=report.locales, errors=report.errors, invalidated=report.invalidated
    )
