from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Result payload serialized with camelCase keys."""

    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        # Null translation values stay; only an absent error is dropped
        if "error" in data and data["error"] is None:
            del data["error"]
        return data


class ErrorMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "error"
    code: str
    message: str
    success: bool = False
    request_id: str | None = None


class ResultMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "result"
    operation: str
    request_id: str | None = None
    result: Any


class PongResult(WireModel):
    timestamp: float
    ready: bool


class UpdateResponse(WireModel):
    success: bool
    updated_keys: int
    skipped: int = 0
    error: str | None = None


class MarkCheckedResponse(WireModel):
    success: bool
    marked_count: int
    error: str | None = None


class ReviewedKeysResponse(WireModel):
    count: int
    keys: list[str]


class IncompleteItem(WireModel):
    key: str
    missing_locales: list[str]
    existing_translations: dict[str, Any]


class IncompletePage(WireModel):
    count: int
    total_pages: int
    current_page: int
    page_size: int
    keys: list[IncompleteItem]


class PrefixPage(WireModel):
    count: int
    total_pages: int
    current_page: int
    page_size: int
    keys: dict[str, dict[str, Any]]


class AddResponse(WireModel):
    success: bool
    added_keys: int
    added_locales: list[str]
    error: str | None = None


class StatusSummaryResponse(WireModel):
    total: int
    missing_translations: int
    waiting_for_check: int


class DeleteResponse(WireModel):
    success: bool
    deleted_count: int
    error: str | None = None


class TypographyResponse(WireModel):
    success: bool
    total_keys: int
    total_locales: int
    updated_translations: int
    error: str | None = None


class ReloadResponse(WireModel):
    key_count: int
    locales: list[str]
    errors: dict[str, str]
    invalidated: list[str]
