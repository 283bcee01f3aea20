from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

TranslationValue = Union[str, int, float, bool, None, list[Any]]
TranslationMap = dict[str, dict[str, TranslationValue]]


class BaseMessage(BaseModel):
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    type: str
    request_id: str | None = None

    @field_validator("request_id", mode="before")
    @classmethod
    def _stringify_request_id(cls, value: Any) -> Any:
        # Numeric ids are echoed back as strings
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PingRequest(BaseMessage):
    type: str = "ping"


class ListUnreviewedRequest(BaseMessage):
    type: str = "list_unreviewed"
    n: int | None = None


class UpdateRequest(BaseMessage):
    type: str = "update"
    updates: TranslationMap


class MarkCheckedRequest(BaseMessage):
    type: str = "mark_checked"
    keys: Union[str, list[str]]


class ListReviewedRequest(BaseMessage):
    type: str = "list_reviewed"


class ListIncompleteRequest(BaseMessage):
    type: str = "list_incomplete"
    page: int = 1
    page_size: int | None = None


class ListByPrefixRequest(BaseMessage):
    type: str = "list_by_prefix"
    prefix: str
    page: int = 1
    page_size: int | None = None


class AddRequest(BaseMessage):
    type: str = "add"
    translations: TranslationMap


class StatusSummaryRequest(BaseMessage):
    type: str = "status_summary"


class DeleteByPrefixRequest(BaseMessage):
    type: str = "delete_by_prefix"
    prefix: str | None = None
    locales: list[str] | None = None


class ApplyTypographyRequest(BaseMessage):
    type: str = "apply_typography"


class ReloadRequest(BaseMessage):
    type: str = "reload"
