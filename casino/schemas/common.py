"""Response envelopes shared by every router."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from casino.services.pagination import PageResult

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; snake_case input still accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel, Generic[T]):
    status: Literal["success"] = "success"
    data: T


class MessageEnvelope(CamelModel):
    status: Literal["success"] = "success"
    message: str


class Page(CamelModel, Generic[T]):
    """Page envelope returned by every paginated listing."""

    items: list[T]
    current_page: int
    total_pages: int
    total_results: int


def page_payload(result: PageResult) -> dict[str, Any]:
    return {
        "items": list(result.items),
        "current_page": result.current_page,
        "total_pages": result.total_pages,
        "total_results": result.total_results,
    }
