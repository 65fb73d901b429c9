from typing import Generic, List, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class DataResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"data": ...}``."""
    data: T


class PageResponse(BaseModel, Generic[T]):
    """Success envelope for paginated listings."""
    data: List[T]
    meta: PageMeta


class ErrorResponse(BaseModel):
    error: str
