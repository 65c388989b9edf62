"""Common Pydantic schemas."""

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from ..core.config import settings

T = TypeVar("T")


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Dotted path to the invalid field")
    message: str = Field(..., description="Validation error message")


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")
    code: Optional[str] = Field(None, description="Application-specific error code")
    violations: Optional[List[Violation]] = Field(None, description="Validation errors")


class PageQuery(BaseModel):
    """Page-number pagination parameters shared by list endpoints."""

    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Results per page"
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination metadata returned with every list."""

    page: int = Field(..., ge=1, description="Current page")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total matching items")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class Page(BaseModel, Generic[T]):
    """A page of results plus pagination metadata."""

    data: List[T] = Field(default_factory=list, description="Items on this page")
    pagination: Pagination = Field(..., description="Pagination metadata")


class MessageResponse(BaseModel):
    """Plain acknowledgement message."""

    message: str
