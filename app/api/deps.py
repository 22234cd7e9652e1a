"""Shared route dependencies and the success-envelope builder."""

from typing import Annotated, Any

from fastapi import Depends

from app.core.context import RequestContext
from app.schemas.envelope import ApiResponse, PaginatedResponse, Pagination
from app.services.user_store import UserStore, get_user_store

StoreDep = Annotated[UserStore, Depends(get_user_store)]


def ok(context: RequestContext, data: Any = None, message: str | None = None) -> ApiResponse[Any]:
    """Success envelope stamped with the request id."""
    return ApiResponse[Any](
        success=True,
        data=data,
        message=message,
        request_id=context.request_id,
    )


def ok_page(
    context: RequestContext, items: list[Any], pagination: Pagination
) -> PaginatedResponse[Any]:
    return PaginatedResponse[Any](
        success=True,
        data=items,
        pagination=pagination,
        request_id=context.request_id,
    )
