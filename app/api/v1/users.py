"""User CRUD, listing, stats, bulk generation, profile echo and the demo book list."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, Response, status

from app.api.deps import StoreDep, ok, ok_page
from app.core.config import settings
from app.core.context import RequestContextDep
from app.core.errors import NotFoundError
from app.schemas.book import Book, BookSortField
from app.schemas.envelope import ApiResponse, PaginatedResponse
from app.schemas.profile import UpdateProfileRequest, UpdateProfileResponse
from app.schemas.user import (
    GenerateUsersRequest,
    RoleCounts,
    SortOrder,
    User,
    UserCreate,
    UserRole,
    UserSortField,
    UserStats,
    UserUpdate,
)
from app.services.books import BOOK_SORT_KEYS, build_catalog, search_books
from app.services.event_bus import EventType, event_bus
from app.services.listing import paginate, sort_items
from app.services.profile import apply_profile_update
from app.services.user_store import USER_SORT_KEYS

logger = logging.getLogger(__name__)
router = APIRouter()

PageQuery = Annotated[int, Query(ge=1, description="1-based page number")]
PageSizeQuery = Annotated[
    int, Query(alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page")
]
SortOrderQuery = Annotated[SortOrder, Query(alias="sortOrder")]


@router.get(
    "",
    response_model=PaginatedResponse[User],
    response_model_exclude_none=True,
)
def list_users(
    store: StoreDep,
    context: RequestContextDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = settings.DEFAULT_PAGE_SIZE,
    search: Annotated[str | None, Query(min_length=1)] = None,
    role: Annotated[UserRole | None, Query()] = None,
    sort_by: Annotated[UserSortField | None, Query(alias="sortBy")] = None,
    sort_order: SortOrderQuery = "asc",
) -> Any:
    """
    List users: filter (search, role), then sort, then slice one page.

    search and role combine when both are given. Without sortBy the store's insertion
    order is kept. Pages past the end return an empty list with accurate totals.
    """
    users = store.search(search) if search else store.list_all()
    if role:
        users = [u for u in users if u.role == role]
    if sort_by:
        users = sort_items(users, USER_SORT_KEYS[sort_by], sort_order)
    page_items, pagination = paginate(users, page, page_size)
    event_bus.emit(
        EventType.DATA_FETCHED,
        {"dataType": "users", "count": len(page_items)},
        context,
    )
    return ok_page(context, page_items, pagination)


@router.get("/stats", response_model=ApiResponse[UserStats], response_model_exclude_none=True)
def get_users_stats(store: StoreDep, context: RequestContextDep) -> Any:
    """Total user count and a count per role."""
    counts = store.role_counts()
    stats = UserStats(total=store.count(), by_role=RoleCounts(**counts))
    return ok(context, stats)


@router.get(
    "/bookList",
    response_model=PaginatedResponse[Book],
    response_model_exclude_none=True,
)
def get_book_list(
    context: RequestContextDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = settings.DEFAULT_PAGE_SIZE,
    search_key: Annotated[str | None, Query(alias="searchKey", min_length=1)] = None,
    sort_by: Annotated[BookSortField | None, Query(alias="sortBy")] = None,
    sort_order: SortOrderQuery = "asc",
) -> Any:
    """Read-only catalog with the same search/sort/paginate pipeline as /users."""
    books = build_catalog()
    if search_key:
        books = search_books(books, search_key)
    if sort_by:
        books = sort_items(books, BOOK_SORT_KEYS[sort_by], sort_order)
    page_items, pagination = paginate(books, page, page_size)
    event_bus.emit(
        EventType.DATA_FETCHED,
        {"dataType": "books", "count": len(page_items)},
        context,
    )
    return ok_page(context, page_items, pagination)


@router.post(
    "/generate",
    response_model=ApiResponse[list[User]],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def generate_users(body: GenerateUsersRequest, store: StoreDep, context: RequestContextDep) -> Any:
    """Append count (1-50) randomly generated users."""
    users = store.generate(body.count)
    for user in users:
        event_bus.emit(EventType.USER_CREATED, user, context)
    return ok(context, users, f"{body.count} users generated successfully")


@router.post(
    "/updateProfile",
    response_model=ApiResponse[UpdateProfileResponse],
    response_model_exclude_none=True,
)
def update_profile(body: UpdateProfileRequest, context: RequestContextDep) -> Any:
    """Echo the profile body back under the response field names."""
    return ok(context, apply_profile_update(body), "Profile updated successfully")


@router.get("/{user_id}", response_model=ApiResponse[User], response_model_exclude_none=True)
def get_user(user_id: str, store: StoreDep, context: RequestContextDep) -> Any:
    user = store.get(user_id)
    if user is None:
        raise NotFoundError()
    event_bus.emit(EventType.DATA_FETCHED, {"dataType": "user", "count": 1}, context)
    return ok(context, user)


@router.post(
    "",
    response_model=ApiResponse[User],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(body: UserCreate, store: StoreDep, context: RequestContextDep) -> Any:
    user = store.create(name=body.name, email=str(body.email), role=body.role)
    event_bus.emit(EventType.USER_CREATED, user, context)
    return ok(context, user, "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[User], response_model_exclude_none=True)
def update_user(
    user_id: str, body: UserUpdate, store: StoreDep, context: RequestContextDep
) -> Any:
    """Change only the fields present in the body; updatedAt is always refreshed."""
    changes = body.model_dump(exclude_unset=True)
    if "email" in changes:
        changes["email"] = str(changes["email"])
    user = store.update(user_id, **changes)
    if user is None:
        raise NotFoundError()
    event_bus.emit(EventType.USER_UPDATED, user, context)
    return ok(context, user, "User updated successfully")


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_user(user_id: str, store: StoreDep, context: RequestContextDep) -> Response:
    if not store.delete(user_id):
        raise NotFoundError()
    event_bus.emit(EventType.USER_DELETED, {"userId": user_id}, context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
