"""Bookmark CRUD endpoints."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import (
    check_rate_limit,
    get_bookmark_store,
    read_json_payload,
    require_api_token,
)
from schemas.bookmark import BookmarkResponse, serialize_bookmark
from schemas.validators import validate_bookmark_create, validate_bookmark_update
from services import bookmark_service
from services.bookmark_store import BookmarkStore
from services.exceptions import BookmarkNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(require_api_token), Depends(check_rate_limit)],
)


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> list[BookmarkResponse]:
    """List all bookmarks."""
    bookmarks = await bookmark_service.list_bookmarks(store)
    return [serialize_bookmark(b) for b in bookmarks]


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    request: Request,
    response: Response,
    payload: Any = Depends(read_json_payload),
    store: BookmarkStore = Depends(get_bookmark_store),
) -> BookmarkResponse:
    """
    Create a new bookmark.

    Requires `title`, `url` and `rating`; `description` is optional. The
    response carries a Location header pointing at the new bookmark.
    """
    data = validate_bookmark_create(payload)
    bookmark = await bookmark_service.create_bookmark(store, data)
    response.headers["Location"] = str(request.url_for("get_bookmark", bookmark_id=bookmark.id))
    return serialize_bookmark(bookmark)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: str,
    store: BookmarkStore = Depends(get_bookmark_store),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = await bookmark_service.get_bookmark(store, bookmark_id)
    if bookmark is None:
        logger.warning("Bookmark with id %s not found", bookmark_id)
        raise BookmarkNotFoundError(bookmark_id)
    return serialize_bookmark(bookmark)


@router.patch("/{bookmark_id}", status_code=204)
async def update_bookmark(
    bookmark_id: str,
    payload: Any = Depends(read_json_payload),
    store: BookmarkStore = Depends(get_bookmark_store),
) -> None:
    """
    Update a bookmark.

    Only the supplied fields change. The payload is validated before the
    bookmark is looked up, so an invalid body is a 400 even for unknown ids.
    """
    data = validate_bookmark_update(payload)
    await bookmark_service.update_bookmark(store, bookmark_id, data)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: str,
    store: BookmarkStore = Depends(get_bookmark_store),
) -> None:
    """Delete a bookmark."""
    deleted = await bookmark_service.delete_bookmark(store, bookmark_id)
    if not deleted:
        logger.warning("Bookmark with id %s not found", bookmark_id)
        raise BookmarkNotFoundError(bookmark_id)
