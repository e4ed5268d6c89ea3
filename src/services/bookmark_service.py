"""Service layer for bookmark CRUD operations."""
import logging
import uuid

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.bookmark_store import BookmarkStore
from services.exceptions import BookmarkNotFoundError

logger = logging.getLogger(__name__)


async def list_bookmarks(store: BookmarkStore) -> list[Bookmark]:
    """Get all bookmarks. An empty list is a normal result."""
    return await store.list_all()


async def get_bookmark(store: BookmarkStore, bookmark_id: str) -> Bookmark | None:
    """Get a bookmark by ID. Returns None if not found."""
    return await store.find_by_id(bookmark_id)


async def create_bookmark(store: BookmarkStore, data: BookmarkCreate) -> Bookmark:
    """
    Create a new bookmark with a freshly minted id.

    Every call mints a new UUID4, so identical payloads produce distinct records.
    """
    bookmark = Bookmark(
        id=str(uuid.uuid4()),
        title=data.title,
        url=data.url,
        description=data.description,
        rating=data.rating,
    )
    bookmark = await store.insert(bookmark)
    logger.info("Bookmark with id %s created", bookmark.id)
    return bookmark


async def update_bookmark(
    store: BookmarkStore,
    bookmark_id: str,
    data: BookmarkUpdate,
) -> int:
    """
    Update only the fields the client supplied.

    Returns the number of bookmarks affected.

    Raises:
        BookmarkNotFoundError: If no bookmark has this id.
    """
    update_data = data.model_dump(exclude_unset=True)
    affected = await store.update_by_id(bookmark_id, update_data)
    if affected == 0:
        logger.warning("Bookmark with id %s not found", bookmark_id)
        raise BookmarkNotFoundError(bookmark_id)
    logger.info("Bookmark with id %s updated", bookmark_id)
    return affected


async def delete_bookmark(store: BookmarkStore, bookmark_id: str) -> int:
    """Delete a bookmark. Returns 1 if deleted, 0 if it did not exist."""
    affected = await store.delete_by_id(bookmark_id)
    if affected:
        logger.info("Bookmark with id %s deleted", bookmark_id)
    return affected
