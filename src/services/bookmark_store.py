"""
Storage collaborators for bookmark records.

The service layer only talks to a BookmarkStore, which offers five shapes:
list, find-by-id, insert, update-by-id and delete-by-id. Stores are created per
request and passed in explicitly; nothing here is a module-level singleton.
"""
from collections.abc import Iterable
from typing import Any, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark

BOOKMARK_COLUMNS = ("id", "title", "url", "description", "rating")


class BookmarkStore(Protocol):
    """Ordered collection of bookmark records."""

    async def list_all(self) -> list[Bookmark]:
        """Return every bookmark, ordered by title then id."""
        ...

    async def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        """Return the bookmark with this id, or None."""
        ...

    async def insert(self, bookmark: Bookmark) -> Bookmark:
        """Persist a new bookmark and return it."""
        ...

    async def update_by_id(self, bookmark_id: str, fields: dict[str, Any]) -> int:
        """Apply `fields` to the bookmark with this id; return rows affected (0 or 1)."""
        ...

    async def delete_by_id(self, bookmark_id: str) -> int:
        """Remove the bookmark with this id; return rows affected (0 or 1)."""
        ...


class SqlAlchemyBookmarkStore:
    """
    BookmarkStore backed by the `bookmarks` table.

    Note: Uses flush(), never commit. The session generator commits at request end.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_all(self) -> list[Bookmark]:
        result = await self._db.execute(
            select(Bookmark).order_by(Bookmark.title.asc(), Bookmark.id.asc()),
        )
        return list(result.scalars().all())

    async def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        result = await self._db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
        return result.scalar_one_or_none()

    async def insert(self, bookmark: Bookmark) -> Bookmark:
        self._db.add(bookmark)
        await self._db.flush()
        await self._db.refresh(bookmark)
        return bookmark

    async def update_by_id(self, bookmark_id: str, fields: dict[str, Any]) -> int:
        if not fields:
            return 0 if await self.find_by_id(bookmark_id) is None else 1
        result = await self._db.execute(
            update(Bookmark).where(Bookmark.id == bookmark_id).values(**fields),
        )
        return result.rowcount

    async def delete_by_id(self, bookmark_id: str) -> int:
        result = await self._db.execute(delete(Bookmark).where(Bookmark.id == bookmark_id))
        return result.rowcount


class InMemoryBookmarkStore:
    """
    BookmarkStore holding rows in a dict owned by the instance.

    Reads return fresh, detached Bookmark objects, so callers never share
    state with the store or with each other.
    """

    def __init__(self, bookmarks: Iterable[Bookmark] = ()) -> None:
        self._rows: dict[str, dict[str, Any]] = {}
        for bookmark in bookmarks:
            self._rows[bookmark.id] = self._to_row(bookmark)

    @staticmethod
    def _to_row(bookmark: Bookmark) -> dict[str, Any]:
        row = {column: getattr(bookmark, column) for column in BOOKMARK_COLUMNS}
        if row["description"] is None:
            row["description"] = ""
        return row

    async def list_all(self) -> list[Bookmark]:
        rows = sorted(self._rows.values(), key=lambda row: (row["title"], row["id"]))
        return [Bookmark(**row) for row in rows]

    async def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        row = self._rows.get(bookmark_id)
        return Bookmark(**row) if row is not None else None

    async def insert(self, bookmark: Bookmark) -> Bookmark:
        if bookmark.id in self._rows:
            raise ValueError(f"Duplicate bookmark id: {bookmark.id}")
        row = self._to_row(bookmark)
        self._rows[bookmark.id] = row
        return Bookmark(**row)

    async def update_by_id(self, bookmark_id: str, fields: dict[str, Any]) -> int:
        row = self._rows.get(bookmark_id)
        if row is None:
            return 0
        row.update({k: v for k, v in fields.items() if k in BOOKMARK_COLUMNS and k != "id"})
        return 1

    async def delete_by_id(self, bookmark_id: str) -> int:
        return 0 if self._rows.pop(bookmark_id, None) is None else 1
