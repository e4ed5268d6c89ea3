"""Tests for the SQLAlchemy-backed bookmark store."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from services.bookmark_store import InMemoryBookmarkStore, SqlAlchemyBookmarkStore


def _bookmark(bookmark_id: str, title: str = "Example", rating: int = 3) -> Bookmark:
    return Bookmark(
        id=bookmark_id,
        title=title,
        url="https://example.com",
        description="",
        rating=rating,
    )


class TestSqlAlchemyBookmarkStore:
    """Tests for SqlAlchemyBookmarkStore."""

    async def test__insert__then_find(self, db_session: AsyncSession) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(_bookmark("b-1"))

        found = await store.find_by_id("b-1")
        assert found is not None
        assert found.title == "Example"
        assert found.rating == 3

    async def test__find_by_id__missing_returns_none(self, db_session: AsyncSession) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        assert await store.find_by_id("missing") is None

    async def test__insert__description_defaults_to_empty(
        self, db_session: AsyncSession,
    ) -> None:
        """A bookmark inserted without description reads back with ''."""
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(
            Bookmark(id="b-1", title="T", url="https://example.com", rating=1),
        )

        found = await store.find_by_id("b-1")
        assert found is not None
        assert found.description == ""

    async def test__list_all__orders_by_title_then_id(self, db_session: AsyncSession) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(_bookmark("b-3", title="Bravo"))
        await store.insert(_bookmark("b-2", title="Alpha"))
        await store.insert(_bookmark("b-1", title="Bravo"))

        bookmarks = await store.list_all()
        assert [b.id for b in bookmarks] == ["b-2", "b-1", "b-3"]

    async def test__update_by_id__returns_rows_affected(self, db_session: AsyncSession) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(_bookmark("b-1"))

        assert await store.update_by_id("b-1", {"rating": 0}) == 1
        assert await store.update_by_id("missing", {"rating": 0}) == 0

        db_session.expire_all()
        found = await store.find_by_id("b-1")
        assert found is not None
        assert found.rating == 0

    async def test__update_by_id__empty_fields_reports_existence(
        self, db_session: AsyncSession,
    ) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(_bookmark("b-1"))

        assert await store.update_by_id("b-1", {}) == 1
        assert await store.update_by_id("missing", {}) == 0

    async def test__delete_by_id__returns_rows_affected(self, db_session: AsyncSession) -> None:
        store = SqlAlchemyBookmarkStore(db_session)
        await store.insert(_bookmark("b-1"))

        assert await store.delete_by_id("b-1") == 1
        assert await store.delete_by_id("b-1") == 0
        assert await store.find_by_id("b-1") is None


class TestInMemoryBookmarkStore:
    """Tests for InMemoryBookmarkStore."""

    async def test__seeded_rows_are_listed(self) -> None:
        store = InMemoryBookmarkStore([_bookmark("b-2", title="B"), _bookmark("b-1", title="A")])
        assert [b.id for b in await store.list_all()] == ["b-1", "b-2"]

    async def test__insert__duplicate_id_rejected(self) -> None:
        store = InMemoryBookmarkStore([_bookmark("b-1")])
        with pytest.raises(ValueError, match="b-1"):
            await store.insert(_bookmark("b-1"))

    async def test__update_by_id__ignores_id_and_unknown_keys(self) -> None:
        store = InMemoryBookmarkStore([_bookmark("b-1")])

        assert await store.update_by_id("b-1", {"id": "other", "color": "red", "rating": 5}) == 1

        found = await store.find_by_id("b-1")
        assert found is not None
        assert found.rating == 5
        assert await store.find_by_id("other") is None

    async def test__stores_are_independent(self) -> None:
        """Two stores never share rows."""
        first = InMemoryBookmarkStore()
        second = InMemoryBookmarkStore()
        await first.insert(_bookmark("b-1"))

        assert await second.list_all() == []
