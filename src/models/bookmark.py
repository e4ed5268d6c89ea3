"""Bookmark model for storing rated bookmarks."""
from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

MIN_RATING = 0
MAX_RATING = 5


class Bookmark(Base):
    """Bookmark model - a titled, rated URL with an optional description."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}",
            name="ck_bookmarks_rating_range",
        ),
    )

    # UUID4 string minted by the service layer at creation, never reassigned
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Bookmark id={self.id!r} title={self.title!r} rating={self.rating}>"
