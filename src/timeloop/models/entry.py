"""Entry model - a named activity that time is logged against."""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeloop.models.base import Base


class Entry(Base):
    """Trackable activity, optionally filed under a category."""

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)

    # Foreign keys
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    category: Mapped["Category | None"] = relationship(  # noqa: F821
        back_populates="entries",
    )
    time_records: Mapped[list["TimeRecord"]] = relationship(  # noqa: F821
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def category_color(self) -> str | None:
        return self.category.color if self.category else None

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, title={self.title!r})>"
