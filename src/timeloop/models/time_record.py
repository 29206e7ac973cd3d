"""Time record model - one dated duration logged against an entry."""

from datetime import date as calendar_date, datetime, timezone

from sqlalchemy import Integer, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeloop.models.base import Base


class TimeRecord(Base):
    """Duration in whole minutes spent on an entry on a given day."""

    __tablename__ = "time_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    # Stored by SQLite as YYYY-MM-DD text
    date: Mapped[calendar_date] = mapped_column(Date, nullable=False, index=True)
    note: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    entry: Mapped["Entry"] = relationship(  # noqa: F821
        back_populates="time_records",
    )

    @property
    def entry_title(self) -> str:
        return self.entry.title

    @property
    def category_name(self) -> str | None:
        return self.entry.category_name

    @property
    def category_color(self) -> str | None:
        return self.entry.category_color

    def __repr__(self) -> str:
        return f"<TimeRecord(entry_id={self.entry_id}, date={self.date}, duration={self.duration})>"
