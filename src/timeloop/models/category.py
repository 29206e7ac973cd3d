"""Category model for labeling entries."""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeloop.models.base import Base

DEFAULT_CATEGORY_COLOR = "#6366f1"  # Indigo


class Category(Base):
    """Colored label that entries may point at."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Names are not unique
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(
        String(7),  # Hex color like #FF0000
        nullable=False,
        default=DEFAULT_CATEGORY_COLOR,
        server_default=DEFAULT_CATEGORY_COLOR,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    entries: Mapped[list["Entry"]] = relationship(  # noqa: F821
        back_populates="category",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"
