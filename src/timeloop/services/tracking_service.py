"""Business logic for categories, entries and time records."""

import logging
from datetime import date

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timeloop.models import Category, Entry, TimeRecord, DEFAULT_CATEGORY_COLOR
from timeloop.periods import DateRange

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[Category]:
        """Get all categories ordered by name."""
        result = await self.db.execute(
            select(Category).order_by(Category.name, Category.id)
        )
        return list(result.scalars())

    async def get_by_id(self, category_id: int) -> Category | None:
        """Get a category by ID."""
        return await self.db.get(Category, category_id)

    async def get_by_name(self, name: str) -> Category | None:
        """Get the oldest category whose name matches, ignoring case."""
        result = await self.db.execute(
            select(Category)
            .where(func.lower(Category.name) == name.strip().lower())
            .order_by(Category.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str, color: str = DEFAULT_CATEGORY_COLOR) -> Category:
        """Create a new category."""
        category = Category(name=name, color=color or DEFAULT_CATEGORY_COLOR)
        self.db.add(category)
        await self.db.flush()
        logger.info("Created category %s (%r)", category.id, category.name)
        return category

    async def update(self, category_id: int, name: str, color: str) -> None:
        """Rename and recolor a category. Unknown IDs are ignored."""
        category = await self.get_by_id(category_id)
        if category is None:
            logger.debug("Category %s not found, nothing to update", category_id)
            return
        category.name = name
        category.color = color
        await self.db.flush()

    async def delete(self, category_id: int) -> None:
        """Delete a category, leaving its entries uncategorized.

        Both statements run in the caller's transaction, so entries are
        never seen pointing at a deleted category.
        """
        detached = await self.db.execute(
            update(Entry)
            .where(Entry.category_id == category_id)
            .values(category_id=None)
        )
        result = await self.db.execute(
            delete(Category).where(Category.id == category_id)
        )
        await self.db.flush()
        if result.rowcount:
            logger.info(
                "Deleted category %s, %s entries now uncategorized",
                category_id,
                detached.rowcount,
            )


class EntryService:
    """Service for entry operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _select(self):
        return (
            select(Entry)
            .options(selectinload(Entry.category))
            .execution_options(populate_existing=True)
        )

    async def get_all(self, window: DateRange | None = None) -> list[Entry]:
        """Get entries ordered by title.

        With a window, only entries with at least one time record dated
        inside it are returned.
        """
        query = self._select()
        if window is not None:
            logged_in_window = select(TimeRecord.entry_id).where(
                TimeRecord.date >= window.start,
                TimeRecord.date <= window.end,
            )
            query = query.where(Entry.id.in_(logged_in_window))
        result = await self.db.execute(query.order_by(Entry.title, Entry.id))
        return list(result.scalars())

    async def search(self, query: str, limit: int = 10) -> list[Entry]:
        """Find entries whose title contains ``query``, ignoring case."""
        result = await self.db.execute(
            self._select()
            .where(Entry.title.icontains(query, autoescape=True))
            .order_by(Entry.title, Entry.id)
            .limit(limit)
        )
        return list(result.scalars())

    async def get_by_title(self, title: str) -> Entry | None:
        """Get the oldest entry with exactly this title, ignoring case."""
        result = await self.db.execute(
            self._select()
            .where(func.lower(Entry.title) == title.strip().lower())
            .order_by(Entry.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, entry_id: int) -> Entry | None:
        """Get a single entry with its category."""
        result = await self.db.execute(self._select().where(Entry.id == entry_id))
        return result.scalar_one_or_none()

    async def create(self, title: str, category_id: int | None = None) -> Entry:
        """Create a new entry."""
        entry = Entry(title=title, category_id=category_id)
        self.db.add(entry)
        await self.db.flush()
        logger.info("Created entry %s (%r)", entry.id, entry.title)

        # Reload with category
        return await self.get_by_id(entry.id)

    async def update(self, entry_id: int, title: str, category_id: int | None) -> None:
        """Replace an entry's title and category. Unknown IDs are ignored."""
        entry = await self.db.get(Entry, entry_id)
        if entry is None:
            logger.debug("Entry %s not found, nothing to update", entry_id)
            return
        entry.title = title
        entry.category_id = category_id
        await self.db.flush()

    async def delete(self, entry_id: int) -> None:
        """Delete an entry and every time record logged against it."""
        await self.db.execute(
            delete(TimeRecord).where(TimeRecord.entry_id == entry_id)
        )
        result = await self.db.execute(delete(Entry).where(Entry.id == entry_id))
        await self.db.flush()
        if result.rowcount:
            logger.info("Deleted entry %s", entry_id)

    async def assign_category(self, entry_ids: list[int], category_id: int | None) -> None:
        """Set the same category on several entries."""
        for entry_id in entry_ids:
            entry = await self.db.get(Entry, entry_id)
            if entry is not None:
                await self.update(entry_id, entry.title, category_id)

    async def delete_many(self, entry_ids: list[int]) -> None:
        """Delete several entries with their time records."""
        for entry_id in entry_ids:
            await self.delete(entry_id)


class TimeRecordService:
    """Service for time record operations.

    Durations are taken as given; callers validate that they are positive
    minutes before calling in.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, record_id: int) -> TimeRecord | None:
        """Get a time record by ID."""
        return await self.db.get(TimeRecord, record_id)

    async def get_for_entry(self, entry_id: int) -> list[TimeRecord]:
        """Get an entry's time records, most recent date first."""
        result = await self.db.execute(
            select(TimeRecord)
            .where(TimeRecord.entry_id == entry_id)
            .order_by(TimeRecord.date.desc(), TimeRecord.id.desc())
        )
        return list(result.scalars())

    async def get_recent(
        self,
        limit: int = 50,
        offset: int = 0,
        category_id: int | None = None,
    ) -> list[TimeRecord]:
        """Get time records across all entries, newest first.

        With ``category_id``, only records of entries in that category.
        """
        query = select(TimeRecord)
        if category_id is not None:
            query = query.join(TimeRecord.entry).where(Entry.category_id == category_id)
        result = await self.db.execute(
            query
            .options(selectinload(TimeRecord.entry).selectinload(Entry.category))
            .execution_options(populate_existing=True)
            .order_by(
                TimeRecord.date.desc(),
                TimeRecord.created_at.desc(),
                TimeRecord.id.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars())

    async def create(
        self,
        entry_id: int,
        duration: int,
        date: date,
        note: str | None = None,
    ) -> TimeRecord:
        """Log minutes against an entry."""
        record = TimeRecord(entry_id=entry_id, duration=duration, date=date, note=note)
        self.db.add(record)
        await self.db.flush()
        logger.info(
            "Logged %s min on %s for entry %s", duration, date.isoformat(), entry_id
        )
        return record

    async def update(
        self,
        record_id: int,
        duration: int,
        date: date,
        note: str | None,
    ) -> None:
        """Replace a record's duration, date and note. Unknown IDs are ignored."""
        record = await self.get_by_id(record_id)
        if record is None:
            logger.debug("Time record %s not found, nothing to update", record_id)
            return
        record.duration = duration
        record.date = date
        record.note = note
        await self.db.flush()

    async def delete(self, record_id: int) -> None:
        """Delete a time record. Unknown IDs are ignored."""
        result = await self.db.execute(
            delete(TimeRecord).where(TimeRecord.id == record_id)
        )
        await self.db.flush()
        if result.rowcount:
            logger.info("Deleted time record %s", record_id)
