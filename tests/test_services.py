"""Tests for service layer."""

import pytest
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from timeloop.models import TimeRecord
from timeloop.periods import DateRange
from timeloop.services.tracking_service import (
    CategoryService,
    EntryService,
    TimeRecordService,
)


class TestCategoryService:
    """Tests for CategoryService."""

    @pytest.mark.asyncio
    async def test_create_category(self, test_session):
        """Test creating a category."""
        service = CategoryService(test_session)

        category = await service.create("Work", color="#0000FF")

        assert category.id is not None
        assert category.name == "Work"
        assert category.color == "#0000FF"

    @pytest.mark.asyncio
    async def test_create_uses_default_color(self, test_session):
        """Test omitting the color falls back to the preset."""
        service = CategoryService(test_session)

        category = await service.create("Misc")

        assert category.color == "#6366f1"

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_name(self, test_session):
        """Test categories come back alphabetically."""
        service = CategoryService(test_session)
        await service.create("Sport")
        await service.create("Art")
        await service.create("Music")

        names = [c.name for c in await service.get_all()]

        assert names == ["Art", "Music", "Sport"]

    @pytest.mark.asyncio
    async def test_get_by_name_ignores_case(self, test_session):
        """Test looking up a category by name."""
        service = CategoryService(test_session)
        created = await service.create("Work")

        found = await service.get_by_name("  WORK ")

        assert found.id == created.id
        assert await service.get_by_name("Play") is None

    @pytest.mark.asyncio
    async def test_update_category(self, test_session):
        """Test renaming and recoloring a category."""
        service = CategoryService(test_session)
        category = await service.create("Wrok", color="#000000")

        await service.update(category.id, "Work", "#FFFFFF")

        updated = await service.get_by_id(category.id)
        assert updated.name == "Work"
        assert updated.color == "#FFFFFF"

    @pytest.mark.asyncio
    async def test_update_missing_category_is_noop(self, test_session):
        """Test updating an unknown category does nothing and does not raise."""
        service = CategoryService(test_session)

        await service.update(404, "Ghost", "#000000")

        assert await service.get_all() == []

    @pytest.mark.asyncio
    async def test_delete_category_keeps_entries(self, test_session, sample_data):
        """Test deleting a category leaves its entries uncategorized."""
        categories = CategoryService(test_session)
        entries = EntryService(test_session)
        writing = sample_data["writing"]

        await categories.delete(sample_data["work"].id)

        assert await categories.get_by_id(sample_data["work"].id) is None
        survivor = await entries.get_by_id(writing.id)
        assert survivor is not None
        assert survivor.category_id is None
        assert survivor.category_name is None

        # Other categories are untouched
        reading = await entries.get_by_id(sample_data["reading"].id)
        assert reading.category_id == sample_data["leisure"].id

    @pytest.mark.asyncio
    async def test_delete_category_keeps_time(self, test_session, sample_data):
        """Test the entries' time records survive a category delete."""
        await CategoryService(test_session).delete(sample_data["work"].id)

        records = await TimeRecordService(test_session).get_for_entry(sample_data["writing"].id)
        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_delete_missing_category_is_noop(self, test_session):
        """Test deleting an unknown category does not raise."""
        await CategoryService(test_session).delete(404)

    @pytest.mark.asyncio
    async def test_delete_category_rolls_back_as_one(self, test_database, sample_data):
        """Test an aborted transaction undoes both halves of a category delete."""
        work_id = sample_data["work"].id
        writing_id = sample_data["writing"].id

        with pytest.raises(RuntimeError):
            async with test_database.transaction() as session:
                await CategoryService(session).delete(work_id)
                raise RuntimeError("abort")

        async with test_database.session() as session:
            assert await CategoryService(session).get_by_id(work_id) is not None
            entry = await EntryService(session).get_by_id(writing_id)
            assert entry.category_id == work_id
            assert entry.category_name == "Work"


class TestEntryService:
    """Tests for EntryService."""

    @pytest.mark.asyncio
    async def test_create_entry(self, test_session):
        """Test creating an entry via service."""
        category = await CategoryService(test_session).create("Work")
        service = EntryService(test_session)

        entry = await service.create("Report", category.id)

        assert entry.id is not None
        assert entry.title == "Report"
        assert entry.category_id == category.id
        assert entry.category_name == "Work"
        assert entry.category_color == category.color

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_title(self, test_session, sample_data):
        """Test listing every entry alphabetically with category info."""
        entries = await EntryService(test_session).get_all()

        assert [e.title for e in entries] == ["Cooking", "Reading", "Writing"]
        assert entries[0].category_name is None
        assert entries[2].category_name == "Work"

    @pytest.mark.asyncio
    async def test_get_all_in_window(self, test_session, sample_data):
        """Test a window keeps only entries with time inside it."""
        service = EntryService(test_session)

        march = await service.get_all(DateRange(date(2024, 3, 1), date(2024, 3, 31)))
        february = await service.get_all(DateRange(date(2024, 2, 1), date(2024, 2, 29)))

        # Writing has two records in March but is listed once
        assert [e.title for e in march] == ["Writing"]
        assert [e.title for e in february] == ["Reading"]

    @pytest.mark.asyncio
    async def test_get_all_inverted_window_is_empty(self, test_session, sample_data):
        """Test an inverted window simply matches nothing."""
        entries = await EntryService(test_session).get_all(
            DateRange(date(2024, 3, 31), date(2024, 3, 1))
        )

        assert entries == []

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, test_session, sample_data):
        """Test searching titles anywhere, ignoring case."""
        service = EntryService(test_session)

        results = await service.search("ING")

        assert [e.title for e in results] == ["Cooking", "Reading", "Writing"]
        assert [e.title for e in await service.search("rit")] == ["Writing"]

    @pytest.mark.asyncio
    async def test_search_caps_results(self, test_session):
        """Test searches return at most ten entries by default."""
        service = EntryService(test_session)
        for i in range(12):
            await service.create(f"Task {i:02d}")

        results = await service.search("task")

        assert len(results) == 10
        assert results[0].title == "Task 00"

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, test_session):
        """Test LIKE wildcards in the query match only themselves."""
        service = EntryService(test_session)
        await service.create("100% effort")
        await service.create("Plain")

        results = await service.search("%")

        assert [e.title for e in results] == ["100% effort"]

    @pytest.mark.asyncio
    async def test_get_by_title(self, test_session, sample_data):
        """Test exact title lookup for create-or-select."""
        service = EntryService(test_session)

        found = await service.get_by_title("writing")

        assert found.id == sample_data["writing"].id
        assert await service.get_by_title("Writ") is None

    @pytest.mark.asyncio
    async def test_get_missing_entry(self, test_session):
        """Test fetching an unknown entry returns None."""
        assert await EntryService(test_session).get_by_id(404) is None

    @pytest.mark.asyncio
    async def test_update_entry(self, test_session, sample_data):
        """Test changing title and category."""
        service = EntryService(test_session)
        cooking = sample_data["cooking"]

        await service.update(cooking.id, "Baking", sample_data["leisure"].id)

        updated = await service.get_by_id(cooking.id)
        assert updated.title == "Baking"
        assert updated.category_name == "Leisure"

    @pytest.mark.asyncio
    async def test_update_entry_clears_category(self, test_session, sample_data):
        """Test passing no category removes it."""
        service = EntryService(test_session)
        writing = sample_data["writing"]

        await service.update(writing.id, writing.title, None)

        updated = await service.get_by_id(writing.id)
        assert updated.category_id is None
        assert updated.category_name is None

    @pytest.mark.asyncio
    async def test_delete_entry_cascades(self, test_session, sample_data):
        """Test deleting an entry removes all of its time records."""
        service = EntryService(test_session)
        writing = sample_data["writing"]

        await service.delete(writing.id)

        assert await service.get_by_id(writing.id) is None
        assert await TimeRecordService(test_session).get_for_entry(writing.id) == []
        orphans = await test_session.execute(
            select(func.count()).select_from(TimeRecord).where(TimeRecord.entry_id == writing.id)
        )
        assert orphans.scalar() == 0

        # Other entries keep their time
        records = await TimeRecordService(test_session).get_for_entry(sample_data["reading"].id)
        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_assign_category_to_many(self, test_session, sample_data):
        """Test the batch category assignment."""
        service = EntryService(test_session)
        ids = [sample_data["reading"].id, sample_data["cooking"].id]

        await service.assign_category(ids + [404], sample_data["work"].id)

        for entry_id in ids:
            entry = await service.get_by_id(entry_id)
            assert entry.category_name == "Work"

    @pytest.mark.asyncio
    async def test_delete_many(self, test_session, sample_data):
        """Test the batch delete."""
        service = EntryService(test_session)

        await service.delete_many([sample_data["writing"].id, sample_data["reading"].id])

        assert [e.title for e in await service.get_all()] == ["Cooking"]
        assert await TimeRecordService(test_session).get_recent() == []


class TestTimeRecordService:
    """Tests for TimeRecordService."""

    @pytest.mark.asyncio
    async def test_create_then_read_back(self, test_session):
        """Test a logged record reads back exactly as written."""
        entry = await EntryService(test_session).create("Piano")
        service = TimeRecordService(test_session)

        record = await service.create(entry.id, 25, date(2024, 5, 1), "scales")

        records = await service.get_for_entry(entry.id)
        assert len(records) == 1
        assert records[0].id == record.id
        assert records[0].duration == 25
        assert records[0].date == date(2024, 5, 1)
        assert records[0].note == "scales"

    @pytest.mark.asyncio
    async def test_create_for_unknown_entry_fails(self, test_session):
        """Test logging against a missing entry is rejected by the store."""
        with pytest.raises(IntegrityError):
            await TimeRecordService(test_session).create(404, 10, date(2024, 5, 1))

    @pytest.mark.asyncio
    async def test_get_for_entry_newest_first(self, test_session, sample_data):
        """Test an entry's records come most recent date first."""
        records = await TimeRecordService(test_session).get_for_entry(sample_data["writing"].id)

        assert [r.date for r in records] == [date(2024, 3, 10), date(2024, 3, 4)]

    @pytest.mark.asyncio
    async def test_get_recent_with_details(self, test_session, sample_data):
        """Test recent records across entries carry entry and category info."""
        records = await TimeRecordService(test_session).get_recent()

        assert [(r.entry_title, r.date) for r in records] == [
            ("Writing", date(2024, 3, 10)),
            ("Writing", date(2024, 3, 4)),
            ("Reading", date(2024, 2, 20)),
        ]
        assert records[0].category_name == "Work"
        assert records[2].category_color == "#22c55e"

    @pytest.mark.asyncio
    async def test_get_recent_same_day_newest_created_first(self, test_session):
        """Test records on the same date are ordered by creation, newest first."""
        entry = await EntryService(test_session).create("Chores")
        service = TimeRecordService(test_session)
        first = await service.create(entry.id, 10, date(2024, 6, 1))
        second = await service.create(entry.id, 20, date(2024, 6, 1))

        records = await service.get_recent()

        assert [r.id for r in records] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_get_recent_by_category(self, test_session, sample_data):
        """Test narrowing recent records to one category."""
        service = TimeRecordService(test_session)

        work = await service.get_recent(category_id=sample_data["work"].id)
        leisure = await service.get_recent(category_id=sample_data["leisure"].id)

        assert [r.entry_title for r in work] == ["Writing", "Writing"]
        assert [r.duration for r in leisure] == [45]
        assert await service.get_recent(category_id=404) == []

    @pytest.mark.asyncio
    async def test_get_recent_limit_offset(self, test_session, sample_data):
        """Test paging through recent records."""
        service = TimeRecordService(test_session)

        page = await service.get_recent(limit=1, offset=1)

        assert len(page) == 1
        assert page[0].date == date(2024, 3, 4)

    @pytest.mark.asyncio
    async def test_update_record(self, test_session, sample_data):
        """Test editing duration, date and note."""
        service = TimeRecordService(test_session)
        record = (await service.get_for_entry(sample_data["reading"].id))[0]

        await service.update(record.id, 50, date(2024, 2, 21), "chapter 3")

        updated = await service.get_by_id(record.id)
        assert updated.duration == 50
        assert updated.date == date(2024, 2, 21)
        assert updated.note == "chapter 3"

    @pytest.mark.asyncio
    async def test_update_missing_record_is_noop(self, test_session):
        """Test editing an unknown record does not raise."""
        await TimeRecordService(test_session).update(404, 10, date(2024, 1, 1), None)

    @pytest.mark.asyncio
    async def test_delete_record(self, test_session, sample_data):
        """Test deleting one record leaves the others."""
        service = TimeRecordService(test_session)
        writing_records = await service.get_for_entry(sample_data["writing"].id)

        await service.delete(writing_records[0].id)
        await service.delete(404)

        remaining = await service.get_for_entry(sample_data["writing"].id)
        assert [r.id for r in remaining] == [writing_records[1].id]
