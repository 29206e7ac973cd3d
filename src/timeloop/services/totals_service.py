"""Per-entry totals over date windows."""

from collections.abc import Collection, Iterable

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.models import Category, Entry, TimeRecord
from timeloop.periods import DateRange
from timeloop.schemas.totals import EntryTotals


def _in_window(window: DateRange | None) -> list:
    if window is None:
        return []
    return [TimeRecord.date >= window.start, TimeRecord.date <= window.end]


class TotalsService:
    """Aggregate queries. Nothing here writes to the store."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_entry_totals(
        self,
        window: DateRange | None = None,
        *,
        include_empty: bool = False,
        category_id: int | None = None,
    ) -> list[EntryTotals]:
        """Total minutes, record count and first/last date for each entry.

        Only records dated inside ``window`` count (all records when it is
        None). By default entries without a qualifying record are left out
        and the rest come most recently active first. With
        ``include_empty`` they are kept, with zero totals and no dates, and
        sorted after every entry that has time. ``category_id`` keeps only
        entries in that category.
        """
        total_duration = func.coalesce(func.sum(TimeRecord.duration), 0)
        record_count = func.count(TimeRecord.id)
        last_date = func.max(TimeRecord.date)

        query = (
            select(
                Entry.id,
                Entry.title,
                Entry.category_id,
                Category.name.label("category_name"),
                Category.color.label("category_color"),
                total_duration.label("total_duration"),
                func.min(TimeRecord.date).label("first_date"),
                last_date.label("last_date"),
                record_count.label("entry_count"),
            )
            .select_from(Entry)
            .outerjoin(Category, Entry.category_id == Category.id)
            # Window bounds go in the join so empty entries survive it
            .outerjoin(
                TimeRecord,
                and_(TimeRecord.entry_id == Entry.id, *_in_window(window)),
            )
            .group_by(
                Entry.id,
                Entry.title,
                Entry.category_id,
                Category.name,
                Category.color,
            )
        )

        if category_id is not None:
            query = query.where(Entry.category_id == category_id)

        if include_empty:
            query = query.order_by(
                case((last_date.is_(None), 1), else_=0),
                last_date.desc(),
                Entry.title.asc(),
            )
        else:
            query = query.having(record_count > 0).order_by(
                last_date.desc(),
                Entry.title.asc(),
            )

        result = await self.db.execute(query)
        return [EntryTotals(**row._asdict()) for row in result]

    async def calculate_total(
        self,
        entry_ids: Collection[int],
        window: DateRange | None = None,
    ) -> int:
        """Sum the minutes logged against ``entry_ids`` inside ``window``.

        An empty selection is 0 without touching the store.
        """
        if not entry_ids:
            return 0

        query = select(func.coalesce(func.sum(TimeRecord.duration), 0)).where(
            TimeRecord.entry_id.in_(list(entry_ids)),
            *_in_window(window),
        )
        total = (await self.db.execute(query)).scalar()
        return total or 0


def filter_totals(
    totals: Iterable[EntryTotals],
    search: str = "",
    selected: Collection[int] = (),
) -> list[EntryTotals]:
    """Narrow totals to titles containing ``search`` and list ``selected`` first.

    Matching ignores case. Relative order is otherwise kept.
    """
    needle = search.strip().lower()
    matching = [t for t in totals if needle in t.title.lower()]
    return sorted(matching, key=lambda t: t.id not in selected)


def sum_durations(totals: Iterable[EntryTotals]) -> int:
    """Grand total of minutes across aggregate rows."""
    return sum(t.total_duration for t in totals)
