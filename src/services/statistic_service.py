from typing import Dict, List, Optional
from datetime import date, datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from src.models.statistic import Statistic
from src.schemas.statistic import StatisticCreate, DailyCount
from src.logs import debug_logger

# Сегодня и 31 предыдущий день
TRAILING_WINDOW_DAYS = 32
DAY_FORMAT = "%Y-%m-%d"


def utc_today() -> date:
    """Текущий день по UTC, в той же шкале что и created_at в базе"""
    return datetime.now(timezone.utc).date()


def build_daily_series(
    counts: Dict[str, int],
    today: date,
    days: int = TRAILING_WINDOW_DAYS,
) -> List[DailyCount]:
    """
    Заполнить окно из `days` дней, заканчивающееся `today`, от старых к новым.

    Дни, которых нет в `counts`, получают явный ноль, поэтому в ряду
    всегда ровно `days` элементов.
    """
    series = []
    for days_ago in range(days - 1, -1, -1):
        target_day = (today - timedelta(days=days_ago)).strftime(DAY_FORMAT)
        series.append(DailyCount(day=target_day, count=counts.get(target_day, 0)))
    return series


class StatisticService:
    """Сервис для работы со статистикой ответов"""

    @staticmethod
    async def create(db: AsyncSession, stats: StatisticCreate) -> Statistic:
        statistic = Statistic(
            chord_name=stats.chord_name,
            root_note=stats.root_note,
            chord_extension=stats.chord_extension,
            answer_duration_millis=stats.answer_duration_millis,
            created_at=stats.created_at,
        )
        db.add(statistic)
        await db.commit()
        await db.refresh(statistic)
        debug_logger.debug(f"Сохранена запись статистики {statistic.id} для аккорда '{statistic.chord_name}'")
        return statistic

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Statistic]:
        """Все записи без фильтра и пагинации, в порядке хранилища"""
        query = select(Statistic)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count_by_day(db: AsyncSession) -> Dict[str, int]:
        """Количество записей по дням, день считается на стороне базы"""
        day = func.date(Statistic.created_at).label("day")
        query = select(day, func.count().label("count")).group_by(day)
        result = await db.execute(query)

        counts = {}
        for row_day, row_count in result.all():
            # PostgreSQL возвращает date, SQLite возвращает строку
            key = row_day if isinstance(row_day, str) else row_day.isoformat()
            counts[key] = row_count
        return counts

    @staticmethod
    async def get_count_by_day(
        db: AsyncSession,
        today: Optional[date] = None,
    ) -> List[DailyCount]:
        """Ряд из 32 дней с количеством ответов, пропуски заполнены нулями"""
        counts = await StatisticService.count_by_day(db)
        if today is None:
            today = utc_today()
        return build_daily_series(counts, today)
