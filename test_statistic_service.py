import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import date, datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.statistic import Statistic
from src.schemas.statistic import StatisticCreate
from src.services.statistic_service import (
    StatisticService,
    TRAILING_WINDOW_DAYS,
    build_daily_series,
)


class TestBuildDailySeries:
    """Тесты заполнения ряда по дням"""

    def test_series_has_fixed_length_and_ends_today(self):
        """Ряд всегда из 32 дней и заканчивается сегодняшним днем"""
        today = date(2024, 3, 10)
        series = build_daily_series({}, today)

        assert len(series) == TRAILING_WINDOW_DAYS == 32
        assert series[-1].day == "2024-03-10"
        assert series[0].day == "2024-02-08"

    def test_days_are_contiguous_and_increasing(self):
        """Дни идут подряд, от старых к новым"""
        today = date(2024, 3, 1)
        series = build_daily_series({}, today)

        days = [date.fromisoformat(entry.day) for entry in series]
        for previous, current in zip(days, days[1:]):
            assert current - previous == timedelta(days=1)

    def test_missing_days_are_zero(self):
        """Дни без записей заполняются нулями"""
        series = build_daily_series({"2024-01-03": 2}, date(2024, 1, 6))

        counts = {entry.day: entry.count for entry in series}
        assert counts["2024-01-03"] == 2
        assert counts["2024-01-04"] == 0
        assert sum(counts.values()) == 2

    def test_days_outside_window_are_ignored(self):
        """Дни вне окна не попадают в ряд"""
        series = build_daily_series(
            {"2023-11-01": 7, "2024-01-06": 1}, date(2024, 1, 6)
        )

        assert "2023-11-01" not in [entry.day for entry in series]
        assert sum(entry.count for entry in series) == 1

    def test_chord_quiz_scenario(self):
        """Три ответа 5 января и один 6 января"""
        series = build_daily_series(
            {"2024-01-05": 3, "2024-01-06": 1}, date(2024, 1, 6)
        )

        assert len(series) == 32
        assert series[-2].day == "2024-01-05"
        assert series[-2].count == 3
        assert series[-1].day == "2024-01-06"
        assert series[-1].count == 1
        assert all(entry.count == 0 for entry in series[:-2])

    def test_window_crosses_year_boundary(self):
        series = build_daily_series({}, date(2024, 1, 15))

        assert series[0].day == "2023-12-15"


class TestStatisticService:
    """Юниттесты для StatisticService"""

    def setup_method(self):
        """Настройка для каждого теста"""
        self.mock_db = AsyncMock(spec=AsyncSession)

    @pytest.mark.asyncio
    async def test_create(self):
        """Создание записи: add, commit и refresh вызываются по одному разу"""
        self.mock_db.add = MagicMock()

        async def mock_refresh(statistic):
            statistic.id = 1
        self.mock_db.refresh.side_effect = mock_refresh

        stats = StatisticCreate(
            chord_name="Cmaj7",
            root_note="C",
            chord_extension="maj7",
            answer_duration_millis=1200,
            created_at="2024-01-05T10:00:00Z",
        )
        result = await StatisticService.create(self.mock_db, stats)

        assert isinstance(result, Statistic)
        assert result.id == 1
        assert result.chord_name == "Cmaj7"
        assert result.answer_duration_millis == 1200
        assert result.created_at == datetime(2024, 1, 5, 10, 0)
        self.mock_db.add.assert_called_once_with(result)
        self.mock_db.commit.assert_called_once()
        self.mock_db.refresh.assert_called_once()

    @pytest.mark.asyncio
    async def test_get_all(self):
        """Все записи возвращаются списком"""
        records = [Statistic(chord_name="Am"), Statistic(chord_name="G7")]
        mock_scalars = MagicMock()
        mock_scalars.all.return_value = records

        mock_result = MagicMock()
        mock_result.scalars.return_value = mock_scalars
        self.mock_db.execute.return_value = mock_result

        result = await StatisticService.get_all(self.mock_db)

        assert result == records
        self.mock_db.execute.assert_called_once()

    @pytest.mark.asyncio
    async def test_count_by_day_normalizes_dates(self):
        """Дни из базы приводятся к строкам YYYY-MM-DD"""
        mock_result = MagicMock()
        mock_result.all.return_value = [(date(2024, 1, 5), 3), ("2024-01-06", 1)]
        self.mock_db.execute.return_value = mock_result

        result = await StatisticService.count_by_day(self.mock_db)

        assert result == {"2024-01-05": 3, "2024-01-06": 1}

    @pytest.mark.asyncio
    async def test_get_count_by_day_uses_utc_today(self):
        """Без явного дня окно строится от текущего дня по UTC"""
        with patch.object(
            StatisticService, "count_by_day", new_callable=AsyncMock, return_value={"2024-01-06": 4}
        ), patch(
            "src.services.statistic_service.utc_today", return_value=date(2024, 1, 6)
        ):
            series = await StatisticService.get_count_by_day(self.mock_db)

        assert len(series) == 32
        assert series[-1].day == "2024-01-06"
        assert series[-1].count == 4

    @pytest.mark.asyncio
    async def test_get_count_by_day_propagates_store_errors(self):
        """Ошибка базы не превращается в частичный результат"""
        self.mock_db.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await StatisticService.get_count_by_day(self.mock_db, today=date(2024, 1, 6))
