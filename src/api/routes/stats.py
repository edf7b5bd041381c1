from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_async_session
from src.api.dependencies.auth import verify_auth_token
from src.core.errors import InvalidPayloadError
from src.schemas.statistic import StatisticResponse, decode_statistic_payload
from src.services.statistic_service import StatisticService
from src.logs import api_logger, debug_logger

# Все маршруты /stats закрыты общим секретом
router = APIRouter(
    prefix="/stats",
    tags=["stats"],
    dependencies=[Depends(verify_auth_token)],
)


@router.post("")
async def add_stats(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """Сохранение одной записи статистики из тела запроса"""
    body = await request.body()
    policy = request.app.state.settings.INVALID_PAYLOAD_POLICY

    try:
        stats = decode_statistic_payload(body, policy)
    except InvalidPayloadError as e:
        api_logger.warning(f"Rejected statistics payload: {e}")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await StatisticService.create(db, stats)
    except SQLAlchemyError:
        await db.rollback()
        debug_logger.log_exception("Не удалось сохранить запись статистики")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_200_OK)


@router.get("/raw")
async def get_stats_raw(db: AsyncSession = Depends(get_async_session)):
    """
    Все записи статистики одним массивом.

    Пагинации нет: каждый вызов возвращает всю историю. Длительность
    ответа всегда отдается в поле answer_duration_millis, даже если запись
    была отправлена с синонимом answer_duration_ms.
    """
    try:
        records = await StatisticService.get_all(db)
        payload = [
            StatisticResponse.model_validate(record).model_dump(mode="json")
            for record in records
        ]
    except (SQLAlchemyError, ValueError):
        await db.rollback()
        debug_logger.log_exception("Не удалось получить записи статистики")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(content=payload, status_code=status.HTTP_200_OK)


@router.get("/count_by_day")
async def get_count_by_day(db: AsyncSession = Depends(get_async_session)):
    """Количество ответов по дням за последние 32 дня, от старых к новым"""
    try:
        series = await StatisticService.get_count_by_day(db)
        payload = [entry.model_dump(mode="json") for entry in series]
    except (SQLAlchemyError, ValueError):
        await db.rollback()
        debug_logger.log_exception("Не удалось посчитать статистику по дням")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
