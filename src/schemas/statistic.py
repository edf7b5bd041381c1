import json
from datetime import datetime, timezone
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_serializer, field_validator

from src.core.errors import InvalidPayloadError
from src.models.statistic import ZERO_TIME

# Длительность хранится как 64-битное целое
MAX_DURATION_MILLIS = 2**63 - 1


class StatisticBase(BaseModel):
    """Базовая схема записи статистики ответа"""
    chord_name: str = Field("", description="Название аккорда")
    root_note: str = Field("", description="Тоника")
    chord_extension: str = Field("", description="Расширение аккорда")
    answer_duration_millis: int = Field(
        0,
        ge=0,
        le=MAX_DURATION_MILLIS,
        validation_alias=AliasChoices("answer_duration_millis", "answer_duration_ms"),
        description="Время ответа в миллисекундах",
    )
    created_at: datetime = Field(ZERO_TIME, description="Время ответа, задается клиентом")


class StatisticCreate(StatisticBase):
    """Схема для создания записи статистики"""

    @field_validator("created_at")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Время без часового пояса уже считается UTC
        if value.tzinfo is not None:
            try:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError as exc:
                raise ValueError("created_at is out of range in UTC") from exc
        return value


class StatisticResponse(StatisticBase):
    """Схема ответа с записью статистики"""

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")

    class Config:
        from_attributes = True


class DailyCount(BaseModel):
    """Количество ответов за один день"""
    day: str = Field(..., description="День в формате YYYY-MM-DD")
    count: int = Field(0, description="Количество записей за день")


def decode_statistic_payload(
    body: bytes,
    policy: Literal["accept", "reject"] = "accept",
) -> StatisticCreate:
    """
    Разобрать тело POST /stats.

    При политике "accept" тело, которое не является JSON-объектом, дает
    нулевую запись, а поля неверного типа или вне допустимого диапазона
    получают нулевое значение. При политике "reject" в этих случаях
    выбрасывается InvalidPayloadError.
    """
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as exc:
        if policy == "reject":
            raise InvalidPayloadError("body is not valid JSON") from exc
        return StatisticCreate()

    if not isinstance(data, dict):
        if policy == "reject":
            raise InvalidPayloadError("body is not a JSON object")
        return StatisticCreate()

    try:
        return StatisticCreate.model_validate(data)
    except ValidationError as exc:
        if policy == "reject":
            raise InvalidPayloadError(str(exc)) from exc
        invalid = {error["loc"][0] for error in exc.errors() if error["loc"]}

    cleaned = {key: value for key, value in data.items() if key not in invalid}
    try:
        return StatisticCreate.model_validate(cleaned)
    except ValidationError:
        return StatisticCreate()
