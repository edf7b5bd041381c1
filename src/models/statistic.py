from datetime import datetime
from sqlalchemy import BigInteger, Column, Integer, String, DateTime

from src.db.base import Base

# Нулевое значение времени для записей без created_at
ZERO_TIME = datetime(1, 1, 1)


class Statistic(Base):
    """Модель одного ответа в викторине по аккордам"""

    __tablename__ = "statistics"

    id = Column(Integer, primary_key=True, index=True)
    chord_name = Column(String, nullable=False, default="")
    root_note = Column(String, nullable=False, default="")
    chord_extension = Column(String, nullable=False, default="")
    answer_duration_millis = Column(BigInteger, nullable=False, default=0)
    # Время в UTC без tzinfo, задается клиентом
    created_at = Column(DateTime, nullable=False, default=ZERO_TIME)
