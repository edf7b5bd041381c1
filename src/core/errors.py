from fastapi import Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.logs import debug_logger


class InvalidPayloadError(ValueError):
    """Тело запроса не удалось разобрать как запись статистики"""


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Об ошибке сообщает только код статуса, тело пустое
    return Response(status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    debug_logger.error(f"Необработанная ошибка в {request.method} {request.url.path}: {exc}")
    return Response(status_code=500)
