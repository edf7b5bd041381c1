import asyncio
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Импортируем логгеры
from src.logs.server_log import api_logger
from src.logs.debug_log import debug_logger

REQUEST_ID_HEADER = "X-Request-ID"


def get_client_host(request: Request) -> str:
    """Адрес клиента с учетом заголовков прокси"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        method = request.method
        url = str(request.url)
        client_host = get_client_host(request)
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        debug_logger.log_request(request, request_id=request_id)

        try:
            response = await call_next(request)
        except Exception as e:
            debug_logger.log_exception(f"Ошибка при обработке запроса {method} {url}")
            api_logger.error(f"Error processing request {method} {url} [{request_id}]: {str(e)}")
            raise

        process_time = time.time() - start_time
        response.headers[REQUEST_ID_HEADER] = request_id

        api_logger.info(
            f"Request: {method} {url} | "
            f"Status: {response.status_code} | "
            f"Client: {client_host} | "
            f"Process Time: {process_time:.3f}s | "
            f"Request ID: {request_id}"
        )
        debug_logger.log_response(response, process_time)

        return response


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Ограничивает время обработки запроса, по истечении отвечает 504"""

    def __init__(self, app, timeout: float = 60.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            api_logger.warning(
                f"Request timed out after {self.timeout:.1f}s: {request.method} {request.url}"
            )
            return Response(status_code=504)
