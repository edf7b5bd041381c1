import logging
import sys
import json
import inspect
import traceback
from pathlib import Path

# Directory for log files, created on first setup
log_dir = Path(__file__).parent

# Константы для цветного вывода
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
CYAN = '\033[96m'
BOLD = '\033[1m'
END = '\033[0m'

# Заголовки, значения которых не должны попадать в лог
REDACTED_HEADERS = {"x-auth-token", "authorization", "cookie"}


def redact_headers(headers) -> dict:
    return {
        key: ("***" if key.lower() in REDACTED_HEADERS else value)
        for key, value in dict(headers).items()
    }


class DebugLogger:
    """Расширенный логгер для дебага с подробной информацией и цветным выводом"""

    def __init__(self, name="debug", level=logging.DEBUG, directory: Path = log_dir):
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.configure(directory, level)

    def configure(self, directory: Path, level: int):
        """Пересоздать обработчики с новым каталогом и уровнем"""
        self.logger.setLevel(level)

        # Очищаем handlers если они уже были добавлены
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        )

        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(directory / "debug.log", encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def debug(self, message, *args, **kwargs):
        """Дебаг лог с информацией о вызывающем коде"""
        frame = inspect.currentframe().f_back
        filename = frame.f_code.co_filename
        lineno = frame.f_lineno
        function = frame.f_code.co_name

        # Получаем относительный путь к файлу
        src_index = filename.find("src")
        if src_index != -1:
            filename = filename[src_index:]

        caller_info = f"{BLUE}[{filename}:{lineno} - {function}]{END}"
        self.logger.debug(f"{caller_info} {message}", *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(f"{GREEN}{message}{END}", *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(f"{YELLOW}{message}{END}", *args, **kwargs)

    def error(self, message, *args, **kwargs):
        """Лог ошибок с трейсом текущего исключения, если оно есть"""
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.error(f"{RED}{message}{END}", *args, **kwargs)

    def critical(self, message, *args, **kwargs):
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.critical(f"{BOLD}{RED}{message}{END}", *args, **kwargs)

    def log_exception(self, message="Произошло исключение"):
        """Логирование исключения с трейсом"""
        exc_type, exc_value, _ = sys.exc_info()
        if exc_type:
            self.error(f"{message}: {exc_type.__name__}: {exc_value}")
        else:
            self.error(message)

    def log_request(self, request, request_id=None):
        """Логирование входящего HTTP запроса"""
        method = getattr(request, 'method', 'UNKNOWN')
        url = str(getattr(request, 'url', 'UNKNOWN'))
        client = getattr(request, 'client', None)
        client_host = client.host if client else "unknown"
        headers = redact_headers(getattr(request, 'headers', {}))

        info = (
            f"{CYAN}HTTP запрос:{END} {method} {url}\n"
            f"{CYAN}Клиент:{END} {client_host}\n"
            f"{CYAN}Заголовки:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )

        if request_id:
            info += f"\n{CYAN}Request ID:{END} {request_id}"

        self.debug(info)

    def log_response(self, response, process_time=None):
        """Логирование исходящего HTTP ответа"""
        status_code = getattr(response, 'status_code', 0)
        headers = dict(getattr(response, 'headers', {}))

        color = GREEN if 200 <= status_code < 400 else YELLOW if 400 <= status_code < 500 else RED

        info = (
            f"{CYAN}HTTP ответ:{END} {color}Статус {status_code}{END}\n"
            f"{CYAN}Заголовки:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )

        if process_time is not None:
            info += f"\n{CYAN}Время обработки:{END} {process_time:.3f}с"

        self.debug(info)


# Создаем глобальный экземпляр логгера для дебага
debug_logger = DebugLogger()
