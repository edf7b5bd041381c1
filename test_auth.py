import pytest
from unittest.mock import MagicMock
from fastapi import HTTPException, status

from src.api.dependencies.auth import verify_auth_token


class TestVerifyAuthToken:
    """Юниттесты для проверки заголовка X-Auth-Token"""

    def setup_method(self):
        """Настройка для каждого теста"""
        self.mock_request = MagicMock()
        self.mock_request.app.state.settings.AUTH_TOKEN = "s3cret"

    @pytest.mark.asyncio
    async def test_matching_token(self):
        """Совпадающий токен пропускает запрос дальше"""
        result = await verify_auth_token(self.mock_request, x_auth_token="s3cret")

        assert result is None

    @pytest.mark.asyncio
    async def test_missing_token(self):
        """Без заголовка запрос отклоняется"""
        with pytest.raises(HTTPException) as exc_info:
            await verify_auth_token(self.mock_request, x_auth_token=None)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["wrong", "", "S3CRET", "s3cret ", "s3cre"])
    async def test_mismatched_token(self, token):
        """Сравнение побайтовое, без нормализации"""
        with pytest.raises(HTTPException) as exc_info:
            await verify_auth_token(self.mock_request, x_auth_token=token)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Unauthorized"

    @pytest.mark.asyncio
    async def test_non_ascii_token_compared_as_bytes(self):
        """Заголовок приходит как latin-1 строка из UTF-8 байт клиента"""
        self.mock_request.app.state.settings.AUTH_TOKEN = "пароль"
        header_value = "пароль".encode("utf-8").decode("latin-1")

        result = await verify_auth_token(self.mock_request, x_auth_token=header_value)

        assert result is None

    @pytest.mark.asyncio
    async def test_non_ascii_token_mismatch(self):
        self.mock_request.app.state.settings.AUTH_TOKEN = "пароль"
        header_value = "пароли".encode("utf-8").decode("latin-1")

        with pytest.raises(HTTPException) as exc_info:
            await verify_auth_token(self.mock_request, x_auth_token=header_value)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
