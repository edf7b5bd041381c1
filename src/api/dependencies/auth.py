import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request, status


async def verify_auth_token(
    request: Request,
    x_auth_token: Optional[str] = Header(None),
) -> None:
    """
    Check the X-Auth-Token header against the configured shared secret

    Starlette decodes header values as latin-1, so encoding back with
    latin-1 restores the exact bytes the client sent.

    Raises:
        HTTPException: 401 if the header is missing or does not match
    """
    expected = request.app.state.settings.AUTH_TOKEN
    if x_auth_token is None or not secrets.compare_digest(
        x_auth_token.encode("latin-1"), expected.encode("utf-8")
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
