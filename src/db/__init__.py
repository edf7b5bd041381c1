from src.db.database import (
    create_engine,
    create_session_factory,
    get_async_session,
    init_db,
    ping_db,
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "get_async_session",
    "init_db",
    "ping_db",
]
