from shared.database.postgres import (
    Base,
    JSONDocument,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "JSONDocument",
    "get_async_engine",
    "get_async_session_factory",
]
