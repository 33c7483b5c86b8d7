# db/engine.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from api.app.config import get_settings

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settings()
        kwargs = {}
        if not settings.database_url.startswith("sqlite"):
            kwargs = {"pool_size": settings.db_pool_size, "max_overflow": settings.db_max_overflow}
        _engine = create_async_engine(settings.database_url, echo=settings.db_echo, **kwargs)
    return _engine
