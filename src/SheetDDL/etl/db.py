"""
db.py
SQLAlchemy engine factory + small helpers used by the database sink.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, Generator, Mapping, Any, Optional
import time

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Connection
from sqlalchemy.engine.url import make_url

from SheetDDL.core.settings import settings
from SheetDDL.core.logging_config import get_logger
from SheetDDL.core.exceptions import ConfigError

logger = get_logger(__name__)
_engines: Dict[str, Engine] = {}


def _masked(url: str) -> str:
    return make_url(url).render_as_string(hide_password=True)


def get_engine(url: Optional[str] = None) -> Engine:
    """
    Return a cached SQLAlchemy Engine for `url` (default: settings.database_url).

    Raises:
        ConfigError: If no database URL is configured
    """
    url = url or settings.database_url
    if not url:
        raise ConfigError("No database URL configured (set DATABASE_URL or pass --database-url)")

    engine = _engines.get(url)
    if engine is not None:
        return engine

    logger.info("Initializing SQLAlchemy engine for %s", _masked(url))
    engine = create_engine(url, pool_pre_ping=True)
    _engines[url] = engine
    return engine


def dispose_engines() -> None:
    """Dispose every cached engine (used by tests and at CLI exit)."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


@contextmanager
def connect(url: Optional[str] = None) -> Generator[Connection, None, None]:
    """Context manager yielding a connection that is always closed."""
    conn = get_engine(url).connect()
    logger.debug("Database connection established")
    try:
        yield conn
    finally:
        conn.close()
        logger.debug("Database connection closed")


def exec_sql(sql: str, params: Mapping[str, Any] | None = None, url: Optional[str] = None) -> None:
    """Execute one statement and commit."""
    logger.debug("Executing SQL: %s", sql[:100] + "..." if len(sql) > 100 else sql)
    start_time = time.time()

    try:
        with connect(url) as conn:
            conn.execute(text(sql), params or {})
            conn.commit()

        duration = (time.time() - start_time) * 1000
        logger.debug("SQL executed successfully in %.2fms", duration)

    except Exception as e:
        duration = (time.time() - start_time) * 1000
        logger.error("SQL execution failed after %.2fms: %s", duration, e, exc_info=True)
        raise
