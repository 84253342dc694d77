import os
import copy
import logging
import functools
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, ParamSpec, TypeVar

import psycopg

from paywall.errors import DatabaseUnavailableError, InternalError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


@dataclass
class DatabaseProvider:
    """Owns the database location and hands out connections and cursors.

    A provider without a URL is "unavailable": every attempt to connect raises
    DatabaseUnavailableError rather than returning None, so callers decide
    explicitly how to degrade.
    """

    url: Optional[str]

    @classmethod
    def from_env(cls) -> "DatabaseProvider":
        return cls(url=os.getenv("DATABASE_URL") or None)

    @property
    def available(self) -> bool:
        return bool(self.url)

    @contextmanager
    def connection(self) -> Iterator[psycopg.Connection]:
        """Get a database connection context manager.

        Explicitly closes the connection to ensure proper cleanup in serverless environments.
        """
        if not self.url:
            raise DatabaseUnavailableError()
        try:
            conn = psycopg.connect(self.url)
        except psycopg.OperationalError as e:
            logger.error(f"Could not connect to the database: {e}")
            raise InternalError("Database unavailable") from e
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def cursor(self) -> Iterator[psycopg.Cursor]:
        """Get a database cursor context manager.

        Automatically commits the transaction on successful completion,
        or rolls back on exception.
        """
        with self.connection() as conn:
            with conn.cursor() as cursor:
                try:
                    yield cursor
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise


_provider: Optional[DatabaseProvider] = None


def get_provider() -> DatabaseProvider:
    """Get the process-wide provider, creating it from the environment on first use."""
    global _provider
    if _provider is None:
        _provider = DatabaseProvider.from_env()
        if not _provider.available:
            logger.warning(
                "DATABASE_URL is not set; reads will return no data and writes will fail"
            )
    return _provider


def set_provider(provider: Optional[DatabaseProvider]) -> None:
    """Install a specific provider (tests, tooling). Pass None to re-read the environment."""
    global _provider
    _provider = provider


def get_database_url() -> str:
    """Get the database URL, raising if none is configured."""
    url = get_provider().url
    if not url:
        raise DatabaseUnavailableError()
    return url


def get_sqlalchemy_database_url() -> str:
    """Get the database URL formatted for SQLAlchemy.

    Automatically converts postgresql:// to postgresql+psycopg://
    to ensure psycopg3 is used instead of psycopg2.
    """
    url = get_database_url()
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@contextmanager
def get_db_cursor() -> Iterator[psycopg.Cursor]:
    with get_provider().cursor() as cursor:
        yield cursor


def degrade_when_unavailable(
    default: T,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Make a read function return `default` instead of failing without a database.

    Only use this on reads: an unconfigured database is treated as "no data".
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except DatabaseUnavailableError:
                logger.warning(
                    f"Cannot run {func.__name__}: database not available"
                )
                return copy.copy(default)

        return wrapper

    return decorator
