"""
Transaction scopes for mutating store operations.

``transaction()`` opens one unit of work on a request's session and hands
out a ``Transaction`` object.  Repository mutations take that object rather
than a bare session, so a write can only happen inside a scope that will
either commit or roll back.

Reads never open a transaction; they use ``store_errors()`` to get the same
error translation without the commit/rollback.
"""
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CatalogError, PersistenceFailed

logger = logging.getLogger(__name__)


class Transaction:
    """Handle on an open unit of work.  Only valid inside its ``async with``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.open = True

    @property
    def session(self) -> AsyncSession:
        if not self.open:
            raise RuntimeError("Transaction is already closed")
        return self._session


@asynccontextmanager
async def transaction(db: AsyncSession, failure: str) -> AsyncIterator[Transaction]:
    """
    Run the body as one atomic unit against *db*.

    Commits when the body finishes.  Any exception, including one raised by
    the commit itself, rolls everything back.  ``CatalogError`` subclasses
    propagate unchanged; every other exception is re-raised as
    ``PersistenceFailed(failure)`` with the original chained as its cause.
    """
    tx = Transaction(db)
    try:
        yield tx
        await db.commit()
    except CatalogError:
        await db.rollback()
        raise
    except Exception as exc:
        await db.rollback()
        logger.warning("Transaction rolled back (%s): %s", failure, exc, exc_info=True)
        raise PersistenceFailed(failure, exc) from exc
    finally:
        tx.open = False


@contextmanager
def store_errors(failure: str) -> Iterator[None]:
    """Translate unexpected errors raised by a read into ``PersistenceFailed``."""
    try:
        yield
    except CatalogError:
        raise
    except Exception as exc:
        logger.warning("Store read failed (%s): %s", failure, exc, exc_info=True)
        raise PersistenceFailed(failure, exc) from exc
