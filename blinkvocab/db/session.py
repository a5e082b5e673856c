"""Database engine, session factory and unit-of-work helper."""
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from blinkvocab.config import settings
from blinkvocab.utils.exceptions import PersistenceFailure


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Keep objects usable after commit
)


def get_db() -> Iterator[Session]:
    """Yield a database session for request lifecycle."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def transaction(db: Session, *, operation: str = "unit of work") -> Iterator[Session]:
    """Commit everything written inside the block, or nothing at all.

    Database errors are rolled back and re-raised as ``PersistenceFailure``;
    any other exception is rolled back and propagated unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"{operation} rolled back: {exc}")
        raise PersistenceFailure(f"{operation} failed", details={"operation": operation}) from exc
    except Exception:
        db.rollback()
        raise
