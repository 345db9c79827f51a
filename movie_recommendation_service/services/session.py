"""Unit-of-work helper shared by the services."""
import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from movie_recommendation_service.errors import DependencyFailureError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def default_session_factory() -> SessionFactory:
    """The application's configured sessionmaker."""
    from movie_recommendation_service.models.database import SessionLocal
    return SessionLocal


@contextmanager
def signal_store_session(session_factory: SessionFactory) -> Iterator[Session]:
    """
    Open a session, translating storage errors into DependencyFailureError.

    Engine errors (NotFound, InvalidArgument, ...) pass through untouched.
    """
    db = session_factory()
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Signal store error: {e}")
        raise DependencyFailureError(f"Signal store unavailable: {e.__class__.__name__}") from e
    finally:
        db.close()
