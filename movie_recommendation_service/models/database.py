"""Engine and session factory for the signal store."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from movie_recommendation_service.config import get_database_url

# Seconds a SQLite writer waits for the file lock before failing
SQLITE_BUSY_TIMEOUT = 30


def create_signal_store_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for the signal store.

    SQLite connections may be shared across worker threads and wait on the
    file lock instead of failing immediately; other backends get a
    pre-ping and hourly recycle.

    Args:
        url: SQLAlchemy database URL
        **kwargs: Extra create_engine arguments (e.g. isolation_level)
    """
    if make_url(url).get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT})
    else:
        kwargs.setdefault("pool_pre_ping", True)
        kwargs.setdefault("pool_recycle", 3600)
    return create_engine(url, echo=False, **kwargs)


DATABASE_URL = get_database_url()

if DATABASE_URL is None:
    raise ValueError("DATABASE_URL is not configured. Set the DATABASE_URL environment variable.")

engine = create_signal_store_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
