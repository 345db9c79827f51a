"""Shared test fixtures and configuration for pytest."""
import os

# Blueprint modules build their services (and the engine) at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import UTC, date, datetime, timedelta
from typing import Callable, List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from movie_recommendation_service.models import Movie, Rating, User, ViewingEvent
from movie_recommendation_service.models.base import Base

FIXED_NOW = datetime(2024, 6, 15, 12, 30, tzinfo=UTC)


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=test_db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def session_factory(test_db_engine):
    """Session factory handed to the services (same in-memory database)."""
    return sessionmaker(bind=test_db_engine)


# ===== Clock Fixtures =====

@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now) -> Callable[[], datetime]:
    return lambda: fixed_now


# ===== Sample Data Fixtures =====

@pytest.fixture
def add_movie(test_db_session) -> Callable[..., Movie]:
    """Insert a movie; keyword arguments override the defaults."""

    def _add(movie_id: int, **fields) -> Movie:
        values = {
            'title': f'Movie {movie_id}',
            'genres': [],
            'rating_count': 0,
            'view_count': 0,
            'review_count': 0,
            'popularity': 0.0,
            'is_active': True,
            'created_at': datetime(2024, 1, 1) + timedelta(days=movie_id),
        }
        values.update(fields)
        movie = Movie(movie_id=movie_id, **values)
        test_db_session.add(movie)
        test_db_session.commit()
        return movie

    return _add


@pytest.fixture
def add_user(test_db_session) -> Callable[..., User]:
    def _add(user_id: int, username: str | None = None) -> User:
        user = User(user_id=user_id, username=username or f'user{user_id}')
        test_db_session.add(user)
        test_db_session.commit()
        return user

    return _add


@pytest.fixture
def add_rating(test_db_session) -> Callable[..., Rating]:
    def _add(user_id: int, movie_id: int, value: int) -> Rating:
        rating = Rating(user_id=user_id, movie_id=movie_id, rating=value)
        test_db_session.add(rating)
        test_db_session.commit()
        return rating

    return _add


@pytest.fixture
def add_view(test_db_session) -> Callable[..., ViewingEvent]:
    def _add(user_id: int, movie_id: int, watched_at: datetime = datetime(2024, 6, 1)) -> ViewingEvent:
        event = ViewingEvent(user_id=user_id, movie_id=movie_id, watched_at=watched_at)
        test_db_session.add(event)
        test_db_session.commit()
        return event

    return _add


@pytest.fixture
def sample_catalog(add_movie) -> List[Movie]:
    """Five active movies and one inactive one."""
    return [
        add_movie(
            1, title='Star Raid', genres=['Action', 'Sci-Fi'], avg_rating=4.0, rating_count=12,
            release_date=date(2020, 5, 1), director='Ana Ruiz',
            cast=[{'name': 'Lee Park', 'role': 'Pilot', 'order': 0}],
        ),
        add_movie(
            2, title='Fist of Steel', genres=['Action'], avg_rating=4.0, rating_count=15,
            release_date=date(2020, 8, 1), director='Ana Ruiz',
            cast=[{'name': 'Lee Park', 'role': 'Hero', 'order': 0}],
        ),
        add_movie(
            3, title='Quiet Fields', genres=['Drama'], avg_rating=3.0, rating_count=11,
            release_date=date(1995, 3, 1), director='Tom Berg',
            cast=[{'name': 'Mia Holt', 'role': 'Farmer', 'order': 0}],
        ),
        add_movie(
            4, title='The Cellar', genres=['Horror'], avg_rating=4.5, rating_count=3,
            release_date=date(2018, 10, 31), director='Kim Vos',
        ),
        add_movie(
            5, title='Nebula Drift', genres=['Sci-Fi', 'Drama'], avg_rating=None, rating_count=0,
            release_date=date(2023, 1, 20), director='Ana Ruiz',
        ),
        add_movie(
            6, title='Lost Reel', genres=['Action'], avg_rating=5.0, rating_count=40,
            release_date=date(2001, 1, 1), is_active=False,
        ),
    ]
