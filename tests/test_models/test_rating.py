"""Unit tests for the Rating, User, ViewingEvent and TrendingBucket models."""
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from movie_recommendation_service.models import Rating, TrendingBucket, User, ViewingEvent


class TestRatingModel:
    """Tests for the Rating model."""

    def test_rating_creation(self, test_db_session, add_user, add_movie):
        # Arrange
        add_user(1)
        add_movie(10)

        # Act
        test_db_session.add(Rating(user_id=1, movie_id=10, rating=4))
        test_db_session.commit()

        # Assert
        rating = test_db_session.query(Rating).one()
        assert rating.rating == 4
        assert rating.created_at is not None
        assert rating.updated_at is not None

    def test_unique_user_movie_pair(self, test_db_session, add_user, add_movie):
        """Test that a second rating of the same movie by the same user is rejected."""
        # Arrange
        add_user(1)
        add_movie(10)
        test_db_session.add(Rating(user_id=1, movie_id=10, rating=4))
        test_db_session.commit()

        # Act & Assert
        test_db_session.add(Rating(user_id=1, movie_id=10, rating=2))
        with pytest.raises(IntegrityError):
            test_db_session.commit()
        test_db_session.rollback()

    def test_rating_range_check(self, test_db_session, add_user, add_movie):
        # Arrange
        add_user(1)
        add_movie(10)

        # Act & Assert
        test_db_session.add(Rating(user_id=1, movie_id=10, rating=6))
        with pytest.raises(IntegrityError):
            test_db_session.commit()
        test_db_session.rollback()


class TestUserModels:
    """Tests for User and ViewingEvent."""

    def test_user_and_viewing_event(self, test_db_session, add_movie):
        # Arrange
        add_movie(10)
        test_db_session.add(User(user_id=1, username='ana'))
        test_db_session.add(ViewingEvent(user_id=1, movie_id=10, duration_seconds=5400))
        test_db_session.commit()

        # Act
        event = test_db_session.query(ViewingEvent).one()

        # Assert
        assert event.movie_id == 10
        assert event.watched_at is not None
        assert repr(test_db_session.query(User).one()) == "<User(user_id=1, username='ana')>"


class TestTrendingBucketModel:
    """Tests for the TrendingBucket model."""

    def test_bucket_defaults(self, test_db_session):
        # Arrange & Act
        test_db_session.add(TrendingBucket(movie_id=1, period='daily', date_bucket=datetime(2024, 6, 15)))
        test_db_session.commit()

        # Assert
        bucket = test_db_session.query(TrendingBucket).one()
        assert bucket.score == 0.0
        assert bucket.view_count == 0
        assert bucket.favorite_count == 0

    def test_composite_key_is_unique(self, test_db_session):
        # Arrange
        day = datetime(2024, 6, 15)
        test_db_session.add(TrendingBucket(movie_id=1, period='daily', date_bucket=day))
        test_db_session.commit()
        test_db_session.expunge_all()

        # Act & Assert
        test_db_session.add(TrendingBucket(movie_id=1, period='daily', date_bucket=day))
        with pytest.raises(IntegrityError):
            test_db_session.commit()
        test_db_session.rollback()
