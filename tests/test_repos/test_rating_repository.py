"""Unit tests for movie_recommendation_service.repos.rating_repository."""
import pytest

from movie_recommendation_service.errors import AlreadyExistsError, NotFoundError
from movie_recommendation_service.models import Rating
from movie_recommendation_service.repos.rating_repository import RatingRepository


@pytest.fixture
def rating_repository(test_db_session):
    return RatingRepository(test_db_session)


@pytest.fixture
def rated_catalog(sample_catalog, add_user, add_rating):
    """Three users with overlapping ratings."""
    for user_id in (1, 2, 3):
        add_user(user_id)
    add_rating(1, 1, 5)
    add_rating(1, 3, 2)
    add_rating(2, 1, 4)
    add_rating(2, 2, 5)
    add_rating(3, 4, 1)
    return sample_catalog


class TestRatingQueries:
    """Tests for the rating read methods."""

    def test_get_user_ratings(self, rating_repository, rated_catalog):
        ratings = rating_repository.get_user_ratings(1)

        assert [(r.movie_id, r.rating) for r in ratings] == [(1, 5), (3, 2)]

    def test_get_user_ratings_with_movies(self, rating_repository, rated_catalog):
        # Act
        rows = rating_repository.get_user_ratings_with_movies(2)

        # Assert
        assert [(rating.rating, movie.title) for rating, movie in rows] == [
            (4, 'Star Raid'),
            (5, 'Fist of Steel'),
        ]

    def test_get_ratings_for_movies(self, rating_repository, rated_catalog):
        ratings = rating_repository.get_ratings_for_movies([1])

        assert sorted(r.user_id for r in ratings) == [1, 2]

    def test_get_ratings_for_users(self, rating_repository, rated_catalog):
        ratings = rating_repository.get_ratings_for_users([2, 3])

        assert sorted((r.user_id, r.movie_id) for r in ratings) == [(2, 1), (2, 2), (3, 4)]

    def test_empty_id_lists(self, rating_repository):
        assert rating_repository.get_ratings_for_movies([]) == []
        assert rating_repository.get_ratings_for_users([]) == []

    def test_get_all_rating_user_ids(self, rating_repository, rated_catalog, add_user):
        add_user(4)  # no ratings

        assert rating_repository.get_all_rating_user_ids() == [1, 2, 3]

    def test_get_rating_vectors(self, rating_repository, rated_catalog):
        vectors = rating_repository.get_rating_vectors()

        assert vectors == {1: {1: 5, 3: 2}, 2: {1: 4, 2: 5}, 3: {4: 1}}

    def test_count_ratings(self, rating_repository, rated_catalog):
        assert rating_repository.count_ratings() == 5
        assert rating_repository.count_ratings(user_id=2) == 2


class TestRatingWrites:
    """Tests for creating and updating ratings."""

    def test_create_rating(self, rating_repository, test_db_session, sample_catalog, add_user):
        # Arrange
        add_user(1)

        # Act
        rating = rating_repository.create_rating(1, 2, 4)

        # Assert
        assert rating.id is not None
        assert test_db_session.query(Rating).count() == 1

    def test_create_rating_twice_is_rejected(self, rating_repository, test_db_session, sample_catalog, add_user):
        """Test that at most one rating exists per (user, movie) pair."""
        # Arrange
        add_user(1)
        rating_repository.create_rating(1, 2, 4)

        # Act & Assert
        with pytest.raises(AlreadyExistsError):
            rating_repository.create_rating(1, 2, 1)
        assert test_db_session.query(Rating).filter_by(user_id=1, movie_id=2).count() == 1

    def test_create_rating_integrity_race(self, rating_repository, test_db_session, sample_catalog, add_user,
                                          add_rating, monkeypatch):
        """Test that a unique-constraint violation is reported as AlreadyExistsError."""
        # Arrange
        add_user(1)
        add_rating(1, 2, 4)
        monkeypatch.setattr(rating_repository, 'get_rating', lambda user_id, movie_id: None)

        # Act & Assert
        with pytest.raises(AlreadyExistsError):
            rating_repository.create_rating(1, 2, 3)

    def test_update_rating(self, rating_repository, rated_catalog):
        # Act
        rating = rating_repository.update_rating(1, 3, 4)

        # Assert
        assert rating.rating == 4
        assert rating_repository.get_rating(1, 3).rating == 4

    def test_update_missing_rating(self, rating_repository, rated_catalog):
        with pytest.raises(NotFoundError):
            rating_repository.update_rating(3, 1, 4)
