"""Repository for user ratings."""

import logging
from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from movie_recommendation_service.errors import AlreadyExistsError, NotFoundError
from movie_recommendation_service.models import Movie, Rating

logger = logging.getLogger(__name__)


class RatingRepository:
    """
    Repository for user ratings.
    """

    def __init__(self, db: Session):
        self.db = db

    # noinspection PyTypeChecker
    def get_user_ratings(self, user_id: int) -> list[Rating]:
        """Get all ratings by a user."""
        return (
            self.db.query(Rating)
            .filter(Rating.user_id == user_id)
            .order_by(Rating.movie_id)
            .all()
        )

    # noinspection PyTypeChecker
    def get_user_ratings_with_movies(self, user_id: int) -> list[tuple[Rating, Movie]]:
        """
        Get a user's ratings joined with the rated movies.

        Args:
            user_id: User ID

        Returns:
            List of (Rating, Movie) tuples
        """
        return (
            self.db.query(Rating, Movie)
            .join(Movie, Rating.movie_id == Movie.movie_id)
            .filter(Rating.user_id == user_id)
            .order_by(Rating.movie_id)
            .all()
        )

    # noinspection PyTypeChecker
    def get_ratings_for_movies(self, movie_ids: Iterable[int]) -> list[Rating]:
        """Get every rating of the given movies."""
        ids = list(movie_ids)
        if not ids:
            return []
        return self.db.query(Rating).filter(Rating.movie_id.in_(ids)).all()

    # noinspection PyTypeChecker
    def get_ratings_for_users(self, user_ids: Iterable[int]) -> list[Rating]:
        """Get every rating made by the given users."""
        ids = list(user_ids)
        if not ids:
            return []
        return self.db.query(Rating).filter(Rating.user_id.in_(ids)).all()

    # noinspection PyTypeChecker
    def get_all_rating_user_ids(self) -> list[int]:
        """Get list of all user IDs with at least one rating."""
        result = self.db.query(Rating.user_id).distinct().order_by(Rating.user_id).all()
        return [row[0] for row in result]

    def get_rating_vectors(self) -> dict[int, dict[int, int]]:
        """
        Load every rating as per-user vectors.

        Returns:
            Dict mapping user_id to {movie_id: rating}
        """
        vectors: dict[int, dict[int, int]] = defaultdict(dict)
        rows = self.db.query(Rating.user_id, Rating.movie_id, Rating.rating).all()
        for user_id, movie_id, value in rows:
            vectors[user_id][movie_id] = value
        return dict(vectors)

    def get_rating(self, user_id: int, movie_id: int) -> Rating | None:
        """Get a single user's rating of a movie."""
        return (
            self.db.query(Rating)
            .filter(Rating.user_id == user_id, Rating.movie_id == movie_id)
            .first()
        )

    def create_rating(self, user_id: int, movie_id: int, value: int) -> Rating:
        """
        Insert a new rating.

        Args:
            user_id: User ID
            movie_id: Movie ID
            value: Rating value (1-5)

        Returns:
            The created Rating

        Raises:
            AlreadyExistsError: The user has already rated this movie
        """
        if self.get_rating(user_id, movie_id) is not None:
            raise AlreadyExistsError(f"User {user_id} has already rated movie {movie_id}")

        rating = Rating(user_id=user_id, movie_id=movie_id, rating=value)
        self.db.add(rating)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same pair
            self.db.rollback()
            raise AlreadyExistsError(f"User {user_id} has already rated movie {movie_id}")

        self.db.refresh(rating)
        return rating

    def update_rating(self, user_id: int, movie_id: int, value: int) -> Rating:
        """
        Change an existing rating in place.

        Raises:
            NotFoundError: No rating exists for this pair
        """
        rating = self.get_rating(user_id, movie_id)
        if rating is None:
            raise NotFoundError(f"User {user_id} has not rated movie {movie_id}")

        rating.rating = value  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(rating)
        return rating

    def count_ratings(self, user_id: int | None = None) -> int:
        """
        Count rating records.

        Args:
            user_id: If provided, count for specific user. Otherwise count all.

        Returns:
            Number of ratings
        """
        query = self.db.query(Rating)

        if user_id is not None:
            query = query.filter(Rating.user_id == user_id)

        return query.count()
