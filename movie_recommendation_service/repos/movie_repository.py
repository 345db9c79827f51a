"""Repository for movie records and their engagement counters."""

import logging
from collections.abc import Iterable

from sqlalchemy import desc, func, update
from sqlalchemy.orm import Session

from movie_recommendation_service.models import Movie, Rating

logger = logging.getLogger(__name__)

MOVIE_COUNTERS = ("view_count", "rating_count", "review_count")


class MovieRepository:
    """
    Repository for movie records and their engagement counters.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_movie(self, movie_id: int) -> Movie | None:
        """Get movie by ID."""
        return self.db.query(Movie).filter(Movie.movie_id == movie_id).first()

    # noinspection PyTypeChecker
    def get_movies_by_ids(self, movie_ids: Iterable[int], active_only: bool = True) -> dict[int, Movie]:
        """
        Load several movies at once.

        Args:
            movie_ids: IDs to load
            active_only: Skip inactive movies

        Returns:
            Dict mapping movie_id to Movie
        """
        ids = list(movie_ids)
        if not ids:
            return {}
        query = self.db.query(Movie).filter(Movie.movie_id.in_(ids))
        if active_only:
            query = query.filter(Movie.is_active.is_(True))
        return {movie.movie_id: movie for movie in query.all()}

    # noinspection PyTypeChecker
    def list_active_movies(self, exclude_ids: Iterable[int] | None = None) -> list[Movie]:
        """
        List active movies, ordered by ID.

        Args:
            exclude_ids: Movie IDs to leave out

        Returns:
            List of Movie objects
        """
        query = self.db.query(Movie).filter(Movie.is_active.is_(True))
        excluded = list(exclude_ids or [])
        if excluded:
            query = query.filter(Movie.movie_id.notin_(excluded))
        return query.order_by(Movie.movie_id).all()

    # noinspection PyTypeChecker
    def list_active_movie_ids(self) -> list[int]:
        """Get list of all active movie IDs, ascending."""
        result = (
            self.db.query(Movie.movie_id)
            .filter(Movie.is_active.is_(True))
            .order_by(Movie.movie_id)
            .all()
        )
        return [row[0] for row in result]

    def count_active(self) -> int:
        """Count active movies."""
        return self.db.query(Movie).filter(Movie.is_active.is_(True)).count()

    def _top_rated_query(self, min_rating_count: int):
        return self.db.query(Movie).filter(
            Movie.is_active.is_(True),
            Movie.avg_rating.isnot(None),
            Movie.rating_count >= min_rating_count,
        )

    # noinspection PyTypeChecker
    def list_top_rated(self, min_rating_count: int, offset: int, limit: int) -> list[Movie]:
        """
        Active movies with an aggregate rating, best first.

        Args:
            min_rating_count: Minimum number of ratings a movie needs
            offset: Rows to skip
            limit: Rows to return

        Returns:
            List of Movie objects sorted by avg_rating desc, newest first on ties
        """
        return (
            self._top_rated_query(min_rating_count)
            .order_by(desc(Movie.avg_rating), desc(Movie.created_at), Movie.movie_id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_top_rated(self, min_rating_count: int) -> int:
        """Count movies eligible for the top-rated list."""
        return self._top_rated_query(min_rating_count).count()

    # noinspection PyTypeChecker
    def list_newest(self, offset: int, limit: int) -> list[Movie]:
        """Active movies, most recently added first."""
        return (
            self.db.query(Movie)
            .filter(Movie.is_active.is_(True))
            .order_by(desc(Movie.created_at), desc(Movie.movie_id))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def increment_counter(self, movie_id: int, counter: str, amount: int = 1) -> bool:
        """
        Atomically increment one of the movie's engagement counters.

        Args:
            movie_id: Movie ID
            counter: One of view_count, rating_count, review_count
            amount: Increment

        Returns:
            True if the movie exists
        """
        if counter not in MOVIE_COUNTERS:
            raise ValueError(f"Unknown movie counter: {counter}")

        column = getattr(Movie, counter)
        result = self.db.execute(
            update(Movie)
            .where(Movie.movie_id == movie_id)
            .values({counter: column + amount})
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount > 0

    def refresh_rating_aggregate(self, movie_id: int) -> tuple[float | None, int]:
        """
        Recompute avg_rating and rating_count from the ratings table.

        Args:
            movie_id: Movie ID

        Returns:
            (avg_rating, rating_count) tuple
        """
        avg_rating, rating_count = (
            self.db.query(func.avg(Rating.rating), func.count(Rating.id))
            .filter(Rating.movie_id == movie_id)
            .one()
        )
        avg_value = float(avg_rating) if avg_rating is not None else None

        self.db.execute(
            update(Movie)
            .where(Movie.movie_id == movie_id)
            .values(avg_rating=avg_value, rating_count=rating_count)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return avg_value, rating_count

    def update_movie_popularity(self, movie_id: int, value: float) -> bool:
        """
        Store a recomputed popularity score.

        Args:
            movie_id: Movie ID
            value: New popularity

        Returns:
            True if updated, False if not found
        """
        result = self.db.execute(
            update(Movie)
            .where(Movie.movie_id == movie_id)
            .values(popularity=value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount > 0

    # noinspection PyTypeChecker
    def get_all_movie_ids(self) -> list[int]:
        """Get list of all movie IDs, active or not."""
        result = self.db.query(Movie.movie_id).order_by(Movie.movie_id).all()
        return [row[0] for row in result]
