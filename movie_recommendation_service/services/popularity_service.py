"""Service for recomputing movie popularity from current engagement counters."""
from typing import Optional
import logging

from movie_recommendation_service.clock import Clock, utc_now
from movie_recommendation_service.errors import NotFoundError
from movie_recommendation_service.ml.popularity import compute_popularity
from movie_recommendation_service.models import Movie
from movie_recommendation_service.repos import MovieRepository
from movie_recommendation_service.services.session import (
    SessionFactory,
    default_session_factory,
    signal_store_session,
)

logger = logging.getLogger(__name__)


class PopularityService:
    """
    Service for popularity recomputation.
    Popularity is always rebuilt from the movie's current counters, never accumulated.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None, clock: Clock = utc_now):
        self.session_factory = session_factory or default_session_factory()
        self.clock = clock

    def _popularity_for(self, movie: Movie) -> float:
        return compute_popularity(
            view_count=movie.view_count,
            rating_count=movie.rating_count,
            review_count=movie.review_count,
            avg_rating=movie.avg_rating,
            release_date=movie.release_date,
            now=self.clock(),
        )

    def recalculate(self, movie_id: int) -> float:
        """
        Recompute and store one movie's popularity.

        Args:
            movie_id: Movie ID

        Returns:
            The new popularity value

        Raises:
            NotFoundError: Movie does not exist
        """
        with signal_store_session(self.session_factory) as db:
            repo = MovieRepository(db)
            movie = repo.get_movie(movie_id)
            if movie is None:
                raise NotFoundError(f"Movie {movie_id} not found")

            value = self._popularity_for(movie)
            repo.update_movie_popularity(movie_id, value)

        logger.debug(f"Movie {movie_id} popularity -> {value:.3f}")
        return value

    def recalculate_all(self, batch_size: int = 500) -> int:
        """
        Recompute popularity for every movie.

        Args:
            batch_size: Movies loaded per round trip

        Returns:
            Number of movies updated
        """
        updated = 0
        with signal_store_session(self.session_factory) as db:
            repo = MovieRepository(db)
            movie_ids = repo.get_all_movie_ids()
            logger.info(f"Recalculating popularity for {len(movie_ids)} movies...")

            for i in range(0, len(movie_ids), batch_size):
                batch = movie_ids[i:i + batch_size]
                movies = repo.get_movies_by_ids(batch, active_only=False)
                values = {movie_id: self._popularity_for(movie) for movie_id, movie in movies.items()}
                for movie_id, value in values.items():
                    if repo.update_movie_popularity(movie_id, value):
                        updated += 1

                logger.info(f"  Processed {min(i + batch_size, len(movie_ids))}/{len(movie_ids)} movies")

        logger.info(f"✓ Recalculated popularity for {updated} movies")
        return updated
