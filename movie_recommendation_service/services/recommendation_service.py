"""Service for similar-movie, personalized, top-rated and newest recommendations."""
from typing import Callable, List, Optional
import logging

from sqlalchemy.orm import Session

from movie_recommendation_service.clock import Clock, utc_now
from movie_recommendation_service.config import (
    get_max_page_size,
    get_min_neighbor_ratings,
    get_min_top_rated_count,
    get_neighbor_count,
    use_precomputed_similarities,
)
from movie_recommendation_service.errors import NotFoundError
from movie_recommendation_service.ml.collaborative import aggregate_neighbor_ratings
from movie_recommendation_service.ml.personalized import match_score, score_movie
from movie_recommendation_service.ml.preference_profile import PreferenceProfile, build_preference_profile
from movie_recommendation_service.repos import (
    MovieRepository,
    RatingRepository,
    SimilarityRepository,
    UserRepository,
)
from movie_recommendation_service.services.fallback import FallbackChain
from movie_recommendation_service.services.indexes import (
    LiveSimilarityIndex,
    NeighborIndex,
    PearsonNeighborIndex,
    SimilarityIndex,
    StoredSimilarityIndex,
)
from movie_recommendation_service.services.results import MovieResult, ResultPage, validate_pagination
from movie_recommendation_service.services.session import (
    SessionFactory,
    default_session_factory,
    signal_store_session,
)

logger = logging.getLogger(__name__)


# noinspection PyMethodMayBeStatic
class RecommendationService:
    """
    Service for movie recommendations.
    Scores on read against the signal store and walks a fallback chain when
    the user or the catalog is too sparse for the preferred strategy.
    """

    def __init__(
            self,
            session_factory: Optional[SessionFactory] = None,
            clock: Clock = utc_now,
            min_top_rated_count: Optional[int] = None,
            neighbor_count: Optional[int] = None,
            min_neighbor_ratings: Optional[int] = None,
            max_page_size: Optional[int] = None,
            use_precomputed: Optional[bool] = None,
            neighbor_index_factory: Optional[Callable[[Session], NeighborIndex]] = None,
    ):
        """
        Initialize the recommendation service.

        Args:
            session_factory: Callable returning a new Session (default: SessionLocal)
            clock: Returns the current aware UTC datetime
            min_top_rated_count: Ratings a movie needs to be listed as top rated
            neighbor_count: Number of correlated users for collaborative filtering
            min_neighbor_ratings: Neighbors that must have rated a movie before it qualifies
            max_page_size: Largest accepted page size
            use_precomputed: Read stored similarities first (None = from config)
            neighbor_index_factory: Builds the NeighborIndex for a session
        """
        self.session_factory = session_factory or default_session_factory()
        self.clock = clock
        self.min_top_rated_count = (
            get_min_top_rated_count() if min_top_rated_count is None else min_top_rated_count
        )
        self.neighbor_count = neighbor_count or get_neighbor_count()
        self.min_neighbor_ratings = min_neighbor_ratings or get_min_neighbor_ratings()
        self.max_page_size = max_page_size or get_max_page_size()

        if use_precomputed is None:
            self.use_precomputed = use_precomputed_similarities()
        else:
            self.use_precomputed = use_precomputed

        self.neighbor_index_factory = neighbor_index_factory or (
            lambda db: PearsonNeighborIndex(RatingRepository(db))
        )

        logger.info(
            f"Initialized RecommendationService (min_top_rated_count={self.min_top_rated_count}, "
            f"neighbors={self.neighbor_count}, precomputed={self.use_precomputed})"
        )

    def _similarity_index(self, db: Session) -> SimilarityIndex:
        movie_repo = MovieRepository(db)
        if self.use_precomputed:
            return StoredSimilarityIndex(SimilarityRepository(db), movie_repo)
        return LiveSimilarityIndex(movie_repo)

    # ===== SIMILAR MOVIES =====

    def get_similar_movies(self, movie_id: int, limit: int = 10) -> List[MovieResult]:
        """
        Get the movies most similar to a reference movie.

        Args:
            movie_id: Reference movie ID
            limit: Number of movies to return

        Returns:
            List of MovieResult with similarity_score, most similar first

        Raises:
            NotFoundError: Reference movie does not exist
        """
        validate_pagination(1, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            reference = MovieRepository(db).get_movie(movie_id)
            if reference is None:
                raise NotFoundError(f"Movie {movie_id} not found")

            ranked = self._similarity_index(db).get_similar(reference, limit)
            return [
                MovieResult.from_movie(movie, similarity_score=score.total)
                for movie, score in ranked
            ]

    # ===== PERSONALIZED =====

    def build_profile(self, db: Session, user_id: int) -> PreferenceProfile:
        """Build a user's preference profile from their ratings and viewing history."""
        rated = RatingRepository(db).get_user_ratings_with_movies(user_id)
        history = UserRepository(db).get_viewing_history(user_id)
        return build_preference_profile(
            ((rating.rating, movie) for rating, movie in rated),
            history,
        )

    def get_personalized_recommendations(
            self,
            user_id: int,
            page: int = 1,
            limit: int = 10
    ) -> ResultPage:
        """
        Get recommendations tailored to a user's rating history.

        Falls back to collaborative filtering, then top rated, then newest
        whenever a stage has nothing to offer.

        Args:
            user_id: User ID
            page: 1-based page number
            limit: Page size

        Returns:
            ResultPage; personalized items carry match_score (0-100)

        Raises:
            NotFoundError: User does not exist
        """
        validate_pagination(page, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            if not UserRepository(db).user_exists(user_id):
                raise NotFoundError(f"User {user_id} not found")

            profile = self.build_profile(db, user_id)

            stages = [
                ('collaborative', lambda p, n: self.collaborative_page(db, user_id, p, n)),
                ('top_rated', lambda p, n: self.top_rated_page(db, p, n)),
                ('newest', lambda p, n: self.newest_page(db, p, n)),
            ]
            if not profile.rated_movie_ids and not profile.viewed_movie_ids:
                logger.info(f"User {user_id} has no ratings or viewing history, using fallback chain")
            else:
                stages.insert(0, ('personalized', lambda p, n: self.personalized_page(db, profile, p, n)))

            return FallbackChain('personalized', stages).run(page, limit)

    def personalized_page(
            self,
            db: Session,
            profile: PreferenceProfile,
            page: int,
            limit: int
    ) -> ResultPage:
        """Score unseen active movies against the profile and slice one page."""
        candidates = MovieRepository(db).list_active_movies(exclude_ids=profile.excluded_movie_ids)

        scored = sorted(
            ((score_movie(movie, profile), movie) for movie in candidates),
            key=lambda item: (-item[0], item[1].movie_id),
        )

        offset = (page - 1) * limit
        results = [
            MovieResult.from_movie(movie, match_score=match_score(score))
            for score, movie in scored[offset:offset + limit]
        ]
        return ResultPage(results=results, total=len(scored), page=page, limit=limit, source='personalized')

    # ===== COLLABORATIVE =====

    def get_collaborative_recommendations(
            self,
            user_id: int,
            page: int = 1,
            limit: int = 10
    ) -> ResultPage:
        """
        Movies favored by the users whose ratings correlate best with this user's.

        Raises:
            NotFoundError: User does not exist
        """
        validate_pagination(page, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            if not UserRepository(db).user_exists(user_id):
                raise NotFoundError(f"User {user_id} not found")
            return self.collaborative_page(db, user_id, page, limit)

    def collaborative_page(self, db: Session, user_id: int, page: int, limit: int) -> ResultPage:
        """Aggregate neighbor ratings into one page of unrated movies."""
        rating_repo = RatingRepository(db)
        rated_ids = {rating.movie_id for rating in rating_repo.get_user_ratings(user_id)}

        neighbors = self.neighbor_index_factory(db).get_neighbors(user_id, self.neighbor_count)
        if not neighbors:
            return ResultPage.empty(page, limit, source='collaborative')

        neighbor_rows = [
            (r.user_id, r.movie_id, r.rating)
            for r in rating_repo.get_ratings_for_users(nb.user_id for nb in neighbors)
        ]
        aggregated = aggregate_neighbor_ratings(
            neighbor_rows,
            exclude_movie_ids=rated_ids,
            min_ratings=self.min_neighbor_ratings,
        )

        movies = MovieRepository(db).get_movies_by_ids(item['movie_id'] for item in aggregated)
        ranked = [
            MovieResult.from_movie(
                movies[item['movie_id']],
                neighbor_rating=item['mean_rating'],
                neighbor_count=item['rating_count'],
            )
            for item in aggregated
            if item['movie_id'] in movies
        ]

        offset = (page - 1) * limit
        return ResultPage(
            results=ranked[offset:offset + limit],
            total=len(ranked),
            page=page,
            limit=limit,
            source='collaborative',
        )

    # ===== TOP RATED / NEWEST =====

    def get_top_rated_movies(self, page: int = 1, limit: int = 10) -> ResultPage:
        """
        Highest rated active movies, falling back to newest when none qualify.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            ResultPage; top-rated items carry their overall rank
        """
        validate_pagination(page, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            chain = FallbackChain('top_rated', [
                ('top_rated', lambda p, n: self.top_rated_page(db, p, n)),
                ('newest', lambda p, n: self.newest_page(db, p, n)),
            ])
            return chain.run(page, limit)

    def top_rated_page(self, db: Session, page: int, limit: int) -> ResultPage:
        """One page of active movies with enough ratings, best average first."""
        repo = MovieRepository(db)
        offset = (page - 1) * limit
        movies = repo.list_top_rated(self.min_top_rated_count, offset, limit)
        total = repo.count_top_rated(self.min_top_rated_count)

        results = [
            MovieResult.from_movie(movie, rank=offset + index + 1)
            for index, movie in enumerate(movies)
        ]
        return ResultPage(results=results, total=total, page=page, limit=limit, source='top_rated')

    def get_newest_movies(self, page: int = 1, limit: int = 10) -> ResultPage:
        """Active movies, most recently added first."""
        validate_pagination(page, limit, self.max_page_size)

        with signal_store_session(self.session_factory) as db:
            return self.newest_page(db, page, limit)

    def newest_page(self, db: Session, page: int, limit: int) -> ResultPage:
        """One page of active movies ordered by creation time, newest first."""
        repo = MovieRepository(db)
        offset = (page - 1) * limit
        movies = repo.list_newest(offset, limit)
        return ResultPage(
            results=[MovieResult.from_movie(movie) for movie in movies],
            total=repo.count_active(),
            page=page,
            limit=limit,
            source='newest',
        )

    def get_stats(self) -> dict:
        """Get statistics about the recommendation system."""
        with signal_store_session(self.session_factory) as db:
            return {
                'active_movies': MovieRepository(db).count_active(),
                'ratings': RatingRepository(db).count_ratings(),
                'similarity_stats': SimilarityRepository(db).get_similarity_stats(),
                'settings': {
                    'min_top_rated_count': self.min_top_rated_count,
                    'neighbor_count': self.neighbor_count,
                    'min_neighbor_ratings': self.min_neighbor_ratings,
                    'use_precomputed': self.use_precomputed,
                },
            }
