"""Lookup structures behind similar-movie and neighbor queries.

The services only talk to the SimilarityIndex / NeighborIndex protocols, so
a cache or a precomputed table can replace on-read scoring without changing
the scores themselves.
"""
import logging
from typing import List, Protocol, Tuple

from movie_recommendation_service.ml.collaborative import Neighbor, rank_neighbors
from movie_recommendation_service.ml.content_similarity import SimilarityScore, rank_similar
from movie_recommendation_service.models import Movie
from movie_recommendation_service.repos import MovieRepository, RatingRepository, SimilarityRepository

logger = logging.getLogger(__name__)


class SimilarityIndex(Protocol):
    def get_similar(self, reference: Movie, limit: int) -> List[Tuple[Movie, SimilarityScore]]:
        ...


class NeighborIndex(Protocol):
    def get_neighbors(self, user_id: int, k: int) -> List[Neighbor]:
        ...


class LiveSimilarityIndex:
    """Scores every active movie against the reference on each call."""

    def __init__(self, movie_repo: MovieRepository):
        self.movie_repo = movie_repo

    def get_similar(self, reference: Movie, limit: int) -> List[Tuple[Movie, SimilarityScore]]:
        candidates = self.movie_repo.list_active_movies(exclude_ids=[reference.movie_id])
        return rank_similar(reference, candidates, limit)


class StoredSimilarityIndex:
    """Reads rows written by scripts/compute_similarities.py.

    Movies without stored rows are scored live.
    """

    def __init__(self, similarity_repo: SimilarityRepository, movie_repo: MovieRepository):
        self.similarity_repo = similarity_repo
        self.movie_repo = movie_repo
        self.live = LiveSimilarityIndex(movie_repo)

    def get_similar(self, reference: Movie, limit: int) -> List[Tuple[Movie, SimilarityScore]]:
        rows = self.similarity_repo.get_similar_movies(reference.movie_id, n=limit)
        if not rows:
            logger.info(f"No stored similarities for movie {reference.movie_id}, scoring live")
            return self.live.get_similar(reference, limit)

        movies = self.movie_repo.get_movies_by_ids(row.similar_movie_id for row in rows)
        results = []
        for row in rows:
            movie = movies.get(row.similar_movie_id)
            if movie is None:
                continue  # deactivated since computation
            results.append((
                movie,
                SimilarityScore(
                    total=row.similarity_score,
                    genre=row.genre_score or 0.0,
                    rating=row.rating_score or 0.0,
                    recency=row.recency_score or 0.0,
                ),
            ))
        return results


class PearsonNeighborIndex:
    """Ranks every rating user by Pearson correlation with the target.

    All rating vectors are loaded in a single query per call.
    """

    def __init__(self, rating_repo: RatingRepository):
        self.rating_repo = rating_repo

    def get_neighbors(self, user_id: int, k: int) -> List[Neighbor]:
        vectors = self.rating_repo.get_rating_vectors()
        neighbors = rank_neighbors(vectors.get(user_id, {}), vectors, user_id, k)
        logger.debug(f"Found {len(neighbors)} neighbors for user {user_id} among {len(vectors)} raters")
        return neighbors
