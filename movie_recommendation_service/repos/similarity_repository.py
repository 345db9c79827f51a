"""Repository for precomputed movie-to-movie similarity rows."""

import logging
from typing import Dict, List

from sqlalchemy import delete, desc, distinct, func, insert
from sqlalchemy.orm import Session

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models import MovieSimilarity

logger = logging.getLogger(__name__)


class SimilarityRepository:
    """
    Repository for precomputed movie-to-movie similarity rows.
    Rows are written in full by the precompute job and read by the stored similarity index.
    """

    def __init__(self, db: Session):
        self.db = db

    def bulk_store_all_similarities(
            self,
            all_similarities: Dict[int, List[Dict]],
            batch_size: int = 1000,
            clear_existing: bool = True
    ) -> int:
        """
        Write a full precompute run.

        Every row of the run shares one computed_at timestamp.

        Args:
            all_similarities: Dict mapping movie_id to dicts with similar_movie_id,
                similarity_score and optional genre_score, rating_score, recency_score
            batch_size: Rows per INSERT
            clear_existing: Drop every stored row first

        Returns:
            Number of rows written
        """
        if clear_existing:
            removed = self.db.execute(delete(MovieSimilarity)).rowcount
            logger.info(f"Cleared {removed} stored similarities")

        computed_at = naive_utc_now()
        rows = [
            {
                'movie_id': movie_id,
                'similar_movie_id': item['similar_movie_id'],
                'similarity_score': item['similarity_score'],
                'genre_score': item.get('genre_score'),
                'rating_score': item.get('rating_score'),
                'recency_score': item.get('recency_score'),
                'computed_at': computed_at,
            }
            for movie_id, items in all_similarities.items()
            for item in items
        ]

        for start in range(0, len(rows), batch_size):
            self.db.execute(insert(MovieSimilarity), rows[start:start + batch_size])
            logger.debug(f"  Inserted {min(start + batch_size, len(rows))}/{len(rows)} rows")
        self.db.commit()

        logger.info(f"✓ Stored {len(rows)} similarities for {len(all_similarities)} movies")
        return len(rows)

    # noinspection PyTypeChecker
    def get_similar_movies(
            self,
            movie_id: int,
            n: int = 10,
            min_similarity: float = 0.0
    ) -> List[MovieSimilarity]:
        """Stored rows for one movie, best first (ties by similar_movie_id)."""
        return (
            self.db.query(MovieSimilarity)
            .filter(
                MovieSimilarity.movie_id == movie_id,
                MovieSimilarity.similarity_score >= min_similarity
            )
            .order_by(desc(MovieSimilarity.similarity_score), MovieSimilarity.similar_movie_id)
            .limit(n)
            .all()
        )

    def get_similarity_stats(self) -> Dict:
        """Row count, movies covered and age of the last precompute run."""
        total_records, unique_movies, last_computed = self.db.query(
            func.count(),
            func.count(distinct(MovieSimilarity.movie_id)),
            func.max(MovieSimilarity.computed_at),
        ).select_from(MovieSimilarity).one()

        return {
            'total_records': total_records,
            'unique_movies': unique_movies,
            'avg_similarities_per_movie': total_records / unique_movies if unique_movies else 0,
            'last_computed': last_computed,
        }
