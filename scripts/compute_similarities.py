"""
Precompute the most similar movies for every active movie.
Rows land in movie_similarities and are read when USE_PRECOMPUTED_SIMILARITIES=true.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging
from typing import Dict, List

from movie_recommendation_service.config import get_similarity_top_n
from movie_recommendation_service.ml.content_similarity import rank_similar
from movie_recommendation_service.models import Movie
from movie_recommendation_service.repos import MovieRepository, SimilarityRepository
from movie_recommendation_service.services.session import default_session_factory, signal_store_session

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def compute_similarities(
    movies: List[Movie],
    top_n: int = 20,
    min_similarity: float = 0.0,
) -> Dict[int, List[Dict]]:
    """
    Rank every movie against every other one.

    Args:
        movies: Active movies
        top_n: Similar movies kept per movie
        min_similarity: Drop pairs scoring below this

    Returns:
        Dict mapping movie_id to rows for SimilarityRepository
    """
    logger.info("=" * 70)
    logger.info("COMPUTING SIMILARITIES")
    logger.info("=" * 70)

    all_similarities = {}
    for index, movie in enumerate(movies, 1):
        candidates = [other for other in movies if other.movie_id != movie.movie_id]
        ranked = rank_similar(movie, candidates, top_n)

        all_similarities[movie.movie_id] = [
            {
                'similar_movie_id': other.movie_id,
                'similarity_score': score.total,
                'genre_score': score.genre,
                'rating_score': score.rating,
                'recency_score': score.recency,
            }
            for other, score in ranked
            if score.total >= min_similarity
        ]

        if index % 500 == 0:
            logger.info(f"  Processed {index}/{len(movies)} movies")

    total = sum(len(rows) for rows in all_similarities.values())
    logger.info(f"✓ Computed {total} similarity pairs for {len(all_similarities)} movies")
    return all_similarities


def main(argv=None):
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description="Precompute similar movies into the movie_similarities table"
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=None,
        help="Similar movies stored per movie (default: SIMILARITY_TOP_N or 20)",
    )
    parser.add_argument(
        "--min-similarity",
        type=float,
        default=0.0,
        help="Minimum similarity score to store (default: 0.0)",
    )

    args = parser.parse_args(argv)
    top_n = args.top_n if args.top_n is not None else get_similarity_top_n()

    if top_n < 1:
        logger.error("Error: --top-n must be at least 1")
        sys.exit(1)
    if not 0.0 <= args.min_similarity <= 1.0:
        logger.error("Error: --min-similarity must be between 0 and 1")
        sys.exit(1)

    logger.info("=" * 70)
    logger.info("SIMILARITY PRECOMPUTATION")
    logger.info("=" * 70)
    logger.info(f"Top N: {top_n}")
    logger.info(f"Min similarity: {args.min_similarity}")

    try:
        with signal_store_session(default_session_factory()) as db:
            movies = MovieRepository(db).list_active_movies()
            logger.info(f"✓ Loaded {len(movies)} active movies")

            similarities = compute_similarities(movies, top_n=top_n, min_similarity=args.min_similarity)

            similarity_repo = SimilarityRepository(db)
            stored = similarity_repo.bulk_store_all_similarities(similarities)
            stats = similarity_repo.get_similarity_stats()

        logger.info("\n" + "=" * 70)
        logger.info("✓ SIMILARITY PRECOMPUTATION COMPLETE")
        logger.info("=" * 70)
        logger.info(f"Stored records: {stored}")
        logger.info(f"Unique movies: {stats['unique_movies']}")
        logger.info(f"Average similarities per movie: {stats['avg_similarities_per_movie']:.1f}")
        return stored

    except Exception as e:
        logger.error(f"Error during similarity computation: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
