"""Content-based similarity between movies (genres, rating, release year)."""
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import numpy as np
import logging

from movie_recommendation_service.models import Movie

logger = logging.getLogger(__name__)

GENRE_WEIGHT = 0.4
RATING_WEIGHT = 0.3
RECENCY_WEIGHT = 0.3

MAX_RATING = 5.0
YEAR_SPAN = 100.0


@dataclass(frozen=True)
class SimilarityScore:
    """Weighted composite plus its unweighted components (each in [0, 1])."""
    total: float
    genre: float
    rating: float
    recency: float


def genre_overlap(reference: Movie, candidate: Movie) -> float:
    """Shared genres divided by the larger genre set; 0 when neither has genres."""
    ref_genres = set(reference.genre_list)
    cand_genres = set(candidate.genre_list)
    denominator = max(len(ref_genres), len(cand_genres))
    if denominator == 0:
        return 0.0
    return len(ref_genres & cand_genres) / denominator


def rating_closeness(reference: Movie, candidate: Movie) -> float:
    """1 minus the normalized difference in average rating (unrated counts as 0)."""
    diff = abs((reference.avg_rating or 0.0) - (candidate.avg_rating or 0.0)) / MAX_RATING
    return 1.0 - min(diff, 1.0)


def release_closeness(reference: Movie, candidate: Movie) -> float:
    """1 minus the release-year gap over a century, floored at 0."""
    if reference.release_year is None or candidate.release_year is None:
        return 0.0
    diff = abs(reference.release_year - candidate.release_year) / YEAR_SPAN
    return 1.0 - min(diff, 1.0)


def score_similarity(reference: Movie, candidate: Movie) -> SimilarityScore:
    """
    Compute the composite similarity of a candidate to the reference movie.

    Args:
        reference: Movie the user is looking at
        candidate: Movie being scored

    Returns:
        SimilarityScore with total in [0, 1]
    """
    genre = genre_overlap(reference, candidate)
    rating = rating_closeness(reference, candidate)
    recency = release_closeness(reference, candidate)
    total = GENRE_WEIGHT * genre + RATING_WEIGHT * rating + RECENCY_WEIGHT * recency
    return SimilarityScore(total=total, genre=genre, rating=rating, recency=recency)


def rank_similar(
    reference: Movie,
    candidates: Sequence[Movie],
    limit: int
) -> List[Tuple[Movie, SimilarityScore]]:
    """
    Rank candidates by similarity to the reference.

    The reference itself is skipped. Ties are broken by movie_id ascending.

    Args:
        reference: Movie to compare against
        candidates: Movies to score
        limit: Maximum number of results

    Returns:
        List of (movie, score) tuples, most similar first
    """
    pool = [m for m in candidates if m.movie_id != reference.movie_id]
    if not pool or limit <= 0:
        return []

    scores = [score_similarity(reference, m) for m in pool]
    totals = np.array([s.total for s in scores], dtype=float)
    ids = np.array([m.movie_id for m in pool])

    # lexsort uses the last key as primary
    order = np.lexsort((ids, -totals))[:limit]

    logger.debug(
        f"Scored {len(pool)} candidates for movie {reference.movie_id}, "
        f"range [{totals.min():.3f}, {totals.max():.3f}]"
    )
    return [(pool[i], scores[i]) for i in order]
