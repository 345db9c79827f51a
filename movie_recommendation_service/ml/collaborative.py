"""User-user collaborative filtering: Pearson neighbors and their favorite movies."""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighbor:
    """Another user and how closely their ratings track the target's."""
    user_id: int
    correlation: float
    common_count: int


def pearson_correlation(ratings_a: Mapping[int, float], ratings_b: Mapping[int, float]) -> float:
    """
    Pearson correlation over the movies both users rated.

    Args:
        ratings_a: movie_id -> rating for the first user
        ratings_b: movie_id -> rating for the second user

    Returns:
        Correlation in [-1, 1]; 0 when there is no overlap or no variance
    """
    common = sorted(set(ratings_a) & set(ratings_b))
    n = len(common)
    if n == 0:
        return 0.0

    r1 = np.array([ratings_a[m] for m in common], dtype=float)
    r2 = np.array([ratings_b[m] for m in common], dtype=float)

    sum1, sum2 = r1.sum(), r2.sum()
    numerator = np.dot(r1, r2) - (sum1 * sum2 / n)
    variance_product = (np.dot(r1, r1) - sum1 ** 2 / n) * (np.dot(r2, r2) - sum2 ** 2 / n)
    if variance_product <= 0:
        return 0.0

    denominator = np.sqrt(variance_product)
    if denominator == 0:
        return 0.0
    return float(numerator / denominator)


def rank_neighbors(
    target_ratings: Mapping[int, float],
    rating_vectors: Mapping[int, Mapping[int, float]],
    target_user_id: int,
    k: int = 10
) -> list[Neighbor]:
    """
    Pick the k users whose ratings correlate best with the target's.

    Args:
        target_ratings: The target user's movie_id -> rating
        rating_vectors: user_id -> (movie_id -> rating) for every rating user
        target_user_id: Excluded from the candidates
        k: Number of neighbors

    Returns:
        Neighbors sorted by correlation desc, then user_id asc
    """
    neighbors = []
    for user_id, ratings in rating_vectors.items():
        if user_id == target_user_id or not ratings:
            continue
        common = len(set(target_ratings) & set(ratings))
        neighbors.append(
            Neighbor(
                user_id=user_id,
                correlation=pearson_correlation(target_ratings, ratings),
                common_count=common,
            )
        )

    neighbors.sort(key=lambda nb: (-nb.correlation, nb.user_id))
    return neighbors[:k]


def aggregate_neighbor_ratings(
    neighbor_ratings: Iterable[tuple[int, int, float]],
    exclude_movie_ids: Iterable[int] = (),
    min_ratings: int = 2
) -> list[dict]:
    """
    Average the neighbors' ratings per movie.

    Args:
        neighbor_ratings: (user_id, movie_id, rating) rows from the neighbor set
        exclude_movie_ids: Movies the target already rated
        min_ratings: Neighbors that must have rated a movie for it to qualify

    Returns:
        List of dicts with movie_id, mean_rating and rating_count, sorted by
        mean_rating desc, rating_count desc, movie_id asc
    """
    df = pd.DataFrame(list(neighbor_ratings), columns=['user_id', 'movie_id', 'rating'])
    if df.empty:
        return []

    df = df[~df['movie_id'].isin(set(exclude_movie_ids))]
    grouped = (
        df.groupby('movie_id')['rating']
        .agg(mean_rating='mean', rating_count='count')
        .reset_index()
    )
    grouped = grouped[grouped['rating_count'] >= min_ratings]
    grouped = grouped.sort_values(
        ['mean_rating', 'rating_count', 'movie_id'],
        ascending=[False, False, True]
    )

    return [
        {
            'movie_id': int(row.movie_id),
            'mean_rating': float(row.mean_rating),
            'rating_count': int(row.rating_count),
        }
        for row in grouped.itertuples(index=False)
    ]
