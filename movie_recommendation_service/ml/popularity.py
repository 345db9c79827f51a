"""Time-decayed popularity score."""
import math
from datetime import date, datetime, time

from movie_recommendation_service.clock import to_naive_utc

DECAY_DAYS = 365.0


def days_since_release(release_date: date | None, now: datetime) -> float:
    """Fractional days between release and now, never negative (0 when unknown)."""
    if release_date is None:
        return 0.0
    released_at = datetime.combine(release_date, time.min)
    elapsed = (to_naive_utc(now) - released_at).total_seconds() / 86400
    return max(0.0, elapsed)


def compute_popularity(
    view_count: int,
    rating_count: int,
    review_count: int,
    avg_rating: float | None,
    release_date: date | None,
    now: datetime
) -> float:
    """
    Engagement score decayed by age: exp(-days / 365).

    Args:
        view_count: Total views
        rating_count: Number of ratings
        review_count: Number of reviews
        avg_rating: Aggregate rating (None counts as 0)
        release_date: Release date (None means no decay)
        now: Reference time

    Returns:
        Popularity score
    """
    engagement = (
        (view_count or 0) * 1
        + (rating_count or 0) * 2
        + (review_count or 0) * 1.5
        + (avg_rating or 0.0) * (rating_count or 0) * 3
    )
    return engagement * math.exp(-days_since_release(release_date, now) / DECAY_DAYS)
