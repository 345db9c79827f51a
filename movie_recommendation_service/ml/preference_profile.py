"""Build a user's taste profile from their rating history."""
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from movie_recommendation_service.models import Movie, ViewingEvent

logger = logging.getLogger(__name__)

MAX_RATING = 5.0


@dataclass
class PreferenceProfile:
    """Normalized weight maps over genres, actors, directors and release decades.

    Each non-empty map sums to 1. Built per request and never stored.
    """
    genres: dict[str, float] = field(default_factory=dict)
    actors: dict[str, float] = field(default_factory=dict)
    directors: dict[str, float] = field(default_factory=dict)
    decades: dict[int, float] = field(default_factory=dict)

    rated_movie_ids: set[int] = field(default_factory=set)
    viewed_movie_ids: set[int] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        """True when the profile carries no preference signal at all."""
        return not (self.genres or self.actors or self.directors or self.decades)

    @property
    def excluded_movie_ids(self) -> set[int]:
        """Movies the user has already rated or watched."""
        return self.rated_movie_ids | self.viewed_movie_ids


def normalize_weights(weights: dict) -> dict:
    """Divide each weight by the total so the map sums to 1 (no-op when empty)."""
    total = sum(weights.values())
    if total <= 0:
        return dict(weights)
    return {key: value / total for key, value in weights.items()}


def build_preference_profile(
    rated_movies: Iterable[tuple[int, Movie]],
    viewing_history: Iterable[ViewingEvent] = ()
) -> PreferenceProfile:
    """
    Accumulate rating-weighted preferences.

    Each rating contributes rating/5 to every genre, cast member, the director
    and the release decade of the rated movie. Viewing events only mark movies
    as seen.

    Args:
        rated_movies: (rating value, movie) pairs
        viewing_history: The user's viewing events (may be empty)

    Returns:
        PreferenceProfile with normalized maps
    """
    genres: dict[str, float] = defaultdict(float)
    actors: dict[str, float] = defaultdict(float)
    directors: dict[str, float] = defaultdict(float)
    decades: dict[int, float] = defaultdict(float)
    rated_ids: set[int] = set()

    for value, movie in rated_movies:
        weight = value / MAX_RATING
        rated_ids.add(movie.movie_id)

        for genre in movie.genre_list:
            genres[genre] += weight
        for actor in movie.actor_names:
            actors[actor] += weight
        if movie.director:
            directors[movie.director] += weight
        if movie.release_decade is not None:
            decades[movie.release_decade] += weight

    viewed_ids = {event.movie_id for event in viewing_history}

    return PreferenceProfile(
        genres=normalize_weights(genres),
        actors=normalize_weights(actors),
        directors=normalize_weights(directors),
        decades=normalize_weights(decades),
        rated_movie_ids=rated_ids,
        viewed_movie_ids=viewed_ids,
    )
