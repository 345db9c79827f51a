"""Score candidate movies against a preference profile."""
from movie_recommendation_service.ml.preference_profile import PreferenceProfile
from movie_recommendation_service.models import Movie

PROFILE_WEIGHTS = {
    'genre': 0.3,
    'actor': 0.2,
    'director': 0.15,
    'decade': 0.15,
    'rating': 0.2,
}

MAX_RATING = 5.0


def _mean_weight(keys: list, weights: dict) -> float:
    if not keys:
        return 0.0
    return sum(weights.get(key, 0.0) for key in keys) / len(keys)


def score_movie(movie: Movie, profile: PreferenceProfile) -> float:
    """
    Composite match of a movie to the user's profile, in [0, 1].

    Args:
        movie: Candidate movie
        profile: The user's preference profile

    Returns:
        Weighted sum of genre, cast, director, decade and rating signals
    """
    score = PROFILE_WEIGHTS['genre'] * _mean_weight(movie.genre_list, profile.genres)
    score += PROFILE_WEIGHTS['actor'] * _mean_weight(movie.actor_names, profile.actors)

    if movie.director:
        score += PROFILE_WEIGHTS['director'] * profile.directors.get(movie.director, 0.0)

    decade = movie.release_decade
    if decade is not None:
        score += PROFILE_WEIGHTS['decade'] * profile.decades.get(decade, 0.0)

    if movie.avg_rating:
        score += PROFILE_WEIGHTS['rating'] * (movie.avg_rating / MAX_RATING)

    return score


def match_score(score: float) -> int:
    """Express a composite score as a 0-100 percentage."""
    return int(round(score * 100))
