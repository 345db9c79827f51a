"""Exceptions raised by the recommendation engine."""


class RecommendationError(Exception):
    """Base class for engine errors. Carries the HTTP status the request layer should use."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RecommendationError):
    """A referenced movie, user or rating does not exist."""

    status_code = 404


class InvalidArgumentError(RecommendationError):
    """Unrecognized period/action or out-of-range pagination or rating value."""

    status_code = 400


class AlreadyExistsError(RecommendationError):
    """The user has already rated this movie."""

    status_code = 409


class DependencyFailureError(RecommendationError):
    """The signal store is unavailable or returned inconsistent data."""

    status_code = 503
