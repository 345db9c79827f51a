"""Repository for users and viewing history."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from movie_recommendation_service.clock import to_naive_utc
from movie_recommendation_service.models import User, ViewingEvent

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for users and viewing history.
    """

    def __init__(self, db: Session):
        self.db = db

    def user_exists(self, user_id: int) -> bool:
        """Check whether the user is known."""
        return self.db.query(User.user_id).filter(User.user_id == user_id).first() is not None

    # noinspection PyTypeChecker
    def get_viewing_history(self, user_id: int) -> list[ViewingEvent]:
        """Get a user's viewing events, oldest first."""
        return (
            self.db.query(ViewingEvent)
            .filter(ViewingEvent.user_id == user_id)
            .order_by(ViewingEvent.watched_at)
            .all()
        )

    def add_viewing_event(
            self,
            user_id: int,
            movie_id: int,
            watched_at: datetime,
            duration_seconds: int | None = None
    ) -> ViewingEvent:
        """
        Record that a user watched a movie.

        Args:
            user_id: User ID
            movie_id: Movie ID
            watched_at: When the view happened
            duration_seconds: How long the user watched (optional)

        Returns:
            The stored ViewingEvent
        """
        event = ViewingEvent(
            user_id=user_id,
            movie_id=movie_id,
            watched_at=to_naive_utc(watched_at),
            duration_seconds=duration_seconds,
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event
