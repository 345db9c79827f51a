"""Users and their viewing history"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from movie_recommendation_service.clock import naive_utc_now
from movie_recommendation_service.models.base import Base


class User(Base):
    """Minimal mirror of the account service's user record."""

    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True)
    username = Column(String(150), nullable=False)
    created_at = Column(DateTime, default=naive_utc_now, nullable=False)

    def __repr__(self):
        return f"<User(user_id={self.user_id}, username='{self.username}')>"


class ViewingEvent(Base):
    """A single watch of a movie by a user."""

    __tablename__ = "viewing_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    movie_id = Column(Integer, ForeignKey("movies.movie_id"), nullable=False)
    watched_at = Column(DateTime, default=naive_utc_now, nullable=False)
    duration_seconds = Column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_viewing_events_user", "user_id", "watched_at"),
    )

    def __repr__(self):
        return f"<ViewingEvent(user_id={self.user_id}, movie_id={self.movie_id})>"
