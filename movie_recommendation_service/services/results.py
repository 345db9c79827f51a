"""Result envelope shared by every ranking operation."""
import math
from dataclasses import asdict, dataclass, field
from typing import Optional

from movie_recommendation_service.errors import InvalidArgumentError
from movie_recommendation_service.models import Movie


@dataclass
class MovieResult:
    """A movie plus whichever score the answering stage produced."""
    movie_id: int
    title: str
    genres: list[str] = field(default_factory=list)
    director: Optional[str] = None
    release_year: Optional[int] = None
    avg_rating: Optional[float] = None
    rating_count: int = 0
    popularity: float = 0.0

    similarity_score: Optional[float] = None
    match_score: Optional[int] = None
    neighbor_rating: Optional[float] = None
    neighbor_count: Optional[int] = None
    trending_score: Optional[float] = None
    rank: Optional[int] = None

    @classmethod
    def from_movie(cls, movie: Movie, **scores) -> "MovieResult":
        return cls(
            movie_id=movie.movie_id,
            title=movie.title,
            genres=movie.genre_list,
            director=movie.director,
            release_year=movie.release_year,
            avg_rating=movie.avg_rating,
            rating_count=movie.rating_count or 0,
            popularity=movie.popularity or 0.0,
            **scores,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ResultPage:
    """One page of ranked movies and which stage of a fallback chain produced it."""
    results: list[MovieResult]
    total: int
    page: int
    limit: int
    source: str

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @classmethod
    def empty(cls, page: int, limit: int, source: str) -> "ResultPage":
        return cls(results=[], total=0, page=page, limit=limit, source=source)

    def to_dict(self) -> dict:
        return {
            'results': [r.to_dict() for r in self.results],
            'total': self.total,
            'page': self.page,
            'total_pages': self.total_pages,
            'limit': self.limit,
            'source': self.source,
        }


def validate_pagination(page: int, limit: int, max_page_size: int) -> int:
    """
    Check page/limit and return the row offset.

    Raises:
        InvalidArgumentError: page < 1 or limit outside [1, max_page_size]
    """
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise InvalidArgumentError(f"page must be a positive integer, got {page!r}")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1 or limit > max_page_size:
        raise InvalidArgumentError(f"limit must be between 1 and {max_page_size}, got {limit!r}")
    return (page - 1) * limit
