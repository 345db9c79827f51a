"""Ordered strategies tried until one produces results."""
import logging
from typing import Callable, Sequence, Tuple

from movie_recommendation_service.services.results import ResultPage

logger = logging.getLogger(__name__)

Stage = Callable[[int, int], ResultPage]


class FallbackChain:
    """Run stages in order; the first with a non-empty result set answers.

    "Empty" means the stage found nothing at all (total == 0), not that the
    requested page is past the end. Page and limit are passed to every stage
    unchanged.
    """

    def __init__(self, name: str, stages: Sequence[Tuple[str, Stage]]):
        if not stages:
            raise ValueError("FallbackChain needs at least one stage")
        self.name = name
        self.stages = list(stages)

    @property
    def stage_names(self) -> list[str]:
        return [stage_name for stage_name, _ in self.stages]

    def run(self, page: int, limit: int) -> ResultPage:
        result = None
        for stage_name, stage in self.stages:
            result = stage(page, limit)
            if not result.is_empty:
                logger.info(f"{self.name}: answered by '{stage_name}' ({result.total} results)")
                return result
            logger.info(f"{self.name}: '{stage_name}' returned nothing, falling back")

        logger.info(f"{self.name}: every stage was empty")
        return result
