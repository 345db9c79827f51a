"""
Recompute popularity for every movie.
Meant for an external scheduler so release-age decay is applied even to movies
that receive no new activity.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from movie_recommendation_service.services import PopularityService

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Recompute popularity scores for all movies")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=500,
        help="Movies loaded per round trip (default: 500)",
    )
    args = parser.parse_args(argv)

    if args.batch_size < 1:
        logger.error("Error: --batch-size must be at least 1")
        sys.exit(1)

    logger.info("=" * 70)
    logger.info("POPULARITY RECALCULATION")
    logger.info("=" * 70)

    try:
        updated = PopularityService().recalculate_all(batch_size=args.batch_size)

        logger.info("\n" + "=" * 70)
        logger.info(f"✓ POPULARITY RECALCULATION COMPLETE ({updated} movies)")
        logger.info("=" * 70)
        return updated

    except Exception as e:
        logger.error(f"Error during popularity recalculation: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
