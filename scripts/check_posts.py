import logging
import sys

from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.services.posts_service import PostsService
from mdblog.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    service = PostsService(FilePostsRepo())
    try:
        posts, failures = service.collect_posts()
    except Exception as e:
        logger.error(f"Could not scan {settings.POSTS_DIR}: {e}", exc_info=True)
        return 2

    for failure in failures:
        logger.error(f"{failure.path}: {failure.error}")
    logger.info(f"Checked {len(posts) + len(failures)} posts, {len(failures)} failed.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
