import argparse
import asyncio
import sys

# 1. Setup Logging First (to capture config errors)
from core.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

# 2. Load Config
try:
    from core.config import settings
except Exception as e:
    logger.critical(f"Failed to load configuration: {e}", exc_info=True)
    sys.exit(1)

from core.exceptions import ConfigurationException
from services.sync_service import SyncService


def validate_startup() -> bool:
    """Validate configuration before starting"""
    validation_errors = settings.validate_all()
    for msg in validation_errors:
        if "❌" in msg:
            logger.critical(msg)
        else:
            logger.warning(msg)

    if any("❌" in msg for msg in validation_errors):
        logger.critical("Configuration validation failed")
        return False
    return True


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror the original sources embedded in remote sourcemaps"
    )
    parser.add_argument("--links", type=str, help=f"Links file (default: {settings.LINKS_FILE})")
    parser.add_argument(
        "--concurrency",
        type=int,
        help=f"Sourcemaps fetched per batch (default: {settings.CONCURRENCY})",
    )
    parser.add_argument(
        "--mirror-root", type=str, help=f"Mirror directory (default: {settings.MIRROR_ROOT})"
    )
    parser.add_argument(
        "--skip-revisions", action="store_true", help="Do not refresh revisions.json"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Sync the mirror but do not write report files"
    )
    args = parser.parse_args(argv)
    if args.concurrency is not None and args.concurrency < 1:
        parser.error("--concurrency must be a positive integer")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    if not validate_startup():
        return 1

    service = SyncService(
        links_file=args.links,
        mirror_root=args.mirror_root,
        concurrency=args.concurrency,
        skip_revisions=args.skip_revisions,
        dry_run=args.dry_run,
    )

    try:
        result = asyncio.run(service.run())
    except ConfigurationException as e:
        logger.critical(f"Configuration error: {e.describe()}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except Exception as e:
        logger.critical(f"Run failed: {e}", exc_info=True)
        return 1

    if not result.revisions.success:
        logger.warning(f"revisions.json was not refreshed: {result.revisions.error}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
