from tracker.core.celery_app import celery
from tracker.core.db import session_scope
from tracker.core.logger import logger
from tracker.managers.cache_manager import CacheManager
from tracker.repositories import RepositoryFactory
from tracker.services.index_service import IndexSeriesCache, is_market_open
from tracker.services.positions_service import PositionService


@celery.task(name="tracker.tasks.refresh.refresh_index_series_task")
def refresh_index_series_task(force: bool = False):
    """Refetch the benchmark series into the cache. Returns the number of points stored."""
    if not force and not is_market_open():
        logger.debug("Market closed, skipping benchmark refresh.")
        return 0

    try:
        entry = IndexSeriesCache(CacheManager(prefix="index")).refresh()
    except Exception as e:
        logger.error(f"Benchmark index refresh failed: {e}", exc_info=True)
        return 0
    return len(entry.value)


@celery.task(name="tracker.tasks.refresh.refresh_open_positions_task")
def refresh_open_positions_task(force: bool = False):
    """Reprice every open position. Returns the number repriced successfully."""
    if not force and not is_market_open():
        logger.debug("Market closed, skipping position price sweep.")
        return 0

    with session_scope() as db:
        try:
            results = PositionService(RepositoryFactory(db)).refresh_all()
        except Exception as e:
            logger.error(f"Position price sweep failed: {e}", exc_info=True)
            return 0
    return sum(1 for r in results if r.success)
