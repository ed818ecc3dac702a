from celery.signals import worker_ready
from tracker.core.logger import logger
from tracker.tasks.refresh import refresh_index_series_task


@worker_ready.connect
def warm_benchmark_cache(sender, **kwargs):
    """Fill the benchmark cache as soon as a worker is up, market open or not."""
    logger.info("Celery worker ready, warming benchmark cache.")
    refresh_index_series_task.delay(force=True)
