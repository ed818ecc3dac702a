from celery import Celery
from tracker.core.config import settings

# beat entry name -> (task, interval in minutes)
PERIODIC_REFRESHES = {
    "refresh-benchmark-index": (
        "tracker.tasks.refresh.refresh_index_series_task",
        settings.INDEX_REFRESH_MINUTES,
    ),
    "refresh-open-position-prices": (
        "tracker.tasks.refresh.refresh_open_positions_task",
        settings.PRICE_REFRESH_MINUTES,
    ),
}


def beat_schedule() -> dict:
    """Both refreshes fire all day; the tasks themselves skip outside market hours."""
    return {
        name: {"task": task, "schedule": minutes * 60}
        for name, (task, minutes) in PERIODIC_REFRESHES.items()
    }


def make_celery() -> Celery:
    app = Celery(
        "tracker",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["tracker.tasks.refresh", "tracker.tasks.start"],
    )
    app.conf.update(
        timezone=settings.CELERY_TIMEZONE,
        enable_utc=settings.CELERY_ENABLE_UTC,
        broker_connection_retry_on_startup=True,
        worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
        task_ignore_result=True,
    )
    if settings.CELERY_BEAT_ENABLED:
        app.conf.beat_schedule = beat_schedule()
    return app


celery = make_celery()
