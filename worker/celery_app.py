from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery = Celery(
    "apartment-hub-worker",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["worker.tasks"],
)

celery.conf.update(
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_default_queue="default",
    task_routes={
        "worker.tasks.*": {"queue": "maintenance"},
    },
    beat_schedule={
        "reconcile-user-listing-index": {
            "task": "worker.tasks.reconcile_index",
            "schedule": crontab(minute=15, hour="*/6"),
        },
        "purge-expired-notifications": {
            "task": "worker.tasks.purge_notifications",
            "schedule": crontab(minute=0, hour=3),
        },
    },
)
