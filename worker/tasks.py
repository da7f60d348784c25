import asyncio
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from worker.celery_app import celery
from app.core.config import settings
import app.models  # noqa: F401  # ensures Models are registered
from app.services.reconciliation import purge_expired_notifications, reconcile_user_listing_index

log = logging.getLogger(__name__)


async def _reconcile_index(prune_stale: bool) -> dict:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with Session() as db:
            report = await reconcile_user_listing_index(db, prune_stale=prune_stale)
            await db.commit()
            return {"inserted": report.inserted, "pruned": report.pruned}
    finally:
        await engine.dispose()


async def _purge_notifications() -> dict:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with Session() as db:
            purged = await purge_expired_notifications(db)
            await db.commit()
            return {"purged": purged}
    finally:
        await engine.dispose()


@celery.task(name="worker.tasks.reconcile_index")
def reconcile_index(prune_stale: bool = False) -> dict:
    result = asyncio.run(_reconcile_index(prune_stale))
    log.info("reconcile_index done: %s", result)
    return result


@celery.task(name="worker.tasks.purge_notifications")
def purge_notifications() -> dict:
    result = asyncio.run(_purge_notifications())
    log.info("purge_notifications done: %s", result)
    return result
