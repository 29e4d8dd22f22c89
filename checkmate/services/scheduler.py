# checkmate/services/scheduler.py

from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

def create_scheduler(timezone: str = "Asia/Seoul") -> AsyncIOScheduler:
    return AsyncIOScheduler(timezone=timezone)

def start_scheduler(scheduler: AsyncIOScheduler):
    if not scheduler.running:
        scheduler.start()

def stop_scheduler(scheduler: AsyncIOScheduler):
    if scheduler.running:
        scheduler.shutdown(wait=False)

def schedule_daily_rollover(scheduler: AsyncIOScheduler, callback: Callable[[], Awaitable[object]],
                            hour: int = 0, minute: int = 0, job_id: Optional[str] = "daily_rollover"):
    """Run `callback` every day at hour:minute in the scheduler's timezone"""
    return scheduler.add_job(callback, 'cron', hour=hour, minute=minute, id=job_id, replace_existing=True)
