# puzzlelog/core/scheduler.py
from __future__ import annotations

import asyncio
import logging
from datetime import timezone
from typing import Callable, Iterable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .dates import parse_reset_time
from .models import Game

logger = logging.getLogger(__name__)

_scheduler: Optional[AsyncIOScheduler] = None


def _ensure_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
        _scheduler.start()
    return _scheduler


def schedule_daily(coro_func: Callable, *, job_id: str, hour: int = 0, minute: int = 0, tz=None):
    """
    Schedule an async task to run daily at the given time.
    - coro_func can be an async function or a callable returning a coroutine.
    - job_id ensures idempotency (replace_existing=True).
    - tz None uses the scheduler's local timezone.
    """
    sched = _ensure_scheduler()

    def _runner():
        result = coro_func()
        if asyncio.iscoroutine(result):
            asyncio.create_task(result)

    sched.add_job(
        _runner,
        CronTrigger(hour=hour, minute=minute, timezone=tz),
        id=job_id,
        replace_existing=True
    )


def reset_trigger_args(game: Game) -> dict:
    """Cron fields for the instant a game's puzzle rolls over (UTC for synchronous games)."""
    hour, minute = parse_reset_time(game.reset_time)
    return {"hour": hour, "minute": minute, "tz": None if game.is_asynchronous else timezone.utc}


def schedule_game_resets(games: Iterable[Game], on_reset: Callable[[Game], object]) -> int:
    """Register one daily job per game that calls on_reset(game) when the game resets."""
    count = 0
    for game in games:
        schedule_daily(lambda g=game: on_reset(g), job_id=f"reset:{game.game_id}", **reset_trigger_args(game))
        count += 1
    logger.info("Scheduled reset jobs for %s games", count)
    return count
