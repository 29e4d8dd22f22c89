"""
Debounce timers
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[object]]

class DebounceScheduler:
    """
    Keyed one-shot timers. Arming a key cancels the timer already pending for it,
    so a burst of arms runs the action once, `delay` after the last one.

    Only the waiting part can be cancelled; an action that has started runs to
    completion.
    """

    def __init__(self):
        self.pending: Dict[str, asyncio.Task] = {}

    def arm(self, key: str, delay: float, action: Action) -> asyncio.Task:
        """Schedule `action`; must be called from a running event loop"""
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._timer_worker(key, delay, action))
        self.pending[key] = task
        return task

    def cancel(self, key: str) -> bool:
        task = self.pending.pop(key, None)
        if task is None:
            return False
        task.cancel()
        logger.debug(f"⏹️ Timer {key} cancelled")
        return True

    def is_pending(self, key: str) -> bool:
        task = self.pending.get(key)
        return task is not None and not task.done()

    def cancel_all(self) -> None:
        for key in list(self.pending.keys()):
            self.cancel(key)

    async def _timer_worker(self, key: str, delay: float, action: Action):
        me = asyncio.current_task()
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            logger.debug(f"⏹️ Timer {key} dropped before firing")
            raise

        if self.pending.get(key) is me:
            del self.pending[key]

        try:
            await action()
        except Exception as e:
            logger.error(f"❌ Timer action {key} failed: {e}")
