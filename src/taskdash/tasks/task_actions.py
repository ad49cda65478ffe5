# src/taskdash/tasks/task_actions.py

from __future__ import annotations

"""
Confirm-style actions with simulated latency.

A delete/edit confirmed in the UI waits a short, bounded delay before the
store is touched. The wait can be cut short by a CancellationToken (the view
that started it went away); in that case nothing is mutated.

The store mutation happens only after the delay resolved successfully, so a
failing or cancelled action never leaves the store half-changed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5

Sleeper = Callable[[float], Awaitable[Any]]


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


async def run_after_delay(
    mutation: Callable[[], None],
    *,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    token: CancellationToken | None = None,
    sleep: Sleeper = asyncio.sleep,
) -> bool:
    """
    Wait `delay_seconds`, then apply `mutation` unless the token fired first.

    Returns True if the mutation was applied.
    """
    if token is not None and token.cancelled:
        return False

    delay = asyncio.ensure_future(sleep(max(0.0, float(delay_seconds))))
    if token is None:
        await delay
    else:
        cancel_wait = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({delay, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for fut in (delay, cancel_wait):
                if not fut.done():
                    fut.cancel()

        if token.cancelled:
            logger.debug("Delayed action cancelled before it ran")
            return False
        # Surface a failure of the delay itself.
        delay.result()

    mutation()
    return True


async def _confirm(
    store: TaskStore,
    action: str,
    task_id: str,
    mutation: Callable[[], None],
    *,
    token: CancellationToken | None,
    delay_seconds: float,
    sleep: Sleeper,
) -> bool:
    store.set_loading(True)
    try:
        applied = await run_after_delay(
            mutation,
            delay_seconds=delay_seconds,
            token=token,
            sleep=sleep,
        )
    except asyncio.CancelledError:
        logger.debug("%s task_id=%s torn down mid-delay", action, task_id)
        raise
    except Exception:
        logger.exception("%s failed task_id=%s", action, task_id)
        return False
    finally:
        if not store.disposed:
            store.set_loading(False)

    if applied:
        logger.info("%s applied task_id=%s", action, task_id)
    return applied


async def confirm_delete(
    store: TaskStore,
    task_id: str,
    *,
    token: CancellationToken | None = None,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    sleep: Sleeper = asyncio.sleep,
) -> bool:
    return await _confirm(
        store,
        "delete",
        task_id,
        lambda: store.delete_task(task_id),
        token=token,
        delay_seconds=delay_seconds,
        sleep=sleep,
    )


async def confirm_update(
    store: TaskStore,
    task_id: str,
    updates: dict[str, Any],
    *,
    token: CancellationToken | None = None,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    sleep: Sleeper = asyncio.sleep,
) -> bool:
    return await _confirm(
        store,
        "update",
        task_id,
        lambda: store.update_task(task_id, **updates),
        token=token,
        delay_seconds=delay_seconds,
        sleep=sleep,
    )
