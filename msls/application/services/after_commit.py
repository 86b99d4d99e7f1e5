"""Actions held back until the surrounding transaction has committed.

Services that change cached data queue their cache invalidation here. The
write dependency that owns the transaction runs the queue after a successful
commit and drops it otherwise, so a rolled-back write never touches the cache.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[object]]


class AfterCommit:
    def __init__(self) -> None:
        self._actions: list[Action] = []

    def __len__(self) -> int:
        return len(self._actions)

    def defer(self, action: Action) -> None:
        self._actions.append(action)

    async def run(self) -> None:
        """Run queued actions in order; the queue is emptied first."""
        actions, self._actions = self._actions, []
        for action in actions:
            await action()

    def discard(self) -> None:
        if self._actions:
            logger.debug("Dropping %s post-commit action(s) after rollback", len(self._actions))
        self._actions.clear()


async def run_or_defer(after_commit: AfterCommit | None, action: Action) -> None:
    """Queue action when a transaction owner is present, else run it now."""
    if after_commit is None:
        await action()
    else:
        after_commit.defer(action)
