from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import Change, awatch

from trax_compiler.core.compile import is_generated_path
from trax_compiler.core.languages import is_source_path

logger = logging.getLogger(__name__)


def _is_compilable(path: Path) -> bool:
    """TypeScript sources, minus the files this tool writes itself."""
    return is_source_path(path) and not is_generated_path(path)


class SourceWatcher:
    """Watch a directory for TypeScript changes and hand the touched units to a callback.

    Deleted files are not reported. Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching %s", self._directory)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            paths = {Path(p) for change, p in changes if change != Change.deleted and _is_compilable(Path(p))}
            if not paths:
                continue
            logger.info("%d unit(s) changed", len(paths))
            try:
                await self._on_change(paths)
            except Exception:
                logger.exception("Recompilation failed")
