"""Run blocking import work off the event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


async def run_sync(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    # Scans and file copies block; each request gets its own worker thread.
    return await asyncio.to_thread(func, *args, **kwargs)


__all__ = ["run_sync"]
