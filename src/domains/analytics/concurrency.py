# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fan-out/fan-in helper for independent store queries."""

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently and return their results in order.

    Unlike a bare asyncio.gather, the first failure cancels every sibling
    that is still running before the error propagates, so an aborted bundle
    leaves no orphaned queries behind.

    Args:
        *aws: Coroutines or futures to run.

    Returns:
        Results in the same order as the arguments.

    Raises:
        The first exception raised by any awaitable.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
