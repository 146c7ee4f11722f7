"""Uniform invocation of synchronous and asynchronous candidates."""

from __future__ import annotations

import inspect
from typing import Any, Callable


async def invoke(func: Callable[[Any], Any], value: Any) -> Any:
    """Call *func* with *value* and return its result once fully complete.

    Coroutine functions and callables returning any other awaitable are
    awaited, so a caller timing this coroutine sees the candidate's full
    latency including suspensions. Plain return values pass straight through.
    """
    result = func(value)
    if inspect.isawaitable(result):
        result = await result
    return result
