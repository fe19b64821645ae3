"""
Suspension point for cryptographic engine calls.

Every call into ``cryptography`` goes through ``run_engine`` so that it is
awaited by the caller. With ``offload_engine`` enabled the call runs in the
default thread pool and the event loop stays free while the native code
works; otherwise it runs inline.
"""

from __future__ import annotations

import asyncio
from typing import Callable, TypeVar

from .config import Settings

T = TypeVar("T")


async def run_engine(settings: Settings, fn: Callable[..., T], *args: object) -> T:
    """
    Run an engine call according to the offload setting.

    Exceptions raised by ``fn`` propagate to the awaiting caller.
    """
    if settings.offload_engine:
        return await asyncio.to_thread(fn, *args)
    return fn(*args)
