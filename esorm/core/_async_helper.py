import asyncio
import threading
from typing import Any, Callable

_loop = None
_loop_thread = None
_lock = threading.Lock()


def _ensure_loop() -> asyncio.AbstractEventLoop:
    global _loop, _loop_thread
    with _lock:
        if _loop and not _loop.is_closed():
            return _loop

        _loop = asyncio.new_event_loop()

        def _run_loop():
            asyncio.set_event_loop(_loop)
            _loop.run_forever()

        _loop_thread = threading.Thread(
            target=_run_loop, name="esorm-loop", daemon=True
        )
        _loop_thread.start()
        return _loop


def run_async(func: Callable[..., Any], *args, **kwargs):
    """Run a blocking callable in a worker thread and return an awaitable."""
    return asyncio.to_thread(func, *args, **kwargs)


def run_sync(afunc: Callable[..., Any], *args, **kwargs):
    """Run a coroutine function to completion from synchronous code.

    The coroutine runs on a private background loop, so this works
    whether or not the calling thread already has a running loop.
    """
    loop = _ensure_loop()

    coro = afunc(*args, **kwargs)
    future = asyncio.run_coroutine_threadsafe(coro, loop)
    return future.result()
