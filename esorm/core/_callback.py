from typing import Any, Callable

Callback = Callable[[BaseException | None, Any], Any]
"""Completion callback, called as ``callback(error, result)``."""


def complete(
    callback: Callback,
    error: BaseException | None = None,
    result: Any = None,
) -> None:
    if error is not None:
        callback(error, None)
    else:
        callback(None, result)
