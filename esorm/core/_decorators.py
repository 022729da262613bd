import inspect
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from ._callback import complete
from ._operation import Operation
from .exceptions import NotSupportedError

T = TypeVar("T", bound=Callable[..., Any])


def _bind_arguments(func: Callable, args: tuple, kwargs: dict) -> dict:
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()
    arguments = dict(bound_args.arguments)
    arguments.pop("self", None)
    return arguments


def operation(**config: Any) -> Callable[[T], T]:
    """Route a component method to the bound provider.

    The provider method with the same name runs in place of the
    component body. An async component method is routed to the
    provider's ``a``-prefixed twin.

    A ``callback`` argument is never forwarded to the provider. When one
    is given, the outcome is delivered to it as ``callback(error,
    result)`` and the call returns None. Without one, the result is
    returned and errors are raised.
    """

    def decorator(func: T) -> T:
        setattr(func, "__operation__", True)
        setattr(func, "__config__", config)
        if not inspect.iscoroutinefunction(func):

            @wraps(func)
            def wrapper(*args, **kwargs) -> Any:
                self = args[0]
                arguments = _bind_arguments(func, args, kwargs)
                callback = arguments.pop("callback", None)
                try:
                    if hasattr(self, "__provider__"):
                        operation = Operation.normalize(
                            name=func.__name__,
                            args=arguments,
                        )
                        try:
                            response = self.__run__(operation)
                        except NotSupportedError:
                            response = func(*args, **kwargs)
                    else:
                        response = func(*args, **kwargs)
                except Exception as e:
                    if callback is None:
                        raise
                    complete(callback, error=e)
                    return None
                if callback is not None:
                    complete(callback, result=response)
                    return None
                return response

            return cast(T, wrapper)
        else:

            @wraps(func)
            async def awrapper(*args, **kwargs) -> Any:
                self = args[0]
                arguments = _bind_arguments(func, args, kwargs)
                callback = arguments.pop("callback", None)
                try:
                    if hasattr(self, "__provider__"):
                        operation = Operation.normalize(
                            name=func.__name__[1:],
                            args=arguments,
                        )
                        try:
                            response = await self.__arun__(operation)
                        except NotSupportedError:
                            response = await func(*args, **kwargs)
                    else:
                        response = await func(*args, **kwargs)
                except Exception as e:
                    if callback is None:
                        raise
                    complete(callback, error=e)
                    return None
                if callback is not None:
                    complete(callback, result=response)
                    return None
                return response

            return cast(T, awrapper)

    return decorator
