from typing import Any

from ._async_helper import run_async, run_sync
from ._operation import Operation
from ._type_converter import TypeConverter
from .exceptions import NotSupportedError


class Provider:
    __component__: Any

    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __run__(self, operation: Operation | None = None) -> Any:
        if operation and operation.name:
            func = getattr(self, operation.name, None)
            if func and callable(func):
                args = TypeConverter.convert_args(func, operation.args or {})
                return func(**args)

            afunc = getattr(self, f"a{operation.name}", None)
            if afunc and callable(afunc):
                args = TypeConverter.convert_args(afunc, operation.args or {})
                return run_sync(afunc, **args)
        raise NotSupportedError(str(operation) if operation else None)

    async def __arun__(self, operation: Operation | None = None) -> Any:
        if operation and operation.name:
            afunc = getattr(self, f"a{operation.name}", None)
            if afunc and callable(afunc):
                args = TypeConverter.convert_args(afunc, operation.args or {})
                return await afunc(**args)

        return await run_async(func=self.__run__, operation=operation)

    def __supports__(self, feature: str) -> bool:
        return callable(getattr(self, feature, None)) or callable(
            getattr(self, f"a{feature}", None)
        )
