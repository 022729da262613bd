from __future__ import annotations

from typing import Any

from ._operation import Operation
from ._provider import Provider
from .exceptions import NotSupportedError


class Component:
    __provider__: Provider

    def __init__(
        self,
        **kwargs,
    ):
        if "__provider__" in kwargs:
            self.__bind__(kwargs.pop("__provider__"))

    def __bind__(
        self,
        provider: Provider | dict | str | None,
    ) -> None:
        if provider is None:
            return
        if isinstance(provider, Provider):
            provider.__component__ = self
            self.__provider__ = provider
            return

        if isinstance(provider, dict):
            provider = dict(provider)
            type = provider.pop("type")
            parameters = provider.pop("parameters", dict())
        else:
            type = provider
            parameters = dict()
        from ._loader import Loader

        if ":" in type or "." in type:
            provider_path = type
        else:
            module_name = self.__class__.__module__.rsplit(".", 1)[0]
            provider_path = f"{module_name}.providers.{type}"
        provider_instance = Loader.load_provider_instance(
            path=provider_path,
            parameters=parameters,
        )
        self.__bind__(provider=provider_instance)

    def __run__(
        self,
        operation: dict | str | Operation | None = None,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError("No provider is bound")
        return self.__provider__.__run__(
            operation=self._convert_operation(operation),
        )

    async def __arun__(
        self,
        operation: dict | str | Operation | None = None,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError("No provider is bound")
        return await self.__provider__.__arun__(
            operation=self._convert_operation(operation),
        )

    def __supports__(self, feature: str) -> bool:
        return self.__provider__.__supports__(feature)

    def _convert_operation(
        self,
        operation: dict | str | Operation | None,
    ) -> Operation | None:
        if isinstance(operation, dict):
            return Operation.from_dict(operation)
        elif isinstance(operation, str):
            return Operation(name=operation)
        return operation
