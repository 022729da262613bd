from typing import Any

from esorm.core import Component, DataModel, Provider, operation


class Greeting(DataModel):
    name: str
    excited: bool = False


class Greeter(Component):
    @operation()
    def greet(self, greeting: dict | Greeting, callback: Any = None) -> str:
        """Greet."""

    @operation()
    def wave(self, callback: Any = None) -> str:
        """Wave."""
        return "component wave"

    @operation()
    async def agreet(
        self, greeting: dict | Greeting, callback: Any = None
    ) -> str:
        """Greet."""


class AsyncGreeter(Provider):
    prefix: str

    def __init__(self, prefix: str = "Hello", **kwargs):
        self.prefix = prefix
        super().__init__(**kwargs)

    async def agreet(self, greeting: Greeting) -> str:
        mark = "!" if greeting.excited else "."
        return f"{self.prefix} {greeting.name}{mark}"


class SyncGreeter(Provider):
    def greet(self, greeting: Greeting) -> str:
        return f"Hi {greeting.name}"
