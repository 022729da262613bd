from __future__ import annotations

import json
from typing import Any

from .data_model import DataModel


class Operation(DataModel):
    """Operation.

    Attributes:
        name: Operation name, without the async prefix.
        args: Operation arguments. Arguments left at None are dropped
            so that the provider's own defaults apply.
    """

    name: str | None = None
    args: dict[str, Any] | None = None

    @staticmethod
    def normalize(
        name: str | None,
        args: dict[str, Any] | None,
    ) -> Operation:
        if args is None:
            return Operation(name=name)
        rargs: dict = {}
        for k, v in args.items():
            if k == "self":
                continue
            if k == "kwargs":
                rargs.update(v)
            elif v is not None:
                rargs[k] = v
        return Operation(name=name, args=rargs)

    def __str__(self) -> str:
        text = self.name or ""
        if self.args is not None:
            for key, value in self.args.items():
                text = f"{text} {key}={self._str_value(value)}"
        return text

    def _str_value(self, value: Any) -> str:
        if value is None or isinstance(
            value, (str, int, float, bool, dict, list)
        ):
            try:
                return json.dumps(value)
            except TypeError:
                return str(value)
        return type(value).__name__
