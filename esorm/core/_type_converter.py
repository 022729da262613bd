import inspect
import json
import types
from typing import Any, Union, get_args, get_origin, get_type_hints


class TypeConverter:
    @staticmethod
    def convert_value(value, expected_type):
        if expected_type is None or expected_type is Any:
            return value

        origin = get_origin(expected_type)

        # Optional[T] collapses to T; wider unions are left to the callee.
        if origin in (Union, types.UnionType):
            members = [
                t for t in get_args(expected_type) if t is not type(None)
            ]
            if len(members) != 1:
                return value
            expected_type = members[0]
            origin = get_origin(expected_type)

        if isinstance(value, list) and origin in (list, tuple):
            elem_type = (
                get_args(expected_type)[0] if get_args(expected_type) else Any
            )
            return [TypeConverter.convert_value(v, elem_type) for v in value]

        if isinstance(value, dict) and origin is dict:
            key_type, val_type = (
                get_args(expected_type)
                if get_args(expected_type)
                else (Any, Any)
            )
            return {
                TypeConverter.convert_value(
                    k, key_type
                ): TypeConverter.convert_value(v, val_type)
                for k, v in value.items()
            }

        if isinstance(value, (dict, str)) and callable(
            getattr(expected_type, "from_dict", None)
        ):
            if isinstance(value, str):
                value = json.loads(value)
            return expected_type.from_dict(value)

        try:
            if expected_type is int and isinstance(value, (str, float)):
                return int(value)
            if expected_type is float and isinstance(value, (str, int)):
                return float(value)
            if expected_type is str and isinstance(value, (int, float)):
                return str(value)
            if expected_type is bool and isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            if expected_type is dict and isinstance(value, str):
                return json.loads(value)
        except (ValueError, TypeError):
            pass

        return value

    @staticmethod
    def convert_args(method, args: dict) -> dict:
        sig = inspect.signature(method)
        hints = get_type_hints(method)
        converted_args: dict = {}
        for param_name in sig.parameters:
            if param_name in args:
                converted_args[param_name] = TypeConverter.convert_value(
                    args[param_name], hints.get(param_name, None)
                )
        return args | converted_args
