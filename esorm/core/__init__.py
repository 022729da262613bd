from ._async_helper import run_async, run_sync
from ._callback import Callback
from ._component import Component
from ._decorators import operation
from ._loader import Loader
from ._log_helper import get_logger, warn
from ._operation import Operation
from ._provider import Provider
from ._type_converter import TypeConverter
from .data_model import DataModel, DataModelField

__all__ = [
    "Callback",
    "Component",
    "DataModel",
    "DataModelField",
    "Loader",
    "Operation",
    "Provider",
    "TypeConverter",
    "get_logger",
    "operation",
    "run_async",
    "run_sync",
    "warn",
]
