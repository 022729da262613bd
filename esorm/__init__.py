from .adapter import Adapter, ConnectionRegistry

__all__ = ["Adapter", "ConnectionRegistry"]
