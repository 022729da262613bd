from esorm.core.exceptions import (
    BadRequestError,
    BootstrapError,
    CollectionNotFoundError,
    ConflictError,
    ConnectionNotFoundError,
    IdentityDuplicateError,
    IdentityMissingError,
    NotFoundError,
)

from ._models import (
    CollectionDefinition,
    ConnectionConfig,
    ConnectionResult,
    ElasticsearchSettings,
    IndexDescriptor,
    IndexStatus,
)
from ._registry import ConnectionRecord, ConnectionRegistry
from .component import Adapter

__all__ = [
    "Adapter",
    "CollectionDefinition",
    "ConnectionConfig",
    "ConnectionRecord",
    "ConnectionRegistry",
    "ConnectionResult",
    "ElasticsearchSettings",
    "IndexDescriptor",
    "IndexStatus",
    "BadRequestError",
    "BootstrapError",
    "CollectionNotFoundError",
    "ConflictError",
    "ConnectionNotFoundError",
    "IdentityDuplicateError",
    "IdentityMissingError",
    "NotFoundError",
]
