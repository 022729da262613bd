__all__ = [
    "BaseError",
    "BadRequestError",
    "BootstrapError",
    "CollectionNotFoundError",
    "ConflictError",
    "ConnectionNotFoundError",
    "IdentityDuplicateError",
    "IdentityMissingError",
    "LoadError",
    "NotFoundError",
    "NotSupportedError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class IdentityMissingError(BadRequestError):
    def __init__(self, message: str = "Connection is missing an identity"):
        super().__init__(message)


class NotFoundError(BaseError):
    status_code = 404


class ConnectionNotFoundError(NotFoundError):
    identity: str | None

    def __init__(self, identity: str | None):
        self.identity = identity
        super().__init__(f"Connection {identity!r} is not registered")


class CollectionNotFoundError(NotFoundError):
    identity: str
    collection: str | None

    def __init__(self, identity: str, collection: str | None):
        self.identity = identity
        self.collection = collection
        super().__init__(
            f"Collection {collection!r} is not registered "
            f"on connection {identity!r}"
        )


class ConflictError(BaseError):
    status_code = 409


class IdentityDuplicateError(ConflictError):
    identity: str

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Connection {identity!r} is already registered")


class NotSupportedError(BaseError):
    status_code = 415


class BootstrapError(Exception):
    status_code = 500
    index: str

    def __init__(self, index: str, message: str | None = None):
        self.index = index
        super().__init__(message or f"Bootstrap failed for index {index!r}")


class LoadError(Exception):
    status_code = 500
