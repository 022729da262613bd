import logging

ROOT_LOGGER_NAME = "esorm"

_logger = logging.getLogger(ROOT_LOGGER_NAME)
_logger.addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    if not name or name == ROOT_LOGGER_NAME:
        return _logger
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return _logger.getChild(name)


def warn(message: str) -> None:
    _logger.warning(message)
