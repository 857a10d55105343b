import logging
from contextlib import contextmanager

from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base for every error that is rendered as a JSON envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class AuthorizationError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class StorageError(ServiceError):
    status_code = 500


class StorageUnavailableError(StorageError):
    status_code = 503


@contextmanager
def storage_errors(message: str):
    """
    Translate driver failures into service errors.

    Connection problems become a 503 so callers can tell "database down" apart
    from an empty result; anything else the driver raises is a 500 carrying
    only `message`. The driver detail is logged, never returned.
    """
    try:
        yield
    except ConnectionFailure as e:
        # includes AutoReconnect and ServerSelectionTimeoutError
        logger.error("%s: database unavailable (%s)", message, e)
        raise StorageUnavailableError("Database unavailable") from e
    except PyMongoError as e:
        logger.exception("%s", message)
        raise StorageError(message) from e
