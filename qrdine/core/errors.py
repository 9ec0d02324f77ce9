"""
Typed error taxonomy shared by every service.

Services raise these instead of HTTPException so that callers other than the
HTTP layer (seed scripts, event handlers, tests) can tell the kind of failure
apart from its message. The FastAPI handlers in exception_handlers.py turn
them into the standard error envelope.
"""
import functools
import logging

from tortoise import exceptions as orm_exc

log = logging.getLogger("qrdine.errors")


class QRDineError(Exception):
    """Base class. `code` is machine readable, `message` is for humans."""
    code = "internal_error"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(QRDineError):
    """Malformed or missing input. Caller's fault, do not retry."""
    code = "validation_error"
    status_code = 400
    default_message = "Invalid input"


class NotFound(QRDineError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class TenantNotFound(NotFound):
    code = "tenant_not_found"
    default_message = "Restaurant not found"


class Forbidden(QRDineError):
    """The record exists but belongs to another tenant or customer."""
    code = "forbidden"
    status_code = 403
    default_message = "You do not have permission to access this resource"


class Conflict(QRDineError):
    code = "conflict"
    status_code = 409
    default_message = "Resource already exists"


class InvalidStatus(QRDineError):
    code = "invalid_status"
    status_code = 422
    default_message = "Invalid order status"


class InternalError(QRDineError):
    """Persistence or infrastructure failure. Never retried inside the core."""


def translate_db_errors(func):
    """
    Wraps an async service function so ORM failures surface as typed errors.

    IntegrityError must be checked before OperationalError (it is a subclass).
    Errors that are already QRDineError pass through untouched.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except QRDineError:
            raise
        except orm_exc.IntegrityError as e:
            log.warning(f"{func.__name__}: integrity violation: {e}")
            raise Conflict() from e
        except orm_exc.ValidationError as e:
            raise ValidationError(str(e)) from e
        except (orm_exc.DBConnectionError, orm_exc.OperationalError, orm_exc.BaseORMException) as e:
            log.error(f"{func.__name__}: persistence failure: {e}")
            raise InternalError("Persistence failure") from e
    return wrapper
