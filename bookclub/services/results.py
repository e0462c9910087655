import functools
from dataclasses import dataclass
from typing import Any, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from bookclub.extensions import db
from bookclub.services.errors import ServiceError, StoreError


@dataclass
class ActionResult:
    ok: bool
    value: Any = None
    error: Optional[ServiceError] = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error):
        return cls(ok=False, error=error)

    @property
    def kind(self):
        return self.error.kind if self.error is not None else None


def service_action(func):
    """Run an operation as one unit of work and report its outcome as a value.

    A ``ServiceError`` raised inside rolls the session back and becomes a failed
    result. Store failures are logged and reported as ``store_error``.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            value = func(*args, **kwargs)
        except ServiceError as exc:
            db.session.rollback()
            return ActionResult.failure(exc)
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Store failure in %s", func.__name__)
            return ActionResult.failure(StoreError())
        return ActionResult.success(value)

    return wrapper
