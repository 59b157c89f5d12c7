from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.context import RequestContext
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (ValidationError, 400),
    (DomainError, 400),
)


def to_json(value: Any) -> Any:
    """Convert domain values (dataclasses, enums, dates, Decimal) to JSON-safe data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(data: Any = None, *, message: str | None = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = to_json(data)
    return jsonify(body), status


def error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def context_required(view):
    """Resolve the RequestContext from the session and pass it as ctx.

    Domain errors become JSON errors; anything else is logged and answered 500.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            ctx = RequestContext.from_session(session)
            if ctx is None:
                return error("Please sign in to continue", 401)
            return view(ctx, *args, **kwargs)
        except DomainError as e:
            status = next(code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls))
            return error(str(e), status)
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return error("Internal server error", 500)

    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def arg_date(name: str, default: date) -> date:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def arg_int(name: str, default: int | None = None) -> int | None:
    value = request.args.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number")
