"""Conversion of arbitrary failures into error descriptors."""
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from .exceptions import ServiceError
from .types import (
    UNKNOWN_ERROR_MESSAGE,
    ErrorCategory,
    ErrorDescriptor,
    RecoveryHint,
    RecoveryStrategyName,
)

logger = logging.getLogger(__name__)


def normalize(value: Any) -> ErrorDescriptor:
    """Convert any raised or rejected value into an ErrorDescriptor.

    Recognised shapes, in order:

    - exceptions with an HTTP ``response`` (status plus body)
    - exceptions carrying a bare ``status`` (``ServiceError``,
      ``aiohttp.ClientResponseError``)
    - raw error bodies (mappings with an ``error`` or ``message`` key)
    - any other exception
    - anything else

    Malformed fields are treated as absent; this function does not raise.
    """
    try:
        if isinstance(value, BaseException):
            return _from_exception(value)
        if isinstance(value, Mapping):
            return _from_body(value, _as_int(value.get("status")), fallback=UNKNOWN_ERROR_MESSAGE)
    except Exception as e:
        # Attribute access on foreign objects can run arbitrary code
        logger.debug(f"Failed to inspect error value {type(value).__name__}: {e}")

    return ErrorDescriptor(message=UNKNOWN_ERROR_MESSAGE)


def _from_exception(error: BaseException) -> ErrorDescriptor:
    message = _exception_message(error)

    response = getattr(error, "response", None)
    if response is not None:
        status = _as_int(getattr(response, "status", None))
        if status is None:
            status = _as_int(getattr(response, "status_code", None))
        if status is not None:
            return _from_body(_response_body(response), status, fallback=message)

    if isinstance(error, ServiceError):
        return ErrorDescriptor(
            message=message,
            status_code=_as_int(error.status),
            code=error.code,
            details=_freeze(error.details),
        )

    # aiohttp.ClientResponseError and friends
    status = _as_int(getattr(error, "status", None))
    if status is not None:
        return ErrorDescriptor(message=message, status_code=status)

    return ErrorDescriptor(message=message)


def _from_body(body: Any, status: int | None, fallback: str) -> ErrorDescriptor:
    if not isinstance(body, Mapping):
        return ErrorDescriptor(message=fallback, status_code=status)

    nested = body.get("error")
    if isinstance(nested, Mapping):
        return ErrorDescriptor(
            message=_as_str(nested.get("message")) or fallback,
            status_code=status,
            code=_as_str(nested.get("code")),
            category=ErrorCategory.parse(nested.get("category")) if nested.get("category") else None,
            timestamp=_as_timestamp(nested.get("timestamp")),
            details=_freeze(nested.get("details")),
            field_errors=_field_errors(nested.get("field_errors")),
            recovery_hint=_recovery_hint(nested.get("recovery")),
        )

    details = body.get("details")
    field_errors = details.get("field_errors") if isinstance(details, Mapping) else None
    message = _as_str(body.get("message")) or _as_str(body.get("detail")) or fallback

    return ErrorDescriptor(
        message=message,
        status_code=status,
        code=_as_str(body.get("code")),
        details=_freeze(details),
        field_errors=_field_errors(field_errors),
    )


def _recovery_hint(raw: Any) -> RecoveryHint | None:
    if not isinstance(raw, Mapping):
        return None

    actions = raw.get("actions")
    if isinstance(actions, (list, tuple)):
        actions = tuple(str(action) for action in actions)
    else:
        actions = ()

    return RecoveryHint(
        strategy=RecoveryStrategyName.parse(raw.get("strategy")),
        user_message=_as_str(raw.get("user_message")) or "",
        actions=actions,
        retry_enabled=raw.get("retry_enabled") is True,
    )


def _response_body(response: Any) -> Any:
    data = getattr(response, "data", None)
    if data is not None:
        return data

    json_method = getattr(response, "json", None)
    if callable(json_method):
        try:
            return json_method()
        except Exception:
            return None
    return None


def _exception_message(error: BaseException) -> str:
    try:
        message = str(error)
    except Exception:
        return UNKNOWN_ERROR_MESSAGE
    return message if message else UNKNOWN_ERROR_MESSAGE


def _field_errors(raw: Any) -> Mapping[str, str] | None:
    if not isinstance(raw, Mapping) or not raw:
        return None
    return MappingProxyType({str(k): str(v) for k, v in raw.items()})


def _freeze(raw: Any) -> Mapping[str, Any] | None:
    if not isinstance(raw, Mapping):
        return None
    return MappingProxyType(dict(raw))


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
        except ValueError:
            pass
    return datetime.now(UTC)
