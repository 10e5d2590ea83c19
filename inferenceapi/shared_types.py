"""Scalar types shared by the inference API resources, with their validation rules."""

from __future__ import annotations

import re

__all__ = [
    "ValidationError",
    "validate_group",
    "validate_kind",
    "validate_object_name",
    "validate_port_number",
    "validate_label_key",
    "validate_label_value",
]

_GROUP_MAX_LENGTH = 253
_KIND_MAX_LENGTH = 63
_OBJECT_NAME_MAX_LENGTH = 253
_LABEL_KEY_MAX_LENGTH = 253
_LABEL_VALUE_MAX_LENGTH = 63
_PORT_MIN = 1
_PORT_MAX = 65535

_DNS_LABEL = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS_SUBDOMAIN = rf"{_DNS_LABEL}(\.{_DNS_LABEL})*"

_GROUP_RE = re.compile(rf"(?:{_DNS_SUBDOMAIN})?")
_KIND_RE = re.compile(r"[a-zA-Z]([-a-zA-Z0-9]*[a-zA-Z0-9])?")
_LABEL_KEY_RE = re.compile(
    rf"({_DNS_SUBDOMAIN}/)?([A-Za-z0-9][-A-Za-z0-9_.]{{0,61}})?[A-Za-z0-9]"
)
_LABEL_VALUE_RE = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?")


class ValidationError(ValueError):
    """Raised when a value breaks the schema rules of the API."""


def _require_str(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, not {type(value).__name__}")
    return value


def _check_length(value: str, what: str, *, minimum: int = 0, maximum: int) -> None:
    if len(value) < minimum:
        raise ValidationError(
            f"{what} {value!r} is shorter than {minimum} characters"
        )
    if len(value) > maximum:
        raise ValidationError(f"{what} is longer than {maximum} characters")


def _check_pattern(value: str, pattern: re.Pattern[str], what: str) -> None:
    if pattern.fullmatch(value) is None:
        raise ValidationError(f"{what} {value!r} does not match the required format")


def validate_group(value: str) -> str:
    """Check an API group: empty (the core group) or an RFC 1123 subdomain."""
    value = _require_str(value, "group")
    _check_length(value, "group", maximum=_GROUP_MAX_LENGTH)
    _check_pattern(value, _GROUP_RE, "group")
    return value


def validate_kind(value: str) -> str:
    """Check a resource kind such as ``Service``."""
    value = _require_str(value, "kind")
    _check_length(value, "kind", minimum=1, maximum=_KIND_MAX_LENGTH)
    _check_pattern(value, _KIND_RE, "kind")
    return value


def validate_object_name(value: str) -> str:
    """Check the name of an object: between 1 and 253 characters."""
    value = _require_str(value, "object name")
    _check_length(value, "object name", minimum=1, maximum=_OBJECT_NAME_MAX_LENGTH)
    return value


def validate_port_number(value: int) -> int:
    """Check a network port in the range 1 to 65535."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"port number must be an integer, not {type(value).__name__}")
    if not _PORT_MIN <= value <= _PORT_MAX:
        raise ValidationError(
            f"port number {value} is outside the range {_PORT_MIN}-{_PORT_MAX}"
        )
    return value


def validate_label_key(value: str) -> str:
    """Check a label key: an optional subdomain prefix with ``/`` and a name."""
    value = _require_str(value, "label key")
    _check_length(value, "label key", minimum=1, maximum=_LABEL_KEY_MAX_LENGTH)
    _check_pattern(value, _LABEL_KEY_RE, "label key")
    return value


def validate_label_value(value: str) -> str:
    """Check a label value: at most 63 characters, alphanumeric at both ends."""
    value = _require_str(value, "label value")
    _check_length(value, "label value", maximum=_LABEL_VALUE_MAX_LENGTH)
    _check_pattern(value, _LABEL_VALUE_RE, "label value")
    return value