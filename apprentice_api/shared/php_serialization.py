from __future__ import annotations

import logging
from typing import Any

import phpserialize


logger = logging.getLogger(__name__)

_SERIALIZED_TOKENS = {"a", "O", "s", "S", "i", "d", "b", "N", "C"}


def is_serialized(value: Any) -> bool:
    if not isinstance(value, (str, bytes)):
        return False
    data = value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value
    data = data.strip()
    if data == "N;":
        return True
    if len(data) < 4 or data[1] != ":":
        return False
    if data[-1] not in (";", "}"):
        return False
    return data[0] in _SERIALIZED_TOKENS


def maybe_unserialize(value: Any) -> Any:
    """Decode a PHP-serialized string, returning anything else untouched.

    Mirrors WordPress ``maybe_unserialize``: a value that looks serialized but
    fails to decode comes back as ``None`` instead of raising.
    """
    if not is_serialized(value):
        return value
    raw = value.encode("utf-8") if isinstance(value, str) else value
    try:
        return phpserialize.loads(raw.strip(), decode_strings=True)
    except ValueError as exc:
        logger.debug("php_serialization: decode_failed error=%s", exc)
        return None


def php_array_values(value: Any) -> list[Any] | None:
    """Return the values of a decoded PHP array in stored order."""
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    return None
