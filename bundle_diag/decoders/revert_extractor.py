"""Extraction of revert data from loosely shaped error objects.

Structured fields are tried first, in a fixed order. Only when none of them
holds hex data is the error text scanned for something that looks like an
encoded payload.
"""
import logging
import re
from collections.abc import Mapping
from typing import Any, Optional
from eth_utils import to_hex

logger = logging.getLogger(__name__)

# Lookup paths, highest precedence first
REVERT_DATA_PATHS: tuple[tuple[str, ...], ...] = (
    ("data",),
    ("cause", "data"),
    ("cause", "cause", "data"),
    ("details",),
)

# 0x followed by at least 4 bytes
HEX_PAYLOAD_PATTERN = re.compile(r"(0x[0-9a-fA-F]{8,})")

_MISSING = object()


def _step(obj: Any, key: str) -> Any:
    """Read one key from a mapping or attribute from an object.

    Errors raised while reading (e.g. lazy properties) count as absent.
    """
    if obj is None:
        return None
    try:
        if isinstance(obj, Mapping):
            return obj.get(key)
        value = getattr(obj, key, _MISSING)
    except Exception as e:
        logger.debug(f"Reading {key!r} from {type(obj).__name__} failed: {e}")
        return None
    if value is _MISSING:
        if key == "cause" and isinstance(obj, BaseException):
            return obj.__cause__
        return None
    return value


def resolve_path(obj: Any, path: tuple[str, ...]) -> Any:
    """Follow a lookup path, returning None when any step is absent."""
    for key in path:
        obj = _step(obj, key)
        if obj is None:
            return None
    return obj


def _as_hex_string(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value if value.startswith("0x") else None
    if isinstance(value, (bytes, bytearray)):
        return to_hex(bytes(value))
    return None


def _message_text(err: Any) -> str:
    short_message = _step(err, "short_message") or _step(err, "shortMessage")
    message = _step(err, "message")
    if message is None and isinstance(err, BaseException):
        message = str(err)
    return f"{short_message or ''} {message or ''}"


def find_hex_payload(text: Optional[str]) -> Optional[str]:
    """Return the first 0x-prefixed hex run of at least 4 bytes in text.

    Last-resort heuristic for errors that only carry revert data inside
    their message.
    """
    if not text:
        return None
    match = HEX_PAYLOAD_PATTERN.search(text)
    return match.group(1) if match else None


def extract_revert_data(err: Any) -> Optional[str]:
    """
    Extract candidate revert data from an error object.

    Args:
        err: Exception, JSON-RPC error dict or any object exposing
            data / cause / details / short_message / message

    Returns:
        0x-prefixed hex string, or None when nothing was found
    """
    for path in REVERT_DATA_PATHS:
        candidate = _as_hex_string(resolve_path(err, path))
        if candidate:
            return candidate

    return find_hex_payload(_message_text(err))
