import base64
import binascii
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from boto3.dynamodb.types import Binary

logger = logging.getLogger(__name__)


class AttributeKind(str, Enum):
    """Representations an attribute value can arrive in from the store."""

    TEXT = "text"
    BYTES = "bytes"
    BUFFER_LIKE = "buffer_like"
    STRUCTURED = "structured"
    PRIMITIVE = "primitive"


class _NotByteLike:
    def __repr__(self):
        return "NOT_BYTE_LIKE"


# Returned by normalize() for values that should be displayed as-is
NOT_BYTE_LIKE = _NotByteLike()

STRUCTURED_TYPES = (dict, list, tuple, set, frozenset)


def _is_json_buffer(value) -> bool:
    """Node.js serializes buffers as {"type": "Buffer", "data": [...]}."""
    return (
        isinstance(value, dict)
        and value.get('type') == 'Buffer'
        and isinstance(value.get('data'), list)
        and all(isinstance(b, int) and 0 <= b <= 255 for b in value['data'])
    )


def _supports_buffer(value) -> bool:
    try:
        memoryview(value)
    except TypeError:
        return False
    return True


@dataclass(frozen=True)
class RawAttributeValue:
    """An attribute value tagged with the representation it arrived in."""

    kind: AttributeKind
    value: Any

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(AttributeKind.TEXT, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(AttributeKind.BYTES, value)
        if isinstance(value, Binary) or _is_json_buffer(value):
            return cls(AttributeKind.BUFFER_LIKE, value)
        if isinstance(value, STRUCTURED_TYPES):
            return cls(AttributeKind.STRUCTURED, value)
        if value is None or isinstance(value, (bool, int, float, Decimal)):
            return cls(AttributeKind.PRIMITIVE, value)
        if _supports_buffer(value):
            return cls(AttributeKind.BUFFER_LIKE, value)
        return cls(AttributeKind.PRIMITIVE, value)


def buffer_bytes(value) -> bytes:
    """Copy the bytes out of a buffer-like object."""
    if isinstance(value, Binary):
        return bytes(value.value)
    if _is_json_buffer(value):
        return bytes(value['data'])
    return bytes(memoryview(value))


def stringify(value) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def decode_base64(text: str):
    """Strict standard-alphabet base64 decoding. Returns None if text is not base64."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return None


def normalize(value) -> Union[bytes, _NotByteLike]:
    """
    Convert an attribute value into canonical bytes.

    Text is treated as base64 first since that is how compressed payloads are
    usually stored; text that isn't valid base64 is UTF-8 encoded verbatim.
    Structured values return NOT_BYTE_LIKE.
    """
    raw = RawAttributeValue.from_value(value)

    if raw.kind == AttributeKind.STRUCTURED:
        return NOT_BYTE_LIKE
    if raw.kind == AttributeKind.TEXT:
        decoded = decode_base64(raw.value)
        if decoded is not None:
            return decoded
        logger.debug("Text value is not base64, using UTF-8 bytes")
        return raw.value.encode('utf-8')
    if raw.kind == AttributeKind.BYTES:
        return bytes(raw.value)
    if raw.kind == AttributeKind.BUFFER_LIKE:
        return buffer_bytes(raw.value)
    if raw.kind == AttributeKind.PRIMITIVE:
        return stringify(raw.value).encode('utf-8')
    raise ValueError(f"Unhandled attribute kind: {raw.kind}")
