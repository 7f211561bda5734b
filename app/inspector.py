import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from attribute_values import AttributeKind, NOT_BYTE_LIKE, RawAttributeValue, buffer_bytes, normalize, stringify
from classifier import classify, classify_structured
from decompressor import Codec, CompressionGuess, decompress, detect_compression

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Content"
JSON_TITLE = "JSON Content"
DECOMPRESSED_JSON_TITLE = "Decompressed JSON Content"
DECOMPRESSED_TITLE = "Decompressed Content"
COMPRESSED_FALLBACK_TITLE = "Compressed JSON Content"


@dataclass(frozen=True)
class ClassifiedContent:
    """What the viewer shows for one inspected attribute."""

    title: str
    content: str
    is_structured: bool
    decompression_attempted: bool = False
    decompression_failed: bool = False
    codec: Optional[Codec] = None
    diagnostic: Optional[str] = None


def build_title(attempted: bool, succeeded: bool, is_structured: bool, default_title: str = DEFAULT_TITLE) -> str:
    if attempted and succeeded:
        return DECOMPRESSED_JSON_TITLE if is_structured else DECOMPRESSED_TITLE
    if attempted:
        return COMPRESSED_FALLBACK_TITLE
    return JSON_TITLE if is_structured else default_title


def render_original(raw: RawAttributeValue):
    """Best-effort (content, is_structured) for a value shown without decompression."""
    if raw.kind == AttributeKind.STRUCTURED:
        return classify_structured(raw.value)
    if raw.kind == AttributeKind.TEXT:
        return classify(raw.value)
    if raw.kind in (AttributeKind.BYTES, AttributeKind.BUFFER_LIKE):
        data = bytes(raw.value) if raw.kind == AttributeKind.BYTES else buffer_bytes(raw.value)
        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError:
            return base64.b64encode(data).decode('ascii'), False
        return classify(text)
    return stringify(raw.value), False


def _failure_diagnostic(outcome) -> str:
    tried = ", ".join(f.codec.label for f in outcome.failures)
    return f"Decompression failed (tried {tried}). {outcome.summary()}"


def _classify_uncompressed(raw, default_title):
    content, is_structured = render_original(raw)
    return ClassifiedContent(
        title=build_title(False, False, is_structured, default_title),
        content=content,
        is_structured=is_structured,
    )


def _decompress_and_classify(value, default_title):
    raw = RawAttributeValue.from_value(value)
    data = normalize(raw)

    if data is NOT_BYTE_LIKE or detect_compression(data) == CompressionGuess.NONE:
        return _classify_uncompressed(raw, default_title)

    outcome = decompress(data)
    if outcome.succeeded:
        content, is_structured = classify(outcome.text)
        return ClassifiedContent(
            title=build_title(True, True, is_structured, default_title),
            content=content,
            is_structured=is_structured,
            decompression_attempted=True,
            codec=outcome.codec,
        )

    diagnostic = _failure_diagnostic(outcome)
    logger.warning(diagnostic)
    content, is_structured = render_original(raw)
    return ClassifiedContent(
        title=build_title(True, False, is_structured, default_title),
        content=content,
        is_structured=is_structured,
        decompression_attempted=True,
        decompression_failed=True,
        diagnostic=diagnostic,
    )


def decompress_and_classify(value, default_title: str = DEFAULT_TITLE) -> ClassifiedContent:
    """
    Decompress (when the bytes look compressed) and classify an attribute value.

    Never raises: every path ends in displayable content, with a diagnostic
    when decompression was attempted and every codec failed.
    An unexpected fault falls back to the repr of the value as plain text,
    with both decompression flags False and no diagnostic (it is logged).
    """
    try:
        return _decompress_and_classify(value, default_title)
    except Exception:
        logger.exception("Unexpected error while inspecting attribute value")
        return ClassifiedContent(
            title=build_title(False, False, False, default_title),
            content=repr(value),
            is_structured=False,
        )


async def inspect_attribute(value, default_title: str = DEFAULT_TITLE) -> ClassifiedContent:
    # Large payloads are inflated off the event loop
    return await asyncio.to_thread(decompress_and_classify, value, default_title)


async def inspect_record(record: Dict, attributes: Iterable[str]) -> Dict[str, ClassifiedContent]:
    """Inspect several attributes of one record concurrently, keyed by attribute name."""
    names = [name for name in attributes if name in record]
    results = await asyncio.gather(*(inspect_attribute(record[name], name) for name in names))
    return dict(zip(names, results))
