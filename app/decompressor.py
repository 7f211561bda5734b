import logging
import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

GZIP_MAGIC = (0x1F, 0x8B)
ZLIB_CMF = 0x78
ZLIB_FLG_RANGE = (0x01, 0x9C)


class CompressionGuess(str, Enum):
    GZIP = "gzip"
    ZLIB = "zlib"
    NONE = "none"


class Codec(str, Enum):
    GZIP = "gzip"
    ZLIB = "zlib"
    RAW_DEFLATE = "raw_deflate"

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ')


@dataclass(frozen=True)
class CodecResult:
    codec: Codec
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DecompressionOutcome:
    text: Optional[str] = None
    codec: Optional[Codec] = None
    # Attempts that failed before the successful codec (all of them on total failure)
    failures: List[CodecResult] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.codec is not None

    def summary(self) -> str:
        return "; ".join(f"{f.codec.label}: {f.error}" for f in self.failures)


def detect_compression(data: bytes) -> CompressionGuess:
    """Guess the container format from the two leading bytes."""
    if len(data) < 2:
        return CompressionGuess.NONE
    if data[0] == GZIP_MAGIC[0] and data[1] == GZIP_MAGIC[1]:
        return CompressionGuess.GZIP
    if data[0] == ZLIB_CMF and ZLIB_FLG_RANGE[0] <= data[1] <= ZLIB_FLG_RANGE[1]:
        return CompressionGuess.ZLIB
    return CompressionGuess.NONE


def _inflate_stream(data: bytes, wbits: int, multi_member: bool = False) -> bytes:
    """
    Inflate a complete stream. Bytes left after the end of the stream are an
    error, except further members (and zero padding) of a gzip file.
    """
    chunks = []
    remaining = data
    while True:
        inflater = zlib.decompressobj(wbits)
        chunks.append(inflater.decompress(remaining))
        if not inflater.eof:
            raise zlib.error("incomplete or truncated stream")
        remaining = inflater.unused_data
        if not remaining or (multi_member and not remaining.strip(b"\x00")):
            return b"".join(chunks)
        if not multi_member:
            raise zlib.error(f"{len(remaining)} trailing bytes after end of stream")


def _inflate(codec: Codec, data: bytes, wbits: int) -> CodecResult:
    try:
        inflated = _inflate_stream(data, wbits, multi_member=(codec == Codec.GZIP))
    except zlib.error as e:
        return CodecResult(codec, error=str(e))
    try:
        return CodecResult(codec, text=inflated.decode('utf-8'))
    except UnicodeDecodeError as e:
        return CodecResult(codec, error=f"output is not valid UTF-8 ({e.reason} at byte {e.start})")


def inflate_gzip(data: bytes) -> CodecResult:
    return _inflate(Codec.GZIP, data, 16 + zlib.MAX_WBITS)


def inflate_zlib(data: bytes) -> CodecResult:
    return _inflate(Codec.ZLIB, data, zlib.MAX_WBITS)


def inflate_raw(data: bytes) -> CodecResult:
    return _inflate(Codec.RAW_DEFLATE, data, -zlib.MAX_WBITS)


# Self-describing formats first; raw deflate has no header so it goes last
CODEC_CASCADE = (inflate_gzip, inflate_zlib, inflate_raw)


def decompress(data: bytes, cascade=CODEC_CASCADE) -> DecompressionOutcome:
    """
    Try each codec in order and return the first that yields valid UTF-8 text.

    On total failure the outcome carries every codec's error message.
    """
    failures = []
    for attempt in cascade:
        result = attempt(data)
        if result.ok:
            logger.debug(f"Decompressed {len(data)} bytes with {result.codec.label}")
            return DecompressionOutcome(text=result.text, codec=result.codec, failures=failures)
        logger.debug(f"{result.codec.label} failed: {result.error}")
        failures.append(result)
    return DecompressionOutcome(failures=failures)
