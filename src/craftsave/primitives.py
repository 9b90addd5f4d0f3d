"""Low-level building blocks shared by the binary codecs.

- LEB128 unsigned varints (7 data bits per byte, high bit = continuation)
- Length-prefixed UTF-8 strings (one length byte, text truncated to 255 bytes)
- Symmetric pair keys for unordered element id pairs
- Frequency ranking of emoji for the Binary-V1 dictionary
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .errors import MalformedPayloadError

PAIR_SHIFT = 24
PAIR_MASK = (1 << PAIR_SHIFT) - 1


class ByteReader:
    """Sequential reader over a byte buffer that fails loudly when exhausted."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    def read_byte(self) -> int:
        if self.pos >= len(self._data):
            raise MalformedPayloadError(f"Unexpected end of stream at offset {self.pos}")
        value = self._data[self.pos]
        self.pos += 1
        return value

    def read_bytes(self, count: int) -> bytes:
        end = self.pos + count
        if end > len(self._data):
            raise MalformedPayloadError(
                f"Unexpected end of stream reading {count} bytes at offset {self.pos}"
            )
        chunk = self._data[self.pos:end]
        self.pos = end
        return chunk

    @property
    def remaining(self) -> int:
        return len(self._data) - self.pos


def encode_leb128(value: int, out: bytearray) -> None:
    if value < 0:
        raise ValueError(f"LEB128 value must be non-negative, got {value}")
    while value & ~0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)


def decode_leb128(reader: ByteReader) -> int:
    value = 0
    shift = 0
    while True:
        byte = reader.read_byte()
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value
        shift += 7


def encode_string(text: str, out: bytearray) -> None:
    encoded = text.encode("utf-8")[:255]
    out.append(len(encoded))
    out.extend(encoded)


def decode_string(reader: ByteReader) -> str:
    length = reader.read_byte()
    # A truncated multi-byte character at the end becomes U+FFFD
    return reader.read_bytes(length).decode("utf-8", errors="replace")


def pair_key(a: int, b: int) -> int:
    """Pack two ids into one order-independent integer key.

    The larger id lands in the high bits, the smaller in the low 24 bits, so
    ``pair_key(a, b) == pair_key(b, a)``.
    """
    if a > b:
        return (a << PAIR_SHIFT) | b
    return (b << PAIR_SHIFT) | a


def split_pair_key(key: int) -> Tuple[int, int]:
    """Inverse of :func:`pair_key`; returns ``(larger, smaller)``."""
    return key >> PAIR_SHIFT, key & PAIR_MASK


def rank_emojis(emojis: Iterable[str]) -> Dict[str, int]:
    """Map each emoji to its dictionary index, most frequent first.

    Ties keep first-seen order (Counter preserves insertion order and
    ``sorted`` is stable).
    """
    counts = Counter(emojis)
    ranked: List[Tuple[str, int]] = sorted(counts.items(), key=lambda kv: -kv[1])
    return {emoji: index for index, (emoji, _) in enumerate(ranked)}
