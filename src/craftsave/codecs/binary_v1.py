"""Binary-V1 save format.

Layout: 4-byte header ``15 F1 51 53`` followed by a raw-deflate payload::

    varint   element count
    per element, in id order:
        string   text (one length byte, up to 255 UTF-8 bytes)
        varint   index into the emoji dictionary below
        byte     bit 7 = discovery, bits 0-6 = recipe count (127 = "more follows")
        [varint] recipe count - 127, only when the 7-bit field reads 127
        per recipe: varint a (smaller ingredient id), varint b - a
    varint   emoji count
    string   emoji, most frequent first

All varints are unsigned LEB128.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..compression import DEFLATE_RAW, compress_buffer
from ..errors import MalformedPayloadError
from ..models import DEFAULT_EMOJI, NOTHING, Element
from ..primitives import (
    ByteReader,
    decode_leb128,
    decode_string,
    encode_leb128,
    encode_string,
    rank_emojis,
)
from ..sniffer import BINARY_V1_HEADER, SavefileType

if TYPE_CHECKING:
    from ..savefile import Savefile

logger = logging.getLogger(__name__)

DISCOVERY_FLAG = 0x80
RECIPE_COUNT_OVERFLOW = 127
# Deltas are reconstructed with 32-bit wraparound so files whose first
# ingredient carries the larger id (negative delta) still resolve.
_ID_MASK = 0xFFFFFFFF


def decode(savefile: "Savefile", raw: bytes, has_header: bool = True) -> "Savefile":
    if has_header:
        if bytes(raw[:4]) != BINARY_V1_HEADER:
            raise MalformedPayloadError("Missing Binary-V1 header")
        raw = raw[4:]
    reader = ByteReader(compress_buffer(bytes(raw), DEFLATE_RAW, compress=False))
    savefile.type = SavefileType.BINARY_V1

    # Declared stream position -> element; "Nothing" keeps its slot as None
    by_position: List[Optional[Element]] = []
    pending_emoji: List[Tuple[Element, int]] = []
    pending_recipes: List[Tuple[Optional[Element], List[Tuple[int, int]]]] = []

    element_count = decode_leb128(reader)
    for _ in range(element_count):
        text = decode_string(reader)
        emoji_index = decode_leb128(reader)
        flags = reader.read_byte()
        is_discovery = flags > 127

        recipe_count = flags - is_discovery * 128
        if recipe_count >= RECIPE_COUNT_OVERFLOW:
            recipe_count += decode_leb128(reader)

        pairs: List[Tuple[int, int]] = []
        for _ in range(recipe_count):
            a = decode_leb128(reader)
            b = (decode_leb128(reader) + a) & _ID_MASK
            pairs.append((a, b))

        element: Optional[Element] = None
        if text != NOTHING:
            known = savefile.get_element(text)
            element = savefile.add_element(text, DEFAULT_EMOJI, is_discovery)
            if known is None:
                pending_emoji.append((element, emoji_index))
        by_position.append(element)
        pending_recipes.append((element, pairs))

    emojis = [decode_string(reader) for _ in range(decode_leb128(reader))]
    for element, index in pending_emoji:
        element.emoji = emojis[index] if index < len(emojis) else DEFAULT_EMOJI

    dangling = 0
    for result, pairs in pending_recipes:
        if result is None:
            continue
        for a_pos, b_pos in pairs:
            a = by_position[a_pos] if a_pos < len(by_position) else None
            b = by_position[b_pos] if b_pos < len(by_position) else None
            if a is None or b is None:
                dangling += 1
                continue
            savefile.add_recipe(a, b, result)

    savefile.reconcile_stats()
    logger.debug(
        "Decoded Binary-V1 save: %d elements, %d emoji, %d recipes, %d dangling pairs skipped",
        savefile.stats.elements,
        len(emojis),
        savefile.stats.recipes,
        dangling,
    )
    return savefile


def encode(savefile: "Savefile", append_header: bool = True) -> bytes:
    out = bytearray()
    emojis = rank_emojis(element.emoji for element in savefile.elements)

    encode_leb128(len(savefile.elements), out)
    for element in savefile.elements:
        encode_string(element.text, out)
        encode_leb128(emojis[element.emoji], out)

        recipe_count = len(element.recipes)
        out.append(element.discovery * DISCOVERY_FLAG + min(recipe_count, RECIPE_COUNT_OVERFLOW))
        if recipe_count >= RECIPE_COUNT_OVERFLOW:
            encode_leb128(recipe_count - RECIPE_COUNT_OVERFLOW, out)

        for pair in element.recipes:
            low, high = sorted((pair.a.id, pair.b.id))
            encode_leb128(low, out)
            encode_leb128(high - low, out)

    encode_leb128(len(emojis), out)
    for emoji in emojis:
        encode_string(emoji, out)

    compressed = compress_buffer(bytes(out), DEFLATE_RAW)
    logger.debug("Encoded Binary-V1 save: %d bytes raw, %d compressed", len(out), len(compressed))
    return BINARY_V1_HEADER + compressed if append_header else compressed
