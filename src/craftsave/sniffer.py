from __future__ import annotations

from enum import Enum
from typing import Optional

GZIP_MAGIC = b"\x1f\x8b"
LEGACY_MAGIC = b"{"
BINARY_V2_HEADER = b"\x49\x43\x42\x1f"
BINARY_V1_HEADER = b"\x15\xf1\x51\x53"


class SavefileType(str, Enum):
    OFFICIAL = "official"
    LEGACY = "legacy"
    BINARY_V2 = "binaryV2"
    BINARY_V1 = "binaryV1"


def get_savefile_type(raw: bytes) -> Optional[SavefileType]:
    """Classify a buffer by its leading bytes; first match wins.

    Returns None for anything unrecognized, including buffers too short to
    hold a header.
    """
    head = bytes(raw[:4])
    if head.startswith(GZIP_MAGIC):
        return SavefileType.OFFICIAL
    if head.startswith(LEGACY_MAGIC):
        return SavefileType.LEGACY
    if head == BINARY_V2_HEADER:
        return SavefileType.BINARY_V2
    if head == BINARY_V1_HEADER:
        return SavefileType.BINARY_V1
    return None
