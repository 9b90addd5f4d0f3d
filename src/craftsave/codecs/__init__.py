"""Format codecs, one module per on-disk encoding.

Each module exposes ``decode(savefile, raw)`` which populates an empty
Savefile, and ``encode(savefile, ...)``.
"""
from ..sniffer import SavefileType
from . import binary_v1, binary_v2, legacy, official

CODECS = {
    SavefileType.OFFICIAL: official,
    SavefileType.LEGACY: legacy,
    SavefileType.BINARY_V2: binary_v2,
    SavefileType.BINARY_V1: binary_v1,
}

__all__ = ["CODECS", "binary_v1", "binary_v2", "legacy", "official"]
