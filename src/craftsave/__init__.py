"""
craftsave: codecs for element-combination game save files.

This package provides:
- An in-memory element graph (Savefile) with recipes, uses and statistics
- Format detection from leading bytes
- Decoders/encoders for the legacy JSON, official gzip JSON and Binary-V1
  formats; Binary-V2 is recognized but not implemented
"""
from .errors import MalformedPayloadError, SavefileError, SchemaValidationError, UnsupportedFormatError
from .models import DEFAULT_EMOJI, Element, ElementUse, RecipePair, SavefileOptions, SaveStats
from .savefile import Savefile
from .sniffer import SavefileType, get_savefile_type

__version__ = "0.1.0"

decode = Savefile.decode
decode_async = Savefile.decode_async

__all__ = [
    "DEFAULT_EMOJI",
    "Element",
    "ElementUse",
    "RecipePair",
    "SaveStats",
    "Savefile",
    "SavefileOptions",
    "SavefileType",
    "get_savefile_type",
    "decode",
    "decode_async",
    "SavefileError",
    "UnsupportedFormatError",
    "MalformedPayloadError",
    "SchemaValidationError",
]
