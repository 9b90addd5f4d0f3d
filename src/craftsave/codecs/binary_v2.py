"""Binary-V2 save format (header ``49 43 42 1F``).

The payload layout is not implemented; both directions fail loudly rather
than guessing.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import UnsupportedFormatError

if TYPE_CHECKING:
    from ..savefile import Savefile


def decode(savefile: "Savefile", raw: bytes) -> "Savefile":
    raise UnsupportedFormatError("Decoding Binary-V2 save files is not implemented")


def encode(savefile: "Savefile") -> bytes:
    raise UnsupportedFormatError("Encoding Binary-V2 save files is not implemented")
