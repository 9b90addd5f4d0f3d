from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .codecs import CODECS, binary_v1, binary_v2, legacy, official
from .errors import UnsupportedFormatError
from .models import DEFAULT_EMOJI, Element, ElementUse, RecipePair, SavefileOptions, SaveStats, now_millis
from .primitives import pair_key, split_pair_key
from .sniffer import SavefileType, get_savefile_type

logger = logging.getLogger(__name__)


class Savefile:
    """An element graph loaded from, or destined for, a save file.

    Elements are only ever appended, through ``add_element``/``add_recipe``
    or a format decoder; an element's id is its index in ``elements``.
    Statistics are kept up to date incrementally by those two operations.
    """

    def __init__(self, options: Optional[SavefileOptions] = None) -> None:
        self.options = options or SavefileOptions()
        self.name = self.options.name
        self.created = self.options.created if self.options.created is not None else now_millis()
        self.elements: List[Element] = []
        self.element_names: Dict[str, Element] = {}
        # pair key -> result element id
        self.reverse_recipe_map: Dict[int, int] = {}
        self.type: Optional[SavefileType] = None
        self._element_count = 0
        self._discovery_count = 0
        self._recipe_count = 0

    def __repr__(self) -> str:
        return f"Savefile(name={self.name!r}, type={self.type}, stats={self.stats})"

    # Decoding

    @classmethod
    def decode(cls, raw: bytes, options: Optional[SavefileOptions] = None) -> Optional["Savefile"]:
        """Detect the format of ``raw`` and decode it into a new Savefile.

        Returns None when the format is not recognized. Malformed payloads
        raise MalformedPayloadError; Binary-V2 raises UnsupportedFormatError.
        """
        fmt = get_savefile_type(raw)
        if fmt is None:
            logger.debug("Unrecognized save file header: %r", bytes(raw[:4]))
            return None
        logger.debug("Decoding %d byte %s save file", len(raw), fmt.value)
        return CODECS[fmt].decode(cls(options), raw)

    @classmethod
    async def decode_async(cls, raw: bytes, options: Optional[SavefileOptions] = None) -> Optional["Savefile"]:
        return await asyncio.to_thread(cls.decode, raw, options)

    # Mutation

    def clear(self) -> None:
        self.created = now_millis()
        self.elements.clear()
        self.element_names.clear()
        self.reverse_recipe_map.clear()
        self.type = None
        self._element_count = 0
        self._discovery_count = 0
        self._recipe_count = 0

    def add_element(self, text: str, emoji: str = DEFAULT_EMOJI, discovery: bool = False) -> Element:
        """Return the element named ``text``, creating it if needed.

        ``emoji`` and ``discovery`` are ignored when the element already exists.
        """
        existing = self.element_names.get(text)
        if existing is not None:
            return existing

        element = Element(id=len(self.elements), text=text, emoji=emoji, discovery=discovery)
        self.elements.append(element)
        self.element_names[text] = element

        self._element_count += 1
        if discovery:
            self._discovery_count += 1
        return element

    def add_recipe(self, a: Optional[Element], b: Optional[Element], result: Optional[Element]) -> bool:
        """Record that ``a`` + ``b`` produces ``result``.

        Returns False (and changes nothing) if an argument is missing or the
        unordered pair is already a recipe of ``result``.
        """
        if a is None or b is None or result is None:
            return False

        pair = RecipePair(a, b)
        if not result.attach_recipe(pair):
            return False
        self._recipe_count += 1

        if self.options.generate_reverse_recipe_map:
            self.reverse_recipe_map[pair.key] = result.id

        if self.options.generate_element_uses:
            a.uses.append(ElementUse(other=b, result=result))
            b.uses.append(ElementUse(other=a, result=result))
        return True

    def reconcile_stats(self) -> None:
        """Overwrite the element count with the authoritative length after a decode."""
        self._element_count = len(self.elements)

    # Queries

    @property
    def stats(self) -> SaveStats:
        return SaveStats(
            elements=self._element_count,
            discoveries=self._discovery_count,
            recipes=self._recipe_count,
        )

    def get_element(self, text: str) -> Optional[Element]:
        return self.element_names.get(text)

    def combine(self, a: Element, b: Element) -> Optional[Element]:
        """Look up what ``a`` + ``b`` makes, in either order."""
        result_id = self.reverse_recipe_map.get(pair_key(a.id, b.id))
        if result_id is None:
            return None
        return self.elements[result_id]

    def reverse_recipes(self) -> Iterator[Tuple[Element, Element, Element]]:
        for key, result_id in self.reverse_recipe_map.items():
            high, low = split_pair_key(key)
            yield self.elements[low], self.elements[high], self.elements[result_id]

    # Encoding

    def encode_legacy(self) -> str:
        return legacy.encode(self)

    def encode_official(self) -> bytes:
        return official.encode(self)

    def encode_binary_v1(self, append_header: bool = True) -> bytes:
        return binary_v1.encode(self, append_header=append_header)

    def encode_binary_v2(self) -> bytes:
        return binary_v2.encode(self)

    def encode(self, fmt: Union[SavefileType, str], append_header: bool = True) -> bytes:
        """Encode to the named format; the legacy text is returned UTF-8 encoded."""
        try:
            fmt = SavefileType(fmt)
        except ValueError as exc:
            raise UnsupportedFormatError(f"Unknown save file format: {fmt}") from exc

        if fmt is SavefileType.LEGACY:
            return self.encode_legacy().encode("utf-8")
        if fmt is SavefileType.OFFICIAL:
            return self.encode_official()
        if fmt is SavefileType.BINARY_V1:
            return self.encode_binary_v1(append_header=append_header)
        return self.encode_binary_v2()

    async def encode_async(self, fmt: Union[SavefileType, str], append_header: bool = True) -> bytes:
        return await asyncio.to_thread(self.encode, fmt, append_header)
