"""Official save format: gzip-compressed UTF-8 JSON.

Recipes reference ingredients by position in the ``items`` array (after
sorting by declared id), not by the element ids assigned on decode.
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..compression import GZIP, compress_buffer
from ..models import NOTHING, Element, coerce_emoji, now_millis
from ..schemas import OFFICIAL_SCHEMA, load_document
from ..sniffer import SavefileType

if TYPE_CHECKING:
    from ..savefile import Savefile

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


def _resolve(resolved: List[Optional[Element]], index: Any) -> Optional[Element]:
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    if 0 <= index < len(resolved):
        return resolved[index]
    return None


def decode(savefile: "Savefile", raw: bytes) -> "Savefile":
    data = load_document(SavefileType.OFFICIAL.value, compress_buffer(raw, GZIP, compress=False), OFFICIAL_SCHEMA)
    savefile.type = SavefileType.OFFICIAL
    savefile.name = data.get("name", savefile.name)
    savefile.created = data.get("created", savefile.created)

    items = sorted(data["items"], key=lambda item: item["id"])

    # On-disk position -> element; discarded once recipes are resolved
    resolved: List[Optional[Element]] = []
    for item in items:
        if item["text"] == NOTHING:
            resolved.append(None)
            continue
        resolved.append(
            savefile.add_element(item["text"], coerce_emoji(item.get("emoji")), bool(item.get("discovery")))
        )

    dangling = 0
    for result, item in zip(resolved, items):
        if result is None or not item.get("recipes"):
            continue
        for pair in item["recipes"]:
            if len(pair) != 2:
                dangling += 1
                continue
            a, b = _resolve(resolved, pair[0]), _resolve(resolved, pair[1])
            if a is None or b is None:
                dangling += 1
                continue
            savefile.add_recipe(a, b, result)

    savefile.reconcile_stats()
    logger.debug(
        "Decoded official save %r: %d elements, %d recipes, %d dangling pairs skipped",
        savefile.name,
        savefile.stats.elements,
        savefile.stats.recipes,
        dangling,
    )
    return savefile


def encode(savefile: "Savefile") -> bytes:
    items: List[Dict[str, Any]] = []
    for element in savefile.elements:
        item: Dict[str, Any] = {"id": element.id, "text": element.text, "emoji": element.emoji}
        if element.discovery:
            item["discovery"] = True
        if element.recipes:
            item["recipes"] = [[pair.a.id, pair.b.id] for pair in element.recipes]
        items.append(item)

    document = {
        "name": savefile.name or "Save File",
        "created": savefile.created or now_millis(),
        "updated": now_millis(),
        "version": FORMAT_VERSION,
        "instances": [],
        "items": items,
    }
    payload = json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return compress_buffer(payload, GZIP)
