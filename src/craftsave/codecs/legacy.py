"""Legacy save format: plain UTF-8 JSON, no header, no compression.

Shape::

    {
      "elements": [{"text": "Water", "emoji": "💧", "discovered": true}, ...],
      "recipes": {"Steam": [[{"text": "Fire", "emoji": "🔥"}, {"text": "Water", "emoji": "💧"}]]}
    }
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..models import NOTHING, coerce_emoji
from ..schemas import LEGACY_SCHEMA, load_document
from ..sniffer import SavefileType

if TYPE_CHECKING:
    from ..savefile import Savefile

logger = logging.getLogger(__name__)


def _ingredient(entry: Any) -> Optional[Dict[str, Any]]:
    if isinstance(entry, dict) and isinstance(entry.get("text"), str):
        return entry
    return None


def decode(savefile: "Savefile", raw: bytes) -> "Savefile":
    data = load_document(SavefileType.LEGACY.value, raw, LEGACY_SCHEMA)
    savefile.type = SavefileType.LEGACY

    for entry in data["elements"]:
        if entry["text"] == NOTHING:
            continue
        savefile.add_element(entry["text"], coerce_emoji(entry.get("emoji")), bool(entry.get("discovered")))

    skipped = 0
    for text, pairs in data["recipes"].items():
        if text == NOTHING or not isinstance(pairs, list) or not pairs:
            continue
        result = savefile.add_element(text)
        for pair in pairs:
            if not isinstance(pair, list) or len(pair) != 2:
                skipped += 1
                continue
            item_a, item_b = _ingredient(pair[0]), _ingredient(pair[1])
            if item_a is None or item_b is None:
                skipped += 1
                continue
            if item_a["text"] == NOTHING or item_b["text"] == NOTHING:
                continue
            a = savefile.add_element(item_a["text"], coerce_emoji(item_a.get("emoji")))
            b = savefile.add_element(item_b["text"], coerce_emoji(item_b.get("emoji")))
            savefile.add_recipe(a, b, result)

    # Recipes may introduce elements missing from the element list
    savefile.reconcile_stats()
    logger.debug(
        "Decoded legacy save: %d elements, %d recipes, %d malformed pairs skipped",
        savefile.stats.elements,
        savefile.stats.recipes,
        skipped,
    )
    return savefile


def encode(savefile: "Savefile") -> str:
    elements: List[Dict[str, Any]] = []
    recipes: Dict[str, List[List[Dict[str, str]]]] = {}

    for element in savefile.elements:
        entry: Dict[str, Any] = {"text": element.text, "emoji": element.emoji}
        if element.discovery:
            entry["discovered"] = True
        elements.append(entry)

        if element.recipes:
            recipes[element.text] = [
                [{"text": pair.a.text, "emoji": pair.a.emoji}, {"text": pair.b.text, "emoji": pair.b.emoji}]
                for pair in element.recipes
            ]

    return json.dumps({"elements": elements, "recipes": recipes}, ensure_ascii=False, separators=(",", ":"))
