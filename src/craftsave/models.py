from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .primitives import pair_key

DEFAULT_EMOJI = "⬜"
DEFAULT_NAME = "Save File"
NOTHING = "Nothing"


def now_millis() -> int:
    return int(time.time() * 1000)


def coerce_emoji(value: Any) -> str:
    """Hand-edited files sometimes carry null or numeric emoji; those get the placeholder."""
    return value if isinstance(value, str) else DEFAULT_EMOJI


@dataclass
class SavefileOptions:
    """Construction options for a Savefile.

    ``created=None`` means "now". The two ``generate_*`` flags control the
    derived indices maintained by ``add_recipe``.
    """

    name: str = DEFAULT_NAME
    created: Optional[int] = None
    generate_element_uses: bool = True
    generate_reverse_recipe_map: bool = True


@dataclass(frozen=True)
class SaveStats:
    elements: int = 0
    discoveries: int = 0
    recipes: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"elements": self.elements, "discoveries": self.discoveries, "recipes": self.recipes}


@dataclass(frozen=True, eq=False)
class RecipePair:
    """An unordered ingredient pair stored on the result element."""

    a: "Element"
    b: "Element"

    @property
    def key(self) -> int:
        return pair_key(self.a.id, self.b.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecipePair):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"RecipePair({self.a.text!r}, {self.b.text!r})"


@dataclass(frozen=True, eq=False)
class ElementUse:
    """Back-reference from an ingredient to a recipe it takes part in."""

    other: "Element"
    result: "Element"

    def ids(self) -> Tuple[int, int]:
        return self.other.id, self.result.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementUse):
            return NotImplemented
        return self.ids() == other.ids()

    def __hash__(self) -> int:
        return hash(self.ids())

    def __repr__(self) -> str:
        return f"ElementUse(other={self.other.text!r}, result={self.result.text!r})"


@dataclass(eq=False)
class Element:
    """A node in the combination graph.

    ``id`` is the element's position in its owning Savefile. Recipes and uses
    point at other elements, so equality compares them by id instead of
    recursing through the graph.
    """

    id: int
    text: str
    emoji: str = DEFAULT_EMOJI
    discovery: bool = False
    recipes: List[RecipePair] = field(default_factory=list, repr=False)
    uses: List[ElementUse] = field(default_factory=list, repr=False)
    _recipe_keys: Set[int] = field(default_factory=set, init=False, repr=False)

    def has_recipe(self, a: "Element", b: "Element") -> bool:
        return pair_key(a.id, b.id) in self._recipe_keys

    def attach_recipe(self, pair: RecipePair) -> bool:
        key = pair.key
        if key in self._recipe_keys:
            return False
        self._recipe_keys.add(key)
        self.recipes.append(pair)
        return True

    def _signature(self) -> Tuple[Any, ...]:
        return (
            self.id,
            self.text,
            self.emoji,
            self.discovery,
            [pair.key for pair in self.recipes],
            sorted(use.ids() for use in self.uses),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._signature() == other._signature()

    def __hash__(self) -> int:
        # id and text never change once an element is created
        return hash((self.id, self.text))
