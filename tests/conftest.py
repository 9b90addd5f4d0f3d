import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from craftsave import Savefile  # noqa: E402

EMOJI = {
    "Water": "\U0001F4A7",
    "Fire": "\U0001F525",
    "Wind": "\U0001F32C\uFE0F",
    "Earth": "\U0001F30D",
    "Steam": "\U0001F4A8",
    "Volcano": "\U0001F30B",
    "Smoke": "\U0001F4A8",
    "Lava": "\U0001F30B",
    "Wave": "\U0001F30A",
}


@pytest.fixture
def emoji():
    return dict(EMOJI)


@pytest.fixture
def example_savefile() -> Savefile:
    """Four base elements, five derived ones, one recipe each."""
    save = Savefile()
    el = {text: save.add_element(text, glyph) for text, glyph in EMOJI.items()}

    save.add_recipe(el["Fire"], el["Water"], el["Steam"])
    save.add_recipe(el["Fire"], el["Fire"], el["Volcano"])
    save.add_recipe(el["Fire"], el["Wind"], el["Smoke"])
    save.add_recipe(el["Earth"], el["Fire"], el["Lava"])
    save.add_recipe(el["Water"], el["Wind"], el["Wave"])
    return save
