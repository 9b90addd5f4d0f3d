import dataclasses

import pytest

from craftsave import DEFAULT_EMOJI, SaveStats, Savefile, SavefileOptions


def test_empty_savefile():
    save = Savefile()
    assert save.elements == []
    assert save.stats == SaveStats(elements=0, discoveries=0, recipes=0)
    assert save.name == "Save File"
    assert save.type is None
    assert save.encode_legacy() == '{"elements":[],"recipes":{}}'
    assert len(save.encode_legacy()) == 28


def test_base_elements_get_sequential_ids(emoji):
    save = Savefile()
    for text in ["Water", "Fire", "Wind", "Earth"]:
        save.add_element(text, emoji[text])

    assert [(e.id, e.text, e.emoji, e.discovery) for e in save.elements] == [
        (0, "Water", emoji["Water"], False),
        (1, "Fire", emoji["Fire"], False),
        (2, "Wind", emoji["Wind"], False),
        (3, "Earth", emoji["Earth"], False),
    ]
    assert all(e.recipes == [] and e.uses == [] for e in save.elements)
    assert save.stats == SaveStats(elements=4, discoveries=0, recipes=0)


def test_add_element_is_idempotent_on_text():
    save = Savefile()
    first = save.add_element("Water", "A")
    second = save.add_element("Water", "B", discovery=True)
    assert first is second
    assert second.emoji == "A"
    assert not second.discovery
    assert save.stats == SaveStats(elements=1, discoveries=0, recipes=0)


def test_add_element_defaults_and_discovery_count():
    save = Savefile()
    plain = save.add_element("Plain")
    save.add_element("New", discovery=True)
    assert plain.emoji == DEFAULT_EMOJI
    assert save.stats.discoveries == 1


def test_duplicate_recipes_are_stored_once():
    save = Savefile()
    water = save.add_element("Water")
    fire = save.add_element("Fire")
    steam = save.add_element("Steam")

    assert save.add_recipe(fire, water, steam)
    assert not save.add_recipe(fire, water, steam)
    assert not save.add_recipe(water, fire, steam)

    assert len(steam.recipes) == 1
    assert save.stats.recipes == 1
    assert len(water.uses) == 1 and len(fire.uses) == 1
    assert steam.has_recipe(water, fire)


def test_add_recipe_ignores_missing_arguments():
    save = Savefile()
    water = save.add_element("Water")
    assert not save.add_recipe(None, water, water)
    assert not save.add_recipe(water, None, water)
    assert not save.add_recipe(water, water, None)
    assert save.stats.recipes == 0


def test_recipe_updates_uses_and_reverse_map(example_savefile):
    save = example_savefile
    water = save.get_element("Water")
    fire = save.get_element("Fire")
    steam = save.get_element("Steam")

    assert save.stats == SaveStats(elements=9, discoveries=0, recipes=5)
    assert [(u.other.text, u.result.text) for u in water.uses] == [("Fire", "Steam"), ("Wind", "Wave")]
    assert save.combine(water, fire) is steam
    assert save.combine(fire, water) is steam
    assert save.combine(water, water) is None

    triples = {(a.text, b.text, r.text) for a, b, r in save.reverse_recipes()}
    assert ("Water", "Fire", "Steam") in triples
    assert ("Earth", "Fire", "Lava") not in triples  # smaller id comes first
    assert ("Fire", "Earth", "Lava") in triples
    assert len(triples) == 5


def test_options_disable_derived_indices():
    save = Savefile(SavefileOptions(generate_element_uses=False, generate_reverse_recipe_map=False))
    a = save.add_element("A")
    b = save.add_element("B")
    c = save.add_element("C")
    save.add_recipe(a, b, c)

    assert a.uses == [] and b.uses == []
    assert save.reverse_recipe_map == {}
    assert save.combine(a, b) is None
    assert len(c.recipes) == 1


def test_options_name_and_created():
    save = Savefile(SavefileOptions(name="Mine", created=1234))
    assert save.name == "Mine"
    assert save.created == 1234


def test_stats_is_a_snapshot(example_savefile):
    stats = example_savefile.stats
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.elements = 0
    example_savefile.add_element("Mud")
    assert stats.elements == 9
    assert example_savefile.stats.elements == 10


def test_clear_resets_everything(example_savefile):
    save = example_savefile
    save.created = 1
    save.clear()

    assert save.elements == []
    assert save.element_names == {}
    assert save.reverse_recipe_map == {}
    assert save.stats == SaveStats()
    assert save.type is None
    assert save.created > 1
    assert save.add_element("Water").id == 0


def test_element_repr_does_not_recurse(example_savefile):
    text = repr(example_savefile.get_element("Steam"))
    assert "Steam" in text
    assert "uses" not in text


def test_equal_elements_hash_alike(example_savefile):
    copy = Savefile.decode(example_savefile.encode_legacy().encode("utf-8"))
    lookup = {element: element.text for element in example_savefile.elements}

    for element in copy.elements:
        assert element == example_savefile.get_element(element.text)
        assert hash(element) == hash(example_savefile.get_element(element.text))
        assert lookup[element] == element.text
