import gzip
import json

import pytest

from craftsave import MalformedPayloadError, SaveStats, Savefile, SavefileOptions, SavefileType
from craftsave.codecs import official


def _gzip_json(document) -> bytes:
    return gzip.compress(json.dumps(document).encode("utf-8"))


def test_encode_document_shape(example_savefile):
    example_savefile.name = "My Save"
    example_savefile.add_element("Found", "F", discovery=True)
    document = json.loads(gzip.decompress(example_savefile.encode_official()))

    assert document["name"] == "My Save"
    assert document["created"] == example_savefile.created
    assert document["updated"] >= document["created"]
    assert document["version"] == "1.0"
    assert document["instances"] == []
    assert document["items"][0] == {"id": 0, "text": "Water", "emoji": example_savefile.elements[0].emoji}
    assert document["items"][4]["recipes"] == [[1, 0]]
    assert "discovery" not in document["items"][4]
    assert document["items"][9]["discovery"] is True


def test_encode_output_is_gzip(example_savefile):
    assert example_savefile.encode_official()[:2] == b"\x1f\x8b"


def test_round_trip(example_savefile):
    decoded = Savefile.decode(example_savefile.encode_official())

    assert decoded is not None
    assert decoded.type is SavefileType.OFFICIAL
    assert decoded.name == example_savefile.name
    assert decoded.created == example_savefile.created
    assert decoded.stats == example_savefile.stats
    assert decoded.elements == example_savefile.elements


def test_items_are_sorted_and_renumbered():
    raw = _gzip_json(
        {
            "name": "Sorted",
            "created": 42,
            "items": [
                {"id": 30, "text": "Steam", "emoji": "S", "recipes": [[0, 2]]},
                {"id": 5, "text": "Water", "emoji": "W", "discovery": True},
                {"id": 10, "text": "Nothing", "emoji": "N"},
                {"id": 20, "text": "Fire", "emoji": "F"},
            ],
        }
    )
    decoded = Savefile.decode(raw)

    assert decoded.name == "Sorted"
    assert decoded.created == 42
    assert [(e.id, e.text) for e in decoded.elements] == [(0, "Water"), (1, "Fire"), (2, "Steam")]
    steam = decoded.get_element("Steam")
    assert [(p.a.text, p.b.text) for p in steam.recipes] == [("Water", "Fire")]
    assert decoded.stats == SaveStats(elements=3, discoveries=1, recipes=1)


def test_dangling_nothing_and_duplicate_references_are_skipped():
    raw = _gzip_json(
        {
            "items": [
                {"id": 0, "text": "Water", "emoji": "W"},
                {"id": 1, "text": "Nothing", "emoji": "N"},
                {"id": 2, "text": "Fire", "emoji": "F"},
                {
                    "id": 3,
                    "text": "Steam",
                    "emoji": "S",
                    "recipes": [[0, 2], [2, 0], [0, 1], [0, 99], [-1, 0], [0], ["a", 0]],
                },
            ]
        }
    )
    decoded = Savefile.decode(raw)
    assert len(decoded.get_element("Steam").recipes) == 1
    assert decoded.stats.recipes == 1


def test_options_control_derived_indices(example_savefile):
    options = SavefileOptions(generate_element_uses=False, generate_reverse_recipe_map=False)
    decoded = Savefile.decode(example_savefile.encode_official(), options)
    assert all(e.uses == [] for e in decoded.elements)
    assert decoded.reverse_recipe_map == {}


def test_missing_items_is_malformed():
    with pytest.raises(MalformedPayloadError):
        Savefile.decode(_gzip_json({"name": "x"}))


def test_corrupt_gzip_is_malformed():
    with pytest.raises(MalformedPayloadError):
        Savefile.decode(b"\x1f\x8b" + b"\x00" * 20)


def test_codec_module_used_directly(example_savefile):
    target = Savefile()
    official.decode(target, official.encode(example_savefile))
    assert target.elements == example_savefile.elements
