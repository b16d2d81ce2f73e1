import pytest

from etymograph.extractors import DictionaryEntry, DictionaryExtractor
from etymograph.models import Priority


@pytest.fixture
def extractor(classifier):
    return DictionaryExtractor(classifier)


def test_entry_accessors(water_entry):
    assert water_entry.word == "water"
    assert water_entry.primary_definition() == "A colourless, transparent, odourless liquid."
    assert water_entry.primary_part_of_speech() == "noun"
    assert water_entry.primary_phonetic() == "/ˈwɔːtə/"


@pytest.mark.parametrize("payload", [None, [], {"title": "No Definitions Found"}, ["water"]])
def test_malformed_payloads(payload):
    assert DictionaryEntry.from_payload(payload, "water") is None


def test_origin_parsing(extractor, water_entry):
    connections = extractor.extract(water_entry, "water")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [
        ("waeter", "ang", "ancestor"),
        ("Wasser", "de", "cognate"),
    ]
    assert all(c.priority == Priority.LOW for c in connections)
    assert connections[0].shared_root == "Old English waeter"


def test_no_origin(extractor):
    entry = DictionaryEntry(word="water")
    assert extractor.extract(entry, "water") == []
    assert extractor.extract(None, "water") == []


def test_parse_origin_borrowed_word():
    results = DictionaryExtractor.parse_origin('late Middle English: borrowed from Old French "merci".')
    assert results == [("ancestor", "Old French", "merci")]


def test_entry_from_single_object(dictionary):
    entry = DictionaryEntry.from_payload(dictionary.payloads["water"], "water")

    assert entry.primary_definition() == "A colourless, transparent, odourless liquid."
    assert entry.origin == "from Old English waeter, related to German Wasser."


def test_entry_tolerates_wrongly_typed_fields():
    entry = DictionaryEntry.from_payload({"word": 7, "meanings": [{"definitions": "none"}], "phonetics": "x"}, "water")

    assert entry.word == "water"
    assert entry.primary_definition() is None
    assert entry.primary_phonetic() is None


def test_origin_forms_with_non_ascii_letters(extractor):
    entry = DictionaryEntry(word="water", origin="from Old English wæter.")
    connections = extractor.extract(entry, "water")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [("wæter", "ang", "ancestor")]


def test_single_letter_origin_forms_rejected(extractor):
    entry = DictionaryEntry(word="water", origin="from Old English w.")
    assert extractor.extract(entry, "water") == []
