import asyncio

import pytest

from etymograph.analysis.ranking import ranking_key
from fakes import FakeSource, SlowSource


def keys(result):
    return [connection.word.key for connection in result.connections]


def test_empty_word_rejected(agent):
    with pytest.raises(ValueError, match="Word cannot be empty"):
        asyncio.run(agent.find_etymological_connections("   "))


def test_full_lookup(agent):
    result = asyncio.run(agent.find_etymological_connections("water", "English"))

    source = result.source_word
    assert (source.text, source.language) == ("water", "en")
    assert source.definition == "A colourless, transparent, odourless liquid."
    assert source.part_of_speech == "noun"
    assert source.phonetic == "/ˈwɔːtə/"

    top = result.connections[0]
    assert (top.word.text, top.word.language) == ("*wed-", "ine-pro")
    assert top.relationship.source == "etymonline.com"
    assert top.relationship.type == "etymology"

    found = keys(result)
    assert len(found) == len(set(found))
    assert ("water", "en") not in found
    assert {("wasser", "de"), ("wæter", "ang"), ("waeter", "ang"), ("eau", "fr"), ("waterfall", "en")} <= set(found)


def test_connections_are_ranked(agent):
    result = asyncio.run(agent.find_etymological_connections("water"))
    assert result.connections == sorted(result.connections, key=ranking_key, reverse=True)


def test_reconstructed_targets_are_pie(agent):
    result = asyncio.run(agent.find_etymological_connections("water"))
    reconstructed = [c.word for c in result.connections if c.word.text.startswith("*")]

    assert {word.text for word in reconstructed} == {"*wed-", "*watōr"}
    assert all(word.language == "ine-pro" for word in reconstructed)


def test_best_source_wins_duplicates(agent):
    result = asyncio.run(agent.find_etymological_connections("water"))
    wasser = next(c for c in result.connections if c.word.key == ("wasser", "de"))
    assert wasser.relationship.source == "wiktionary"


def test_every_connection_names_its_root(agent):
    result = asyncio.run(agent.find_etymological_connections("water"))
    for connection in result.connections:
        relationship = connection.relationship
        assert relationship.shared_root
        assert relationship.shared_root.lower() in relationship.notes.lower()


def test_cognate_matcher_results_admitted(agent):
    result = asyncio.run(agent.find_etymological_connections("water"))
    eau = next(c for c in result.connections if c.word.key == ("eau", "fr"))

    assert eau.relationship.source == "cognate-db"
    assert eau.relationship.type == "cognate_indo_european"
    assert eau.relationship.shared_root == "water"
    assert not any(c.word.text == "vater" for c in result.connections)


def test_results_are_cached(agent, wiktionary):
    first = asyncio.run(agent.find_etymological_connections("water"))
    second = asyncio.run(agent.find_etymological_connections("Water"))

    assert second is first
    assert len(wiktionary.calls) == 1

    asyncio.run(agent.find_etymological_connections("water", bypass_cache=True))
    assert len(wiktionary.calls) == 2


def test_failing_sources_are_tolerated(make_agent, dictionary):
    agent = make_agent(
        FakeSource("wiktionary", error=RuntimeError("boom")),
        dictionary,
        FakeSource("etymonline.com", error=ConnectionError("refused")),
    )
    result = asyncio.run(agent.find_etymological_connections("water"))

    assert result.source_word.part_of_speech == "noun"
    assert {c.relationship.source for c in result.connections} == {"dictionary-api", "cognate-db"}
    assert ("waeter", "ang") in keys(result)


def test_all_sources_failing_still_returns_result(make_agent):
    agent = make_agent(
        FakeSource("wiktionary", error=RuntimeError("boom")),
        FakeSource("dictionary-api", error=RuntimeError("boom")),
        FakeSource("etymonline.com", error=RuntimeError("boom")),
    )
    result = asyncio.run(agent.find_etymological_connections("water"))

    assert result.source_word.definition == 'Definition for "water" not available'
    assert result.source_word.part_of_speech == "unknown"
    assert {c.relationship.source for c in result.connections} == {"cognate-db"}


def test_slow_source_times_out(make_agent, wiktionary, dictionary):
    agent = make_agent(wiktionary, dictionary, SlowSource("etymonline.com", delay=5), fetch_timeout=0.05)
    result = asyncio.run(agent.find_etymological_connections("water"))

    assert "etymonline.com" not in {c.relationship.source for c in result.connections}
    assert ("wasser", "de") in keys(result)


def test_cross_references_between_lookups(agent):
    asyncio.run(agent.find_etymological_connections("water"))
    result = asyncio.run(agent.find_etymological_connections("wet"))

    water = next(c for c in result.connections if c.word.key == ("water", "en"))
    assert water.relationship.source == "etymonline.com"
    assert "*wed-" in water.relationship.notes
    assert agent.cross_reference.stats()["processed_words"] == 2


def test_stats_and_clear(agent):
    asyncio.run(agent.find_etymological_connections("water"))
    stats = agent.stats()

    assert stats["result_cache"]["entries"] == 1
    assert stats["registry"]["total_words"] > 1

    agent.clear_caches()
    assert agent.stats()["result_cache"]["entries"] == 0
    assert agent.stats()["cross_reference"]["roots"] == 0


@pytest.mark.parametrize("payload", ["<html>not json</html>", [1, 2], {"title": "No Definitions Found"}])
def test_malformed_dictionary_payload_ignored(make_agent, wiktionary, etymonline, payload):
    agent = make_agent(wiktionary, FakeSource("dictionary-api", {"water": payload}), etymonline)
    result = asyncio.run(agent.find_etymological_connections("water"))

    assert result.source_word.definition == "A clear liquid."
    assert result.source_word.phonetic is None
    assert "dictionary-api" not in {c.relationship.source for c in result.connections}
    assert ("wasser", "de") in keys(result)


def test_dictionary_entry_list_payload_accepted(make_agent, wiktionary, etymonline):
    payload = [{"word": "water", "meanings": [{"partOfSpeech": "noun", "definitions": [{"definition": "H2O."}]}]}]
    agent = make_agent(wiktionary, FakeSource("dictionary-api", {"water": payload}), etymonline)
    result = asyncio.run(agent.find_etymological_connections("water"))

    assert result.source_word.definition == "H2O."
    assert result.source_word.part_of_speech == "noun"
