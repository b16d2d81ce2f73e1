import pytest

from etymograph.analysis import deduplicate_and_rank, priority_score
from etymograph.analysis.ranking import ranking_key
from etymograph.models import Connection, Relationship, Word


def connection(text, language, relation_type, confidence, source):
    return Connection(
        word=Word(id=f"w_{text}_{language}", text=text, language=language),
        relationship=Relationship(type=relation_type, confidence=confidence, source=source),
    )


@pytest.mark.parametrize("source, relation_type, expected", [
    ("etymonline.com", "etymology", 6),
    ("wiktionary", "cognate", 4),
    ("wiktionary", "cognate_west_germanic", 4),
    ("dictionary-api", "ancestor", 3),
    ("cognate-db", "cognate_indo_european", 2),
    ("wiktionary", "compound", 2),
    (None, None, 0),
])
def test_priority_score(source, relation_type, expected):
    assert priority_score(source, relation_type) == expected


def test_duplicate_keeps_best_source():
    ranked = deduplicate_and_rank([
        connection("Wasser", "de", "cognate", 0.95, "cognate-db"),
        connection("wasser", "de", "cognate", 0.80, "wiktionary"),
    ])

    assert len(ranked) == 1
    assert ranked[0].relationship.source == "wiktionary"


def test_duplicate_tie_goes_to_confidence():
    ranked = deduplicate_and_rank([
        connection("eau", "fr", "cognate", 0.70, "wiktionary"),
        connection("eau", "fr", "cognate", 0.85, "wiktionary"),
    ])
    assert [c.relationship.confidence for c in ranked] == [0.85]


def test_same_text_different_language_kept():
    ranked = deduplicate_and_rank([
        connection("water", "nl", "cognate", 0.8, "wiktionary"),
        connection("water", "af", "cognate", 0.8, "wiktionary"),
    ])
    assert {c.word.language for c in ranked} == {"nl", "af"}


def test_order_is_descending_by_score_then_confidence():
    pool = [
        connection("watery", "en", "derivative", 0.90, "wiktionary"),
        connection("eau", "fr", "cognate_indo_european", 0.95, "cognate-db"),
        connection("*wed-", "ine-pro", "etymology", 0.95, "etymonline.com"),
        connection("waeter", "ang", "ancestor", 0.60, "dictionary-api"),
        connection("Wasser", "de", "cognate", 0.80, "wiktionary"),
    ]
    ranked = deduplicate_and_rank(pool)

    assert [c.word.text for c in ranked] == ["*wed-", "Wasser", "waeter", "eau", "watery"]
    assert ranked == sorted(ranked, key=ranking_key, reverse=True)


def test_self_reference_dropped():
    source = Word(id="w_src", text="water", language="en")
    ranked = deduplicate_and_rank([connection("Water", "en", "related", 0.9, "wiktionary")], source)
    assert ranked == []
