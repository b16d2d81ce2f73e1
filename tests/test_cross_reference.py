import pytest

from etymograph.cache import CrossReferenceIndex, normalize_key
from etymograph.models import Priority, RawConnection


@pytest.fixture
def index():
    return CrossReferenceIndex()


def root_connection(confidence=0.95, root="*wed-"):
    return RawConnection(
        text=root,
        language="ine-pro",
        relation_type="etymology",
        confidence=confidence,
        shared_root=root,
    )


@pytest.mark.parametrize("etymology, expected", [
    ("PIE *wed- water", "*wed-"),
    ("Proto-Germanic *watr-", "*watr-"),
    ("Old English wæter.", "wæter"),
    ("Latin aqua", "aqua"),
    ("", ""),
    (None, ""),
])
def test_normalize_key(etymology, expected):
    assert normalize_key(etymology) == expected


def test_enrich_links_words_sharing_a_root(index):
    index.update("water", [root_connection(0.95)])
    index.update("wet", [root_connection(0.90)])

    added = index.enrich("wet", [root_connection(0.90)])

    assert [(c.text, c.language, c.relation_type) for c in added] == [("water", "en", "cognate")]
    assert added[0].confidence == pytest.approx(0.85)
    assert added[0].notes == "Shares etymology *wed- with wet"


def test_single_entry_root_is_not_enriched(index):
    index.update("water", [root_connection()])
    assert index.enrich("water", [root_connection()]) == []


def test_low_confidence_entries_not_linked(index):
    index.update("water", [root_connection(0.70)])
    index.update("wet", [root_connection(0.90)])
    assert index.enrich("wet", [root_connection(0.90)]) == []


def test_generic_roots_rejected(index):
    index.update("water", [root_connection(root="*er")])
    index.update("wet", [root_connection(root="*er")])
    assert index.enrich("wet", [root_connection(root="*er")]) == []


def test_at_most_two_links_per_root(index):
    for word in ("water", "winter", "otter", "wash"):
        index.update(word, [root_connection()])

    added = index.enrich("wet", [root_connection()])
    assert len(added) == 2


def test_source_language_recorded(index):
    index.update("Wasser", [root_connection()], source_language="de")
    index.update("wet", [root_connection()])

    added = index.enrich("wet", [root_connection()])
    assert [(c.text, c.language) for c in added] == [("Wasser", "de")]


def test_shortened_forms(index):
    index.update("bus", [RawConnection(text="omnibus", language="en", relation_type="shortened_from", confidence=0.9)])

    added = index.enrich("omnibus", [])

    assert [(c.text, c.relation_type) for c in added] == [("bus", "shortened_to")]
    assert added[0].confidence == pytest.approx(0.9)
    assert added[0].priority == Priority.HIGH


def test_weak_shortened_forms_ignored(index):
    index.update("bus", [RawConnection(text="omnibus", language="en", relation_type="shortened_from", confidence=0.8)])
    assert index.enrich("omnibus", []) == []


def test_stats_and_reset(index):
    index.update("water", [root_connection()])
    index.update("wet", [root_connection()])

    assert index.stats() == {"roots": 1, "entries": 2, "shortened_forms": 0, "processed_words": 2}

    index.reset()
    assert index.stats() == {"roots": 0, "entries": 0, "shortened_forms": 0, "processed_words": 0}
    assert index.enrich("wet", [root_connection()]) == []
