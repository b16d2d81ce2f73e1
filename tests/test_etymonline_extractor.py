import pytest

from etymograph.extractors import EtymonlineExtractor
from etymograph.models import Priority


@pytest.fixture
def extractor(classifier):
    return EtymonlineExtractor(classifier)


def section(body: str) -> str:
    return f'<html><body><section class="prose-lg"><p>{body}</p></section></body></html>'


def test_root_link_becomes_pie_etymology(extractor, water_html):
    connections = extractor.extract(water_html, "water", "en")

    assert len(connections) == 1
    root = connections[0]
    assert (root.text, root.language, root.relation_type) == ("*wed-", "ine-pro", "etymology")
    assert root.confidence == pytest.approx(0.95)
    assert root.shared_root == "*wed-"


def test_shortening_detected(extractor):
    html = section('bus (n.) 1832, "four-wheeled public vehicle," shortening of omnibus.')
    connections = extractor.extract(html, "bus", "en")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [("omnibus", "en", "shortened_from")]
    assert connections[0].confidence == pytest.approx(0.90)


def test_fallback_pie_statement(extractor):
    html = section('wit Old English witt, from PIE *weid- "to see."')
    connections = extractor.extract(html, "wit", "en")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [("*weid-", "ine-pro", "etymology")]


def test_page_without_sections_uses_body(extractor):
    html = '<html><body><p>wit Old English witt, from PIE *weid- "to see."</p></body></html>'
    connections = extractor.extract(html, "wit", "en")

    assert [c.text for c in connections] == ["*weid-"]


def test_irrelevant_sections_are_ignored(extractor):
    html = section("In this dictionary there are many entries about rivers, lakes and seas and also about water.")
    assert extractor.extract(html, "water", "en") == []


def test_missing_html(extractor):
    assert extractor.extract(None, "water", "en") == []
    assert extractor.extract("", "water", "en") == []


def test_root_link_in_morphological_context_rejected(extractor):
    html = section(
        'water (n.) a compound element, with suffix <a href="/word/*wed-">*wed-</a> as prefix.'
    )
    assert extractor.extract(html, "water", "en") == []


def test_relevance_for_roots(extractor):
    assert extractor.is_relevant_section("PIE root *wed- (1) water; wet", "*wed-")
    assert extractor.is_relevant_section("the root wed- meaning water", "*wed-")
    assert not extractor.is_relevant_section("nothing to see here", "*wed-")


def test_relationship_types(extractor):
    assert extractor.determine_relationship_type("Proto-Germanic", "") == "etymology"
    assert extractor.determine_relationship_type("Latin", "borrowed from Latin aqua") == "borrowing"
    assert extractor.determine_relationship_type("German", "compare German Wasser") == "cognate_west_germanic"
    assert extractor.determine_relationship_type("Finnish", "compare Finnish vesi") == "borrowing"


def test_root_page_derivative_list(extractor):
    html = section(
        '*wed- (1) Proto-Indo-European root meaning "water; wet." '
        "It forms all or part of: abound; hydra; otter; redundant; vodka; water; wet; whiskey."
    )
    connections = extractor.extract(html, "*wed-", "en")

    assert [c.text for c in connections] == [
        "abound", "hydra", "otter", "redundant", "vodka", "water", "wet", "whiskey",
    ]
    assert {(c.language, c.relation_type, c.shared_root) for c in connections} == {("en", "pie_derivative", "*wed-")}
    assert all(c.confidence == pytest.approx(0.85) for c in connections)


def test_underlined_word_takes_language_before_it(extractor):
    html = section('wit (n.) Old English <u>witt</u> "understanding, intellect," from Proto-Germanic *witja-.')
    connections = extractor.extract(html, "wit", "en")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [
        ("witt", "ang", "cognate_west_germanic"),
    ]
    assert connections[0].priority == Priority.HIGH
    assert connections[0].confidence == pytest.approx(0.8)
    assert connections[0].origin == "Old English witt"


def test_italic_word_after_hyphenated_language(extractor):
    html = section('wit (n.) Old English witt, from Proto-Germanic <i>*witjan</i>, from PIE *weid- "to see."')
    connections = extractor.extract(html, "wit", "en")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [("*witjan", "gem-pro", "etymology")]
    assert connections[0].origin == "Proto-Germanic *witjan"
    assert connections[0].priority == Priority.MEDIUM


def test_underline_wins_over_italic_duplicate(extractor):
    html = section(
        'wit (n.) Old English <u><i>witt</i></u> "understanding, intellect," '
        "from Proto-Germanic <i>*witja-</i>."
    )
    connections = extractor.extract(html, "wit", "en")

    assert [(c.text, c.language) for c in connections] == [("witt", "ang"), ("*witja-", "gem-pro")]
    assert connections[0].notes.startswith("Underlined etymology")
    assert connections[1].notes.startswith("Italicized etymology")


def test_hyperlink_in_related_listing(extractor):
    html = section(
        "water (n.1) Old English wæter, from Proto-Germanic *watar, source also of Old Saxon watar, "
        'Old Frisian wetir, Dutch water, German <a href="/word/Wasser">Wasser</a>.'
    )
    connections = extractor.extract(html, "water", "en")

    assert [(c.text, c.language, c.relation_type) for c in connections] == [
        ("Wasser", "de", "cognate_west_germanic"),
    ]
    assert connections[0].priority == Priority.HIGH
    assert connections[0].confidence == pytest.approx(0.85 * 0.80 * 0.90)


def test_hyperlink_in_strict_etymological_prose(extractor):
    html = section(
        'wit (n.) Old English witt, from Proto-Germanic *witja-, from the same root as <a href="/word/witness">witness</a>.'
    )
    connections = extractor.extract(html, "wit", "en")

    assert [(c.text, c.language) for c in connections] == [("witness", "en")]
    assert connections[0].priority == Priority.MEDIUM
    assert connections[0].notes.startswith("Contextually validated hyperlink")


def test_hyperlink_in_example_prose_rejected(extractor):
    html = section('wit (n.) used in many phrases, such as <a href="/word/witness">witness</a>.')
    assert extractor.extract(html, "wit", "en") == []


@pytest.mark.parametrize("before, expected", [
    ("from Proto-Germanic ", ("Proto-Germanic", "gem-pro")),
    ("wit (n.) Compare Old English ", ("Old English", "ang")),
    ("nothing capitalized here ", ("English", "en")),
])
def test_language_from_context(extractor, before, expected):
    detected = extractor.language_from_context(before, "witt")
    assert (detected.name, detected.code) == expected
