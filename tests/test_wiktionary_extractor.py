import pytest

from etymograph.extractors import WiktionaryExtractor


@pytest.fixture
def extractor(classifier):
    return WiktionaryExtractor(classifier)


def test_extract_reads_definition_and_section(extractor, water_wikitext):
    result = extractor.extract(water_wikitext, "water", "en")

    assert result.has_etymology_section
    assert result.definition == "A clear liquid."


def test_extract_template_cognates(extractor, water_wikitext):
    result = extractor.extract(water_wikitext, "water", "en")
    cognates = [(c.text, c.language) for c in result.connections if c.relation_type == "cognate"]

    assert cognates == [("Wasser", "de"), ("wæter", "ang"), ("*watōr", "gem-pro")]
    assert all(c.confidence == pytest.approx(0.80) for c in result.connections if c.relation_type == "cognate")


def test_extract_derived_terms(extractor, water_wikitext):
    result = extractor.extract(water_wikitext, "water", "en")
    derived = {c.text: c.relation_type for c in result.connections if c.language == "en"}

    assert derived == {"waterfall": "compound", "watery": "derivative"}


def test_language_links_become_cognates(extractor):
    text = "===Etymology===\nBorrowed from Latin. Compare [[fr:eau|eau]], and see the rest.\n"
    result = extractor.extract(text, "aqua", "en")

    assert [(c.text, c.language, c.confidence) for c in result.connections] == [("eau", "fr", 0.80)]


def test_missing_or_short_markup_is_empty(extractor):
    assert extractor.extract(None, "water", "en").connections == []
    assert extractor.extract("short", "water", "en").connections == []


def test_no_etymology_section_scans_full_text(extractor):
    text = "==English==\n\n===Noun===\n# A word. {{cog|la|aqua}}\n"
    result = extractor.extract(text, "water", "en")

    assert not result.has_etymology_section
    assert [(c.text, c.language) for c in result.connections] == [("aqua", "la")]


def test_same_language_references_are_skipped(extractor):
    text = "===Etymology===\nFrom {{m|en|wet}} and {{cog|nl|water}}.\n"
    result = extractor.extract(text, "water", "en")

    assert [(c.text, c.language) for c in result.connections] == [("water", "nl")]


def test_compound_template_parts(extractor):
    result = extractor.extract("===Etymology===\nFrom {{compound|en|foot|ball}}.\n", "football", "en")

    assert [(c.text, c.language, c.relation_type) for c in result.connections] == [
        ("foot", "en", "compound"),
        ("ball", "en", "compound"),
    ]
    assert all(c.confidence == pytest.approx(0.85) for c in result.connections)
    assert result.connections[0].notes == "Component of compound football"


def test_affix_template_skips_bare_affixes(extractor):
    result = extractor.extract("===Etymology===\nFrom {{af|en|un-|happy|-ness}}.\n", "unhappiness", "en")

    assert [(c.text, c.language, c.relation_type) for c in result.connections] == [("happy", "en", "derivative")]
    assert result.connections[0].shared_root == "happy"


def test_affix_template_ignores_named_arguments_and_self(extractor):
    text = "===Etymology===\n{{affix|en|horse|shoe|t2=footwear}} and {{suffix|en|horseshoe|-er}}.\n"
    result = extractor.extract(text, "horseshoe", "en")

    assert [c.text for c in result.connections] == ["horse", "shoe"]
