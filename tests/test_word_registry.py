import pytest

from etymograph.cache import RegisteredWord, WordRegistry, guess_from_id


def test_mint_is_stable_per_word(registry):
    first = registry.mint("water", "en")

    assert first.startswith("w_")
    assert registry.mint("Water", "en") == first
    assert registry.mint("water", "nl") != first
    assert registry.resolve_id(first) == RegisteredWord("water", "en")


def test_cache_word_for_id_keeps_both_directions(registry):
    registry.cache_word_for_id("legacy_1", "wasser", "de")

    assert registry.id_for("Wasser", "de") == "legacy_1"
    assert "legacy_1" in registry
    assert registry.resolve_id("legacy_1") == RegisteredWord("wasser", "de")


def test_unknown_id_without_guessing(registry):
    assert registry.resolve_id("word_water_en") is None


def test_unknown_id_with_guessing():
    registry = WordRegistry(allow_guess_fallback=True)
    assert registry.resolve_id("word_water_en") == RegisteredWord("water", "en")
    assert registry.resolve_id("w_0123456789abcdef") is None


@pytest.mark.parametrize("word_id, expected", [
    ("word_water_en", RegisteredWord("water", "en")),
    ("word_ice_cream_en", RegisteredWord("ice_cream", "en")),
    ("word_wed_ine-pro", RegisteredWord("wed", "ine-pro")),
    ("w123_water", RegisteredWord("water", "en")),
    ("de_wasser", RegisteredWord("wasser", "de")),
    ("w123_unknown", None),
    ("w_0123456789abcdef", None),
    ("water", None),
])
def test_guess_from_id(word_id, expected):
    assert guess_from_id(word_id) == expected


def test_reset_and_stats(registry):
    registry.mint("water", "en")
    registry.mint("wasser", "de")

    stats = registry.stats()
    assert stats["total_words"] == 2
    assert stats["reverse_entries"] == 2
    assert stats["languages"] == ["de", "en"]

    registry.reset()
    assert len(registry) == 0
    assert registry.id_for("water", "en") is None
