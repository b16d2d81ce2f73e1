import pytest

from etymograph.analysis.validator import ConnectionValidator, character_overlap
from etymograph.models import Priority, RawConnection


@pytest.fixture
def water(make_word):
    return make_word("water")


def raw(text, language="en", relation_type="cognate", confidence=0.8, **kwargs):
    return RawConnection(text=text, language=language, relation_type=relation_type, confidence=confidence, **kwargs)


def test_semantic_mismatch_rejected(validator, make_word):
    fire = make_word("fire")
    connection = validator.normalize(fire, raw("red", confidence=0.99))

    assert validator.rejection_reason(connection, fire) == "semantically unrelated"
    assert validator.validate(fire, [raw("red", confidence=0.99)]) == []


def test_reconstructed_forms_forced_to_pie(validator, water):
    accepted = validator.validate(water, [raw("*wed-", language="en", relation_type="etymology")])

    assert len(accepted) == 1
    assert accepted[0].word.language == "ine-pro"
    assert accepted[0].relationship.shared_root == "*wed-"


def test_self_reference_dropped(validator, water):
    assert validator.validate(water, [raw("Water", language="English")]) == []


def test_trivial_derivative_dropped(validator, water):
    assert validator.validate(water, [raw("waters", relation_type="derivative", confidence=0.9)]) == []


def test_confidence_floors(validator, water):
    assert validator.validate(water, [raw("wasser", language="de", confidence=0.45)]) == []
    assert len(validator.validate(water, [raw("*wodr", language="ine-pro", confidence=0.45)])) == 1


def test_incompatible_cognate_rejected(validator, water):
    connection = validator.normalize(water, raw("vesi", language="fi"))
    assert validator.rejection_reason(connection, water).startswith("incompatible languages")


def test_borrowing_across_families_accepted(validator, make_word):
    tea = make_word("tea")
    accepted = validator.validate(tea, [raw("chá", language="zh", relation_type="borrowing")])
    assert [c.word.text for c in accepted] == ["chá"]


def test_suspicious_cognate(validator):
    assert validator.is_suspicious_cognate("hand", "kirjoituskone", "en", "fi")
    assert not validator.is_suspicious_cognate("hand", "kirjoituskone", "en", "ru")
    assert not validator.is_suspicious_cognate("water", "wasser", "en", "de")
    assert not validator.is_suspicious_cognate("hand", "mystification", "en", "en")


def test_suspicious_shape_only_rejected_across_families(validator, make_word):
    hand = make_word("hand")

    rejected = validator.normalize(hand, raw("kirjoituskone", language="fi", relation_type="borrowing"))
    assert validator.rejection_reason(rejected, hand) == "suspicious cognate"

    related = validator.normalize(hand, raw("kirjoituskone", language="de", relation_type="borrowing"))
    assert validator.rejection_reason(related, hand) is None


def test_normalize_defaults(validator, water, registry):
    connection = validator.normalize(water, RawConnection(text=" wasser ", language="German", relation_type="", confidence=None))

    assert connection.word.text == "wasser"
    assert connection.word.language == "de"
    assert connection.word.id == registry.id_for("wasser", "de")
    assert connection.word.part_of_speech == "unknown"
    assert connection.word.definition == 'Related to "water"'
    assert connection.relationship.type == "related"
    assert connection.relationship.confidence == 0.5
    assert connection.relationship.source == "unknown"
    assert connection.relationship.priority == Priority.MEDIUM


def test_normalize_blank_text(validator, water):
    assert validator.normalize(water, raw("   ")) is None


def test_ids_are_stable_per_word(validator, water):
    first = validator.normalize(water, raw("wasser", language="de"))
    second = validator.normalize(water, raw("Wasser", language="de"))
    assert first.word.id == second.word.id


@pytest.mark.parametrize("texts, expected", [
    (("Derived from PIE *wed-",), "PIE *wed-"),
    (("cf. *wed- root",), "*wed-"),
    ((None, "", "see Latin aqua"), "Latin aqua"),
    (("nothing here",), None),
])
def test_extract_shared_root(texts, expected):
    assert ConnectionValidator.extract_shared_root(*texts) == expected


def test_infer_shared_root_fallbacks(validator, water):
    assert validator.infer_shared_root(water, "waterfall", "en", "compound", raw("waterfall")) == "water"
    assert validator.infer_shared_root(water, "wasser", "de", "cognate_west_germanic", raw("wasser")) == "German wasser"
    assert validator.infer_shared_root(water, "wasser", "de", "cognate", raw("wasser", shared_root="water")) == "water"


@pytest.mark.parametrize("notes, root, expected", [
    (None, "*wed-", "Shared etymological element: *wed-"),
    ("From PIE *wed-", "*wed-", "From PIE *wed-"),
    ("Cognate", "*wed-", "Cognate (shared root: *wed-)"),
    ("Cognate", None, "Cognate"),
    (None, None, None),
])
def test_ensure_root_in_notes(notes, root, expected):
    assert ConnectionValidator.ensure_root_in_notes(notes, root) == expected


def test_valid_cognate_candidates(validator):
    assert validator.is_valid_cognate_candidate("mother", "mutter", "en", "de")
    assert not validator.is_valid_cognate_candidate("mother", "мать", "en", "ru")
    assert not validator.is_valid_cognate_candidate("mother", "mother", "en", "en")
    assert not validator.is_valid_cognate_candidate("water", "agua", "en", "es")


def test_character_overlap():
    assert character_overlap("water", "wasser") == pytest.approx(4 / 6)
    assert character_overlap("", "") == 0.0
