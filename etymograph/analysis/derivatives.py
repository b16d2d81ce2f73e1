"""
Trivial-derivative detection.

A connection between "walk" and "walking", or between Spanish "nación" and
Italian "nazione", says nothing interesting about etymology. These checks find
such pairs so the pipeline can drop them.
"""

import re
from typing import Optional

from etymograph.language import LanguageClassifier

INFLECTIONS = ("ing", "ed", "s", "es", "ies", "er", "est")
DOUBLING_INFLECTIONS = ("ing", "ed", "er", "est")
CLEAR_DERIVATIONS = ("ly", "ness", "ment")
VOWELS = set("aeiouy")
NEGATION_PREFIXES = ("un", "dis", "non")

ROMANCE_ENDINGS = (
    "ción", "sión", "tion", "sion", "zione", "sione", "ção", "são",
    "idad", "ité", "ità", "idade", "tate", "dad",
    "oso", "osa", "eux", "euse",
    "ico", "ica", "ique",
    "al", "ale", "ar", "er", "ir", "are", "ere", "ire",
)
GERMANIC_ENDINGS = (
    "ing", "ed", "er", "est", "ly", "ness", "ment",
    "en", "an", "ung", "heit", "keit", "lich", "isch",
)

# English suffix -> matching Romance suffixes
SUFFIX_CORRESPONDENCES = [
    (re.compile(r"tion$"), re.compile(r"ción$|tion$|zione$")),
    (re.compile(r"sion$"), re.compile(r"sión$|sion$|sione$")),
    (re.compile(r"ity$"), re.compile(r"idad$|ité$|ità$")),
    (re.compile(r"ous$"), re.compile(r"oso$|eux$")),
    (re.compile(r"ic$"), re.compile(r"ico$|ique$")),
    (re.compile(r"al$"), re.compile(r"al$|ale$")),
]

_CLASSIFIER = LanguageClassifier()


def _is_inflection(base: str, other: str) -> bool:
    """True when ``other`` is ``base`` plus a basic inflection or clear derivation."""
    for suffix in INFLECTIONS:
        if other == base + suffix:
            return True
        if suffix == "ies" and base.endswith("y") and other == base[:-1] + "ies":
            return True
        if suffix == "ed" and base.endswith("e") and other == base + "d":
            return True
        if suffix == "ing" and base.endswith("e") and other == base[:-1] + "ing":
            return True
    if _is_doubled_inflection(base, other):
        return True
    return any(other == base + suffix for suffix in CLEAR_DERIVATIONS)


def _is_doubled_inflection(base: str, other: str) -> bool:
    """stop -> stopped, run -> running, big -> bigger."""
    if len(base) < 2 or base[-1] in VOWELS or base[-1] in "wx":
        return False
    return any(other == base + base[-1] + suffix for suffix in DOUBLING_INFLECTIONS)


def edit_distance(word_a: str, word_b: str) -> int:
    """Levenshtein distance between two words."""
    previous = list(range(len(word_b) + 1))
    for i, char_a in enumerate(word_a, 1):
        current = [i]
        for j, char_b in enumerate(word_b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (char_a != char_b),
            ))
        previous = current
    return previous[-1]


def roots_near_identical(root_a: str, root_b: str) -> bool:
    """Stripped roots within one edit per four letters of the shorter root."""
    shorter = min(len(root_a), len(root_b))
    if shorter < 3:
        return False
    return edit_distance(root_a, root_b) <= shorter // 4


def strip_ending(word: str, endings) -> str:
    for ending in endings:
        if word.endswith(ending) and len(word) > len(ending) + 2:
            return word[:-len(ending)]
    return word


def roots_related(root_a: str, root_b: str) -> bool:
    """Roots of similar length differing in at most a third of their positions."""
    if root_a == root_b:
        return True
    if abs(len(root_a) - len(root_b)) > 2:
        return False

    max_diff = min(len(root_a), len(root_b)) // 3
    differences = sum(1 for a, b in zip(root_a, root_b) if a != b)
    return differences <= max_diff


def is_cross_language_derivative(
    source: str,
    target: str,
    source_language: str,
    target_language: str,
    classifier: Optional[LanguageClassifier] = None
) -> bool:
    classifier = classifier or _CLASSIFIER
    source_romance = "romance" in classifier.family_path(source_language)
    target_romance = "romance" in classifier.family_path(target_language)

    if source_romance and target_romance:
        if roots_near_identical(strip_ending(source, ROMANCE_ENDINGS), strip_ending(target, ROMANCE_ENDINGS)):
            return True

    if source_language in ("en", "de") and target_romance:
        for english, romance in SUFFIX_CORRESPONDENCES:
            if english.search(source) and romance.search(target):
                if roots_related(english.sub("", source), romance.sub("", target)):
                    return True

    source_germanic = "germanic" in classifier.family_path(source_language)
    target_germanic = "germanic" in classifier.family_path(target_language)
    if source_germanic and target_germanic:
        if roots_near_identical(strip_ending(source, GERMANIC_ENDINGS), strip_ending(target, GERMANIC_ENDINGS)):
            return True

    return False


def is_trivial_derivative(
    source_text: str,
    target_text: str,
    source_language: str,
    target_language: str,
    classifier: Optional[LanguageClassifier] = None
) -> bool:
    """
    Whether ``target_text`` is a trivial variant of ``source_text``.

    Same-language pairs are checked for inflections, a few obvious derivational
    suffixes and negation prefixes, in both directions. Cross-language pairs are
    checked with family-specific root stripping and a suffix correspondence table.

    Args:
        source_text: The searched word
        target_text: The candidate related word
        source_language: Normalized code of the searched word
        target_language: Normalized code of the candidate

    Returns:
        True if the pair should be dropped
    """
    source = source_text.lower().strip()
    target = target_text.lower().strip()

    if source == target:
        return True

    if source_language != target_language:
        return is_cross_language_derivative(source, target, source_language, target_language, classifier)

    if _is_inflection(source, target) or _is_inflection(target, source):
        return True

    return any(target == prefix + source or source == prefix + target for prefix in NEGATION_PREFIXES)
