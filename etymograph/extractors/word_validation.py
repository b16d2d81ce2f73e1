"""
Plausibility heuristics for extracted etymological candidates.

The tables in this module are small, hand-picked and deliberately incomplete.
They are module-level constants so they can be replaced without touching the
extraction logic.
"""

import re
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from etymograph.config import CONFIDENCE

# Characters that may appear in an etymological form, including reconstructed roots
FORM_CHARS = r"\wÀ-ɏḀ-ỿἀ-῿Ͱ-ϿЀ-ӿ₀-₉ʰₑʷβɟḱĝʲʼ\-"
FORM_PATTERN = re.compile(rf"^\*?[{FORM_CHARS}]+\.?$")

STOP_WORDS = {
    "the", "and", "from", "with", "also", "see", "probably", "perhaps", "meaning",
    "word", "form", "root", "base",
}

COMMON_WORDS = {
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "from", "also", "see", "all", "any", "some", "many", "more", "most", "much",
    "such", "same", "other", "than", "only", "very", "well", "old", "new", "first",
    "last", "long", "great", "little", "own", "way", "use", "man", "day", "get",
    "has", "had", "his", "her", "she", "him", "not", "now", "how", "may", "say",
    "each", "which", "their", "time", "will", "about", "out", "up", "them", "make",
    "can", "like", "into", "year", "your", "come", "could", "over", "think",
}

MODERN_PREFIXES = ("cyber", "nano", "micro", "mega", "giga", "meta", "hyper", "ultra")
MODERN_SUFFIXES = ("tech", "net", "web", "app", "bot", "soft", "ware")
MODERN_WORDS = {
    "internet", "computer", "digital", "online", "software", "hardware", "website", "email",
}

ENGLISH_PREFIXES = {
    "pre", "re", "un", "dis", "mis", "over", "under", "out", "up", "in", "on",
    "ex", "de", "anti", "pro", "co", "inter", "intra", "trans", "sub", "super",
    "semi", "multi", "mega", "micro", "mini", "auto", "self", "non", "post",
    "fore", "counter", "cross", "ultra", "hyper", "vice", "quasi",
}
ENGLISH_SUFFIXES = {
    "ing", "ed", "er", "est", "ly", "tion", "sion", "ness", "ment", "ful",
    "less", "able", "ible", "ward", "wise", "like", "ship", "hood", "dom",
    "age", "ance", "ence", "ity", "ous", "ious", "al", "ic", "ical",
}

SEMANTIC_CATEGORIES = {
    "element": {"fire", "water", "earth", "air", "wind"},
    "color": {"red", "blue", "green", "yellow", "black", "white", "brown", "purple", "orange", "pink"},
    "number": {"one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten"},
}

SUSPICIOUS_PAIRS = {
    frozenset({"water", "fire"}),
    frozenset({"water", "punjab"}),
    frozenset({"test", "forest"}),
}

INVALID_LANGUAGE_NAMES = {"See", "Also", "From", "Word", "Root", "Meaning", "Definition"}

POSITIVE_INDICATORS = (
    "from", "etymology", "origin", "source", "cognate", "related to",
    "derives from", "borrowed from", "descended from", "comes from",
    "via", "through", "root", "stem", "base",
)
NEGATIVE_INDICATORS = (
    "meaning", "definition", "sense of", "used to mean", "refers to",
    "example", "instance", "such as", "including", "like",
    "compare", "contrast", "difference", "similar",
)
MORPHOLOGICAL_INDICATORS = (
    "prefix", "suffix", "compound", "formed from", "made up of",
    "consists of", "combination of", "composed of", "compound word",
    "word formation", "morphology", "affix", "element",
)

STRICT_ETYMOLOGICAL_PATTERNS = [
    re.compile(r"from\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+[\w*æœøþðɸβɟḱĝʷʲʼ-]+", re.I),
    re.compile(r"\b(from|via|through)\s+[A-Z]", re.I),
    re.compile(r"Proto-[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s*\*[\w-]+", re.I),
    re.compile(r"PIE\s+\*[\w-]+", re.I),
    re.compile(r"\b(derives?|derived|comes?)\s+from", re.I),
    re.compile(r"\b(ancestor|origin|root)\b", re.I),
    re.compile(r"\b(cognate|related)\s+to", re.I),
    re.compile(r"\b(Old|Middle|Ancient|Proto-)\s*[A-Z][a-z]+", re.I),
]
NON_ETYMOLOGICAL_PATTERNS = [
    re.compile(r"\bin\s+(the\s+)?sense\s+of", re.I),
    re.compile(r"\bis\s+used\s+(in|for)", re.I),
    re.compile(r"\bmeaning\s+[\"']", re.I),
    re.compile(r"\bexample\s+of", re.I),
    re.compile(r"\bsuch\s+as", re.I),
    re.compile(r"\bincluding", re.I),
    re.compile(r"\brefers?\s+to", re.I),
    re.compile(r"\bdescribes?", re.I),
    re.compile(r"\bis\s+a\s+(type|kind|form)\s+of", re.I),
    re.compile(r"\bknown\s+as", re.I),
    re.compile(r"\bcalled", re.I),
]
DATE_MARKER = re.compile(r"\b(c\.|circa|about)\s+\d")


@dataclass
class ContextScore:
    """
    Outcome of scoring the text around a candidate.

    Attributes:
        is_valid: Whether the candidate is accepted
        confidence: Resulting confidence (0 when rejected)
        notes: Human-readable summary of the score
    """
    is_valid: bool
    confidence: float
    notes: str


def _category(word: str) -> Optional[str]:
    for name, members in SEMANTIC_CATEGORIES.items():
        if word in members:
            return name
    return None


def is_reconstructed_form(word: str) -> bool:
    return word.startswith("*") or "proto" in word.lower()


def are_semantically_suspicious(word: str, source_word: str) -> bool:
    """
    True for cross-category pairs (element/color/number) and known bad pairs.

    Reconstructed or proto-language forms on either side are always exempt.
    """
    if is_reconstructed_form(word) or is_reconstructed_form(source_word):
        return False

    word_lower = word.lower()
    source_lower = source_word.lower()

    word_category = _category(word_lower)
    source_category = _category(source_lower)
    if word_category and source_category and word_category != source_category:
        return True

    return frozenset({word_lower, source_lower}) in SUSPICIOUS_PAIRS


def is_modern_technical_term(word: str) -> bool:
    word_lower = word.lower()
    if word_lower in MODERN_WORDS:
        return True
    return word_lower.startswith(MODERN_PREFIXES) or word_lower.endswith(MODERN_SUFFIXES)


def is_morphological_component(word: str, source_word: str) -> bool:
    """True if ``word`` is a bare English affix or an affix-shaped piece of the source."""
    clean_word = re.sub(r"[-_]", "", word.lower())
    if clean_word in ENGLISH_PREFIXES or clean_word in ENGLISH_SUFFIXES:
        return True

    if not source_word or clean_word not in source_word.lower():
        return False

    clean_source = re.sub(r"[-_]", "", source_word.lower())
    if clean_source.startswith(clean_word) and len(clean_source) > len(clean_word) + 1:
        return True
    if clean_source.endswith(clean_word) and len(clean_source) > len(clean_word) + 1:
        return True

    escaped = re.escape(clean_word)
    hyphenated = re.compile(rf"\b{escaped}-\w+|\w+-{escaped}\b", re.I)
    return bool(hyphenated.search(source_word))


def is_common_word(word: str) -> bool:
    return word.lower() in COMMON_WORDS


def is_valid_etymological_word(word: str, source_word: str) -> bool:
    """Candidate validation applied to every extracted word."""
    if not word or len(word) < 2:
        return False
    if word == source_word:
        return False
    if not FORM_PATTERN.match(word):
        return False
    if word.lower() in STOP_WORDS:
        return False
    if is_modern_technical_term(word):
        logger.debug(f"Rejected '{word}': modern technical term")
        return False
    if are_semantically_suspicious(word, source_word):
        logger.debug(f"Rejected '{word}': semantically suspicious against '{source_word}'")
        return False
    if not word.startswith("*") and is_morphological_component(word, source_word):
        logger.debug(f"Rejected '{word}': morphological component of '{source_word}'")
        return False
    return True


def is_valid_language_name(language_name: str) -> bool:
    if not language_name or len(language_name) < 3:
        return False
    if not language_name[0].isupper():
        return False
    return language_name not in INVALID_LANGUAGE_NAMES


def score_context(text: str, match_index: int, language_name: str, word: str) -> ContextScore:
    """
    Score the ~100 characters around a match for etymological intent.

    Any morphological-analysis indicator rejects the candidate outright.
    """
    start = max(0, match_index - 100)
    end = min(len(text), match_index + 100)
    context = text[start:end].lower()

    positive = sum(1 for indicator in POSITIVE_INDICATORS if indicator in context)
    negative = sum(1 for indicator in NEGATIVE_INDICATORS if indicator in context)
    morphological = sum(1 for indicator in MORPHOLOGICAL_INDICATORS if indicator in context)

    if language_name.startswith("Proto-"):
        positive += 2
    if language_name == "Proto-Indo-European" or "pie" in language_name.lower():
        positive += 3
        if word.startswith("*"):
            positive += 2

    if morphological > 0:
        return ContextScore(False, 0.0, f"morphological analysis context (morphological:{morphological})")

    confidence = min(
        CONFIDENCE["ceiling"],
        CONFIDENCE["context_base"]
        + positive * CONFIDENCE["context_positive_step"]
        - negative * CONFIDENCE["context_negative_step"]
    )

    if positive > negative and confidence > CONFIDENCE["context_accept"]:
        return ContextScore(True, confidence, f"etymological context confirmed (score: +{positive}/-{negative})")
    if positive > 0 and negative == 0:
        return ContextScore(
            True,
            max(CONFIDENCE["context_weak_floor"], confidence),
            f"weak etymological context (score: +{positive}/-{negative})"
        )
    return ContextScore(False, 0.0, f"insufficient etymological context (score: +{positive}/-{negative})")


def score_strict_context(context: str, word_index: int) -> ContextScore:
    """
    Strict check used for hyperlinked words: explicit etymological phrasing
    must sit within 50 characters of the word.
    """
    window = context[max(0, word_index - 50):min(len(context), word_index + 50)]

    for pattern in NON_ETYMOLOGICAL_PATTERNS:
        if pattern.search(window):
            return ContextScore(False, 0.1, f"non-etymological context: {pattern.pattern}")

    score = float(sum(1 for pattern in STRICT_ETYMOLOGICAL_PATTERNS if pattern.search(window)))
    if "from " in window:
        score += 0.5
    if "*" in window:
        score += 0.3
    if DATE_MARKER.search(window):
        score += 0.2

    confidence = min(score / 2, 1.0)
    if score >= 1:
        return ContextScore(True, confidence, f"strict etymological context (score: {score:.1f})")
    return ContextScore(False, confidence, f"insufficient etymological indicators (score: {score:.1f})")
