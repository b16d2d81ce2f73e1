"""
Cognate Pattern Matcher for cross-language cognate discovery.

This module implements the CognateAgent class, which proposes cognates for a
word from two sources: a small curated table of concepts whose surface forms
are known cognates across languages, and a handful of regular sound-change
rules applied between language families.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from cachetools import TTLCache
from loguru import logger

from etymograph.analysis.derivatives import is_trivial_derivative
from etymograph.config import CACHE_CONFIG, COGNATE_LANGUAGES, CONFIDENCE
from etymograph.language import LanguageClassifier
from etymograph.models import RelationType

# semantic field -> concept -> language -> surface forms
COGNATE_GROUPS: Dict[str, Dict[str, Dict[str, List[str]]]] = {
    "family_relations": {
        "mother": {
            "en": ["mother"], "de": ["mutter"], "es": ["madre"], "fr": ["mère"],
            "it": ["madre"], "la": ["mater"], "ru": ["мать"], "el": ["μητέρα"],
        },
        "father": {
            "en": ["father"], "de": ["vater"], "es": ["padre"], "fr": ["père"],
            "it": ["padre"], "la": ["pater"], "ru": ["отец"], "el": ["πατέρας"],
        },
        "brother": {
            "en": ["brother"], "de": ["bruder"], "es": ["hermano"], "fr": ["frère"],
            "it": ["fratello"], "la": ["frater"], "ru": ["брат"], "el": ["αδελφός"],
        },
    },
    "numbers": {
        "one": {
            "en": ["one"], "de": ["ein", "eins"], "es": ["uno"], "fr": ["un"],
            "it": ["uno"], "la": ["unus"], "ru": ["один"], "el": ["ένα"],
        },
        "two": {
            "en": ["two"], "de": ["zwei"], "es": ["dos"], "fr": ["deux"],
            "it": ["due"], "la": ["duo"], "ru": ["два"], "el": ["δύο"],
        },
        "three": {
            "en": ["three"], "de": ["drei"], "es": ["tres"], "fr": ["trois"],
            "it": ["tre"], "la": ["tres"], "ru": ["три"], "el": ["τρία"],
        },
    },
    "body_parts": {
        "heart": {
            "en": ["heart"], "de": ["herz"], "es": ["corazón"], "fr": ["cœur"],
            "it": ["cuore"], "la": ["cor"], "ru": ["сердце"], "el": ["καρδιά"],
        },
        "head": {
            "en": ["head"], "de": ["kopf", "haupt"], "es": ["cabeza"], "fr": ["tête"],
            "it": ["testa"], "la": ["caput"], "ru": ["голова"], "el": ["κεφάλι"],
        },
    },
    "basic_concepts": {
        "water": {
            "en": ["water"], "de": ["wasser"], "es": ["agua"], "fr": ["eau"],
            "it": ["acqua"], "la": ["aqua"], "ru": ["вода"], "el": ["νερό"],
        },
        "fire": {
            "en": ["fire"], "de": ["feuer"], "es": ["fuego"], "fr": ["feu"],
            "it": ["fuoco"], "la": ["ignis"], "ru": ["огонь"], "el": ["φωτιά"],
        },
        "house": {
            "en": ["house"], "de": ["haus"], "es": ["casa"], "fr": ["maison"],
            "it": ["casa"], "la": ["domus"], "ru": ["дом"], "el": ["σπίτι"],
        },
    },
}


@dataclass(frozen=True)
class SoundChangeRule:
    """
    Regular sound correspondence between two language families.

    Attributes:
        source_family: Family tag the searched language must belong to
        target_family: Family tag the candidate language must belong to
        pattern: Regex applied to the searched word
        replacement: Substitution for ``pattern``
        example: Illustrative pair, used in notes
        target_language: Restricts the rule to one target language
        cross_family_only: Skip when the source already belongs to the target family
    """
    source_family: str
    target_family: str
    pattern: str
    replacement: str
    example: str
    target_language: Optional[str] = None
    cross_family_only: bool = False


SOUND_CHANGE_RULES = [
    SoundChangeRule("germanic", "romance", r"^h([aeiou])", r"\1", "haus → casa"),
    SoundChangeRule("germanic", "romance", r"k([aeiou])", r"c\1", "kin → cognate"),
    SoundChangeRule("germanic", "romance", r"w([aeiou])", r"v\1", "water → aqua"),
    SoundChangeRule("germanic", "romance", r"^f", "p", "father → pater"),
    SoundChangeRule("germanic", "romance", r"th", "t", "three → tres"),
    SoundChangeRule("latin", "romance", r"ct", "tt", "factum → fatto", target_language="it"),
    SoundChangeRule("latin", "romance", r"ct", "ch", "factum → hecho", target_language="es"),
    SoundChangeRule("latin", "romance", r"ct", "it", "factum → fait", target_language="fr"),
    SoundChangeRule("latin", "romance", r"^p", "", "pater → père", target_language="fr"),
    SoundChangeRule("latin", "romance", r"^f", "h", "farina → harina", target_language="es"),
    SoundChangeRule("indo-european", "germanic", r"^p", "f", "pater → father", cross_family_only=True),
    SoundChangeRule("indo-european", "germanic", r"^d", "t", "decem → ten", cross_family_only=True),
    SoundChangeRule("indo-european", "germanic", r"^g", "k", "genus → kin", cross_family_only=True),
]


@dataclass
class CognateCandidate:
    """
    A proposed cognate.

    Attributes:
        word: Surface form in the target language
        language: Target language code
        confidence: 0.95 for table hits, 0.75 for sound-change guesses
        notes: How the candidate was found
        relation_type: Always a cognate type
        semantic_field: Field of the concept table, for table hits
        concept: Concept name, for table hits
        sound_change: Example of the rule that fired, for sound-change guesses
    """
    word: str
    language: str
    confidence: float
    notes: str
    relation_type: str = RelationType.COGNATE.value
    semantic_field: Optional[str] = None
    concept: Optional[str] = None
    sound_change: Optional[str] = None


class CognateAgent:
    """
    Agent that proposes cognates of a word in other languages.

    Results are cached per (word, source language, target languages) for
    a few hours.
    """

    def __init__(
        self,
        classifier: Optional[LanguageClassifier] = None,
        groups: Optional[Dict] = None,
        rules: Optional[Sequence[SoundChangeRule]] = None
    ):
        self.classifier = classifier or LanguageClassifier()
        self.groups = groups if groups is not None else COGNATE_GROUPS
        self.rules = list(rules) if rules is not None else SOUND_CHANGE_RULES
        self.cache = TTLCache(maxsize=CACHE_CONFIG["cognate_max_size"], ttl=CACHE_CONFIG["cognate_ttl"])

    def find_cognates(
        self,
        word: str,
        source_language: str,
        target_languages: Optional[Sequence[str]] = None
    ) -> List[CognateCandidate]:
        """
        Find cognates of ``word`` in the target languages.

        Args:
            word: The searched word
            source_language: Normalized code of the searched word
            target_languages: Codes to search; defaults to COGNATE_LANGUAGES

        Returns:
            Candidates unique by (word, language), highest confidence first
        """
        targets = tuple(target_languages or COGNATE_LANGUAGES)
        normalized = word.lower().strip()
        cache_key = (normalized, source_language, targets)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return list(cached)

        candidates = self.find_direct_cognates(normalized, source_language, targets)
        candidates += self.apply_sound_change_rules(normalized, source_language, targets)

        unique = self.deduplicate(candidates)
        unique.sort(key=lambda candidate: candidate.confidence, reverse=True)

        self.cache[cache_key] = unique
        logger.debug(f"Cognate matcher found {len(unique)} candidates for '{word}' ({source_language})")
        return list(unique)

    def find_direct_cognates(self, word: str, source_language: str, targets: Sequence[str]) -> List[CognateCandidate]:
        candidates = []
        for field_name, concepts in self.groups.items():
            for concept, forms in concepts.items():
                if not any(form.lower() == word for form in forms.get(source_language, [])):
                    continue

                for target in targets:
                    if target == source_language:
                        continue
                    for form in forms.get(target, []):
                        if is_trivial_derivative(word, form, source_language, target, self.classifier):
                            continue
                        candidates.append(CognateCandidate(
                            word=form,
                            language=target,
                            confidence=CONFIDENCE["cognate_direct"],
                            notes=f"Direct cognate through {concept} concept",
                            semantic_field=field_name,
                            concept=concept,
                        ))
        return candidates

    def _rule_applies(self, rule: SoundChangeRule, source_language: str, target_language: str) -> bool:
        if rule.target_language and rule.target_language != target_language:
            return False
        if not self.classifier.in_family(source_language, rule.source_family):
            return False
        if not self.classifier.in_family(target_language, rule.target_family):
            return False
        return not (rule.cross_family_only and self.classifier.in_family(source_language, rule.target_family))

    def apply_sound_change_rules(self, word: str, source_language: str, targets: Sequence[str]) -> List[CognateCandidate]:
        candidates = []
        for target in targets:
            if target == source_language:
                continue
            for rule in self.rules:
                if not self._rule_applies(rule, source_language, target):
                    continue
                if not re.search(rule.pattern, word):
                    continue

                transformed = re.sub(rule.pattern, rule.replacement, word, count=1)
                if transformed != word and len(transformed) > 1:
                    candidates.append(CognateCandidate(
                        word=transformed,
                        language=target,
                        confidence=CONFIDENCE["cognate_sound_change"],
                        notes=f"Potential cognate via sound change: {rule.example}",
                        sound_change=rule.example,
                    ))
        return candidates

    @staticmethod
    def deduplicate(candidates: List[CognateCandidate]) -> List[CognateCandidate]:
        """Keep the higher-confidence candidate per (word, language), in first-seen order."""
        best: Dict[tuple, CognateCandidate] = {}
        for candidate in candidates:
            key = (candidate.word.lower(), candidate.language)
            existing = best.get(key)
            if existing is None or candidate.confidence > existing.confidence:
                best[key] = candidate
        return list(best.values())

    def clear_cache(self) -> None:
        self.cache.clear()
