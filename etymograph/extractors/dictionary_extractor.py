"""
Readers for structured dictionary entries.

The dictionary API returns JSON with meanings, phonetics and an optional
free-text ``origin`` line. This module normalizes an entry and parses the
origin line into low-confidence ancestor and cognate connections.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from etymograph.config import CONFIDENCE
from etymograph.extractors.word_validation import FORM_CHARS, is_valid_etymological_word
from etymograph.language import LanguageClassifier
from etymograph.models import Priority, RawConnection, RelationType

ORIGIN_PATTERNS = [
    (
        RelationType.ANCESTOR.value,
        re.compile(rf"(?i:from|borrowed from|via)\s+((?:[A-Z][A-Za-z-]*\s+){{1,4}})(?:the\s+)?(?:word\s+)?[\"']?([*{FORM_CHARS}]+)[\"']?"),
    ),
    (
        RelationType.COGNATE.value,
        re.compile(rf"(?i:related to)\s+((?:[A-Z][A-Za-z-]*\s+){{1,4}})(?:the\s+)?(?:word\s+)?[\"']?([*{FORM_CHARS}]+)[\"']?"),
    ),
]


@dataclass
class DictionaryEntry:
    """
    Normalized dictionary API entry.

    Attributes:
        word: Headword as returned by the API
        origin: Free-text origin line, if any
        phonetics: Raw phonetics records
        meanings: Raw meanings records (partOfSpeech + definitions)
    """
    word: str
    origin: Optional[str] = None
    phonetics: List[Dict] = field(default_factory=list)
    meanings: List[Dict] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload, fallback_word: str) -> Optional["DictionaryEntry"]:
        """
        Build an entry from an API entry object, or from the API's list of them.

        Returns:
            The entry, or None for empty or malformed payloads
        """
        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not isinstance(payload, dict):
            return None
        if not any(key in payload for key in ("meanings", "origin", "etymology", "phonetics")):
            return None

        entry = payload
        origin = entry.get("origin") or entry.get("etymology")
        word = entry.get("word")
        return cls(
            word=word if isinstance(word, str) and word else fallback_word,
            origin=origin if isinstance(origin, str) else None,
            phonetics=entry.get("phonetics") if isinstance(entry.get("phonetics"), list) else [],
            meanings=entry.get("meanings") if isinstance(entry.get("meanings"), list) else [],
        )

    def primary_definition(self) -> Optional[str]:
        for meaning in self.meanings:
            if not isinstance(meaning, dict):
                continue
            definitions = meaning.get("definitions")
            if not isinstance(definitions, list):
                continue
            for definition in definitions:
                if isinstance(definition, dict) and isinstance(definition.get("definition"), str):
                    return definition["definition"]
        return None

    def primary_part_of_speech(self) -> Optional[str]:
        for meaning in self.meanings:
            if isinstance(meaning, dict) and isinstance(meaning.get("partOfSpeech"), str):
                part_of_speech = meaning["partOfSpeech"].strip()
                if part_of_speech:
                    return part_of_speech
        return None

    def primary_phonetic(self) -> Optional[str]:
        for phonetic in self.phonetics:
            if isinstance(phonetic, dict) and isinstance(phonetic.get("text"), str) and phonetic["text"]:
                return phonetic["text"]
        return None


class DictionaryExtractor:
    """Turns a dictionary entry's origin line into raw connections."""

    def __init__(self, classifier: Optional[LanguageClassifier] = None):
        self.classifier = classifier or LanguageClassifier()

    def extract(self, entry: Optional[DictionaryEntry], word: str) -> List[RawConnection]:
        if entry is None or not entry.origin or not entry.origin.strip():
            return []

        connections = []
        for relation_type, language_name, form in self.parse_origin(entry.origin):
            if not is_valid_etymological_word(form, word):
                logger.debug(f"Rejected dictionary origin form '{form}' for '{word}'")
                continue
            shared_root = f"{language_name} {form}"
            connections.append(RawConnection(
                text=form,
                language=self.classifier.code_from_name(language_name),
                relation_type=relation_type,
                confidence=CONFIDENCE["dictionary_origin"],
                notes=f"Derived from {shared_root}",
                origin=shared_root,
                shared_root=shared_root,
                definition=f"{language_name} form related to \"{word}\"",
                part_of_speech="root",
                priority=Priority.LOW,
            ))

        logger.debug(f"Dictionary origin for '{word}' yielded {len(connections)} connections")
        return connections

    @staticmethod
    def parse_origin(origin_text: str) -> List[tuple]:
        """
        Find "from <Language> <word>" and "related to <Language> <word>" phrases.

        Returns:
            List of (relation type, language name, word form) tuples
        """
        normalized = " ".join(origin_text.split())
        results = []
        for relation_type, pattern in ORIGIN_PATTERNS:
            for match in pattern.finditer(normalized):
                language_name = match.group(1).strip()
                form = re.sub(r"[.,;:]+$", "", match.group(2).strip())
                if language_name and form:
                    results.append((relation_type, language_name, form))
        return results
