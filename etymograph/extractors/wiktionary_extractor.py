"""
Connection extraction from Wiktionary wiki markup.

This module turns the raw wikitext of a dictionary page into raw connections.
It reads etymology templates ({{cog}}, {{der}}, {{inh}}, {{bor}}, ...),
cross-language wiki links, free-text phrases such as "cognate with", the parts
of {{compound}} and {{af}} templates, and the "Derived terms" section.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from etymograph.config import CONFIDENCE
from etymograph.language import LanguageClassifier
from etymograph.models import RawConnection, RelationType

ETYMOLOGY_SECTION_PATTERNS = [
    re.compile(r"===Etymology===\s*\n(.*?)(?=\n===|\n==|\n\[\[Category|\n$)", re.S),
    re.compile(r"==Etymology==\s*\n(.*?)(?=\n===|\n==|\n\[\[Category|\n$)", re.S),
    re.compile(r"====Etymology====\s*\n(.*?)(?=\n===|\n==|\n\[\[Category|\n$)", re.S),
]
DERIVED_TERMS_SECTION = re.compile(r"===Derived terms===\n(.*?)(?=\n===|\n==|\n\[\[Category|\n$)", re.S)
DEFINITION_LINE = re.compile(r"# (.+?)(?:\n|$)")
PART_OF_SPEECH_HEADER = re.compile(r"===(.+?)===\n.*?# ", re.S)
WIKI_LINK = re.compile(r"\[\[([^\]]+)\]\]")
NESTED_TEMPLATE = re.compile(r"\{\{[^}]+\}\}")

# Templates of the form {{name|lang|word}}
_LANG_WORD_TEMPLATES = ("cog", "cognate", "m", "mention", "l", "link", "term", "t", r"t\+")
# Templates of the form {{name|target_lang|lang|word}}; the first argument is skipped
_SKIP_FIRST_TEMPLATES = ("der", "inh", "bor", "cal", "lbor")
# Templates of the form {{name|lang|part1|part2|...}}; every part is in ``lang``
_COMPOUND_TEMPLATES = ("compound", "com")
_AFFIX_TEMPLATES = ("af", "affix", "prefix", "suffix")
PART_TEMPLATE = re.compile(
    rf"\{{\{{({'|'.join(_COMPOUND_TEMPLATES + _AFFIX_TEMPLATES)})\|([^{{}}]+)\}}\}}"
)

TEMPLATE_PATTERNS = (
    [re.compile(rf"\{{\{{{name}\|([^|}}]+)\|([^|}}]+)[|}}]") for name in _LANG_WORD_TEMPLATES]
    + [re.compile(rf"\{{\{{{name}\|[^|}}]+\|([^|}}]+)\|([^|}}]+)[|}}]") for name in _SKIP_FIRST_TEMPLATES]
    + [
        re.compile(r"\{\{etyl\|([^|}]+)\|[^|}]*\|([^|}]+)[|}]"),
        re.compile(r"\{\{etyl\|([^|}]+)\}\}\s*\[\[([^\]]+)\]\]"),
    ]
)
LANGUAGE_LINK = re.compile(r"\[\[([^:\]]+):([^\]]+)\]\]")

PHRASE_PATTERNS = [
    re.compile(r"cognate with (.+?)(?:\.|,|\n|$)", re.I),
    re.compile(r"compare (.+?)(?:\.|,|\n|$)", re.I),
    re.compile(r"related to (.+?)(?:\.|,|\n|$)", re.I),
    re.compile(r"from (.+?)(?:\.|,|\n|$)", re.I),
    re.compile(r"borrowed from (.+?)(?:\.|,|\n|$)", re.I),
    re.compile(r"inherited from (.+?)(?:\.|,|\n|$)", re.I),
]

# Wiktionary-specific language tokens that differ from the classifier's codes
WIKI_LANGUAGE_ALIASES = {
    "roa-opt": "pt",
    "roa-oit": "it",
    "ml": "la",
    "ml.": "la",
    "VL": "la",
    "LL": "la",
    "ML": "la",
    "NL": "la",
}


@dataclass
class WikiExtraction:
    """
    Everything read from one wikitext page.

    Attributes:
        definition: First definition line, with wiki links stripped
        part_of_speech: First part-of-speech header, lowercased
        connections: Raw connections found on the page
        has_etymology_section: Whether a dedicated etymology section was found
    """
    definition: Optional[str] = None
    part_of_speech: Optional[str] = None
    connections: List[RawConnection] = field(default_factory=list)
    has_etymology_section: bool = False


class WiktionaryExtractor:
    """Parses wikitext into raw connections for a word."""

    def __init__(self, classifier: Optional[LanguageClassifier] = None):
        self.classifier = classifier or LanguageClassifier()

    def extract(self, wikitext: Optional[str], word: str, language: str) -> WikiExtraction:
        """
        Extract definition, part of speech and connections from wikitext.

        Args:
            wikitext: Raw wiki markup, or None when the source had nothing
            word: The searched word
            language: Normalized language code of the searched word

        Returns:
            WikiExtraction; empty when the markup is missing or unparseable
        """
        result = WikiExtraction()
        if not wikitext or len(wikitext) < 10:
            return result

        try:
            etymology_text = self._etymology_section(wikitext)
            result.has_etymology_section = etymology_text is not None
            if etymology_text is None:
                logger.debug(f"No etymology section for '{word}', scanning full text for templates")
                etymology_text = wikitext

            definition_match = DEFINITION_LINE.search(wikitext)
            if definition_match:
                result.definition = WIKI_LINK.sub(r"\1", definition_match.group(1)).strip()

            pos_match = PART_OF_SPEECH_HEADER.search(wikitext)
            if pos_match and pos_match.group(1) != "Etymology":
                result.part_of_speech = pos_match.group(1).strip().lower()

            cognates = self.extract_cognates(etymology_text, language)
            parts = self.extract_word_parts(etymology_text, word)
            derived = self.extract_derived_terms(wikitext, word, language)
            result.connections = cognates + parts + derived

            logger.debug(
                f"Wikitext for '{word}': {len(cognates)} cognates, {len(parts)} word parts, "
                f"{len(derived)} derived terms, "
                f"etymology section: {result.has_etymology_section}"
            )
        except (re.error, TypeError, ValueError) as e:
            logger.error(f"Failed to parse wikitext for '{word}': {str(e)}")
            result.connections = []

        return result

    def _etymology_section(self, wikitext: str) -> Optional[str]:
        for pattern in ETYMOLOGY_SECTION_PATTERNS:
            match = pattern.search(wikitext)
            if match:
                return match.group(1)
        return None

    def normalize_wiki_language(self, token: str) -> str:
        token = token.strip()
        if token in WIKI_LANGUAGE_ALIASES:
            return WIKI_LANGUAGE_ALIASES[token]
        return self.classifier.normalize(token)

    def parse_language_references(self, text: str) -> List[Tuple[str, str]]:
        """
        Find every (language, word) pair referenced by templates or language links.

        Args:
            text: Wiki markup to scan

        Returns:
            List of (normalized language, cleaned word) pairs in discovery order
        """
        references = []

        for pattern in TEMPLATE_PATTERNS:
            for match in pattern.finditer(text):
                language = self.normalize_wiki_language(match.group(1))
                word = self._clean_word(match.group(2))
                if language and word and len(word) > 1 and "{{" not in word and "}}" not in word:
                    references.append((language, word))

        for match in LANGUAGE_LINK.finditer(text):
            language = self.normalize_wiki_language(match.group(1))
            word = match.group(2).split("|")[0].strip()
            if language and word and len(word) > 1:
                references.append((language, word))

        return references

    @staticmethod
    def _clean_word(word: str) -> str:
        word = re.sub(r"\|.*$", "", word)
        word = WIKI_LINK.sub(r"\1", word)
        word = NESTED_TEMPLATE.sub("", word)
        return word.strip()

    def extract_cognates(self, etymology_text: str, source_language: str) -> List[RawConnection]:
        """Template references become cognates, then phrase tails are re-scanned."""
        connections: List[RawConnection] = []
        seen = set()

        for language, word in self.parse_language_references(etymology_text):
            if language == source_language:
                continue
            seen.add((word, language))
            connections.append(RawConnection(
                text=word,
                language=language,
                relation_type=RelationType.COGNATE.value,
                confidence=CONFIDENCE["wiki_template_cognate"],
                notes="Etymological connection from Wiktionary",
                definition=f"{self.classifier.display_name(language)} etymological connection",
            ))

        for pattern in PHRASE_PATTERNS:
            for match in pattern.finditer(etymology_text):
                trigger = match.group(0).split(" ")[0].lower()
                for language, word in self.parse_language_references(match.group(1)):
                    if language == source_language or (word, language) in seen:
                        continue
                    seen.add((word, language))
                    connections.append(RawConnection(
                        text=word,
                        language=language,
                        relation_type=RelationType.COGNATE.value,
                        confidence=CONFIDENCE["wiki_phrase_cognate"],
                        notes=f"Cognate relationship: {trigger}",
                        origin=match.group(0).strip(),
                        definition=f"{self.classifier.display_name(language)} cognate through {trigger}",
                    ))

        return connections

    def extract_word_parts(self, etymology_text: str, source_word: str) -> List[RawConnection]:
        """
        Components named by {{compound}} and {{af}}-style templates.

        The first argument is the language of every part. Bare affixes
        ("un-", "-ness") and named arguments are skipped.
        """
        connections = []
        seen = set()
        for match in PART_TEMPLATE.finditer(etymology_text):
            name = match.group(1)
            arguments = match.group(2).split("|")
            language = self.normalize_wiki_language(arguments[0])
            if not language:
                continue

            is_compound = name in _COMPOUND_TEMPLATES
            for argument in arguments[1:]:
                part = argument.strip()
                if "=" in part or part.startswith("-") or part.endswith("-"):
                    continue
                part = self._clean_word(part)
                if len(part) < 2 or part.lower() == source_word.lower() or (part, language) in seen:
                    continue
                seen.add((part, language))

                display = self.classifier.display_name(language)
                if is_compound:
                    connections.append(RawConnection(
                        text=part,
                        language=language,
                        relation_type=RelationType.COMPOUND.value,
                        confidence=CONFIDENCE["wiki_compound"],
                        notes=f"Component of compound {source_word}",
                        shared_root=part,
                        definition=f"{display} component of \"{source_word}\"",
                    ))
                else:
                    connections.append(RawConnection(
                        text=part,
                        language=language,
                        relation_type=RelationType.DERIVATIVE.value,
                        confidence=CONFIDENCE["wiki_derived_term"],
                        notes=f"Base of {source_word}",
                        shared_root=part,
                        definition=f"{display} base of \"{source_word}\"",
                    ))
        return connections

    def extract_derived_terms(self, wikitext: str, source_word: str, language: str) -> List[RawConnection]:
        """
        Linked terms of the "Derived terms" section that share text with the source.

        A term that contains the source and is clearly longer is a compound;
        any other containment in either direction is a derivative.
        """
        section = DERIVED_TERMS_SECTION.search(wikitext)
        if not section:
            return []

        source_lower = source_word.lower()
        connections = []
        seen = set()
        for link in WIKI_LINK.finditer(section.group(1)):
            term = link.group(1).split("|")[0].strip()
            if not term or term in seen:
                continue
            seen.add(term)

            if source_lower in term and len(term) > len(source_word) + 2:
                connections.append(RawConnection(
                    text=term,
                    language=language,
                    relation_type=RelationType.COMPOUND.value,
                    confidence=CONFIDENCE["wiki_compound"],
                    notes=f"Compound word: {term}",
                    shared_root=source_word,
                    definition=f"{self.classifier.display_name(language)} compound word containing \"{source_word}\"",
                ))
            elif source_lower in term or term in source_lower:
                connections.append(RawConnection(
                    text=term,
                    language=language,
                    relation_type=RelationType.DERIVATIVE.value,
                    confidence=CONFIDENCE["wiki_derived_term"],
                    notes=f"Derivative of {source_word}",
                    shared_root=source_word,
                    definition=f"{self.classifier.display_name(language)} word derived from \"{source_word}\"",
                ))

        return connections
