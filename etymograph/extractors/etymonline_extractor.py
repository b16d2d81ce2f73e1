"""
Connection extraction from scraped Etymonline HTML.

Etymonline prose marks the forms it discusses with underlines, italics and
links to other entries. This module reads those marks in order of trust
(underline, italic, hyperlink), validates every candidate against its
surrounding prose, and adds three independent passes:

1. Shortening detection ("shortening of X", "short for X", ...)
2. Derivative lists on reconstructed-root pages ("It forms all or part of: ...")
3. A prose-pattern fallback for explicit PIE / Proto-language statements
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag
from loguru import logger

from etymograph.config import CONFIDENCE, PIE_LANGUAGE_CODE
from etymograph.extractors.word_validation import (
    FORM_CHARS,
    is_common_word,
    is_valid_etymological_word,
    is_valid_language_name,
    score_context,
    score_strict_context,
)
from etymograph.language import LanguageClassifier
from etymograph.models import Priority, RawConnection, RelationType, cognate_type

PIE_NAME = "Proto-Indo-European"
ROOT_CHARS = r"a-zA-Z₀-₉ʰₑʷβɟḱĝʲʼ\-"
LANGUAGE_NAME = r"[A-Z][a-z]+(?:(?:\s+|-)[A-Z][a-z]+)*"

RELATED_LISTING_PATTERNS = [
    re.compile(rf"({LANGUAGE_NAME})\s+[^\s,;]+(?:\s*,\s*{LANGUAGE_NAME}\s+[^\s,;]+)+"),
    re.compile(rf"(?:compare|cf\.)\s+({LANGUAGE_NAME})\s+[^\s,;]+", re.I),
    re.compile(rf"related\s+to\s+({LANGUAGE_NAME})\s+[^\s,;]+", re.I),
]

CONTEXT_LANGUAGE_PATTERNS = [
    re.compile(rf"({LANGUAGE_NAME})\s+[\w*æœøþðɸβɟḱĝʷʲʼ-]+\s*$"),
    re.compile(rf"from\s+({LANGUAGE_NAME})\s*$"),
    re.compile(rf"({LANGUAGE_NAME})\s+\*[\w-]+\s*$"),
]
TRAILING_LANGUAGE = re.compile(rf"({LANGUAGE_NAME})\s+$")

SHORTENING_PATTERNS = [
    re.compile(r"(?:shortening|abbreviation|short)\s+of\s+([a-zA-Z]+)", re.I),
    re.compile(r"shortened\s+from\s+([a-zA-Z]+)", re.I),
    re.compile(r"short\s+for\s+([a-zA-Z]+)", re.I),
    re.compile(r"(?:clipped|clipping)\s+(?:from|of)\s+([a-zA-Z]+)", re.I),
    re.compile(r"truncation\s+of\s+([a-zA-Z]+)", re.I),
    re.compile(r"from\s+([a-zA-Z]+)[^.]*shortened", re.I),
]

_LIST_END = r"(?:\n\s*It\s|\n\s*Etymology|\n\s*From|\n\s*Related|\n\s*See|\n\s*Also\s|\n\s*Entries|\n\s*$|$)"
DERIVATIVE_LIST_PATTERNS = [
    re.compile(rf"It\s+(?:forms|might\s+form)\s+all\s+or\s+part\s+of:\s*(.*?){_LIST_END}", re.I | re.S),
    re.compile(rf"source\s+also\s+of\s+(.*?){_LIST_END}", re.I | re.S),
    re.compile(rf"cognate\s+with\s+(.*?){_LIST_END}", re.I | re.S),
    re.compile(rf"related\s+to\s+(.*?){_LIST_END}", re.I | re.S),
]
DERIVATIVE_WORD = re.compile(r"^[a-zA-Z][a-zA-Z-]*[a-zA-Z]?$")

FALLBACK_PATTERNS = [
    re.compile(rf"from\s+PIE\s+(?:root\s+)?([*{FORM_CHARS}]+)", re.I),
    re.compile(rf"PIE\s+root\s+([*{FORM_CHARS}]+)", re.I),
    re.compile(rf"PIE\s+([*{FORM_CHARS}]+)", re.I),
    re.compile(rf"from\s+(Proto-[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+([*{FORM_CHARS}]+)", re.I),
]

RECONSTRUCTED_FORM = re.compile(rf"\*[{ROOT_CHARS}]+")
PIE_ROOT_PATTERNS = [
    re.compile(rf"PIE\s+\*[{ROOT_CHARS}]+"),
    re.compile(rf"PIE\s+root\s+\*[{ROOT_CHARS}]+"),
    re.compile(rf"from\s+PIE\s+\*[{ROOT_CHARS}]+"),
    re.compile(rf"Proto-Indo-European\s+\*[{ROOT_CHARS}]+"),
]
ROOT_MENTION_PATTERNS = [
    re.compile(rf"root\s+\*[{ROOT_CHARS}]+"),
    re.compile(rf"\*[{ROOT_CHARS}]+\s+root"),
    re.compile(rf"\*[{ROOT_CHARS}]+(?=\s|$|,|;)"),
]


@dataclass
class DetectedLanguage:
    name: str
    code: str


def collapse_text(node) -> str:
    """Plain text of a node with all whitespace runs collapsed."""
    return " ".join(node.get_text(" ").split())


class EtymonlineExtractor:
    """
    Extracts raw connections from an Etymonline page.

    The extractor is stateless; cross-reference bookkeeping happens in
    ``CrossReferenceIndex`` after extraction.
    """

    def __init__(self, classifier: Optional[LanguageClassifier] = None):
        self.classifier = classifier or LanguageClassifier()

    def extract(self, html: Optional[str], word: str, language: str) -> List[RawConnection]:
        """
        Parse a page and return connections for ``word``.

        Args:
            html: Raw page HTML, or None when the fetch failed
            word: The searched word (a ``*``-prefixed root for root pages)
            language: Normalized language code of the searched word

        Returns:
            Raw connections from every relevant section; empty on parse failure
        """
        if not html:
            return []

        try:
            soup = BeautifulSoup(html, "html.parser")
            candidates = soup.find_all("section", class_=re.compile(r"prose-lg"))
            if not candidates:
                candidates = [soup.body or soup]
            sections = [
                section for section in candidates
                if self.is_relevant_section(collapse_text(section), word)
            ]
            if not sections:
                logger.info(f"No etymology section found for: {word}")
                return []

            logger.debug(f"Found {len(sections)} etymology sections for: {word}")
            connections = []
            for section in sections:
                connections.extend(self.extract_from_section(section, word, language))

            logger.info(f"Found {len(connections)} etymological connections for '{word}'")
            return connections

        except Exception as e:
            logger.error(f"Error parsing etymonline HTML for '{word}': {str(e)}")
            return []

    def is_relevant_section(self, section_text: str, target_word: str) -> bool:
        """
        Whether a prose section is about ``target_word``.

        Regular words must appear among the first ten words. Roots may appear
        anywhere, with or without their asterisk.
        """
        section_lower = section_text.lower()
        target_lower = target_word.lower()

        if target_word.startswith("*"):
            bare = target_lower.replace("*", "")
            root_patterns = [
                target_lower, bare,
                f"{target_lower} (", f"{bare} (",
                f"pie root {target_lower}", f"pie root {bare}",
                f"root {target_lower}", f"root {bare}",
                f"proto-indo-european {target_lower}", f"proto-indo-european {bare}",
            ]
            if any(pattern in section_lower for pattern in root_patterns):
                return True

            escaped = re.escape(bare)
            root_regexes = [
                rf"\*?{escaped}\s*\(",
                rf"\b\*?{escaped}\b",
                rf"\b(?:pie|proto|root|etymology)\s+\*?{escaped}",
            ]
            return any(re.search(pattern, section_lower, re.I) for pattern in root_regexes)

        first_ten = " ".join(section_lower.split()[:10])
        return target_lower in first_ten

    def extract_from_section(self, section: Tag, word: str, language: str) -> List[RawConnection]:
        text = collapse_text(section)
        logger.debug(f"Analyzing text: {text[:300]}...")

        connections = self.extract_marked_words(section, text, word, language)
        connections.extend(self.detect_shortenings(text, word))

        if word.startswith("*"):
            connections.extend(self.extract_root_derivatives(text, word))

        if not connections and not word.startswith("*"):
            logger.debug(f"No marked words for '{word}', falling back to prose patterns")
            connections.extend(self.extract_fallback_patterns(text, word, language))

        for connection in connections:
            if connection.shared_root is None:
                connection.shared_root = self.extract_shared_root(
                    text, self.classifier.display_name(connection.language), connection.text
                )

        return connections

    def extract_marked_words(self, section: Tag, text: str, word: str, language: str) -> List[RawConnection]:
        """Underlined, then italic, then hyperlinked words; earlier tiers win duplicates."""
        marked = []
        seen: Set[Tuple[str, str]] = set()

        tiers = [
            ("underlined", self.extract_underlined(section, text, word, language)),
            ("italicized", self.extract_italicized(section, text, word, language)),
            ("hyperlinked", self.extract_hyperlinked(section, text, word, language)),
        ]
        for tier, candidates in tiers:
            for candidate in candidates:
                key = (candidate.language, candidate.text)
                if key in seen:
                    logger.debug(f"Skipped duplicate {tier} entry: {candidate.language} '{candidate.text}'")
                    continue
                seen.add(key)
                marked.append(candidate)
            logger.debug(f"Found {len(candidates)} {tier} etymological words")

        return marked

    @staticmethod
    def _context(text: str, index: int, width: int) -> Tuple[str, str]:
        before = text[max(0, index - width):index]
        after = text[index:min(len(text), index + width)]
        return before, after

    def extract_underlined(self, section: Tag, text: str, word: str, language: str) -> List[RawConnection]:
        tags = (
            section.find_all("u")
            + section.find_all("span", style=re.compile(r"underline"))
            + section.find_all("span", class_=re.compile(r"underline"))
        )
        connections = []
        for tag in tags:
            candidate = tag.get_text().strip()
            if candidate == word or not is_valid_etymological_word(candidate, word):
                continue
            index = text.find(candidate)
            if index == -1:
                continue

            before, after = self._context(text, index, 80)
            detected = self.language_from_context(before, candidate)
            validation = score_context(before + after, len(before), detected.name, candidate)
            if not validation.is_valid:
                continue

            connections.append(RawConnection(
                text=candidate,
                language=detected.code,
                relation_type=self.determine_relationship_type(detected.name, before + after, language),
                confidence=min(validation.confidence + CONFIDENCE["underline_boost"], CONFIDENCE["ceiling"]),
                notes=f"Underlined etymology: {validation.notes}",
                origin=f"{detected.name} {candidate}",
                definition=f"{detected.name} etymological form of \"{word}\"",
                priority=Priority.HIGH,
            ))
            logger.debug(f"Found underlined etymological word: {detected.name} '{candidate}' -> '{word}'")
        return connections

    def extract_italicized(self, section: Tag, text: str, word: str, language: str) -> List[RawConnection]:
        tags = section.find_all(["i", "em"]) + section.find_all("span", style=re.compile(r"italic"))
        connections = []
        for tag in tags:
            candidate = tag.get_text().strip()
            if not is_valid_etymological_word(candidate, word):
                continue
            index = text.find(candidate)
            if index == -1:
                continue

            before, after = self._context(text, index, 80)
            language_match = TRAILING_LANGUAGE.search(before)
            if not language_match:
                continue
            language_name = language_match.group(1).strip()
            if not is_valid_language_name(language_name):
                continue

            validation = score_context(before + after, len(before), language_name, candidate)
            if not validation.is_valid:
                continue

            connections.append(RawConnection(
                text=candidate,
                language=self.classifier.code_from_name(language_name),
                relation_type=self.determine_relationship_type(language_name, before + after, language),
                confidence=validation.confidence * CONFIDENCE["italic_factor"],
                notes=f"Italicized etymology: {validation.notes}",
                origin=f"{language_name} {candidate}",
                definition=f"{language_name} origin of \"{word}\" (from italics)",
                priority=Priority.MEDIUM,
            ))
        return connections

    def _related_listing_language(self, context: str, candidate: str) -> Optional[str]:
        """Language name of ``candidate`` when it sits in a "Lang word, Lang word" listing."""
        preceding = re.compile(rf"({LANGUAGE_NAME})\s+{re.escape(candidate)}")
        for pattern in RELATED_LISTING_PATTERNS:
            for match in pattern.finditer(context):
                if candidate not in match.group(0):
                    continue
                language_match = preceding.search(match.group(0))
                if not language_match:
                    continue
                language_name = language_match.group(1).strip()
                if is_valid_language_name(language_name) and self.classifier.is_known_language_name(language_name):
                    return language_name
        return None

    def extract_hyperlinked(self, section: Tag, text: str, word: str, language: str) -> List[RawConnection]:
        """
        Links to other entries, accepted only in listings or strict etymological prose.

        Links to reconstructed roots (``/word/*...``) are trusted outright once
        their context passes validation.
        """
        connections = []
        root_links = []

        for link in section.find_all("a", href=re.compile(r"^/word/")):
            slug = unquote(link["href"][len("/word/"):]).strip()
            candidate = link.get_text().strip()
            if slug.startswith("*"):
                root_links.append((slug, candidate))
                continue
            if candidate == word or slug == word:
                continue
            if not is_valid_etymological_word(candidate, word):
                continue
            index = text.find(candidate)
            if index == -1:
                continue

            before, after = self._context(text, index, 200)
            full_context = before + after
            listing_language = self._related_listing_language(full_context, candidate)
            is_related = listing_language is not None

            if is_related:
                context_confidence = CONFIDENCE["related_listing_context"]
            else:
                strict = score_strict_context(full_context, len(before))
                if not strict.is_valid:
                    logger.debug(f"Rejected hyperlinked word '{candidate}': {strict.notes}")
                    continue
                context_confidence = strict.confidence

            if is_related:
                detected = DetectedLanguage(listing_language, self.classifier.code_from_name(listing_language))
            else:
                detected = self.language_from_context(before, candidate)

            validation = score_context(full_context, len(before), detected.name, candidate)
            if not (validation.is_valid or is_related):
                logger.debug(f"Rejected hyperlinked word '{candidate}': {validation.notes}")
                continue

            base = CONFIDENCE["related_listing_base"] if is_related else validation.confidence
            confidence = min(base * context_confidence * CONFIDENCE["hyperlink_factor"], CONFIDENCE["ceiling"])
            notes = (
                f"Related word mentioned in etymology of {word}" if is_related
                else f"Contextually validated hyperlink: {validation.notes}"
            )
            connections.append(RawConnection(
                text=candidate,
                language=detected.code,
                relation_type=self.determine_relationship_type(detected.name, full_context, language),
                confidence=confidence,
                notes=notes,
                origin=f"{detected.name} {candidate}",
                definition=f"{detected.name} {'cognate' if is_related else 'etymological ancestor'} of \"{word}\"",
                priority=Priority.HIGH if is_related else Priority.MEDIUM,
            ))
            logger.debug(
                f"Found {'related' if is_related else 'hyperlinked'} word: {detected.name} '{candidate}' "
                f"-> '{word}' (confidence: {confidence:.2f})"
            )

        for slug, root in root_links:
            if root == word or any(c.text == root and c.language == PIE_LANGUAGE_CODE for c in connections):
                continue
            index = text.find(root)
            if index == -1:
                continue
            before, after = self._context(text, index, 100)
            validation = score_context(before + after, len(before), PIE_NAME, root)
            if not validation.is_valid:
                continue
            connections.append(RawConnection(
                text=root,
                language=PIE_LANGUAGE_CODE,
                relation_type=RelationType.ETYMOLOGY.value,
                confidence=CONFIDENCE["root_link"],
                notes=f"Hyperlinked PIE root: {validation.notes}",
                origin=f"{PIE_NAME} {root}",
                shared_root=root,
                definition=f"{PIE_NAME} root of \"{word}\"",
                part_of_speech="root",
                priority=Priority.HIGH,
            ))
            logger.debug(f"Found hyperlinked PIE root: '{root}' -> '{word}'")

        return connections

    def detect_shortenings(self, text: str, word: str) -> List[RawConnection]:
        """Explicit "shortening of X" style statements; independent of the marked-word tiers."""
        connections = []
        seen = set()
        for pattern in SHORTENING_PATTERNS:
            for match in pattern.finditer(text):
                full_word = match.group(1).strip().lower()
                if full_word == word.lower() or full_word in seen:
                    continue
                if not is_valid_etymological_word(full_word, word):
                    continue
                seen.add(full_word)
                connections.append(RawConnection(
                    text=full_word,
                    language="en",
                    relation_type=RelationType.SHORTENED_FROM.value,
                    confidence=CONFIDENCE["shortened_from"],
                    notes=f"\"{word}\" is a shortening of \"{full_word}\"",
                    origin=f"Full form: {full_word}",
                    shared_root=full_word,
                    definition=f"Full form of \"{word}\"",
                    part_of_speech="full_form",
                ))
                logger.debug(f"Detected shortened relationship: '{word}' is shortened from '{full_word}'")
        return connections

    def extract_root_derivatives(self, text: str, root: str) -> List[RawConnection]:
        """Harvest "It forms all or part of: a, b, c" style lists on root pages."""
        derivatives = []
        found: Set[str] = set()
        bare_root = root.replace("*", "")

        for pattern in DERIVATIVE_LIST_PATTERNS:
            for match in pattern.finditer(text):
                for item in re.split(r"[,;]+", match.group(1)):
                    item = re.sub(r"\s*\([^)]*\)\s*", "", item)
                    item = re.sub(r"[\"']", "", item)
                    item = " ".join(item.split()).rstrip(".:")
                    if len(item) < 2 or not DERIVATIVE_WORD.match(item):
                        continue
                    if is_common_word(item) or item == bare_root:
                        continue

                    clean = item.lower()
                    if clean in found:
                        continue
                    found.add(clean)
                    derivatives.append(RawConnection(
                        text=clean,
                        language="en",
                        relation_type=RelationType.PIE_DERIVATIVE.value,
                        confidence=CONFIDENCE["pie_derivative"],
                        notes=f"Derived from PIE root {root}",
                        origin=root,
                        shared_root=root,
                        definition=f"Derivative of PIE root {root}",
                    ))

        logger.debug(f"Extracted {len(derivatives)} derivatives for {root}")
        return derivatives

    def extract_fallback_patterns(self, text: str, word: str, language: str) -> List[RawConnection]:
        """Explicit "from PIE *x" / "from Proto-X *y" statements, gated by context scoring."""
        connections = []
        seen = set()
        for pattern in FALLBACK_PATTERNS:
            for match in pattern.finditer(text):
                if "pie" in match.group(0).lower():
                    language_name, candidate, is_pie = PIE_NAME, match.group(1).strip(), True
                elif match.lastindex and match.lastindex >= 2:
                    language_name, candidate, is_pie = match.group(1).strip(), match.group(2).strip(), False
                else:
                    continue

                if not is_valid_etymological_word(candidate, word):
                    continue
                key = (language_name, candidate)
                if key in seen:
                    continue
                seen.add(key)

                validation = score_context(text, match.start(), language_name, candidate)
                if not validation.is_valid:
                    logger.debug(f"Rejected etymology {language_name}:{candidate}: {validation.notes}")
                    continue

                shared_root = self.extract_shared_root(text, language_name, candidate)
                connections.append(RawConnection(
                    text=candidate,
                    language=self.classifier.code_from_name(language_name),
                    relation_type=self.determine_relationship_type(language_name, text, language),
                    confidence=validation.confidence,
                    notes=f"Fallback pattern extraction: {validation.notes}",
                    origin=shared_root or f"{language_name} {candidate}",
                    shared_root=shared_root,
                    definition=f"{language_name} {'root' if is_pie else 'origin'} of \"{word}\"",
                    priority=Priority.MEDIUM,
                ))
                logger.debug(f"Found fallback etymology: {language_name} '{candidate}' -> '{word}'")
        return connections

    def extract_shared_root(self, text: str, language_name: str, related_word: str) -> Optional[str]:
        """
        Best-effort common ancestral form for a candidate.

        Prefers a reconstructed form within 100 characters of the candidate,
        then PIE-labeled forms, then "from <Language> <word>", then root mentions.
        """
        forms = RECONSTRUCTED_FORM.findall(text)
        if forms:
            word_index = text.find(related_word)
            for form in forms:
                if word_index != -1 and abs(text.find(form) - word_index) < 100:
                    return form
            return forms[0]

        for pattern in PIE_ROOT_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)

        if language_name:
            from_match = re.search(
                rf"from\s+{re.escape(language_name)}\s+([*\wÀ-ɏḀ-ỿ]+)", text, re.I
            )
            if from_match:
                return f"{language_name} {from_match.group(1)}"

        for pattern in ROOT_MENTION_PATTERNS:
            match = pattern.search(text)
            if match:
                root = re.sub(r"\broot\s+", "", match.group(0), flags=re.I)
                root = re.sub(r"\s+root\b", "", root, flags=re.I).strip()
                if root.startswith("*"):
                    return root
        return None

    def _trailing_known_language(self, before: str) -> Optional[str]:
        """Longest known language name ending right before the candidate ("Compare Old English " -> "Old English")."""
        match = TRAILING_LANGUAGE.search(before)
        if not match:
            return None
        words = match.group(1).split()
        for start in range(len(words)):
            name = " ".join(words[start:])
            if self.classifier.is_known_language_name(name):
                return name
        return None

    def language_from_context(self, before: str, candidate: str) -> DetectedLanguage:
        """Language named right before a candidate; English when nothing matches."""
        if candidate.startswith("*"):
            return DetectedLanguage(PIE_NAME, PIE_LANGUAGE_CODE)

        name = self._trailing_known_language(before)
        if name:
            return DetectedLanguage(name, self.classifier.code_from_name(name))

        for pattern in CONTEXT_LANGUAGE_PATTERNS:
            match = pattern.search(before)
            if match and is_valid_language_name(match.group(1).strip()):
                name = match.group(1).strip()
                return DetectedLanguage(name, self.classifier.code_from_name(name))
        return DetectedLanguage("English", "en")

    def determine_relationship_type(self, language_name: str, context: str, source_language: str = "en") -> str:
        """
        Classify a candidate as etymology, borrowing or a family-qualified cognate.

        Proto-languages are etymology; an explicit "from/via <Language>" or an
        unrelated family is a borrowing; anything else is a cognate tagged with
        the deepest family shared with the source language.
        """
        if "Proto-" in language_name:
            return RelationType.ETYMOLOGY.value

        language_lower = language_name.lower()
        context_lower = context.lower()
        if any(f"{marker}{language_lower}" in context_lower for marker in ("from ", "borrowed from ", "via ")):
            return RelationType.BORROWING.value

        code = self.classifier.code_from_name(language_name)
        if not self.classifier.related(source_language, code):
            return RelationType.BORROWING.value
        return cognate_type(self.classifier.shared_family(source_language, code))
