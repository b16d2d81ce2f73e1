"""
Connection normalization and plausibility filtering.

Raw connections from every extractor pass through ``ConnectionValidator``,
which turns them into canonical Connection objects (normalized language,
minted word id, inferred shared root) and drops the ones that fail the
plausibility checks. Rejections are routine and only logged at debug level.
"""

import re
from typing import Iterable, List, Optional

from loguru import logger

from etymograph.analysis.derivatives import is_trivial_derivative
from etymograph.cache.word_registry import WordRegistry
from etymograph.config import CONFIDENCE, PIE_LANGUAGE_CODE
from etymograph.extractors.word_validation import are_semantically_suspicious
from etymograph.language import LanguageClassifier
from etymograph.models import Connection, Priority, RawConnection, Relationship, RelationType, Word, is_cognate_type

SHARED_ROOT_PATTERNS = [
    re.compile(r"(?:from|borrowed from|via)\s+([A-Z][A-Za-z\s-]+?\s+[*\w-]+)", re.I),
    re.compile(r"(?:cognate with|related to)\s+([A-Z][A-Za-z\s-]+?\s+[*\w-]+)", re.I),
    re.compile(r"(Proto-[A-Za-z-]+\s+\*[\w-]+)", re.I),
    re.compile(r"(PIE\s+\*[\w-]+)", re.I),
    re.compile(r"(\*[\w-]+)"),
    re.compile(r"(Old\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?\s+\w+)"),
    re.compile(r"(Latin\s+\w+)"),
    re.compile(r"(Greek\s+\w+)"),
    re.compile(r"(Sanskrit\s+\w+)"),
    re.compile(r"(Germanic\s+\*?[\w-]+)", re.I),
]

SUSPICIOUS_OVERLAP = 0.2
SUSPICIOUS_LENGTH_GAP = 3
COGNATE_MIN_OVERLAP = 0.25
COGNATE_MAX_LENGTH_GAP = 4


def character_overlap(word_a: str, word_b: str) -> float:
    """Share of distinct characters of ``word_a`` found in ``word_b``, over the longer length."""
    longest = max(len(word_a), len(word_b))
    if longest == 0:
        return 0.0
    return len({char for char in word_a if char in word_b}) / longest


def is_reconstructed_target(text: str, language: str) -> bool:
    return text.startswith("*") or language == PIE_LANGUAGE_CODE or "pro" in language


class ConnectionValidator:
    """
    Normalizes raw connections and applies the plausibility filter.

    Args:
        classifier: Language classifier used for normalization and family checks
        registry: Word-id registry used to mint target ids
    """

    def __init__(self, classifier: Optional[LanguageClassifier] = None, registry: Optional[WordRegistry] = None):
        self.classifier = classifier or LanguageClassifier()
        self.registry = registry or WordRegistry()

    def normalize(self, source_word: Word, raw: RawConnection) -> Optional[Connection]:
        """
        Build a canonical Connection from a raw one.

        The target language is normalized, and forced to the PIE code for
        ``*``-forms. Missing type and confidence get defaults, the shared root
        is inferred when absent and always mentioned in the notes.

        Returns:
            The Connection, or None when the target text is blank
        """
        text = (raw.text or "").strip()
        if not text:
            return None

        language = self.classifier.normalize_for_word(text, raw.language or source_word.language)
        relation_type = raw.relation_type or RelationType.RELATED.value
        confidence = raw.confidence if isinstance(raw.confidence, (int, float)) else CONFIDENCE["default_confidence"]

        shared_root = self.infer_shared_root(source_word, text, language, relation_type, raw)
        relationship = Relationship(
            type=relation_type,
            confidence=max(0.0, min(1.0, float(confidence))),
            source=raw.source or "unknown",
            priority=raw.priority or Priority.MEDIUM,
            notes=self.ensure_root_in_notes(raw.notes, shared_root),
            origin=raw.origin or shared_root,
            shared_root=shared_root,
        )
        word = Word(
            id=self.registry.mint(text, language),
            text=text,
            language=language,
            part_of_speech=raw.part_of_speech or "unknown",
            definition=raw.definition or f"Related to \"{source_word.text}\"",
        )
        return Connection(word=word, relationship=relationship)

    @staticmethod
    def extract_shared_root(*texts: Optional[str]) -> Optional[str]:
        """First ancestral-form phrase found in the given texts, tried in order."""
        for text in texts:
            if not isinstance(text, str) or not text.strip():
                continue
            for pattern in SHARED_ROOT_PATTERNS:
                match = pattern.search(text)
                if not match:
                    continue
                value = re.sub(r"^[^A-Za-z*]+", "", match.group(1).strip())
                value = re.sub(r"[.,;:]+$", "", value)
                if value:
                    return value
        return None

    def infer_shared_root(
        self,
        source_word: Word,
        target_text: str,
        target_language: str,
        relation_type: str,
        raw: RawConnection
    ) -> str:
        """
        Shared root of a connection.

        Explicit fields and notes are scanned first; otherwise the source text
        for derivatives and compounds, the target itself for reconstructed
        forms, and "<Language> <word>" for cross-language cognates.
        """
        extracted = self.extract_shared_root(
            raw.shared_root,
            raw.origin,
            raw.notes,
            f"{source_word.text} {target_text}",
        )
        if extracted:
            return extracted
        if raw.shared_root and raw.shared_root.strip():
            return raw.shared_root.strip()

        if relation_type in (RelationType.DERIVATIVE.value, RelationType.COMPOUND.value):
            return source_word.text
        if target_text.startswith("*"):
            return target_text
        if is_cognate_type(relation_type) and target_language != source_word.language:
            return f"{self.classifier.display_name(target_language)} {target_text}"
        return target_text

    @staticmethod
    def ensure_root_in_notes(notes: Optional[str], shared_root: Optional[str]) -> Optional[str]:
        if not shared_root or not shared_root.strip():
            return notes or None

        root = shared_root.strip()
        if notes and root.lower() in notes.lower():
            return notes
        if not notes:
            return f"Shared etymological element: {root}"
        return f"{notes} (shared root: {root})"

    def is_suspicious_cognate(self, word_a: str, word_b: str, language_a: str, language_b: str) -> bool:
        """Cross-family pair with almost no shared letters and very different lengths."""
        if language_a == language_b or self.classifier.related(language_a, language_b):
            return False
        clean_a = re.sub(r"[^a-z]", "", word_a.lower())
        clean_b = re.sub(r"[^a-z]", "", word_b.lower())
        return (
            character_overlap(clean_a, clean_b) < SUSPICIOUS_OVERLAP
            and abs(len(clean_a) - len(clean_b)) > SUSPICIOUS_LENGTH_GAP
        )

    def rejection_reason(self, connection: Connection, source_word: Word) -> Optional[str]:
        """
        Why a normalized connection fails the plausibility filter.

        Returns:
            A short reason, or None when the connection is acceptable
        """
        target = connection.word
        relationship = connection.relationship

        floor = CONFIDENCE["floor_reconstructed"] if target.text.startswith("*") else CONFIDENCE["floor_default"]
        if relationship.confidence < floor:
            return f"confidence {relationship.confidence:.2f} below {floor}"

        if is_reconstructed_target(target.text, target.language):
            return None

        if are_semantically_suspicious(source_word.text, target.text):
            return "semantically unrelated"

        if not self.classifier.compatible(source_word.language, target.language, relationship.type):
            return f"incompatible languages {source_word.language}/{target.language}"

        if self.is_suspicious_cognate(source_word.text, target.text, source_word.language, target.language):
            return "suspicious cognate"

        return None

    def is_valid(self, connection: Connection, source_word: Word) -> bool:
        return self.rejection_reason(connection, source_word) is None

    def is_valid_cognate_candidate(
        self,
        source_text: str,
        cognate_text: str,
        source_language: str,
        cognate_language: str
    ) -> bool:
        """Admission check for matcher cognates: cross-language, similar length and letters, related families."""
        if not source_text or not cognate_text or not source_language or not cognate_language:
            return False
        if source_language == cognate_language:
            return False

        source_lower = source_text.lower()
        cognate_lower = cognate_text.lower()
        if abs(len(source_lower) - len(cognate_lower)) > COGNATE_MAX_LENGTH_GAP:
            return False
        if character_overlap(source_lower, cognate_lower) < COGNATE_MIN_OVERLAP:
            return False
        return self.classifier.compatible(source_language, cognate_language, RelationType.COGNATE.value)

    def validate(self, source_word: Word, raws: Iterable[RawConnection]) -> List[Connection]:
        """
        Normalize and filter a raw connection pool.

        Args:
            source_word: The searched word
            raws: Raw connections from every source

        Returns:
            Accepted connections in input order (not yet deduplicated)
        """
        accepted = []
        for raw in raws:
            connection = self.normalize(source_word, raw)
            if connection is None:
                continue

            target = connection.word
            if target.key == source_word.key:
                logger.debug(f"Dropped self-reference {target.text} ({target.language})")
                continue

            if is_trivial_derivative(source_word.text, target.text, source_word.language, target.language, self.classifier):
                logger.debug(f"Dropped trivial derivative {target.text} ({target.language}) of {source_word.text}")
                continue

            reason = self.rejection_reason(connection, source_word)
            if reason:
                logger.debug(f"Rejected {target.text} ({target.language}): {reason}")
                continue

            accepted.append(connection)

        logger.debug(f"Validator accepted {len(accepted)} connections for '{source_word.text}'")
        return accepted
