"""
Process-lifetime cross-reference index.

Every etymonline lookup records which ancestral forms the searched word
descends from. Later lookups of other words sharing one of those forms are
enriched with cognate links back to the earlier words. "X shortened from Y"
relationships are also recorded so that a later search for Y gains a
``shortened_to`` link back to X.

The index never expires on its own; ``reset()`` clears it.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from loguru import logger

from etymograph.config import CONFIDENCE
from etymograph.extractors.word_validation import are_semantically_suspicious
from etymograph.models import Priority, RawConnection, RelationType

RECONSTRUCTED_KEY = re.compile(r"\*([a-zA-Z₀-₉ʰₑʷβɟḱĝʷʲʼ-]+)")
PIE_PREFIX = re.compile(r"^(Proto-Indo-European|PIE)\s+", re.I)
LANGUAGE_PREFIX = re.compile(
    r"^(Proto-[A-Za-z-]+|Old [A-Za-z]+|Middle [A-Za-z]+|Ancient [A-Za-z]+|[A-Za-z]+)\s+", re.I
)
TRAILING_PUNCTUATION = re.compile(r"[.,;:!?]+$")

# Keys too short or too common to indicate a real shared ancestry
GENERIC_ROOTS = {"*er", "*ed", "*in", "*on", "*an", "*el", "the", "and", "from"}

MAX_ENRICHMENTS_PER_ROOT = 2


@dataclass
class IndexEntry:
    """
    A searched word recorded under an ancestral form.

    Attributes:
        word: The word that was searched
        language: Language of the searched word
        etymological_form: Text of the connection that produced the entry
        relation_type: Type of that connection
        confidence: Confidence of that connection
        notes: Notes of that connection
        shared_root: Unnormalized shared root or origin
    """
    word: str
    language: str
    etymological_form: str
    relation_type: str
    confidence: float
    notes: Optional[str]
    shared_root: str


@dataclass
class ShortenedForm:
    word: str
    confidence: float
    notes: Optional[str] = None


def normalize_key(etymology: Optional[str]) -> str:
    """
    Reduce an ancestral form description to an index key.

    Reconstructed forms keep their asterisk ("PIE *wed- water" -> "*wed-").
    Otherwise a leading language name is removed and the rest lowercased
    ("Old English wæter." -> "wæter").
    """
    if not etymology:
        return ""

    normalized = etymology.strip()
    match = RECONSTRUCTED_KEY.search(normalized)
    if match:
        return "*" + match.group(1).lower()

    normalized = PIE_PREFIX.sub("", normalized)
    normalized = LANGUAGE_PREFIX.sub("", normalized).strip().lower()
    if normalized.startswith("*"):
        return normalized
    return TRAILING_PUNCTUATION.sub("", normalized)


class CrossReferenceIndex:
    """
    Shared-root index owned by the pipeline.

    Create one per process and inject it; tests construct their own instance.
    """

    def __init__(self):
        self._roots: Dict[str, List[IndexEntry]] = {}
        self._shortened: Dict[str, List[ShortenedForm]] = {}
        self._processed: Set[str] = set()

    def update(self, source_word: str, connections: List[RawConnection], source_language: str = "en") -> None:
        """
        Record the ancestral forms of ``source_word``.

        Args:
            source_word: The searched word
            connections: Connections found for it by the HTML extractor
            source_language: Normalized language of the searched word
        """
        self._processed.add(source_word)

        for connection in connections:
            if not connection.text:
                continue

            if connection.relation_type == RelationType.SHORTENED_FROM.value:
                forms = self._shortened.setdefault(connection.text.lower(), [])
                if not any(form.word == source_word for form in forms):
                    forms.append(ShortenedForm(source_word, connection.confidence, connection.notes))
                    logger.debug(f"Tracked shortened form: {connection.text} -> {source_word}")

            shared_root = connection.shared_root or connection.origin or connection.text
            key = normalize_key(shared_root)
            if not key:
                continue

            entries = self._roots.setdefault(key, [])
            if any(entry.word == source_word for entry in entries):
                continue
            entries.append(IndexEntry(
                word=source_word,
                language=source_language,
                etymological_form=connection.text,
                relation_type=connection.relation_type,
                confidence=connection.confidence,
                notes=connection.notes,
                shared_root=shared_root,
            ))
            logger.debug(f"Indexed '{source_word}' under {key}")

    def is_valid_cross_reference(self, source_word: str, target_word: str, shared_root: str) -> bool:
        if not source_word or not target_word or not shared_root:
            return False
        if source_word.lower() == target_word.lower():
            return False
        if are_semantically_suspicious(source_word, target_word):
            return False

        key = normalize_key(shared_root)
        return len(key) >= 3 and key not in GENERIC_ROOTS

    def enrich(self, source_word: str, connections: List[RawConnection]) -> List[RawConnection]:
        """
        Build extra connections to previously indexed words sharing a root.

        Args:
            source_word: The searched word
            connections: Connections found for it (already recorded via ``update``)

        Returns:
            New connections only; the input list is not modified
        """
        added: List[RawConnection] = []

        for connection in connections:
            shared_root = connection.shared_root or connection.origin
            if not shared_root:
                continue

            related = self._roots.get(normalize_key(shared_root), [])
            if len(related) <= 1:
                continue

            candidates = [
                entry for entry in related
                if entry.word != source_word and not are_semantically_suspicious(entry.word, source_word)
            ]
            top = sorted(
                (entry for entry in candidates if entry.confidence > CONFIDENCE["cross_reference_min"]),
                key=lambda entry: entry.confidence,
                reverse=True
            )[:MAX_ENRICHMENTS_PER_ROOT]

            for entry in top:
                if not self.is_valid_cross_reference(source_word, entry.word, shared_root):
                    logger.debug(f"Rejected cross-reference {source_word} -> {entry.word}")
                    continue
                added.append(RawConnection(
                    text=entry.word,
                    language=entry.language,
                    relation_type=RelationType.COGNATE.value,
                    confidence=min(
                        entry.confidence * CONFIDENCE["cross_reference_factor"],
                        CONFIDENCE["cross_reference_max"]
                    ),
                    notes=f"Shares etymology {shared_root} with {source_word}",
                    origin=shared_root,
                    shared_root=shared_root,
                    definition=f"Related to \"{source_word}\" through shared root \"{shared_root}\"",
                    part_of_speech="cognate",
                ))

        for form in self._shortened.get(source_word.lower(), []):
            if form.confidence <= CONFIDENCE["shortened_to_min"] or are_semantically_suspicious(form.word, source_word):
                continue
            added.append(RawConnection(
                text=form.word,
                language="en",
                relation_type=RelationType.SHORTENED_TO.value,
                confidence=min(form.confidence, CONFIDENCE["shortened_to_max"]),
                notes=f"\"{form.word}\" is a shortened form of \"{source_word}\"",
                origin=f"Shortened form: {form.word}",
                shared_root=source_word,
                definition=f"Shortened form of \"{source_word}\"",
                part_of_speech="shortened_form",
                priority=Priority.HIGH,
            ))

        if added:
            logger.info(f"Cross-references added {len(added)} connections for '{source_word}'")
        return added

    def reset(self) -> None:
        self._roots.clear()
        self._shortened.clear()
        self._processed.clear()
        logger.info("Cross-reference index reset")

    def stats(self) -> Dict:
        return {
            "roots": len(self._roots),
            "entries": sum(len(entries) for entries in self._roots.values()),
            "shortened_forms": sum(len(forms) for forms in self._shortened.values()),
            "processed_words": len(self._processed),
        }
