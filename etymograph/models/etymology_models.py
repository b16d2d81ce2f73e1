"""
Data models for etymology connection analysis.

This module contains the core data structures used throughout the connection
pipeline. Extractors emit RawConnection records; the validator turns them into
canonical Connection objects which are grouped under an EtymologyResult.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional


class RelationType(str, Enum):
    """Base relationship types between words.

    Family-qualified cognates are plain strings built with ``cognate_type``.
    """
    COGNATE = "cognate"
    DERIVATIVE = "derivative"
    COMPOUND = "compound"
    BORROWING = "borrowing"
    ANCESTOR = "ancestor"
    ETYMOLOGY = "etymology"
    PIE_DERIVATIVE = "pie_derivative"
    SHORTENED_FROM = "shortened_from"
    SHORTENED_TO = "shortened_to"
    SEMANTIC = "semantic"
    RELATED = "related"


class Priority(str, Enum):
    """Presentation priority attached to a relationship by its source."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def cognate_type(family: Optional[str]) -> str:
    """Build a family-qualified cognate type such as ``cognate_germanic``."""
    if not family:
        return RelationType.COGNATE.value
    return f"{RelationType.COGNATE.value}_{family.replace('-', '_')}"


def is_cognate_type(relation_type: str) -> bool:
    return relation_type == RelationType.COGNATE.value or relation_type.startswith("cognate_")


@dataclass(frozen=True)
class Word:
    """
    A word in a specific language.

    Identity is (text.lower(), language); ``id`` is an opaque surrogate.

    Attributes:
        id: Unique identifier minted by the word registry
        text: Surface form of the word
        language: Normalized language code
        part_of_speech: Part of speech if known
        definition: Short definition or description
        phonetic: Phonetic transcription if known
    """
    id: str
    text: str
    language: str
    part_of_speech: Optional[str] = None
    definition: Optional[str] = None
    phonetic: Optional[str] = None

    @property
    def key(self) -> tuple:
        return (self.text.lower(), self.language)

    def to_dict(self) -> Dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class Relationship:
    """
    Relationship (edge) between the searched word and a related word.

    Attributes:
        type: Relationship type (see RelationType, or cognate_<family>)
        confidence: Confidence in the relationship (0-1)
        source: Name of the data source that produced it
        priority: Presentation priority
        notes: Human-readable explanation
        origin: Origin phrase the relationship was derived from
        shared_root: Common ancestral form; unset rather than blank
    """
    type: str
    confidence: float
    source: str
    priority: Priority = Priority.MEDIUM
    notes: Optional[str] = None
    origin: Optional[str] = None
    shared_root: Optional[str] = None

    def __post_init__(self):
        if self.shared_root is not None and not self.shared_root.strip():
            self.shared_root = None

    def to_dict(self) -> Dict:
        data = {
            "type": self.type,
            "confidence": round(self.confidence, 4),
            "source": self.source,
            "priority": Priority(self.priority).value,
        }
        for name in ("notes", "origin", "shared_root"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass
class Connection:
    """A target word and its relationship to the (implicit) searched word."""
    word: Word
    relationship: Relationship

    def to_dict(self) -> Dict:
        return {"word": self.word.to_dict(), "relationship": self.relationship.to_dict()}


@dataclass
class RawConnection:
    """
    Un-normalized connection as produced by a single extractor.

    Attributes:
        text: Surface form of the related word
        language: Language code or name as guessed by the extractor
        relation_type: Relationship type guessed by the extractor
        confidence: Extractor confidence (0-1)
        notes: Explanation of how the connection was found
        origin: Origin phrase, if any
        shared_root: Shared ancestral form, if any
        definition: Description of the related word
        part_of_speech: Part of speech of the related word
        priority: Extractor-assigned priority, overridden by source tagging
        source: Source name, filled in by the pipeline
    """
    text: str
    language: str
    relation_type: str
    confidence: float
    notes: Optional[str] = None
    origin: Optional[str] = None
    shared_root: Optional[str] = None
    definition: Optional[str] = None
    part_of_speech: Optional[str] = None
    priority: Optional[Priority] = None
    source: Optional[str] = None


@dataclass
class EtymologyResult:
    """
    Complete, ranked result for one (word, language) lookup.

    Attributes:
        source_word: The searched word
        connections: Ranked connections, most trustworthy first
    """
    source_word: Word
    connections: List[Connection] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "source_word": self.source_word.to_dict(),
            "connections": [c.to_dict() for c in self.connections],
        }


@dataclass
class GraphNode:
    id: str
    word: Word
    is_source: bool = False
    expanded: bool = False

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "word": self.word.to_dict(),
            "is_source": self.is_source,
            "expanded": self.expanded,
        }


@dataclass
class GraphEdge:
    id: str
    source: str
    target: str
    relationship: Relationship

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "relationship": self.relationship.to_dict(),
        }


@dataclass
class GraphResponse:
    """
    Graph-shaped view of a selection of connections around one word.

    Attributes:
        source_node: Node for the searched word
        neighbors: Nodes for the selected related words
        edges: Edges from the source node to each neighbor
        total_available: Size of the ranked pool before selection
        total_selected: Number of neighbors returned
        duplicates_filtered: Pool entries not shown
    """
    source_node: GraphNode
    neighbors: List[GraphNode]
    edges: List[GraphEdge]
    total_available: int
    total_selected: int
    duplicates_filtered: int

    def to_dict(self) -> Dict:
        return {
            "source_node": self.source_node.to_dict(),
            "neighbors": [n.to_dict() for n in self.neighbors],
            "edges": [e.to_dict() for e in self.edges],
            "total_available": self.total_available,
            "total_selected": self.total_selected,
            "duplicates_filtered": self.duplicates_filtered,
        }
