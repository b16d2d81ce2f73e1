"""
Deduplication and ranking of validated connections.

Connections are grouped by (text, language). Within a group the winner is the
connection with the best priority score (source weight plus type weight),
ties going to the higher confidence. The surviving list is ordered by
(priority score, confidence), descending, so taking the first N always yields
the most trustworthy connections.
"""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from etymograph.config import SOURCE_PRIORITY, TYPE_PRIORITY
from etymograph.models import Connection, RelationType, Word, is_cognate_type


def priority_score(source: Optional[str], relation_type: Optional[str]) -> int:
    """
    Source weight plus relationship-type weight.

    Family-qualified cognate types (``cognate_germanic``) weigh as cognates.
    Unknown sources and types weigh zero.
    """
    if relation_type and is_cognate_type(relation_type):
        relation_type = RelationType.COGNATE.value
    return SOURCE_PRIORITY.get(source or "", 0) + TYPE_PRIORITY.get(relation_type or "", 0)


def ranking_key(connection: Connection) -> Tuple[int, float]:
    relationship = connection.relationship
    return (priority_score(relationship.source, relationship.type), relationship.confidence)


def deduplicate_and_rank(connections: List[Connection], source_word: Optional[Word] = None) -> List[Connection]:
    """
    Keep one connection per target word and sort the survivors.

    Args:
        connections: Validated connections, possibly with duplicates
        source_word: When given, connections pointing back at it are dropped

    Returns:
        Ranked connections, best first
    """
    best: Dict[tuple, Connection] = {}

    for connection in connections:
        key = connection.word.key
        if source_word is not None and key == source_word.key:
            continue

        existing = best.get(key)
        if existing is None or ranking_key(connection) > ranking_key(existing):
            best[key] = connection

    ranked = sorted(best.values(), key=ranking_key, reverse=True)
    logger.debug(f"Ranked {len(ranked)} unique connections from {len(connections)} candidates")
    return ranked
