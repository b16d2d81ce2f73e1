"""
Data models for the etymograph project.
"""

from etymograph.models.etymology_models import (
    Connection,
    EtymologyResult,
    GraphEdge,
    GraphNode,
    GraphResponse,
    Priority,
    RawConnection,
    RelationType,
    Relationship,
    Word,
    cognate_type,
    is_cognate_type
)

__all__ = [
    'Connection',
    'EtymologyResult',
    'GraphEdge',
    'GraphNode',
    'GraphResponse',
    'Priority',
    'RawConnection',
    'RelationType',
    'Relationship',
    'Word',
    'cognate_type',
    'is_cognate_type'
]
