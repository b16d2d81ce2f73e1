"""
Connection analysis: derivative filtering, validation, ranking and selection.
"""

from etymograph.analysis.derivatives import is_trivial_derivative
from etymograph.analysis.validator import ConnectionValidator
from etymograph.analysis.ranking import deduplicate_and_rank, priority_score
from etymograph.analysis.selection import select_connections

__all__ = [
    'is_trivial_derivative',
    'ConnectionValidator',
    'deduplicate_and_rank',
    'priority_score',
    'select_connections'
]
