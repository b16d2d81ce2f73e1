"""
Shared in-process state: TTL caches, the cross-reference index and the word-id registry.
"""

from etymograph.cache.etymology_cache import EtymologyCache
from etymograph.cache.cross_reference import CrossReferenceIndex, normalize_key
from etymograph.cache.word_registry import RegisteredWord, WordRegistry, guess_from_id

__all__ = [
    'EtymologyCache',
    'CrossReferenceIndex',
    'normalize_key',
    'RegisteredWord',
    'WordRegistry',
    'guess_from_id'
]
