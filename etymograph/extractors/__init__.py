"""
Extractors that turn raw source payloads into raw connections.
"""

from etymograph.extractors.dictionary_extractor import DictionaryEntry, DictionaryExtractor
from etymograph.extractors.etymonline_extractor import EtymonlineExtractor
from etymograph.extractors.wiktionary_extractor import WikiExtraction, WiktionaryExtractor

__all__ = [
    'DictionaryEntry',
    'DictionaryExtractor',
    'EtymonlineExtractor',
    'WikiExtraction',
    'WiktionaryExtractor',
]
