"""
Language classification for the etymograph project.
"""

from etymograph.language.language_mapping import LanguageClassifier, UNKNOWN_FAMILY, UNDETERMINED

__all__ = [
    'LanguageClassifier',
    'UNKNOWN_FAMILY',
    'UNDETERMINED'
]
