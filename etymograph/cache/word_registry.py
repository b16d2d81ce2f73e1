"""
Bidirectional registry between opaque word ids and (text, language) pairs.

Every id handed out by the pipeline is minted here, so an id can always be
resolved back to the word it names without parsing the id itself. Parsing ids
is only available as an opt-in compatibility path for ids minted by older
deployments.
"""

import re
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from loguru import logger

from etymograph.config import WORD_REGISTRY_CONFIG

# Legacy id shapes, most specific first
_LEGACY_WORD_LANGUAGE = re.compile(r"^word_(.+)_([a-z]{2,3}(?:-[a-z]{2,4})?)$")
_LEGACY_NUMBERED = re.compile(r"^w[_\d]+_(.+)$")
_LEGACY_LANGUAGE_WORD = re.compile(r"^([a-z]{2,3}(?:-[a-z]{2,4})?)_(.+)$")


@dataclass(frozen=True)
class RegisteredWord:
    """A (text, language) pair known to the registry."""
    text: str
    language: str


def guess_from_id(word_id: str) -> Optional[RegisteredWord]:
    """
    Recover a word from a legacy readable id.

    Recognized shapes are ``word_<text>_<language>``, ``w<digits>_<text>``
    (language assumed English) and ``<language>_<text>``. Random ids carry no
    information and yield None.
    """
    match = _LEGACY_WORD_LANGUAGE.match(word_id)
    if match:
        return RegisteredWord(match.group(1), match.group(2))

    match = _LEGACY_NUMBERED.match(word_id)
    if match and match.group(1) != "unknown":
        return RegisteredWord(match.group(1), "en")

    match = _LEGACY_LANGUAGE_WORD.match(word_id)
    if match:
        return RegisteredWord(match.group(2), match.group(1))

    return None


class WordRegistry:
    """
    Arena of minted word ids plus a reverse (text, language) lookup.

    Both directions are written together whenever an id is minted or cached,
    so they never disagree.
    """

    def __init__(self, id_prefix: Optional[str] = None, allow_guess_fallback: Optional[bool] = None):
        self.id_prefix = id_prefix or WORD_REGISTRY_CONFIG["id_prefix"]
        if allow_guess_fallback is None:
            allow_guess_fallback = WORD_REGISTRY_CONFIG["allow_guess_fallback"]
        self.allow_guess_fallback = allow_guess_fallback

        self._words: Dict[str, RegisteredWord] = {}
        self._ids: Dict[Tuple[str, str], str] = {}

    @staticmethod
    def _reverse_key(text: str, language: str) -> Tuple[str, str]:
        return (text.lower(), language.lower())

    def mint(self, text: str, language: str) -> str:
        """
        Return the id for (text, language), creating one if needed.

        Args:
            text: Surface form of the word
            language: Normalized language code

        Returns:
            Stable id for the pair for the lifetime of the registry
        """
        existing = self._ids.get(self._reverse_key(text, language))
        if existing:
            return existing

        word_id = f"{self.id_prefix}{uuid.uuid4().hex}"
        self.cache_word_for_id(word_id, text, language)
        return word_id

    def cache_word_for_id(self, word_id: str, text: str, language: str) -> None:
        """Record an id minted elsewhere, keeping both lookup directions in sync."""
        self._words[word_id] = RegisteredWord(text, language)
        self._ids[self._reverse_key(text, language)] = word_id

    def id_for(self, text: str, language: str) -> Optional[str]:
        return self._ids.get(self._reverse_key(text, language))

    def resolve_id(self, word_id: str) -> Optional[RegisteredWord]:
        """
        Resolve an id back to its word.

        Args:
            word_id: Id previously minted or cached

        Returns:
            The registered word, or None if the id is unknown. When the guess
            fallback is enabled, a legacy readable id may be parsed instead.
        """
        registered = self._words.get(word_id)
        if registered is not None:
            return registered

        if not self.allow_guess_fallback:
            logger.debug(f"Word id not registered: {word_id}")
            return None

        guessed = guess_from_id(word_id)
        if guessed is None:
            logger.warning(f"Word id not registered and not guessable: {word_id}")
            return None

        logger.warning(f"Guessed word '{guessed.text}' ({guessed.language}) from unregistered id {word_id}")
        return guessed

    def reset(self) -> None:
        self._words.clear()
        self._ids.clear()

    def stats(self) -> Dict:
        return {
            "total_words": len(self._words),
            "reverse_entries": len(self._ids),
            "languages": sorted({word.language for word in self._words.values()}),
        }

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word_id: str) -> bool:
        return word_id in self._words
