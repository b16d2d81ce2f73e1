"""
Research Agent for etymological connection discovery.

This module implements the ResearchAgent class, the single entry point of the
connection pipeline. For one word it:
1. Fetches Wiktionary markup, a dictionary entry and the etymonline page concurrently
2. Extracts raw connections from each payload and tags them with their source
3. Adds cognates from the pattern matcher and cross-references from earlier lookups
4. Normalizes, filters, deduplicates and ranks the combined pool
"""

import asyncio
from typing import Any, Callable, List, Optional, Tuple

from loguru import logger

from etymograph.agents.cognate_agent import CognateAgent
from etymograph.agents.data_sources import (
    DictionaryAPISource,
    EtymologyDataSource,
    EtymonlineSource,
    WiktionarySource
)
from etymograph.analysis.ranking import deduplicate_and_rank
from etymograph.analysis.validator import ConnectionValidator
from etymograph.cache.cross_reference import CrossReferenceIndex
from etymograph.cache.etymology_cache import EtymologyCache
from etymograph.cache.word_registry import WordRegistry
from etymograph.config import CACHE_CONFIG, CONFIDENCE, SCRAPING_CONFIG
from etymograph.extractors import (
    DictionaryEntry,
    DictionaryExtractor,
    EtymonlineExtractor,
    WikiExtraction,
    WiktionaryExtractor
)
from etymograph.language import LanguageClassifier
from etymograph.models import EtymologyResult, Priority, RawConnection, Word, cognate_type

ETYMONLINE = "etymonline.com"
WIKTIONARY = "wiktionary"
DICTIONARY = "dictionary-api"
COGNATE_DB = "cognate-db"


class ResearchAgent:
    """
    Agent responsible for gathering and ranking etymological connections.

    Every collaborator can be injected; defaults talk to the real remote
    sources and keep their own caches and indexes.
    """

    def __init__(
        self,
        wiktionary: Optional[EtymologyDataSource] = None,
        dictionary: Optional[EtymologyDataSource] = None,
        etymonline: Optional[EtymologyDataSource] = None,
        cognate_agent: Optional[CognateAgent] = None,
        cache: Optional[EtymologyCache] = None,
        cross_reference: Optional[CrossReferenceIndex] = None,
        registry: Optional[WordRegistry] = None,
        classifier: Optional[LanguageClassifier] = None,
        fetch_timeout: Optional[float] = None
    ):
        """
        Initialize the research agent.

        Args:
            wiktionary: Source of raw wikitext
            dictionary: Source of dictionary API entry objects
            etymonline: Source of raw etymonline HTML
            cognate_agent: Cognate pattern matcher
            cache: Result cache keyed by (language, word)
            cross_reference: Shared-root index fed by etymonline results
            registry: Word-id registry
            classifier: Language classifier shared by all components
            fetch_timeout: Per-fetch timeout in seconds
        """
        self.classifier = classifier or LanguageClassifier()
        self.registry = registry or WordRegistry()

        self.wiktionary = wiktionary or WiktionarySource()
        self.dictionary = dictionary or DictionaryAPISource()
        self.etymonline = etymonline or EtymonlineSource()

        self.cognate_agent = cognate_agent or CognateAgent(self.classifier)
        self.cache = cache or EtymologyCache(
            "result",
            default_ttl=CACHE_CONFIG["result_ttl"],
            max_size=CACHE_CONFIG["result_max_size"]
        )
        self.cross_reference = cross_reference or CrossReferenceIndex()
        self.fetch_timeout = fetch_timeout or SCRAPING_CONFIG["timeout"]

        self.wiki_extractor = WiktionaryExtractor(self.classifier)
        self.html_extractor = EtymonlineExtractor(self.classifier)
        self.dictionary_extractor = DictionaryExtractor(self.classifier)
        self.validator = ConnectionValidator(self.classifier, self.registry)

        logger.info("ResearchAgent initialized")

    async def find_etymological_connections(
        self,
        word: str,
        language: str = "en",
        bypass_cache: bool = False
    ) -> EtymologyResult:
        """
        Find, validate and rank the etymological connections of a word.

        Args:
            word: Word to research
            language: Language code or name of the word
            bypass_cache: Recompute even when a cached result exists

        Returns:
            EtymologyResult, possibly with no connections

        Raises:
            ValueError: If the word is empty or whitespace
        """
        word = (word or "").strip()
        if not word:
            raise ValueError("Word cannot be empty")

        language = self.classifier.normalize(language or "en")
        cache_key = (language, word.lower())

        if not bypass_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info(f"Found cached connections for '{word}' ({language})")
                return cached

        logger.info(f"Researching etymological connections for '{word}' ({language})")
        wikitext, payload, html = await self._fetch_all(word, language)

        wiki = self._safe_extract(
            WIKTIONARY, lambda: self.wiki_extractor.extract(wikitext, word, language), WikiExtraction()
        )
        entry = self._safe_extract(DICTIONARY, lambda: DictionaryEntry.from_payload(payload, word), None)
        if payload is not None and entry is None:
            logger.warning(f"Ignoring malformed dictionary payload for '{word}'")
        source_word = self.build_source_word(word, language, wiki, entry)

        raws: List[RawConnection] = []
        raws += self._etymonline_connections(html, source_word)
        raws += self._tag(wiki.connections, WIKTIONARY, Priority.MEDIUM)
        raws += self._tag(
            self._safe_extract(DICTIONARY, lambda: self.dictionary_extractor.extract(entry, word), []),
            DICTIONARY,
            Priority.LOW
        )
        raws += self._safe_extract(COGNATE_DB, lambda: self._cognate_connections(source_word), [])

        connections = deduplicate_and_rank(self.validator.validate(source_word, raws), source_word)
        result = EtymologyResult(source_word=source_word, connections=connections)

        self.cache.set(cache_key, result)
        logger.info(f"Found {len(connections)} connections for '{word}' from {len(raws)} candidates")
        return result

    async def _fetch(self, source: EtymologyDataSource, word: str, language: str) -> Optional[Any]:
        async with asyncio.timeout(self.fetch_timeout):
            return await source.fetch(word, language)

    async def _fetch_all(self, word: str, language: str) -> Tuple[Optional[str], Optional[Any], Optional[str]]:
        """Run the three fetchers concurrently; failures become None."""
        sources = (self.wiktionary, self.dictionary, self.etymonline)
        results = await asyncio.gather(
            *(self._fetch(source, word, language) for source in sources),
            return_exceptions=True
        )

        payloads = []
        for source, result in zip(sources, results):
            if isinstance(result, asyncio.TimeoutError):
                logger.warning(f"{source.source_name} lookup timed out for '{word}'")
                payloads.append(None)
            elif isinstance(result, Exception):
                logger.error(f"{source.source_name} lookup failed for '{word}': {str(result)}")
                payloads.append(None)
            else:
                payloads.append(result)

        return payloads[0], payloads[1], payloads[2]

    @staticmethod
    def _safe_extract(name: str, extract: Callable[[], Any], default: Any) -> Any:
        try:
            return extract()
        except Exception as e:
            logger.error(f"{name} extraction failed: {str(e)}")
            return default

    def build_source_word(
        self,
        word: str,
        language: str,
        wiki: WikiExtraction,
        entry: Optional[DictionaryEntry]
    ) -> Word:
        """Assemble the searched word; dictionary data wins over wiki markup."""
        definition = wiki.definition
        part_of_speech = wiki.part_of_speech
        phonetic = None

        if entry is not None:
            definition = entry.primary_definition() or definition
            part_of_speech = entry.primary_part_of_speech() or part_of_speech
            phonetic = entry.primary_phonetic()

        return Word(
            id=self.registry.mint(word, language),
            text=word,
            language=language,
            part_of_speech=part_of_speech or "unknown",
            definition=definition or f"Definition for \"{word}\" not available",
            phonetic=phonetic,
        )

    @staticmethod
    def _tag(raws: List[RawConnection], source: str, priority: Priority) -> List[RawConnection]:
        for raw in raws:
            raw.source = source
            raw.priority = priority
        return raws

    def _etymonline_connections(self, html: Optional[str], source_word: Word) -> List[RawConnection]:
        """HTML extraction plus cross-references, boosted as the most trusted source."""
        if not html:
            return []

        raws = self._safe_extract(
            ETYMONLINE,
            lambda: self.html_extractor.extract(html, source_word.text, source_word.language),
            []
        )
        self.cross_reference.update(source_word.text, raws, source_word.language)
        raws = raws + self.cross_reference.enrich(source_word.text, raws)

        for raw in raws:
            raw.confidence = min(raw.confidence + CONFIDENCE["etymonline_boost"], CONFIDENCE["ceiling"])
        return self._tag(raws, ETYMONLINE, Priority.HIGH)

    def _cognate_connections(self, source_word: Word) -> List[RawConnection]:
        """Admit only curated, plausible cognates from the pattern matcher."""
        raws = []
        for candidate in self.cognate_agent.find_cognates(source_word.text, source_word.language):
            if candidate.confidence < CONFIDENCE["cognate_admission"]:
                continue
            if not candidate.semantic_field or not candidate.concept:
                continue
            if not self.validator.is_valid_cognate_candidate(
                source_word.text, candidate.word, source_word.language, candidate.language
            ):
                logger.debug(f"Cognate candidate {candidate.word} ({candidate.language}) not admitted")
                continue

            family = self.classifier.shared_family(source_word.language, candidate.language)
            raws.append(RawConnection(
                text=candidate.word,
                language=candidate.language,
                relation_type=cognate_type(family),
                confidence=candidate.confidence,
                notes=candidate.notes,
                origin=f"{candidate.concept} ({candidate.semantic_field})",
                shared_root=candidate.concept,
                definition=f"{self.classifier.display_name(candidate.language)} cognate of \"{source_word.text}\"",
                part_of_speech="unknown",
            ))

        if raws:
            logger.info(f"Adding {len(raws)} validated cognates for '{source_word.text}'")
        return self._tag(raws, COGNATE_DB, Priority.MEDIUM)

    def stats(self) -> dict:
        return {
            "result_cache": self.cache.stats(),
            "cross_reference": self.cross_reference.stats(),
            "registry": self.registry.stats(),
        }

    def clear_caches(self) -> None:
        self.cache.flush_all()
        self.cognate_agent.clear_cache()
        self.cross_reference.reset()
