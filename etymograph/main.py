"""
Graph-shaped access to the connection pipeline.

``EtymologyPipeline`` turns ranked EtymologyResult objects into node/edge
responses for a graph UI: an initial neighborhood for a searched word, and
further neighborhoods when a node is expanded. Initial neighborhoods are kept
in a short-lived selector cache; expansions are always recomputed.
"""

import random
from typing import Dict, Iterable, List, Optional

from loguru import logger

from etymograph.agents.research_agent import ResearchAgent
from etymograph.analysis.selection import is_root_connection, select_connections
from etymograph.cache.etymology_cache import EtymologyCache
from etymograph.config import CACHE_CONFIG, SELECTOR_CONFIG
from etymograph.models import Connection, EtymologyResult, GraphEdge, GraphNode, GraphResponse, Word


class EtymologyPipeline:
    """
    Main coordinator for graph lookups.

    Owns a ResearchAgent (and through it the result cache, cross-reference
    index and word registry) plus the selector cache.
    """

    def __init__(
        self,
        research_agent: Optional[ResearchAgent] = None,
        selector_cache: Optional[EtymologyCache] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the pipeline.

        Args:
            research_agent: Connection pipeline; a default one uses the real sources
            selector_cache: Cache for initial graph responses
            rng: Random source for connection selection
        """
        self.research_agent = research_agent or ResearchAgent()
        self.registry = self.research_agent.registry
        self.selector_cache = selector_cache or EtymologyCache(
            "selector",
            default_ttl=CACHE_CONFIG["selector_ttl"],
            max_size=CACHE_CONFIG["selector_max_size"]
        )
        self.rng = rng

        logger.info("Etymology pipeline initialized")

    async def initial_graph(
        self,
        word: str,
        language: str = "en",
        max_nodes: Optional[int] = None,
        bypass_cache: bool = False
    ) -> GraphResponse:
        """
        Build the first neighborhood around a searched word.

        Args:
            word: Word to search
            language: Language code or name
            max_nodes: Maximum number of neighbors
            bypass_cache: Recompute instead of reading the selector and result caches

        Returns:
            GraphResponse for the word and a selection of its connections

        Raises:
            ValueError: If the word is empty
        """
        word = (word or "").strip()
        if not word:
            raise ValueError("Word cannot be empty")
        if max_nodes is None:
            max_nodes = SELECTOR_CONFIG["default_initial_nodes"]

        language = self.research_agent.classifier.normalize(language or "en")
        cache_key = f"initial_{word.lower()}_{language}_{max_nodes}"
        cached = None if bypass_cache else self.selector_cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for initial graph: {word}")
            return cached

        logger.info(f"Building initial graph for '{word}' ({language}) with {max_nodes} max nodes")
        result = await self.research_agent.find_etymological_connections(word, language, bypass_cache)
        selected = select_connections(result.connections, max_nodes, True, self.rng)

        root_count = sum(1 for connection in selected if is_root_connection(connection))
        logger.info(
            f"Initial graph: selected {len(selected)} of {len(result.connections)} connections "
            f"({root_count} reconstructed roots)"
        )

        response = self._build_response(result.source_word, result.source_word.id, selected, len(result.connections))
        self.selector_cache.set(cache_key, response)
        return response

    async def expand(
        self,
        word_id: str,
        max_nodes: Optional[int] = None,
        exclude_ids: Iterable[str] = ()
    ) -> GraphResponse:
        """
        Build a fresh neighborhood around an existing node.

        Args:
            word_id: Id of the node being expanded
            max_nodes: Maximum number of neighbors
            exclude_ids: Ids already shown that must not be returned again

        Returns:
            GraphResponse centered on ``word_id``

        Raises:
            KeyError: If the id cannot be resolved
        """
        registered = self.registry.resolve_id(word_id)
        if registered is None:
            raise KeyError(word_id)
        if max_nodes is None:
            max_nodes = SELECTOR_CONFIG["default_expand_nodes"]

        logger.info(f"Expanding {word_id} ('{registered.text}', {registered.language})")
        result = await self.research_agent.find_etymological_connections(
            registered.text, registered.language, bypass_cache=True
        )

        excluded = set(exclude_ids) | {word_id}
        pool = [connection for connection in result.connections if connection.word.id not in excluded]
        selected = select_connections(pool, max_nodes, True, self.rng)

        response = self._build_response(result.source_word, word_id, selected, len(result.connections))
        response.source_node.expanded = True
        return response

    async def word_details(self, word: str, language: str = "en") -> EtymologyResult:
        return await self.research_agent.find_etymological_connections(word, language)

    def _build_response(
        self,
        source_word: Word,
        source_id: str,
        selected: List[Connection],
        total_available: int
    ) -> GraphResponse:
        self.registry.cache_word_for_id(source_id, source_word.text, source_word.language)
        for connection in selected:
            self.registry.cache_word_for_id(connection.word.id, connection.word.text, connection.word.language)

        neighbors = [GraphNode(id=connection.word.id, word=connection.word) for connection in selected]
        edges = [
            GraphEdge(
                id=f"edge_{source_id}_{connection.word.id}",
                source=source_id,
                target=connection.word.id,
                relationship=connection.relationship,
            )
            for connection in selected
        ]

        return GraphResponse(
            source_node=GraphNode(id=source_id, word=source_word, is_source=True),
            neighbors=neighbors,
            edges=edges,
            total_available=total_available,
            total_selected=len(selected),
            duplicates_filtered=total_available - len(selected),
        )

    def health(self) -> Dict:
        stats = self.research_agent.stats()
        stats["selector_cache"] = self.selector_cache.stats()
        return {"status": "ok", **stats}

    def clear_caches(self) -> None:
        self.selector_cache.flush_all()
        self.research_agent.clear_caches()
        logger.info("All caches cleared")
