"""
Data source abstractions for etymology lookups.

This module provides the fetcher interface and the three remote sources the
pipeline consults: Wiktionary wiki markup, a structured dictionary API and
etymonline HTML pages. Fetchers only retrieve raw payloads; parsing lives in
``etymograph.extractors``. Every fetcher degrades to None on failure.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp
from loguru import logger

from etymograph.config import API_ENDPOINTS, SCRAPING_CONFIG


class EtymologyDataSource(ABC):
    """Abstract base class for etymology data sources."""

    @abstractmethod
    async def fetch(self, word: str, language: str) -> Optional[Any]:
        """Fetch the raw payload for a word, or None when unavailable."""
        pass

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Get the name of this data source."""
        pass

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=SCRAPING_CONFIG["timeout"])

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": SCRAPING_CONFIG["user_agent"]}


class WiktionarySource(EtymologyDataSource):
    """Wiktionary API source returning raw wikitext."""

    @property
    def source_name(self) -> str:
        return "wiktionary"

    async def fetch(self, word: str, language: str) -> Optional[str]:
        params = {
            "action": "parse",
            "page": word,
            "prop": "wikitext",
            "format": "json",
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(API_ENDPOINTS["wiktionary"].base_url, params=params, headers=self.headers) as response:
                    if response.status != 200:
                        logger.warning(f"Wiktionary returned {response.status} for '{word}'")
                        return None

                    data = await response.json(content_type=None)
                    if not isinstance(data, dict) or "error" in data:
                        return None

                    return data.get("parse", {}).get("wikitext", {}).get("*") or None

        except asyncio.TimeoutError:
            logger.warning(f"Wiktionary request timed out for '{word}'")
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error querying Wiktionary API for '{word}': {str(e)}")
            return None


class DictionaryAPISource(EtymologyDataSource):
    """Structured dictionary API source."""

    @property
    def source_name(self) -> str:
        return "dictionary-api"

    async def fetch(self, word: str, language: str) -> Optional[Dict]:
        word = (word or "").strip()
        if not word:
            return None

        language = (language or "en").lower()
        url = f"{API_ENDPOINTS['dictionary'].base_url}/{quote(language)}/{quote(word)}"

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, headers=self.headers) as response:
                    if response.status != 200:
                        logger.debug(f"Dictionary API returned {response.status} for '{word}'")
                        return None

                    payload = await response.json(content_type=None)
                    # The API wraps entries in a list; the first one is the headword
                    if isinstance(payload, list):
                        payload = payload[0] if payload else None
                    return payload if isinstance(payload, dict) else None

        except asyncio.TimeoutError:
            logger.warning(f"Dictionary API request timed out for '{word}'")
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error querying dictionary API for '{word}': {str(e)}")
            return None


class EtymonlineSource(EtymologyDataSource):
    """Etymonline page source returning raw HTML."""

    @property
    def source_name(self) -> str:
        return "etymonline.com"

    async def fetch(self, word: str, language: str) -> Optional[str]:
        url = f"{API_ENDPOINTS['etymonline'].base_url}/{quote(word)}"

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, headers=self.headers) as response:
                    if response.status != 200:
                        logger.info(f"Etymonline returned {response.status} for '{word}'")
                        return None
                    return await response.text()

        except asyncio.TimeoutError:
            logger.warning(f"Etymonline request timed out for '{word}'")
            return None
        except aiohttp.ClientError as e:
            logger.error(f"Error fetching etymonline page for '{word}': {str(e)}")
            return None
