"""
In-memory data sources used in place of the remote fetchers.
"""

import asyncio
from typing import Any, Optional

from etymograph.agents.data_sources import EtymologyDataSource


class FakeSource(EtymologyDataSource):
    """Payloads are looked up by word; a configured error is raised on every call."""

    def __init__(self, name: str, payloads: Optional[dict] = None, error: Optional[Exception] = None):
        self.name = name
        self.payloads = payloads or {}
        self.error = error
        self.calls = []

    @property
    def source_name(self) -> str:
        return self.name

    async def fetch(self, word: str, language: str) -> Optional[Any]:
        self.calls.append((word, language))
        if self.error is not None:
            raise self.error
        return self.payloads.get(word)


class SlowSource(FakeSource):
    def __init__(self, name: str, delay: float):
        super().__init__(name)
        self.delay = delay

    async def fetch(self, word: str, language: str) -> Optional[Any]:
        self.calls.append((word, language))
        await asyncio.sleep(self.delay)
        return None
