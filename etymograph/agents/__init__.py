"""
Agents for the etymograph pipeline: remote data sources, the cognate matcher
and the research agent that ties them together.
"""

from etymograph.agents.data_sources import (
    EtymologyDataSource,
    WiktionarySource,
    DictionaryAPISource,
    EtymonlineSource
)
from etymograph.agents.cognate_agent import CognateAgent, CognateCandidate
from etymograph.agents.research_agent import ResearchAgent

__all__ = [
    'EtymologyDataSource',
    'WiktionarySource',
    'DictionaryAPISource',
    'EtymonlineSource',
    'CognateAgent',
    'CognateCandidate',
    'ResearchAgent'
]
