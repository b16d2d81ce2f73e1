import random
import sys

import pytest
from loguru import logger

from etymograph.agents.research_agent import ResearchAgent
from etymograph.analysis.validator import ConnectionValidator
from etymograph.cache import CrossReferenceIndex, EtymologyCache, WordRegistry
from etymograph.extractors import DictionaryEntry
from etymograph.language import LanguageClassifier
from etymograph.main import EtymologyPipeline
from etymograph.models import Word
from fakes import FakeSource

WATER_WIKITEXT = """==English==

===Etymology===
From {{inh|en|ang|wæter}}, from {{inh|en|gem-pro|*watōr}}. Cognate with {{cog|de|Wasser}}.

===Noun===
{{en-noun}}

# A clear [[liquid]].

===Derived terms===
* [[waterfall]]
* [[watery]]
"""

WATER_DICTIONARY_PAYLOAD = [
    {
        "word": "water",
        "phonetics": [{"audio": ""}, {"text": "/ˈwɔːtə/"}],
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [{"definition": "A colourless, transparent, odourless liquid."}],
            }
        ],
        "origin": "from Old English waeter, related to German Wasser.",
    }
]

WATER_HTML = """
<html><body>
<section class="prose-lg">
<p>water (n.1) Old English wæter, from Proto-Germanic *watr-,
from PIE root <a href="/word/*wed-">*wed-</a> "water; wet."</p>
</section>
</body></html>
"""

WET_HTML = """
<html><body>
<section class="prose-lg">
<p>wet (adj.) Old English wæt, from Proto-Germanic *wētaz,
from PIE root <a href="/word/*wed-">*wed-</a> "water; wet."</p>
</section>
</body></html>
"""


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def classifier():
    return LanguageClassifier()


@pytest.fixture
def registry():
    return WordRegistry(allow_guess_fallback=False)


@pytest.fixture
def validator(classifier, registry):
    return ConnectionValidator(classifier, registry)


@pytest.fixture
def make_word(registry):
    def _make(text: str, language: str = "en") -> Word:
        return Word(id=registry.mint(text, language), text=text, language=language)
    return _make


@pytest.fixture
def wiktionary():
    return FakeSource("wiktionary", {"water": WATER_WIKITEXT})


@pytest.fixture
def dictionary():
    return FakeSource("dictionary-api", {"water": WATER_DICTIONARY_PAYLOAD[0]})


@pytest.fixture
def etymonline():
    return FakeSource("etymonline.com", {"water": WATER_HTML, "wet": WET_HTML})


@pytest.fixture
def make_agent(classifier, registry):
    def _make(wiktionary, dictionary, etymonline, fetch_timeout: float = 5.0) -> ResearchAgent:
        return ResearchAgent(
            wiktionary=wiktionary,
            dictionary=dictionary,
            etymonline=etymonline,
            cache=EtymologyCache("result", default_ttl=60),
            cross_reference=CrossReferenceIndex(),
            registry=registry,
            classifier=classifier,
            fetch_timeout=fetch_timeout,
        )
    return _make


@pytest.fixture
def agent(make_agent, wiktionary, dictionary, etymonline):
    return make_agent(wiktionary, dictionary, etymonline)


@pytest.fixture
def pipeline(agent):
    return EtymologyPipeline(
        research_agent=agent,
        selector_cache=EtymologyCache("selector", default_ttl=60),
        rng=random.Random(7),
    )


@pytest.fixture
def water_wikitext():
    return WATER_WIKITEXT


@pytest.fixture
def water_html():
    return WATER_HTML


@pytest.fixture
def water_entry():
    return DictionaryEntry.from_payload(WATER_DICTIONARY_PAYLOAD, "water")
