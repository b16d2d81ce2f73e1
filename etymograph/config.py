"""
Global configuration settings for the etymograph project.

This module contains all configuration constants and settings used throughout the application.
Deployment-specific values (user agent, timeouts, cache lifetimes) can be overridden
through environment variables or a local .env file.
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

load_dotenv()

# Application Mode
DEBUG_MODE = os.getenv("ETYMOGRAPH_DEBUG", "false").lower() == "true"

# Directory Configuration
BASE_DIR = Path(__file__).parent.parent
LOG_DIR = BASE_DIR / "logs"


# External API Configuration
class APIEndpoint:
    """
    Configuration for external API endpoints.

    Attributes:
        base_url (str): Base URL for the API
        require_key (bool): Whether this API requires authentication
        env_key_name (str): Name of environment variable containing the API key
    """
    def __init__(self, base_url: str, require_key: bool, env_key_name: str = None):
        self.base_url = base_url
        self.require_key = require_key
        self.env_key_name = env_key_name


API_ENDPOINTS = {
    "wiktionary": APIEndpoint(
        base_url="https://en.wiktionary.org/w/api.php",
        require_key=False
    ),
    "dictionary": APIEndpoint(
        base_url="https://api.dictionaryapi.dev/api/v2/entries",
        require_key=False
    ),
    "etymonline": APIEndpoint(
        base_url="https://www.etymonline.com/word",
        require_key=False
    ),
}

# Web Scraping Configuration
SCRAPING_CONFIG = {
    "timeout": float(os.getenv("ETYMOGRAPH_FETCH_TIMEOUT", "10")),  # Request timeout in seconds
    "user_agent": os.getenv(
        "ETYMOGRAPH_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
}

# Cache Configuration
CACHE_CONFIG = {
    "result_ttl": int(os.getenv("ETYMOGRAPH_RESULT_TTL", "7200")),    # 2 hours, full EtymologyResult
    "result_max_size": 2048,
    "selector_ttl": int(os.getenv("ETYMOGRAPH_SELECTOR_TTL", "300")),  # 5 minutes, assembled graph responses
    "selector_max_size": 1024,
    "cognate_ttl": 14400,                                              # 4 hours, cognate lookups
    "cognate_max_size": 1024,
}

# Connection selection
SELECTOR_CONFIG = {
    "reserved_root_slots": 3,
    "default_initial_nodes": 5,
    "default_expand_nodes": 8,
}

# Word id registry
WORD_REGISTRY_CONFIG = {
    "id_prefix": "w_",
    "allow_guess_fallback": os.getenv("ETYMOGRAPH_ID_GUESSING", "false").lower() == "true",
}

# Logging Configuration
LOG_CONFIG = {
    "level": "DEBUG" if DEBUG_MODE else "INFO",
    "file_level": "DEBUG",
    "log_path": str(LOG_DIR / "etymograph.log"),
    "rotation": "1 day",
    "retention": "30 days",
    "compression": "gz",
}

# Code used for reconstructed Proto-Indo-European forms
PIE_LANGUAGE_CODE = "ine-pro"

# Hand-authored confidence priors. Extraction code reads these by name.
CONFIDENCE: Dict[str, float] = {
    # Wiki markup extractor
    "wiki_template_cognate": 0.80,
    "wiki_phrase_cognate": 0.85,
    "wiki_derived_term": 0.90,
    "wiki_compound": 0.85,
    # HTML extractor
    "underline_boost": 0.10,
    "italic_factor": 0.90,
    "hyperlink_factor": 0.90,
    "related_listing_base": 0.85,
    "related_listing_context": 0.80,
    "root_link": 0.95,
    "shortened_from": 0.90,
    "shortened_to_max": 0.90,
    "shortened_to_min": 0.80,
    "pie_derivative": 0.85,
    "context_base": 0.60,
    "context_positive_step": 0.10,
    "context_negative_step": 0.05,
    "context_accept": 0.70,
    "context_weak_floor": 0.60,
    "ceiling": 0.95,
    # Source tagging
    "etymonline_boost": 0.10,
    "dictionary_origin": 0.60,
    # Cognate matcher
    "cognate_direct": 0.95,
    "cognate_sound_change": 0.75,
    "cognate_admission": 0.85,
    # Cross-reference enrichment
    "cross_reference_min": 0.75,
    "cross_reference_factor": 0.90,
    "cross_reference_max": 0.85,
    # Validator floors
    "floor_default": 0.50,
    "floor_reconstructed": 0.40,
    "default_confidence": 0.50,
}

# Ranking weights used by the deduplicator
SOURCE_PRIORITY: Dict[str, int] = {
    "etymonline.com": 3,
    "wiktionary": 2,
    "dictionary-api": 1,
}

TYPE_PRIORITY: Dict[str, int] = {
    "etymology": 3,
    "cognate": 2,
    "ancestor": 2,
    "borrowing": 1,
    "related": 0,
}

# Languages consulted when generating cognates for a word
COGNATE_LANGUAGES = [
    "en", "es", "fr", "de", "it", "pt", "la", "el", "ru", "pl", "nl", "da", "sv", "no"
]
