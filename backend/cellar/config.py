"""
Centralized configuration for the wine cellar backend.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LANGUAGES = ["en", "fr"]
SUPPORTED_SEARCH_LANGUAGES = ("en", "fr")


class Config:
    """Application configuration constants."""

    # === Candidate Scoring ===
    DOMAIN_TERM_POINTS = 2            # Per wine-vocabulary term found
    DOMAIN_SIGNAL_CAP = 30            # Max contribution from vocabulary terms
    PRODUCER_BONUS = 2                # "producer" in text, outside the cap
    ESTATE_BONUS = 1                  # "estate" in text, outside the cap
    NO_DOMAIN_PENALTY = -10           # No wine vocabulary at all

    PRODUCER_FULL_MATCH = 28
    PRODUCER_TOKEN_POINTS = 6
    PRODUCER_TOKEN_CAP = 18
    NAME_FULL_MATCH = 22
    NAME_TOKEN_POINTS = 5
    NAME_TOKEN_CAP = 14
    MIN_TOKEN_LENGTH = 4              # Shorter guess tokens are ignored

    VINTAGE_MATCH = 8
    VINTAGE_SUPPLIED = 2

    MIN_CONFIDENCE = 0
    MAX_CONFIDENCE = 100
    FALLBACK_CONFIDENCE = 60          # Synthetic match when search finds nothing

    # === Ranking ===
    ENRICH_TOP_K = 8                  # Candidates kept for image lookup
    RESULT_TOP_N = 5                  # Matches returned to the client
    SNIPPET_MAX_CHARS = 220
    SEARCH_RESULT_LIMIT = 12
    THUMBNAIL_SIZE_PX = 320

    # === Drink Window ===
    MIN_YEAR = 1900
    MAX_YEAR = 2100
    WINDOW_PRESETS = {"now+1": 1, "now+3": 3, "now+5": 5}

    # === Cellar ===
    MAX_RATING = 5

    # === Environment ===
    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def is_dev() -> bool:
        """Development mode flag."""
        return os.getenv("DEV_MODE", "false").lower() == "true"

    @staticmethod
    def search_languages() -> List[str]:
        """Wikipedia languages searched in parallel. Default: en,fr.
        Unsupported codes are logged and skipped.
        """
        raw = os.getenv("SEARCH_LANGUAGES", "en,fr")
        languages = []
        for lang in (part.strip().lower() for part in raw.split(",")):
            if not lang:
                continue
            if lang not in SUPPORTED_SEARCH_LANGUAGES:
                logger.warning(f"Ignoring unsupported SEARCH_LANGUAGES entry: {lang}")
                continue
            if lang not in languages:
                languages.append(lang)
        if not languages:
            logger.warning(f"No supported SEARCH_LANGUAGES in '{raw}', using defaults")
            return list(DEFAULT_SEARCH_LANGUAGES)
        return languages

    @staticmethod
    def search_timeout() -> float:
        """Timeout in seconds for each encyclopedia request. Default: 8.0."""
        try:
            return float(os.getenv("SEARCH_TIMEOUT", "8.0"))
        except ValueError:
            return 8.0

    @staticmethod
    def wikipedia_user_agent() -> str:
        """User-Agent header sent to Wikipedia."""
        return os.getenv("WIKIPEDIA_USER_AGENT", "wijnkelder-app/1.0")

    # === Database Persistence ===
    @staticmethod
    def database_path() -> str:
        """Path to SQLite database file.
        Default: backend/cellar/data/cellar.db (relative to the package).
        Override with DATABASE_PATH env var for container deployments.
        """
        default = str(Path(__file__).parent / "data" / "cellar.db")
        return os.getenv("DATABASE_PATH", default)
