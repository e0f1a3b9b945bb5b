"""
Pytest configuration for the wine cellar tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


def pytest_configure(config):
    """Register markers and mark the app ready."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )

    # Mark the service as ready for tests (bypasses warmup middleware)
    # This is needed because TestClient doesn't trigger lifespan events
    from main import set_ready
    set_ready(True)


@pytest.fixture
def repo(tmp_path):
    """Cellar repository backed by a temp database with schema applied."""
    from cellar.db import ensure_schema
    from cellar.services.cellar_repository import CellarRepository

    db_path = str(tmp_path / "cellar.db")
    ensure_schema(db_path)
    repository = CellarRepository(db_path=db_path)
    yield repository
    repository.close()


def _wiki_client(results_by_lang=None, summaries=None, page_images=None):
    """
    Wikipedia client mock.

    Args:
        results_by_lang: {SearchLanguage: list[SearchCandidate] or Exception}
        summaries: {title: url} returned by summary_thumbnail
        page_images: {SearchLanguage: {title: url}} returned by page_images
    """
    results_by_lang = results_by_lang or {}
    summaries = summaries or {}
    page_images = page_images or {}

    def _search(query, lang):
        result = results_by_lang.get(lang, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def _summary(title, lang):
        return summaries.get(title)

    def _page_images(titles, lang):
        result = page_images.get(lang, {})
        if isinstance(result, Exception):
            raise result
        return {t: url for t, url in result.items() if t in titles}

    client = MagicMock()
    client.search = AsyncMock(side_effect=_search)
    client.summary_thumbnail = AsyncMock(side_effect=_summary)
    client.page_images = AsyncMock(side_effect=_page_images)
    return client


@pytest.fixture
def make_wiki_client():
    """Factory for a mocked WikipediaClient."""
    return _wiki_client
