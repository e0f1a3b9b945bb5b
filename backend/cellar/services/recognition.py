"""
Wine recognition service.

Flow: validate guess -> search every language in parallel -> pool + score
-> image lookup for the top K in parallel -> re-rank -> top N.

A failing language or image source is logged and treated as empty; it
never fails the whole request.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..config import Config
from ..models.enums import SearchLanguage
from .candidate_ranker import (
    ScoredCandidate,
    ScoredMatch,
    SearchCandidate,
    build_matches,
    fallback_match,
    score_candidates,
)
from .encyclopedia import WikipediaClient, build_query
from .errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass
class RecognitionResult:
    """Result of one recognition request."""
    query_used: str
    matches: list[ScoredMatch]
    timings: dict = field(default_factory=dict)


def validate_guesses(producer_guess: str, name_guess: str) -> None:
    """Raise InvalidInput unless producer or name has content."""
    if not (producer_guess or "").strip() and not (name_guess or "").strip():
        raise InvalidInput("Enter at least a producer or a name to search.")


class WineRecognitionService:
    """Looks up a partially described wine in the encyclopedia and ranks the results."""

    def __init__(
        self,
        client: Optional[WikipediaClient] = None,
        languages: Optional[Sequence[str]] = None,
        enrich_images: bool = True,
    ):
        self.client = client or WikipediaClient()
        langs = languages if languages is not None else Config.search_languages()
        self.languages = [SearchLanguage(lang) for lang in langs]
        self.enrich_images = enrich_images

    async def recognize(
        self,
        producer_guess: str,
        name_guess: str,
        vintage_guess: str = "",
        enrich_images: Optional[bool] = None,
    ) -> RecognitionResult:
        """
        Search, score and rank candidates for the user's guess.

        Args:
            enrich_images: Override the service default for the image lookup step.

        Raises:
            InvalidInput: producer and name are both blank.
        """
        producer = (producer_guess or "").strip()
        name = (name_guess or "").strip()
        vintage = (vintage_guess or "").strip()
        validate_guesses(producer, name)

        timings: dict[str, int] = {}
        total_start = time.perf_counter()
        query_used = " ".join(p for p in (producer, name, vintage) if p)

        t0 = time.perf_counter()
        candidates = await self._search_all(producer, name, vintage)
        timings["search_ms"] = round((time.perf_counter() - t0) * 1000)

        scored = score_candidates(candidates, producer, name, vintage)
        if not scored:
            timings["total_ms"] = round((time.perf_counter() - total_start) * 1000)
            logger.info(f"Recognition: no results for '{query_used}', using input as fallback")
            return RecognitionResult(
                query_used=query_used,
                matches=[fallback_match(producer, name, vintage)],
                timings=timings,
            )

        images: dict[tuple[SearchLanguage, str], str] = {}
        if enrich_images is None:
            enrich_images = self.enrich_images
        if enrich_images:
            t0 = time.perf_counter()
            images = await self._lookup_images(scored)
            timings["images_ms"] = round((time.perf_counter() - t0) * 1000)

        matches = build_matches(scored, producer, name, vintage, images=images)
        timings["total_ms"] = round((time.perf_counter() - total_start) * 1000)
        logger.info(
            f"Recognition: {len(candidates)} candidates, {len(matches)} matches for "
            f"'{query_used}' in {timings['total_ms']}ms (search={timings['search_ms']}ms)"
        )
        return RecognitionResult(query_used=query_used, matches=matches, timings=timings)

    async def _search_all(self, producer: str, name: str, vintage: str) -> list[SearchCandidate]:
        """Search every language concurrently and pool the results in language order."""
        results = await asyncio.gather(
            *[
                self.client.search(build_query(producer, name, vintage, lang), lang)
                for lang in self.languages
            ],
            return_exceptions=True,
        )

        pooled: list[SearchCandidate] = []
        for lang, result in zip(self.languages, results):
            if isinstance(result, Exception):
                logger.warning(f"Recognition: {lang.value} search failed: {result}")
                continue
            pooled.extend(result)
        return pooled

    async def _lookup_images(
        self, scored: list[ScoredCandidate]
    ) -> dict[tuple[SearchLanguage, str], str]:
        """
        Find an image per candidate.

        Per-title REST summaries are preferred; one batched pageimages call
        per language fills the gaps.
        """
        summaries = await asyncio.gather(
            *[
                self.client.summary_thumbnail(sc.candidate.title, sc.candidate.source_language)
                for sc in scored
            ],
            return_exceptions=True,
        )

        titles_by_lang: dict[SearchLanguage, list[str]] = {}
        for sc in scored:
            titles_by_lang.setdefault(sc.candidate.source_language, []).append(sc.candidate.title)
        batch_langs = list(titles_by_lang)
        batches = await asyncio.gather(
            *[self.client.page_images(titles_by_lang[lang], lang) for lang in batch_langs],
            return_exceptions=True,
        )

        batch_images: dict[tuple[SearchLanguage, str], str] = {}
        for lang, result in zip(batch_langs, batches):
            if isinstance(result, Exception):
                logger.warning(f"Recognition: {lang.value} page image lookup failed: {result}")
                continue
            for title, url in result.items():
                batch_images[(lang, title)] = url

        images: dict[tuple[SearchLanguage, str], str] = {}
        for sc, summary in zip(scored, summaries):
            key = (sc.candidate.source_language, sc.candidate.title)
            if isinstance(summary, Exception):
                logger.debug(f"Recognition: summary thumbnail failed for {key}: {summary}")
                summary = None
            url = summary or batch_images.get(key)
            if url:
                images[key] = url
        return images


_service: Optional[WineRecognitionService] = None


def get_recognition_service() -> WineRecognitionService:
    """Get or create the recognition service singleton."""
    global _service
    if _service is None:
        _service = WineRecognitionService()
    return _service
