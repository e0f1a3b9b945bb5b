"""
Wikipedia client used to look up candidate wines.

Three calls per language edition:
- search: MediaWiki full-text search (list=search)
- summary_thumbnail: REST page summary thumbnail for one title
- page_images: batched pageimages lookup for many titles

Any transport or HTTP failure raises UpstreamUnavailable. Callers treat
that as "this source returned nothing".
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..config import Config
from ..models.enums import SearchLanguage
from .candidate_ranker import SearchCandidate
from .errors import UpstreamUnavailable
from .text import strip_html

logger = logging.getLogger(__name__)

# Two context words are appended to the core query; more narrows it too much
QUERY_CONTEXT = {
    SearchLanguage.EN: ["wine", "winery", "vineyard", "appellation", "AOC", "DOC", "Domaine", "Château"],
    SearchLanguage.FR: ["vin", "domaine", "château", "vignoble", "appellation", "AOC", "AOP", "cépage"],
}


def build_query(producer: str, name: str, vintage: str, language: SearchLanguage) -> str:
    """Core guess words plus two language-specific wine context words."""
    core = " ".join(p for p in (producer, name, vintage) if p).strip()
    ctx = QUERY_CONTEXT[SearchLanguage(language)]
    return " ".join(p for p in (core, ctx[0], ctx[1]) if p).strip()


class WikipediaClient:
    """Async Wikipedia API client (one short-lived connection per call)."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Per-request timeout in seconds. Defaults to Config.search_timeout().
            user_agent: User-Agent header. Defaults to Config.wikipedia_user_agent().
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.timeout = timeout if timeout is not None else Config.search_timeout()
        self.user_agent = user_agent or Config.wikipedia_user_agent()
        self._transport = transport

    @staticmethod
    def api_url(language: SearchLanguage) -> str:
        return f"https://{SearchLanguage(language).value}.wikipedia.org/w/api.php"

    @staticmethod
    def summary_url(title: str, language: SearchLanguage) -> str:
        encoded = quote(title.replace(" ", "_"), safe="!*'()")
        return f"https://{SearchLanguage(language).value}.wikipedia.org/api/rest_v1/page/summary/{encoded}"

    async def _get_json(self, url: str, params: Optional[dict], language: SearchLanguage) -> dict:
        lang = SearchLanguage(language).value
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(f"Wikipedia ({lang}) timeout after {self.timeout}s", lang) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(f"Wikipedia ({lang}) HTTP {e.response.status_code}", lang) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Wikipedia ({lang}) request failed: {e}", lang) from e
        except ValueError as e:
            raise UpstreamUnavailable(f"Wikipedia ({lang}) returned invalid JSON", lang) from e

        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"Wikipedia ({lang}) returned unexpected payload", lang)
        return data

    async def search(self, query: str, language: SearchLanguage) -> list[SearchCandidate]:
        """Full-text article search. Snippets come back with HTML removed."""
        language = SearchLanguage(language)
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "format": "json",
            "utf8": "1",
            "srlimit": str(Config.SEARCH_RESULT_LIMIT),
            "srnamespace": "0",
            "origin": "*",
        }
        data = await self._get_json(self.api_url(language), params, language)
        items = (data.get("query") or {}).get("search") or []

        candidates = []
        for item in items:
            title = str(item.get("title") or "")
            if not title:
                continue
            candidates.append(SearchCandidate(
                title=title,
                snippet=strip_html(str(item.get("snippet") or "")),
                source_language=language,
            ))

        logger.debug(f"Wikipedia ({language.value}) search '{query}': {len(candidates)} results")
        return candidates

    async def summary_thumbnail(self, title: str, language: SearchLanguage) -> Optional[str]:
        """Thumbnail (or original image) from the REST page summary."""
        language = SearchLanguage(language)
        data = await self._get_json(self.summary_url(title, language), None, language)
        thumbnail = (data.get("thumbnail") or {}).get("source")
        original = (data.get("originalimage") or {}).get("source")
        return thumbnail or original or None

    async def page_images(self, titles: list[str], language: SearchLanguage) -> dict[str, str]:
        """Batched thumbnail lookup. Returns {title: image_url} for pages that have one."""
        if not titles:
            return {}
        language = SearchLanguage(language)
        params = {
            "action": "query",
            "format": "json",
            "prop": "pageimages",
            "piprop": "thumbnail",
            "pithumbsize": str(Config.THUMBNAIL_SIZE_PX),
            "titles": "|".join(titles),
            "redirects": "1",
            "origin": "*",
        }
        data = await self._get_json(self.api_url(language), params, language)
        pages = (data.get("query") or {}).get("pages") or {}

        images: dict[str, str] = {}
        for page in pages.values():
            title = str(page.get("title") or "")
            thumb = (page.get("thumbnail") or {}).get("source")
            if title and thumb:
                images[title] = str(thumb)
        return images
