"""
Candidate ranking for wine recognition.

Scores encyclopedia search results against a user's partial, noisy
description of a bottle (producer, name, vintage) and returns the best
matches with short explanations.

Scoring (0-100, clamped):
1. Wine vocabulary in title + snippet (+2 per term, capped at 30;
   -10 when there is none)
2. Producer guess: full substring +28, else +6 per long token (max 18)
3. Name guess: full substring +22, else +5 per long token (max 14)
4. Vintage: +8 when the guessed year appears in the text, +2 otherwise

Disambiguation pages are dropped before scoring. Candidates from all
languages are pooled and ranked on the same scale.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional
from urllib.parse import quote

from ..config import Config
from ..models.enums import SearchLanguage
from .text import find_vintage, normalize


# Wine vocabulary used as a cheap relevance signal (EN + FR),
# including grapes and regions that show up in encyclopedia snippets
DOMAIN_TERMS = (
    # EN
    "wine", "winery", "vineyard", "vineyards", "grape", "grapes",
    "appellation", "aoc", "aop", "doc", "docg", "chateau", "château",
    "domaine", "cru", "cuvee", "cuvée", "champagne", "sparkling",
    "red wine", "white wine", "rosé", "rose",
    # Grapes and regions
    "cabernet", "merlot", "pinot", "syrah", "shiraz", "tempranillo",
    "nebbiolo", "sangiovese", "sauvignon", "riesling", "bourgogne",
    "bordeaux", "rioja", "chianti", "barolo", "burgundy", "tuscany",
    "piemonte", "mendoza", "marlborough",
    # FR
    "vin", "vignoble", "viticole", "viticulture", "cépage",
    "appellation d origine", "appellation d'origine", "mis en bouteille",
)

# Scored outside the vocabulary cap
BONUS_TERMS = (
    ("producer", Config.PRODUCER_BONUS),
    ("estate", Config.ESTATE_BONUS),
)

DISAMBIGUATION_PHRASES = (
    "may refer to",
    "peut faire référence à",
    "peut se référer à",
)

_LEADING_SEPARATOR = re.compile(r"^\s*[-–:]\s*")


@dataclass
class SearchCandidate:
    """A raw encyclopedia search result (snippet already stripped of HTML)."""
    title: str
    snippet: str
    source_language: SearchLanguage = SearchLanguage.EN


@dataclass
class ScoredCandidate:
    """A candidate with its confidence, before enrichment."""
    candidate: SearchCandidate
    confidence: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class SourceRef:
    """Where a match came from."""
    title: str
    url: str
    language: SearchLanguage
    snippet: str = ""


@dataclass
class ScoredMatch:
    """A ranked match ready to merge into the add/edit form."""
    producer: str
    name: str
    vintage: Optional[int]
    confidence: int
    reasons: list[str] = field(default_factory=list)
    image_url: Optional[str] = None
    source: Optional[SourceRef] = None


def is_disambiguation(title: str, snippet: str) -> bool:
    """True for "(disambiguation)" pages and "may refer to" snippets."""
    # Checked on the lowercased title: normalize() strips the parentheses
    if "(disambiguation)" in (title or "").lower():
        return True
    s = normalize(snippet)
    return any(phrase in s for phrase in DISAMBIGUATION_PHRASES)


def domain_signal_score(text: str) -> tuple[int, int]:
    """
    Count wine vocabulary in text.

    Returns:
        (subtotal, bonus): subtotal is uncapped vocabulary points,
        bonus is the producer/estate points that sit outside the cap.
    """
    s = normalize(text)
    subtotal = sum(Config.DOMAIN_TERM_POINTS for term in DOMAIN_TERMS if term in s)
    bonus = sum(points for term, points in BONUS_TERMS if term in s)
    return subtotal, bonus


def _token_hits(guess_norm: str, haystack: str) -> int:
    tokens = [t for t in guess_norm.split(" ") if len(t) >= Config.MIN_TOKEN_LENGTH]
    return sum(1 for t in tokens if t in haystack)


def score_candidate(
    candidate: SearchCandidate,
    producer_guess: str,
    name_guess: str,
    vintage_guess: str,
) -> ScoredCandidate:
    """Score one candidate against the user's guess."""
    reasons: list[str] = []
    score = 0

    haystack = normalize(" ".join(p for p in (candidate.title, candidate.snippet) if p))
    pg = normalize(producer_guess)
    ng = normalize(name_guess)

    subtotal, bonus = domain_signal_score(f"{candidate.title} {candidate.snippet}")
    if subtotal > 0:
        score += min(Config.DOMAIN_SIGNAL_CAP, subtotal) + bonus
        reasons.append("Wine context detected.")
    else:
        score += Config.NO_DOMAIN_PENALTY + bonus
        reasons.append("Little wine context (lower confidence).")

    if pg and pg in haystack:
        score += Config.PRODUCER_FULL_MATCH
        reasons.append(f'Producer found: "{producer_guess}"')
    elif pg:
        hits = _token_hits(pg, haystack)
        if hits > 0:
            score += min(Config.PRODUCER_TOKEN_CAP, hits * Config.PRODUCER_TOKEN_POINTS)
            reasons.append(f"Producer partially found ({hits} token(s)).")

    if ng and ng in haystack:
        score += Config.NAME_FULL_MATCH
        reasons.append(f'Name found: "{name_guess}"')
    elif ng:
        hits = _token_hits(ng, haystack)
        if hits > 0:
            score += min(Config.NAME_TOKEN_CAP, hits * Config.NAME_TOKEN_POINTS)
            reasons.append(f"Name partially found ({hits} token(s)).")

    guess_year = find_vintage(vintage_guess)
    text_year = find_vintage(haystack)
    if guess_year and text_year and guess_year == text_year:
        score += Config.VINTAGE_MATCH
        reasons.append(f"Vintage match: {guess_year}")
    elif guess_year:
        score += Config.VINTAGE_SUPPLIED
        reasons.append(f"Vintage supplied: {guess_year}")

    confidence = max(Config.MIN_CONFIDENCE, min(Config.MAX_CONFIDENCE, round(score)))
    return ScoredCandidate(candidate=candidate, confidence=confidence, reasons=reasons)


def score_candidates(
    candidates: Iterable[SearchCandidate],
    producer_guess: str,
    name_guess: str,
    vintage_guess: str,
    limit: int = Config.ENRICH_TOP_K,
) -> list[ScoredCandidate]:
    """
    Filter, score and rank a pooled candidate list.

    Ties keep discovery order. Returns at most `limit` candidates.
    """
    scored = [
        score_candidate(c, producer_guess, name_guess, vintage_guess)
        for c in candidates
        if c.title and not is_disambiguation(c.title, c.snippet)
    ]
    scored.sort(key=lambda sc: sc.confidence, reverse=True)
    return scored[:limit]


def _producer_span(title: str, guess_norm: str) -> Optional[re.Match]:
    """Find the normalized guess in the raw title, tolerating punctuation and spacing between tokens."""
    pattern = r"[\W_]+".join(re.escape(token) for token in guess_norm.split(" "))
    return re.search(pattern, title, flags=re.IGNORECASE)


def split_producer_name(title: str, producer_guess: str, name_guess: str) -> tuple[str, str]:
    """
    Split an encyclopedia title into a best-guess (producer, name).

    "Domaine Leflaive – Puligny-Montrachet" with producer guess
    "Domaine Leflaive" gives ("Domaine Leflaive", "Puligny-Montrachet").
    """
    t = (title or "").strip()
    pg = (producer_guess or "").strip()
    ng = (name_guess or "").strip()
    pg_norm = normalize(pg)

    if pg_norm and pg_norm in normalize(t):
        span = _producer_span(t, pg_norm)
        if span:
            rest = t[:span.start()] + t[span.end():]
        else:
            rest = re.sub(re.escape(pg), "", t, count=1, flags=re.IGNORECASE)
        rest = _LEADING_SEPARATOR.sub("", rest).strip()
        return pg, rest or ng or t

    sep = " – " if " – " in t else " - " if " - " in t else ""
    if sep:
        parts = t.split(sep)
        a, b = parts[0].strip(), parts[1].strip()
        if pg_norm and pg_norm in normalize(a):
            return a, b or ng or t
        if pg_norm and pg_norm in normalize(b):
            return b, a or ng or t
        return a or pg, b or ng or t

    return pg, ng or t


def page_url(title: str, language: SearchLanguage) -> str:
    """Canonical article URL for a title."""
    lang = SearchLanguage(language).value
    encoded = quote(title.replace(" ", "_"), safe="!*'()")
    return f"https://{lang}.wikipedia.org/wiki/{encoded}"


def build_matches(
    scored: Iterable[ScoredCandidate],
    producer_guess: str,
    name_guess: str,
    vintage_guess: str,
    images: Optional[Mapping[tuple[SearchLanguage, str], str]] = None,
    limit: int = Config.RESULT_TOP_N,
) -> list[ScoredMatch]:
    """
    Turn scored candidates into matches, re-rank and keep the top `limit`.

    Args:
        images: Image URLs keyed by (language, title) from the enrichment step.
    """
    images = images or {}
    guess_year = find_vintage(vintage_guess)
    matches: list[ScoredMatch] = []

    for sc in scored:
        c = sc.candidate
        producer, name = split_producer_name(c.title, producer_guess, name_guess)
        vintage = guess_year if guess_year is not None else find_vintage(c.snippet)
        matches.append(ScoredMatch(
            producer=producer or producer_guess or "",
            name=name or name_guess or c.title,
            vintage=vintage,
            confidence=sc.confidence,
            reasons=list(sc.reasons),
            image_url=images.get((c.source_language, c.title)),
            source=SourceRef(
                title=c.title,
                url=page_url(c.title, c.source_language),
                language=c.source_language,
                snippet=c.snippet[:Config.SNIPPET_MAX_CHARS],
            ),
        ))

    matches.sort(key=lambda m: m.confidence, reverse=True)
    return matches[:limit]


def fallback_match(producer_guess: str, name_guess: str, vintage_guess: str) -> ScoredMatch:
    """Synthetic match built from the user's own input when search finds nothing."""
    return ScoredMatch(
        producer=(producer_guess or "").strip() or "Unknown",
        name=(name_guess or "").strip() or "Unknown",
        vintage=find_vintage(vintage_guess),
        confidence=Config.FALLBACK_CONFIDENCE,
        reasons=["No results found. Using your input."],
    )


def rank(
    producer_guess: str,
    name_guess: str,
    vintage_guess: str,
    candidates: Iterable[SearchCandidate],
) -> list[ScoredMatch]:
    """
    Rank candidates against the user's guess without image enrichment.

    Never raises for well-typed input; degrades to the fallback match
    when no candidate survives filtering.
    """
    scored = score_candidates(candidates, producer_guess, name_guess, vintage_guess)
    if not scored:
        return [fallback_match(producer_guess, name_guess, vintage_guess)]
    return build_matches(scored, producer_guess, name_guess, vintage_guess)
