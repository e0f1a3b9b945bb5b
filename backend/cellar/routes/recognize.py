"""
/recognize-wine endpoint.

Looks up a partially described bottle on Wikipedia (EN + FR) and returns
up to five ranked matches the user can merge into the add/edit form.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..feature_flags import FeatureFlags, get_feature_flags
from ..models import MatchOut, RecognizeRequest, RecognizeResponse, SourceRefOut
from ..services.candidate_ranker import ScoredMatch
from ..services.errors import InvalidInput
from ..services.recognition import WineRecognitionService, get_recognition_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_match_out(match: ScoredMatch) -> MatchOut:
    """Convert ScoredMatch to the API model."""
    source = None
    if match.source is not None:
        source = SourceRefOut(
            title=match.source.title,
            url=match.source.url,
            language=match.source.language,
            snippet=match.source.snippet,
        )
    return MatchOut(
        producer=match.producer,
        name=match.name,
        vintage=match.vintage,
        confidence=match.confidence,
        reasons=match.reasons,
        image_url=match.image_url,
        source=source,
    )


@router.post("/recognize-wine", response_model=RecognizeResponse)
async def recognize_wine(
    request: RecognizeRequest,
    service: WineRecognitionService = Depends(get_recognition_service),
    flags: FeatureFlags = Depends(get_feature_flags),
):
    """
    Rank encyclopedia matches for a producer/name/vintage guess.

    Returns 400 when producer and name are both blank.
    """
    try:
        result = await service.recognize(
            request.producer_guess,
            request.name_guess,
            request.vintage_guess,
            enrich_images=flags.feature_image_enrichment,
        )
    except InvalidInput as e:
        return JSONResponse(status_code=400, content={"ok": False, "error": str(e)})

    return RecognizeResponse(
        query_used=result.query_used,
        matches=[_to_match_out(m) for m in result.matches],
    )
