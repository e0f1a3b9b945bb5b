"""
/wines endpoints for the cellar.

CRUD over cellar entries plus the drink-window views:
- GET /wines lists everything (optionally only wines ready to drink)
- GET /wines/drink-now lists in-stock wines ready to drink, best rated first
- POST /wines/{id}/take-one removes a bottle
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..feature_flags import FeatureFlags, get_feature_flags
from ..models import (
    CellarSort,
    DrinkBadgeOut,
    DrinkState,
    DrinkWindowPreset,
    QuantityUpdate,
    WineCreate,
    WineOut,
    WineUpdate,
)
from ..services.cellar_repository import CellarRepository, WineRecord, get_cellar_repository
from ..services.drink_window import badge, current_year, preset_window, render_label

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_wine_out(wine: WineRecord, year: int, detailed: bool = False) -> WineOut:
    """Attach the drink status; the detail view gets the long label."""
    status = badge(wine.drink_window, year)
    label = render_label(wine.drink_window, year) if detailed else status.label
    return WineOut(
        id=wine.id,
        producer=wine.producer,
        name=wine.name,
        vintage=wine.vintage,
        location=wine.location,
        quantity=wine.quantity,
        rating=wine.rating,
        price=wine.price,
        purchase_date=wine.purchase_date,
        photo_path=wine.photo_path,
        drink_from_year=wine.drink_from_year,
        drink_to_year=wine.drink_to_year,
        created_at=str(wine.created_at) if wine.created_at is not None else None,
        drink_status=DrinkBadgeOut(state=status.state, label=label, tone=status.tone),
    )


def _get_or_404(repo: CellarRepository, wine_id: int) -> WineRecord:
    wine = repo.get(wine_id)
    if wine is None:
        raise HTTPException(status_code=404, detail="Wine not found")
    return wine


@router.get("/wines", response_model=list[WineOut])
async def list_wines(
    sort_by: CellarSort = Query(default=CellarSort.CREATED, description="created, rating, producer or location"),
    only_drink_now: bool = Query(default=False, description="Only wines inside their drink window"),
    repo: CellarRepository = Depends(get_cellar_repository),
) -> list[WineOut]:
    """List the cellar with a drink badge per wine."""
    year = current_year()
    wines = [_to_wine_out(w, year) for w in repo.list_wines(sort_by)]
    if only_drink_now:
        wines = [w for w in wines if w.drink_status.state == DrinkState.READY_NOW]
    return wines


@router.get("/wines/drink-now", response_model=list[WineOut])
async def drink_now(
    repo: CellarRepository = Depends(get_cellar_repository),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> list[WineOut]:
    """
    In-stock wines ready to drink this year.

    Wines without a drink window are left out. Sorted by rating, producer, name.
    """
    if not flags.feature_drink_now:
        raise HTTPException(status_code=404, detail="Not found")
    year = current_year()
    return [_to_wine_out(w, year) for w in repo.drink_now(year)]


@router.get("/wines/{wine_id}", response_model=WineOut)
async def get_wine(
    wine_id: int,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Wine detail with the long drink-window label."""
    return _to_wine_out(_get_or_404(repo, wine_id), current_year(), detailed=True)


@router.post("/wines", response_model=WineOut, status_code=201)
async def create_wine(
    wine: WineCreate,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Add a wine to the cellar."""
    fields = wine.model_dump(exclude_none=True)
    wine_id = repo.add_wine(**fields)
    return _to_wine_out(_get_or_404(repo, wine_id), current_year(), detailed=True)


@router.patch("/wines/{wine_id}", response_model=WineOut)
async def update_wine(
    wine_id: int,
    update: WineUpdate,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Update the fields present in the body. Drink-window years are clamped."""
    fields = update.model_dump(exclude_unset=True)
    for key in ("producer", "name"):
        if key in fields and not (fields[key] or "").strip():
            raise HTTPException(status_code=422, detail=f"{key} cannot be blank")

    if not repo.update(wine_id, **fields):
        raise HTTPException(status_code=404, detail="Wine not found")
    return _to_wine_out(_get_or_404(repo, wine_id), current_year(), detailed=True)


@router.delete("/wines/{wine_id}", status_code=204)
async def delete_wine(
    wine_id: int,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> Response:
    """Remove a wine. Its photo, if any, is left to the storage backend."""
    if not repo.delete(wine_id):
        raise HTTPException(status_code=404, detail="Wine not found")
    return Response(status_code=204)


@router.post("/wines/{wine_id}/quantity", response_model=WineOut)
async def set_quantity(
    wine_id: int,
    body: QuantityUpdate,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Set the bottle count (negative values become 0)."""
    if repo.set_quantity(wine_id, body.quantity) is None:
        raise HTTPException(status_code=404, detail="Wine not found")
    return _to_wine_out(_get_or_404(repo, wine_id), current_year())


@router.post("/wines/{wine_id}/take-one", response_model=WineOut)
async def take_one(
    wine_id: int,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Take one bottle out of the cellar."""
    if repo.take_one(wine_id) is None:
        raise HTTPException(status_code=404, detail="Wine not found")
    return _to_wine_out(_get_or_404(repo, wine_id), current_year())


@router.post("/wines/{wine_id}/drink-window", response_model=WineOut)
async def apply_drink_window_preset(
    wine_id: int,
    body: DrinkWindowPreset,
    repo: CellarRepository = Depends(get_cellar_repository),
) -> WineOut:
    """Apply a quick preset: now+1, now+3, now+5 or clear."""
    year = current_year()
    try:
        window = preset_window(body.preset, year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not repo.update(wine_id, drink_from_year=window.start, drink_to_year=window.end):
        raise HTTPException(status_code=404, detail="Wine not found")
    return _to_wine_out(_get_or_404(repo, wine_id), year, detailed=True)
