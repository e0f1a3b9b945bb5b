"""
Pydantic models for the wine cellar API.

Recognition contract:
{
  "ok": true,
  "queryUsed": "string",
  "matches": [
    {
      "producer": "string",
      "name": "string",
      "vintage": 2019,
      "confidence": 72,
      "reasons": ["string"],
      "imageUrl": "string",
      "source": {"title": "...", "url": "...", "language": "en", "snippet": "..."}
    }
  ]
}
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import Config
from .enums import BadgeTone, DrinkState, SearchLanguage


class RecognizeRequest(BaseModel):
    """User's partial description of a bottle."""
    model_config = ConfigDict(populate_by_name=True)

    producer_guess: str = Field("", alias="producerGuess", description="Producer as typed by the user")
    name_guess: str = Field("", alias="nameGuess", description="Wine name as typed by the user")
    vintage_guess: str = Field("", alias="vintageGuess", description="Vintage, free text")


class SourceRefOut(BaseModel):
    """Encyclopedia page a match was derived from."""
    title: str
    url: str
    language: SearchLanguage
    snippet: str = ""


class MatchOut(BaseModel):
    """A ranked match in the recognition response."""
    model_config = ConfigDict(populate_by_name=True)

    producer: str
    name: str
    vintage: Optional[int] = None
    confidence: int = Field(..., ge=0, le=100, description="Match confidence (0-100)")
    reasons: list[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias="imageUrl")
    source: Optional[SourceRefOut] = None


class RecognizeResponse(BaseModel):
    """Response from /recognize-wine."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    query_used: str = Field(..., alias="queryUsed")
    matches: list[MatchOut] = Field(default_factory=list)


class DrinkBadgeOut(BaseModel):
    """Drink-window status as shown next to a wine."""
    state: DrinkState
    label: str
    tone: BadgeTone


class WineFields(BaseModel):
    """Editable fields shared by create and update."""
    producer: Optional[str] = None
    name: Optional[str] = None
    vintage: Optional[int] = None
    location: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    rating: Optional[int] = Field(None, ge=0, le=Config.MAX_RATING, description="Star rating (0-5)")
    price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[str] = None
    photo_path: Optional[str] = None
    drink_from_year: Optional[int] = None
    drink_to_year: Optional[int] = None


class WineCreate(WineFields):
    """New wine entry. Producer and name are required (blank after trimming is rejected)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    producer: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=0)


class WineUpdate(WineFields):
    """Partial update; only fields present in the body are written."""


class WineOut(BaseModel):
    """A wine record with its computed drink status."""
    id: int
    producer: str
    name: str
    vintage: Optional[int] = None
    location: Optional[str] = None
    quantity: int
    rating: Optional[int] = None
    price: Optional[float] = None
    purchase_date: Optional[str] = None
    photo_path: Optional[str] = None
    drink_from_year: Optional[int] = None
    drink_to_year: Optional[int] = None
    created_at: Optional[str] = None
    drink_status: DrinkBadgeOut


class QuantityUpdate(BaseModel):
    """New bottle count (negative values are stored as 0)."""
    quantity: int


class DrinkWindowPreset(BaseModel):
    """Quick drink-window preset: now+1, now+3, now+5 or clear."""
    preset: str
