from .enums import (
    SearchLanguage,
    DrinkState,
    BadgeTone,
    CellarSort,
)
from .response import (
    RecognizeRequest,
    SourceRefOut,
    MatchOut,
    RecognizeResponse,
    DrinkBadgeOut,
    WineCreate,
    WineUpdate,
    WineOut,
    QuantityUpdate,
    DrinkWindowPreset,
)

__all__ = [
    "SearchLanguage",
    "DrinkState",
    "BadgeTone",
    "CellarSort",
    "RecognizeRequest",
    "SourceRefOut",
    "MatchOut",
    "RecognizeResponse",
    "DrinkBadgeOut",
    "WineCreate",
    "WineUpdate",
    "WineOut",
    "QuantityUpdate",
    "DrinkWindowPreset",
]
