from .candidate_ranker import ScoredMatch, SearchCandidate, rank
from .drink_window import DrinkWindow, classify, render_label
from .encyclopedia import WikipediaClient
from .recognition import WineRecognitionService, get_recognition_service
from .cellar_repository import CellarRepository, get_cellar_repository

__all__ = [
    "ScoredMatch",
    "SearchCandidate",
    "rank",
    "DrinkWindow",
    "classify",
    "render_label",
    "WikipediaClient",
    "WineRecognitionService",
    "get_recognition_service",
    "CellarRepository",
    "get_cellar_repository",
]
