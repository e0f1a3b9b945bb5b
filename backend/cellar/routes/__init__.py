from .recognize import router as recognize_router
from .wines import router as wines_router

__all__ = ["recognize_router", "wines_router"]
