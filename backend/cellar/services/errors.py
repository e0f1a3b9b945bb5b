"""
Error taxonomy for wine recognition.

InvalidInput is surfaced to the client as a 400. UpstreamUnavailable is
raised by the encyclopedia client and recovered by the recognition service,
which treats the failed source as having returned nothing.
"""


class RecognitionError(Exception):
    """Base class for recognition errors."""


class InvalidInput(RecognitionError):
    """The request cannot be searched (producer and name both blank)."""


class UpstreamUnavailable(RecognitionError):
    """An external search or image source failed or timed out."""

    def __init__(self, message: str, language: str = ""):
        super().__init__(message)
        self.language = language
