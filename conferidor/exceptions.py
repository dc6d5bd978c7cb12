"""
Exception types raised across the receipt verification pipeline.
"""

from typing import Optional


class ConferidorError(Exception):
    """Base class for all errors raised by this package."""


class InvalidBetError(ConferidorError, ValueError):
    """A bet contains a negative or non-integer number."""


class InvalidImageError(ConferidorError, ValueError):
    """The uploaded file is empty or cannot be decoded as an image."""


class TextExtractionError(ConferidorError):
    """The OCR provider failed to read the image."""


class ReceiptExtractionError(ConferidorError):
    """The language model failed to return usable receipt data."""


class ContestNotFoundError(ConferidorError):
    """The results service has no draw for the requested variant and contest."""

    def __init__(self, variant: str, contest: int):
        self.variant = variant
        self.contest = contest
        super().__init__(f"O concurso {contest} para o jogo '{variant}' não foi encontrado.")


class ResultServiceError(ConferidorError):
    """The results service could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
