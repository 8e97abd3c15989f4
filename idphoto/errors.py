from __future__ import annotations


class PhotoProcessingError(Exception):
    """Base class for every failure the photo pipeline turns into a result."""

    @property
    def reason(self) -> str:
        return str(self)


class ValidationError(PhotoProcessingError):
    """Input rejected: too small, or its metadata could not be read."""

    def __init__(self, reason: str):
        super().__init__(reason)


class CodecError(PhotoProcessingError):
    """Decode, encode or resize failed inside the image codec."""


class MalformedImageError(PhotoProcessingError):
    """Buffer has no JPEG end-of-image marker (FF D9)."""
