from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    format: str  # lower-case Pillow format name, e.g. "jpeg", "png"
