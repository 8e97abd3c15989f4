from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import Optional

from idphoto.signature.model import END_OF_IMAGE, MAX_PAYLOAD


@dataclass(frozen=True)
class PipelineConfig:
    min_width: int = 295
    min_height: int = 413
    target_size: int = 10 * 1024  # bytes, soft ceiling

    # Trailer
    marker: bytes = b"\xff\x02"
    payload: bytes = b"gjgwy2"

    # Quality sweep: initial_quality, initial_quality - step, ... while > min_quality
    initial_quality: int = 85
    min_quality: int = 10  # exclusive
    quality_step: int = 5

    # Resize fallback
    fallback_quality: int = 85
    oversize_tolerance: float = 1.5

    def __post_init__(self) -> None:
        if self.min_width <= 0 or self.min_height <= 0:
            raise ValueError("min_width and min_height must be > 0")
        if self.target_size <= 0:
            raise ValueError("target_size must be > 0")
        if len(self.marker) != 2:
            raise ValueError("marker must be exactly 2 bytes")
        if self.marker == END_OF_IMAGE:
            raise ValueError("marker must differ from the JPEG end-of-image marker")
        if not self.payload.isascii():
            raise ValueError("payload must be ASCII")
        if len(self.payload) > MAX_PAYLOAD:
            raise ValueError(f"payload must be <= {MAX_PAYLOAD} bytes")
        # Re-signing finds the last FF D9; the marker and length bytes must not form one
        header = self.marker + struct.pack(">H", 2 + len(self.payload))
        if END_OF_IMAGE in header:
            raise ValueError("marker and payload length must not encode the end-of-image marker (FF D9)")
        if not 1 <= self.initial_quality <= 100:
            raise ValueError("initial_quality must be in [1, 100]")
        if self.min_quality < 0 or self.min_quality >= self.initial_quality:
            raise ValueError("min_quality must be >= 0 and < initial_quality")
        if self.quality_step <= 0:
            raise ValueError("quality_step must be > 0")
        if not 1 <= self.fallback_quality <= 100:
            raise ValueError("fallback_quality must be in [1, 100]")
        if self.oversize_tolerance < 1.0:
            raise ValueError("oversize_tolerance must be >= 1.0")

    def quality_steps(self) -> range:
        return range(self.initial_quality, self.min_quality, -self.quality_step)


@dataclass(frozen=True)
class PhotoInput:
    data: bytes
    format: str
    width: int
    height: int


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    width: int = 0
    height: int = 0
    format: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class EncodedImage:
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ProcessingResult:
    success: bool
    output: Optional[bytes] = None
    error: Optional[str] = None
    output_path: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.output) if self.output is not None else 0

    @classmethod
    def ok(cls, output: bytes) -> "ProcessingResult":
        return cls(success=True, output=output)

    @classmethod
    def failed(cls, error: str) -> "ProcessingResult":
        return cls(success=False, error=error)
