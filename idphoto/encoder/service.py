from __future__ import annotations
import math
from typing import Optional

from idphoto.codec.ports import ImageCodec
from idphoto.logging import get_logger
from idphoto.pipeline.model import EncodedImage, PhotoInput, PipelineConfig

logger = get_logger("SizeBoundedEncoder")


class SizeBoundedEncoder:
    """
    Drives JPEG output under a byte-size ceiling.

    Quality is swept downward (85, 80, ... 15 by default) and the first
    buffer that fits is returned. When none fits and the last attempt is more
    than oversize_tolerance times the target, the photo is scaled by
    sqrt(target / last_size) and encoded once more at fallback_quality.
    The ceiling is best effort: the fallback result is returned as-is.
    """

    def __init__(self, codec: ImageCodec, config: Optional[PipelineConfig] = None):
        self.codec = codec
        self.config = config or PipelineConfig()

    def encode(self, photo: PhotoInput, target_size: int) -> EncodedImage:
        if target_size <= 0:
            raise ValueError("target_size must be > 0")

        buffer = b""
        for quality in self.config.quality_steps():
            buffer = self.codec.encode_jpeg(photo.data, quality)
            logger.debug(f"quality={quality} size={len(buffer)} target={target_size}")
            if len(buffer) <= target_size:
                return EncodedImage(buffer)

        # Sweep exhausted; buffer is the lowest-quality attempt
        if len(buffer) > target_size * self.config.oversize_tolerance:
            buffer = self._scale_down(photo, target_size, len(buffer))

        if len(buffer) > target_size:
            logger.warning(f"Output exceeds target: {len(buffer)} > {target_size} bytes")
        return EncodedImage(buffer)

    def _scale_down(self, photo: PhotoInput, target_size: int, last_size: int) -> bytes:
        scale = math.sqrt(target_size / last_size)
        new_width = max(1, math.floor(photo.width * scale))
        new_height = max(1, math.floor(photo.height * scale))
        logger.info(
            f"Resizing {photo.width}x{photo.height} -> {new_width}x{new_height} "
            f"(scale={scale:.4f}, last size={last_size})"
        )
        return self.codec.resize_and_encode_jpeg(
            photo.data, new_width, new_height, self.config.fallback_quality
        )
