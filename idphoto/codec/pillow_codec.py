# adapters/pillow_codec.py
from __future__ import annotations
import io

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from idphoto.codec.model import ImageMetadata
from idphoto.errors import CodecError

# Failures Pillow and OpenCV raise for bad or unsupported input
_DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, cv2.error)


class PillowImageCodec:
    """
    Concrete implementation of ImageCodec using PIL + OpenCV.
    Input: raw image bytes (JPEG/PNG/anything Pillow opens)
    Output: baseline JPEG bytes
    """

    def __init__(self, *, optimize: bool = True, background: tuple = (255, 255, 255)):
        self.optimize = optimize
        self.background = tuple(background)

    # ---------- internal helpers ----------

    def _open(self, data: bytes) -> Image.Image:
        pil_img = Image.open(io.BytesIO(data))
        pil_img.load()
        return pil_img

    def _to_rgb(self, pil_img: Image.Image) -> Image.Image:
        """
        Flatten transparency onto the background colour; JPEG has no alpha.
        """
        if pil_img.mode == "P" and "transparency" in pil_img.info:
            pil_img = pil_img.convert("RGBA")
        if pil_img.mode in ("RGBA", "LA"):
            background = Image.new("RGB", pil_img.size, self.background)
            background.paste(pil_img, mask=pil_img.split()[-1])
            return background
        if pil_img.mode != "RGB":
            return pil_img.convert("RGB")
        return pil_img

    def _save_jpeg(self, pil_img: Image.Image, quality: int) -> bytes:
        buf = io.BytesIO()
        pil_img.save(buf, "JPEG", quality=int(quality), optimize=self.optimize)
        return buf.getvalue()

    def _resize(self, pil_img: Image.Image, width: int, height: int) -> Image.Image:
        # PIL → NumPy (RGB) → cv2 → PIL
        img = np.array(pil_img)
        resized = cv2.resize(img, (width, height), interpolation=cv2.INTER_AREA)
        return Image.fromarray(resized)

    # ---------- main API ----------

    def probe_metadata(self, data: bytes) -> ImageMetadata:
        try:
            # Header only; pixel data is not decoded here
            with Image.open(io.BytesIO(data)) as pil_img:
                width, height = pil_img.size
                fmt = (pil_img.format or "unknown").lower()
        except _DECODE_ERRORS as e:
            raise CodecError(str(e) or type(e).__name__) from e
        return ImageMetadata(width=width, height=height, format=fmt)

    def encode_jpeg(self, data: bytes, quality: int) -> bytes:
        try:
            pil_img = self._to_rgb(self._open(data))
            return self._save_jpeg(pil_img, quality)
        except _DECODE_ERRORS as e:
            raise CodecError(str(e) or type(e).__name__) from e

    def resize_and_encode_jpeg(self, data: bytes, width: int, height: int, quality: int) -> bytes:
        if width < 1 or height < 1:
            raise CodecError(f"invalid resize target {width}x{height}")
        try:
            pil_img = self._to_rgb(self._open(data))
            pil_img = self._resize(pil_img, width, height)
            return self._save_jpeg(pil_img, quality)
        except _DECODE_ERRORS as e:
            raise CodecError(str(e) or type(e).__name__) from e
