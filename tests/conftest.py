import io
from typing import Dict, List, Optional, Tuple

import numpy as np
import pytest
from PIL import Image

from idphoto.codec.model import ImageMetadata
from idphoto.errors import CodecError


def jpeg_like(size: int) -> bytes:
    """Opaque buffer of exactly `size` bytes framed by SOI/EOI markers."""
    assert size >= 4
    return b"\xff\xd8" + b"\x00" * (size - 4) + b"\xff\xd9"


class FakeCodec:
    """
    Deterministic ImageCodec: the output size of each quality is scripted,
    every call is recorded.
    """

    def __init__(self, width: int = 3000, height: int = 4200, fmt: str = "jpeg",
                 sizes: Optional[Dict[int, int]] = None, default_size: int = 50_000,
                 resize_size: int = 9_000, fail_probe: bool = False,
                 encode_error: Optional[Exception] = None, output: Optional[bytes] = None):
        self.meta = ImageMetadata(width=width, height=height, format=fmt)
        self.sizes = sizes or {}
        self.default_size = default_size
        self.resize_size = resize_size
        self.fail_probe = fail_probe
        self.encode_error = encode_error
        self.output = output

        self.encode_calls: List[int] = []
        self.resize_calls: List[Tuple[int, int, int]] = []

    def probe_metadata(self, data: bytes) -> ImageMetadata:
        if self.fail_probe:
            raise CodecError("cannot identify image file")
        return self.meta

    def encode_jpeg(self, data: bytes, quality: int) -> bytes:
        self.encode_calls.append(quality)
        if self.encode_error is not None:
            raise self.encode_error
        if self.output is not None:
            return self.output
        return jpeg_like(self.sizes.get(quality, self.default_size))

    def resize_and_encode_jpeg(self, data: bytes, width: int, height: int, quality: int) -> bytes:
        self.resize_calls.append((width, height, quality))
        return jpeg_like(self.resize_size)


def make_image_bytes(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB",
                     color=(200, 180, 160), noise: bool = False) -> bytes:
    if noise:
        rng = np.random.default_rng(0)
        arr = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
        img = Image.fromarray(arr, "RGB")
    else:
        img = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    if fmt == "JPEG":
        img.save(buf, fmt, quality=95)
    else:
        img.save(buf, fmt)
    return buf.getvalue()


@pytest.fixture
def fake_codec():
    return FakeCodec()


@pytest.fixture
def valid_photo() -> bytes:
    return make_image_bytes(300, 420)


@pytest.fixture
def small_photo() -> bytes:
    return make_image_bytes(200, 200)
