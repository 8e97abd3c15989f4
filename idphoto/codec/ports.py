# idphoto/codec/ports.py
from typing import Protocol

from idphoto.codec.model import ImageMetadata


class ImageCodec(Protocol):
    """
    JPEG codec capability (port).
    Implementations take raw image bytes in any decodable format and
    raise CodecError when the bytes cannot be decoded or re-encoded.
    """
    def probe_metadata(self, data: bytes) -> ImageMetadata: ...

    def encode_jpeg(self, data: bytes, quality: int) -> bytes: ...

    def resize_and_encode_jpeg(self, data: bytes, width: int, height: int, quality: int) -> bytes: ...
