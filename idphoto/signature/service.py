# core/signature_service.py
from __future__ import annotations
from typing import Optional

from idphoto.errors import MalformedImageError
from idphoto.pipeline.model import EncodedImage, PipelineConfig
from idphoto.signature.model import END_OF_IMAGE, SignatureBlock


def find_end_of_image(data: bytes) -> int:
    """
    Offset just past the last FF D9 in data, or -1 when there is none.
    """
    pos = data.rfind(END_OF_IMAGE)
    return -1 if pos < 0 else pos + len(END_OF_IMAGE)


def strip_signature(data: bytes) -> bytes:
    """Drop everything after the last end-of-image marker."""
    end = find_end_of_image(data)
    if end < 0:
        raise MalformedImageError("invalid JPEG: end-of-image marker (FF D9) not found")
    return data[:end]


def read_signature(data: bytes, marker: Optional[bytes] = None) -> Optional[SignatureBlock]:
    """
    Parse the trailer after the last end-of-image marker.
    Returns None when there is no trailer, it is malformed, or its marker
    differs from the one given.
    """
    end = find_end_of_image(data)
    if end < 0:
        return None
    try:
        block = SignatureBlock.parse(data[end:])
    except ValueError:
        return None
    if marker is not None and block.marker != marker:
        return None
    return block


class SignatureAppender:
    """
    Appends the fixed signature block right after the JPEG end-of-image marker.
    Anything already trailing the last marker (an earlier signature included)
    is discarded, so signing twice still leaves a single trailer.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        config = config or PipelineConfig()
        self.block = SignatureBlock(marker=config.marker, payload=config.payload)
        self._trailer = self.block.to_bytes()

    def append(self, jpeg: bytes) -> EncodedImage:
        if len(jpeg) < len(END_OF_IMAGE):
            raise MalformedImageError(f"invalid JPEG: buffer too short ({len(jpeg)} bytes)")
        return EncodedImage(strip_signature(jpeg) + self._trailer)
