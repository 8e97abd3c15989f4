from __future__ import annotations
import struct
from dataclasses import dataclass

END_OF_IMAGE = b"\xff\xd9"

_LENGTH = struct.Struct(">H")
MAX_PAYLOAD = 0xFFFF - _LENGTH.size


@dataclass(frozen=True)
class SignatureBlock:
    """
    Trailer written after the JPEG end-of-image marker:

        marker (2 bytes) | length (uint16, big-endian) | payload (N bytes)

    length counts itself plus the payload, never the marker.
    """
    marker: bytes
    payload: bytes

    def __post_init__(self) -> None:
        if len(self.marker) != 2:
            raise ValueError("marker must be exactly 2 bytes")
        if len(self.payload) > MAX_PAYLOAD:
            raise ValueError(f"payload must be <= {MAX_PAYLOAD} bytes")

    @property
    def length(self) -> int:
        return _LENGTH.size + len(self.payload)

    def to_bytes(self) -> bytes:
        return self.marker + _LENGTH.pack(self.length) + self.payload

    def __len__(self) -> int:
        return len(self.marker) + self.length

    @classmethod
    def parse(cls, data: bytes) -> "SignatureBlock":
        """
        Parse a complete trailer. The buffer must hold exactly one block.
        """
        if len(data) < 4:
            raise ValueError("signature block needs at least 4 bytes")
        (length,) = _LENGTH.unpack_from(data, 2)
        if length < _LENGTH.size or 2 + length != len(data):
            raise ValueError(f"length field {length} does not match block size {len(data)}")
        return cls(marker=bytes(data[:2]), payload=bytes(data[4:]))
