from __future__ import annotations
from typing import List, Protocol

class Reporter(Protocol):
    def on_validated(self, width: int, height: int, fmt: str) -> None: ...
    def on_encoded(self, size: int, target_size: int) -> None: ...
    def on_signed(self, size: int) -> None: ...
    def on_failed(self, reason: str) -> None: ...

    def on_collected(self, photos: List[str]) -> None: ...
    def on_photo_result(self, photo: str, idx: int, total: int, success: bool,
                        size: int, error: str | None, seconds: float) -> None: ...
    def on_finish(self, n_ok: int, n_failed: int) -> None: ...

class NoOpReporter:
    def on_validated(self, width: int, height: int, fmt: str) -> None: pass
    def on_encoded(self, size: int, target_size: int) -> None: pass
    def on_signed(self, size: int) -> None: pass
    def on_failed(self, reason: str) -> None: pass
    def on_collected(self, photos: List[str]) -> None: pass
    def on_photo_result(self, photo: str, idx: int, total: int, success: bool,
                        size: int, error: str | None, seconds: float) -> None: pass
    def on_finish(self, n_ok: int, n_failed: int) -> None: pass
