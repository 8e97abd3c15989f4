# idphoto/pipeline/logger.py
from __future__ import annotations
from typing import List
from pathlib import Path

from idphoto.logging import get_logger
from .reporter import Reporter

_log = get_logger("PhotoPipeline.report")

def _kb(size: int) -> str:
    return f"{size} bytes ({size / 1024:.2f} KB)"

class LoggingReporter(Reporter):
    def on_validated(self, width: int, height: int, fmt: str) -> None:
        _log.info(f"Photo size: {width}x{height}, format: {fmt}")

    def on_encoded(self, size: int, target_size: int) -> None:
        _log.info(f"Compressed: {_kb(size)}, target {_kb(target_size)}")

    def on_signed(self, size: int) -> None:
        _log.info(f"Signed: final size {_kb(size)}")

    def on_failed(self, reason: str) -> None:
        # PhotoPipeline.process already logs the failure at ERROR
        _log.debug(f"Processing failed: {reason}")

    def on_collected(self, photos: List[str]) -> None:
        _log.info(f"Collected {len(photos)} photo(s).")

    def on_photo_result(self, photo: str, idx: int, total: int, success: bool,
                        size: int, error: str | None, seconds: float) -> None:
        status = _kb(size) if success else f"FAILED: {error}"
        _log.info(f"[{Path(photo).name}] {idx}/{total} {status} time={seconds:.2f}s")

    def on_finish(self, n_ok: int, n_failed: int) -> None:
        _log.info(f"Done: {n_ok} ok, {n_failed} failed.")
