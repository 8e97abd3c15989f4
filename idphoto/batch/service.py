# idphoto/batch/service.py
from __future__ import annotations
from typing import List, Optional, Tuple
from collections import Counter
from pathlib import Path
from concurrent.futures import ProcessPoolExecutor
import os
import time

from idphoto.batch.collector import PhotoCollector
from idphoto.codec.pillow_codec import PillowImageCodec
from idphoto.pipeline.model import PipelineConfig, ProcessingResult
from idphoto.pipeline.reporter import NoOpReporter, Reporter
from idphoto.pipeline.service import PhotoPipeline


# --------------------------- Worker function (picklable) ---------------------------

def _process_photo_worker(idx: int, input_path: str, output_path: str,
                          config: PipelineConfig) -> Tuple[int, ProcessingResult, float]:
    """
    Runs the pipeline for a single file and writes the output.
    Returns (idx, result, dt).
    Executed in a separate process.
    """
    t0 = time.perf_counter()
    pipeline = PhotoPipeline(PillowImageCodec(), config)
    result = pipeline.process_file(input_path, output_path)
    return idx, result, time.perf_counter() - t0


class BatchProcessUseCase:
    """
    Signs every photo found under a path, one worker process per photo.
    """

    def __init__(self, config: Optional[PipelineConfig] = None,
                 reporter: Optional[Reporter] = None, n_jobs: Optional[int] = None):
        """
        Args:
            config: pipeline configuration shared by all workers
            reporter: optional progress reporter
            n_jobs: number of worker processes (default: os.cpu_count() or 1)
        """
        self.config = config or PipelineConfig()
        self.reporter: Reporter = reporter or NoOpReporter()
        self.n_jobs = max(1, int(n_jobs or (os.cpu_count() or 1)))

    def output_paths(self, photos: List[Path], output_dir: Path) -> List[Path]:
        """
        <stem>.jpg per photo; stems shared by several inputs (a.jpg, a.png)
        keep their suffix instead: a_jpg.jpg, a_png.jpg.
        """
        stems = Counter(p.stem for p in photos)
        paths = []
        for p in photos:
            if stems[p.stem] > 1:
                paths.append(output_dir / f"{p.stem}_{p.suffix.lstrip('.')}.jpg")
            else:
                paths.append(output_dir / f"{p.stem}.jpg")
        return paths

    def run(self, input_path: str, output_dir: str) -> List[Tuple[str, ProcessingResult]]:
        photos = PhotoCollector().collect(input_path)
        self.reporter.on_collected([str(p) for p in photos])

        out_root = Path(output_dir)
        out_root.mkdir(parents=True, exist_ok=True)

        total = len(photos)
        results: List[Optional[ProcessingResult]] = [None] * total

        with ProcessPoolExecutor(max_workers=self.n_jobs) as executor:
            futures = []
            for idx, (photo, out_path) in enumerate(zip(photos, self.output_paths(photos, out_root))):
                fut = executor.submit(_process_photo_worker, idx, str(photo), str(out_path), self.config)
                futures.append(fut)

            for fut in futures:
                i, result, dt = fut.result()
                results[i] = result
                self.reporter.on_photo_result(str(photos[i]), i + 1, total, result.success,
                                              result.size, result.error, dt)

        n_ok = sum(1 for r in results if r is not None and r.success)
        self.reporter.on_finish(n_ok, total - n_ok)
        return [(str(p), r) for p, r in zip(photos, results)]
