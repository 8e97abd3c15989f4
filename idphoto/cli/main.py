# main.py
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from idphoto import logging
from idphoto.batch.service import BatchProcessUseCase
from idphoto.codec.pillow_codec import PillowImageCodec
from idphoto.pipeline.logger import LoggingReporter
from idphoto.pipeline.model import PipelineConfig
from idphoto.pipeline.reporter import NoOpReporter
from idphoto.pipeline.service import PhotoPipeline

DEFAULT_OUTPUT = "photo.jpg"
DEFAULT_OUTPUT_DIR = "signed"


def build_parser() -> argparse.ArgumentParser:
    defaults = PipelineConfig()
    parser = argparse.ArgumentParser(
        prog="idphoto",
        description="Compress an ID photo under a size limit and append the signature block.",
    )
    parser.add_argument("input", help="input photo, or a directory of photos")
    parser.add_argument("output", nargs="?", default=None,
                        help=f"output file (default {DEFAULT_OUTPUT}); a directory when INPUT is one "
                             f"(default {DEFAULT_OUTPUT_DIR}/)")
    parser.add_argument("--target-size", type=int, default=defaults.target_size,
                        help="soft upper bound on output size in bytes (default %(default)s)")
    parser.add_argument("--min-width", type=int, default=defaults.min_width)
    parser.add_argument("--min-height", type=int, default=defaults.min_height)
    parser.add_argument("--payload", default=defaults.payload.decode("ascii"),
                        help="ASCII signature payload (default %(default)s)")
    parser.add_argument("--jobs", type=int, default=None, help="worker processes for directory input")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log errors")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log every quality attempt")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.quiet:
        logging.configure("ERROR")
    elif args.verbose:
        logging.configure("DEBUG")
    else:
        logging.configure()

    try:
        config = PipelineConfig(
            min_width=args.min_width,
            min_height=args.min_height,
            target_size=args.target_size,
            payload=args.payload.encode("ascii"),
        )
    except (ValueError, UnicodeEncodeError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 1

    reporter = NoOpReporter() if args.quiet else LoggingReporter()
    input_path = Path(args.input)

    if not input_path.exists():
        print(f"error: file does not exist: {input_path}", file=sys.stderr)
        return 1

    if input_path.is_dir():
        use_case = BatchProcessUseCase(config=config, reporter=reporter, n_jobs=args.jobs)
        results = use_case.run(str(input_path), args.output or DEFAULT_OUTPUT_DIR)
        failed = [(path, r) for path, r in results if not r.success]
        for path, r in failed:
            print(f"✗ {path}: {r.error}", file=sys.stderr)
        return 1 if failed else 0

    pipeline = PhotoPipeline(PillowImageCodec(), config, reporter)
    result = pipeline.process_file(input_path, args.output or DEFAULT_OUTPUT)
    if not result.success:
        print(f"✗ {result.error}", file=sys.stderr)
        return 1
    if not args.quiet:
        print(f"✓ {result.output_path} ({result.size} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
