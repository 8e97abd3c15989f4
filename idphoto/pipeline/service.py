from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from idphoto.codec.ports import ImageCodec
from idphoto.encoder.service import SizeBoundedEncoder
from idphoto.errors import CodecError, PhotoProcessingError, ValidationError
from idphoto.logging import get_logger
from idphoto.pipeline.model import PhotoInput, PipelineConfig, ProcessingResult, ValidationResult
from idphoto.pipeline.reporter import NoOpReporter, Reporter
from idphoto.signature.service import SignatureAppender

logger = get_logger("PhotoPipeline")


class PhotoPipeline:
    """
    Core use case: validate → compress under target size → sign.
    Stateless between calls; safe to share across threads for independent inputs.
    """

    def __init__(
        self,
        codec: ImageCodec,
        config: Optional[PipelineConfig] = None,
        reporter: Optional[Reporter] = None,
    ):
        """
        :param codec: Any implementation of ImageCodec (e.g., PillowImageCodec)
        :param config: thresholds and trailer contents; defaults to the reference configuration
        :param reporter: progress callbacks; silent by default
        """
        self.codec = codec
        self.config = config or PipelineConfig()
        self.reporter: Reporter = reporter or NoOpReporter()
        self.encoder = SizeBoundedEncoder(codec, self.config)
        self.appender = SignatureAppender(self.config)

    def validate(self, data: bytes) -> ValidationResult:
        try:
            meta = self.codec.probe_metadata(data)
        except CodecError as e:
            return ValidationResult(valid=False, error=f"cannot read photo: {e}")

        cfg = self.config
        if meta.width < cfg.min_width or meta.height < cfg.min_height:
            return ValidationResult(
                valid=False,
                width=meta.width,
                height=meta.height,
                format=meta.format,
                error=(
                    f"photo dimensions {meta.width}x{meta.height} are too small, "
                    f"at least {cfg.min_width}x{cfg.min_height} pixels required"
                ),
            )
        return ValidationResult(valid=True, width=meta.width, height=meta.height, format=meta.format)

    def _run(self, data: bytes) -> bytes:
        validation = self.validate(data)
        if not validation.valid:
            raise ValidationError(validation.error or "invalid photo")
        self.reporter.on_validated(validation.width, validation.height, validation.format or "unknown")

        photo = PhotoInput(
            data=data,
            format=validation.format or "unknown",
            width=validation.width,
            height=validation.height,
        )
        encoded = self.encoder.encode(photo, self.config.target_size)
        self.reporter.on_encoded(encoded.size, self.config.target_size)

        signed = self.appender.append(encoded.data)
        self.reporter.on_signed(signed.size)
        return signed.data

    def process(self, data: bytes) -> ProcessingResult:
        """
        Runs the full pipeline on one photo (bytes → signed JPEG bytes).
        Never raises: every failure becomes ProcessingResult(success=False).
        """
        try:
            output = self._run(data)
        except PhotoProcessingError as e:
            logger.error(f"PhotoPipeline.process failed: {e.reason}")
            self.reporter.on_failed(e.reason)
            return ProcessingResult.failed(e.reason)
        except Exception as e:
            logger.exception("Unexpected error while processing photo")
            reason = f"processing failed: {e}"
            self.reporter.on_failed(reason)
            return ProcessingResult.failed(reason)
        return ProcessingResult.ok(output)

    def process_file(
        self, input_path: Union[str, Path], output_path: Union[str, Path] = "photo.jpg"
    ) -> ProcessingResult:
        """
        Reads a photo from disk, processes it and writes the signed JPEG.
        The output file is only written on success.
        """
        try:
            data = Path(input_path).read_bytes()
        except OSError as e:
            logger.error(f"Cannot read {input_path}: {e}")
            return ProcessingResult.failed(f"cannot read file: {e}")

        result = self.process(data)
        if not result.success:
            return result

        try:
            out = Path(output_path)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(result.output)
        except OSError as e:
            logger.error(f"Cannot write {output_path}: {e}")
            return ProcessingResult.failed(f"cannot write file: {e}")
        return ProcessingResult(success=True, output=result.output, output_path=str(output_path))
