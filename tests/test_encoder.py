import math

import pytest

from idphoto.encoder.service import SizeBoundedEncoder
from idphoto.errors import CodecError
from idphoto.pipeline.model import PhotoInput, PipelineConfig

from conftest import FakeCodec

TARGET = 10240
ALL_QUALITIES = list(range(85, 10, -5))


def photo(width=3000, height=4200):
    return PhotoInput(data=b"source", format="jpeg", width=width, height=height)


def test_first_quality_that_fits_wins():
    codec = FakeCodec(sizes={85: 30_000, 80: 12_000, 75: 9_000, 70: 5_000})
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert result.size == 9_000
    assert codec.encode_calls == [85, 80, 75]
    assert codec.resize_calls == []


def test_initial_quality_fits():
    codec = FakeCodec(sizes={85: 4_000})
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert result.size == 4_000
    assert codec.encode_calls == [85]


def test_exact_target_size_fits():
    codec = FakeCodec(sizes={85: TARGET})
    assert SizeBoundedEncoder(codec).encode(photo(), TARGET).size == TARGET
    assert codec.encode_calls == [85]


def test_sweep_stops_above_quality_ten():
    codec = FakeCodec(default_size=12_000)
    SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert codec.encode_calls == ALL_QUALITIES
    assert codec.encode_calls[-1] == 15


def test_small_overage_returned_without_resize():
    codec = FakeCodec(default_size=12_000)
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert result.size == 12_000
    assert codec.resize_calls == []


def test_overage_at_tolerance_boundary_is_not_resized():
    codec = FakeCodec(default_size=int(TARGET * 1.5))
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert result.size == int(TARGET * 1.5)
    assert codec.resize_calls == []


def test_large_overage_resizes_once_at_fallback_quality():
    codec = FakeCodec(default_size=60_000, sizes={15: 40_960}, resize_size=9_500)
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    # scale = sqrt(10240 / 40960) = 0.5
    assert codec.resize_calls == [(1500, 2100, 85)]
    assert result.size == 9_500


def test_resize_result_is_returned_even_if_oversized():
    codec = FakeCodec(default_size=100_000, resize_size=25_000)
    result = SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert len(codec.resize_calls) == 1
    assert result.size == 25_000


def test_resize_dimensions_are_floored():
    codec = FakeCodec(default_size=50_000)
    SizeBoundedEncoder(codec).encode(photo(width=301, height=417), TARGET)
    scale = math.sqrt(TARGET / 50_000)
    assert codec.resize_calls == [(math.floor(301 * scale), math.floor(417 * scale), 85)]


def test_codec_error_propagates_without_retry():
    codec = FakeCodec(encode_error=CodecError("broken stream"))
    with pytest.raises(CodecError, match="broken stream"):
        SizeBoundedEncoder(codec).encode(photo(), TARGET)
    assert codec.encode_calls == [85]


def test_configurable_sweep_and_tolerance():
    config = PipelineConfig(initial_quality=90, min_quality=60, quality_step=10,
                            fallback_quality=70, oversize_tolerance=1.0)
    codec = FakeCodec(default_size=TARGET + 1)
    SizeBoundedEncoder(codec, config).encode(photo(), TARGET)
    assert codec.encode_calls == [90, 80, 70]
    assert len(codec.resize_calls) == 1
    assert codec.resize_calls[0][2] == 70


def test_non_positive_target_rejected():
    with pytest.raises(ValueError):
        SizeBoundedEncoder(FakeCodec()).encode(photo(), 0)
