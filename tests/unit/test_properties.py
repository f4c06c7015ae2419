"""Property-based tests (Hypothesis) for the WAV codec.

These tests verify that:
1. Round-trip preservation: encode -> decode preserves shape and samples
2. Clamping: out-of-range samples encode like the range limits
3. Chunk traversal: unknown chunks never change the decoded result
"""

import struct

import numpy as np
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from wavcodec import SampleFormat, decode, encode_as_bytes


@st.composite
def channel_data_strategy(
    draw: st.DrawFn,
    min_channels: int = 1,
    max_channels: int = 8,
    max_frames: int = 64,
    width: int = 64,
) -> list[np.ndarray]:
    """Generate 1-8 equal-length channels of normalized samples."""
    num_channels = draw(st.integers(min_value=min_channels, max_value=max_channels))
    num_frames = draw(st.integers(min_value=1, max_value=max_frames))
    values = draw(
        st.lists(
            st.floats(
                min_value=-1.0,
                max_value=1.0,
                allow_nan=False,
                allow_infinity=False,
                width=width,
            ),
            min_size=num_channels * num_frames,
            max_size=num_channels * num_frames,
        )
    )
    dtype = np.float32 if width == 32 else np.float64
    array = np.array(values, dtype=dtype).reshape(num_channels, num_frames)
    return list(array)


def _chunk(tag: bytes, payload: bytes) -> bytes:
    return tag + struct.pack("<I", len(payload)) + payload


def _insert_chunk_before_data(wav: bytes, chunk: bytes) -> bytes:
    """Insert a chunk after the fmt chunk of a canonical 44-byte-header file."""
    body = wav[8:36] + chunk + wav[36:]
    return b"RIFF" + struct.pack("<I", len(body)) + body


class TestRoundTripProperties:
    """Round-trip properties of encode/decode."""

    @given(
        channels=channel_data_strategy(),
        sample_rate=st.integers(min_value=1, max_value=192000),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_16bit_roundtrip_within_quantization(
        self, channels: list[np.ndarray], sample_rate: int
    ) -> None:
        """Test 16-bit round trips stay within one quantization step."""
        audio = decode(encode_as_bytes(channels, {"sampleRate": sample_rate, "bitDepth": 16}))

        assert audio.sample_rate == sample_rate
        assert audio.num_channels == len(channels)
        for original, decoded in zip(channels, audio.channel_data, strict=True):
            assert len(decoded) == len(original)
            assert np.max(np.abs(decoded - original)) <= 1 / 32767 + 1e-7

    @given(channels=channel_data_strategy(width=32))
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_float32_roundtrip_is_exact(self, channels: list[np.ndarray]) -> None:
        """Test 32-bit float round trips are bit-identical."""
        wav = encode_as_bytes(channels, {"floatingPoint": True, "bitDepth": 32})
        audio = decode(wav)

        for original, decoded in zip(channels, audio.channel_data, strict=True):
            np.testing.assert_array_equal(decoded, original)

    @given(
        channels=channel_data_strategy(max_channels=4, max_frames=16),
        fmt=st.sampled_from(list(SampleFormat)),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_shape_preserved_for_every_format(
        self, channels: list[np.ndarray], fmt: SampleFormat
    ) -> None:
        """Test channel count and frame count survive every format."""
        wav = encode_as_bytes(channels, bit_depth=fmt.bit_depth, floating_point=fmt.floating_point)
        audio = decode(wav)

        assert len(wav) == 44 + len(channels) * len(channels[0]) * fmt.sample_width
        assert audio.num_channels == len(channels)
        assert audio.num_frames == len(channels[0])
        for decoded in audio.channel_data:
            assert np.all(np.abs(decoded) <= 1.0)


class TestClampingProperties:
    """Clamping properties of the encoder."""

    @given(
        magnitude=st.floats(min_value=1.0, max_value=1e30, allow_nan=False),
        fmt=st.sampled_from(list(SampleFormat)),
    )
    @settings(max_examples=100)
    def test_out_of_range_encodes_as_limit(self, magnitude: float, fmt: SampleFormat) -> None:
        """Test any |x| >= 1 encodes exactly like +/-1."""
        kwargs = {"bit_depth": fmt.bit_depth, "floating_point": fmt.floating_point}
        assert encode_as_bytes([[magnitude, -magnitude]], **kwargs) == encode_as_bytes(
            [[1.0, -1.0]], **kwargs
        )


class TestChunkTraversalProperties:
    """Chunk walker properties."""

    @given(
        channels=channel_data_strategy(max_channels=3, max_frames=16),
        tag=st.sampled_from([b"LIST", b"JUNK", b"bext", b"cue ", b"PAD "]),
        payload=st.binary(max_size=64),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_unknown_chunk_is_skipped(
        self, channels: list[np.ndarray], tag: bytes, payload: bytes
    ) -> None:
        """Test an extra chunk between fmt and data does not change decoding."""
        wav = encode_as_bytes(channels, bit_depth=24)
        with_extra = _insert_chunk_before_data(wav, _chunk(tag, payload))

        expected = decode(wav)
        actual = decode(with_extra)

        assert actual.sample_rate == expected.sample_rate
        for a, b in zip(actual.channel_data, expected.channel_data, strict=True):
            np.testing.assert_array_equal(a, b)
