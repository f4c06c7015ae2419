"""Sample codec table.

Six on-disk sample formats are supported, each with a decoder (raw
little-endian bytes to normalized float32) and an encoder (normalized floats
to raw bytes). Frames are channel-interleaved:
``frame0_ch0, frame0_ch1, ..., frame1_ch0, ...``.

Integer formats use asymmetric divisors so that both ends of the integer
range map exactly onto -1.0 and +1.0:

    negative codes: d / 2**(bits - 1)
    other codes:    d / (2**(bits - 1) - 1)

Encoding mirrors this, truncating toward zero. No dithering is applied.
"""

from collections.abc import Sequence
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from wavcodec.riff import UnsupportedFormatError


class SampleFormat(str, Enum):
    """On-disk sample formats, keyed as ``"pcm" + bits + ("f" if float)``."""

    PCM8 = "pcm8"
    PCM16 = "pcm16"
    PCM24 = "pcm24"
    PCM32 = "pcm32"
    PCM32F = "pcm32f"
    PCM64F = "pcm64f"

    @classmethod
    def from_params(cls, bit_depth: int, floating_point: bool) -> "SampleFormat":
        """Resolve a bit depth and float flag to a sample format.

        Raises:
            UnsupportedFormatError: If the combination has no codec, e.g.
                24-bit float or 12-bit integer.
        """
        key = f"pcm{bit_depth}{'f' if floating_point else ''}"
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported data format: {key}") from None

    @property
    def bit_depth(self) -> int:
        return int(self.value[3:].rstrip("f"))

    @property
    def floating_point(self) -> bool:
        return self.value.endswith("f")

    @property
    def sample_width(self) -> int:
        """Bytes per sample."""
        return self.bit_depth // 8


def _normalize(codes: NDArray[np.int64], bits: int) -> NDArray[np.float32]:
    """Map signed integer codes onto [-1, 1] with asymmetric divisors."""
    values = codes.astype(np.float64)
    full_scale = float(1 << (bits - 1))
    scaled = np.where(values < 0, values / full_scale, values / (full_scale - 1.0))
    return scaled.astype(np.float32)


def _quantize(values: NDArray[np.float64], bits: int) -> NDArray[np.int64]:
    """Map clamped floats onto signed integer codes, truncating toward zero."""
    full_scale = float(1 << (bits - 1))
    scaled = np.where(values < 0, values * full_scale, values * (full_scale - 1.0))
    return np.trunc(scaled).astype(np.int64)


def _clamp(values: NDArray[np.float64]) -> NDArray[np.float64]:
    # NaN has no integer code; it is written as silence
    values = np.nan_to_num(values, nan=0.0, posinf=1.0, neginf=-1.0)
    return np.clip(values, -1.0, 1.0)


def decode_samples(
    fmt: SampleFormat,
    data: bytes | memoryview,
    channels: int,
    frames: int,
) -> list[NDArray[np.float32]]:
    """Decode interleaved sample bytes into one float32 array per channel.

    Args:
        fmt: Sample format of ``data``.
        data: Raw sample bytes starting at the first frame. Bytes past
            ``frames * channels`` samples are ignored.
        channels: Number of interleaved channels.
        frames: Number of frames to decode.

    Returns:
        A list of ``channels`` contiguous arrays, each of length ``frames``.
    """
    fmt = SampleFormat(fmt)
    count = frames * channels
    if count == 0:
        return [np.zeros(frames, dtype=np.float32) for _ in range(channels)]

    if fmt is SampleFormat.PCM8:
        raw = np.frombuffer(data, dtype=np.uint8, count=count)
        samples = _normalize(raw.astype(np.int64) - 128, 8)
    elif fmt is SampleFormat.PCM16:
        raw = np.frombuffer(data, dtype="<i2", count=count)
        samples = _normalize(raw.astype(np.int64), 16)
    elif fmt is SampleFormat.PCM24:
        samples = _normalize(_unpack_int24(data, count), 24)
    elif fmt is SampleFormat.PCM32:
        raw = np.frombuffer(data, dtype="<i4", count=count)
        samples = _normalize(raw.astype(np.int64), 32)
    elif fmt is SampleFormat.PCM32F:
        samples = np.frombuffer(data, dtype="<f4", count=count).astype(np.float32)
    elif fmt is SampleFormat.PCM64F:
        samples = np.frombuffer(data, dtype="<f8", count=count).astype(np.float32)
    else:
        raise UnsupportedFormatError(f"Unsupported data format: {fmt}")

    interleaved = samples.reshape(frames, channels)
    return [np.ascontiguousarray(interleaved[:, ch]) for ch in range(channels)]


def encode_samples(
    fmt: SampleFormat,
    channel_data: Sequence[NDArray[np.float64]],
    frames: int,
) -> bytes:
    """Encode per-channel float samples into interleaved sample bytes.

    Input values are clamped to [-1, 1] first. Channels shorter than
    ``frames`` are padded with silence; longer ones are cut.

    Args:
        fmt: Target sample format.
        channel_data: One float array per channel.
        frames: Number of frames to write.

    Returns:
        Exactly ``frames * len(channel_data) * fmt.sample_width`` bytes.
    """
    fmt = SampleFormat(fmt)
    interleaved = np.zeros((frames, len(channel_data)), dtype=np.float64)
    for ch, channel in enumerate(channel_data):
        n = min(len(channel), frames)
        interleaved[:n, ch] = channel[:n]
    values = _clamp(interleaved.reshape(-1))

    if fmt is SampleFormat.PCM8:
        return (_quantize(values, 8) + 128).astype(np.uint8).tobytes()
    elif fmt is SampleFormat.PCM16:
        return _quantize(values, 16).astype("<i2").tobytes()
    elif fmt is SampleFormat.PCM24:
        return _pack_int24(_quantize(values, 24))
    elif fmt is SampleFormat.PCM32:
        return _quantize(values, 32).astype("<i4").tobytes()
    elif fmt is SampleFormat.PCM32F:
        return values.astype("<f4").tobytes()
    elif fmt is SampleFormat.PCM64F:
        return values.astype("<f8").tobytes()
    raise UnsupportedFormatError(f"Unsupported data format: {fmt}")


def _unpack_int24(data: bytes | memoryview, count: int) -> NDArray[np.int64]:
    """Assemble packed little-endian 24-bit samples into signed integers."""
    raw = np.frombuffer(data, dtype=np.uint8, count=count * 3).reshape(count, 3)
    raw = raw.astype(np.int64)
    codes = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
    # Sign bit set: 0x800000..0xFFFFFF -> -8388608..-1
    return np.where(codes >= 0x800000, codes - 0x1000000, codes)


def _pack_int24(codes: NDArray[np.int64]) -> bytes:
    """Split signed 24-bit codes into three little-endian bytes each."""
    biased = np.where(codes < 0, codes + 0x1000000, codes) & 0xFFFFFF
    packed = np.empty((len(biased), 3), dtype=np.uint8)
    packed[:, 0] = biased & 0xFF
    packed[:, 1] = (biased >> 8) & 0xFF
    packed[:, 2] = (biased >> 16) & 0xFF
    return packed.tobytes()
