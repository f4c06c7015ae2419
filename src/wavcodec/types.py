"""Core data types for the WAV codec."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

import numpy as np
from numpy.typing import ArrayLike, NDArray

ChannelData: TypeAlias = NDArray[np.float32]
ChannelList: TypeAlias = list[ChannelData]

DEFAULT_SAMPLE_RATE = 16000
DEFAULT_BIT_DEPTH = 16
DEFAULT_FLOAT_BIT_DEPTH = 32


@dataclass(frozen=True)
class FormatDescriptor:
    """Audio format parameters carried by a ``fmt `` chunk.

    ``block_size`` is expected to equal ``channels * bit_depth / 8``. Files
    that break this are still decoded; see ``wavcodec.validation``.
    """

    floating_point: bool
    channels: int
    sample_rate: int
    byte_rate: int
    block_size: int
    bit_depth: int

    @classmethod
    def for_samples(
        cls,
        channels: int,
        sample_rate: int,
        bit_depth: int,
        floating_point: bool = False,
    ) -> "FormatDescriptor":
        """Build a consistent descriptor, deriving block size and byte rate."""
        bytes_per_sample = bit_depth // 8
        return cls(
            floating_point=floating_point,
            channels=channels,
            sample_rate=sample_rate,
            byte_rate=sample_rate * channels * bytes_per_sample,
            block_size=channels * bytes_per_sample,
            bit_depth=bit_depth,
        )

    @property
    def format_code(self) -> int:
        """WAVE format tag: 3 for IEEE float, 1 for integer PCM."""
        return 0x0003 if self.floating_point else 0x0001

    @property
    def bytes_per_sample(self) -> int:
        return self.bit_depth // 8


@dataclass
class AudioData:
    """Decoded audio: a sample rate and one normalized array per channel."""

    sample_rate: int
    """Sample rate in Hz, as declared by the file."""

    channel_data: ChannelList = field(default_factory=list)
    """One float32 array per channel, all of the same length."""

    @property
    def num_channels(self) -> int:
        return len(self.channel_data)

    @property
    def num_frames(self) -> int:
        return len(self.channel_data[0]) if self.channel_data else 0

    @property
    def duration(self) -> float:
        """Length of the audio in seconds."""
        if self.sample_rate == 0:
            return 0.0
        return self.num_frames / self.sample_rate


OPTION_KEYS = {
    "sample_rate": "sample_rate",
    "sampleRate": "sample_rate",
    "bit_depth": "bit_depth",
    "bitDepth": "bit_depth",
    "floating_point": "floating_point",
    "floatingPoint": "floating_point",
    "float": "floating_point",
}


def option_fields(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map option keys in any accepted spelling onto EncodeOptions field names.

    Only fields present in ``options`` appear in the result. When several
    spellings of one field are given, a non-None value wins, and the float
    flag is set if any of its spellings is truthy. Unknown keys are ignored.
    """
    fields: dict[str, Any] = {}
    for key, value in options.items():
        name = OPTION_KEYS.get(key)
        if name is None:
            continue
        if name == "floating_point":
            fields[name] = bool(fields.get(name)) or bool(value)
        elif value is not None or name not in fields:
            fields[name] = value
    return fields


@dataclass(frozen=True)
class EncodeOptions:
    """Options for encoding a WAV file.

    Zero or ``None`` fields fall back to their defaults when resolved:
    16000 Hz, and 16 bits for integer PCM or 32 bits for IEEE float.
    """

    sample_rate: int | None = DEFAULT_SAMPLE_RATE
    bit_depth: int | None = None
    floating_point: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "EncodeOptions":
        """Build options from a plain mapping.

        Both snake_case keys and the camelCase spellings used by other WAV
        tooling (``sampleRate``, ``bitDepth``, ``floatingPoint``, ``float``)
        are accepted.
        """
        fields = option_fields(options)
        return cls(
            sample_rate=fields.get("sample_rate"),
            bit_depth=fields.get("bit_depth"),
            floating_point=bool(fields.get("floating_point")),
        )

    def resolve(self) -> "EncodeOptions":
        """Return a copy with every default filled in."""
        sample_rate = int(self.sample_rate or 0) or DEFAULT_SAMPLE_RATE
        if self.floating_point:
            bit_depth = int(self.bit_depth or 0) or DEFAULT_FLOAT_BIT_DEPTH
        else:
            bit_depth = int(self.bit_depth or 0) or DEFAULT_BIT_DEPTH
        return EncodeOptions(
            sample_rate=sample_rate,
            bit_depth=bit_depth,
            floating_point=self.floating_point,
        )


def as_channel_list(channel_data: ArrayLike | list[ArrayLike]) -> list[NDArray[np.float64]]:
    """Coerce caller channel data into a list of 1-D float64 arrays.

    A 2-D array is read as ``(channels, frames)``.
    """
    if isinstance(channel_data, np.ndarray):
        if channel_data.ndim == 1:
            return [channel_data.astype(np.float64)]
        return [np.asarray(row, dtype=np.float64) for row in channel_data]
    return [np.asarray(channel, dtype=np.float64).reshape(-1) for channel in channel_data]
