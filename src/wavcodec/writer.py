"""WAV container writer.

Serializes per-channel float samples into a canonical 44-byte-header WAV file
with a single ``fmt `` and a single ``data`` chunk.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from numpy.typing import ArrayLike

from wavcodec.formats import SampleFormat, encode_samples
from wavcodec.riff import RiffError, build_wav_header
from wavcodec.types import (
    OPTION_KEYS,
    EncodeOptions,
    FormatDescriptor,
    as_channel_list,
    option_fields,
)


def _resolve_options(
    options: EncodeOptions | Mapping[str, Any] | None,
    overrides: dict[str, Any],
) -> EncodeOptions:
    if options is None:
        options = EncodeOptions()
    elif not isinstance(options, EncodeOptions):
        options = EncodeOptions.from_mapping(options)

    unknown = sorted(key for key in overrides if key not in OPTION_KEYS)
    if unknown:
        raise TypeError(f"Unknown encode options: {', '.join(unknown)}")

    if overrides:
        merged = {
            "sample_rate": options.sample_rate,
            "bit_depth": options.bit_depth,
            "floating_point": options.floating_point,
        }
        merged.update(option_fields(overrides))
        options = EncodeOptions.from_mapping(merged)

    return options.resolve()


def encode_as_bytes(
    channel_data: ArrayLike | list[ArrayLike],
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> bytes:
    """Encode audio channels as a complete WAV file.

    The frame count is taken from the first channel. Shorter channels are
    padded with silence and longer ones are cut.

    Args:
        channel_data: One sequence of normalized floats per channel, or a
            2-D array shaped ``(channels, frames)``.
        options: Encode options, or a mapping using either snake_case or
            camelCase keys.
        **overrides: Individual option values that take precedence over
            ``options`` (e.g. ``bit_depth=24``).

    Returns:
        The WAV file bytes: 44 header bytes followed by the sample payload.

    Raises:
        UnsupportedFormatError: If the bit depth / float combination has no
            codec (e.g. 24-bit float).
        ValueError: If no channels are given.

    Example:
        >>> wav = encode_as_bytes([[0.0, 0.5, -0.5, 1.0]] * 2, sample_rate=8000)
        >>> len(wav)
        60
    """
    resolved = _resolve_options(options, overrides)
    channels = as_channel_list(channel_data)
    if not channels:
        raise ValueError("At least one channel of audio is required")

    sample_format = SampleFormat.from_params(resolved.bit_depth, resolved.floating_point)

    num_channels = len(channels)
    num_frames = len(channels[0])
    fmt = FormatDescriptor.for_samples(
        channels=num_channels,
        sample_rate=resolved.sample_rate,
        bit_depth=resolved.bit_depth,
        floating_point=resolved.floating_point,
    )

    payload = encode_samples(sample_format, channels, num_frames)
    return build_wav_header(fmt, len(payload)) + payload


def encode(
    channel_data: ArrayLike | list[ArrayLike],
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> bytes:
    """Encode audio channels as WAV bytes. Same as ``encode_as_bytes``."""
    return encode_as_bytes(channel_data, options, **overrides)


def write_wav(
    path: Path | str,
    channel_data: ArrayLike | list[ArrayLike],
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> int:
    """Encode audio channels and write them to a WAV file.

    Returns:
        Number of bytes written.

    Raises:
        RiffError: If the file cannot be written.
        UnsupportedFormatError: If the requested format has no codec.
    """
    path = Path(path)
    wav = encode_as_bytes(channel_data, options, **overrides)

    try:
        path.write_bytes(wav)
    except OSError as e:
        raise RiffError(f"Cannot write file: {path}") from e

    return len(wav)
