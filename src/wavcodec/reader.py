"""WAV container reader.

Decodes a complete RIFF/WAVE document held in memory into per-channel
normalized float32 arrays.
"""

import logging
from pathlib import Path
from typing import Any

import numpy as np

from wavcodec.formats import SampleFormat, decode_samples
from wavcodec.riff import (
    DATA_ID,
    FMT_ID,
    InvalidContainerError,
    MissingDataChunkError,
    MissingFormatChunkError,
    RiffError,
    check_riff_header,
    iter_chunks,
    parse_fmt_chunk,
)
from wavcodec.types import AudioData, FormatDescriptor

logger = logging.getLogger(__name__)


def as_byte_view(buffer: Any) -> memoryview:
    """Return a flat byte view over any buffer-protocol object.

    Slices and memoryviews into larger allocations keep their window: offset
    zero of the returned view is the first byte of the window, not of the
    underlying allocation.
    """
    if isinstance(buffer, np.ndarray):
        buffer = np.ascontiguousarray(buffer)
    view = memoryview(buffer)
    if view.ndim != 1 or view.format != "B":
        view = view.cast("B")
    return view


def decode(buffer: Any) -> AudioData:
    """Decode a WAV file held in memory.

    Chunks other than ``fmt `` and ``data`` are skipped. Decoding stops at the
    first ``data`` chunk; anything after it is never inspected.

    Args:
        buffer: The whole file as ``bytes``, ``bytearray``, ``memoryview`` or
            a numpy array.

    Returns:
        AudioData with the file's sample rate and one float32 array per
        channel.

    Raises:
        InvalidContainerError: If the buffer is not a RIFF/WAVE document.
        UnsupportedFormatError: If the format code or bit depth has no codec.
        MissingFormatChunkError: If ``data`` comes before ``fmt ``.
        MissingDataChunkError: If there is no ``data`` chunk.
    """
    view = as_byte_view(buffer)
    check_riff_header(view)

    fmt: FormatDescriptor | None = None
    for chunk in iter_chunks(view):
        if chunk.tag == FMT_ID:
            fmt = parse_fmt_chunk(view, chunk)
            logger.debug("Parsed fmt chunk: %s", fmt)
        elif chunk.tag == DATA_ID:
            if fmt is None:
                raise MissingFormatChunkError('Missing "fmt " chunk before "data" chunk')
            return _decode_data(view, chunk.offset, chunk.size, fmt)
        else:
            logger.debug("Skipping %r chunk (%d bytes)", chunk.name, chunk.size)

    raise MissingDataChunkError('No "data" chunk found in WAV file')


def _decode_data(view: memoryview, offset: int, size: int, fmt: FormatDescriptor) -> AudioData:
    """Decode the payload of a ``data`` chunk with the given format."""
    sample_format = SampleFormat.from_params(fmt.bit_depth, fmt.floating_point)
    if fmt.block_size == 0:
        raise InvalidContainerError("fmt chunk declares a block size of zero")

    frames = size // fmt.block_size

    # Never read past the end of the buffer, even if the chunk size says so
    available = max(len(view) - offset, 0)
    frame_width = fmt.channels * sample_format.sample_width
    if frame_width:
        frames = min(frames, available // frame_width)

    channel_data = decode_samples(sample_format, view[offset:], fmt.channels, frames)
    logger.debug(
        "Decoded %d frames x %d channels (%s) at %d Hz",
        frames,
        fmt.channels,
        sample_format.value,
        fmt.sample_rate,
    )
    return AudioData(sample_rate=fmt.sample_rate, channel_data=channel_data)


def read_format(buffer: Any) -> FormatDescriptor:
    """Return the format of a WAV file without decoding its samples.

    The descriptor is the one ``decode`` would use: the last ``fmt `` chunk
    before the first ``data`` chunk, or the last ``fmt `` chunk in a file
    without audio data.

    Raises:
        InvalidContainerError: If the buffer is not a RIFF/WAVE document.
        UnsupportedFormatError: If the format code is not PCM or IEEE float.
        MissingFormatChunkError: If no ``fmt `` chunk precedes the ``data``
            chunk.
    """
    view = as_byte_view(buffer)
    check_riff_header(view)

    fmt: FormatDescriptor | None = None
    for chunk in iter_chunks(view):
        if chunk.tag == FMT_ID:
            fmt = parse_fmt_chunk(view, chunk)
        elif chunk.tag == DATA_ID:
            break

    if fmt is None:
        raise MissingFormatChunkError('No "fmt " chunk found in WAV file')
    return fmt


def data_chunk_size(buffer: Any) -> int | None:
    """Return the declared size of the first ``data`` chunk, if any."""
    view = as_byte_view(buffer)
    check_riff_header(view)

    for chunk in iter_chunks(view):
        if chunk.tag == DATA_ID:
            return chunk.size
    return None


def read_wav(path: Path | str) -> AudioData:
    """Read and decode a WAV file from disk.

    Args:
        path: Path to the WAV file.

    Returns:
        The decoded AudioData.

    Raises:
        RiffError: If the file cannot be opened or is not a valid WAV file.
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise RiffError(f"File not found: {path}") from e
    except OSError as e:
        raise RiffError(f"Cannot open file: {path}") from e

    return decode(data)
