"""RIFF/WAVE container primitives.

This module holds the FourCC constants, the error hierarchy shared by the
reader and writer, a lazy chunk walker over an in-memory buffer, and the
packing/unpacking of the 16-byte ``fmt `` chunk body.
"""

import struct
from collections.abc import Iterator
from typing import NamedTuple

from wavcodec.types import FormatDescriptor

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

# Audio format codes
WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003

# RIFF preamble: "RIFF" + size + "WAVE"
RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
FMT_CHUNK_SIZE = 16

# Preamble + fmt header/body + data header
WAV_HEADER_SIZE = RIFF_HEADER_SIZE + CHUNK_HEADER_SIZE + FMT_CHUNK_SIZE + CHUNK_HEADER_SIZE

_FMT_STRUCT = struct.Struct("<HHIIHH")
_CHUNK_HEADER_STRUCT = struct.Struct("<4sI")


class RiffError(Exception):
    """Error reading or writing RIFF files."""


class InvalidContainerError(RiffError):
    """The buffer is not a RIFF/WAVE document."""


class UnsupportedFormatError(RiffError):
    """The sample format has no codec (compressed, or an unknown depth)."""


class MissingFormatChunkError(RiffError):
    """A ``data`` chunk was found before any ``fmt `` chunk."""


class MissingDataChunkError(RiffError):
    """The buffer ended without a ``data`` chunk."""


class Chunk(NamedTuple):
    """Location of one chunk inside a buffer."""

    tag: bytes
    """The raw four-byte chunk identifier."""

    offset: int
    """Offset of the first payload byte (just past the size field)."""

    size: int
    """Declared payload size, as written in the chunk header."""

    @property
    def name(self) -> str:
        """The chunk identifier as a string (one character per byte)."""
        return self.tag.decode("latin-1")

    @property
    def end(self) -> int:
        """Offset where the next chunk header starts."""
        return self.offset + self.size


def check_riff_header(view: memoryview) -> int:
    """Validate the RIFF/WAVE preamble.

    Args:
        view: The whole document as a byte view.

    Returns:
        The RIFF size field. It is informational only and never checked
        against the real buffer length.

    Raises:
        InvalidContainerError: If the ``RIFF`` or ``WAVE`` tags are missing.
    """
    if len(view) < RIFF_HEADER_SIZE:
        raise InvalidContainerError("Buffer too small to be a valid WAV file")

    riff_id, riff_size = _CHUNK_HEADER_STRUCT.unpack_from(view, 0)
    if riff_id != RIFF_ID:
        raise InvalidContainerError(f"Not a RIFF file (found tag {riff_id!r})")

    wave_id = bytes(view[8:12])
    if wave_id != WAVE_ID:
        raise InvalidContainerError(f"Not a WAVE file (found tag {wave_id!r})")

    return riff_size


def iter_chunks(view: memoryview, start: int = RIFF_HEADER_SIZE) -> Iterator[Chunk]:
    """Walk the chunks of a RIFF document.

    Chunks are yielded in file order. The position of the next chunk is
    always ``offset + size``; no word-alignment padding is assumed. Walking
    stops when fewer than eight bytes remain for a chunk header.

    Args:
        view: The whole document as a byte view.
        start: Offset of the first chunk header (just past the preamble).

    Yields:
        One ``Chunk`` per chunk header found.
    """
    pos = start
    end = len(view)
    while pos + CHUNK_HEADER_SIZE <= end:
        tag, size = _CHUNK_HEADER_STRUCT.unpack_from(view, pos)
        chunk = Chunk(tag=tag, offset=pos + CHUNK_HEADER_SIZE, size=size)
        yield chunk
        pos = chunk.end


def parse_fmt_chunk(view: memoryview, chunk: Chunk) -> FormatDescriptor:
    """Parse the body of a ``fmt `` chunk.

    Only the leading 16 bytes are interpreted; extension bytes are ignored.

    Raises:
        UnsupportedFormatError: If the format code is neither PCM nor IEEE float.
        InvalidContainerError: If the chunk body is shorter than 16 bytes.
    """
    available = min(chunk.size, len(view) - chunk.offset)
    if available < 2:
        raise InvalidContainerError("fmt chunk too small")

    format_code = struct.unpack_from("<H", view, chunk.offset)[0]
    if format_code not in (WAVE_FORMAT_PCM, WAVE_FORMAT_IEEE_FLOAT):
        raise UnsupportedFormatError(f"Unsupported format in WAV file: 0x{format_code:04x}")

    if available < FMT_CHUNK_SIZE:
        raise InvalidContainerError(
            f"fmt chunk too small ({available} bytes, expected {FMT_CHUNK_SIZE})"
        )

    _, channels, sample_rate, byte_rate, block_size, bit_depth = _FMT_STRUCT.unpack_from(
        view, chunk.offset
    )
    return FormatDescriptor(
        floating_point=format_code == WAVE_FORMAT_IEEE_FLOAT,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_size=block_size,
        bit_depth=bit_depth,
    )


def build_wav_header(fmt: FormatDescriptor, data_size: int) -> bytes:
    """Build the fixed 44-byte header of a canonical WAV file.

    Args:
        fmt: Format of the samples that follow.
        data_size: Size of the sample payload in bytes.

    Returns:
        ``RIFF``/``WAVE`` preamble, a 16-byte ``fmt `` chunk and the ``data``
        chunk header.
    """
    header = bytearray()

    # RIFF header
    header.extend(RIFF_ID)
    header.extend(struct.pack("<I", WAV_HEADER_SIZE - CHUNK_HEADER_SIZE + data_size))
    header.extend(WAVE_ID)

    # fmt chunk
    header.extend(FMT_ID)
    header.extend(struct.pack("<I", FMT_CHUNK_SIZE))
    header.extend(
        _FMT_STRUCT.pack(
            fmt.format_code,
            fmt.channels,
            fmt.sample_rate,
            fmt.byte_rate,
            fmt.block_size,
            fmt.bit_depth,
        )
    )

    # data chunk header
    header.extend(DATA_ID)
    header.extend(struct.pack("<I", data_size))

    return bytes(header)
