"""WAV (RIFF/WAVE) codec for multi-channel floating-point audio.

Reads linear PCM and IEEE float WAV files into normalized per-channel float32
arrays, and writes such arrays back out as canonical WAV bytes.

Supported sample formats
------------------------
    pcm8    8-bit unsigned integer
    pcm16   16-bit signed integer
    pcm24   24-bit signed integer (packed)
    pcm32   32-bit signed integer
    pcm32f  32-bit IEEE float
    pcm64f  64-bit IEEE float (decode; encode with bit_depth=64, floating_point=True)

Example Usage
-------------
>>> from wavcodec import decode, encode_as_bytes
>>> wav = encode_as_bytes([[0.0, 0.5, -0.5, 1.0]], sample_rate=8000, bit_depth=16)
>>> audio = decode(wav)
>>> audio.sample_rate, audio.num_channels, audio.num_frames
(8000, 1, 4)
"""

from wavcodec.formats import SampleFormat, decode_samples, encode_samples
from wavcodec.reader import decode, read_format, read_wav
from wavcodec.riff import (
    InvalidContainerError,
    MissingDataChunkError,
    MissingFormatChunkError,
    RiffError,
    UnsupportedFormatError,
)
from wavcodec.types import AudioData, EncodeOptions, FormatDescriptor
from wavcodec.validation import ValidationError, ValidationResult, validate_format
from wavcodec.writer import encode, encode_as_bytes, write_wav

__version__ = "0.1.0"

__all__ = [
    # Types
    "AudioData",
    "EncodeOptions",
    "FormatDescriptor",
    "SampleFormat",
    # Reader
    "decode",
    "read_format",
    "read_wav",
    # Writer
    "encode",
    "encode_as_bytes",
    "write_wav",
    # Sample codecs
    "decode_samples",
    "encode_samples",
    # Errors
    "RiffError",
    "InvalidContainerError",
    "UnsupportedFormatError",
    "MissingFormatChunkError",
    "MissingDataChunkError",
    # Validation
    "validate_format",
    "ValidationResult",
    "ValidationError",
]
