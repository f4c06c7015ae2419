import json
import sys
from pathlib import Path
from typing import Annotated, Any

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from wavcodec.cli.validators import validate_bit_depth, validate_positive_integer
from wavcodec.formats import SampleFormat
from wavcodec.reader import data_chunk_size, decode, read_format
from wavcodec.riff import RiffError
from wavcodec.types import EncodeOptions
from wavcodec.validation import ValidationError, require_valid_format, validate_format
from wavcodec.writer import write_wav

app = App(name="wavcodec", help="Inspect and convert PCM / IEEE float WAV files")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


@app.command
def info(
    file: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
) -> int:
    """
    Display format information about a WAV file.

    Parameters
    ----------
    file: Path
        The path to the .wav file
    output_json: bool
        Output results as JSON (default: False)
    """
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return 1

    try:
        data = file.read_bytes()
        fmt = read_format(data)
        audio = decode(data)
    except RiffError as e:
        print_error(f"Error reading {file}: {e}")
        return 1

    sample_format = SampleFormat.from_params(fmt.bit_depth, fmt.floating_point)
    peaks = [float(np.max(np.abs(ch))) if len(ch) else 0.0 for ch in audio.channel_data]

    summary: dict[str, Any] = {
        "file": str(file),
        "format": sample_format.value,
        "format_code": fmt.format_code,
        "channels": fmt.channels,
        "sample_rate": fmt.sample_rate,
        "byte_rate": fmt.byte_rate,
        "block_size": fmt.block_size,
        "bit_depth": fmt.bit_depth,
        "frames": audio.num_frames,
        "duration_seconds": audio.duration,
        "peaks": peaks,
    }

    if output_json:
        console.print(json.dumps(summary, indent=2))
        return 0

    console.print(f"[bold]WAV file: {file}[/bold]")
    console.print(f"  Format: {sample_format.value} (code 0x{fmt.format_code:04x})")
    console.print(f"  Channels: {fmt.channels}")
    console.print(f"  Sample rate: {fmt.sample_rate} Hz")
    console.print(f"  Bit depth: {fmt.bit_depth}-bit")
    console.print(f"  Block size: {fmt.block_size} bytes")
    console.print(f"  Byte rate: {fmt.byte_rate} bytes/s")
    console.print(f"  Frames: {audio.num_frames:,}")
    console.print(f"  Duration: {audio.duration:.3f}s")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Channel", justify="right")
    table.add_column("Peak", justify="right")
    table.add_column("RMS", justify="right")
    for i, channel in enumerate(audio.channel_data):
        rms = float(np.sqrt(np.mean(channel.astype(np.float64) ** 2))) if len(channel) else 0.0
        table.add_row(str(i), f"{peaks[i]:.4f}", f"{rms:.4f}")
    console.print(table)

    return 0


@app.command
def validate(
    file: Path,
    strict: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
) -> int:
    """
    Validate the RIFF structure and format header of a WAV file.

    Parameters
    ----------
    file: Path
        The path to the .wav file to validate
    strict: bool
        Treat warnings as errors (default: False)
    output_json: bool
        Output results as JSON (default: False)
    """
    results: dict[str, object] = {
        "file": str(file),
        "valid": True,
        "errors": [],
        "warnings": [],
    }

    def fail(message: str) -> int:
        results["valid"] = False
        results["errors"] = [message]
        if output_json:
            console.print(json.dumps(results, indent=2))
        else:
            print_error(f"[FAIL] {message}")
        return 1

    if not file.exists():
        return fail(f"File not found: {file}")

    try:
        data = file.read_bytes()
        fmt = read_format(data)
        data_size = data_chunk_size(data)
    except RiffError as e:
        return fail(f"RIFF error: {e}")

    result = validate_format(fmt)
    errors = list(result.errors)
    warnings = list(result.warnings)
    if data_size is None:
        errors.append('No "data" chunk found')
    elif fmt.block_size and data_size % fmt.block_size:
        warnings.append(
            f"data chunk size {data_size} is not a multiple of block size {fmt.block_size}"
        )

    if strict and warnings:
        errors.extend(f"Strict mode: {w}" for w in warnings)

    results["valid"] = not errors
    results["errors"] = errors
    results["warnings"] = warnings

    if output_json:
        console.print(json.dumps(results, indent=2))
        return 0 if results["valid"] else 1

    if results["valid"]:
        print_success(f"[PASS] {file}")
        console.print(f"  Channels: {fmt.channels}")
        console.print(f"  Sample rate: {fmt.sample_rate} Hz")
        console.print(f"  Bit depth: {fmt.bit_depth}-bit{' float' if fmt.floating_point else ''}")
        for warning in warnings:
            print_warning(f"  [WARN] {warning}")
    else:
        print_error(f"[FAIL] {file}")
        for error in errors:
            console.print(f"  {error}")

    return 0 if results["valid"] else 1


@app.command
def convert(
    source: Path,
    output: Path,
    bit_depth: Annotated[int | None, Parameter(validator=validate_bit_depth)] = None,
    floating_point: Annotated[bool, Parameter(name=["--float"])] = False,
    sample_rate: Annotated[int | None, Parameter(validator=validate_positive_integer)] = None,
    strict: bool = False,
) -> int:
    """
    Re-encode a WAV file with a different sample format.

    The sample rate is only relabelled; no resampling is performed.

    Parameters
    ----------
    source: Path
        The .wav file to read
    output: Path
        Where to write the converted file
    bit_depth: int
        Target bit depth (default: 16, or 32 with --float)
    floating_point: bool
        Write IEEE float samples (default: False)
    sample_rate: int
        Sample rate written to the header (default: same as source)
    strict: bool
        Refuse sources with inconsistent headers (default: False)
    """
    if not source.exists():
        print_error(f"Error: File not found: {source}")
        return 1

    try:
        data = source.read_bytes()
        require_valid_format(read_format(data), strict=strict)
        audio = decode(data)
    except (RiffError, ValidationError) as e:
        print_error(f"Error reading {source}: {e}")
        return 1

    options = EncodeOptions(
        sample_rate=sample_rate or audio.sample_rate,
        bit_depth=bit_depth,
        floating_point=floating_point,
    )

    try:
        written = write_wav(output, audio.channel_data, options)
    except RiffError as e:
        print_error(f"Error writing output: {e}")
        return 1

    resolved = options.resolve()
    target = SampleFormat.from_params(resolved.bit_depth or 0, resolved.floating_point)
    print_success(f"Converted {source} -> {output}")
    console.print(f"  Format: {target.value}")
    console.print(f"  Frames: {audio.num_frames:,} x {audio.num_channels} channels")
    console.print(f"  Size: {written:,} bytes")

    return 0


if __name__ == "__main__":
    sys.exit(app())
