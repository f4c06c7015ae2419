"""Consistency checks for WAV format descriptors.

The reader decodes whatever the ``fmt `` chunk declares. These checks report
headers whose fields disagree with each other, without rejecting the file.
"""

from dataclasses import dataclass

from wavcodec.formats import SampleFormat
from wavcodec.riff import UnsupportedFormatError
from wavcodec.types import FormatDescriptor


class ValidationError(Exception):
    """Error raised when a descriptor fails validation in strict use."""


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


def validate_format(fmt: FormatDescriptor) -> ValidationResult:
    """Validate a format descriptor.

    Errors (the file cannot be decoded):
    - channels == 0
    - block_size == 0
    - no codec for the bit depth / float combination

    Warnings (the file decodes, but the header is inconsistent):
    - block_size != channels * bit_depth / 8
    - byte_rate != sample_rate * block_size
    - sample_rate == 0

    Args:
        fmt: The descriptor to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if fmt.channels == 0:
        errors.append("channels must be > 0")

    if fmt.block_size == 0:
        errors.append("block_size must be > 0")

    try:
        SampleFormat.from_params(fmt.bit_depth, fmt.floating_point)
    except UnsupportedFormatError as e:
        errors.append(str(e))

    expected_block_size = fmt.channels * (fmt.bit_depth // 8)
    if fmt.block_size and fmt.block_size != expected_block_size:
        warnings.append(
            f"block_size is {fmt.block_size}, expected {expected_block_size} "
            f"for {fmt.channels} channels at {fmt.bit_depth} bits"
        )

    expected_byte_rate = fmt.sample_rate * fmt.block_size
    if fmt.byte_rate != expected_byte_rate:
        warnings.append(f"byte_rate is {fmt.byte_rate}, expected {expected_byte_rate}")

    if fmt.sample_rate == 0:
        warnings.append("sample_rate is 0")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)


def require_valid_format(fmt: FormatDescriptor, strict: bool = False) -> None:
    """Raise ValidationError if ``fmt`` fails validation.

    Args:
        fmt: The descriptor to validate.
        strict: Treat warnings as errors.

    Raises:
        ValidationError: If validation fails.
    """
    result = validate_format(fmt)
    if not result.valid:
        raise ValidationError(f"Format validation failed: {result.errors}")
    if strict and result.warnings:
        raise ValidationError(f"Format validation failed (strict): {result.warnings}")
