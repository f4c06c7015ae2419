from wavcodec.formats import SampleFormat


def validate_positive_integer(type_: object, value: int | None) -> None:
    """Validate that an optional integer is positive."""
    if value is not None and value <= 0:
        raise ValueError("Must be a positive integer")


def validate_bit_depth(type_: object, value: int | None) -> None:
    """Validate that a bit depth belongs to at least one sample format."""
    if value is None:
        return

    depths = sorted({fmt.bit_depth for fmt in SampleFormat})
    if value not in depths:
        raise ValueError(f"Bit depth must be one of {depths}")
