"""Validation helpers for lbcert configuration."""

from pydantic import ValidationError as PydanticValidationError


def flatten_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Turn a pydantic ValidationError into one readable line per field.

    Example:
        ``Field 'stack_wait_delay': Input should be greater than or equal to 1``
    """
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        lines.append(f"Field '{location}': {error.get('msg', 'invalid value')}")
    return lines or ["Validation failed with unknown error"]
