"""Validation helpers for Recall configuration."""

from pydantic import ValidationError as PydanticValidationError


def flatten_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into one message per field.

    Args:
        exc: Pydantic ValidationError exception

    Returns:
        Messages of the form ``Field 'llm.timeout': <reason>``; value errors
        also echo the rejected input.

    Example:
        >>> try:
        ...     RecallConfig(search_limit=0)
        ... except ValidationError as e:
        ...     flatten_pydantic_errors(e)
        ["Field 'search_limit': Value error, search_limit must be positive ..."]
    """
    errors: list[str] = []

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(item) for item in loc) if loc else "unknown"
        msg = error.get("msg", "Unknown error")

        if error.get("type") == "value_error":
            input_val = error.get("input")
            errors.append(f"Field '{field_path}': {msg} (received: {input_val!r})")
        else:
            errors.append(f"Field '{field_path}': {msg}")

    return errors if errors else ["Validation failed with unknown error"]
