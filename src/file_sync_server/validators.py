"""
Input validation functions for sync mapping management.

Checks ids and endpoint paths supplied by tool and CLI callers before they
reach the store, so that invalid mappings never get persisted.
"""


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Mapping id")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_mapping_id(mapping_id: str) -> tuple[bool, str]:
    """
    Validate a mapping id.

    Returns:
        Tuple of (is_valid, error_message).

    Validation rules:
        - Cannot be empty or whitespace-only
        - Cannot contain line breaks
    """
    if not mapping_id or not mapping_id.strip():
        return (
            False,
            format_validation_error("Mapping id", "cannot be empty"),
        )
    if "\n" in mapping_id or "\r" in mapping_id:
        return (
            False,
            format_validation_error(
                "Mapping id", "cannot contain line breaks"
            ),
        )
    return (True, "")


def validate_endpoint(path: str, field_name: str = "Path") -> tuple[bool, str]:
    """
    Validate a mapping source or target path.

    Returns:
        Tuple of (is_valid, error_message).

    Validation rules:
        - Cannot be empty or whitespace-only
        - Cannot contain NUL bytes
    """
    if not path or not path.strip():
        return (False, format_validation_error(field_name, "cannot be empty"))
    if "\x00" in path:
        return (
            False,
            format_validation_error(field_name, "cannot contain NUL bytes"),
        )
    return (True, "")


def validate_mapping_fields(
    mapping_id: str, source: str, target: str
) -> tuple[bool, str]:
    """
    Validate all user-supplied fields of a mapping.

    Returns:
        The first failing ``(False, reason)``, or ``(True, "")``.
    """
    for ok, message in (
        validate_mapping_id(mapping_id),
        validate_endpoint(source, "Source path"),
        validate_endpoint(target, "Target path"),
    ):
        if not ok:
            return (ok, message)
    return (True, "")
