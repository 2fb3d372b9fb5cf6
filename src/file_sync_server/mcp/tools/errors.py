"""Error response builders for MCP tool handlers.

Structured error responses carry a corrective action so that an agent can
recover (fix a path, pick an existing mapping id) without human help.
"""

import mcp.types as types


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (not_found, validation_error, io_error, server_error)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True

    Examples:
        >>> build_error_response("not_found", "No mapping with id 'docs'", "Use sync_mapping_list to see mapping ids.")
        CallToolResult(content=[TextContent(...)], isError=True)
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


def translate_os_error(error: OSError) -> types.CallToolResult:
    """Translate a filesystem error into a structured error response."""
    match error:
        case FileNotFoundError():
            return build_error_response(
                "not_found",
                str(error),
                "Check that the path exists, or fix it with sync_mapping_add.",
            )
        case PermissionError():
            return build_error_response(
                "permission_denied",
                str(error),
                "Grant the server read/write access to the path and retry.",
            )
        case _:
            return build_error_response(
                "io_error",
                str(error),
                "Check disk space and path validity, then retry.",
            )
