"""Consistent API response helpers.

Returns plain dicts (not Flask Response objects) because Flask-RESTX
handles JSON serialisation automatically.
"""


def success_response(data, status_code: int = 200):
    """Return ``{"status": "success", "data": data}`` with an HTTP status code."""
    return {"status": "success", "data": data}, status_code


def error_response(
    message: str,
    error_code: str = "INTERNAL_ERROR",
    status_code: int = 500,
    details=None,
):
    """Return a standardised error dict with HTTP status code.

    ``details`` is included only when non-empty (pydantic error lists,
    missing-field maps, etc.).
    """
    body = {
        "status": "error",
        "error_code": error_code,
        "message": message,
    }
    if details:
        body["details"] = details
    return body, status_code
