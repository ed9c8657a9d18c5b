"""Utility functions for roll bot Lambda handlers."""


def extract_user_id(headers: dict[str, str]) -> str | None:
    """Extract user ID from request headers.

    Looks for the X-User-Id header (case-insensitive).

    Args:
        headers: Request headers dict

    Returns:
        User ID string or None if not found
    """
    # Headers may be case-insensitive
    for key, value in headers.items():
        if key.lower() == "x-user-id":
            return value
    return None
