"""Utility functions for the chat completion proxy."""

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def get_current_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def extract_proxy_auth_key(headers: Mapping[str, Any]) -> Optional[str]:
    """
    Extract the proxy access key from request headers.
    Priority: api-key > x-api-key > Authorization Bearer
    """
    if auth_key := headers.get("api-key"):
        return auth_key

    if auth_key := headers.get("x-api-key"):
        return auth_key

    auth_header = headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]

    return None


def validate_api_key(client_key: Optional[str], expected_key: Optional[str]) -> bool:
    """Validate client API key against expected key."""
    if expected_key is None:
        # No validation required if no expected key is set
        return True

    if client_key is None:
        return False

    return client_key == expected_key
