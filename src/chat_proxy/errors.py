"""Error values and the boundary that turns them into HTTP responses."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from fastapi.responses import JSONResponse


@dataclass(frozen=True)
class ValidationFailure:
    """First constraint an inbound request body violated."""

    field: str
    reason: str

    @property
    def message(self) -> str:
        return f'"{self.field}" {self.reason}'


@dataclass(frozen=True)
class UpstreamError:
    """Failure reported by, or while talking to, the upstream LLM API."""

    status: Optional[int]
    status_text: Optional[str]
    body: Any
    message: str

    def as_log_dict(self) -> dict:
        return {
            "status": self.status,
            "statusText": self.status_text,
            "data": self.body,
            "message": self.message,
        }


def classify_error(error_message: str, status_code: Optional[int] = None) -> str:
    """Classify an upstream failure into a client-safe message."""
    error_lower = error_message.lower()

    if status_code == 401:
        return "Invalid upstream API key. Please check the proxy configuration."
    elif status_code == 403:
        return "Upstream API access forbidden."
    elif status_code == 404:
        return "Upstream endpoint or model not found."
    elif status_code == 429:
        return "Rate limit exceeded. Please try again later."
    elif status_code == 400 or status_code == 422:
        return "Upstream rejected the request. Please check your input parameters."
    elif status_code is not None and status_code >= 500:
        return "Upstream server error. Please try again later."
    elif "timeout" in error_lower or "timed out" in error_lower:
        return "Request timeout. Please try again."
    elif "connect" in error_lower:
        return "Connection error. Could not reach the upstream API."
    elif "json" in error_lower:
        return "Upstream returned a malformed response."
    else:
        return "An error occurred while processing your request."


def error_status(error: UpstreamError) -> int:
    """HTTP status returned to the caller for an upstream failure."""
    if error.status is not None and 400 <= error.status <= 599:
        return error.status
    return 500


def error_response(error: Union[ValidationFailure, UpstreamError]) -> JSONResponse:
    """Map an error value to the client-facing JSON envelope."""
    if isinstance(error, ValidationFailure):
        return JSONResponse(status_code=400, content={"error": error.message})

    status = error_status(error)
    return JSONResponse(
        status_code=status,
        content={
            "error": {
                "status": status,
                "message": classify_error(error.message, error.status),
            }
        },
    )
