"""Validation of inbound chat completion request bodies."""

from typing import Any, Tuple, Union

from pydantic import ValidationError

from .errors import ValidationFailure
from .models.chat import ChatCompletionRequest
from .result import Err, Ok, Result


def format_location(loc: Tuple[Union[str, int], ...]) -> str:
    """Render a pydantic error location as ``messages[0].role``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "body"


def validate_chat_request(body: Any) -> Result[ChatCompletionRequest, ValidationFailure]:
    """Validate a decoded request body, applying defaults.

    Only the first violated constraint is reported. Pydantic validates fields
    in declaration order, so that is the first rule in schema order.
    """
    if not isinstance(body, dict):
        return Err(ValidationFailure(field="body", reason="must be a JSON object"))

    try:
        request = ChatCompletionRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        return Err(ValidationFailure(field=format_location(first["loc"]), reason=first["msg"]))

    return Ok(request)
