"""Conversion between the proxy's API format and the upstream API format."""

from typing import Any, Dict

from .models.chat import ChatCompletionRequest, ChatMessage, ClientResponse
from .models.upstream import UpstreamRequest
from .utils import generate_request_id

OPTIONAL_FIELDS = ("temperature", "top_p", "reasoning_budget", "seed", "chat_template_kwargs")
PASSTHROUGH_FIELDS = ("object", "created", "model", "choices", "usage")


def merge_system_messages(messages):
    """Fold all system messages into one leading system message.

    Non-system messages keep their relative order. Without any system
    message the list is returned as is.
    """
    system_contents = []
    other_messages = []
    for message in messages:
        if message.role == "system":
            system_contents.append(message.content)
        else:
            other_messages.append(message)

    if not system_contents:
        return other_messages
    return [ChatMessage(role="system", content="\n".join(system_contents))] + other_messages


def convert_request(request: ChatCompletionRequest) -> UpstreamRequest:
    """Convert a validated request into the upstream request body."""
    upstream_fields: Dict[str, Any] = {
        "model": request.model,
        "messages": merge_system_messages(request.messages),
        "max_tokens": request.max_tokens,
        "stream": False,
        "n": request.n,
    }
    for field in OPTIONAL_FIELDS:
        value = getattr(request, field)
        if value is not None:
            upstream_fields[field] = value

    return UpstreamRequest(**upstream_fields)


def convert_response(response: Dict[str, Any]) -> ClientResponse:
    """Reshape the upstream response, tagging it with a fresh id."""
    present = {field: response[field] for field in PASSTHROUGH_FIELDS if field in response}
    return ClientResponse(id=generate_request_id(), **present)
