"""Data models for the chat completion proxy."""

from .chat import ChatCompletionRequest, ChatMessage, ChatTemplateKwargs, ClientResponse
from .upstream import UpstreamRequest

__all__ = [
    "ChatCompletionRequest",
    "ChatMessage",
    "ChatTemplateKwargs",
    "ClientResponse",
    "UpstreamRequest",
]
