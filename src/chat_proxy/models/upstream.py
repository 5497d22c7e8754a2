"""Upstream (OpenAI-compatible) chat completions request format."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .chat import ChatMessage, ChatTemplateKwargs


class UpstreamRequest(BaseModel):
    """Body POSTed to the upstream API. Built by ``convert_request`` only."""

    model: str
    messages: List[ChatMessage]
    max_tokens: int
    stream: bool = False
    n: int = 1
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    reasoning_budget: Optional[int] = None
    seed: Optional[int] = None
    chat_template_kwargs: Optional[ChatTemplateKwargs] = Field(default=None)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body with absent optional fields left out rather than nulled."""
        return self.model_dump(exclude_none=True)
