"""Inbound chat completion API models."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    return value


class ChatMessage(BaseModel):
    """Chat message as accepted from clients."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Literal["system", "user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., min_length=1, description="Message content")


class ChatTemplateKwargs(BaseModel):
    """Options forwarded to the upstream chat template."""

    model_config = ConfigDict(extra="forbid")

    enable_thinking: Optional[bool] = Field(
        default=None, description="Enable thinking/reasoning mode"
    )

    @field_validator("enable_thinking", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class ChatCompletionRequest(BaseModel):
    """/chat/completions request format.

    Fields are declared in the order they are validated; unknown top-level
    keys are ignored. Optional fields may be left out but not sent as null,
    and booleans are not accepted as numbers.
    """

    model_config = ConfigDict(extra="ignore")

    messages: List[ChatMessage] = Field(..., min_length=1, description="Conversation messages")
    model: str = Field(..., min_length=1, description="Model identifier")
    max_tokens: int = Field(default=500, ge=1, description="Maximum tokens to generate")
    temperature: Optional[float] = Field(
        default=None, ge=0.0, allow_inf_nan=False, description="Sampling temperature"
    )
    top_p: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, allow_inf_nan=False, description="Nucleus sampling"
    )
    n: int = Field(default=1, ge=1, description="Number of choices")
    reasoning_budget: Optional[int] = Field(default=None, ge=1, description="Reasoning token budget")
    seed: Optional[int] = Field(default=None, description="Random seed")
    chat_template_kwargs: Optional[ChatTemplateKwargs] = Field(default=None)

    @field_validator("temperature", "top_p", mode="before")
    @classmethod
    def numbers(cls, value: Any) -> Any:
        if isinstance(_reject_null(value), bool):
            raise ValueError("must be a number")
        return value

    @field_validator("max_tokens", "n", "reasoning_budget", "seed", mode="before")
    @classmethod
    def integers(cls, value: Any) -> Any:
        if isinstance(_reject_null(value), bool):
            raise ValueError("must be an integer")
        return value

    @field_validator("chat_template_kwargs", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class ClientResponse(BaseModel):
    """/chat/completions response format.

    Upstream fields are passed through untouched; any the upstream omitted
    stay unset and are left out of the serialized body.
    """

    id: str
    object: Any = None
    created: Any = None
    model: Any = None
    choices: Any = None
    usage: Any = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
