"""
Request, provider and result types for the relay.

``Provider`` is the closed set of supported upstreams and ``Dialect`` the wire
convention each one speaks. ``CompletionRequest`` is the normalized request
every entry point accepts; it is a pydantic model so malformed input is
rejected before any network call. ``OutboundRequest`` is the fully translated
HTTP request handed to the transport.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import InvalidInputError


class Provider(str, Enum):
    """Supported upstream providers."""

    OPENAI = "openai"
    DEEPSEEK = "deepseek"
    KIMI = "kimi"
    OPENROUTER = "openrouter"
    OLLAMA = "ollama"
    CLAUDE = "claude"

    @classmethod
    def lookup(cls, name: Any) -> Optional["Provider"]:
        """Return the provider for a canonical name or alias, else ``None``."""
        if isinstance(name, Provider):
            return name
        if not isinstance(name, str):
            return None
        return _PROVIDER_ALIASES.get(name.strip().lower())

    @classmethod
    def parse(cls, name: Any) -> "Provider":
        """Return the provider for ``name`` or raise ``InvalidInputError``."""
        provider = cls.lookup(name)
        if provider is None:
            raise InvalidInputError(f"unknown provider: {str(name)[:40]!r}")
        return provider


_PROVIDER_ALIASES: Dict[str, Provider] = {
    **{p.value: p for p in Provider},
    "open_ai": Provider.OPENAI,
    "open_a_i": Provider.OPENAI,
    "deep_seek": Provider.DEEPSEEK,
    "open_router": Provider.OPENROUTER,
    "anthropic": Provider.CLAUDE,
    "moonshot": Provider.KIMI,
}


class Dialect(str, Enum):
    """Wire conventions for request shape, auth headers and streaming framing."""

    OPENAI_COMPAT = "openai_compat"
    CLAUDE = "claude"
    OLLAMA = "ollama"


Role = Literal["user", "assistant", "system"]


class ChatTurn(BaseModel):
    """One prior chat turn supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class CompletionRequest(BaseModel):
    """Normalized completion request accepted by every entry point.

    Attributes:
        provider: Target provider (aliases such as ``"open_ai"`` accepted).
        api_key: Opaque secret; empty for local providers. Never rendered by
            ``repr`` or serialization.
        prompt: User prompt, used when ``messages`` is absent.
        system_prompt: Optional system instruction.
        messages: Ordered prior turns. When present (and non-empty) it
            replaces ``prompt``/``system_prompt`` for message construction
            (the Claude dialect still carries ``system_prompt`` separately).
        model: Model override; defaults come from configuration.
        temperature: Sampling temperature in ``[0, 2]``.
        max_tokens: Positive output token cap.
        base_url: Base URL override.

    Both snake_case and camelCase keys are accepted (``apiKey``,
    ``systemPrompt``, ``maxTokens``, ``baseUrl``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    provider: Provider
    api_key: SecretStr = Field(default=SecretStr(""))
    prompt: str = ""
    system_prompt: Optional[str] = None
    messages: Optional[List[ChatTurn]] = None
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, allow_inf_nan=False)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    base_url: Optional[str] = None

    @field_validator("provider", mode="before")
    @classmethod
    def _coerce_provider(cls, value: Any) -> Provider:
        provider = Provider.lookup(value)
        if provider is None:
            raise ValueError("unknown provider")
        return provider

    @field_validator("messages", mode="after")
    @classmethod
    def _empty_turns_as_absent(cls, value: Optional[List[ChatTurn]]) -> Optional[List[ChatTurn]]:
        return value or None

    @field_validator("model", "base_url", "system_prompt", mode="after")
    @classmethod
    def _blank_as_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _require_content(self) -> "CompletionRequest":
        if not self.messages and not self.prompt.strip():
            raise ValueError("prompt or messages is required")
        return self

    def secret(self) -> str:
        """Return the API key trimmed of surrounding whitespace."""
        return self.api_key.get_secret_value().strip()


def parse_completion_request(data: Union[CompletionRequest, Mapping[str, Any]]) -> CompletionRequest:
    """Validate a raw mapping into a :class:`CompletionRequest`.

    Raises:
        InvalidInputError: naming the offending fields only; field values are
            never echoed since they may hold secrets.
    """
    if isinstance(data, CompletionRequest):
        return data
    if not isinstance(data, Mapping):
        raise InvalidInputError("completion request must be a mapping")
    try:
        return CompletionRequest.model_validate(dict(data))
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "request" for err in exc.errors()})
        raise InvalidInputError(f"invalid completion request: {', '.join(fields)}") from None


@dataclass(frozen=True)
class OutboundRequest:
    """A fully translated HTTP request ready for the transport.

    ``headers`` is excluded from ``repr`` because it carries credentials.
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    body: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ConnectivityResult:
    """Outcome of a connectivity probe."""

    ok: bool
    message: str


__all__ = [
    "Provider",
    "Dialect",
    "Role",
    "ChatTurn",
    "CompletionRequest",
    "parse_completion_request",
    "OutboundRequest",
    "ConnectivityResult",
]
