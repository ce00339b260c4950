"""relay_providers: one uniform completion call over heterogeneous AI providers.

Public operations:

- :func:`complete` runs a non-streaming completion and returns its text.
- :func:`complete_stream` / :func:`iter_stream` relay a streaming completion
  as canonical :class:`DataEvent` values ending in one :class:`TerminalEvent`.
- :func:`test_connection` / :func:`probe_connectivity` check reachability and
  credentials with a cost-free GET.
- :func:`list_models` returns the provider's model listing unmodified.

Supported providers: OpenAI, DeepSeek, Kimi (Moonshot), OpenRouter, Claude
(Anthropic) and Ollama. API keys are passed in explicitly and are never
logged or echoed in errors.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import httpx

from .base.cancellation import CancellationToken
from .base.errors import (
    ApiError,
    ErrorCode,
    InvalidInputError,
    NetworkError,
    ProviderError,
    StreamCancelledError,
    UnauthorizedError,
)
from .base.models import (
    ChatTurn,
    CompletionRequest,
    ConnectivityResult,
    Dialect,
    Provider,
    parse_completion_request,
)
from .base.streaming import CanonicalEvent, DataEvent, TerminalEvent
from .catalog import default_base_url, default_model
from .executor import execute
from .probe import list_models, probe_connectivity, test_connection
from .relay import complete_stream, iter_stream

__version__ = "0.1.0"


def complete(
    request: Union[CompletionRequest, Mapping[str, Any]],
    *,
    client: Optional[httpx.Client] = None,
) -> str:
    """Return the completion text for ``request`` (non-streaming)."""
    return execute(request, client=client)


__all__ = [
    "__version__",
    "complete",
    "complete_stream",
    "iter_stream",
    "test_connection",
    "list_models",
    "probe_connectivity",
    "default_base_url",
    "default_model",
    "CancellationToken",
    "ChatTurn",
    "CompletionRequest",
    "ConnectivityResult",
    "Dialect",
    "Provider",
    "parse_completion_request",
    "CanonicalEvent",
    "DataEvent",
    "TerminalEvent",
    "ApiError",
    "ErrorCode",
    "InvalidInputError",
    "NetworkError",
    "ProviderError",
    "StreamCancelledError",
    "UnauthorizedError",
]
