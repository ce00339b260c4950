"""
Relay Base Package

Provider-agnostic building blocks shared by the executor, the streaming relay
and the connectivity probe:

- Models: provider/dialect enums, the validated completion request, the
  outbound HTTP request value and the connectivity result
- Errors: the error taxonomy, classification and credential redaction
- Logging: structured JSON logging with a normalized event schema
- Transport: pooled ``httpx`` clients, timeouts and cooperative cancellation
- Streaming: canonical events, the line framer and the frame normalizer
"""

from .cancellation import CancellationToken
from .errors import (
    ApiError,
    ErrorCode,
    InvalidInputError,
    NetworkError,
    ProviderError,
    StreamCancelledError,
    UnauthorizedError,
    classify_exception,
    redact_secrets,
    sanitize_error_message,
)
from .logging import LogContext, configure_logger, get_logger, normalized_log_event
from .models import (
    ChatTurn,
    CompletionRequest,
    ConnectivityResult,
    Dialect,
    OutboundRequest,
    Provider,
    parse_completion_request,
)
from .streaming import (
    CanonicalEvent,
    DataEvent,
    StreamFramer,
    StreamMetrics,
    StreamNormalizer,
    TerminalEvent,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "CancellationToken",
    "ApiError",
    "ErrorCode",
    "InvalidInputError",
    "NetworkError",
    "ProviderError",
    "StreamCancelledError",
    "UnauthorizedError",
    "classify_exception",
    "redact_secrets",
    "sanitize_error_message",
    "LogContext",
    "configure_logger",
    "get_logger",
    "normalized_log_event",
    "ChatTurn",
    "CompletionRequest",
    "ConnectivityResult",
    "Dialect",
    "OutboundRequest",
    "Provider",
    "parse_completion_request",
    "CanonicalEvent",
    "DataEvent",
    "StreamFramer",
    "StreamMetrics",
    "StreamNormalizer",
    "TerminalEvent",
    "TimeoutConfig",
    "get_timeout_config",
]
