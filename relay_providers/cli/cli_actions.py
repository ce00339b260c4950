"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``relay-providers``. Each handler returns a process
exit code and has no top-level side effects, so tests can call them directly.

Key resolution
--------------
When ``--api-key`` is omitted the key is read from the provider's environment
variable (``OPENAI_API_KEY``, ``KIMI_API_KEY``/``MOONSHOT_API_KEY``, ...).
Placeholder values are ignored. This is the only place the relay reads keys
from the environment; library callers always pass keys explicitly.

Exit codes
----------
- ``0`` success
- ``1`` provider error (API, network, cancellation); sanitized message on stderr
- ``2`` invalid input
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, Optional

from ..base.errors import InvalidInputError, ProviderError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import Provider, parse_completion_request
from ..base.streaming import CanonicalEvent, DataEvent
from ..catalog import resolve_model
from ..config.env import is_placeholder, resolve_provider_key
from ..executor import execute
from ..probe import list_models, test_connection
from ..relay import complete_stream

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_INVALID_INPUT = 2

_logger = get_logger("relay.cli")


def resolve_api_key(provider: Provider, explicit: Optional[str]) -> str:
    """Return ``explicit`` when given, else the provider's environment key, else ``""``."""
    if explicit is not None:
        return explicit
    value, _name = resolve_provider_key(provider.value)
    if value is None or is_placeholder(value):
        return ""
    return value


def _report_error(exc: ProviderError, as_json: bool) -> int:
    code = EXIT_INVALID_INPUT if isinstance(exc, InvalidInputError) else EXIT_PROVIDER_ERROR
    normalized_log_event(
        _logger,
        "cli.error",
        LogContext(provider=exc.provider, model=exc.model),
        phase="finalize",
        error_code=exc.code.value,
        exit_code=code,
    )
    if as_json:
        print(json.dumps({"error": exc.message, "code": exc.code.value}), file=sys.stderr)
    else:
        print(f"error: {exc.message}", file=sys.stderr)
    return code


def _request_payload(args: argparse.Namespace, provider: Provider) -> Dict[str, Any]:
    return {
        "provider": provider,
        "api_key": resolve_api_key(provider, args.api_key),
        "prompt": args.prompt,
        "system_prompt": args.system,
        "model": args.model,
        "temperature": args.temperature,
        "max_tokens": args.max_tokens,
        "base_url": args.base_url,
    }


def handle_complete(args: argparse.Namespace) -> int:
    """Run ``complete`` and print the text (or a JSON object with ``--json``)."""
    try:
        provider = Provider.parse(args.provider)
        request = parse_completion_request(_request_payload(args, provider))
        text = execute(request)
    except ProviderError as exc:
        return _report_error(exc, args.json)
    if args.json:
        model = resolve_model(provider, request.model)
        print(json.dumps({"provider": provider.value, "model": model, "text": text}, ensure_ascii=False))
    else:
        print(text)
    return EXIT_OK


def _stream_printer(as_json: bool) -> Callable[[CanonicalEvent], None]:
    def _sink(event: CanonicalEvent) -> None:
        if as_json:
            kind = "data" if isinstance(event, DataEvent) else "terminal"
            payload = event.payload if isinstance(event, DataEvent) else None
            print(json.dumps({"type": kind, "payload": payload}, ensure_ascii=False), flush=True)
        elif isinstance(event, DataEvent):
            print(event.payload, flush=True)

    return _sink


def handle_stream(args: argparse.Namespace) -> int:
    """Run ``stream`` and print each data payload on its own line as it arrives."""
    try:
        provider = Provider.parse(args.provider)
        request = parse_completion_request(_request_payload(args, provider))
        complete_stream(request, _stream_printer(args.json))
    except ProviderError as exc:
        return _report_error(exc, args.json)
    return EXIT_OK


def handle_test_connection(args: argparse.Namespace) -> int:
    try:
        provider = Provider.parse(args.provider)
        message = test_connection(provider, resolve_api_key(provider, args.api_key), args.base_url)
    except ProviderError as exc:
        return _report_error(exc, args.json)
    if args.json:
        print(json.dumps({"ok": True, "message": message}))
    else:
        print(message)
    return EXIT_OK


def handle_list_models(args: argparse.Namespace) -> int:
    try:
        provider = Provider.parse(args.provider)
        document = list_models(provider, resolve_api_key(provider, args.api_key), args.base_url)
    except ProviderError as exc:
        return _report_error(exc, False)
    print(json.dumps(document, indent=2, ensure_ascii=False))
    return EXIT_OK


__all__ = [
    "EXIT_OK",
    "EXIT_PROVIDER_ERROR",
    "EXIT_INVALID_INPUT",
    "resolve_api_key",
    "handle_complete",
    "handle_stream",
    "handle_test_connection",
    "handle_list_models",
]
