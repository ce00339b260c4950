"""CLI parser construction for relay-providers.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ..base.models import Provider
from ..config.defaults import CLI_DEFAULT_PROVIDER

PROVIDER_CHOICES = [p.value for p in Provider]


def _add_endpoint_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--provider", default=CLI_DEFAULT_PROVIDER, help=f"one of: {', '.join(PROVIDER_CHOICES)}")
    parser.add_argument("--api-key", default=None, help="defaults to the provider's environment variable")
    parser.add_argument("--base-url", default=None)


def _add_completion_flags(parser: argparse.ArgumentParser) -> None:
    _add_endpoint_flags(parser)
    parser.add_argument("--prompt", required=True)
    parser.add_argument("--system", default=None, help="system prompt")
    parser.add_argument("--model", default=None)
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--max-tokens", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``complete``, ``stream``, ``test-connection`` and
        ``list-models`` subcommands. No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="relay-providers", description="AI completion relay")
    sub = p.add_subparsers(dest="cmd")

    p_complete = sub.add_parser("complete", help="Run a non-streaming completion")
    _add_completion_flags(p_complete)
    p_complete.add_argument("--json", action="store_true")

    p_stream = sub.add_parser("stream", help="Stream a completion, one event per line")
    _add_completion_flags(p_stream)
    p_stream.add_argument("--json", action="store_true")

    p_test = sub.add_parser("test-connection", help="Check reachability and credentials")
    _add_endpoint_flags(p_test)
    p_test.add_argument("--json", action="store_true")

    p_models = sub.add_parser("list-models", help="Print the provider's model listing")
    _add_endpoint_flags(p_models)

    return p


__all__ = ["PROVIDER_CHOICES", "build_parser"]
