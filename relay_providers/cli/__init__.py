"""relay-providers CLI (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``. No provider logic
lives here.
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import (
    EXIT_INVALID_INPUT,
    handle_complete,
    handle_list_models,
    handle_stream,
    handle_test_connection,
)
from .cli_parser import build_parser

_HANDLERS = {
    "complete": handle_complete,
    "stream": handle_stream,
    "test-connection": handle_test_connection,
    "list-models": handle_list_models,
}


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, 1 provider error, 2 invalid input).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    handler = _HANDLERS.get(args.cmd)
    if handler is None:
        p.print_help(sys.stderr)
        return EXIT_INVALID_INPUT
    return handler(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
