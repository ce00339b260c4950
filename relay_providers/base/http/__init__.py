"""HTTP transport helpers shared by the executor, relay and probe."""

from .client import (
    close_all_clients,
    get_httpx_client,
    network_error_from,
    open_stream,
    raise_for_status,
    send,
)

__all__ = [
    "close_all_clients",
    "get_httpx_client",
    "network_error_from",
    "open_stream",
    "raise_for_status",
    "send",
]
