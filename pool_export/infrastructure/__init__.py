"""
Infrastructure package for the pool export pipeline.

Centralizes HTTP connectivity concerns (client construction, request/response
error mapping). Keep this layer focused on I/O and resource management,
decoupled from pagination and encoding logic.
"""

from pool_export.infrastructure.http_client import get_json, open_http_client

__all__ = [
    "get_json",
    "open_http_client",
]
