"""Adapters for external services."""

from toolhouse_connector.adapters.http_transport import HttpxTransport, decode_body

__all__ = [
    'HttpxTransport',
    'decode_body',
]
