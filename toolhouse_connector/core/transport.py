"""
HTTP transport contract used by the core components.
"""

from typing import Any, Dict, Optional, Protocol


class HttpResponse:
    """Successful (2xx) HTTP response with lower-cased header names"""

    def __init__(self, status: int, headers: Optional[Dict[str, str]] = None, body: Any = None):
        self.status = status
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.body = body

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    def __repr__(self) -> str:
        return f"<HttpResponse(status={self.status})>"


class HttpTransport(Protocol):
    """Perform a request, return HttpResponse or raise TransportFailure"""

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Any] = None,
    ) -> HttpResponse:
        ...
