"""
HTTP transport for Toolhouse calls.
Performs one request and returns status, headers and decoded body, or raises
TransportFailure with whatever the remote side returned.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from toolhouse_connector.config.settings import settings
from toolhouse_connector.core.errors import TransportFailure
from toolhouse_connector.core.transport import HttpResponse

logger = structlog.get_logger()


def decode_body(response: httpx.Response) -> Any:
    """JSON when the body parses as JSON, raw text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """
    HttpTransport backed by httpx.

    Uses the injected AsyncClient when given (shared for the app lifetime),
    otherwise opens a short-lived client per request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Any] = None,
    ) -> HttpResponse:
        request_headers = {"Accept": "application/json"}
        request_headers.update(headers or {})

        logger.debug(
            "http_request",
            method=method,
            url=url,
            authenticated="Authorization" in request_headers,
        )

        try:
            if self.client is not None:
                response = await self.client.request(
                    method, url, headers=request_headers, json=json_body
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(
                        method, url, headers=request_headers, json=json_body
                    )
        except httpx.HTTPError as e:
            logger.warning("http_request_failed", method=method, url=url, error=str(e))
            raise TransportFailure(str(e) or type(e).__name__) from e

        body = decode_body(response)

        if not response.is_success:
            logger.warning(
                "http_error_status",
                method=method,
                url=url,
                status=response.status_code,
            )
            raise TransportFailure(
                f"Request failed with status code {response.status_code}",
                http_status=response.status_code,
                response_body=body,
            )

        logger.debug("http_response", method=method, url=url, status=response.status_code)
        return HttpResponse(response.status_code, dict(response.headers), body)
