"""Transport implementation backed by the requests library."""

import asyncio
import logging

import requests

from lalamove.errors import TransportError
from lalamove.transport import HttpRequest, HttpResponse, Transport

logger = logging.getLogger(__name__)


class RequestsTransport(Transport):
    """Send requests with a ``requests.Session`` in a worker thread."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    async def send(self, request: HttpRequest) -> HttpResponse:
        return await asyncio.to_thread(self._send, request)

    def _send(self, request: HttpRequest) -> HttpResponse:
        try:
            resp = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body.encode("utf-8") if request.body else None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        return HttpResponse(status=resp.status_code, body=resp.content)

    def close(self) -> None:
        self.session.close()
