"""Abstract HTTP transport that the Lalamove client sends requests through."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class HttpRequest:
    """A fully signed request, ready to be sent as-is."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes


class Transport(ABC):
    """Base class that all HTTP backends must implement."""

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request and return the raw response.

        Non-2xx statuses are not errors here; the client decides what the
        body means.

        Args:
            request: The signed request. Headers and body must be sent
                     unchanged or the signature will not verify.

        Returns:
            Status code and undecoded body bytes.

        Raises:
            TransportError: If the request could not be sent or the
                            response could not be read.
        """
