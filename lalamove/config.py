"""Credentials, environment selection and signed request construction."""

import json
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dotenv import load_dotenv

from lalamove.errors import (
    IncompatibleKeyAndSecret,
    InvalidApiKeyOrApiSecret,
    MissingCredentials,
)
from lalamove.markets import PHILIPPINES, Market
from lalamove.signing import authorization_header, sign
from lalamove.transport import HttpRequest

load_dotenv()

# Credentials look like "pk_test_..." or "sk_prod_..."; the environment
# starts after this many characters.
_CREDENTIAL_PREFIX_LENGTH = 3

_APPLICATION_JSON = "application/json"


class Environment(Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        if self is Environment.SANDBOX:
            return "https://rest.sandbox.lalamove.com"
        return "https://rest.lalamove.com"

    @classmethod
    def from_credential(cls, credential: str) -> "Environment":
        """Work out which environment an API key or secret was issued for.

        Raises:
            InvalidApiKeyOrApiSecret: If the credential names neither.
        """
        environment = credential[_CREDENTIAL_PREFIX_LENGTH:]
        if environment.startswith("test"):
            return cls.SANDBOX
        if environment.startswith("prod"):
            return cls.PRODUCTION
        raise InvalidApiKeyOrApiSecret()


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Config:
    """Immutable client configuration.

    The environment is resolved from the credentials when the config is
    built, so a bad key fails here rather than on the first request.
    """

    api_key: str = field(repr=False)
    api_secret: str = field(repr=False)
    language: str = ""
    market: Market = PHILIPPINES
    environment: Environment = field(init=False)

    def __post_init__(self):
        key_environment = Environment.from_credential(self.api_key)
        secret_environment = Environment.from_credential(self.api_secret)
        if key_environment != secret_environment:
            raise IncompatibleKeyAndSecret()

        language = self.market.language(self.language or self.market.default_language)
        object.__setattr__(self, "language", language)
        object.__setattr__(self, "environment", key_environment)

    @classmethod
    def from_env(
        cls,
        api_key: str | None = None,
        api_secret: str | None = None,
        language: str | None = None,
        market: Market = PHILIPPINES,
    ) -> "Config":
        """Build a Config from arguments, falling back to the environment.

        Reads LALAMOVE_API_KEY, LALAMOVE_API_SECRET and LALAMOVE_LANGUAGE,
        which may also come from a .env file.
        """
        api_key = api_key or os.getenv("LALAMOVE_API_KEY", "")
        api_secret = api_secret or os.getenv("LALAMOVE_API_SECRET", "")
        language = language or os.getenv("LALAMOVE_LANGUAGE", "")

        if not api_key or not api_secret:
            raise MissingCredentials(
                "LALAMOVE_API_KEY and LALAMOVE_API_SECRET must be set either as "
                "arguments or in a .env file."
            )

        return cls(api_key=api_key, api_secret=api_secret, language=language, market=market)

    @property
    def base_url(self) -> str:
        return self.environment.base_url

    def build_request(
        self,
        path: str,
        method: str,
        body: Any = None,
        timestamp: int | None = None,
    ) -> HttpRequest:
        """Serialize and sign a request.

        Args:
            path: API endpoint path (e.g. /v3/quotations).
            method: HTTP method.
            body: JSON-serializable payload. It is wrapped in a "data"
                  envelope; None sends no body at all.
            timestamp: Milliseconds since the epoch. Defaults to now.

        Returns:
            The HttpRequest to hand to a Transport.
        """
        if timestamp is None:
            timestamp = _epoch_millis()

        body_str = ""
        if body is not None:
            body_str = json.dumps({"data": body}, separators=(",", ":"), ensure_ascii=False)

        signature = sign(self.api_secret, timestamp, method, path, body_str)

        return HttpRequest(
            method=method,
            url=f"{self.base_url}{path}",
            headers={
                "Accept": _APPLICATION_JSON,
                "Content-Type": _APPLICATION_JSON,
                "Authorization": authorization_header(self.api_key, timestamp, signature),
                "Market": self.market.country_code,
            },
            body=body_str,
        )
