"""Exception hierarchy for the Lalamove client."""

from typing import Any


class LalamoveError(Exception):
    """Base class for every error raised by this package."""


# Configuration errors. Raised while building a Config, never per call.


class ConfigError(LalamoveError):
    """The client configuration could not be built."""


class InvalidApiKeyOrApiSecret(ConfigError):
    """A credential did not encode a known API environment."""

    def __init__(self):
        super().__init__(
            "The environment of the API key or API secret couldn't be parsed correctly."
        )


class IncompatibleKeyAndSecret(ConfigError):
    """The API key and API secret belong to different environments."""

    def __init__(self):
        super().__init__(
            "The API key and the API secret were not from the same environment."
        )


class UnsupportedLanguage(ConfigError):
    def __init__(self, language: str, market: str):
        super().__init__(f"Language '{language}' is not available in the {market} market.")
        self.language = language
        self.market = market


class MissingCredentials(ConfigError):
    pass


# Request errors. Raised by the client operations.


class RequestError(LalamoveError):
    """A call to the Lalamove API did not produce a usable response."""


class HttpClientError(RequestError):
    """The transport failed to complete the round trip.

    The original TransportError is available as ``__cause__``.
    """


class ResponseDecodeError(RequestError):
    """The response body was not valid UTF-8."""


class ApiError(RequestError):
    """The API answered with something other than a data envelope."""


class InvalidJson(ApiError):
    """The response body was not JSON at all."""

    def __init__(self, text: str):
        super().__init__(f"The Lalamove API responded with the non json string {text!r}.")
        self.text = text


class ApiErrorResponse(ApiError):
    """The response envelope carried an ``errors`` key."""

    def __init__(self, payload: dict[str, Any], status: int | None = None):
        super().__init__(f"The Lalamove API responded with errors: {payload!r}")
        self.payload = payload
        self.status = status

    @property
    def errors(self) -> Any:
        return self.payload.get("errors")


class DeserializationError(RequestError):
    """The envelope payload did not have the expected shape."""


class NoData(RequestError):
    def __init__(self):
        super().__init__("The json response from Lalamove didn't have the 'data' key in it.")


# Quote errors. The response parsed, but its price is unusable.


class QuoteError(LalamoveError):
    """A quotation response was well formed but semantically invalid."""


class CurrencyNotFound(QuoteError):
    def __init__(self, code: str):
        super().__init__(
            f"Couldn't find a currency that matched '{code}' in the price breakdown."
        )
        self.code = code


class MoneyParseError(QuoteError):
    def __init__(self, amount: str, currency: str):
        super().__init__(f"Couldn't parse {amount!r} as an amount of {currency}.")
        self.amount = amount
        self.currency = currency


# Value errors raised while constructing domain values.


class StopCountError(LalamoveError, ValueError):
    """A delivery must have between 1 and 15 recipient stops."""


class InvalidIdentifier(LalamoveError, ValueError):
    pass


class InvalidDeliveryStatus(LalamoveError, ValueError):
    pass


class InvalidPhoneNumber(LalamoveError, ValueError):
    pass


class InvalidRegion(LalamoveError, ValueError):
    pass


class TransportError(LalamoveError):
    """Raised by a Transport when a request could not be sent or read.

    Transports chain the library-specific exception as ``__cause__``.
    """
