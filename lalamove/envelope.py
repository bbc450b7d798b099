"""Decoding of the ``{"data": ...}`` / ``{"errors": ...}`` response envelope."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar

from lalamove.errors import (
    ApiErrorResponse,
    DeserializationError,
    InvalidJson,
    NoData,
    ResponseDecodeError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EnvelopeState(Enum):
    PARSE_FAILED_SYNTAX = "parse_failed_syntax"
    PARSE_FAILED_OTHER = "parse_failed_other"
    NON_OBJECT = "non_object"
    WITH_DATA = "with_data"
    WITH_ERRORS = "with_errors"
    BARE = "bare"


@dataclass(frozen=True)
class Envelope:
    """Result of classifying a response body.

    ``value`` holds the "data" payload for WITH_DATA, the whole object for
    WITH_ERRORS, and the parsed JSON otherwise. ``text`` is always the
    decoded body and ``error`` the JSON failure, if any.
    """

    state: EnvelopeState
    text: str
    value: Any = None
    error: Exception | None = None


def classify_envelope(raw: bytes) -> Envelope:
    """Sort a response body into one of the envelope states.

    Raises:
        ResponseDecodeError: If ``raw`` is not valid UTF-8.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ResponseDecodeError(f"The response body was not valid UTF-8: {exc}") from exc

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        return Envelope(EnvelopeState.PARSE_FAILED_SYNTAX, text, error=exc)
    except (ValueError, RecursionError) as exc:
        return Envelope(EnvelopeState.PARSE_FAILED_OTHER, text, error=exc)

    if not isinstance(parsed, dict):
        return Envelope(EnvelopeState.NON_OBJECT, text, value=parsed)
    if "data" in parsed:
        return Envelope(EnvelopeState.WITH_DATA, text, value=parsed["data"])
    if "errors" in parsed:
        return Envelope(EnvelopeState.WITH_ERRORS, text, value=parsed)
    return Envelope(EnvelopeState.BARE, text, value=parsed)


def decode_envelope(raw: bytes, parse: Callable[[Any], T], status: int | None = None) -> T:
    """Extract and parse the payload of a Lalamove API response.

    Args:
        raw: Response body bytes.
        parse: Maps the "data" payload onto a result. KeyError, TypeError
               and ValueError raised here mean the payload had the wrong
               shape.
        status: HTTP status, attached to API error responses.

    Returns:
        Whatever ``parse`` returns.

    Raises:
        ResponseDecodeError: If the body is not UTF-8.
        InvalidJson: If the body is not JSON; carries the original text.
        ApiErrorResponse: If the envelope holds "errors" instead of "data".
        DeserializationError: If the payload does not have the expected shape.
        NoData: If the body is JSON without "data" or "errors".
    """
    envelope = classify_envelope(raw)
    state = envelope.state

    if state is EnvelopeState.PARSE_FAILED_SYNTAX:
        raise InvalidJson(envelope.text) from envelope.error
    if state is EnvelopeState.PARSE_FAILED_OTHER:
        raise DeserializationError(str(envelope.error)) from envelope.error
    if state is EnvelopeState.WITH_ERRORS:
        logger.warning(
            "Lalamove API returned errors (status %s): %s",
            status,
            envelope.value.get("errors"),
        )
        raise ApiErrorResponse(envelope.value, status=status)
    if state in (EnvelopeState.NON_OBJECT, EnvelopeState.BARE):
        raise NoData()

    try:
        return parse(envelope.value)
    except DeserializationError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise DeserializationError(_describe(exc)) from exc


def _describe(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing field {exc.args[0]!r}"
    return str(exc)
