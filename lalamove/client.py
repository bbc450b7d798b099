"""Lalamove API v3 client for quoting, placing and tracking deliveries."""

import logging
from decimal import Decimal
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse

from lalamove.config import Config
from lalamove.currencies import parse_money
from lalamove.envelope import decode_envelope
from lalamove.errors import DeserializationError, HttpClientError, TransportError
from lalamove.markets import MarketInfo, parse_market_info, parse_meters
from lalamove.models import (
    Delivery,
    DeliveryId,
    DeliveryRequest,
    DeliveryStatus,
    Location,
    PersonInfo,
    QuotationId,
    QuotationRequest,
    Quote,
    QuotedRequest,
    StopId,
)
from lalamove.transport import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

CITIES_PATH = "/v3/cities"
QUOTATIONS_PATH = "/v3/quotations"
ORDERS_PATH = "/v3/orders"


def order_path(delivery_id: DeliveryId) -> str:
    return f"{ORDERS_PATH}/{delivery_id}"


def _coordinate(value: float) -> str:
    """Format a coordinate as plain decimal text, never in exponent form."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _api_location(location: Location) -> dict:
    return {
        "coordinates": {
            "lat": _coordinate(location.latitude),
            "lng": _coordinate(location.longitude),
        },
        "address": location.address,
    }


def _api_stop_info(stop_id: StopId, person: PersonInfo) -> dict:
    return {
        "stopId": str(stop_id),
        "name": person.name,
        "phone": person.phone_number,
    }


def _share_link(raw: Any) -> str:
    if not isinstance(raw, str):
        raise TypeError(f"shareLink must be a string, got {type(raw).__name__}")
    parsed = urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"shareLink {raw!r} is not an absolute URL")
    return raw


class Lalamove:
    """Async client for the Lalamove REST API v3.

    Every operation signs its request with the configured credentials,
    sends it through ``transport`` and decodes the response envelope.
    Nothing is retried or cached.
    """

    def __init__(
        self,
        config: Config,
        transport: Transport | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """Create a client.

        Args:
            config: Credentials, language and market.
            transport: HTTP backend. Defaults to a RequestsTransport.
            clock: Returns milliseconds since the epoch; used to timestamp
                   signatures. Defaults to the system clock.
        """
        if transport is None:
            from lalamove.requests_transport import RequestsTransport
            transport = RequestsTransport()

        self.config = config
        self.transport = transport
        self._clock = clock

    async def _make_request(
        self,
        path: str,
        method: str,
        body: Any,
        parse: Callable[[Any], T],
    ) -> T:
        """Sign, send and decode one API call.

        Args:
            path: API endpoint path.
            method: HTTP method.
            body: Payload to wrap in the "data" envelope, or None.
            parse: Maps the response "data" payload onto the result.

        Returns:
            The value returned by ``parse``.
        """
        timestamp = self._clock() if self._clock else None
        request = self.config.build_request(path, method, body, timestamp=timestamp)

        logger.debug("Lalamove %s %s", method, path)
        try:
            response = await self.transport.send(request)
        except TransportError as exc:
            raise HttpClientError(str(exc)) from exc
        logger.debug("Lalamove %s %s -> %s", method, path, response.status)

        return decode_envelope(response.body, parse, status=response.status)

    async def market_info(self) -> MarketInfo:
        """Fetch the regions and vehicle services of the configured market."""
        return await self._make_request(
            CITIES_PATH,
            "GET",
            None,
            lambda data: parse_market_info(data, self.config.market),
        )

    async def quote(self, request: QuotationRequest) -> tuple[QuotedRequest, Quote]:
        """Price a route.

        Args:
            request: Service type, pickup and recipient stops.

        Returns:
            The identifiers needed to place the order, and the quote itself.

        Raises:
            RequestError: If the call or its decoding failed.
            CurrencyNotFound: If the price is in an unknown currency.
            MoneyParseError: If the price total is not a number.
        """
        expected_stops = request.recipient_count + 1
        body = {
            "serviceType": request.service,
            "stops": [_api_location(location) for location in request.locations],
            "language": self.config.language,
        }

        def parse(data: dict):
            stops = data["stops"]
            if not isinstance(stops, list) or len(stops) != expected_stops:
                count = len(stops) if isinstance(stops, list) else 0
                raise DeserializationError(
                    f"expected {expected_stops} stop ids in the quotation, got {count}"
                )
            stop_ids = [StopId.parse(stop["stopId"]) for stop in stops]

            breakdown = data["priceBreakdown"]
            currency = breakdown["currency"]
            if not isinstance(currency, str):
                raise TypeError(f"currency must be a string, got {type(currency).__name__}")

            quoted = QuotedRequest(
                quotation_id=QuotationId.parse(data["quotationId"]),
                pick_up_stop_id=stop_ids[0],
                stop_ids=tuple(stop_ids[1:]),
            )
            return quoted, parse_meters(data["distance"]), str(breakdown["total"]), currency

        quoted, distance, total, currency = await self._make_request(
            QUOTATIONS_PATH, "POST", body, parse
        )
        return quoted, Quote(distance=distance, price=parse_money(total, currency))

    async def place_order(self, request: DeliveryRequest) -> Delivery:
        """Place an order for a previously quoted route.

        The sender is attached to the pickup stop and each recipient, in
        order, to the matching drop-off stop of the quotation.
        """
        quoted = request.quoted
        body = {
            "quotationId": str(quoted.quotation_id),
            "sender": _api_stop_info(quoted.pick_up_stop_id, request.sender),
            "recipients": [
                _api_stop_info(stop_id, recipient)
                for stop_id, recipient in zip(quoted.stop_ids, request.recipients_info)
            ],
        }

        return await self._make_request(
            ORDERS_PATH,
            "POST",
            body,
            lambda data: Delivery(
                id=DeliveryId.parse(data["orderId"]),
                share_link=_share_link(data["shareLink"]),
            ),
        )

    async def delivery_status(self, delivery_id: DeliveryId | int | str) -> DeliveryStatus:
        """Fetch the current status of an order."""
        if not isinstance(delivery_id, DeliveryId):
            delivery_id = DeliveryId.parse(str(delivery_id))

        return await self._make_request(
            order_path(delivery_id),
            "GET",
            None,
            lambda data: DeliveryStatus.parse(data["status"]),
        )
