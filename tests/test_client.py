"""End-to-end tests for the Lalamove client over a fake transport."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from lalamove.client import Lalamove
from lalamove.config import Config
from lalamove.errors import (
    ApiErrorResponse,
    CurrencyNotFound,
    DeserializationError,
    HttpClientError,
    InvalidJson,
    MoneyParseError,
    NoData,
    TransportError,
)
from lalamove.markets import Meters
from lalamove.models import (
    DeliveryId,
    DeliveryRequest,
    DeliveryStatus,
    Location,
    PersonInfo,
    QuotationId,
    QuotationRequest,
    QuotedRequest,
    StopId,
)
from lalamove.signing import sign
from lalamove.transport import HttpResponse
from tests.fakes.fake_transport import FakeTransport

FIXED_TIME_MS = 1_700_000_000_000

MALL_OF_ASIA = Location(14.535372967557564, 120.98197538196277, "SM Mall of Asia, Pasay")
MEGAMALL = Location(14.586164229973143, 121.05665251264826, "SM Megamall, Mandaluyong")
GREENBELT = Location(14.5526, 121.0216, "Greenbelt, Makati")


def _client(config: Config, transport: FakeTransport) -> Lalamove:
    return Lalamove(config, transport=transport, clock=lambda: FIXED_TIME_MS)


def _quotation_request() -> QuotationRequest:
    return QuotationRequest(
        service="MOTORCYCLE",
        pick_up_location=MALL_OF_ASIA,
        stops=(MEGAMALL, GREENBELT),
    )


class TestMarketInfo:
    @pytest.mark.asyncio
    async def test_returns_regions(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        transport = FakeTransport(market_info_payload)

        info = await _client(config, transport).market_info()

        service = info.regions[0].services[0]
        dimensions = service.dimensions
        assert all(isinstance(d, Meters) for d in (dimensions.width, dimensions.height, dimensions.length))
        assert service.service == "MOTORCYCLE"

    @pytest.mark.asyncio
    async def test_sends_signed_get(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        transport = FakeTransport(market_info_payload)

        await _client(config, transport).market_info()

        request = transport.last_request
        signature = sign(config.api_secret, FIXED_TIME_MS, "GET", "/v3/cities")
        assert request.method == "GET"
        assert request.url == "https://rest.sandbox.lalamove.com/v3/cities"
        assert request.body == ""
        assert request.headers["Authorization"] == (
            f"hmac {config.api_key}:{FIXED_TIME_MS}:{signature}"
        )
        assert request.headers["Market"] == "PH"

    @pytest.mark.asyncio
    async def test_wrong_dimension_unit_fails(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        service = market_info_payload["data"][0]["services"][0]
        service["dimensions"]["width"] = {"unit": "ft", "value": "1.3"}
        transport = FakeTransport(market_info_payload)

        with pytest.raises(DeserializationError, match="'ft'"):
            await _client(config, transport).market_info()

    @pytest.mark.asyncio
    async def test_wrong_load_unit_fails(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        market_info_payload["data"][0]["services"][1]["load"]["unit"] = "lb"
        transport = FakeTransport(market_info_payload)

        with pytest.raises(DeserializationError):
            await _client(config, transport).market_info()

    @pytest.mark.asyncio
    async def test_numeric_measurement_value_fails(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        market_info_payload["data"][0]["services"][0]["load"]["value"] = 20
        transport = FakeTransport(market_info_payload)

        with pytest.raises(DeserializationError, match="numeric string"):
            await _client(config, transport).market_info()

    @pytest.mark.asyncio
    async def test_missing_service_description_fails(
        self, config: Config, market_info_payload: dict[str, Any]
    ) -> None:
        del market_info_payload["data"][0]["services"][1]["description"]
        transport = FakeTransport(market_info_payload)

        with pytest.raises(DeserializationError):
            await _client(config, transport).market_info()


class TestQuote:
    @pytest.mark.asyncio
    async def test_maps_stop_ids_in_order(
        self, config: Config, quotation_payload: dict[str, Any]
    ) -> None:
        transport = FakeTransport(quotation_payload)

        quoted, quote = await _client(config, transport).quote(_quotation_request())

        assert quoted.quotation_id == QuotationId(1514140994227007571)
        assert quoted.pick_up_stop_id == StopId(1514140995971838051)
        assert quoted.stop_ids == (StopId(1514140995971838052), StopId(1514140995971838053))
        assert quote.distance == Meters(12033.0)
        assert quote.price.amount == Decimal("240.50")
        assert quote.price.currency.code == "PHP"

    @pytest.mark.asyncio
    async def test_request_body(self, config: Config, quotation_payload: dict[str, Any]) -> None:
        transport = FakeTransport(quotation_payload)

        await _client(config, transport).quote(_quotation_request())

        assert transport.last_request.method == "POST"
        assert transport.last_request.url.endswith("/v3/quotations")
        assert transport.last_body() == {
            "data": {
                "serviceType": "MOTORCYCLE",
                "stops": [
                    {
                        "coordinates": {"lat": str(MALL_OF_ASIA.latitude), "lng": str(MALL_OF_ASIA.longitude)},
                        "address": "SM Mall of Asia, Pasay",
                    },
                    {
                        "coordinates": {"lat": str(MEGAMALL.latitude), "lng": str(MEGAMALL.longitude)},
                        "address": "SM Megamall, Mandaluyong",
                    },
                    {
                        "coordinates": {"lat": "14.5526", "lng": "121.0216"},
                        "address": "Greenbelt, Makati",
                    },
                ],
                "language": "en_PH",
            }
        }

    @pytest.mark.asyncio
    async def test_coordinates_are_plain_decimals(
        self, config: Config, quotation_payload: dict[str, Any]
    ) -> None:
        transport = FakeTransport(quotation_payload)
        request = QuotationRequest(
            service="MOTORCYCLE",
            pick_up_location=Location(14.0, 1e-05, "Origin"),
            stops=(Location(-0.5, 121.0216, "North"), Location(1.5e-07, -120.0, "South")),
        )

        await _client(config, transport).quote(request)

        coordinates = [stop["coordinates"] for stop in transport.last_body()["data"]["stops"]]
        assert coordinates == [
            {"lat": "14", "lng": "0.00001"},
            {"lat": "-0.5", "lng": "121.0216"},
            {"lat": "0.00000015", "lng": "-120"},
        ]

    @pytest.mark.asyncio
    async def test_stop_count_mismatch(
        self, config: Config, quotation_payload: dict[str, Any]
    ) -> None:
        quotation_payload["data"]["stops"].pop()
        transport = FakeTransport(quotation_payload)

        with pytest.raises(DeserializationError, match="expected 3 stop ids"):
            await _client(config, transport).quote(_quotation_request())

    @pytest.mark.asyncio
    async def test_unknown_currency(
        self, config: Config, quotation_payload: dict[str, Any]
    ) -> None:
        quotation_payload["data"]["priceBreakdown"]["currency"] = "XXX"
        transport = FakeTransport(quotation_payload)

        with pytest.raises(CurrencyNotFound):
            await _client(config, transport).quote(_quotation_request())

    @pytest.mark.asyncio
    async def test_bad_amount(self, config: Config, quotation_payload: dict[str, Any]) -> None:
        quotation_payload["data"]["priceBreakdown"]["total"] = "two hundred"
        transport = FakeTransport(quotation_payload)

        with pytest.raises(MoneyParseError):
            await _client(config, transport).quote(_quotation_request())

    @pytest.mark.asyncio
    async def test_bad_stop_id(self, config: Config, quotation_payload: dict[str, Any]) -> None:
        quotation_payload["data"]["stops"][1]["stopId"] = "not-a-number"
        transport = FakeTransport(quotation_payload)

        with pytest.raises(DeserializationError):
            await _client(config, transport).quote(_quotation_request())

    @pytest.mark.asyncio
    async def test_api_error(self, config: Config) -> None:
        errors = {"errors": [{"id": "ERR_OUT_OF_SERVICE_AREA", "message": "Out of area"}]}
        transport = FakeTransport(errors, status=422)

        with pytest.raises(ApiErrorResponse) as exc_info:
            await _client(config, transport).quote(_quotation_request())

        assert exc_info.value.status == 422
        assert exc_info.value.errors[0]["id"] == "ERR_OUT_OF_SERVICE_AREA"


class TestPlaceOrder:
    def _delivery_request(self) -> DeliveryRequest:
        return DeliveryRequest(
            quoted=QuotedRequest(
                quotation_id=QuotationId(99),
                pick_up_stop_id=StopId(100),
                stop_ids=(StopId(101), StopId(102)),
            ),
            sender=PersonInfo("Alice", "+639171234567"),
            recipients_info=(
                PersonInfo("Bob", "+639181234567"),
                PersonInfo("Carol", "+639191234567"),
            ),
        )

    @pytest.mark.asyncio
    async def test_places_order(self, config: Config) -> None:
        transport = FakeTransport(
            {"data": {"orderId": "107900701184", "shareLink": "https://share.sandbox.lalamove.com/?PH100"}}
        )

        delivery = await _client(config, transport).place_order(self._delivery_request())

        assert delivery.id == DeliveryId(107900701184)
        assert delivery.share_link == "https://share.sandbox.lalamove.com/?PH100"

    @pytest.mark.asyncio
    async def test_request_body_pairs_recipients_with_stops(self, config: Config) -> None:
        transport = FakeTransport({"data": {"orderId": "1", "shareLink": "https://x.example/1"}})

        await _client(config, transport).place_order(self._delivery_request())

        assert transport.last_request.url.endswith("/v3/orders")
        assert transport.last_body() == {
            "data": {
                "quotationId": "99",
                "sender": {"stopId": "100", "name": "Alice", "phone": "+639171234567"},
                "recipients": [
                    {"stopId": "101", "name": "Bob", "phone": "+639181234567"},
                    {"stopId": "102", "name": "Carol", "phone": "+639191234567"},
                ],
            }
        }

    @pytest.mark.asyncio
    async def test_invalid_share_link(self, config: Config) -> None:
        transport = FakeTransport({"data": {"orderId": "1", "shareLink": "not a url"}})

        with pytest.raises(DeserializationError):
            await _client(config, transport).place_order(self._delivery_request())


class TestDeliveryStatus:
    @pytest.mark.asyncio
    async def test_parses_status(self, config: Config) -> None:
        transport = FakeTransport({"data": {"orderId": "42", "status": "PICKED_UP"}})

        status = await _client(config, transport).delivery_status(DeliveryId(42))

        assert status is DeliveryStatus.PICKED_UP
        assert transport.last_request.method == "GET"
        assert transport.last_request.url == "https://rest.sandbox.lalamove.com/v3/orders/42"

    @pytest.mark.asyncio
    async def test_accepts_string_ids(self, config: Config) -> None:
        transport = FakeTransport({"data": {"status": "on_going"}})

        status = await _client(config, transport).delivery_status("42")

        assert status is DeliveryStatus.ON_GOING

    @pytest.mark.asyncio
    async def test_unknown_status(self, config: Config) -> None:
        transport = FakeTransport({"data": {"status": "TELEPORTED"}})

        with pytest.raises(DeserializationError):
            await _client(config, transport).delivery_status(DeliveryId(42))


class TestFailures:
    @pytest.mark.asyncio
    async def test_transport_errors_are_wrapped(self, config: Config) -> None:
        cause = TransportError("connection reset")
        transport = FakeTransport(cause)

        with pytest.raises(HttpClientError) as exc_info:
            await _client(config, transport).delivery_status(DeliveryId(1))

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_invalid_json(self, config: Config) -> None:
        transport = FakeTransport(HttpResponse(status=502, body=b"Bad Gateway"))

        with pytest.raises(InvalidJson) as exc_info:
            await _client(config, transport).market_info()

        assert exc_info.value.text == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_empty_object_is_no_data(self, config: Config) -> None:
        transport = FakeTransport({})

        with pytest.raises(NoData):
            await _client(config, transport).delivery_status(DeliveryId(1))

    @pytest.mark.asyncio
    async def test_each_call_is_signed_with_the_clock(self, config: Config) -> None:
        times = iter([1, 2])
        transport = FakeTransport({"data": {"status": "COMPLETED"}}, {"data": {"status": "EXPIRED"}})
        client = Lalamove(config, transport=transport, clock=lambda: next(times))

        await client.delivery_status(DeliveryId(1))
        await client.delivery_status(DeliveryId(1))

        first, second = (r.headers["Authorization"] for r in transport.requests)
        assert f"{config.api_key}:1:" in first
        assert f"{config.api_key}:2:" in second
        assert first != second
