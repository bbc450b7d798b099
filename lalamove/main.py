#!/usr/bin/env python3
"""CLI entry point for the Lalamove delivery client."""

import argparse
import asyncio
import logging
import sys

from lalamove.client import Lalamove
from lalamove.config import Config
from lalamove.errors import LalamoveError
from lalamove.markets import MARKETS, MarketInfo
from lalamove.models import Location, QuotationRequest
from lalamove.requests_transport import RequestsTransport


def _parse_location(value: str) -> Location:
    """Parse "LAT,LNG,ADDRESS" into a Location for argparse."""
    try:
        lat, lng, address = value.split(",", 2)
        return Location(latitude=float(lat), longitude=float(lng), address=address.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected LAT,LNG,ADDRESS but got {value!r}"
        ) from None


def _print_market_info(market_info: MarketInfo):
    """Print the service catalog to stdout."""
    for region_info in market_info.regions:
        print(f"\n{'=' * 70}")
        print(f"  {region_info.region.name} ({region_info.region.code})")
        print(f"{'=' * 70}\n")

        for service in region_info.services:
            dims = service.dimensions
            print(f"  {service.service}: {service.description}")
            print(f"    Size:  {dims.length} x {dims.width} x {dims.height}")
            print(f"    Load:  {service.load}")
            for special in service.special_requests:
                print(f"    Extra: {special.special_request} ({special.description})")
            print()


async def _run(args) -> None:
    config = Config.from_env(
        api_key=args.api_key,
        api_secret=args.api_secret,
        language=args.language,
        market=MARKETS[args.market],
    )
    transport = RequestsTransport()
    client = Lalamove(config, transport=transport)

    try:
        if args.command == "market-info":
            _print_market_info(await client.market_info())

        elif args.command == "quote":
            quoted, quote = await client.quote(
                QuotationRequest(
                    service=args.service,
                    pick_up_location=args.pickup,
                    stops=tuple(args.stop),
                )
            )
            print(f"Quotation {quoted.quotation_id}: {quote.price} for {quote.distance}")
            print(f"  Pickup stop:     {quoted.pick_up_stop_id}")
            for i, stop_id in enumerate(quoted.stop_ids, 1):
                print(f"  Drop-off stop {i}: {stop_id}")

        elif args.command == "status":
            status = await client.delivery_status(args.order_id)
            print(f"Order {args.order_id}: {status.value}")
    finally:
        transport.close()


def main():
    parser = argparse.ArgumentParser(
        description="Quote and track Lalamove deliveries.",
    )
    parser.add_argument(
        "--api-key",
        help="Lalamove API key (overrides LALAMOVE_API_KEY env var).",
    )
    parser.add_argument(
        "--api-secret",
        help="Lalamove API secret (overrides LALAMOVE_API_SECRET env var).",
    )
    parser.add_argument(
        "--language",
        help="Language tag, e.g. en_PH (overrides LALAMOVE_LANGUAGE env var).",
    )
    parser.add_argument(
        "--market",
        default="PH",
        choices=sorted(MARKETS),
        help='Market country code (default: "PH").',
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log requests and responses.",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("market-info", help="List regions and vehicle services.")

    quote_parser = commands.add_parser("quote", help="Price a multi-stop delivery.")
    quote_parser.add_argument("--service", required=True, help='Service type, e.g. "MOTORCYCLE".')
    quote_parser.add_argument(
        "--pickup",
        required=True,
        type=_parse_location,
        metavar="LAT,LNG,ADDRESS",
        help="Pickup location.",
    )
    quote_parser.add_argument(
        "--stop",
        required=True,
        action="append",
        type=_parse_location,
        metavar="LAT,LNG,ADDRESS",
        help="Drop-off location; repeat for up to 15 stops.",
    )

    status_parser = commands.add_parser("status", help="Show the status of an order.")
    status_parser.add_argument("order_id", help="Order ID returned when the order was placed.")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(_run(args))
    except LalamoveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
