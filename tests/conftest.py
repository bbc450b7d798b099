"""Shared fixtures for the Lalamove client tests."""

from __future__ import annotations

from typing import Any

import pytest

from lalamove.config import Config

SANDBOX_KEY = "pk_test_0123456789abcdef"
SANDBOX_SECRET = "sk_test_fedcba9876543210"
FIXED_TIME_MS = 1_700_000_000_000


def _measurement(unit: str, value: str) -> dict[str, str]:
    return {"unit": unit, "value": value}


@pytest.fixture
def config() -> Config:
    return Config(SANDBOX_KEY, SANDBOX_SECRET, "en_PH")


@pytest.fixture
def market_info_payload() -> dict[str, Any]:
    return {
        "data": [
            {
                "locode": "PH MNL",
                "name": "Manila",
                "services": [
                    {
                        "key": "MOTORCYCLE",
                        "description": "Best for small items",
                        "dimensions": {
                            "length": _measurement("m", "0.5"),
                            "width": _measurement("m", "0.4"),
                            "height": _measurement("m", "0.5"),
                        },
                        "load": _measurement("kg", "20"),
                        "specialRequests": [
                            {
                                "name": "THERMAL_BAG_1",
                                "description": "Thermal bag",
                            }
                        ],
                    },
                    {
                        "key": "VAN",
                        "description": "Vans",
                        "dimensions": {
                            "length": _measurement("m", "2.1"),
                            "width": _measurement("m", "1.2"),
                            "height": _measurement("m", "1.2"),
                        },
                        "load": _measurement("kg", "600"),
                        "specialRequests": [],
                    },
                ],
            },
            {
                "locode": "PH CEB",
                "services": [],
            },
        ]
    }


@pytest.fixture
def quotation_payload() -> dict[str, Any]:
    return {
        "data": {
            "quotationId": "1514140994227007571",
            "scheduleAt": "2022-04-13T07:18:38.00Z",
            "serviceType": "MOTORCYCLE",
            "language": "en_PH",
            "distance": _measurement("m", "12033"),
            "priceBreakdown": {
                "base": "90",
                "extraMileage": "150",
                "total": "240.50",
                "currency": "PHP",
            },
            "stops": [
                {"stopId": "1514140995971838051", "address": "SM Mall of Asia"},
                {"stopId": "1514140995971838052", "address": "SM Megamall"},
                {"stopId": "1514140995971838053", "address": "Greenbelt"},
            ],
        }
    }
