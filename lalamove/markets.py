"""Markets served by the Lalamove API and the catalog returned for them."""

from dataclasses import dataclass, field

from lalamove.errors import DeserializationError, InvalidRegion, UnsupportedLanguage


@dataclass(frozen=True)
class Region:
    """A city or area inside a market, identified by its UN/LOCODE."""

    code: str
    name: str

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Market:
    """A country the API operates in.

    Each market carries the language tags it accepts, the country code sent
    in the ``Market`` header, and the regions it is divided into.
    """

    name: str
    country_code: str
    languages: tuple[str, ...]
    regions: tuple[Region, ...] = field(default=())

    @property
    def default_language(self) -> str:
        return self.languages[0]

    def language(self, tag: str) -> str:
        """Return the canonical spelling of a language tag.

        Args:
            tag: A language tag such as "en_PH", matched case-insensitively.

        Returns:
            The tag as the API expects it.

        Raises:
            UnsupportedLanguage: If the market does not offer the language.
        """
        for language in self.languages:
            if language.lower() == tag.strip().lower():
                return language
        raise UnsupportedLanguage(tag, self.name)

    def region(self, code: str) -> Region:
        """Look up a region by its code, ignoring case."""
        for region in self.regions:
            if region.code.lower() == code.strip().lower():
                return region
        raise InvalidRegion(f"Couldn't parse the location code of the region: {code!r}")


PHILIPPINES = Market(
    name="Philippines",
    country_code="PH",
    languages=("en_PH",),
    regions=(
        Region("PH CEB", "Cebu"),
        Region("PH MNL", "Manila"),
        Region("PH PAM", "Pampanga"),
    ),
)

MARKETS = {market.country_code: market for market in (PHILIPPINES,)}


@dataclass(frozen=True)
class Meters:
    value: float

    def __str__(self) -> str:
        return f"{self.value:g} m"


@dataclass(frozen=True)
class Kilograms:
    value: float

    def __str__(self) -> str:
        return f"{self.value:g} kg"


@dataclass(frozen=True)
class Dimensions:
    width: Meters
    height: Meters
    length: Meters


@dataclass(frozen=True)
class SpecialRequest:
    special_request: str
    description: str


@dataclass(frozen=True)
class Service:
    """A vehicle type offered in a region, with its size and load limits."""

    service: str
    description: str
    dimensions: Dimensions
    load: Kilograms
    special_requests: list[SpecialRequest] = field(default_factory=list)


@dataclass(frozen=True)
class RegionInfo:
    region: Region
    services: list[Service]


@dataclass(frozen=True)
class MarketInfo:
    regions: list[RegionInfo]


def parse_measurement(raw: dict, unit: str) -> float:
    """Read a ``{"unit": ..., "value": "<number>"}`` measurement.

    Args:
        raw: The measurement object from the API.
        unit: The unit the caller expects, "m" or "kg".

    Returns:
        The numeric value.

    Raises:
        DeserializationError: If the unit differs from ``unit``.
        TypeError: If the value is not sent as a string.
        ValueError: If the value is not a number.
    """
    actual = raw["unit"]
    if actual != unit:
        raise DeserializationError(
            f"invalid value: string {actual!r}, expected {unit!r}"
        )
    value = raw["value"]
    if not isinstance(value, str):
        raise TypeError(f"invalid type: {type(value).__name__}, expected a numeric string")
    return float(value)


def parse_meters(raw: dict) -> Meters:
    return Meters(parse_measurement(raw, "m"))


def parse_kilograms(raw: dict) -> Kilograms:
    return Kilograms(parse_measurement(raw, "kg"))


def parse_market_info(data: list, market: Market) -> MarketInfo:
    """Map the ``/v3/cities`` payload onto MarketInfo.

    Args:
        data: The list found under the envelope's "data" key.
        market: The market the client is configured for; region codes are
                resolved against it.

    Returns:
        The parsed MarketInfo.
    """
    if not isinstance(data, list):
        raise DeserializationError(f"expected a list of regions, got {type(data).__name__}")

    regions: list[RegionInfo] = []
    for region in data:
        try:
            resolved = market.region(region["locode"])
        except InvalidRegion as exc:
            raise DeserializationError(str(exc)) from exc

        services = [
            Service(
                service=service["key"],
                description=service["description"],
                dimensions=Dimensions(
                    width=parse_meters(service["dimensions"]["width"]),
                    height=parse_meters(service["dimensions"]["height"]),
                    length=parse_meters(service["dimensions"]["length"]),
                ),
                load=parse_kilograms(service["load"]),
                special_requests=[
                    SpecialRequest(
                        special_request=special["name"],
                        description=special["description"],
                    )
                    for special in service["specialRequests"]
                ],
            )
            for service in region["services"]
        ]
        regions.append(RegionInfo(region=resolved, services=services))

    return MarketInfo(regions=regions)
