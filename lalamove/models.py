"""Request and response values shared by the Lalamove client operations."""

from dataclasses import dataclass
from enum import Enum

import phonenumbers

from lalamove.currencies import Money
from lalamove.errors import (
    InvalidDeliveryStatus,
    InvalidIdentifier,
    InvalidPhoneNumber,
    StopCountError,
)
from lalamove.markets import Meters

MIN_RECIPIENT_STOPS = 1
MAX_RECIPIENT_STOPS = 15

MAX_ID = 2**64 - 1


def validate_recipient_count(count: int) -> int:
    """Check that a delivery has an allowed number of recipient stops.

    Args:
        count: Number of drop-off stops, not counting the pickup.

    Returns:
        ``count`` unchanged.

    Raises:
        StopCountError: If ``count`` is outside [1, 15].
    """
    if not MIN_RECIPIENT_STOPS <= count <= MAX_RECIPIENT_STOPS:
        raise StopCountError(
            f"A delivery needs between {MIN_RECIPIENT_STOPS} and "
            f"{MAX_RECIPIENT_STOPS} recipient stops, got {count}."
        )
    return count


class _NumericId:
    """An opaque unsigned integer identifier issued by the API."""

    __slots__ = ("value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_ID:
            raise InvalidIdentifier(
                f"{type(self).__name__} must be an unsigned 64-bit integer, got {value!r}"
            )
        self.value = value

    @classmethod
    def parse(cls, raw: str):
        """Parse an identifier from its string form."""
        text = str(raw).strip()
        if not text.isdigit() or not text.isascii():
            raise InvalidIdentifier(f"Couldn't parse {raw!r} as a {cls.__name__}.")
        return cls(int(text))

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and other.value == self.value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value))


class QuotationId(_NumericId):
    __slots__ = ()


class StopId(_NumericId):
    __slots__ = ()


class DeliveryId(_NumericId):
    __slots__ = ()


class DeliveryStatus(Enum):
    """Lifecycle state of a placed order."""

    ASSIGNING_DRIVER = "ASSIGNING_DRIVER"
    ON_GOING = "ON_GOING"
    PICKED_UP = "PICKED_UP"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"

    @classmethod
    def parse(cls, raw: str) -> "DeliveryStatus":
        try:
            return cls(raw.strip().upper())
        except (ValueError, AttributeError) as exc:
            raise InvalidDeliveryStatus(
                f"Couldn't find a corresponding delivery status for {raw!r}."
            ) from exc


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    address: str


@dataclass(frozen=True)
class PersonInfo:
    """Contact details for the sender or a recipient of a delivery.

    ``phone_number`` may be international ("+63 917 123 4567") or local
    ("0917 123 4567") when ``region`` names its country. It is stored in
    E.164 form.
    """

    name: str
    phone_number: str
    region: str | None = None

    def __post_init__(self):
        try:
            parsed = phonenumbers.parse(self.phone_number, self.region)
        except phonenumbers.NumberParseException as exc:
            raise InvalidPhoneNumber(
                f"Couldn't parse {self.phone_number!r} as a phone number: {exc}"
            ) from exc
        if not phonenumbers.is_valid_number(parsed):
            raise InvalidPhoneNumber(f"{self.phone_number!r} is not a valid phone number.")

        object.__setattr__(
            self,
            "phone_number",
            phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164),
        )


@dataclass(frozen=True)
class QuotationRequest:
    """A route to be priced: one pickup followed by 1 to 15 drop-offs."""

    service: str
    pick_up_location: Location
    stops: tuple[Location, ...]

    def __post_init__(self):
        object.__setattr__(self, "stops", tuple(self.stops))
        validate_recipient_count(len(self.stops))

    @property
    def recipient_count(self) -> int:
        return len(self.stops)

    @property
    def locations(self) -> list[Location]:
        """Every stop in submission order, pickup first."""
        return [self.pick_up_location, *self.stops]


@dataclass(frozen=True)
class QuotedRequest:
    """Identifiers the API issued for a quotation.

    They must be sent back unchanged when placing the order.
    """

    quotation_id: QuotationId
    pick_up_stop_id: StopId
    stop_ids: tuple[StopId, ...]

    def __post_init__(self):
        object.__setattr__(self, "stop_ids", tuple(self.stop_ids))
        validate_recipient_count(len(self.stop_ids))


@dataclass(frozen=True)
class Quote:
    distance: Meters
    price: Money


@dataclass(frozen=True)
class DeliveryRequest:
    quoted: QuotedRequest
    sender: PersonInfo
    recipients_info: tuple[PersonInfo, ...]

    def __post_init__(self):
        object.__setattr__(self, "recipients_info", tuple(self.recipients_info))
        validate_recipient_count(len(self.recipients_info))
        if len(self.recipients_info) != len(self.quoted.stop_ids):
            raise StopCountError(
                f"The quotation has {len(self.quoted.stop_ids)} recipient stops but "
                f"{len(self.recipients_info)} recipients were given."
            )


@dataclass(frozen=True)
class Delivery:
    id: DeliveryId
    share_link: str
