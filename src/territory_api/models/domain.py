"""Domain models for partners, territories and quotes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

LatLng = tuple[float, float]
Ring = list[LatLng]
EditablePolygon = list[Ring]

QuoteStatus = Literal["assigned", "unassigned"]
QUOTE_ASSIGNED: QuoteStatus = "assigned"
QUOTE_UNASSIGNED: QuoteStatus = "unassigned"

# Machine-readable reasons stored on unassigned quotes.
REASON_NO_TERRITORY_MATCH = "no_territory_match"
REASON_NO_ACTIVE_PARTNER = "no_active_partner"


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"
    GUEST = "guest"


@dataclass(slots=True)
class Contact:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(slots=True)
class Partner:
    """A company that receives quotes inside the territories it owns."""

    id: str
    name: str
    partner_type: Optional[str] = None
    languages: Optional[list[str]] = None
    contact: Contact = field(default_factory=Contact)
    active: bool = True
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class Territory:
    """A partner-owned region.

    ``geojson`` is the persisted longitude-first geometry; ``polygons`` is the
    latitude-first editable form produced by the geometry adapter.
    """

    id: str
    partner_id: str
    name: Optional[str]
    priority: int
    geojson: Optional[dict]
    polygons: list[EditablePolygon] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or "Untitled territory"


@dataclass(slots=True)
class Quote:
    id: str
    created_at: Optional[datetime]
    address: Optional[str]
    lat: float
    lng: float
    status: QuoteStatus
    reason: Optional[str] = None
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None
    territory_id: Optional[str] = None
    territory_name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class AssignmentResult:
    territory_id: str
    territory_name: str
    partner_id: str
    partner_name: str
    priority: int


@dataclass(slots=True, frozen=True)
class MatchOutcome:
    """Matcher result: an assignment, or the reason there is none."""

    assignment: Optional[AssignmentResult]
    reason: Optional[str] = None
    candidates: int = 0


@dataclass(slots=True, frozen=True)
class TerritoryRef:
    id: str
    name: str
    partner_id: str
    partner_name: Optional[str]
    priority: int


@dataclass(slots=True, frozen=True)
class TerritoryOverlap:
    """Another territory intersecting a focal territory."""

    territory_id: str
    other: TerritoryRef
    overlap_area: float


@dataclass(slots=True, frozen=True)
class OverlapPair:
    first: TerritoryRef
    second: TerritoryRef
    overlap_area: float


@dataclass(slots=True, frozen=True)
class PriorityChange:
    territory_id: str
    old_priority: int
    new_priority: int

    @property
    def changed(self) -> bool:
        return self.old_priority != self.new_priority


@dataclass(slots=True, frozen=True)
class CreatedQuote:
    quote_id: str
    status: QuoteStatus
    reason: Optional[str]
    territory_id: Optional[str]
    territory_name: Optional[str]
    partner_id: Optional[str]
    partner_name: Optional[str]


@dataclass(slots=True, frozen=True)
class GeocodeResult:
    found: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    display_name: Optional[str] = None
