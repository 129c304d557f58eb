from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# --- Conversation -----------------------------------------------------------

class ConversationMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ToolInvocation(BaseModel):
    id: str
    name: str
    arguments: Dict[str, Any] = {}


class ToolOutcome(BaseModel):
    id: str
    name: str
    result: Dict[str, Any]

    @property
    def success(self) -> bool:
        return bool(self.result.get("success"))


# --- Geography / itinerary ----------------------------------------------------

class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @property
    def is_resolved(self) -> bool:
        return not (self.lat == 0 and self.lng == 0)


# (0, 0) means "not geocoded"; never plot it.
SENTINEL: GeoPoint = GeoPoint(lat=0.0, lng=0.0)

PlaceCategory = Literal["stay", "food", "attraction", "activity"]


class GeocodedPlace(BaseModel):
    name: str
    category: PlaceCategory
    coordinates: GeoPoint = SENTINEL
    address: Optional[str] = None
    provider_id: Optional[str] = None


class ItineraryLocation(BaseModel):
    id: str
    name: str
    coordinates: GeoPoint = SENTINEL
    active: bool = False


class DayActivities(BaseModel):
    morning: Optional[str] = None
    afternoon: Optional[str] = None
    evening: Optional[str] = None


class Day(BaseModel):
    day_number: int
    date: Optional[str] = None
    location: str
    title: str
    description: str = ""
    coordinates: GeoPoint = SENTINEL
    activities: DayActivities = DayActivities()
    places: List[GeocodedPlace] = []


class Itinerary(BaseModel):
    id: str
    title: str
    country: str
    total_days: int
    travelers: int = 1
    trip_type: str = "custom"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    locations: List[ItineraryLocation] = []
    days: List[Day] = []


# --- Persistence ------------------------------------------------------------

class TripStatus(str, Enum):
    PLANNED = "planned"
    COMPLETED = "completed"
    WISHLIST = "wishlist"


class TripPreferences(BaseModel):
    """Versioned replacement for the old free-form preferences blob."""

    version: Literal[1] = 1
    kind: Literal["trip", "wishlist"] = "trip"
    country: Optional[str] = None
    iso2: Optional[str] = None
    destinations: List[str] = []
    itinerary: Optional[Itinerary] = None
    day_plans: List[Dict[str, Any]] = []
    days: Optional[int] = None
    nights: Optional[int] = None
    destination_id: Optional[str] = None
    destination_name: Optional[str] = None
    description: Optional[str] = None
    estimated_budget: Optional[float] = None
    currency: Optional[str] = None
    # Anything the model sends that has no field of its own.
    extra: Dict[str, Any] = {}


class TripRecord(BaseModel):
    id: str
    user_id: str
    title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    trip_type: str = "custom"
    number_of_people: int = 1
    status: TripStatus = TripStatus.PLANNED
    preferences: TripPreferences = Field(default_factory=TripPreferences)
    total_budget: Optional[float] = None
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": self.status.value,
            "tripType": self.trip_type,
            "numberOfPeople": self.number_of_people,
            "country": self.preferences.country,
            "iso2": self.preferences.iso2,
        }


# --- Booking ----------------------------------------------------------------

class Hotel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    address: str = ""
    city: str = ""
    country: str = ""
    photo_url: str = ""
    rating: int = 0
    review_score: float = 0.0
    review_score_word: str = ""
    review_count: int = 0
    price: float
    price_per_night: float
    currency: str
    booking_url: str = ""
    amenities: List[str] = []
    distance_from_center: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
