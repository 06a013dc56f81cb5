from datetime import date as _date, datetime, timezone
from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --------------------------
# Enumerations
# --------------------------
Category = Literal[
    "clothing", "food", "healthcare", "disaster", "education", "housing",
    "water", "livelihood", "culture", "environment", "other",
]
ListingStatus = Literal["active", "urgent", "completed"]
LocationScope = Literal["community", "country", "worldwide"]
Urgency = Literal["high", "medium", "low"]
Stage = Literal["listed", "matched", "urgent", "arranged", "completed"]
NotificationType = Literal["match", "logistics", "completion", "message"]

USER_SOURCE = "User Donation"

# "Aug 15, 2023" style dates come from the partner catalog
_DISPLAY_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%Y-%m-%d")

def parse_listing_date(value) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, _date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        raw = value.strip()
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _DISPLAY_DATE_FORMATS:
                try:
                    dt = datetime.strptime(raw, fmt)
                    break
                except ValueError:
                    continue
            else:
                raise ValueError(f"Unrecognized date: {value!r}")
    else:
        raise ValueError(f"Unsupported date value: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

# --------------------------
# Shared Submodels
# --------------------------
class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

# --------------------------
# Donations
# --------------------------
class DonationRecord(BaseModel):
    """
    A listing as the matching engine reads it. Category and status stay plain
    strings here: an unknown value simply fails to match a rule.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str = ""
    category: str
    status: str = "active"
    date: datetime
    organization: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # pass-through
    source: str = ""
    source_url: Optional[str] = None
    contact_info: str = ""
    donation_link: Optional[str] = None
    image_url: Optional[str] = None
    user_id: Optional[str] = None
    location: Optional[str] = None
    location_scope: Optional[LocationScope] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_listing_date(v)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

class DonationIn(BaseModel):
    id: Optional[str] = None
    title: str
    description: str = ""
    category: Category
    status: ListingStatus = "active"
    organization: str = ""
    contact_info: str = ""
    donation_link: Optional[str] = None
    image_url: Optional[str] = None
    user_id: Optional[str] = None
    date: Optional[datetime] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    location: Optional[str] = None
    location_scope: LocationScope = "community"

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return None if v is None else parse_listing_date(v)

class DonationStatusUpdate(BaseModel):
    user_id: str
    status: ListingStatus

# --------------------------
# Matching
# --------------------------
class RecipientNeeds(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    categories: List[str] = Field(min_length=1)
    location_scope: LocationScope = "worldwide"
    location: Optional[LatLng] = None
    urgency: Optional[Urgency] = None
    max_distance: Optional[float] = Field(default=None, gt=0)

class MatchResult(BaseModel):
    donation_id: str
    recipient_id: str
    score: int
    match_reason: List[str] = []

# --------------------------
# Tracking
# --------------------------
class StatusEvent(BaseModel):
    id: str
    stage: Stage
    title: str
    description: str
    timestamp: datetime
    actor: str

class TimelineOut(BaseModel):
    donation_id: str
    status: str
    current_stage: Optional[str] = None
    progress: float
    listing_progress: int
    events: List[StatusEvent]

# --------------------------
# Notifications
# --------------------------
class Notification(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    read: bool = False
    donation_id: Optional[str] = None

class NotificationFeedOut(BaseModel):
    unread: int
    items: List[Notification]

# --------------------------
# Geo
# --------------------------
class ReverseGeocodeOut(BaseModel):
    latitude: float
    longitude: float
    display_name: str
