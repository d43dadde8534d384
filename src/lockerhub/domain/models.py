"""
Domain models (Pydantic).

These types mirror the records owned by the locker API server. The client only ever holds
transient copies:
- `User`, `Business`, `Booking` as returned by the API (camelCase JSON, `_id` identities)
- request payloads (`LoginRequest`, `CreateBookingRequest`, ...)
- `Location`, the device's last known or fallback position (never persisted)

Keeping these models in one place helps:
- validation (reject malformed API payloads early),
- one place that knows the GeoJSON `[longitude, latitude]` axis order,
- consistent JSON output across the CLI and the stores.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from lockerhub.core.geo import GeoPoint

BookingStatus = Literal["pending", "confirmed", "active", "completed", "cancelled", "expired"]
PaymentStatus = Literal["pending", "processing", "completed", "failed", "refunded"]
BusinessType = Literal["restaurant", "grocery", "cafe", "other"]


class ApiModel(BaseModel):
    """Base for API records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_api(self) -> dict[str, Any]:
        """JSON-ready payload using wire names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Location(BaseModel):
    """Device position (or development fallback) in decimal degrees."""

    latitude: float
    longitude: float
    accuracy: float | None = None

    def as_point(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lon=self.longitude)


class Address(ApiModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class GeoJsonPoint(ApiModel):
    """GeoJSON point; `coordinates` is `[longitude, latitude]`."""

    type: str = "Point"
    coordinates: tuple[float, float]

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    def as_point(self) -> GeoPoint:
        return GeoPoint(lat=self.coordinates[1], lon=self.coordinates[0])


class User(ApiModel):
    id: str = Field(alias="_id")
    first_name: str
    last_name: str
    email: str
    phone_number: str = ""
    role: str = "customer"
    is_active: bool = True
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Business(ApiModel):
    id: str = Field(alias="_id")
    name: str
    description: str = ""
    business_type: BusinessType = "other"
    address: Address = Field(default_factory=Address)
    location: GeoJsonPoint
    phone_number: str = ""
    email: str | None = None
    website: str | None = None
    images: list[str] = Field(default_factory=list)
    total_lockers: int = Field(0, ge=0)
    available_lockers: int = Field(0, ge=0)
    price_per_hour: float = Field(0, ge=0)
    amenities: list[str] = Field(default_factory=list)
    operating_hours: Any = None
    owner_id: str | None = None
    is_active: bool = True
    is_verified: bool = False
    rating: float = 0
    review_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Client-side only. Set by the nearby-search path (`annotate_distances`); None elsewhere.
    distance_km: float | None = None

    @model_validator(mode="after")
    def _validate_lockers(self) -> "Business":
        if self.available_lockers > self.total_lockers:
            raise ValueError("availableLockers must not exceed totalLockers")
        return self


class Booking(ApiModel):
    id: str = Field(alias="_id")
    user_id: str | None = None
    business_id: str | None = None
    business: Business | None = None
    locker_number: str = ""
    start_time: datetime
    end_time: datetime
    duration_hours: float = Field(0, ge=0)
    total_amount: float = Field(0, ge=0)
    status: BookingStatus = "pending"
    payment_id: str | None = None
    payment_status: PaymentStatus = "pending"
    access_code: str | None = None
    special_instructions: str | None = None
    cancellation_reason: str | None = None
    checked_in_at: datetime | None = None
    checked_out_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("business_id", mode="before")
    @classmethod
    def _unwrap_business_ref(cls, value: Any) -> Any:
        # Populated references arrive as an embedded object instead of an id string.
        if isinstance(value, dict):
            return value.get("_id") or value.get("id")
        return value

    @field_validator("locker_number", mode="before")
    @classmethod
    def _stringify_locker(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @model_validator(mode="after")
    def _validate_window(self) -> "Booking":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class AuthResponse(ApiModel):
    user: User
    token: str


class LoginRequest(ApiModel):
    email: str
    password: str


class RegisterRequest(ApiModel):
    first_name: str
    last_name: str
    email: str
    password: str
    phone_number: str
    role: str | None = None


class ProfileUpdate(ApiModel):
    first_name: str
    last_name: str
    phone_number: str


class CreateBookingRequest(ApiModel):
    business_id: str
    start_time: datetime
    duration_hours: float = Field(..., gt=0)
    special_instructions: str | None = None


class SearchBusinessesRequest(ApiModel):
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    zip_code: str | None = None
    business_type: BusinessType | None = None
    name: str | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)


class BookingQuery(ApiModel):
    status: BookingStatus | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
