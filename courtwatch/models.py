"""Pydantic models shared by the adapters, the pipeline and the API."""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9]$"
_SHORT_TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9])?$"

SlotKey = tuple[str, str, str]


class CanonicalSlot(BaseModel):
    """Free capacity of one bookable (date, time, location) unit."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., pattern=_DATE_PATTERN, description="Slot date (YYYY-MM-DD)")
    time: str = Field(..., pattern=_TIME_PATTERN, description="Slot start (HH:MM:SS, 24h)")
    location: str = Field(..., min_length=1, description="Provider-qualified location key")
    spaces: int = Field(..., ge=0, description="Number of free bookable units")

    @field_validator("date")
    @classmethod
    def _real_calendar_date(cls, value: str) -> str:
        date_type.fromisoformat(value)
        return value

    @field_validator("location")
    @classmethod
    def _non_blank_location(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("location must not be blank")
        return value

    @property
    def key(self) -> SlotKey:
        return (self.date, self.time, self.location)


class StoredSlot(CanonicalSlot):
    """A row of the persisted snapshot (the previous run's observations)."""


class TransitionSlot(CanonicalSlot):
    """A slot that went from fully booked to bookable between two runs."""

    previous_spaces: int = Field(..., ge=0)
    current_spaces: int = Field(..., gt=0)


class UserPreference(BaseModel):
    """A user's subscription to one (date, time, location)."""

    id: int | None = None
    email: str = Field(..., description="Recipient address")
    date: str = Field(..., description="Slot date (YYYY-MM-DD)")
    time: str = Field(..., description="Slot start (HH:MM or HH:MM:SS)")
    location: str = Field(..., description="Location key as used by CanonicalSlot")
    created_at: datetime | None = None


class UserNotification(BaseModel):
    """All transitions matched for one recipient in one run."""

    email: str
    slots: list[TransitionSlot] = Field(default_factory=list)


class RunSummary(BaseModel):
    """Result of one pipeline run."""

    success: bool = Field(..., description="False only when the run aborted")
    total_slots: int = Field(0, description="Slots fetched across all sources")
    newly_available: int = Field(0, description="Zero-to-positive transitions")
    notifications_sent: int = Field(0, description="Notification groups attempted")
    processing_time: datetime = Field(..., description="When the run started (UTC)")
    error: str | None = Field(None, description="Failure message when success is false")
    slots_by_source: dict[str, int] = Field(
        default_factory=dict, description="Slot count contributed by each source"
    )
    sample_slots: list[CanonicalSlot] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime


# ── Preference submission (collaborator write contract) ───────────────────


class PreferenceSelection(BaseModel):
    date: date_type = Field(..., description="Slot date")
    start_time: str = Field(..., pattern=_SHORT_TIME_PATTERN, description="Start time (HH:MM)")
    location: str = Field(..., min_length=1, description="Location key")


class PreferenceSubmission(BaseModel):
    """Full replacement of one email's selections."""

    email: EmailStr = Field(..., description="User email address")
    selections: list[PreferenceSelection] = Field(..., min_length=1)


class PreferenceSubmissionResult(BaseModel):
    success: bool
    email: str
    count: int
