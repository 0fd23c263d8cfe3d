"""
Pydantic models that mirror the ClubSpark GetVenueSessions response.

These are *internal* – the LtaSource translates them into
CanonicalSlot values. Field names follow the upstream JSON.

Each level keeps its children as raw JSON; the service validates them
one element at a time so a single malformed court, day or session
does not take the rest of the venue down with it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LtaSession(BaseModel):
    """A bookable span on one court, in minutes from midnight."""
    Name: str | None = None
    Category: int | None = None
    StartTime: int
    EndTime: int
    Capacity: int  # 1 = available, 0 = booked
    CourtCost: float | None = None
    LightingCost: float | None = None


class LtaDay(BaseModel):
    Date: str  # ISO datetime, e.g. "2024-06-01T00:00:00"
    Sessions: list[Any] = Field(default_factory=list)


class LtaResource(BaseModel):
    """One physical court."""
    Name: str | None = None
    Days: list[Any] = Field(default_factory=list)


class LtaVenueSessions(BaseModel):
    Resources: list[Any] = Field(default_factory=list)
