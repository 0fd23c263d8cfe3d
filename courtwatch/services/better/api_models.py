"""
Pydantic models that mirror the Better activity-times response.

These are *internal* – only the Better client and service use them.
Only the fields the pipeline needs are declared; everything else in
the upstream payload is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, StrictInt, field_validator, model_validator


class FormattedTime(BaseModel):
    format_12_hour: str | None = None
    format_24_hour: str | None = None


class BetterTimeSlot(BaseModel):
    """One element of the `data` collection."""

    starts_at: FormattedTime | None = None
    ends_at: FormattedTime | None = None
    timestamp: StrictInt | None = None
    date: str
    spaces: StrictInt
    name: str | None = None
    venue_slug: str | None = None
    category_slug: str | None = None

    @field_validator("spaces", mode="before")
    @classmethod
    def _integral_float(cls, value):
        # JSON numbers such as 2.0 are whole counts
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @model_validator(mode="after")
    def _check_usable(self) -> BetterTimeSlot:
        if not self.date:
            raise ValueError("missing date")
        if self.spaces < 0:
            raise ValueError("negative spaces")
        if not self.has_timestamp and not self.start_24h:
            raise ValueError("no usable start time")
        return self

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None and self.timestamp > 0

    @property
    def start_24h(self) -> str | None:
        if self.starts_at is None:
            return None
        return self.starts_at.format_24_hour or None
