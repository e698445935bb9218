"""Pydantic models describing the HMM tracking payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _null_to_empty(value: object) -> object:
    return [] if value is None else value


class HmmBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class HmmEvent(HmmBaseModel):
    code: str | None = None
    datetime: str | None = None
    description: str | None = None
    location: str | None = None

    _normalize_text = field_validator(
        "code", "datetime", "description", "location", mode="before"
    )(_blank_to_none)


class HmmTrackingResponse(HmmBaseModel):
    status: str | None = None
    events: list[HmmEvent] = Field(default_factory=list["HmmEvent"])

    _normalize_events = field_validator("events", mode="before")(_null_to_empty)
