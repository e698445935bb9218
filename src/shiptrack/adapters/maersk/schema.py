"""Pydantic models describing the Maersk Track & Trace payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _null_to_empty(value: object) -> object:
    return [] if value is None else value


class MaerskBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MaerskLocation(MaerskBaseModel):
    name: str | None = None

    _normalize_name = field_validator("name", mode="before")(_blank_to_none)


class MaerskEvent(MaerskBaseModel):
    event_code: str | None = Field(default=None, alias="eventCode")
    event_date_time: str | None = Field(default=None, alias="eventDateTime")
    event_description: str | None = Field(default=None, alias="eventDescription")
    location: MaerskLocation | None = None

    _normalize_text = field_validator(
        "event_code", "event_date_time", "event_description", mode="before"
    )(_blank_to_none)


class MaerskTransportPlanStage(MaerskBaseModel):
    transport_status: str | None = Field(default=None, alias="transportStatus")


class MaerskSchedule(MaerskBaseModel):
    transport_plan_stage: list[MaerskTransportPlanStage] = Field(
        default_factory=list["MaerskTransportPlanStage"], alias="transportPlanStage"
    )

    _normalize_stages = field_validator("transport_plan_stage", mode="before")(_null_to_empty)


class MaerskTrackingResponse(MaerskBaseModel):
    schedules: list[MaerskSchedule] = Field(default_factory=list["MaerskSchedule"])
    events: list[MaerskEvent] = Field(default_factory=list["MaerskEvent"])

    _normalize_lists = field_validator("schedules", "events", mode="before")(_null_to_empty)

    @property
    def transport_status(self) -> str | None:
        if not self.schedules or not self.schedules[0].transport_plan_stage:
            return None
        return self.schedules[0].transport_plan_stage[0].transport_status
