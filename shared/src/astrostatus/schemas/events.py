"""Pydantic schemas for detected astronomical events.

Times are Julian Day numbers (UT). Sign fields hold sign indices (0 = Aries,
11 = Pisces). Attribute names are snake_case; ``model_dump(by_alias=True)``
produces the camelCase record shapes consumed by the export layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

SignIndex = Annotated[int, Field(ge=0, le=11)]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CelestialSample(_Record):
    """Position of one body at one instant, as returned by a position oracle."""

    body: str
    time: float
    longitude: float = Field(ge=0.0, lt=360.0)
    speed: float

    @computed_field  # type: ignore[prop-decorator]
    @property
    def retrograde(self) -> bool:
        return self.speed < 0


class SignPosition(_Record):
    sign_index: SignIndex
    degree_in_sign: float = Field(ge=0.0, lt=30.0)


class EclipseInfo(_Record):
    """Eclipse possibility attached to a new or full moon."""

    kind: Literal["solar", "lunar"]
    distance_to_node_deg: float = Field(ge=0.0, le=180.0)


class StationEvent(_Record):
    """A retrograde or direct station."""

    type: Literal["station_retrograde", "station_direct"]
    body: str
    time: float
    sign: SignIndex
    degree_in_sign: float
    longitude: float


class IngressEvent(_Record):
    """A sign ingress."""

    type: Literal["ingress"] = "ingress"
    body: str
    time: float
    from_sign: SignIndex
    to_sign: SignIndex
    retrograde: bool
    longitude: float

    @model_validator(mode="after")
    def _check_signs_differ(self) -> IngressEvent:
        if self.from_sign == self.to_sign:
            raise ValueError(f"ingress must change sign (from_sign == to_sign == {self.from_sign})")
        return self


class PhaseEvent(_Record):
    """A new or full moon, with optional eclipse data."""

    type: Literal["new_moon", "full_moon"]
    time: float
    moon_sign: SignIndex
    sun_sign: SignIndex
    moon_longitude: float
    sun_longitude: float
    eclipse: EclipseInfo | None = None


class VoidPeriod(_Record):
    """A void-of-course interval of the Moon."""

    start_time: float
    end_time: float
    moon_sign: SignIndex
    started_before_range_start: bool = False
    start_estimated: bool = False

    @model_validator(mode="after")
    def _check_order(self) -> VoidPeriod:
        if self.end_time < self.start_time:
            raise ValueError("void period ends before it starts")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time) * 24.0


class VoidStatus(_Record):
    """Void-of-course state of the Moon at one instant."""

    time: float
    is_void: bool
    moon_longitude: float
    moon_sign: SignIndex
    moon_speed: float
    days_to_exit: float | None = None
    void_ends_at: float | None = None


class LunarPhase(_Record):
    """Phase of the Moon at one instant.

    ``fraction`` is synodic progress (0 new, 0.5 full); ``illumination`` is the
    lit fraction of the disc.
    """

    time: float
    name: Literal[
        "new_moon",
        "waxing_crescent",
        "first_quarter",
        "waxing_gibbous",
        "full_moon",
        "waning_gibbous",
        "last_quarter",
        "waning_crescent",
    ]
    elongation: float = Field(ge=0.0, lt=360.0)
    fraction: float = Field(ge=0.0, lt=1.0)
    illumination: float = Field(ge=0.0, le=1.0)


class PlanetStatus(_Record):
    """Snapshot of one body."""

    body: str
    time: float
    longitude: float
    speed: float
    retrograde: bool
    sign: SignIndex
    degree_in_sign: float


PlanetEvent = Annotated[StationEvent | IngressEvent, Field(discriminator="type")]


class PlanetEvents(_Record):
    """Stations and ingresses of one body over a range."""

    body: str
    stations: list[StationEvent] = Field(default_factory=list)
    ingresses: list[IngressEvent] = Field(default_factory=list)


class AlmanacStatus(_Record):
    """Current sky status: body snapshots, Moon phase, void state, upcoming voids."""

    time: float
    generated_at: datetime
    planets: list[PlanetStatus]
    moon_phase: LunarPhase
    void: VoidStatus
    upcoming_voids: list[VoidPeriod] = Field(default_factory=list)


class AlmanacSchedule(_Record):
    """Events over a range.

    ``planet_events`` groups stations and ingresses by body;
    ``planet_timeline`` holds the same events merged in time order.
    """

    start: float
    end: float
    generated_at: datetime
    lunar_phases: list[PhaseEvent] = Field(default_factory=list)
    planet_events: dict[str, PlanetEvents] = Field(default_factory=dict)
    planet_timeline: list[PlanetEvent] = Field(default_factory=list)
    void_periods: list[VoidPeriod] = Field(default_factory=list)
