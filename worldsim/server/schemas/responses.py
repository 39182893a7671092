"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel, Field


class CreateWorldResponse(BaseModel):
    """Response after creating or importing a world."""

    worldId: str  # noqa: N815
    preset: str
    seedText: str  # noqa: N815
    tick: int
    state: dict


class WorldStateResponse(BaseModel):
    """Response containing the current world snapshot."""

    worldId: str  # noqa: N815
    tick: int
    state: dict


class TickResponse(BaseModel):
    """Response after advancing the simulation."""

    worldId: str  # noqa: N815
    tick: int
    results: list[dict] = Field(default_factory=list)
    state: dict


class ActionResponse(BaseModel):
    """Response after a mutator call."""

    changed: bool
    message: str
    data: dict | None = None


class ExportResponse(BaseModel):
    """Full exported world document."""

    worldId: str  # noqa: N815
    state: dict
