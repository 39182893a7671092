"""Pydantic request schemas for API endpoints."""

from pydantic import BaseModel, Field


class CreateWorldRequest(BaseModel):
    """Request to create a new world."""

    preset: str = Field(default="tess", description="Preset id: 'tess', 'we1914' or 'bac1200'")
    seedText: str | None = Field(  # noqa: N815
        default=None, description="Seed string; a random one is generated when omitted"
    )
    randomness: float | None = Field(default=None, ge=0, le=1, description="Global randomness 0-1")
    allianceGuarantee: bool | None = Field(  # noqa: N815
        default=None, description="Whether allies join wars under pressure"
    )


class TickRequest(BaseModel):
    """Request to advance the simulation."""

    count: int = Field(default=1, ge=1, le=1000, description="Number of ticks to run")


class SetAttributeRequest(BaseModel):
    """Explicit attribute override (slider binding)."""

    path: str = Field(description="Dotted attribute path, e.g. 'pillars.religion'")
    value: float = Field(description="New value (0-100; treasury 0-9999)")


class UpdateSettingsRequest(BaseModel):
    """Runtime settings changes; omitted fields are left alone."""

    randomness: float | None = Field(default=None, description="Global randomness 0-1")
    allianceGuarantee: bool | None = None  # noqa: N815
    allyPressureThreshold: float | None = Field(  # noqa: N815
        default=None, description="External pressure at which allies join wars"
    )


class PairRequest(BaseModel):
    """Two civilizations (force war / force peace)."""

    a: str = Field(description="First civilization id")
    b: str = Field(description="Second civilization id")


class ColonizationRequest(BaseModel):
    """Force-create a colonial expedition."""

    civId: str  # noqa: N815
    hexId: int = Field(ge=0)  # noqa: N815
    cost: float = Field(default=0.0, ge=0, description="Treasury already charged")


class ImportWorldRequest(BaseModel):
    """Exported world document to load into a new session."""

    state: dict = Field(description="Document produced by the export endpoint")
