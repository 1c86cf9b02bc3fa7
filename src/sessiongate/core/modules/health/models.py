from typing import Literal

from pydantic import BaseModel, Field

HealthState = Literal["up", "down"]


class ComponentHealth(BaseModel):
    """Connectivity of one backing store."""

    status: HealthState = Field(..., description="Component status")
    message: str = Field(..., description="Human-readable detail")


class HealthReport(BaseModel):
    """Overall service health. Reported, never acted on."""

    status: HealthState = Field(..., description="'up' only if every component is up")
    components: dict[str, ComponentHealth] = Field(..., description="Per-component status")

    @classmethod
    def from_components(cls, components: dict[str, ComponentHealth]) -> "HealthReport":
        status: HealthState = "up" if all(c.status == "up" for c in components.values()) else "down"
        return cls(status=status, components=components)
