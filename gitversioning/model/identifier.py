"""Project coordinates used to key version resolution."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectIdentifier(BaseModel):
    """
    The (group, artifact, version) triple naming a buildable component.

    Immutable and hashable, equality is structural, so it can be used
    directly as a cache key.
    """

    model_config = ConfigDict(frozen=True)

    group: str = Field(..., description="Group the artifact belongs to")
    artifact: str = Field(..., description="Artifact name")
    version: Optional[str] = Field(None, description="Nominal (declared) version")

    @field_validator("version")
    @classmethod
    def normalize_version(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @classmethod
    def parse(cls, coordinates: str) -> "ProjectIdentifier":
        """Parse ``group:artifact[:version]`` coordinates."""
        parts = coordinates.split(":")
        if len(parts) not in (2, 3) or not all(parts[:2]):
            raise ValueError(
                f"Invalid coordinates '{coordinates}'. Expected group:artifact[:version]"
            )
        version = parts[2] if len(parts) == 3 else None
        return cls(group=parts[0], artifact=parts[1], version=version)

    def with_version(self, version: str) -> "ProjectIdentifier":
        return self.model_copy(update={"version": version})

    def __str__(self) -> str:
        if self.version is None:
            return f"{self.group}:{self.artifact}"
        return f"{self.group}:{self.artifact}:{self.version}"
