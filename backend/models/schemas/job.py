"""Job snapshot consumed by the matching engine."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

Importance = Literal["required", "preferred", "optional"]


class JobSkillRequirement(BaseModel):
    """A skill the job asks for."""
    skill: int | str  # skill id, name or alias
    importance: Importance = "required"
    weight: float = Field(default=1.0, ge=0.0, le=1.0)


class JobLocation(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    city: str = ""
    location_type: str = "onsite"  # onsite, hybrid, remote
    is_primary: bool = False

    @property
    def is_remote(self) -> bool:
        return self.location_type == "remote"


class Job(BaseModel):
    id: int
    title: str = ""
    category_id: int | None = None
    city: str = ""
    is_remote: bool = False
    experience_min: int | None = None  # years, None = unbounded
    experience_max: int | None = None
    education_level: str | None = None  # None = no requirement
    skills: list[JobSkillRequirement] = []
    locations: list[JobLocation] = []
    status: str = "published"
    published_at: datetime | None = None
    expired_at: datetime | None = None

    def is_eligible(self, now: datetime | None = None) -> bool:
        """Published and not expired."""
        if self.status != "published":
            return False
        if self.expired_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        expired_at = self.expired_at
        if expired_at.tzinfo is None:
            expired_at = expired_at.replace(tzinfo=timezone.utc)
        return expired_at > now

    @property
    def fully_remote(self) -> bool:
        if self.is_remote:
            return True
        return bool(self.locations) and all(loc.is_remote for loc in self.locations)
