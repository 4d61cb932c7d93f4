"""Ranking request filters and paged results."""

from pydantic import BaseModel, Field, model_validator

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import MatchScore


class JobFilter(BaseModel):
    """Upstream filter for the job candidate set. None = no constraint."""
    category_id: int | None = None
    city: str | None = None
    is_remote: bool | None = None
    skill_ids: list[int] | None = None  # job must list at least one
    min_score: float | None = None  # overrides the configured cutoff

    # Radius search: a job qualifies when any located site is within radius_km
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    radius_km: float | None = Field(None, gt=0)

    @model_validator(mode="after")
    def _check_radius_search(self) -> "JobFilter":
        given = [v is not None for v in (self.latitude, self.longitude, self.radius_km)]
        if any(given) and not all(given):
            raise ValueError("latitude, longitude and radius_km must be given together")
        return self

    @property
    def has_radius(self) -> bool:
        return self.radius_km is not None


class CandidateFilter(BaseModel):
    city: str | None = None
    min_years_experience: float | None = None
    skill_ids: list[int] | None = None
    min_score: float | None = None


class ScoringFailure(BaseModel):
    """An element that could not be scored and was left out."""
    entity_id: int
    reason: str


class RankedItem(BaseModel):
    entity_id: int
    entity: Job | CandidateProfile | None = None
    score: MatchScore


class RankedResult(BaseModel):
    items: list[RankedItem] = []
    total: int = 0  # eligible elements after the score cutoff
    page: int = 1
    limit: int = 10
    total_pages: int = 0
    skipped: int = 0  # elements that failed to score
    failures: list[ScoringFailure] = []
