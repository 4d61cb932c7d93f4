"""Engine output for a single (job, candidate) pair."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Recommendation = Literal["strong_match", "good_match", "possible_match", "weak_match"]


class DimensionScore(BaseModel):
    """Output of one dimension scorer."""
    score: float = 0.0  # 0-100
    matched_skills: list[str] = []
    missing_skills: list[str] = []
    detail: str = ""  # short human-readable explanation


class MatchScore(BaseModel):
    """Immutable match result. Recomputation replaces it wholesale."""
    model_config = ConfigDict(frozen=True)

    job_id: int
    candidate_id: int
    overall_score: float = 0.0  # 0-100
    skill_score: float = 0.0
    experience_score: float = 0.0
    education_score: float = 0.0
    location_score: float = 0.0
    matched_skills: list[str] = []
    missing_skills: list[str] = []  # unmet required-tier skills only
    recommendation: Recommendation = "weak_match"
