"""Composite scorer: weighted sum of the four dimension sub-scores."""

import logging
import math

from pydantic import BaseModel

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import MatchScore, Recommendation
from services.errors import InvalidWeightsError
from services.matching.base import BaseScorer, clamp_score
from services.matching.education_scorer import EducationScorer
from services.matching.experience_scorer import ExperienceScorer
from services.matching.location_scorer import LocationScorer
from services.matching.skill_scorer import SkillScorer
from services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6

# (lower bound inclusive, label), highest first
RECOMMENDATION_THRESHOLDS: list[tuple[float, Recommendation]] = [
    (80.0, "strong_match"),
    (60.0, "good_match"),
    (40.0, "possible_match"),
]


class Weights(BaseModel):
    skill: float = 0.45
    experience: float = 0.20
    education: float = 0.15
    location: float = 0.20

    def as_dict(self) -> dict[str, float]:
        return {
            "skill": self.skill,
            "experience": self.experience,
            "education": self.education,
            "location": self.location,
        }


def validate_weights(weights: Weights) -> None:
    """Raise InvalidWeightsError for negative weights or a sum other than 1.0."""
    values = weights.as_dict()
    for name, value in values.items():
        if not math.isfinite(value) or value < 0:
            raise InvalidWeightsError(f"Weight {name!r} must be a non-negative number, got {value}")
    total = sum(values.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise InvalidWeightsError(f"Weights must sum to 1.0, got {total:.6f}")


def recommendation_label(overall: float) -> Recommendation:
    for threshold, label in RECOMMENDATION_THRESHOLDS:
        if overall >= threshold:
            return label
    return "weak_match"


class CompositeScorer:
    """Runs the dimension scorers and folds them into one MatchScore."""

    def __init__(
        self,
        taxonomy: SkillTaxonomy,
        weights: Weights | None = None,
        location_radius_km: float = 50.0,
        scorers: dict[str, BaseScorer] | None = None,
    ) -> None:
        self.weights = weights or Weights()
        validate_weights(self.weights)
        self.scorers: dict[str, BaseScorer] = scorers or {
            "skill": SkillScorer(taxonomy),
            "experience": ExperienceScorer(),
            "education": EducationScorer(),
            "location": LocationScorer(radius_km=location_radius_km),
        }
        missing = set(self.weights.as_dict()) - set(self.scorers)
        if missing:
            raise InvalidWeightsError(f"No scorer for weighted dimension(s): {sorted(missing)}")

    def combine(self, subscores: dict[str, float]) -> float:
        """Weighted sum of sub-scores, rounded to 2 decimals and clamped."""
        weights = self.weights.as_dict()
        total = sum(weights[name] * clamp_score(subscores.get(name, 0.0)) for name in weights)
        return clamp_score(round(total, 2))

    def score(self, job: Job, candidate: CandidateProfile) -> MatchScore:
        results = {name: scorer.evaluate(job, candidate) for name, scorer in self.scorers.items()}
        overall = self.combine({name: r.score for name, r in results.items()})
        skill = results["skill"]
        return MatchScore(
            job_id=job.id,
            candidate_id=candidate.id,
            overall_score=overall,
            skill_score=round(skill.score, 2),
            experience_score=round(results["experience"].score, 2),
            education_score=round(results["education"].score, 2),
            location_score=round(results["location"].score, 2),
            matched_skills=skill.matched_skills,
            missing_skills=skill.missing_skills,
            recommendation=recommendation_label(overall),
        )
