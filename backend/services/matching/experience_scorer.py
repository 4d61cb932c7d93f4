"""Experience dimension: candidate years against the job's band."""

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import DimensionScore
from services.matching.base import BaseScorer

SHORTFALL_PENALTY_PER_YEAR = 10.0
EXCESS_PENALTY_PER_YEAR = 5.0
# Top of the "senior" experience band (6-10 years). A job capping below
# this is asking for a less experienced hire, so excess years count.
SENIOR_CEILING_YEARS = 10


class ExperienceScorer(BaseScorer):
    dimension = "experience"

    def __init__(self, senior_ceiling_years: int = SENIOR_CEILING_YEARS) -> None:
        self.senior_ceiling_years = senior_ceiling_years

    def score(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        low, high = job.experience_min, job.experience_max
        years = max(0.0, candidate.years_experience)

        if low is None and high is None:
            return DimensionScore(score=100.0, detail="no experience band")

        if low is not None and years < low:
            gap = low - years
            return DimensionScore(
                score=max(0.0, 100.0 - SHORTFALL_PENALTY_PER_YEAR * gap),
                detail=f"{gap:g} year(s) below minimum of {low}",
            )

        if high is not None and years > high:
            excess = years - high
            if high < self.senior_ceiling_years:
                return DimensionScore(
                    score=max(0.0, 100.0 - EXCESS_PENALTY_PER_YEAR * excess),
                    detail=f"{excess:g} year(s) above maximum of {high}",
                )
            return DimensionScore(score=100.0, detail=f"above maximum of {high}, uncapped")

        return DimensionScore(score=100.0, detail="within experience band")
