"""Education dimension: ordinal comparison of education levels."""

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import DimensionScore
from services.matching.base import BaseScorer

EDUCATION_RANKS = {
    "none": 0,
    "high_school": 1,
    "diploma": 2,
    "bachelor": 3,
    "master": 4,
    "doctorate": 5,
}

# Synonyms seen in profile and job data, including Indonesian degree codes
_EDUCATION_SYNONYMS = {
    "": "none",
    "high school": "high_school",
    "highschool": "high_school",
    "sma": "high_school",
    "smk": "high_school",
    "sma/smk": "high_school",
    "associate": "diploma",
    "d1": "diploma",
    "d2": "diploma",
    "d3": "diploma",
    "d4": "diploma",
    "bachelors": "bachelor",
    "bachelor's": "bachelor",
    "s1": "bachelor",
    "masters": "master",
    "master's": "master",
    "s2": "master",
    "phd": "doctorate",
    "doctoral": "doctorate",
    "s3": "doctorate",
}

# Requirement values meaning "no requirement"
_UNSPECIFIED = {"", "any", "tidak ditentukan", "none"}

RANK_PENALTY = 25.0


def education_rank(level: str | None) -> int | None:
    """Rank for a level name, or None when the name is not recognized."""
    key = (level or "").strip().lower().replace("-", " ")
    key = _EDUCATION_SYNONYMS.get(key, key).replace(" ", "_")
    return EDUCATION_RANKS.get(key)


class EducationScorer(BaseScorer):
    dimension = "education"

    def score(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        required = (job.education_level or "").strip().lower()
        if required in _UNSPECIFIED:
            return DimensionScore(score=100.0, detail="no education requirement")

        required_rank = education_rank(required)
        if required_rank is None:
            return DimensionScore(score=100.0, detail=f"unrecognized requirement {required!r}")

        candidate_rank = education_rank(candidate.education_level)
        if candidate_rank is None:
            candidate_rank = EDUCATION_RANKS["none"]

        gap = required_rank - candidate_rank
        if gap <= 0:
            return DimensionScore(score=100.0, detail="meets education requirement")
        return DimensionScore(
            score=max(0.0, 100.0 - RANK_PENALTY * gap),
            detail=f"{gap} level(s) below {job.education_level}",
        )
