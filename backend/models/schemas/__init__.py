"""Pydantic contracts shared by the matching engine and the API."""

from models.schemas.candidate import CandidateProfile, CandidateSkill
from models.schemas.job import Job, JobLocation, JobSkillRequirement
from models.schemas.match_score import DimensionScore, MatchScore
from models.schemas.ranking import CandidateFilter, JobFilter, RankedItem, RankedResult, ScoringFailure
from models.schemas.skill import Skill

__all__ = [
    "CandidateProfile",
    "CandidateSkill",
    "Job",
    "JobLocation",
    "JobSkillRequirement",
    "DimensionScore",
    "MatchScore",
    "CandidateFilter",
    "JobFilter",
    "RankedItem",
    "RankedResult",
    "ScoringFailure",
    "Skill",
]
