"""Skill dimension: taxonomy-aware matching of job requirements.

A requirement is met when the candidate holds an equivalent skill: the
same skill, an ancestor or descendant of it, or one sharing an alias.
Credit per met requirement is weight x tier multiplier; the sub-score is
credit over total declared weight.
"""

import logging

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import DimensionScore
from models.schemas.skill import Skill
from services.matching.base import BaseScorer
from services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)

TIER_MULTIPLIERS = {
    "required": 1.0,
    "preferred": 0.6,
    "optional": 0.3,
}


class SkillScorer(BaseScorer):
    dimension = "skill"

    def __init__(self, taxonomy: SkillTaxonomy) -> None:
        self._taxonomy = taxonomy

    def score(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        if not job.skills:
            return DimensionScore(score=100.0, detail="no skill requirements")

        total_weight = sum(req.weight for req in job.skills)
        if total_weight <= 0:
            return DimensionScore(score=100.0, detail="no weighted skill requirements")

        held: list[Skill] = []
        for cs in candidate.skills:
            skill = self._taxonomy.resolve(cs.skill)
            if skill is not None:
                held.append(skill)

        credited = 0.0
        matched: list[str] = []
        missing: list[str] = []
        for req in job.skills:
            required_skill = self._taxonomy.resolve(req.skill)
            if required_skill is None:
                logger.debug("Job %s requires unknown skill %r", job.id, req.skill)
                if req.importance == "required":
                    missing.append(str(req.skill))
                continue

            if any(self._taxonomy.are_equivalent(required_skill, h) for h in held):
                credited += req.weight * TIER_MULTIPLIERS[req.importance]
                matched.append(required_skill.name)
            elif req.importance == "required":
                missing.append(required_skill.name)

        return DimensionScore(
            score=credited / total_weight * 100,
            matched_skills=matched,
            missing_skills=missing,
            detail=f"{len(matched)}/{len(job.skills)} skill requirements met",
        )
