"""Recommendation expander: related/complementary skills and similar jobs.

Best-effort enrichments. Unknown ids and empty neighbourhoods yield empty
lists, never errors. A ``limit`` of 0 or less means no limit.
"""

import logging
from typing import Iterable

from models.schemas.job import Job
from models.schemas.skill import Skill
from services.store import MatchingStore
from services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)


def _by_popularity(skills: Iterable[Skill]) -> list[Skill]:
    return sorted(skills, key=lambda s: (-s.popularity_score, s.normalized_name, s.id))


def _take(items: list, limit: int | None) -> list:
    if limit is None or limit <= 0:
        return items
    return items[:limit]


class RecommendationExpander:
    def __init__(self, taxonomy: SkillTaxonomy, store: MatchingStore) -> None:
        self._taxonomy = taxonomy
        self._store = store

    def related_skills(self, skill_id: int, limit: int | None = 10) -> list[Skill]:
        """Skills sharing type, category or taxonomy branch with ``skill_id``."""
        anchor = self._taxonomy.get(skill_id)
        if anchor is None:
            return []
        root = self._taxonomy.root_of(anchor.id)

        related = []
        for skill in self._taxonomy.all():
            if skill.id == anchor.id or not skill.is_active:
                continue
            same_type = skill.skill_type == anchor.skill_type
            same_category = anchor.category_id is not None and skill.category_id == anchor.category_id
            same_branch = self._taxonomy.root_of(skill.id) == root
            if same_type or same_category or same_branch:
                related.append(skill)
        return _take(_by_popularity(related), limit)

    def complementary_skills(self, skill_ids: list[int], limit: int | None = 10) -> list[Skill]:
        """Skills of a different type than the primary (first known) input skill.

        When the primary skill has a category, candidates are drawn from
        that category only.
        """
        primary = next(
            (s for s in (self._taxonomy.get(sid) for sid in skill_ids) if s is not None),
            None,
        )
        if primary is None:
            return []

        excluded = set(skill_ids)
        complementary = [
            skill for skill in self._taxonomy.all()
            if skill.is_active
            and skill.id not in excluded
            and skill.skill_type != primary.skill_type
            and (primary.category_id is None or skill.category_id == primary.category_id)
        ]
        return _take(_by_popularity(complementary), limit)

    def skill_suggestions(self, skill_ids: list[int], limit: int | None = 10) -> list[Skill]:
        """Union of the related skills of every input skill, inputs excluded."""
        excluded = set(skill_ids)
        found: dict[int, Skill] = {}
        for sid in skill_ids:
            for skill in self.related_skills(sid, limit=None):
                if skill.id not in excluded:
                    found[skill.id] = skill
        return _take(_by_popularity(found.values()), limit)

    def trending_skills(self, limit: int | None = 10) -> list[Skill]:
        return _take(_by_popularity(s for s in self._taxonomy.all() if s.is_active), limit)

    async def similar_jobs(self, job_id: int, limit: int | None = 10) -> list[Job]:
        """Eligible jobs sharing category or city with the anchor, newest first."""
        anchor = await self._store.get_job_by_id(job_id)
        if anchor is None:
            return []
        anchor_city = anchor.city.strip().lower()

        similar = []
        for job in await self._store.list_eligible_jobs():
            if job.id == anchor.id:
                continue
            same_category = anchor.category_id is not None and job.category_id == anchor.category_id
            same_city = bool(anchor_city) and job.city.strip().lower() == anchor_city
            if same_category or same_city:
                similar.append(job)

        similar.sort(key=lambda j: (
            j.published_at is None,
            -j.published_at.timestamp() if j.published_at else 0.0,
            j.id,
        ))
        logger.debug("Found %d job(s) similar to %d", len(similar), job_id)
        return _take(similar, limit)
