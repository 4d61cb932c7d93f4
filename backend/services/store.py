"""Read-side contracts the engine consumes, plus an in-memory implementation.

Persistence lives outside the engine. ``MatchingStore`` is the boundary;
``InMemoryStore`` backs the API, tests and local runs, optionally seeded
from a YAML file with ``skills``, ``jobs`` and ``candidates`` lists.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Protocol

import yaml

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job, JobLocation
from models.schemas.ranking import CandidateFilter, JobFilter
from models.schemas.skill import Skill
from services.geo import nearest_distance_km
from services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)


class MatchingStore(Protocol):
    async def get_job_by_id(self, job_id: int) -> Job | None: ...

    async def list_eligible_jobs(self, filter: JobFilter | None = None) -> list[Job]: ...

    async def get_candidate_profile(self, user_id: int) -> CandidateProfile | None: ...

    async def list_candidates(self, filter: CandidateFilter | None = None) -> list[CandidateProfile]: ...

    async def get_job_locations(self, job_id: int) -> list[JobLocation]: ...

    async def list_skills(self) -> list[Skill]: ...

    async def resolve_skill(self, identifier: int | str) -> Skill | None: ...

    async def get_skill_children(self, skill_id: int) -> list[Skill]: ...

    async def get_skill_parent(self, skill_id: int) -> Skill | None: ...

    async def find_skills_by_alias(self, alias: str) -> list[Skill]: ...

    async def increment_popularity(self, skill_id: int, amount: float = 1.0, event_id: str | None = None) -> bool: ...


class InMemoryStore:
    """Dict-backed MatchingStore.

    Popularity increments are idempotent per ``event_id``: replaying the
    same usage event does not double count.
    """

    def __init__(
        self,
        skills: Iterable[Skill] = (),
        jobs: Iterable[Job] = (),
        candidates: Iterable[CandidateProfile] = (),
    ) -> None:
        self.skills: dict[int, Skill] = {s.id: s for s in skills}
        self.jobs: dict[int, Job] = {j.id: j for j in jobs}
        self.candidates: dict[int, CandidateProfile] = {c.id: c for c in candidates}
        self._applied_events: set[tuple[str, int]] = set()
        self._taxonomy: SkillTaxonomy | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "InMemoryStore":
        filepath = Path(path)
        if not filepath.exists():
            raise FileNotFoundError(f"Seed file not found: {filepath}")
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        store = cls(
            skills=[Skill(**s) for s in data.get("skills", [])],
            jobs=[Job(**j) for j in data.get("jobs", [])],
            candidates=[CandidateProfile(**c) for c in data.get("candidates", [])],
        )
        logger.info(
            "Seeded store from %s: %d skills, %d jobs, %d candidates",
            filepath, len(store.skills), len(store.jobs), len(store.candidates),
        )
        return store

    def taxonomy(self) -> SkillTaxonomy:
        if self._taxonomy is None:
            self._taxonomy = SkillTaxonomy(self.skills.values())
        return self._taxonomy

    def _references(self, refs: Iterable[int | str], wanted: set[int]) -> bool:
        """True when any skill reference (id, name or alias) resolves into ``wanted``."""
        taxonomy = self.taxonomy()
        for ref in refs:
            skill = taxonomy.resolve(ref)
            if skill is not None and skill.id in wanted:
                return True
        return False

    def _job_matches(self, job: Job, f: JobFilter) -> bool:
        if f.category_id is not None and job.category_id != f.category_id:
            return False
        if f.city is not None and job.city.strip().lower() != f.city.strip().lower():
            return False
        if f.is_remote is not None and job.fully_remote != f.is_remote:
            return False
        if f.skill_ids and not self._references((req.skill for req in job.skills), set(f.skill_ids)):
            return False
        if f.has_radius:
            # Only located sites count, remote or not
            nearest = nearest_distance_km(
                f.latitude, f.longitude,
                ((loc.latitude, loc.longitude) for loc in job.locations),
            )
            if nearest is None or nearest > f.radius_km:
                return False
        return True

    def _candidate_matches(self, candidate: CandidateProfile, f: CandidateFilter) -> bool:
        if f.city is not None and candidate.city.strip().lower() != f.city.strip().lower():
            return False
        if f.min_years_experience is not None and candidate.years_experience < f.min_years_experience:
            return False
        if f.skill_ids and not self._references((cs.skill for cs in candidate.skills), set(f.skill_ids)):
            return False
        return True

    # -- jobs --------------------------------------------------------------

    async def get_job_by_id(self, job_id: int) -> Job | None:
        return self.jobs.get(job_id)

    async def list_eligible_jobs(self, filter: JobFilter | None = None) -> list[Job]:
        now = datetime.now(timezone.utc)
        f = filter or JobFilter()
        return [
            job for _, job in sorted(self.jobs.items())
            if job.is_eligible(now) and self._job_matches(job, f)
        ]

    async def get_job_locations(self, job_id: int) -> list[JobLocation]:
        job = self.jobs.get(job_id)
        return list(job.locations) if job else []

    # -- candidates --------------------------------------------------------

    async def get_candidate_profile(self, user_id: int) -> CandidateProfile | None:
        return self.candidates.get(user_id)

    async def list_candidates(self, filter: CandidateFilter | None = None) -> list[CandidateProfile]:
        f = filter or CandidateFilter()
        return [c for _, c in sorted(self.candidates.items()) if self._candidate_matches(c, f)]

    # -- skills ------------------------------------------------------------

    async def list_skills(self) -> list[Skill]:
        return [self.skills[sid] for sid in sorted(self.skills)]

    async def resolve_skill(self, identifier: int | str) -> Skill | None:
        return self.taxonomy().resolve(identifier)

    async def get_skill_children(self, skill_id: int) -> list[Skill]:
        return self.taxonomy().children_of(skill_id)

    async def get_skill_parent(self, skill_id: int) -> Skill | None:
        return self.taxonomy().parent_of(skill_id)

    async def find_skills_by_alias(self, alias: str) -> list[Skill]:
        return self.taxonomy().find_by_alias(alias)

    async def increment_popularity(
        self, skill_id: int, amount: float = 1.0, event_id: str | None = None
    ) -> bool:
        """Add ``amount`` to a skill's popularity (clamped to 100).

        Returns False when the skill is unknown or the event was already
        applied.
        """
        skill = self.skills.get(skill_id)
        if skill is None:
            return False
        if event_id is not None:
            key = (event_id, skill_id)
            if key in self._applied_events:
                return False
            self._applied_events.add(key)
        self.skills[skill_id] = skill.model_copy(
            update={"popularity_score": max(0.0, min(100.0, skill.popularity_score + amount))}
        )
        # Rebuilt on next use so readers never see a half-updated arena
        self._taxonomy = None
        return True
