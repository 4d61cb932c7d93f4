"""Matching engine facade: the operations exposed to HTTP handlers and batch jobs.

Every collaborator is passed in; the engine holds no global state. The
skill taxonomy is a snapshot of the store's skills, rebuilt by
``refresh_taxonomy()`` after popularity updates.
"""

import asyncio
import logging

from pydantic import BaseModel

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import MatchScore
from models.schemas.ranking import CandidateFilter, JobFilter, RankedResult
from models.schemas.skill import Skill
from services.errors import NotFoundError
from services.matching.composite import CompositeScorer, Weights
from services.matching.ranking import RankElement, RankingOrchestrator
from services.recommendations import RecommendationExpander
from services.store import MatchingStore
from services.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    weights: Weights = Weights()
    location_radius_km: float = 50.0
    concurrency: int | None = None  # None = min(cpu count, 16)
    min_score: float = 0.0
    default_page_size: int = 10
    max_page_size: int = 100
    ranking_timeout_seconds: float | None = None


class MatchingEngine:
    def __init__(
        self,
        store: MatchingStore,
        taxonomy: SkillTaxonomy,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or EngineConfig()
        self.orchestrator = RankingOrchestrator(
            concurrency=self.config.concurrency,
            min_score=self.config.min_score,
            default_page_size=self.config.default_page_size,
            max_page_size=self.config.max_page_size,
        )
        self._install_taxonomy(taxonomy)

    @classmethod
    async def create(cls, store: MatchingStore, config: EngineConfig | None = None) -> "MatchingEngine":
        """Build an engine with a taxonomy loaded from ``store``."""
        taxonomy = SkillTaxonomy(await store.list_skills())
        return cls(store, taxonomy, config)

    def _install_taxonomy(self, taxonomy: SkillTaxonomy) -> None:
        # Rankings already running keep the scorer they started with
        self.taxonomy = taxonomy
        self.scorer = CompositeScorer(
            taxonomy,
            weights=self.config.weights,
            location_radius_km=self.config.location_radius_km,
        )
        self.expander = RecommendationExpander(taxonomy, self.store)

    async def refresh_taxonomy(self) -> None:
        self._install_taxonomy(SkillTaxonomy(await self.store.list_skills()))

    # -- loading -----------------------------------------------------------

    async def _get_job(self, job_id: int) -> Job:
        job = await self.store.get_job_by_id(job_id)
        if job is None:
            raise NotFoundError("job", job_id)
        return job

    async def _get_candidate(self, candidate_id: int) -> CandidateProfile:
        candidate = await self.store.get_candidate_profile(candidate_id)
        if candidate is None:
            raise NotFoundError("candidate", candidate_id)
        return candidate

    async def _with_locations(self, job: Job) -> Job:
        if job.locations or job.is_remote:
            return job
        locations = await self.store.get_job_locations(job.id)
        return job.model_copy(update={"locations": locations}) if locations else job

    # -- scoring -----------------------------------------------------------

    async def compute_match(self, job_id: int, candidate_id: int) -> MatchScore:
        job = await self._with_locations(await self._get_job(job_id))
        candidate = await self._get_candidate(candidate_id)
        return self.scorer.score(job, candidate)

    async def rank_jobs_for_candidate(
        self,
        candidate_id: int,
        filter: JobFilter | None = None,
        page: int | None = 1,
        limit: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RankedResult:
        candidate = await self._get_candidate(candidate_id)
        jobs = await self.store.list_eligible_jobs(filter)
        scorer = self.scorer

        async def score_job(job: Job) -> MatchScore:
            job = await self._with_locations(job)
            return await asyncio.to_thread(scorer.score, job, candidate)

        return await self.orchestrator.rank(
            [RankElement(entity_id=j.id, entity=j, recency=j.published_at) for j in jobs],
            score_job,
            page=page,
            limit=limit,
            min_score=filter.min_score if filter else None,
            timeout=self.config.ranking_timeout_seconds,
            cancel_event=cancel_event,
            label=f"rank jobs for candidate {candidate_id}",
        )

    async def rank_candidates_for_job(
        self,
        job_id: int,
        filter: CandidateFilter | None = None,
        page: int | None = 1,
        limit: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RankedResult:
        job = await self._with_locations(await self._get_job(job_id))
        candidates = await self.store.list_candidates(filter)
        scorer = self.scorer

        def score_candidate(candidate: CandidateProfile) -> MatchScore:
            return scorer.score(job, candidate)

        return await self.orchestrator.rank(
            [RankElement(entity_id=c.id, entity=c, recency=c.updated_at) for c in candidates],
            score_candidate,
            page=page,
            limit=limit,
            min_score=filter.min_score if filter else None,
            timeout=self.config.ranking_timeout_seconds,
            cancel_event=cancel_event,
            label=f"rank candidates for job {job_id}",
        )

    async def get_recommended_jobs(self, candidate_id: int, limit: int | None = None) -> RankedResult:
        """First page of eligible jobs ranked for a candidate."""
        return await self.rank_jobs_for_candidate(candidate_id, page=1, limit=limit)

    # -- recommendations ---------------------------------------------------

    async def get_related_skills(self, skill_id: int, limit: int | None = 10) -> list[Skill]:
        return self.expander.related_skills(skill_id, limit)

    async def get_complementary_skills(self, skill_ids: list[int], limit: int | None = 10) -> list[Skill]:
        return self.expander.complementary_skills(skill_ids, limit)

    async def get_skill_suggestions(self, skill_ids: list[int], limit: int | None = 10) -> list[Skill]:
        return self.expander.skill_suggestions(skill_ids, limit)

    async def get_trending_skills(self, limit: int | None = 10) -> list[Skill]:
        return self.expander.trending_skills(limit)

    async def get_similar_jobs(self, job_id: int, limit: int | None = 10) -> list[Job]:
        return await self.expander.similar_jobs(job_id, limit)

    # -- usage -------------------------------------------------------------

    async def record_skill_usage(
        self, skill_ids: list[int], event_id: str | None = None, amount: float = 1.0
    ) -> int:
        """Bump popularity for skills picked in a selection event.

        Issued by callers after scoring, never during it. Returns the number
        of increments the store applied.
        """
        applied = 0
        for sid in dict.fromkeys(skill_ids):
            if await self.store.increment_popularity(sid, amount, event_id=event_id):
                applied += 1
        if applied:
            await self.refresh_taxonomy()
        logger.info("Recorded usage for %d of %d skill(s)", applied, len(skill_ids))
        return applied
