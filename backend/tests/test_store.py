"""Tests for the in-memory store."""

import pytest

from pydantic import ValidationError

from conftest import BANDUNG, JAKARTA
from models.schemas.ranking import CandidateFilter, JobFilter
from services.geo import nearest_distance_km

SEED = """
skills:
  - {id: 1, name: Go, aliases: [golang], popularity_score: 40}
  - {id: 2, name: Gin, parent_id: 1}
jobs:
  - id: 10
    title: Go Engineer
    city: Jakarta
    skills:
      - {skill: golang, importance: required, weight: 0.9}
    locations:
      - {latitude: -6.2, longitude: 106.8}
  - {id: 11, title: Draft, status: draft}
candidates:
  - id: 20
    years_experience: 4
    skills: [{skill: gin}]
"""


@pytest.fixture
def seeded(tmp_path):
    from services.store import InMemoryStore
    path = tmp_path / "seed.yaml"
    path.write_text(SEED, encoding="utf-8")
    return InMemoryStore.from_yaml(path)


class TestSeed:
    def test_loads_entities(self, seeded):
        assert set(seeded.skills) == {1, 2}
        assert seeded.jobs[10].skills[0].weight == 0.9
        assert seeded.candidates[20].skills[0].skill == "gin"

    def test_missing_file(self, tmp_path):
        from services.store import InMemoryStore
        with pytest.raises(FileNotFoundError):
            InMemoryStore.from_yaml(tmp_path / "nope.yaml")

    @pytest.mark.asyncio
    async def test_only_eligible_jobs_listed(self, seeded):
        assert [j.id for j in await seeded.list_eligible_jobs()] == [10]
        assert await seeded.list_eligible_jobs(JobFilter(city="Bandung")) == []

    @pytest.mark.asyncio
    async def test_taxonomy_lookups(self, seeded):
        assert (await seeded.resolve_skill("GOLANG")).id == 1
        assert [s.id for s in await seeded.get_skill_children(1)] == [2]
        assert (await seeded.get_skill_parent(2)).id == 1
        assert [s.id for s in await seeded.find_skills_by_alias("golang")] == [1]
        assert len(await seeded.get_job_locations(10)) == 1


class TestPopularity:
    @pytest.mark.asyncio
    async def test_increment_and_clamp(self, seeded):
        assert await seeded.increment_popularity(1, 5.0)
        assert seeded.skills[1].popularity_score == 45.0
        assert await seeded.increment_popularity(1, 500.0)
        assert seeded.skills[1].popularity_score == 100.0

    @pytest.mark.asyncio
    async def test_event_replay_ignored(self, seeded):
        assert await seeded.increment_popularity(1, 1.0, event_id="e")
        assert not await seeded.increment_popularity(1, 1.0, event_id="e")
        assert seeded.skills[1].popularity_score == 41.0

    @pytest.mark.asyncio
    async def test_unknown_skill(self, seeded):
        assert not await seeded.increment_popularity(99)


class TestSkillFilter:
    """Jobs and profiles reference skills by id, name or alias."""

    @pytest.mark.asyncio
    async def test_jobs_by_skill_name(self, store):
        assert [j.id for j in await store.list_eligible_jobs(JobFilter(skill_ids=[3]))] == [102]
        assert [j.id for j in await store.list_eligible_jobs(JobFilter(skill_ids=[4]))] == [101]

    @pytest.mark.asyncio
    async def test_jobs_by_skill_alias_or_id(self, store):
        assert [j.id for j in await store.list_eligible_jobs(JobFilter(skill_ids=[5]))] == [103]
        assert [j.id for j in await store.list_eligible_jobs(JobFilter(skill_ids=[2, 5]))] == [101, 103]

    @pytest.mark.asyncio
    async def test_candidates_by_alias_and_name(self, store):
        assert [c.id for c in await store.list_candidates(CandidateFilter(skill_ids=[2]))] == [201]
        assert [c.id for c in await store.list_candidates(CandidateFilter(skill_ids=[8]))] == [202]
        assert [c.id for c in await store.list_candidates(CandidateFilter(skill_ids=[5]))] == [203]

    @pytest.mark.asyncio
    async def test_unknown_skill_id_matches_nothing(self, store):
        assert await store.list_eligible_jobs(JobFilter(skill_ids=[99])) == []
        assert await store.list_candidates(CandidateFilter(skill_ids=[99])) == []


class TestRadiusFilter:
    @staticmethod
    def _near(point, radius_km) -> JobFilter:
        return JobFilter(latitude=point[0], longitude=point[1], radius_km=radius_km)

    @pytest.mark.asyncio
    async def test_inside_radius(self, store):
        assert [j.id for j in await store.list_eligible_jobs(self._near(JAKARTA, 10))] == [101]
        assert [j.id for j in await store.list_eligible_jobs(self._near(JAKARTA, 200))] == [101, 102]

    @pytest.mark.asyncio
    async def test_outside_radius(self, store):
        assert [j.id for j in await store.list_eligible_jobs(self._near(BANDUNG, 50))] == [102]
        assert await store.list_eligible_jobs(self._near((0.0, 0.0), 100)) == []

    @pytest.mark.asyncio
    async def test_on_radius_is_included(self, store):
        edge = nearest_distance_km(JAKARTA[0], JAKARTA[1], [BANDUNG])
        assert [j.id for j in await store.list_eligible_jobs(self._near(JAKARTA, edge))] == [101, 102]
        assert [j.id for j in await store.list_eligible_jobs(self._near(JAKARTA, edge * 0.999))] == [101]

    @pytest.mark.asyncio
    async def test_jobs_without_located_sites_excluded(self, store):
        # 103 is remote and has no coordinates
        jobs = await store.list_eligible_jobs(self._near(JAKARTA, 20000))
        assert 103 not in [j.id for j in jobs]

    @pytest.mark.asyncio
    async def test_combines_with_other_filters(self, store):
        f = JobFilter(latitude=JAKARTA[0], longitude=JAKARTA[1], radius_km=200, city="Bandung")
        assert [j.id for j in await store.list_eligible_jobs(f)] == [102]

    def test_partial_radius_rejected(self):
        with pytest.raises(ValidationError):
            JobFilter(latitude=1.0, longitude=2.0)
        with pytest.raises(ValidationError):
            JobFilter(latitude=1.0, longitude=2.0, radius_km=0)
