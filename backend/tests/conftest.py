"""Shared fixtures: a small skill forest, jobs around Jakarta/Bandung, candidates."""

from datetime import datetime, timedelta, timezone

import pytest

from models.schemas.candidate import CandidateProfile, CandidateSkill
from models.schemas.job import Job, JobLocation, JobSkillRequirement
from models.schemas.skill import Skill
from services.engine import EngineConfig, MatchingEngine
from services.store import InMemoryStore
from services.taxonomy import SkillTaxonomy

JAKARTA = (-6.2, 106.8)
BANDUNG = (-6.9147, 107.6098)
NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: ranking runs with large candidate sets"
    )


def make_skills() -> list[Skill]:
    return [
        Skill(id=1, name="Programming", skill_type="technical", popularity_score=50),
        Skill(id=2, name="Go", skill_type="technical", parent_id=1, aliases=["Golang", " GO lang "], popularity_score=95),
        Skill(id=3, name="Python", skill_type="technical", parent_id=1, aliases=["py"], popularity_score=97),
        Skill(id=4, name="Docker", skill_type="tool", parent_id=9, aliases=["docker engine"], popularity_score=90),
        Skill(id=5, name="Kubernetes", skill_type="tool", parent_id=9, aliases=["k8s"], popularity_score=85),
        Skill(id=6, name="Communication", skill_type="soft", popularity_score=70),
        Skill(id=7, name="English", skill_type="language", popularity_score=80),
        Skill(id=8, name="Django", skill_type="technical", parent_id=3, popularity_score=75),
        Skill(id=9, name="Containers", skill_type="tool", popularity_score=60),
        Skill(id=10, name="Leadership", skill_type="soft", popularity_score=65, is_active=False),
    ]


def make_jobs() -> list[Job]:
    return [
        Job(
            id=101, title="Backend Engineer (Go)", category_id=1, city="Jakarta",
            experience_min=2, experience_max=5, education_level="bachelor",
            skills=[
                JobSkillRequirement(skill=2, importance="required", weight=0.8),
                JobSkillRequirement(skill="docker", importance="preferred", weight=0.5),
            ],
            locations=[JobLocation(latitude=JAKARTA[0], longitude=JAKARTA[1], city="Jakarta", is_primary=True)],
            published_at=NOW - timedelta(days=1),
        ),
        Job(
            id=102, title="Python Developer", category_id=1, city="Bandung",
            experience_min=3, education_level="bachelor",
            skills=[JobSkillRequirement(skill="Python", importance="required", weight=1.0)],
            locations=[JobLocation(latitude=BANDUNG[0], longitude=BANDUNG[1], city="Bandung")],
            published_at=NOW - timedelta(days=3),
        ),
        Job(
            id=103, title="Remote Platform Engineer", category_id=2, city="Jakarta", is_remote=True,
            skills=[JobSkillRequirement(skill="k8s", importance="required", weight=1.0)],
            published_at=NOW - timedelta(days=2),
        ),
        Job(
            id=104, title="Closed Role", category_id=1, city="Jakarta", status="closed",
            published_at=NOW - timedelta(days=10),
        ),
        Job(
            id=105, title="Expired Role", category_id=1, city="Jakarta",
            published_at=NOW - timedelta(days=60), expired_at=NOW - timedelta(days=30),
        ),
    ]


def make_candidates() -> list[CandidateProfile]:
    return [
        CandidateProfile(
            id=201, name="Go dev in Jakarta", years_experience=3, education_level="bachelor",
            skills=[CandidateSkill(skill="golang"), CandidateSkill(skill="Docker")],
            latitude=JAKARTA[0], longitude=JAKARTA[1], city="Jakarta",
            updated_at=NOW - timedelta(days=1),
        ),
        CandidateProfile(
            id=202, name="Junior Pythonista", years_experience=1, education_level="diploma",
            skills=[CandidateSkill(skill="Django")],
            latitude=BANDUNG[0], longitude=BANDUNG[1], city="Bandung",
            updated_at=NOW - timedelta(days=5),
        ),
        CandidateProfile(
            id=203, name="No location", years_experience=8, education_level="master",
            skills=[CandidateSkill(skill="Kubernetes"), CandidateSkill(skill="unknown-skill")],
        ),
    ]


@pytest.fixture
def skills() -> list[Skill]:
    return make_skills()


@pytest.fixture
def taxonomy(skills) -> SkillTaxonomy:
    return SkillTaxonomy(skills)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(skills=make_skills(), jobs=make_jobs(), candidates=make_candidates())


@pytest.fixture
def engine(store) -> MatchingEngine:
    return MatchingEngine(store, store.taxonomy(), EngineConfig(concurrency=4))


@pytest.fixture
def job_by_id() -> dict[int, Job]:
    return {j.id: j for j in make_jobs()}


@pytest.fixture
def candidate_by_id() -> dict[int, CandidateProfile]:
    return {c.id: c for c in make_candidates()}
