from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_engine
from config import settings
from models.requests import SkillUsageRequest
from models.responses import HealthResponse, SkillUsageResponse
from models.schemas.job import Job
from models.schemas.match_score import MatchScore
from models.schemas.ranking import CandidateFilter, JobFilter, RankedResult
from models.schemas.skill import Skill
from services.engine import MatchingEngine

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
async def health(engine: MatchingEngine = Depends(get_engine)):
    return HealthResponse(status="ok", skills_loaded=len(engine.taxonomy))


@router.get("/match/{job_id}/{candidate_id}", response_model=MatchScore)
async def compute_match(job_id: int, candidate_id: int, engine: MatchingEngine = Depends(get_engine)):
    return await engine.compute_match(job_id, candidate_id)


@router.get("/candidates/{candidate_id}/jobs", response_model=RankedResult)
@limiter.limit(settings.ranking_rate_limit)
async def rank_jobs_for_candidate(
    request: Request,
    candidate_id: int,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    category_id: int | None = None,
    city: str | None = None,
    is_remote: bool | None = None,
    min_score: float | None = Query(None, ge=0, le=100),
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    radius_km: float | None = Query(None, gt=0),
    engine: MatchingEngine = Depends(get_engine),
):
    radius_params = (latitude, longitude, radius_km)
    if any(p is not None for p in radius_params) and any(p is None for p in radius_params):
        raise HTTPException(status_code=400, detail="latitude, longitude and radius_km must be given together")
    job_filter = JobFilter(
        category_id=category_id, city=city, is_remote=is_remote, min_score=min_score,
        latitude=latitude, longitude=longitude, radius_km=radius_km,
    )
    return await engine.rank_jobs_for_candidate(candidate_id, job_filter, page=page, limit=limit)


@router.get("/candidates/{candidate_id}/recommended-jobs", response_model=RankedResult)
@limiter.limit(settings.ranking_rate_limit)
async def recommended_jobs(
    request: Request,
    candidate_id: int,
    limit: int | None = Query(None, ge=1),
    engine: MatchingEngine = Depends(get_engine),
):
    return await engine.get_recommended_jobs(candidate_id, limit=limit)


@router.get("/jobs/{job_id}/candidates", response_model=RankedResult)
@limiter.limit(settings.ranking_rate_limit)
async def rank_candidates_for_job(
    request: Request,
    job_id: int,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    city: str | None = None,
    min_years_experience: float | None = Query(None, ge=0),
    min_score: float | None = Query(None, ge=0, le=100),
    engine: MatchingEngine = Depends(get_engine),
):
    candidate_filter = CandidateFilter(
        city=city, min_years_experience=min_years_experience, min_score=min_score,
    )
    return await engine.rank_candidates_for_job(job_id, candidate_filter, page=page, limit=limit)


@router.get("/jobs/{job_id}/similar", response_model=list[Job])
async def similar_jobs(job_id: int, limit: int = Query(10, ge=0, le=100), engine: MatchingEngine = Depends(get_engine)):
    return await engine.get_similar_jobs(job_id, limit)


@router.get("/skills/trending", response_model=list[Skill])
async def trending_skills(limit: int = Query(10, ge=0, le=100), engine: MatchingEngine = Depends(get_engine)):
    return await engine.get_trending_skills(limit)


@router.get("/skills/complementary", response_model=list[Skill])
async def complementary_skills(
    ids: list[int] = Query(..., min_length=1),
    limit: int = Query(10, ge=0, le=100),
    engine: MatchingEngine = Depends(get_engine),
):
    return await engine.get_complementary_skills(ids, limit)


@router.get("/skills/suggestions", response_model=list[Skill])
async def skill_suggestions(
    ids: list[int] = Query(..., min_length=1),
    limit: int = Query(10, ge=0, le=100),
    engine: MatchingEngine = Depends(get_engine),
):
    return await engine.get_skill_suggestions(ids, limit)


@router.get("/skills/{skill_id}/related", response_model=list[Skill])
async def related_skills(skill_id: int, limit: int = Query(10, ge=0, le=100), engine: MatchingEngine = Depends(get_engine)):
    return await engine.get_related_skills(skill_id, limit)


@router.post("/skills/usage", response_model=SkillUsageResponse)
async def record_skill_usage(body: SkillUsageRequest, engine: MatchingEngine = Depends(get_engine)):
    applied = await engine.record_skill_usage(body.skill_ids, event_id=body.event_id)
    return SkillUsageResponse(applied=applied)
