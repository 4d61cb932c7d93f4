from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    skills_loaded: int = 0


class SkillUsageResponse(BaseModel):
    applied: int = 0


class RankingCancelledResponse(BaseModel):
    detail: str
    scored: int = 0  # elements that finished before cancellation
    skipped: int = 0
