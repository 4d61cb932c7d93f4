from pydantic import BaseModel, Field


class SkillUsageRequest(BaseModel):
    skill_ids: list[int] = Field(..., min_length=1, max_length=200, description="Skills picked in one selection event")
    event_id: str | None = Field(None, max_length=100, description="Idempotency key for the event")
