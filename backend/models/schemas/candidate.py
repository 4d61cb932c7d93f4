"""Candidate profile snapshot. Owned by the profile service; read-only here."""

from datetime import datetime

from pydantic import BaseModel


class CandidateSkill(BaseModel):
    skill: int | str  # skill id, name or alias
    years_experience: float = 0.0
    proficiency: str = ""  # beginner, intermediate, advanced, expert


class CandidateProfile(BaseModel):
    id: int
    name: str = ""
    skills: list[CandidateSkill] = []
    years_experience: float = 0.0  # total relevant years
    education_level: str = ""  # highest level attained
    latitude: float | None = None  # preferred location
    longitude: float | None = None
    city: str = ""
    updated_at: datetime | None = None
