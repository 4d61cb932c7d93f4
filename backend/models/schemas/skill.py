"""Skill taxonomy node."""

import re

from pydantic import BaseModel, field_validator, model_validator


def normalize_name(value: str) -> str:
    """Lowercase, trim and collapse inner whitespace."""
    return re.sub(r"\s+", " ", value.strip().lower())


class Skill(BaseModel):
    """A canonical skill node.

    Parent/child links are stored as ids, never as embedded objects; the
    taxonomy resolver derives the child lists.
    """
    id: int
    name: str
    normalized_name: str = ""
    skill_type: str = "technical"  # technical, soft, language, tool
    difficulty_level: str = "intermediate"  # beginner, intermediate, advanced
    popularity_score: float = 0.0  # 0-100
    parent_id: int | None = None
    category_id: int | None = None
    aliases: list[str] = []
    is_active: bool = True

    @field_validator("popularity_score")
    @classmethod
    def _clamp_popularity(cls, v: float) -> float:
        return max(0.0, min(100.0, v))

    @field_validator("aliases")
    @classmethod
    def _normalize_aliases(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for alias in v:
            norm = normalize_name(alias)
            if norm and norm not in seen:
                seen.append(norm)
        return seen

    @model_validator(mode="after")
    def _fill_normalized_name(self) -> "Skill":
        self.normalized_name = normalize_name(self.normalized_name or self.name)
        return self
