import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from services.engine import EngineConfig
from services.matching.composite import Weights


class Settings(BaseSettings):
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Dimension weights, must sum to 1.0
    weight_skill: float = 0.45
    weight_experience: float = 0.20
    weight_education: float = 0.15
    weight_location: float = 0.20

    location_radius_km: float = 50.0
    concurrency: int | None = None  # None = min(cpu count, 16)
    min_score: float = 0.0
    default_page_size: int = 10
    max_page_size: int = 100
    ranking_timeout_seconds: float | None = None
    ranking_rate_limit: str = "30/minute"

    seed_file: str = ""  # YAML with skills/jobs/candidates for the in-memory store

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "MATCH_"}

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value):
        """Accept MATCH_CORS_ORIGINS as a comma-separated string or JSON list."""
        if not isinstance(value, str):
            return value
        if value.startswith("["):
            return json.loads(value)
        return [o.strip() for o in value.split(",") if o.strip()]

    def engine_config(self) -> EngineConfig:
        return EngineConfig(
            weights=Weights(
                skill=self.weight_skill,
                experience=self.weight_experience,
                education=self.weight_education,
                location=self.weight_location,
            ),
            location_radius_km=self.location_radius_km,
            concurrency=self.concurrency,
            min_score=self.min_score,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
            ranking_timeout_seconds=self.ranking_timeout_seconds,
        )


settings = Settings()
