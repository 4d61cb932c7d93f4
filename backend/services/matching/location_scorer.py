"""Location dimension: distance decay from the candidate's preferred location."""

import logging

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import DimensionScore
from services.errors import InvalidCoordinateError
from services.geo import nearest_distance_km
from services.matching.base import NEUTRAL_SCORE, BaseScorer

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 50.0


class LocationScorer(BaseScorer):
    """100 at 0 km, linear decay to 0 at ``radius_km``, 0 beyond.

    Fully remote jobs always score 100. Unknown coordinates on either side
    score neutral rather than zero.
    """

    dimension = "location"

    def __init__(self, radius_km: float = DEFAULT_RADIUS_KM) -> None:
        if radius_km <= 0:
            raise ValueError(f"radius_km must be > 0, got {radius_km}")
        self.radius_km = radius_km

    def score(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        if job.fully_remote:
            return DimensionScore(score=100.0, detail="remote job")

        if candidate.latitude is None or candidate.longitude is None:
            return DimensionScore(score=NEUTRAL_SCORE, detail="candidate location unknown")

        points = [
            (loc.latitude, loc.longitude)
            for loc in job.locations
            if not loc.is_remote
        ]
        try:
            distance = nearest_distance_km(candidate.latitude, candidate.longitude, points)
        except InvalidCoordinateError as e:
            logger.debug("Candidate %s has invalid coordinates: %s", candidate.id, e)
            return DimensionScore(score=NEUTRAL_SCORE, detail="candidate location invalid")

        if distance is None:
            return DimensionScore(score=NEUTRAL_SCORE, detail="job location unknown")

        score = max(0.0, 100.0 * (1.0 - distance / self.radius_km))
        return DimensionScore(score=score, detail=f"{distance:.1f} km away")
