"""Abstract base class for the dimension scorers."""

from abc import ABC, abstractmethod
import logging

from models.schemas.candidate import CandidateProfile
from models.schemas.job import Job
from models.schemas.match_score import DimensionScore

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


class BaseScorer(ABC):
    """Base class for one scoring dimension.

    Subclasses must implement:
        - dimension: name of the sub-score (skill, experience, ...)
        - score(job, candidate): pure computation returning a DimensionScore

    Missing data with a sensible default (unknown location, unresolvable
    skill) is absorbed inside score(). Anything else raises and is
    handled by the ranking orchestrator as a per-element failure.
    """

    dimension: str = ""

    @abstractmethod
    def score(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        """Return a 0-100 sub-score with explanatory detail."""

    def evaluate(self, job: Job, candidate: CandidateProfile) -> DimensionScore:
        """Run score() and clamp the result into [0, 100]."""
        result = self.score(job, candidate)
        clamped = clamp_score(result.score)
        if clamped != result.score:
            logger.debug(
                "%s sub-score %.2f clamped to %.2f (job=%s candidate=%s)",
                self.dimension, result.score, clamped, job.id, candidate.id,
            )
            result = result.model_copy(update={"score": clamped})
        return result
