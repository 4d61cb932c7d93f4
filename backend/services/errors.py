"""Error taxonomy for the matching engine.

Only orchestrator-level errors propagate to callers. Dimension scorers
absorb their own failures into neutral or zero sub-scores.
"""


class MatchingError(Exception):
    """Base class for all engine errors."""


class NotFoundError(MatchingError):
    """A job, candidate or skill identifier does not resolve."""

    def __init__(self, kind: str, identifier) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier!r}")


class InvalidCoordinateError(MatchingError, ValueError):
    """Latitude/longitude outside the valid range."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Invalid coordinate: ({latitude}, {longitude})")


class InvalidWeightsError(MatchingError, ValueError):
    """Dimension weights are negative or do not sum to 1.0."""


class RankingCancelledError(MatchingError):
    """Ranking stopped before every element was scored.

    ``partial`` holds the RankedResult built from the elements that did
    finish, so callers can choose between retrying and accepting it.
    """

    def __init__(self, partial, reason: str = "cancelled", scored: int = 0) -> None:
        self.partial = partial
        self.reason = reason
        self.scored = scored
        super().__init__(f"Ranking {reason} after scoring {scored} element(s)")
