"""Error taxonomy for a single planning cycle."""


class PlanningError(Exception):
    """Base class for failures raised while searching the path tunnel."""
    pass


class ProjectionFailure(PlanningError):
    """Raised when a point cannot be mapped between Cartesian and Frenet frames."""
    pass


class EmptySampling(PlanningError):
    """Raised when the lattice sampler yields no drivable level."""
    pass


class SearchFailure(PlanningError):
    """Raised when the DP search cannot reach the sink or backtrack to the root."""
    pass


class TimeSeriesMismatch(PlanningError):
    """Raised when ego and obstacle time series have different lengths.

    Recovered locally by the decision engine: the obstacle is skipped.
    """
    pass
