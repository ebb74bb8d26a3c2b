class SimulationError(Exception):
    """Base exception for simulator failures."""
    pass


class InvalidInput(SimulationError, ValueError):
    """Raised when a job, worker or run parameter is outside its declared range."""
    pass


class SimulationCancelled(SimulationError):
    """Raised when a run is cancelled between chunks."""
    pass
