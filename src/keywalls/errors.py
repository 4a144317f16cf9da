"""Custom exception hierarchy for the wall generator."""


class KeywallsError(Exception):
    """Base exception for all wall generator errors."""


class InvalidParamsError(KeywallsError):
    """Bad configuration or arity mismatch (a programming defect)."""


class GeometryError(KeywallsError):
    """Solid or curve construction failure."""


class ConvergenceError(GeometryError):
    """Bisection search ran out of iterations before reaching tolerance."""

    def __init__(self, message: str, best=None) -> None:
        super().__init__(message)
        self.best = best


class ValidationError(KeywallsError):
    """Post-generation validation check failure."""
