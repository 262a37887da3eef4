"""Components of a hybrid genetic metaheuristic for the Capacitated Vehicle Routing Problem."""

__version__ = "0.1.0"

__all__ = [
    "circle_sector",
    "cli",
    "config",
    "context",
    "evaluate",
    "history",
    "individual",
    "matrix",
    "population",
    "problem",
    "split",
]