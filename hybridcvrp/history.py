"""Record of the best solutions and messages found during a search."""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

_U64_MAX = 2**64 - 1


def _rounded_cost(cost: float) -> int:
    if math.isnan(cost) or cost <= 0:
        return 0
    if math.isinf(cost):
        return _U64_MAX
    return min(int(math.floor(cost + 0.5)), _U64_MAX)


@dataclass
class HistoricSolution:
    routes: List[List[int]]
    cost: float

    @classmethod
    def from_individual(cls, individual) -> "HistoricSolution":
        return cls(
            routes=[list(route) for route in individual.phenotype],
            cost=individual.penalized_cost(),
        )

    def __str__(self) -> str:
        lines = [
            f"Route #{number}: " + " ".join(str(stop) for stop in route)
            for number, route in enumerate((r for r in self.routes if r), start=1)
        ]
        lines.append(f"Cost {_rounded_cost(self.cost)}")
        return "\n".join(lines)


@dataclass
class HistoryEntry:
    solution: HistoricSolution
    timestamp: float  # seconds since the search started


@dataclass
class HistoryMessage:
    timestamp: float
    message: str

    def __str__(self) -> str:
        return f"Time: {self.timestamp:.6f}s, {self.message}"


@dataclass
class SearchHistory:
    """Best solutions found so far, with timestamps relative to ``start_time``."""

    start_time: float = field(default_factory=time.monotonic)
    best_cost: float = float("inf")
    messages: List[HistoryMessage] = field(default_factory=list)
    print_new_best: bool = False
    _history: List[HistoryEntry] = field(default_factory=list, repr=False)
    _log_new_best: bool = field(default=True, repr=False)

    def _elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def add(self, individual) -> None:
        """Record ``individual`` as the new best solution."""
        self.best_cost = individual.penalized_cost()
        timestamp = self._elapsed()
        entry = HistoryEntry(HistoricSolution.from_individual(individual), timestamp)
        if self.print_new_best and self._log_new_best:
            print(entry.solution)
        logger.info("%s", HistoryMessage(timestamp, f"New best: {self.best_cost!r}"))
        # Only the last entry keeps its routes.
        if self._history:
            self._history[-1].solution.routes = []
        self._history.append(entry)

    def add_message(self, message: str) -> None:
        self.messages.append(HistoryMessage(self._elapsed(), message))

    def entries(self) -> List[HistoryEntry]:
        return self._history

    def last_entry(self) -> Optional[HistoryEntry]:
        return self._history[-1] if self._history else None

    def set_log_new_best(self, log_new_best: bool) -> None:
        self._log_new_best = log_new_best