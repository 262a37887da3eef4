"""Shared state of a search: problem, matrices, configuration and history."""

import logging
import math
import random
import time
from dataclasses import replace
from typing import Optional, Sequence

from .config import Config
from .history import SearchHistory
from .matrix import MatrixProvider
from .problem import Problem

logger = logging.getLogger(__name__)


def _initial_penalty(max_distance: Optional[float], max_demand: Optional[float]) -> float:
    if max_distance is None or max_demand is None:
        return 100.0
    ratio = max_distance / max_demand if max_demand else math.inf
    if math.isnan(ratio):
        ratio = 10_000.0
    return max(0.0001, min(10_000.0, ratio))


class Context:
    """Everything the solver components share while searching."""

    def __init__(
        self,
        problem: Problem,
        config: Config,
        start_time: Optional[float] = None,
        input_matrix=None,
    ) -> None:
        config = replace(config)
        self.problem = problem
        if config.deterministic:
            logger.info("Deterministic with seed: %s", config.seed)
            self.random = random.Random(config.seed)
        else:
            self.random = random.Random()
        self.matrix_provider = MatrixProvider.from_problem(problem, config, input_matrix)
        logger.info("Matrices built!")
        self.config = config
        self.search_history = SearchHistory(
            start_time=time.monotonic() if start_time is None else start_time
        )
        self.iteration = 0
        self.setup()

    def setup(self) -> None:
        self.config.num_vehicles = self.initial_num_vehicles()
        self.reset_penalty()

    def elapsed(self) -> float:
        """Seconds since the search started."""
        return time.monotonic() - self.search_history.start_time

    def terminate(self) -> bool:
        if self.elapsed() >= self.config.time_limit:
            return True
        max_iterations = self.config.max_iterations
        return max_iterations is not None and self.iteration >= max_iterations

    def next_iteration(self) -> None:
        self.iteration += 1

    def reset_penalty(self) -> None:
        self.config.penalty_capacity = _initial_penalty(
            self.matrix_provider.distance.max(), self.problem.max_demand()
        )

    def vehicle_lower_bound(self) -> int:
        """Minimum number of vehicles from the bin packing relaxation."""
        return math.ceil(self.problem.total_demand() / self.problem.vehicle.cap)

    def initial_num_vehicles(self) -> int:
        """Lower bound plus a safety margin of 20% and two vehicles."""
        return math.ceil(1.2 * self.vehicle_lower_bound() + 2.0)

    def from_mapping(self, mapping: Sequence[int]) -> "Context":
        """Context of the sub-problem made of the nodes named by ``mapping``."""
        history = SearchHistory(start_time=self.search_history.start_time)
        history.set_log_new_best(False)
        rng = random.Random()
        rng.setstate(self.random.getstate())

        sub = Context.__new__(Context)
        sub.problem = self.problem.from_mapping(mapping)
        sub.matrix_provider = self.matrix_provider.from_mapping(mapping)
        sub.config = replace(self.config)
        sub.random = rng
        sub.search_history = history
        sub.iteration = 0
        return sub