"""Route and solution evaluation with capacity penalties."""

import sys
from dataclasses import dataclass, field
from typing import List, Sequence

EPSILON = 1e-6


def approx_eq(a: float, b: float) -> bool:
    return abs(a - b) < EPSILON


def approx_lt(a: float, b: float) -> bool:
    return a < b - EPSILON


def approx_lte(a: float, b: float) -> bool:
    return a <= b + EPSILON


def approx_gt(a: float, b: float) -> bool:
    return a > b + EPSILON


def approx_gte(a: float, b: float) -> bool:
    return a >= b - EPSILON


def route_cost(distance: float, overload: float, penalty: float) -> float:
    """Distance plus the penalty for any positive overload."""
    return distance + penalty * max(0.0, overload)


@dataclass
class RouteEvaluation:
    distance: float
    overload: float
    penalized_cost: float

    @classmethod
    def empty(cls) -> "RouteEvaluation":
        return cls(sys.float_info.max, sys.float_info.max, float("inf"))

    def is_feasible(self) -> bool:
        return approx_lte(self.overload, 0.0)


@dataclass
class SolutionEvaluation:
    """Cost, feasibility and neighbour links of a set of routes."""

    penalized_cost: float = float("inf")
    feasible: bool = False
    routes: List[RouteEvaluation] = field(default_factory=list)
    predecessors: List[int] = field(default_factory=list)
    successors: List[int] = field(default_factory=list)

    def is_feasible(self) -> bool:
        return self.feasible

    def _resize(self, num_nodes: int) -> None:
        self.predecessors = (self.predecessors + [0] * num_nodes)[:num_nodes]
        self.successors = (self.successors + [0] * num_nodes)[:num_nodes]

    def evaluate(self, ctx, solution: Sequence[Sequence[int]]) -> None:
        """Evaluate ``solution``, a list of routes that exclude the depot."""
        self._resize(ctx.problem.dim())
        depot = 0
        capacity = ctx.problem.vehicle.cap
        penalty = ctx.config.penalty_capacity
        distance = ctx.matrix_provider.distance
        nodes = ctx.problem.nodes

        total = 0.0
        feasible = True
        routes = []
        for route in solution:
            last = depot
            load = 0.0
            route_distance = 0.0
            for node in route:
                route_distance += distance.get(last, node)
                load += nodes[node].demand
                self.predecessors[node] = last
                self.successors[last] = node
                last = node
            self.successors[last] = depot
            route_distance += distance.get(last, depot)

            overload = load - capacity
            evaluation = RouteEvaluation(
                route_distance, overload, route_cost(route_distance, overload, penalty)
            )
            routes.append(evaluation)
            total += evaluation.penalized_cost
            if approx_gt(overload, 0.0):
                feasible = False

        self.routes = routes
        self.feasible = feasible
        self.penalized_cost = total