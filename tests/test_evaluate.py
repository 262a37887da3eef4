import math
from types import SimpleNamespace

import pytest

from hybridcvrp.evaluate import (
    RouteEvaluation,
    SolutionEvaluation,
    approx_eq,
    approx_gt,
    approx_gte,
    approx_lt,
    approx_lte,
    route_cost,
)
from hybridcvrp.problem import Coordinate, Node, Problem, Vehicle


class UnitDistance:
    """Distance 1 between different nodes, 0 to itself."""

    def get(self, row, col):
        return 0.0 if row == col else 1.0


def make_ctx(demands, cap, penalty):
    nodes = [Node(i, Coordinate(float(i), 0.0), d) for i, d in enumerate(demands)]
    return SimpleNamespace(
        problem=Problem(nodes, Vehicle(0, cap)),
        config=SimpleNamespace(penalty_capacity=penalty),
        matrix_provider=SimpleNamespace(distance=UnitDistance()),
    )


def test_approx_comparisons():
    assert approx_eq(1.0, 1.0 + 1e-9)
    assert not approx_lt(1.0, 1.0 + 1e-9)
    assert approx_lte(1.0 + 1e-9, 1.0)
    assert not approx_gt(1.0 + 1e-9, 1.0)
    assert approx_gte(1.0 - 1e-9, 1.0)
    assert approx_lt(1.0, 2.0) and approx_gt(2.0, 1.0)


def test_route_cost_ignores_negative_overload():
    assert route_cost(10.0, -5.0, 100.0) == 10.0


def test_route_cost_penalizes_overload():
    assert route_cost(10.0, 2.0, 3.0) == 16.0


def test_route_evaluation_empty():
    empty = RouteEvaluation.empty()
    assert math.isinf(empty.penalized_cost)
    assert not empty.is_feasible()


def test_feasible_solution():
    ctx = make_ctx([0, 2, 3, 4], cap=10.0, penalty=100.0)
    evaluation = SolutionEvaluation()
    evaluation.evaluate(ctx, [[1, 2], [3]])
    assert evaluation.is_feasible()
    assert evaluation.routes[0].distance == 3.0
    assert evaluation.penalized_cost == pytest.approx(
        sum(route.distance for route in evaluation.routes)
    )
    assert all(route.is_feasible() for route in evaluation.routes)


def test_links_are_consistent():
    ctx = make_ctx([0, 1, 1, 1], cap=10.0, penalty=1.0)
    evaluation = SolutionEvaluation()
    evaluation.evaluate(ctx, [[2, 1, 3]])
    assert evaluation.successors[0] == 2
    assert evaluation.predecessors[2] == 0
    assert evaluation.successors[2] == 1
    assert evaluation.predecessors[1] == 2
    assert evaluation.successors[3] == 0


def test_infeasible_solution_penalized():
    ctx = make_ctx([0, 6, 7], cap=10.0, penalty=5.0)
    evaluation = SolutionEvaluation()
    evaluation.evaluate(ctx, [[1, 2], []])
    assert not evaluation.is_feasible()
    overloaded = evaluation.routes[0]
    assert overloaded.overload == pytest.approx(3.0)
    assert overloaded.penalized_cost == pytest.approx(
        route_cost(overloaded.distance, overloaded.overload, 5.0)
    )
    assert evaluation.routes[1].distance == 0.0
    assert len(evaluation.routes) == 2


def test_reevaluation_replaces_routes():
    ctx = make_ctx([0, 1, 1], cap=10.0, penalty=1.0)
    evaluation = SolutionEvaluation()
    evaluation.evaluate(ctx, [[1], [2], []])
    evaluation.evaluate(ctx, [[1, 2]])
    assert len(evaluation.routes) == 1
    assert len(evaluation.successors) == 3