import random

import pytest

from hybridcvrp.config import Config
from hybridcvrp.context import Context
from hybridcvrp.individual import Individual
from hybridcvrp.problem import Coordinate, Node, Problem, Vehicle
from hybridcvrp.split import NodeSplit, Split


def make_ctx(points, demands, cap, linear=True):
    nodes = [
        Node(index, Coordinate(float(x), float(y)), float(demand))
        for index, ((x, y), demand) in enumerate(zip(points, demands))
    ]
    config = Config(deterministic=True, linear_split=linear)
    return Context(Problem(nodes, Vehicle(0, float(cap))), config)


def random_ctx(seed, size, linear):
    rng = random.Random(seed)
    points = [(50, 50)] + [(rng.randint(0, 100), rng.randint(0, 100)) for _ in range(size)]
    demands = [0] + [rng.randint(1, 5) for _ in range(size)]
    return make_ctx(points, demands, 1000, linear)


def customers(individual):
    return sorted(node for route in individual.phenotype for node in route)


def spread_ctx(linear=True):
    return make_ctx([(0, 0), (10, 0), (0, 10), (-10, 0)], [0, 2, 2, 2], 2, linear)


def test_node_split_defaults_to_zero():
    node = NodeSplit()
    assert (node.demand, node.distance_depot, node.distance_next) == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("linear", [True, False])
def test_line_instance_single_route(linear):
    ctx = make_ctx([(0, 0), (1, 0), (2, 0), (3, 0)], [0, 1, 1, 1], 10, linear)
    individual = Individual(genotype=[1, 2, 3])
    Split(ctx).run(ctx, individual, ctx.config.num_vehicles)
    assert individual.num_nonempty_routes() == 1
    assert individual.penalized_cost() == pytest.approx(6.0)
    assert individual.is_feasible()


@pytest.mark.parametrize("linear", [True, False])
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_run_covers_every_customer_once(linear, seed):
    ctx = random_ctx(seed, 20, linear)
    individual = Individual.new_random(ctx, 0)
    Split(ctx).run(ctx, individual, ctx.config.num_vehicles)
    assert customers(individual) == list(range(1, 21))
    assert len(individual.phenotype) >= ctx.config.num_vehicles
    total = sum(route.penalized_cost for route in individual.evaluation.routes)
    assert individual.penalized_cost() == pytest.approx(total)


@pytest.mark.parametrize("seed", [4, 5, 6])
def test_linear_and_bellman_agree_with_ample_capacity(seed):
    linear_ctx = random_ctx(seed, 15, True)
    bellman_ctx = random_ctx(seed, 15, False)
    genotype = list(range(1, 16))
    random.Random(seed).shuffle(genotype)
    first = Individual(genotype=list(genotype))
    second = Individual(genotype=list(genotype))
    Split(linear_ctx).run(linear_ctx, first, linear_ctx.config.num_vehicles)
    Split(bellman_ctx).run(bellman_ctx, second, bellman_ctx.config.num_vehicles)
    assert first.penalized_cost() == pytest.approx(second.penalized_cost())


@pytest.mark.parametrize("linear", [True, False])
def test_split_reports_too_many_routes(linear):
    ctx = spread_ctx(linear)
    individual = Individual(genotype=[1, 2, 3])
    assert Split(ctx).split(ctx, individual, 2) is False
    assert individual.num_nonempty_routes() == 3
    assert customers(individual) == [1, 2, 3]


@pytest.mark.parametrize("linear", [True, False])
def test_split_within_limit(linear):
    ctx = spread_ctx(linear)
    individual = Individual(genotype=[1, 2, 3])
    assert Split(ctx).split(ctx, individual, 3) is True
    assert len(individual.phenotype) == ctx.config.num_vehicles


def test_limited_fleet_respects_route_count():
    ctx = spread_ctx(True)
    individual = Individual(genotype=[1, 2, 3])
    assert Split(ctx).split_limited_fleet(ctx, individual, 2) is True
    assert individual.num_nonempty_routes() == 2
    assert customers(individual) == [1, 2, 3]


def test_limited_fleet_single_vehicle_is_infeasible():
    ctx = make_ctx([(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)], [0, 1, 1, 1, 1], 2)
    individual = Individual(genotype=[1, 2, 3, 4])
    assert Split(ctx).split_limited_fleet(ctx, individual, 1) is True
    assert [route for route in individual.phenotype if route] == [[1, 2, 3, 4]]
    individual.evaluate(ctx)
    assert not individual.is_feasible()


def test_limited_fleet_rejects_oversized_fleet():
    ctx = spread_ctx(True)
    split = Split(ctx)
    with pytest.raises(ValueError):
        split.split_limited_fleet(ctx, Individual(genotype=[1, 2, 3]), ctx.config.num_vehicles + 1)


def test_run_raises_fleet_to_lower_bound():
    ctx = spread_ctx(True)
    individual = Individual(genotype=[3, 1, 2])
    Split(ctx).run(ctx, individual, 1)
    assert individual.num_nonempty_routes() == ctx.vehicle_lower_bound()
    assert individual.is_feasible()
    assert customers(individual) == [1, 2, 3]