# hybridcvrp

This package holds the components of a hybrid genetic metaheuristic for the
Capacitated Vehicle Routing Problem (CVRP). A single depot (node 0) serves a
set of customers with known demands. Every vehicle has the same capacity. The
goal is a set of routes of minimum total distance, where a route that exceeds
the capacity pays a penalty for each unit of overload.

## Modules

- `hybridcvrp.config`: `Config` is a dataclass that holds every tunable
  parameter with its default value.
  - `Config.update(mapping)` overrides the named fields. It ignores unknown
    keys. It raises `TypeError` when the argument is not a mapping, and
    `ValueError` when a value has the wrong type or a count is negative. On
    error, no field changes.
  - `Config.load_yaml_file(path)` and `Config.update_from_yaml_file(path)` read
    the overrides from a YAML file.
  - `Config.update_from_args(args)` applies parsed command line arguments.
  - `Config.reset()` restores every default.
- `hybridcvrp.cli`: `parse_args(argv=None)` turns an argument list into an
  `Args` value. The arguments are:
  - a positional instance path;
  - `-o` for the solution path, default `output.sol`;
  - `-i` for the number of iterations without improvement;
  - `-t` for the time limit in seconds, default `10`;
  - `-r`, which takes a value. Because the option always has a value,
    `Args.rounded` is always true.

  A negative or non-numeric `-i` or `-t` is a usage error, and `argparse`
  exits.
- `hybridcvrp.problem`: `Coordinate`, `Node`, `Vehicle` and `Problem`. A
  `Problem` gives:
  - its size (`dim`, `num_customers`);
  - demand totals and the maximum demand (`total_demand`, `max_demand`);
  - a node's polar angle around the depot as an integer in `[0, 65536)`
    (`get_angle`);
  - a sub-problem built from a list of node indices (`from_mapping`).
- `hybridcvrp.matrix`:
  - `Matrix` is a fixed-size matrix stored row by row.
  - `build_distance_matrix` builds a `DistanceMatrix`. The matrix is either
    precomputed or computed on demand, and can be rounded half away from zero.
    It can also come from an explicit lower-triangular input.
  - `CorrelationMatrix` lists, for every node, its nearest customers, up to 200
    of them.
  - `MatrixProvider.from_problem(problem, config, input_matrix=None)` bundles
    the distance and correlation matrices. It precomputes distances when the
    problem has fewer customers than `config.precompute_distance_size_limit`.
- `hybridcvrp.evaluate`:
  - `route_cost(distance, overload, penalty)` gives the cost of one route.
  - `RouteEvaluation` and `SolutionEvaluation` compute penalized cost,
    feasibility, and the predecessor and successor of every node.
  - Tolerant float comparisons use an epsilon of `1e-6`: `approx_eq`,
    `approx_lt`, `approx_lte`, `approx_gt` and `approx_gte`.
- `hybridcvrp.context`: `Context(problem, config, start_time=None,
  input_matrix=None)` is the shared state of a search. It keeps its own copy of
  the config and holds the matrices, a `random.Random` source, a
  `SearchHistory` and the iteration count. The random source is seeded from
  `config.seed` when `config.deterministic` is set.
  - On creation it sets `config.num_vehicles` to `ceil(1.2 * lower_bound + 2)`.
    It sets the capacity penalty to `max distance / max demand`, clamped to
    `[0.0001, 10000]`.
  - `terminate()` is true once the time limit or `config.max_iterations` is
    reached.
  - `from_mapping(mapping)` builds the context of a sub-problem.
- `hybridcvrp.individual`: an `Individual` is a giant-tour genotype together
  with its routes (the phenotype).
  - It has evaluation, broken-pairs distance, and a text listing of its routes
    (`routes_text`).
  - `sort_routes` orders routes by the polar angle of their centroid and puts
    empty routes last.
  - Individuals compare by penalized cost, with tolerance.
- `hybridcvrp.split`: `Split` turns a giant tour into routes. It has a linear
  variant and a Bellman variant (`config.linear_split`), each for an unlimited
  fleet (`split`) or a limited one (`split_limited_fleet`).
  - `run(ctx, individual, max_vehicles)` tries the unlimited split first. If
    that uses too many routes, it falls back to the limited one. It then sorts
    and evaluates the routes.
- `hybridcvrp.population`: `Population` keeps feasible and infeasible
  `SubPopulation`s, sorted by cost.
  - Each sub-population tracks the pairwise broken-pairs diversity and removes
    clones.
  - Biased fitness combines the cost rank with the diversity rank.
  - Once a sub-population reaches `min_population_size + population_lambda`
    individuals, natural selection shrinks it back to `min_population_size`.
  - `get_parent` runs a tournament of `config.tournament_size` contestants.
  - `history_fraction` gives the share of the last 100 recorded additions that
    were feasible.
- `hybridcvrp.history`: `SearchHistory` records new best solutions, keeping
  routes only for the latest one, plus time-stamped messages.
  `HistoricSolution` prints as `Route #n: ...` lines followed by `Cost <rounded
  cost>`.
- `hybridcvrp.circle_sector`: `CircleSector` represents angular sectors on an
  integer circle of 65536 units. It supports extension, enclosure and overlap
  tests.

## Example

```python
from hybridcvrp.config import Config
from hybridcvrp.context import Context
from hybridcvrp.evaluate import route_cost
from hybridcvrp.individual import Individual
from hybridcvrp.problem import Coordinate, Node, Problem, Vehicle
from hybridcvrp.split import Split

config = Config()
config.update({"round_distances": False, "deterministic": True, "seed": 7})

problem = Problem(
    nodes=[
        Node(id=0, coord=Coordinate(lng=0.0, lat=0.0), demand=0.0),
        Node(id=1, coord=Coordinate(lng=3.0, lat=4.0), demand=5.0),
        Node(id=2, coord=Coordinate(lng=-3.0, lat=4.0), demand=7.0),
    ],
    vehicle=Vehicle(id=0, cap=10.0),
)

print(problem.num_customers())  # 2
print(problem.total_demand())   # 12.0

# A route of length 16 that is 2 units over capacity, with a penalty of 100 per unit:
print(route_cost(16.0, 2.0, 100.0))  # 216.0

ctx = Context(problem, config)
individual = Individual.new_random(ctx, 0)
Split(ctx).run(ctx, individual, ctx.config.num_vehicles)
print(individual.routes_text())
print(individual.penalized_cost(), individual.is_feasible())
```

## What the package does not do

The package provides the building blocks of a solver, not the solver itself.
It does not include:

- a command to run;
- a reader for instance files;
- a writer for solution files;
- the main genetic algorithm loop, including crossover and penalty updates;
- local search or ruin-and-recreate improvement.

`parse_args` and `Config.update_from_args` prepare a configuration, but nothing
in the package runs a search from it.