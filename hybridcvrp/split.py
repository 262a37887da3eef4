"""Split of a giant tour into routes by shortest paths over the tour."""

from collections import deque
from dataclasses import dataclass
from typing import List

from .evaluate import approx_gt, approx_gte, approx_lte
from .matrix import Matrix

# Stand-in for an unreachable path cost.
_INFINITE_COST = 1e30
_UNREACHABLE = 1e29


@dataclass
class NodeSplit:
    """Data of one position of the giant tour used by the split."""

    demand: float = 0.0
    distance_depot: float = 0.0
    distance_next: float = 0.0


class Split:
    """Optimal segmentation of an individual's genotype into routes.

    Row ``k`` of ``path_cost`` holds the cheapest cost of serving the first
    customers of the tour; in the limited-fleet variant it does so with
    exactly ``k`` routes.
    """

    def __init__(self, ctx) -> None:
        dim = ctx.problem.dim()
        num_vehicles = ctx.config.num_vehicles
        self.path_cost = Matrix(num_vehicles + 1, dim, 0.0)
        self.predecessors = Matrix(num_vehicles + 1, dim, 0)
        self.nodes: List[NodeSplit] = [NodeSplit() for _ in range(dim)]
        self.cum_distance: List[float] = [0.0] * dim
        self.cum_load: List[float] = [0.0] * dim
        self.vehicle_cap = ctx.problem.vehicle.cap
        self.penalty_capacity = ctx.config.penalty_capacity

    def _load(self, ctx, individual) -> None:
        self.penalty_capacity = ctx.config.penalty_capacity
        dim = ctx.problem.dim()
        distance = ctx.matrix_provider.distance
        genotype = individual.genotype
        for i in range(1, dim):
            node = self.nodes[i]
            current = genotype[i - 1]
            node.demand = ctx.problem.nodes[current].demand
            node.distance_depot = distance.get(current, 0)
            node.distance_next = (
                distance.get(current, genotype[i]) if i < dim - 1 else -_INFINITE_COST
            )
            self.cum_distance[i] = self.cum_distance[i - 1] + self.nodes[i - 1].distance_next
            self.cum_load[i] = self.cum_load[i - 1] + node.demand

    def _reset(self, limited_fleet: bool) -> None:
        self.path_cost.set(0, 0, 0.0)
        rows = range(self.path_cost.rows) if limited_fleet else range(1)
        for row in rows:
            for col in range(1, self.path_cost.cols):
                self.path_cost.set(row, col, _INFINITE_COST)

    def _propagate(self, i: int, j: int, k: int) -> float:
        return (
            self.path_cost.get(k, i)
            + self.cum_distance[j]
            - self.cum_distance[i + 1]
            + self.nodes[i + 1].distance_depot
            + self.nodes[j].distance_depot
            + self.penalty_capacity
            * max(0.0, self.cum_load[j] - self.cum_load[i] - self.vehicle_cap)
        )

    def _dominates(self, i: int, j: int, k: int) -> bool:
        return self.path_cost.get(k, j) + self.nodes[j + 1].distance_depot > (
            self.path_cost.get(k, i)
            + self.nodes[i + 1].distance_depot
            + self.cum_distance[j + 1]
            - self.cum_distance[i + 1]
            + self.penalty_capacity * (self.cum_load[j] - self.cum_load[i])
        )

    def _dominates_right(self, i: int, j: int, k: int) -> bool:
        return approx_lte(
            self.path_cost.get(k, j) + self.nodes[j + 1].distance_depot,
            self.path_cost.get(k, i)
            + self.nodes[i + 1].distance_depot
            + self.cum_distance[j + 1]
            - self.cum_distance[i + 1],
        )

    def _linear_pass(self, source: int, target: int, first: int, dim: int) -> None:
        """Linear-time split extending paths of row ``source`` into row ``target``."""
        queue = deque([first])
        for i in range(first + 1, dim):
            if not queue:
                break
            front = queue[0]
            self.path_cost.set(target, i, self._propagate(front, i, source))
            self.predecessors.set(target, i, front)
            if i < dim - 1:
                if not self._dominates(queue[-1], i, source):
                    while queue and self._dominates_right(queue[-1], i, source):
                        queue.pop()
                    queue.append(i)
                while len(queue) > 1 and approx_gte(
                    self._propagate(queue[0], i + 1, source),
                    self._propagate(queue[1], i + 1, source),
                ):
                    queue.popleft()

    def _bellman_pass(
        self, ctx, individual, source: int, target: int, first: int, limited: bool
    ) -> None:
        """Bellman split in O(nB), B being the average route length."""
        dim = ctx.problem.dim()
        cap = ctx.problem.vehicle.cap
        load_limit = cap * ctx.config.split_capacity_factor
        distance = ctx.matrix_provider.distance
        nodes = ctx.problem.nodes
        for from_index in range(first, dim - 1):
            base = self.path_cost.get(source, from_index)
            if limited and base > _UNREACHABLE:
                break
            load = 0.0
            cost = 0.0
            for to_index in range(from_index + 1, dim):
                node = individual.genotype_node(to_index)
                demand = nodes[node].demand
                if limited:
                    fits = load + demand <= load_limit
                else:
                    fits = approx_lte(load + demand, load_limit)
                if not fits:
                    break
                load += demand
                if to_index == from_index + 1:
                    cost = distance.get(0, node)
                else:
                    cost += distance.get(individual.genotype_node(to_index - 1), node)
                new_cost = base + cost + distance.get(node, 0)
                if approx_gt(load - cap, 0.0):
                    new_cost += (load - cap) * self.penalty_capacity
                if new_cost < self.path_cost.get(target, to_index):
                    self.path_cost.set(target, to_index, new_cost)
                    self.predecessors.set(target, to_index, from_index)

    @staticmethod
    def _pad_routes(ctx, individual) -> None:
        missing = ctx.config.num_vehicles - len(individual.phenotype)
        individual.phenotype.extend([] for _ in range(max(0, missing)))

    def run(self, ctx, individual, max_vehicles: int) -> None:
        """Split ``individual`` into routes, then sort and evaluate them."""
        max_vehicles = max(max_vehicles, ctx.vehicle_lower_bound())
        if not self.split(ctx, individual, max_vehicles):
            self.split_limited_fleet(ctx, individual, max_vehicles)
        individual.sort_routes(ctx)
        individual.evaluate(ctx)

    def split(self, ctx, individual, max_vehicles: int) -> bool:
        """Split with an unlimited fleet.

        Returns whether the result uses at most ``max_vehicles`` routes.
        """
        self._load(ctx, individual)
        self._reset(limited_fleet=False)
        dim = ctx.problem.dim()
        if ctx.config.linear_split:
            self._linear_pass(0, 0, 0, dim)
        else:
            self._bellman_pass(ctx, individual, 0, 0, 0, limited=False)

        routes = []
        end = dim - 1
        while end > 0:
            begin = self.predecessors.get(0, end)
            routes.append(individual.genotype[begin:end])
            end = begin
        individual.phenotype = routes
        num_vehicles = len(routes)
        self._pad_routes(ctx, individual)
        return num_vehicles <= max_vehicles

    def split_limited_fleet(self, ctx, individual, max_vehicles: int) -> bool:
        """Split using at most ``max_vehicles`` routes.

        Returns whether a path covering the whole tour was found. Raises
        ValueError if ``max_vehicles`` exceeds the fleet this split was sized for.
        """
        if max_vehicles > self.path_cost.rows - 1:
            raise ValueError(
                f"max_vehicles {max_vehicles} exceeds the fleet size {self.path_cost.rows - 1}"
            )
        self._load(ctx, individual)
        self._reset(limited_fleet=True)
        dim = ctx.problem.dim()
        for k in range(max_vehicles):
            if ctx.config.linear_split:
                self._linear_pass(k, k + 1, k, dim)
            else:
                self._bellman_pass(ctx, individual, k, k + 1, k, limited=True)

        last = dim - 1
        min_cost = self.path_cost.get(max_vehicles, last)
        num_routes = max_vehicles
        for vehicle_number in range(1, max_vehicles):
            cost = self.path_cost.get(vehicle_number, last)
            if cost < min_cost:
                min_cost = cost
                num_routes = vehicle_number

        routes = []
        end = last
        for vehicle_number in range(num_routes, 0, -1):
            begin = self.predecessors.get(vehicle_number, end)
            routes.insert(0, individual.genotype[begin:end])
            end = begin
        individual.phenotype = routes
        self._pad_routes(ctx, individual)
        return end == 0