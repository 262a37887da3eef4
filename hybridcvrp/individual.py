"""Candidate solutions of the genetic algorithm."""

import math
from dataclasses import dataclass, field
from functools import total_ordering
from typing import List

from .evaluate import SolutionEvaluation, approx_eq

# Polar angle given to empty routes so that they sort after every real route.
_EMPTY_ROUTE_ANGLE = 10.0


@total_ordering
@dataclass(eq=False)
class Individual:
    """A solution as a giant tour (genotype) and as a set of routes (phenotype).

    Individuals compare by penalized cost; costs within a small tolerance
    are equal.
    """

    genotype: List[int] = field(default_factory=list)
    # Used as key in the population
    number: int = 0
    phenotype: List[List[int]] = field(default_factory=list)
    # Biased fitness
    fitness: float = math.inf
    evaluation: SolutionEvaluation = field(default_factory=SolutionEvaluation)

    @classmethod
    def empty(cls) -> "Individual":
        return cls()

    @classmethod
    def new_random(cls, ctx, number: int) -> "Individual":
        """Random giant tour over all customers, with empty routes for every vehicle."""
        genotype = list(range(1, ctx.problem.dim()))
        ctx.random.shuffle(genotype)
        return cls(
            genotype=genotype,
            number=number,
            phenotype=[[] for _ in range(ctx.config.num_vehicles)],
        )

    def genotype_node(self, index: int) -> int:
        """Node at the 1-based position ``index`` of the giant tour."""
        if index < 1:
            raise IndexError("Genotype positions start at 1")
        return self.genotype[index - 1]

    def routes_text(self) -> str:
        """Routes as text, one line per route, with nodes numbered from 1."""
        return "".join(
            f"Route {number}:" + "".join(f" {node + 1}" for node in route) + "\n"
            for number, route in enumerate(self.phenotype, start=1)
        )

    def num_nonempty_routes(self) -> int:
        return sum(1 for route in self.phenotype if route)

    def num_routes(self) -> int:
        return len(self.phenotype)

    def evaluate(self, ctx) -> None:
        self.evaluation.evaluate(ctx, self.phenotype)

    def is_feasible(self) -> bool:
        return self.evaluation.is_feasible()

    def penalized_cost(self) -> float:
        return self.evaluation.penalized_cost

    def successor(self, node: int) -> int:
        return self.evaluation.successors[node]

    def predecessor(self, node: int) -> int:
        return self.evaluation.predecessors[node]

    def broken_pairs_distance(self, other: "Individual") -> int:
        """Number of arcs of this solution that are missing from ``other``."""
        distance = 0
        for node in range(1, len(self.genotype) + 1):
            successor = self.successor(node)
            if successor != other.successor(node) and successor != other.predecessor(node):
                distance += 1
            if (
                self.predecessor(node) == 0
                and other.predecessor(node) != 0
                and other.successor(0) != 0
            ):
                distance += 1
        return distance

    def sort_routes(self, ctx) -> None:
        """Order routes by the polar angle of their centroid around the depot.

        Empty routes go last. The genotype is rewritten to follow the new order.
        """
        nodes = ctx.problem.nodes
        depot = nodes[0].coord

        def angle(route: List[int]) -> float:
            if not route:
                return _EMPTY_ROUTE_ANGLE
            x = sum(nodes[node].coord.lng for node in route) / len(route)
            y = sum(nodes[node].coord.lat for node in route) / len(route)
            return math.atan2(y - depot.lat, x - depot.lng)

        self.phenotype = sorted(self.phenotype, key=angle)
        tour = [node for route in self.phenotype for node in route]
        if len(tour) > len(self.genotype):
            raise IndexError("Routes hold more nodes than the genotype")
        self.genotype[: len(tour)] = tour

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return approx_eq(self.penalized_cost(), other.penalized_cost())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        if self == other:
            return False
        return self.penalized_cost() < other.penalized_cost()

    __hash__ = None