"""Problem definition: depot, customers and the vehicle type."""

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Coordinate:
    lng: float
    lat: float


@dataclass
class Node:
    id: int
    coord: Coordinate
    demand: float


@dataclass
class Vehicle:
    id: int
    cap: float


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class Problem:
    """A capacitated vehicle routing problem; node 0 is the depot."""

    nodes: List[Node]
    vehicle: Vehicle

    def dim(self) -> int:
        """Number of nodes, depot included."""
        return len(self.nodes)

    def num_customers(self) -> int:
        return self.dim() - 1

    def total_demand(self) -> float:
        return sum(node.demand for node in self.nodes)

    def max_demand(self) -> Optional[float]:
        return max((node.demand for node in self.nodes), default=None)

    def get_angle(self, node: int) -> int:
        """Polar angle of ``node`` around the depot, as an integer in [0, 65536)."""
        depot = self.nodes[0].coord
        coord = self.nodes[node].coord
        angle = math.atan2(coord.lat - depot.lat, coord.lng - depot.lng)
        return _round_half_away(angle / math.pi * 32768.0) % 65536

    def from_mapping(self, mapping: Sequence[int]) -> "Problem":
        """Sub-problem made of the nodes at the given indices, in that order."""
        return Problem(
            nodes=[replace(self.nodes[index]) for index in mapping],
            vehicle=replace(self.vehicle),
        )