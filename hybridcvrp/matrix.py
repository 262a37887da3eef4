"""Dense matrices, distance matrices and nearest-neighbour correlation lists."""

import math
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Iterable, List, Optional, Sequence

from .evaluate import approx_gt
from .problem import Coordinate

# Maximum number of nearest neighbours kept per node.
CORRELATION_LIMIT = 200


def _round_half_away(value: float) -> float:
    magnitude = math.floor(abs(value))
    if abs(value) - magnitude >= 0.5:
        magnitude += 1
    return math.copysign(float(magnitude), value)


def _format_number(value: Any) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            text = str(int(value))
            return "-" + text if math.copysign(1.0, value) < 0 and text == "0" else text
        return repr(value)
    return str(value)


class Matrix:
    """Fixed-size matrix stored row by row."""

    def __init__(self, rows: int, cols: int, fill: Any = 0) -> None:
        self.rows = rows
        self.cols = cols
        self._data = [fill] * (rows * cols)

    def get(self, row: int, col: int) -> Any:
        return self._data[row * self.cols + col]

    def set(self, row: int, col: int, value: Any) -> None:
        self._data[row * self.cols + col] = value

    def slice(self, row: int, col: int, number: int) -> List[Any]:
        """``number`` consecutive elements starting at (row, col), crossing rows."""
        start = row * self.cols + col
        if start < 0 or number < 0 or start + number > len(self._data):
            raise IndexError("Matrix slice out of range")
        return self._data[start : start + number]

    def from_mapping(self, mapping: Sequence[int]) -> "Matrix":
        """Square matrix holding the rows and columns named by ``mapping``."""
        size = len(mapping)
        result = Matrix(size, size)
        result._data = [self.get(i, j) for i in mapping for j in mapping]
        return result

    def get_max(self) -> Any:
        if not self._data:
            raise ValueError("Cannot take the maximum of an empty matrix")
        return max(self._data)

    def copy(self) -> "Matrix":
        result = Matrix(self.rows, self.cols)
        result._data = list(self._data)
        return result

    def __str__(self) -> str:
        lines = []
        for row in range(self.rows):
            values = self.slice(row, 0, self.cols)
            lines.append("[ " + ", ".join(_format_number(v) for v in values) + " ]\n")
        return "".join(lines)


def euclidean(c1: Coordinate, c2: Coordinate) -> float:
    """Euclidean distance between two coordinates."""
    return math.sqrt((c2.lng - c1.lng) ** 2 + (c2.lat - c1.lat) ** 2)


@dataclass
class DistanceMatrix:
    """Distances between locations, either precomputed or computed on demand."""

    locations: List[Coordinate]
    storage: Matrix
    precomputed: bool
    rounded: bool
    max_distance: Optional[float]

    def get(self, row: int, col: int) -> float:
        if self.precomputed:
            return self.storage.get(row, col)
        distance = euclidean(self.locations[row], self.locations[col])
        return _round_half_away(distance) if self.rounded else distance

    def get_vec(self, row: int, col: int, number: int) -> List[float]:
        """``number`` consecutive distances starting at (row, col), crossing rows."""
        if self.precomputed:
            return self.storage.slice(row, col, number)
        size = self.size()
        values = []
        for _ in range(number):
            values.append(self.get(row, col))
            if col < size - 1:
                col += 1
            else:
                row += 1
                col = 0
        return values

    def size(self) -> int:
        return len(self.locations)

    def max(self) -> Optional[float]:
        return self.max_distance

    def from_mapping(self, mapping: Sequence[int]) -> "DistanceMatrix":
        """Precomputed distance matrix over the locations named by ``mapping``."""
        locations = [self.locations[index] for index in mapping]
        size = len(mapping)
        storage = Matrix(size, size, 0.0)
        for i, source_row in enumerate(mapping):
            for j, source_col in enumerate(mapping):
                storage.set(i, j, self.get(source_row, source_col))
        max_distance = storage.get_max() if self.precomputed else None
        return DistanceMatrix(locations, storage, True, self.rounded, max_distance)


def build_distance_matrix(
    locations: Iterable[Coordinate],
    precompute: bool = False,
    rounded: bool = False,
    input_matrix: Optional[Sequence[Sequence[float]]] = None,
) -> DistanceMatrix:
    """Build a distance matrix.

    ``input_matrix``, when given, holds explicit distances: its row ``i`` lists
    the distances from node ``i + 1`` to nodes ``0, 1, ...``. Such a matrix is
    always precomputed.
    """
    locations = list(locations)
    size = len(locations)
    max_distance: Optional[float] = None

    def track(distance: float) -> None:
        nonlocal max_distance
        if max_distance is None or approx_gt(distance, max_distance):
            max_distance = distance

    if input_matrix is not None:
        precompute = True
        storage = Matrix(size, size, 0.0)
        for i, row in enumerate(input_matrix):
            for j, value in enumerate(row):
                distance = float(value)
                if rounded:
                    distance = _round_half_away(distance)
                storage.set(i + 1, j, distance)
                storage.set(j, i + 1, distance)
                track(distance)
    elif precompute:
        storage = Matrix(size, size, 0.0)
        for (i, first), (j, second) in combinations(enumerate(locations), 2):
            distance = euclidean(first, second)
            if rounded:
                distance = _round_half_away(distance)
            storage.set(i, j, distance)
            storage.set(j, i, distance)
            track(distance)
    else:
        storage = Matrix(0, 0, 0.0)

    return DistanceMatrix(locations, storage, precompute, rounded, max_distance)


class CorrelationMatrix:
    """For every node, the closest customers ordered by distance."""

    def __init__(self, distance_matrix: DistanceMatrix) -> None:
        size = distance_matrix.size()
        if size < 2:
            raise ValueError("A correlation matrix needs at least two locations")
        self.width = min(CORRELATION_LIMIT, size - 2)
        self._storage = Matrix(size, self.width, 0)
        for i in range(size):
            row = distance_matrix.get_vec(i, 0, size)
            candidates = sorted(
                (j for j in range(1, size) if j != i), key=row.__getitem__
            )
            for number, index in enumerate(candidates[: self.width]):
                self._storage.set(i, number, index)

    def get(self, index: int) -> List[int]:
        return self._storage.slice(index, 0, self.width)

    def top_slice(self, index: int, number: int) -> List[int]:
        return self._storage.slice(index, 0, number)


@dataclass
class MatrixProvider:
    """Distance and correlation matrices of a problem."""

    distance: DistanceMatrix
    correlation: CorrelationMatrix

    @classmethod
    def from_problem(cls, problem, config, input_matrix=None) -> "MatrixProvider":
        locations = [node.coord for node in problem.nodes]
        precompute = len(problem.nodes) - 1 < config.precompute_distance_size_limit
        distance = build_distance_matrix(
            locations,
            precompute=precompute,
            rounded=config.round_distances,
            input_matrix=input_matrix,
        )
        return cls(distance, CorrelationMatrix(distance))

    def from_mapping(self, mapping: Sequence[int]) -> "MatrixProvider":
        distance = self.distance.from_mapping(mapping)
        return MatrixProvider(distance, CorrelationMatrix(distance))