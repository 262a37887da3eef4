"""Population of the genetic algorithm, split into feasible and infeasible parts."""

import bisect
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Tuple

from .individual import Individual

# Number of recent additions whose feasibility is remembered.
_FEASIBILITY_HISTORY_LENGTH = 100


@dataclass(order=True)
class Diversity:
    """Broken pairs distance to the individual numbered ``to_number``.

    Diversities compare by distance only.
    """

    distance: int
    to_number: int = field(compare=False)


class SubPopulation:
    """Individuals sorted by penalized cost, with their pairwise diversity."""

    def __init__(self, ctx) -> None:
        config = ctx.config
        self.population: List[Individual] = []
        # For every individual number, the distances to the others in ascending order
        self.diversity: Dict[int, List[Diversity]] = {}
        self.focus_diversity = False
        self.max_individuals = config.min_population_size + config.population_lambda

    def size(self) -> int:
        return len(self.population)

    def add_individual(self, ctx, individual: Individual) -> None:
        """Insert ``individual`` in cost order, dropping it if it is a clone.

        When the population reaches its maximum size, natural selection
        shrinks it to the minimum population size.
        """
        insert_index = bisect.bisect_left(self.population, individual)
        self.population.insert(insert_index, individual)
        self._update_diversity(insert_index)

        if len(self.population) > 1 and self._is_clone(self.population[insert_index]):
            self.remove_individual(ctx, insert_index)
        else:
            self._update_fitness(ctx)

        if len(self.population) >= self.max_individuals:
            min_population_size = ctx.config.min_population_size
            while len(self.population) > min_population_size:
                self.natural_selection(ctx)

    def sample_top(self, ctx, top: int) -> Tuple[int, Individual]:
        """A random individual among the ``top`` best, with its index."""
        upper_limit = min(len(self.population), top)
        index = ctx.random.randrange(0, upper_limit)
        return index, self.population[index]

    def get_diversity(self, ctx) -> float:
        """Average diversity among the best individuals, or -1.0 if empty."""
        size = min(self.size(), ctx.config.min_population_size)
        if size == 0:
            return -1.0
        total = sum(
            self._average_broken_pairs_distance(individual, size)
            for individual in self.population[:size]
        )
        return total / size

    def get_average_cost(self, ctx) -> float:
        """Average cost of the best individuals, or -1.0 if empty."""
        size = min(self.size(), ctx.config.min_population_size)
        if size == 0:
            return -1.0
        total = sum(individual.penalized_cost() for individual in self.population[:size])
        return total / size

    def get_best(self) -> Optional[Individual]:
        return self.population[0] if self.population else None

    def get_best_cost(self) -> float:
        best = self.get_best()
        return best.penalized_cost() if best is not None else 0.0

    def remove_individual(self, ctx, index: int) -> None:
        individual = self.population.pop(index)
        self._remove_diversity(individual)
        self._update_fitness(ctx)

    def clear_worst(self, ctx, keep: int) -> None:
        """Remove the worst individuals until at most ``keep`` remain."""
        while len(self.population) > keep:
            self.remove_individual(ctx, len(self.population) - 1)

    def natural_selection(self, ctx) -> None:
        """Remove the worst individual, preferring clones; the best is kept."""
        worst_index = 1
        worst_is_clone = False
        worst_fitness = -1.0
        for index, individual in enumerate(self.population[1:], start=1):
            is_clone = self._is_clone(individual)
            update_worst = (is_clone and not worst_is_clone) or (
                worst_is_clone == is_clone and individual.fitness >= worst_fitness
            )
            if update_worst:
                worst_index = index
                worst_is_clone = is_clone
                worst_fitness = individual.fitness
        self.remove_individual(ctx, worst_index)

    def _is_clone(self, individual: Individual) -> bool:
        """An individual at distance zero from its closest neighbour is a clone."""
        try:
            diversity = self.diversity[individual.number]
        except KeyError:
            raise LookupError("No diversity vector for individual") from None
        return diversity[0].distance == 0

    def _update_diversity(self, index: int) -> None:
        new = self.population[index]
        for other_index, other in enumerate(self.population):
            if other_index == index:
                continue
            distance = other.broken_pairs_distance(new)
            self._add_diversity(other.number, Diversity(distance, new.number))
            self._add_diversity(new.number, Diversity(distance, other.number))

    def _update_fitness(self, ctx) -> None:
        size = len(self.population)
        if size == 0:
            return
        if size == 1:
            self.population[0].fitness = 0.0
            return

        num_closest = ctx.config.num_diversity_closest
        diversity_sorted = sorted(
            (
                (self._average_broken_pairs_distance(individual, num_closest), index)
                for index, individual in enumerate(self.population)
            ),
            key=lambda pair: pair[0],
            reverse=True,
        )

        num_elites = ctx.config.num_elites
        population_factor = size - 1.0
        elite_factor = 1.0 - num_elites / size

        for diversity_index, (_, index) in enumerate(diversity_sorted):
            diversity_rank = diversity_index / population_factor
            fitness_rank = index / population_factor
            if self.focus_diversity:
                if index < num_elites:
                    fitness = fitness_rank
                else:
                    fitness = fitness_rank * elite_factor + diversity_rank
            elif size <= num_elites:
                fitness = fitness_rank
            else:
                fitness = fitness_rank + elite_factor * diversity_rank
            self.population[index].fitness = fitness

    def _add_diversity(self, key: int, diversity: Diversity) -> None:
        bisect.insort_left(self.diversity.setdefault(key, []), diversity)

    def _remove_diversity(self, individual: Individual) -> None:
        self.diversity.pop(individual.number, None)
        for diversity_list in self.diversity.values():
            for index, diversity in enumerate(diversity_list):
                if diversity.to_number == individual.number:
                    del diversity_list[index]
                    break

    def _average_broken_pairs_distance(self, individual: Individual, num: int) -> float:
        """Average distance to the ``num`` closest others in the population."""
        num_to_check = min(num, len(self.population) - 1)
        diversity = self.diversity.get(individual.number)
        if diversity is None:
            return 0.0
        if num_to_check <= 0:
            return math.nan
        return sum(item.distance for item in diversity[:num_to_check]) / num_to_check


class Population:
    """Feasible and infeasible subpopulations with a feasibility history."""

    def __init__(self, ctx) -> None:
        # Total number of individuals that have been part of the population
        self.total_individuals_count = 0
        self.feasible = SubPopulation(ctx)
        self.infeasible = SubPopulation(ctx)
        self.feasible_history: Deque[bool] = deque(
            [True] * _FEASIBILITY_HISTORY_LENGTH, maxlen=_FEASIBILITY_HISTORY_LENGTH
        )

    def size(self) -> int:
        return self.feasible.size() + self.infeasible.size()

    def add_individual(
        self, ctx, individual: Individual, update_feasibility_history: bool
    ) -> None:
        """Number ``individual`` and add it to the matching subpopulation."""
        individual.number = self.total_individuals_count
        if update_feasibility_history:
            self.feasible_history.append(individual.is_feasible())
        if individual.is_feasible():
            self.feasible.add_individual(ctx, individual)
        else:
            self.infeasible.add_individual(ctx, individual)
        self.total_individuals_count += 1

    def get_parent(self, ctx) -> Individual:
        return self._tournament(ctx, ctx.config.tournament_size)

    def history_fraction(self) -> float:
        """Fraction of recent additions that were feasible."""
        return sum(self.feasible_history) / len(self.feasible_history)

    def _tournament(self, ctx, num_contestants: int) -> Individual:
        """The contestant with the lowest biased fitness among random picks."""
        size = self.size()
        indices = [ctx.random.randrange(0, size) for _ in range(num_contestants)]
        winner: Optional[Individual] = None
        feasible_size = self.feasible.size()
        for index in indices:
            if index < feasible_size:
                individual = self.feasible.population[index]
            else:
                individual = self.infeasible.population[index - feasible_size]
            if winner is None or individual.fitness < winner.fitness:
                winner = individual
        if winner is None:
            raise ValueError("No winner found")
        return winner