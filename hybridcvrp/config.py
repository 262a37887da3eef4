"""Solver configuration with defaults and YAML overrides."""

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

import yaml


@dataclass
class Config:
    """All tunable parameters of the solver."""

    # General
    instance_path: str = ""
    solution_path: Optional[str] = None
    time_limit: int = 60
    bks: float = math.inf
    max_iterations: Optional[int] = None
    max_iterations_without_improvement: int = 20_000
    num_vehicles: int = 1_000_000
    log_interval: int = 100
    precompute_distance_size_limit: int = 2_000
    round_distances: bool = True
    decompose_limit: int = 3000
    decomposed_problem_min_size: int = 200

    # Randomization
    deterministic: bool = False
    seed: int = 1

    # Genetic algorithm
    min_population_size: int = 25
    initial_individuals: int = 100
    population_lambda: int = 40
    num_elites: int = 4
    num_diversity_closest: int = 5
    feasibility_proportion_target: float = 0.2
    tournament_size: int = 2
    repair_probability: float = 0.5

    # Split
    split_capacity_factor: float = 1.5
    linear_split: bool = True

    # Local search
    local_search_granularity: int = 20
    dynamic_granularity: bool = False
    granularity_min: int = 10
    ls_enabled: bool = True

    # Local search moves
    relocate_single: bool = True
    relocate_double: bool = True
    relocate_double_reverse: bool = False
    swap_one_with_one: bool = True
    swap_two_with_one: bool = True
    swap_two_with_two: bool = True
    two_opt_intra_reverse: bool = True
    two_opt_inter_reverse: bool = True
    two_opt_inter: bool = True
    swap_star: bool = True

    # Penalties
    penalty_capacity: float = 100.0
    penalty_update_interval: int = 10
    penalty_inc_multiplier: float = 1.2
    penalty_dec_multiplier: float = 0.85

    # Ruin and recreate
    average_ruin_cardinality: int = 10
    max_ruin_string_length: int = 10
    rr_mutation: bool = True
    rr_probability: float = 1.0
    rr_gamma: float = 1.0
    rr_final_temp: float = 1.0
    rr_start_temp: float = 10.0
    rr_diversify: bool = True

    # Elite education
    elite_education: bool = False
    elite_education_problem_size_limit: int = 1
    elite_education_gamma: float = 1_000.0
    elite_education_final_temp: float = 1.0
    elite_education_start_temp: float = 50.0
    elite_education_time_based: bool = False
    elite_education_time_fraction: float = 0.02

    def reset(self) -> None:
        """Restore every field to its default value."""
        defaults = Config()
        for item in fields(self):
            setattr(self, item.name, getattr(defaults, item.name))

    @classmethod
    def load_yaml_file(cls, filepath) -> "Config":
        """Build a config from defaults overridden by a YAML file."""
        config = cls()
        config.update_from_yaml_file(filepath)
        return config

    def update_from_yaml_file(self, filepath) -> None:
        """Override fields with the values found in a YAML file."""
        with open(filepath, encoding="utf-8") as handle:
            values = yaml.safe_load(handle)
        self.update(values)

    def update(self, values: Mapping[str, Any]) -> None:
        """Override the fields named in ``values``; unknown keys are ignored.

        Raises TypeError if ``values`` is not a mapping and ValueError if a
        value does not fit the type of its field. On error nothing changes.
        """
        if not isinstance(values, Mapping):
            raise TypeError("Cannot update Config as YAML is not a mapping")
        known = {item.name for item in fields(self)}
        patched = {
            key: _coerce(key, value)
            for key, value in values.items()
            if isinstance(key, str) and key in known
        }
        for key, value in patched.items():
            setattr(self, key, value)

    def update_from_args(self, args) -> None:
        """Apply parsed command line arguments."""
        self.instance_path = args.instance_path
        self.solution_path = args.solution_path
        if args.max_iterations is not None:
            self.max_iterations_without_improvement = args.max_iterations
        if args.time_limit is not None:
            self.time_limit = args.time_limit
        self.round_distances = args.rounded


_OPTIONAL_FIELDS = {"solution_path": str, "max_iterations": int}
_DEFAULTS = Config()


def _coerce(name: str, value: Any) -> Any:
    optional = name in _OPTIONAL_FIELDS
    kind = _OPTIONAL_FIELDS[name] if optional else type(getattr(_DEFAULTS, name))
    if value is None:
        if optional:
            return None
        raise ValueError(f"Config field {name!r} cannot be null")
    if kind is bool:
        if isinstance(value, bool):
            return value
    elif kind is int:
        if isinstance(value, int) and not isinstance(value, bool):
            if value < 0:
                raise ValueError(f"Config field {name!r} must not be negative")
            return value
    elif kind is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif kind is str:
        if isinstance(value, str):
            return value
    raise ValueError(
        f"Invalid value {value!r} for config field {name!r} of type {kind.__name__}"
    )