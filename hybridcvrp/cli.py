"""Command line argument parsing."""

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass
class Args:
    """Parsed command line arguments."""

    instance_path: str
    solution_path: Optional[str] = "output.sol"
    time_limit: Optional[int] = 10
    max_iterations: Optional[int] = None
    rounded: bool = True


def _unsigned(error_message: str):
    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(error_message) from None
        if value < 0:
            raise argparse.ArgumentTypeError(error_message)
        return value

    return convert


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hybridcvrp",
        description="Hybrid Metaheuristic Solver for the Capacitated Vehicle Routing Problem",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1")
    parser.add_argument("instance_path", help="Path to problem instance")
    parser.add_argument(
        "-o", dest="solution_path", default="output.sol", help="Path to solution output"
    )
    parser.add_argument(
        "-i",
        dest="iterations",
        type=_unsigned("Invalid iterations argument!"),
        default=None,
        help="Maximum number of iterations without improvement",
    )
    parser.add_argument(
        "-t",
        dest="time_limit",
        type=_unsigned("Invalid time limit argument!"),
        default=10,
        help="Time limit in seconds",
    )
    parser.add_argument("-r", dest="rounded", default="true", help="Rounded distances")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Args:
    """Parse command line arguments; exits with a usage error on bad input."""
    namespace = _build_parser().parse_args(argv)
    return Args(
        instance_path=namespace.instance_path,
        solution_path=namespace.solution_path,
        time_limit=namespace.time_limit,
        max_iterations=namespace.iterations,
        # The option always carries a value, so distances are always rounded.
        rounded=namespace.rounded is not None,
    )