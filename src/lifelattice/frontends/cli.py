"""Command-line interface for running lattice simulations."""

import argparse
import dataclasses
import logging
import sys
import time
from typing import List, Optional, Tuple

from ..core.errors import LatticeError
from ..core.lattice import Lattice
from ..core.patterns import PatternLibrary
from ..core.rules import MAX_NEIGHBORS, PRESETS, Rule
from ..core.simulation import Simulation, SimulationConfig

logger = logging.getLogger(__name__)


class CLILatticeRunner:
    """Terminal host that drives a simulation and prints its state."""

    def __init__(self, verbose: bool = False) -> None:
        self.pattern_library = PatternLibrary()
        self.verbose = verbose

    def _notify(self, message: str) -> None:
        if self.verbose:
            print(f"  {message}")

    def run_simulation(
        self,
        width: int,
        height: int,
        rule: Rule,
        max_generations: int,
        seed: Optional[int] = None,
        pattern: Optional[str] = None,
        pattern_row: int = 0,
        pattern_column: int = 0,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run a simulation until it cycles, dies out or hits the generation cap.

        Args:
            width: Lattice width
            height: Lattice height
            rule: Birth/survival rule
            max_generations: Maximum generations to run
            seed: Optional seed for the random fill
            pattern: Optional pattern name to seed with instead of random cells
            pattern_row: Row offset for pattern placement
            pattern_column: Column offset for pattern placement
            show_grid: Show initial and final lattice states

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        config = SimulationConfig(
            width=width,
            height=height,
            rule=rule,
            seed=seed,
            pattern=pattern,
            pattern_row=pattern_row,
            pattern_column=pattern_column,
            max_generations=max_generations,
        )
        if pattern and self.pattern_library.get_pattern(pattern) is None:
            print(f"Warning: Pattern '{pattern}' not found, using random population")

        simulation = Simulation.from_config(config, self.pattern_library, notify=self._notify)
        initial_population = simulation.population

        if self.verbose:
            print(f"Lattice {width}x{height}, rule {rule.notation}, initial population {initial_population}")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(simulation.lattice))

        start_time = time.time()
        final_generation, reason = simulation.run_until_stable()
        duration = time.time() - start_time

        stats = simulation.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(simulation.lattice))

        return final_generation, reason, stats

    def _format_grid(self, lattice: Lattice, max_size: int = 80) -> str:
        """Format a lattice for display, refusing ones too large for a terminal."""
        if lattice.width > max_size or lattice.height > max_size:
            return f"Grid too large to display ({lattice.width}x{lattice.height})"

        return str(lattice)

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:")
        for category, patterns in categories.items():
            print(f"\n{category}:")
            for pattern_name in patterns:
                pattern = self.pattern_library.get_pattern(pattern_name)
                if pattern:
                    size = pattern.get_size()
                    print(f"  {pattern_name}: {size[0]}x{size[1]}, {len(pattern.cells)} cells")
                    if pattern.description:
                        print(f"    {pattern.description}")

    def list_rules(self) -> None:
        """List named rule presets."""
        print("Available rules:")
        for name, rule in PRESETS.items():
            print(f"  {name}: {rule.notation} (birth {rule.birth}, survival {rule.survival_min}-{rule.survival_max})")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run toroidal cellular automaton simulations from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Random 50x50 lattice under Conway's rule
  lifelattice-cli --width 50 --height 50

  # Reproducible run with a fixed seed
  lifelattice-cli -W 30 -H 20 --seed 42 --show-grid

  # Glider on a small torus
  lifelattice-cli -W 12 -H 12 --pattern Glider --show-grid

  # Maze rule, written in B/S notation
  lifelattice-cli --rule B3/S12345

  # Start from Conway and widen survival
  lifelattice-cli --rule conway --survival-max 4

  # List patterns and rule presets
  lifelattice-cli --list-patterns
  lifelattice-cli --list-rules
        """,
    )

    # Lattice configuration
    parser.add_argument("-W", "--width", type=int, default=50, help="Lattice width (default: 50)")

    parser.add_argument("-H", "--height", type=int, default=50, help="Lattice height (default: 50)")

    parser.add_argument("--seed", type=int, help="Random seed for the initial fill")

    # Rule configuration
    parser.add_argument(
        "-r",
        "--rule",
        type=str,
        default="conway",
        help="Rule preset, B/S notation or 'birth,min,max' triple (default: conway)",
    )

    parser.add_argument("--birth", type=int, help="Override the birth threshold")

    parser.add_argument("--survival-min", type=int, help="Override the minimum survival count")

    parser.add_argument("--survival-max", type=int, help="Override the maximum survival count")

    # Pattern configuration
    parser.add_argument(
        "--pattern",
        type=str,
        help="Seed with a named pattern instead of a random population",
    )

    parser.add_argument(
        "--pattern-row",
        type=int,
        default=0,
        help="Row offset for pattern placement (default: 0)",
    )

    parser.add_argument(
        "--pattern-column",
        type=int,
        default=0,
        help="Column offset for pattern placement (default: 0)",
    )

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=1000,
        help="Maximum generations to simulate (default: 1000)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final lattice states (small lattices only)",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List rule presets and exit",
    )

    return parser


def resolve_rule(args: argparse.Namespace) -> Rule:
    """Build the rule from --rule plus any per-threshold overrides.

    Raises:
        InvalidRule: If the rule text or the resulting thresholds are invalid
    """
    rule = Rule.parse(args.rule)
    overrides = {
        name: value
        for name, value in (
            ("birth", args.birth),
            ("survival_min", args.survival_min),
            ("survival_max", args.survival_max),
        )
        if value is not None
    }
    if overrides:
        rule = dataclasses.replace(rule, **overrides)
    return rule


def format_finish_reason(reason: str, stats: dict) -> str:
    """Format the simulation finish reason for display.

    Args:
        reason: Finish reason from Simulation.run_until_stable
        stats: Statistics dictionary

    Returns:
        Formatted reason string
    """
    if reason == "extinction":
        return "Extinction - all cells died"
    elif reason == "cycle":
        cycle_len = stats.get("cycle_length", 0)
        cycle_start = stats.get("cycle_start_generation", 0)
        return f"Cycle detected - length {cycle_len}, started at generation {cycle_start}"
    elif reason == "max_generations":
        return f"Maximum generations reached ({stats.get('generation', 0)})"
    else:
        return f"Unknown reason: {reason}"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Grid size: {stats['grid_size'][0]}x{stats['grid_size'][1]}")
        print(f"  Rule: {stats['rule']}")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        print(f"  Population change rate: {stats['population_change_rate']:.2f}")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")
    else:
        print(
            "Population: {} -> {}, "
            "Duration: {:.3f}s, "
            "Speed: {:.0f} gen/s".format(
                stats["initial_population"],
                stats["population"],
                stats.get("duration_seconds", 0),
                stats.get("generations_per_second", 0),
            )
        )


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.pattern_row < 0:
        errors.append("Pattern row offset must be non-negative")

    if args.pattern_column < 0:
        errors.append("Pattern column offset must be non-negative")

    for flag, value in (
        ("--birth", args.birth),
        ("--survival-min", args.survival_min),
        ("--survival-max", args.survival_max),
    ):
        if value is not None and not 0 <= value <= MAX_NEIGHBORS:
            errors.append(f"{flag} must be between 0 and {MAX_NEIGHBORS}")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    cli = CLILatticeRunner(verbose=args.verbose)

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if args.list_rules:
        cli.list_rules()
        return 0

    if not validate_args(args):
        return 1

    try:
        rule = resolve_rule(args)
        logger.debug("Resolved rule %s from %r", rule.notation, args.rule)
        final_generation, reason, stats = cli.run_simulation(
            width=args.width,
            height=args.height,
            rule=rule,
            max_generations=args.max_generations,
            seed=args.seed,
            pattern=args.pattern,
            pattern_row=args.pattern_row,
            pattern_column=args.pattern_column,
            show_grid=args.show_grid,
        )
        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except LatticeError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
