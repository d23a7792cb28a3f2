"""Frame-loop driver that advances a lattice and tracks its history."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterator, Optional, Tuple
import numpy as np

from .lattice import Lattice
from .patterns import PatternLibrary
from .rules import CONWAY, Rule

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""

    width: int = 50
    height: int = 50
    rule: Rule = CONWAY
    seed: Optional[int] = None
    pattern: Optional[str] = None
    pattern_row: int = 0
    pattern_column: int = 0
    max_generations: int = 1000


class Simulation:
    """Drives a :class:`Lattice` one generation at a time.

    The lattice does no scheduling of its own; this class plays the host's
    frame loop. It counts generations, keeps a short population history and
    detects when the lattice returns to a state it has already been in.
    """

    def __init__(
        self,
        lattice: Lattice,
        rule: Rule = CONWAY,
        notify: Optional[Notifier] = None,
        max_generations: int = 10000,
    ) -> None:
        """Initialize the simulation.

        Args:
            lattice: The lattice to drive
            rule: Birth/survival rule applied on each tick
            notify: Optional callback receiving human-readable event messages
            max_generations: Default cap for :meth:`run_until_stable`
        """
        self.lattice = lattice
        self._rule = rule
        self._notify = notify
        self.max_generations = max_generations
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[Tuple[bytes, int]] = deque(maxlen=1000)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()
        self._record_state()

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        library: Optional[PatternLibrary] = None,
        notify: Optional[Notifier] = None,
    ) -> "Simulation":
        """Build a simulation from a :class:`SimulationConfig`.

        An unknown pattern name falls back to a random lattice.
        """
        lattice = None
        if config.pattern:
            library = library or PatternLibrary()
            pattern = library.get_pattern(config.pattern)
            if pattern:
                logger.debug(
                    "Seeding %dx%d lattice with pattern '%s' at (%d, %d)",
                    config.width,
                    config.height,
                    config.pattern,
                    config.pattern_row,
                    config.pattern_column,
                )
                lattice = pattern.to_lattice(
                    config.width, config.height, config.pattern_row, config.pattern_column
                )
            else:
                logger.warning("Pattern '%s' not found, using random population", config.pattern)

        if lattice is None:
            logger.debug("Seeding %dx%d lattice randomly (seed=%s)", config.width, config.height, config.seed)
            lattice = Lattice(config.width, config.height, seed=config.seed)

        return cls(lattice, config.rule, notify, config.max_generations)

    @property
    def rule(self) -> Rule:
        """Rule applied on each tick."""
        return self._rule

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.lattice.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def tick(self) -> None:
        """Advance the simulation by one generation."""
        self.lattice.step(self._rule)

        self._generation += 1
        self._update_population_history()
        self._check_for_cycles()

    def toggle(self, row: int, column: int) -> None:
        """Flip a cell between ticks.

        A hand edit changes the state space, so cycle detection starts over.
        """
        self.lattice.toggle_cell(row, column)
        self.clear_cycle_detection()

    def set_rule(self, rule: Rule) -> None:
        """Switch to a different rule before the next tick."""
        if rule != self._rule:
            logger.debug("Rule changed from %s to %s", self._rule.notation, rule.notation)
            self._rule = rule
            self.clear_cycle_detection()

    def frames(self, count: Optional[int] = None) -> Iterator[np.ndarray]:
        """Yield the cell buffer once per frame.

        The first frame is the current state; each later frame follows one tick.
        Each yielded view is only valid until the generator resumes.

        Args:
            count: Number of ticks to run, or None to run forever
        """
        yield self.lattice.cells_view()
        ticks = 0
        while count is None or ticks < count:
            self.tick()
            ticks += 1
            yield self.lattice.cells_view()

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _check_for_cycles(self) -> None:
        """Check if the state just produced has been seen before."""
        if self._cycle_detected:
            return

        current_state = self.lattice.cells_view().tobytes()

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            self._emit(
                f"Cycle detected at generation {self._generation}: "
                f"length {self._cycle_length}, started at generation {first_occurrence}"
            )
            return

        self._record_state(current_state)

    def _record_state(self, state: Optional[bytes] = None) -> None:
        if state is None:
            state = self.lattice.cells_view().tobytes()

        # Evict the oldest state once the history is full
        if len(self._state_history) == self._state_history.maxlen:
            old_state, old_generation = self._state_history.popleft()
            if self._seen_states.get(old_state) == old_generation:
                del self._seen_states[old_state]

        self._seen_states[state] = self._generation
        self._state_history.append((state, self._generation))

    def _emit(self, message: str) -> None:
        logger.info(message)
        if self._notify is not None:
            self._notify(message)

    def clear_cycle_detection(self) -> None:
        """Forget previously seen states, keeping generation and population history.

        The current state becomes the first one remembered.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()
        self._record_state()

    def reset(self, lattice: Optional[Lattice] = None) -> None:
        """Restart counters, optionally swapping in a new lattice."""
        if lattice is not None:
            self.lattice = lattice

        self._generation = 0
        self._population_history.clear()
        self.clear_cycle_detection()

        self._update_population_history()

    def run_until_stable(self, max_generations: Optional[int] = None) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        The returned generation is the one named in the cycle or extinction message.

        Args:
            max_generations: Maximum generations to run, defaulting to :attr:`max_generations`

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        if max_generations is None:
            max_generations = self.max_generations

        for _ in range(max_generations):
            self.tick()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                self._emit(f"Extinction at generation {self._generation}")
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Average population change per generation over a recent window."""
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        return float(np.mean(np.diff(recent_history)))

    def get_statistics(self) -> Dict:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        return {
            "generation": self._generation,
            "population": self.population,
            "population_density": self.population / (self.lattice.width * self.lattice.height),
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": (self.lattice.width, self.lattice.height),
            "rule": self._rule.notation,
        }
