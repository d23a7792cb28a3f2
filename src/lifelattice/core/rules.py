"""Birth/survival rules for outer-totalistic automata."""

import re
from dataclasses import dataclass
from typing import Dict, Iterator

from .errors import InvalidRule

MAX_NEIGHBORS = 8

_NOTATION = re.compile(r"^B(\d)/S(\d*)$", re.IGNORECASE)
_TRIPLE = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*$")


@dataclass(frozen=True)
class Rule:
    """Thresholds passed to :meth:`Lattice.advance`.

    A dead cell is born when its neighbour count equals ``birth`` exactly; a
    living cell survives when its count is within
    ``[survival_min, survival_max]``.
    """

    birth: int = 3
    survival_min: int = 2
    survival_max: int = 3

    def __post_init__(self) -> None:
        for name in ("birth", "survival_min", "survival_max"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRule(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= MAX_NEIGHBORS:
                raise InvalidRule(f"{name} must be between 0 and {MAX_NEIGHBORS}, got {value}")
        if self.survival_min > self.survival_max:
            raise InvalidRule(
                f"survival_min ({self.survival_min}) is greater than survival_max ({self.survival_max})"
            )

    def __iter__(self) -> Iterator[int]:
        return iter((self.birth, self.survival_min, self.survival_max))

    @property
    def notation(self) -> str:
        """Rule in B/S notation, e.g. 'B3/S23'."""
        survival = "".join(str(n) for n in range(self.survival_min, self.survival_max + 1))
        return f"B{self.birth}/S{survival}"

    @classmethod
    def parse(cls, text: str) -> "Rule":
        """Parse a preset name, B/S notation or a 'birth,min,max' triple.

        B/S notation is accepted only when it can be expressed by this engine:
        a single birth count and a contiguous run of survival counts.

        Raises:
            InvalidRule: If the text cannot be turned into a rule
        """
        key = text.strip().lower()
        if key in PRESETS:
            return PRESETS[key]

        match = _TRIPLE.match(text)
        if match:
            birth, survival_min, survival_max = (int(group) for group in match.groups())
            return cls(birth, survival_min, survival_max)

        match = _NOTATION.match(text.strip())
        if match:
            birth = int(match.group(1))
            survival = [int(digit) for digit in match.group(2)]
            if not survival:
                raise InvalidRule(f"Rule '{text}' has no survival counts")
            if survival != list(range(survival[0], survival[0] + len(survival))):
                raise InvalidRule(f"Survival counts in '{text}' must be a contiguous ascending run")
            return cls(birth, survival[0], survival[-1])

        raise InvalidRule(f"Unrecognised rule '{text}'. Available presets: {', '.join(PRESETS)}")


CONWAY = Rule(3, 2, 3)

PRESETS: Dict[str, Rule] = {
    "conway": CONWAY,
    "mazectric": Rule(3, 1, 4),
    "maze": Rule(3, 1, 5),
    "coral": Rule(3, 4, 8),
    "life-without-death": Rule(3, 0, 8),
}
