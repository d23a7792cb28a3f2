#!/usr/bin/env python3
"""
Example usage of the lifelattice package.
"""

from lifelattice import Lattice, PatternLibrary, Rule, Simulation


def main():
    """Drive a glider around a small torus, then try another rule."""
    library = PatternLibrary()
    glider = library.get_pattern("Glider")

    simulation = Simulation(glider.to_lattice(10, 10, row=3, column=3), notify=print)

    for frame in simulation.frames(count=8):
        print(f"Generation {simulation.generation}, population {int(frame.sum())}:")
        print(simulation.lattice)
        print()

    # Hand edit between ticks, as a click handler would
    simulation.toggle(0, 0)
    simulation.set_rule(Rule.parse("B3/S12345"))
    generation, reason = simulation.run_until_stable(200)
    print(f"Maze rule finished at generation {generation}: {reason}")

    # A random lattice, advanced with raw thresholds
    lattice = Lattice(16, 8, seed=42)
    lattice.advance(3, 2, 3)
    print(lattice)

    print("Final statistics:")
    for key, value in simulation.get_statistics().items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
