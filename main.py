"""
Main entry point for the Space Colonization engine.

Grows one structure from a single root toward an oval attractor cloud
until it converges, stalls or runs out of iterations.

Configuration is loaded from config/sca.json when present.
"""

from config import load_config
from spacecol import Simulation


def main():
    config = load_config()

    print("Running space colonization")
    print(f"  Attractors: {config.spawn_attractors}")
    print(f"  Influence / kill radius: {config.influence_radius} / {config.kill_radius}")
    print(f"  Max iterations: {config.max_iterations}")
    print()

    sim = Simulation(config)
    sim.reset()
    condition = sim.run()

    snapshot = sim.snapshot()
    tips = sim.tree.tips
    print(f"\nGenerated {len(snapshot.nodes)} nodes ({len(tips)} tips) "
          f"in {snapshot.iteration} cycles")
    print(f"  Stop reason: {condition.value}")
    print(f"  Attractors consumed: {len(snapshot.attractors) - snapshot.alive_attractors}"
          f" / {len(snapshot.attractors)}")


if __name__ == '__main__':
    main()
