"""
Main entry point for the FPV flight simulation.

Run with: python -m fpvsim.main

Examples:
    python -m fpvsim.main                     # Fly the default scenario (climb)
    python -m fpvsim.main --scenario patrol
    python -m fpvsim.main --scenario all --no-plot
    python -m fpvsim.main --list-scenarios
    python -m fpvsim.main --config flight.json --t-final 20
"""

from typing import List, Optional, Sequence

import matplotlib.pyplot as plt

from fpvsim.config import FullConfig, build_parser, load_config_from_args, save_config
from fpvsim.log import print_statistics
from fpvsim.logging_config import setup_logging
from fpvsim.metrics import compute_all_metrics
from fpvsim.plots import plot_altitude_speed, plot_attitude, plot_map, plot_telemetry
from fpvsim.scenarios import get_scenario, list_scenarios, run_scenario
from fpvsim.types import FlightLog


def fly(name: str, cfg: FullConfig, show_plots: bool = True) -> FlightLog:
    """Fly one scenario, print its summary and optionally build plots."""
    spec = get_scenario(name)
    t_final = spec.t_final if cfg.run.t_final is None else cfg.run.t_final
    print("\n" + "=" * 60)
    print(f"SCENARIO: {name.upper()}")
    print("=" * 60)
    if spec.description:
        print(spec.description)
    print(f"Mode: {spec.mode}  |  Armed: {spec.arm}  |  "
          f"Duration: {t_final:.1f} s")

    log, mission = run_scenario(
        name, cfg.sim, t_final=t_final, verbose=cfg.run.verbose,
    )
    print_statistics(log, name)

    metrics = compute_all_metrics(log)
    if metrics["diverged"]:
        print("  [WARN] Simulation diverged")

    if show_plots:
        title = name.replace("_", " ").title()
        plot_map(log, mission.waypoints, f"{title}: Map")
        plot_altitude_speed(log, f"{title}: Altitude and Speed")
        plot_attitude(log, f"{title}: Attitude and Throttle")
        plot_telemetry(log, f"{title}: Telemetry")

    return log


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser("FPV Quadrotor Flight Simulation")
    parser.epilog = """
Examples:
  python -m fpvsim.main                      # Fly the climb scenario
  python -m fpvsim.main --scenario patrol    # Autopilot over two waypoints
  python -m fpvsim.main --scenario all       # Fly every scenario
  python -m fpvsim.main --no-plot            # Run without plots
"""
    cfg, args = load_config_from_args(argv, parser)

    if args.list_scenarios:
        for name in list_scenarios():
            print(f"  {name:14s} {get_scenario(name).description}")
        return

    setup_logging(cfg.run.log_level)

    if args.save_config:
        save_config(cfg, args.save_config)
        print(f"Config written to {args.save_config}")

    if cfg.run.scenario == "all":
        names: List[str] = list_scenarios()
    else:
        get_scenario(cfg.run.scenario)  # KeyError on unknown names
        names = [cfg.run.scenario]

    # Banner
    print("=" * 60)
    print("  FPV QUADROTOR FLIGHT SIMULATION")
    print("=" * 60)
    print(f"\nTimestep: {cfg.sim.dt*1000:.2f} ms ({cfg.sim.rate_hz:.0f} Hz)")
    print(f"Hover throttle: {cfg.sim.hover_throttle*100:.0f} %")

    show_plots = cfg.run.plot
    for name in names:
        fly(name, cfg, show_plots=show_plots)

    # Summary
    print("\n" + "=" * 60)
    print("SIMULATION COMPLETE")
    print("=" * 60)

    if show_plots:
        print("\nDisplaying plots... Close plot windows to exit.")
        plt.show()
    else:
        print("\nPlots disabled. Use without --no-plot to see visualizations.")


if __name__ == "__main__":
    main()
