"""
Reproducible run configuration.

Bundles the simulation parameters and the run options into one dataclass
that can be written to / read from JSON and overridden from the command
line, so that every flight can be reconstructed from a single file.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fpvsim.params import SimParams


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------

@dataclass
class RunConfig:
    """What to fly and how to report it."""

    scenario: str = "climb"
    t_final: Optional[float] = None  # None -> scenario default
    plot: bool = True
    log_level: str = "INFO"
    verbose: bool = False


@dataclass
class FullConfig:
    sim: SimParams = field(default_factory=SimParams)
    run: RunConfig = field(default_factory=RunConfig)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def config_to_dict(cfg: FullConfig) -> Dict[str, Any]:
    return asdict(cfg)


def save_config(cfg: FullConfig, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config_to_dict(cfg), f, indent=2)


def _check_keys(section: str, data: Dict[str, Any], cls: type) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {section} config keys: {unknown}")


def config_from_dict(data: Dict[str, Any]) -> FullConfig:
    """Build a :class:`FullConfig` from a (possibly partial) dict.

    Raises:
        ValueError: On unknown sections or keys, or invalid parameters.
    """
    _check_keys("top-level", data, FullConfig)
    sim = dict(data.get("sim", {}))
    run = dict(data.get("run", {}))
    _check_keys("sim", sim, SimParams)
    _check_keys("run", run, RunConfig)
    return FullConfig(sim=SimParams(**sim), run=RunConfig(**run))


def load_config(path: str | Path) -> FullConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path) as f:
        return config_from_dict(json.load(f))


# ---------------------------------------------------------------------------
# Argparse loader
# ---------------------------------------------------------------------------

_SIM_KEYS = [
    "dt", "drag", "thrust_coeff", "arrival_radius", "cruise_throttle",
    "battery_drain",
]
_RUN_KEYS = ["scenario", "t_final", "plot", "log_level", "verbose"]


def _add_sim_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("Simulation")
    g.add_argument("--dt", type=float, default=None, help="Fixed timestep [s]")
    g.add_argument("--drag", type=float, default=None)
    g.add_argument("--thrust-coeff", type=float, default=None)
    g.add_argument("--arrival-radius", type=float, default=None)
    g.add_argument("--cruise-throttle", type=float, default=None)
    g.add_argument("--battery-drain", type=float, default=None)


def _add_run_args(parser: argparse.ArgumentParser) -> None:
    g = parser.add_argument_group("Run")
    g.add_argument("--scenario", "-s", type=str, default=None)
    g.add_argument("--t-final", type=float, default=None)
    g.add_argument("--no-plot", dest="plot", action="store_false", default=None,
                   help="Disable plot display")
    g.add_argument("--log-level", type=str, default=None,
                   help="DEBUG | INFO | WARNING | ERROR")
    g.add_argument("--verbose", "-v", action="store_true", default=None)


def build_parser(description: str = "FPV flight simulation") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None,
                        help="JSON config file (CLI flags override it)")
    parser.add_argument("--save-config", type=str, default=None,
                        help="Write the effective config to this JSON file")
    parser.add_argument("--list-scenarios", action="store_true",
                        help="List registered scenarios and exit")
    _add_sim_args(parser)
    _add_run_args(parser)
    return parser


def _overrides(ns: argparse.Namespace, keys: List[str]) -> Dict[str, Any]:
    """Collect non-None argparse values."""
    out = {}
    for key in keys:
        val = getattr(ns, key, None)
        if val is not None:
            out[key] = val
    return out


def load_config_from_args(
    argv: Optional[Sequence[str]] = None,
    parser: Optional[argparse.ArgumentParser] = None,
) -> Tuple[FullConfig, argparse.Namespace]:
    """Build a :class:`FullConfig` from defaults, an optional JSON file and
    CLI overrides, in that order of precedence (last wins).

    Returns
    -------
    cfg : FullConfig
    args : argparse.Namespace  (raw, for any extra flags the caller added)
    """
    parser = parser or build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(args.config) if args.config else FullConfig()

    # Rebuild SimParams so its validation runs on the final values
    sim = {**asdict(cfg.sim), **_overrides(args, _SIM_KEYS)}
    cfg.sim = SimParams(**sim)

    for key, val in _overrides(args, _RUN_KEYS).items():
        setattr(cfg.run, key, val)

    return cfg, args
