"""
Gymnasium environments for the FPV flight simulation.

Requires the ``gymnasium`` dependency::

    pip install gymnasium
"""

from fpvsim.envs.fpv_env import EnvConfig, FpvEnv

__all__ = [
    "EnvConfig",
    "FpvEnv",
]
