"""
Visualization functions for flight logs.

These are the draw step: they read a finished (or partial) FlightLog and
never touch the simulation.
"""

from typing import Optional, Sequence

import numpy as np

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from fpvsim.types import FlightLog, Waypoint


def plot_map(
    log: FlightLog,
    waypoints: Optional[Sequence[Waypoint]] = None,
    title: str = "Map",
    show: bool = False,
) -> Figure:
    """
    Top-down map: ground track in the x/z plane with waypoints.

    Args:
        log: Flight log
        waypoints: Mission waypoints to overlay, numbered from 1
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    if waypoints:
        wps = np.array([wp.as_array() for wp in waypoints])
        ax.plot(wps[:, 0], wps[:, 2], 'b--', linewidth=1.5, alpha=0.7,
                label='Mission')
        ax.scatter(wps[:, 0], wps[:, 2], c='gold', s=120, edgecolors='k',
                   zorder=3)
        for i, wp in enumerate(waypoints):
            ax.annotate(str(i + 1), (wp.x, wp.z), ha='center', va='center',
                        fontsize=8, zorder=4)

    ax.plot(log.p[:, 0], log.p[:, 2], 'r-', linewidth=1.5, label='Track')

    # Mark start and end
    ax.plot(log.p[0, 0], log.p[0, 2], 'go', markersize=10, label='Start')
    ax.plot(log.p[-1, 0], log.p[-1, 2], 'rx', markersize=10, label='End')

    ax.set_xlabel('X [m]')
    ax.set_ylabel('Z [m]')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    ax.axis('equal')

    fig.tight_layout()

    if show:
        plt.show()

    return fig


def plot_altitude_speed(
    log: FlightLog,
    title: str = "Altitude and Speed",
    show: bool = False,
) -> Figure:
    """
    Plot altitude and speed over time, with ground contacts shaded.

    Args:
        log: Flight log
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    axes[0].plot(log.t, log.p[:, 1], 'b-', linewidth=1.5)
    axes[0].fill_between(log.t, 0, log.p[:, 1].max(initial=1.0),
                         where=log.grounded, color='brown', alpha=0.2,
                         label='On ground')
    axes[0].set_ylabel('Altitude [m]')
    axes[0].set_title(title)
    axes[0].legend(loc='upper right')

    speed = np.linalg.norm(log.v, axis=1)
    axes[1].plot(log.t, speed, 'k-', linewidth=1.5, label='|v|')
    axes[1].plot(log.t, log.v[:, 1], 'g--', linewidth=1, label='vy')
    axes[1].set_ylabel('Speed [m/s]')
    axes[1].legend(loc='upper right')
    axes[1].set_xlabel('Time [s]')

    for ax in axes:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()

    if show:
        plt.show()

    return fig


def plot_attitude(
    log: FlightLog,
    title: str = "Attitude and Throttle",
    show: bool = False,
) -> Figure:
    """
    Plot pitch, roll, yaw and throttle over time.

    Args:
        log: Flight log
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(3, 1, figsize=(10, 8), sharex=True)

    axes[0].plot(log.t, log.att[:, 0], 'r-', label='Pitch')
    axes[0].plot(log.t, log.att[:, 1], 'b-', label='Roll')
    axes[0].set_ylabel('Angle [deg]')
    axes[0].legend(loc='upper right')
    axes[0].set_title(title)

    axes[1].plot(log.t, log.att[:, 2], 'm-')
    axes[1].set_ylabel('Yaw [deg]')

    axes[2].plot(log.t, log.throttle * 100.0, color='orange')
    axes[2].set_ylabel('Throttle [%]')
    axes[2].set_ylim(-5, 105)
    axes[2].set_xlabel('Time [s]')

    for ax in axes:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()

    if show:
        plt.show()

    return fig


def plot_telemetry(
    log: FlightLog,
    title: str = "Telemetry",
    show: bool = False,
) -> Figure:
    """
    Plot the displayed telemetry: battery, distance and waypoint index.

    Args:
        log: Flight log
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(3, 1, figsize=(10, 7), sharex=True)

    axes[0].plot(log.t, log.battery, 'g-')
    axes[0].axhline(20.0, color='r', linestyle=':', alpha=0.7)
    axes[0].set_ylabel('Battery [%]')
    axes[0].set_title(title)

    axes[1].plot(log.t, log.distance, 'b-')
    axes[1].set_ylabel('Distance [m]')

    axes[2].step(log.t, log.wp_index + 1, 'k-', where='post')
    arrivals = np.flatnonzero(log.arrived)
    if arrivals.size:
        axes[2].plot(log.t[arrivals], log.wp_index[arrivals] + 1, 'go',
                     label='Arrival')
        axes[2].legend(loc='upper right')
    axes[2].set_ylabel('Active WP')
    axes[2].set_xlabel('Time [s]')

    for ax in axes:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()

    if show:
        plt.show()

    return fig
