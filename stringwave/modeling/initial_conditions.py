"""
Initial Conditions for the String.

A three-level scheme needs the displacement at two time levels before the
stencil can run. This module builds both levels from an analytic Gaussian,
either for a pulse released at rest or for a packet already travelling at the
wave speed.
"""

from __future__ import annotations

from typing import List

import numpy as np
from pydantic import BaseModel, Field
from rich.console import Console

from .grid import StringGrid


console = Console()


class InitialState(BaseModel):
    """
    Displacement at the two time levels preceding the first stencil step.

    Attributes:
        previous (np.ndarray): Field at time level ``n - 1``.
        current (np.ndarray): Field at time level ``n``.
        frames (List[np.ndarray]): Frames recorded before stepping starts, in time order.
    """
    previous: np.ndarray
    current: np.ndarray
    frames: List[np.ndarray] = Field(default_factory=list)

    # Configure pydantic model
    model_config = {
        "arbitrary_types_allowed": True,  # Allow numpy arrays
    }
# end class InitialState


def gaussian_profile(
        positions: np.ndarray,
        center: float,
        sigma: float,
        amplitude: float
) -> np.ndarray:
    """
    Gaussian pulse ``A * exp(-(x - center)^2 / (2 * sigma^2))``.

    Args:
        positions (np.ndarray): Node positions (m).
        center (float): Pulse center (m).
        sigma (float): Pulse width (m).
        amplitude (float): Peak displacement (m).

    Returns:
        np.ndarray: Displacement at every position.
    """
    return amplitude * np.exp(-((positions - center) ** 2) / (2.0 * sigma ** 2))
# end def gaussian_profile


def packet_profile(
        positions: np.ndarray,
        center: float,
        sigma: float,
        amplitude: float
) -> np.ndarray:
    """
    Gaussian packet ``A * exp(-(x - center)^2 / sigma^2)``.

    Same shape as :func:`gaussian_profile` without the factor 1/2 in the
    exponent.
    """
    return amplitude * np.exp(-((positions - center) ** 2) / sigma ** 2)
# end def packet_profile


def clamp_endpoints(displacement: np.ndarray) -> np.ndarray:
    """Force the fixed-end value 0 on both endpoints, in place."""
    displacement[0] = 0.0
    displacement[-1] = 0.0
    return displacement
# end def clamp_endpoints


def pulse_at_rest(
        grid: StringGrid,
        center: float,
        sigma: float,
        amplitude: float,
        log: bool = False,
) -> InitialState:
    """
    Gaussian pulse released with zero initial velocity.

    The second time level is an exact copy of the first, so the centered
    difference ``(u_current - u_previous) / dt`` is zero. Both levels are
    recorded as the first two frames.

    Args:
        grid (StringGrid): Spatial grid.
        center (float): Pulse center (m).
        sigma (float): Pulse width (m).
        amplitude (float): Peak displacement (m).
        log (bool, optional): If True, print the pulse parameters.

    Returns:
        InitialState: Previous/current fields and the two recorded frames.
    """
    if log:
        console.print("[green]Building Gaussian pulse at rest[/]")
        console.print(f"[yellow]Center: [/] {center}")
        console.print(f"[yellow]Sigma: [/] {sigma}")
        console.print(f"[yellow]Amplitude: [/] {amplitude}")
    # end if

    previous = grid.zeros()
    previous[:] = gaussian_profile(grid.positions(), center, sigma, amplitude)
    clamp_endpoints(previous)

    current = previous.copy()

    return InitialState(
        previous=previous,
        current=current,
        frames=[previous.copy(), current.copy()],
    )
# end def pulse_at_rest


def traveling_packet(
        grid: StringGrid,
        center: float,
        sigma: float,
        amplitude: float,
        wave_speed: float,
        time_step: float,
        log: bool = False,
) -> InitialState:
    """
    Gaussian packet moving to the right at ``wave_speed`` without splitting.

    A right-going wave satisfies ``u_t = -c * u_x``. The level before the
    recorded one comes from a first-order Taylor step backwards in time,
    ``u(x, -dt) = u(x, 0) - dt * v0(x)`` with ``v0 = -c * du/dx``.

    Args:
        grid (StringGrid): Spatial grid.
        center (float): Initial packet center (m).
        sigma (float): Packet width (m).
        amplitude (float): Peak displacement (m).
        wave_speed (float): Wave speed (m/s).
        time_step (float): Time step of the run (s).
        log (bool, optional): If True, print the packet parameters.

    Returns:
        InitialState: Previous/current fields; only the current level is recorded.
    """
    if log:
        console.print("[green]Building travelling Gaussian packet[/]")
        console.print(f"[yellow]Center: [/] {center}")
        console.print(f"[yellow]Sigma: [/] {sigma}")
        console.print(f"[yellow]Wave speed: [/] {wave_speed}")
    # end if

    positions = grid.positions()
    u0 = packet_profile(positions, center, sigma, amplitude)

    # Analytic slope of the packet and the matching travelling-wave velocity
    du_dx = u0 * (-2.0 * (positions - center)) / sigma ** 2
    v0 = -wave_speed * du_dx

    current = grid.zeros()
    current[:] = u0
    clamp_endpoints(current)

    previous = grid.zeros()
    previous[:] = u0 - time_step * v0
    clamp_endpoints(previous)

    return InitialState(previous=previous, current=current, frames=[current.copy()])
# end def traveling_packet
