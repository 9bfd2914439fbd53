"""
Explicit Finite-Difference Steppers for a Fixed-End String.

This module advances the displacement of a string with the three-level
centered (leapfrog) discretization of ``u_tt = c^2 u_xx``. Each stepper owns
three buffers (previous, current, next) allocated once per run; every call to
``advance`` fills ``next``, hands out a copy of it and rotates the buffers.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .grid import StringGrid
from .initial_conditions import InitialState
from .media import HomogeneousMedium, Medium, TwoMediumString


def leapfrog_region(
        next_field: np.ndarray,
        current: np.ndarray,
        previous: np.ndarray,
        r_squared: float,
        start: int,
        stop: int
) -> None:
    """
    Apply the centered stencil to nodes ``start <= i < stop``.

    ``next[i] = 2 (1 - r^2) current[i] - previous[i] + r^2 (current[i+1] + current[i-1])``

    Args:
        next_field (np.ndarray): Field written in place.
        current (np.ndarray): Field at time level ``n``.
        previous (np.ndarray): Field at time level ``n - 1``.
        r_squared (float): Squared Courant number of the region.
        start (int): First node of the region, at least 1.
        stop (int): One past the last node of the region, at most ``node_count - 1``.
    """
    next_field[start:stop] = (
        2.0 * (1.0 - r_squared) * current[start:stop]
        - previous[start:stop]
        + r_squared * (current[start + 1:stop + 1] + current[start - 1:stop - 1])
    )
# end def leapfrog_region


class DisplacementStepper(ABC):
    """
    Abstract base class for string steppers.

    Subclasses only define how interior nodes are updated; buffer ownership,
    the fixed-end condition and buffer rotation live here.
    """

    def __init__(self, grid: StringGrid):
        """
        Allocate the three rolling buffers.

        Args:
            grid (StringGrid): Spatial grid of the run.
        """
        self.grid = grid
        self._previous = grid.zeros()
        self._current = grid.zeros()
        self._next = grid.zeros()
        self.steps_taken = 0
    # end def __init__

    @property
    def previous(self) -> np.ndarray:
        """Read-only view of the field at time level ``n - 1``."""
        view = self._previous.view()
        view.flags.writeable = False
        return view
    # end def previous

    @property
    def current(self) -> np.ndarray:
        """Read-only view of the field at time level ``n``."""
        view = self._current.view()
        view.flags.writeable = False
        return view
    # end def current

    def load(self, initial_state: InitialState) -> None:
        """
        Copy the two initial time levels into the stepper's buffers.

        Args:
            initial_state (InitialState): Fields built by the initial-condition builder.

        Raises:
            ValueError: If a field does not have one value per node.
        """
        for name, field in (("previous", initial_state.previous), ("current", initial_state.current)):
            if np.shape(field) != (self.grid.node_count,):
                raise ValueError(
                    f"Initial {name} field has shape {np.shape(field)}, "
                    f"expected ({self.grid.node_count},)"
                )
            # end if
        # end for

        self._previous[:] = initial_state.previous
        self._current[:] = initial_state.current
        self._next.fill(0.0)
        self.steps_taken = 0
    # end def load

    @abstractmethod
    def update_interior(
            self,
            next_field: np.ndarray,
            current: np.ndarray,
            previous: np.ndarray
    ) -> None:
        """
        Fill the interior nodes of ``next_field``.

        Args:
            next_field (np.ndarray): Field at time level ``n + 1``, written in place.
            current (np.ndarray): Field at time level ``n``.
            previous (np.ndarray): Field at time level ``n - 1``.
        """
        pass
    # end def update_interior

    def advance(self) -> np.ndarray:
        """
        Advance the string by one time step.

        The run is carried out whatever the Courant number; values above 1
        give a diverging trajectory rather than an error.

        Returns:
            np.ndarray: Copy of the new field, decoupled from the rolling buffers.
        """
        # Fixed ends
        self._next[0] = 0.0
        self._next[-1] = 0.0

        self.update_interior(self._next, self._current, self._previous)
        frame = self._next.copy()

        # Rotate buffers, the vacated one becomes the next target
        self._previous, self._current, self._next = self._current, self._next, self._previous
        self.steps_taken += 1

        return frame
    # end def advance

# end class DisplacementStepper


class HomogeneousStepper(DisplacementStepper):
    """
    Stepper for a string made of a single medium.
    """

    def __init__(self, grid: StringGrid, courant_number: float):
        """
        Args:
            grid (StringGrid): Spatial grid of the run.
            courant_number (float): Courant number ``c * dt / dx``.
        """
        super().__init__(grid)
        self.courant_number = courant_number
        self.r_squared = courant_number ** 2
    # end def __init__

    def update_interior(
            self,
            next_field: np.ndarray,
            current: np.ndarray,
            previous: np.ndarray
    ) -> None:
        leapfrog_region(next_field, current, previous, self.r_squared, 1, self.grid.last_index)
    # end def update_interior

# end class HomogeneousStepper


class InterfaceStepper(DisplacementStepper):
    """
    Stepper for two media joined at an interface node.

    Nodes left of the interface use ``r1^2``, nodes right of it ``r2^2``. The
    interface node averages the two one-sided stencils:

    ``next[k] = 2 (1 - (r1^2 + r2^2) / 2) current[k] - previous[k]
    + (r1^2 current[k-1] + r2^2 current[k+1]) / 2``

    This only enforces continuity of displacement across the interface. It is
    an approximation and does not match the impedances of the two media the
    way an exact interface condition would.
    """

    def __init__(
            self,
            grid: StringGrid,
            left_courant_number: float,
            right_courant_number: float,
            interface_index: int
    ):
        """
        Args:
            grid (StringGrid): Spatial grid of the run.
            left_courant_number (float): Courant number left of the interface.
            right_courant_number (float): Courant number right of the interface.
            interface_index (int): Node where the two media meet.

        Raises:
            ValueError: If the interface is not an interior node.
        """
        if not 0 < interface_index < grid.last_index:
            raise ValueError(
                f"Interface index {interface_index} must lie strictly between "
                f"0 and {grid.last_index}"
            )
        # end if
        super().__init__(grid)
        self.left_courant_number = left_courant_number
        self.right_courant_number = right_courant_number
        self.interface_index = interface_index
        self.r1_squared = left_courant_number ** 2
        self.r2_squared = right_courant_number ** 2
    # end def __init__

    def update_interior(
            self,
            next_field: np.ndarray,
            current: np.ndarray,
            previous: np.ndarray
    ) -> None:
        k = self.interface_index
        r1_sq = self.r1_squared
        r2_sq = self.r2_squared

        leapfrog_region(next_field, current, previous, r1_sq, 1, k)
        leapfrog_region(next_field, current, previous, r2_sq, k + 1, self.grid.last_index)

        next_field[k] = (
            2.0 * (1.0 - (r1_sq + r2_sq) / 2.0) * current[k]
            - previous[k]
            + (r1_sq * current[k - 1] + r2_sq * current[k + 1]) / 2.0
        )
    # end def update_interior

# end class InterfaceStepper


def create_stepper(
        grid: StringGrid,
        medium: Medium,
        initial_state: Optional[InitialState] = None
) -> DisplacementStepper:
    """
    Build the stepper matching a medium configuration.

    Args:
        grid (StringGrid): Spatial grid of the run.
        medium (Medium): Homogeneous medium or two-medium string.
        initial_state (InitialState, optional): If given, loaded into the stepper.

    Returns:
        DisplacementStepper: A fresh stepper with its own buffers.
    """
    if isinstance(medium, HomogeneousMedium):
        stepper = HomogeneousStepper(grid, medium.courant_number)
    elif isinstance(medium, TwoMediumString):
        medium.check_grid(grid)
        stepper = InterfaceStepper(
            grid,
            left_courant_number=medium.courant_number,
            right_courant_number=medium.right_courant_number(grid),
            interface_index=medium.interface_index,
        )
    else:
        raise ValueError(f"Unsupported medium: {type(medium).__name__}")
    # end if

    if initial_state is not None:
        stepper.load(initial_state)
    # end if

    return stepper
# end def create_stepper
