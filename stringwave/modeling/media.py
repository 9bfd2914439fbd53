"""
Media carried by the string.

A run either uses a single homogeneous medium or a string made of two media
joined at an interface node. Both share one time step per run; the Courant
number of each region follows from its wave speed.
"""

from __future__ import annotations

from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .grid import StringGrid


class HomogeneousMedium(BaseModel):
    """
    Single medium with one wave speed along the whole string.

    Attributes:
        wave_speed (float): Wave speed (m/s).
        courant_number (float): Courant number ``c * dt / dx`` driving the time step.
            Values above 1 are accepted and give an unstable run.
    """
    wave_speed: float = Field(..., description="Wave speed (m/s)")
    courant_number: float = Field(..., description="Courant number c*dt/dx")

    model_config = ConfigDict(
        title="Homogeneous Medium",
        frozen=True,
        extra="forbid"
    )

    @field_validator("wave_speed", "courant_number")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate that wave speed and Courant number are positive."""
        if v <= 0:
            raise ValueError("Wave speed and Courant number must be positive")
        # end if
        return v
    # end def validate_positive

    def time_step(self, grid: StringGrid) -> float:
        """Time step (s) giving ``courant_number`` on ``grid``."""
        return grid.time_step(self.courant_number, self.wave_speed)
    # end def time_step

    def courant_numbers(self, grid: StringGrid) -> Tuple[float, ...]:
        """Courant number of every region, left to right."""
        return (self.courant_number,)
    # end def courant_numbers

    def is_stable(self, grid: StringGrid) -> bool:
        """True when the explicit scheme is stable (``r <= 1``)."""
        return self.courant_number <= 1.0
    # end def is_stable

# end class HomogeneousMedium


class TwoMediumString(BaseModel):
    """
    String made of two media meeting at ``interface_index``.

    The time step is chosen so that the left region runs at ``courant_number``;
    the right region's Courant number is derived from the same time step.

    Attributes:
        left_speed (float): Wave speed left of the interface (m/s).
        right_speed (float): Wave speed right of the interface (m/s).
        interface_index (int): Node where the two media meet.
        courant_number (float): Target Courant number of the left region.
    """
    left_speed: float = Field(..., description="Wave speed left of the interface (m/s)")
    right_speed: float = Field(..., description="Wave speed right of the interface (m/s)")
    interface_index: int = Field(..., description="Node index of the interface")
    courant_number: float = Field(..., description="Courant number of the left region")

    model_config = ConfigDict(
        title="Two-Medium String",
        frozen=True,
        extra="forbid"
    )

    @field_validator("left_speed", "right_speed", "courant_number")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate that wave speeds and Courant number are positive."""
        if v <= 0:
            raise ValueError("Wave speeds and Courant number must be positive")
        # end if
        return v
    # end def validate_positive

    def check_grid(self, grid: StringGrid) -> None:
        """
        Ensure the interface node is an interior node of ``grid``.

        Raises:
            ValueError: If ``interface_index`` is not in ``(0, node_count - 1)``.
        """
        if not 0 < self.interface_index < grid.last_index:
            raise ValueError(
                f"Interface index {self.interface_index} must lie strictly between "
                f"0 and {grid.last_index}"
            )
        # end if
    # end def check_grid

    def time_step(self, grid: StringGrid) -> float:
        """Time step (s) giving ``courant_number`` in the left region."""
        return grid.time_step(self.courant_number, self.left_speed)
    # end def time_step

    def right_courant_number(self, grid: StringGrid) -> float:
        """Courant number of the right region for the shared time step."""
        return (self.right_speed * self.time_step(grid)) / grid.spacing
    # end def right_courant_number

    def courant_numbers(self, grid: StringGrid) -> Tuple[float, ...]:
        """Courant number of every region, left to right."""
        return self.courant_number, self.right_courant_number(grid)
    # end def courant_numbers

    def is_stable(self, grid: StringGrid) -> bool:
        """True when both regions satisfy ``r <= 1``."""
        return all(r <= 1.0 for r in self.courant_numbers(grid))
    # end def is_stable

# end class TwoMediumString


Medium = Union[HomogeneousMedium, TwoMediumString]
