"""
Spatial discretization of a string with fixed ends.

The string is sampled by ``node_count`` equally spaced nodes. Node ``0`` and
node ``node_count - 1`` are the clamped endpoints; everything in between is an
interior node advanced by the finite-difference stencil.
"""

from __future__ import annotations

import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


class StringGrid(BaseModel):
    """
    Uniform 1D grid covering a string of fixed length.

    Attributes:
        node_count (int): Number of nodes, endpoints included.
        spacing (float): Distance between two adjacent nodes (m).
    """
    node_count: int = Field(..., description="Number of nodes, endpoints included")
    spacing: float = Field(..., description="Distance between adjacent nodes (m)")

    model_config = ConfigDict(
        title="String Grid",
        frozen=True,
        extra="forbid"
    )

    @field_validator("node_count")
    @classmethod
    def validate_node_count(cls, v: int) -> int:
        """Validate that the grid holds at least one interior node."""
        if v < 3:
            raise ValueError("A string grid needs at least 3 nodes (one interior node)")
        # end if
        return v
    # end def validate_node_count

    @field_validator("spacing")
    @classmethod
    def validate_spacing(cls, v: float) -> float:
        """Validate that node spacing is positive."""
        if v <= 0:
            raise ValueError("Node spacing must be positive")
        # end if
        return v
    # end def validate_spacing

    @classmethod
    def from_length(cls, length: float, spacing: float) -> StringGrid:
        """
        Build a grid from the string length and the desired node spacing.

        The node count is ``floor(length / spacing) + 1``.

        Args:
            length (float): String length (m).
            spacing (float): Desired node spacing (m).

        Returns:
            StringGrid: The derived grid.
        """
        if length <= 0:
            raise ValueError("String length must be positive")
        # end if
        if spacing <= 0:
            raise ValueError("Node spacing must be positive")
        # end if
        return cls(node_count=int(math.floor(length / spacing)) + 1, spacing=spacing)
    # end def from_length

    @classmethod
    def from_node_count(cls, length: float, node_count: int) -> StringGrid:
        """
        Build a grid with a given number of nodes spanning ``length``.

        Args:
            length (float): String length (m).
            node_count (int): Number of nodes, endpoints included.

        Returns:
            StringGrid: The derived grid, with ``spacing = length / (node_count - 1)``.
        """
        if node_count < 3:
            raise ValueError("A string grid needs at least 3 nodes (one interior node)")
        # end if
        return cls(node_count=node_count, spacing=length / (node_count - 1))
    # end def from_node_count

    @property
    def last_index(self) -> int:
        """Index of the right endpoint."""
        return self.node_count - 1
    # end def last_index

    @property
    def length(self) -> float:
        """Distance between the two endpoints (m)."""
        return self.last_index * self.spacing
    # end def length

    def positions(self) -> np.ndarray:
        """
        Position of every node, ``x = index * spacing``.

        Returns:
            np.ndarray: Node positions in index order (m).
        """
        return np.arange(self.node_count, dtype=np.float64) * self.spacing
    # end def positions

    def time_step(self, courant_number: float, wave_speed: float) -> float:
        """
        Time step giving the requested Courant number for a wave speed.

        Args:
            courant_number (float): Target Courant number ``c * dt / dx``.
            wave_speed (float): Wave speed (m/s).

        Returns:
            float: ``courant_number * spacing / wave_speed`` (s).
        """
        return courant_number * self.spacing / wave_speed
    # end def time_step

    def zeros(self) -> np.ndarray:
        """Allocate a zero displacement field on this grid."""
        return np.zeros(self.node_count, dtype=np.float64)
    # end def zeros

# end class StringGrid
