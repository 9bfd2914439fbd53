"""
Configuration classes for string simulations.

This module provides Pydantic models describing the three scenarios (pulse
sweep, two-medium interface, travelling packet) and a loader for the YAML
file grouping them. Every value defaults to the reference experiments.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .grid import StringGrid
from .media import HomogeneousMedium, TwoMediumString


class PulseParams(BaseModel):
    """
    Shape of the initial Gaussian pulse.

    Attributes:
        center: Pulse center (m)
        sigma: Pulse width (m)
        amplitude: Peak displacement (m)
    """
    center: float = Field(0.2, description="Pulse center (m)")
    sigma: float = Field(0.05, description="Pulse width (m)")
    amplitude: float = Field(0.5, description="Peak displacement (m)")

    model_config = ConfigDict(
        title="Pulse Parameters",
        extra="forbid"
    )

    @field_validator("sigma")
    @classmethod
    def validate_sigma(cls, v: float) -> float:
        """Validate that the pulse width is positive."""
        if v <= 0:
            raise ValueError("Pulse width must be positive")
        # end if
        return v
    # end def validate_sigma
# end class PulseParams


class _ScenarioConfig(BaseModel):
    """Fields shared by every scenario."""
    enabled: bool = Field(True, description="Whether 'run' executes this scenario")
    num_frames: int = Field(150, description="Number of recorded frames, initial ones included")

    model_config = ConfigDict(extra="forbid")

    @field_validator("num_frames")
    @classmethod
    def validate_num_frames(cls, v: int) -> int:
        """Validate that at least one frame is recorded."""
        if v <= 0:
            raise ValueError("Number of frames must be positive")
        # end if
        return v
    # end def validate_num_frames
# end class _ScenarioConfig


class PulseConfig(_ScenarioConfig):
    """
    Gaussian pulse at rest on a homogeneous string, swept over Courant numbers.

    Attributes:
        length: String length (m)
        spacing: Node spacing (m)
        wave_speed: Wave speed (m/s), only used to scale time
        courant_numbers: Courant numbers to run, one independent run each
        pulse: Initial pulse shape
    """
    length: float = Field(1.0, description="String length (m)")
    spacing: float = Field(0.01, description="Node spacing (m)")
    wave_speed: float = Field(1.0, description="Wave speed (m/s)")
    courant_numbers: List[float] = Field([0.8, 1.0, 1.2], description="Courant numbers to run")
    pulse: PulseParams = Field(default_factory=PulseParams, description="Initial pulse shape")

    model_config = ConfigDict(
        title="Pulse Scenario Configuration",
        extra="forbid"
    )

    @field_validator("courant_numbers")
    @classmethod
    def validate_courant_numbers(cls, v: List[float]) -> List[float]:
        """Validate that at least one positive Courant number is given, each only once."""
        if not v:
            raise ValueError("At least one Courant number must be provided")
        # end if
        if any(r <= 0 for r in v):
            raise ValueError("Courant numbers must be positive")
        # end if
        if len(set(v)) != len(v):
            raise ValueError("Courant numbers must be distinct")
        # end if
        return v
    # end def validate_courant_numbers

    @model_validator(mode="after")
    def validate_setup(self) -> "PulseConfig":
        """Validate that the grid and every medium of the sweep can be built."""
        self.grid()
        for courant_number in self.courant_numbers:
            self.medium(courant_number)
        # end for
        return self
    # end def validate_setup

    def grid(self) -> StringGrid:
        """Grid derived from length and spacing."""
        return StringGrid.from_length(self.length, self.spacing)
    # end def grid

    def medium(self, courant_number: float) -> HomogeneousMedium:
        """Medium of the run at ``courant_number``."""
        return HomogeneousMedium(wave_speed=self.wave_speed, courant_number=courant_number)
    # end def medium
# end class PulseConfig


class InterfaceConfig(_ScenarioConfig):
    """
    Pulse crossing the interface between two media.

    Attributes:
        length: String length (m)
        spacing: Node spacing (m)
        left_speed: Wave speed left of the interface (m/s)
        right_speed: Wave speed right of the interface (m/s)
        interface_index: Node where the media meet
        courant_numbers: Left-region Courant numbers to run
        pulse: Initial pulse shape
    """
    num_frames: int = Field(200, description="Number of recorded frames, initial ones included")
    length: float = Field(1.0, description="String length (m)")
    spacing: float = Field(0.01, description="Node spacing (m)")
    left_speed: float = Field(300.0, description="Wave speed left of the interface (m/s)")
    right_speed: float = Field(150.0, description="Wave speed right of the interface (m/s)")
    interface_index: int = Field(50, description="Node where the media meet")
    courant_numbers: List[float] = Field([0.6, 0.8, 1.0], description="Left-region Courant numbers")
    pulse: PulseParams = Field(
        default_factory=lambda: PulseParams(center=0.1),
        description="Initial pulse shape"
    )

    model_config = ConfigDict(
        title="Interface Scenario Configuration",
        extra="forbid"
    )

    @field_validator("courant_numbers")
    @classmethod
    def validate_courant_numbers(cls, v: List[float]) -> List[float]:
        """Validate that at least one positive Courant number is given, each only once."""
        if not v:
            raise ValueError("At least one Courant number must be provided")
        # end if
        if any(r <= 0 for r in v):
            raise ValueError("Courant numbers must be positive")
        # end if
        if len(set(v)) != len(v):
            raise ValueError("Courant numbers must be distinct")
        # end if
        return v
    # end def validate_courant_numbers

    @model_validator(mode="after")
    def validate_interface_index(self) -> "InterfaceConfig":
        """Validate that the interface is an interior node and the media can be built."""
        last_index = self.grid().last_index
        if not 0 < self.interface_index < last_index:
            raise ValueError(
                f"interface_index must lie strictly between 0 and {last_index}"
            )
        # end if
        for courant_number in self.courant_numbers:
            self.medium(courant_number)
        # end for
        return self
    # end def validate_interface_index

    def grid(self) -> StringGrid:
        """Grid derived from length and spacing."""
        return StringGrid.from_length(self.length, self.spacing)
    # end def grid

    def medium(self, courant_number: float) -> TwoMediumString:
        """Two-medium string of the run at left-region ``courant_number``."""
        return TwoMediumString(
            left_speed=self.left_speed,
            right_speed=self.right_speed,
            interface_index=self.interface_index,
            courant_number=courant_number,
        )
    # end def medium

    @property
    def interface_position(self) -> float:
        """Position of the interface node (m)."""
        return self.interface_index * self.spacing
    # end def interface_position
# end class InterfaceConfig


class PacketConfig(_ScenarioConfig):
    """
    Gaussian packet travelling in one direction on a homogeneous string.

    Attributes:
        length: String length (m)
        node_count: Number of nodes, endpoints included
        wave_speed: Wave speed (m/s)
        courant_number: Courant number of the run
        pulse: Initial packet shape
    """
    num_frames: int = Field(200, description="Number of recorded frames, initial one included")
    length: float = Field(12.0, description="String length (m)")
    node_count: int = Field(150, description="Number of nodes")
    wave_speed: float = Field(1.2, description="Wave speed (m/s)")
    courant_number: float = Field(0.8, description="Courant number")
    pulse: PulseParams = Field(
        default_factory=lambda: PulseParams(center=3.0, sigma=1.2, amplitude=1.0),
        description="Initial packet shape"
    )

    model_config = ConfigDict(
        title="Packet Scenario Configuration",
        extra="forbid"
    )

    @model_validator(mode="after")
    def validate_setup(self) -> "PacketConfig":
        """Validate that the grid and the medium can be built."""
        self.grid()
        self.medium(self.courant_number)
        return self
    # end def validate_setup

    def grid(self) -> StringGrid:
        """Grid with ``node_count`` nodes spanning ``length``."""
        return StringGrid.from_node_count(self.length, self.node_count)
    # end def grid

    def medium(self, courant_number: float) -> HomogeneousMedium:
        """Medium of the run at ``courant_number``."""
        return HomogeneousMedium(wave_speed=self.wave_speed, courant_number=courant_number)
    # end def medium
# end class PacketConfig


class SimulationConfig(BaseModel):
    """
    Top-level configuration grouping the three scenarios.

    Attributes:
        pulse: Pulse sweep on a homogeneous string
        interface: Two-medium interface sweep
        packet: Travelling packet
    """
    pulse: PulseConfig = Field(default_factory=PulseConfig, description="Pulse scenario")
    interface: InterfaceConfig = Field(default_factory=InterfaceConfig, description="Interface scenario")
    packet: PacketConfig = Field(default_factory=PacketConfig, description="Packet scenario")

    model_config = ConfigDict(
        title="String Simulation Configuration",
        extra="forbid"
    )

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> SimulationConfig:
        """
        Load configuration from a YAML file.

        Missing sections and keys fall back to the reference values; an empty
        file gives the full default configuration.

        Args:
            config_path: Path to the YAML configuration file.

        Returns:
            SimulationConfig: A validated configuration.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ValueError: If the configuration is invalid.
        """
        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file '{config_path}' not found.")
        # end if

        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
        # end with

        if data is None:
            data = {}
        # end if

        if not isinstance(data, dict):
            raise ValueError("Simulation configuration must be a mapping.")
        # end if

        return cls(**data)
    # end def from_yaml
# end class SimulationConfig


def load_config(config_path: Union[str, Path]) -> SimulationConfig:
    """Shortcut for :meth:`SimulationConfig.from_yaml`."""
    return SimulationConfig.from_yaml(config_path)
# end def load_config
