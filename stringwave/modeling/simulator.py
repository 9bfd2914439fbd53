"""
String Simulators.

This module collects the frames produced by a stepper into an immutable
time series and wraps the three reference experiments (pulse sweep, interface
sweep, travelling packet) behind a common simulator interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from pydantic import BaseModel, model_validator
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn

from .grid import StringGrid
from .initial_conditions import InitialState, pulse_at_rest, traveling_packet
from .media import Medium
from .scenario_config import InterfaceConfig, PacketConfig, PulseConfig
from .string_field import DisplacementStepper, create_stepper


console = Console()


class FrameSeries(BaseModel):
    """
    Recorded displacement of one run, one row per frame in time order.

    Attributes:
        frames (np.ndarray): Read-only array of shape ``(num_frames, node_count)``.
        positions (np.ndarray): Node positions ``index * spacing`` (m).
        time_step (float): Time between two frames (s).
        courant_numbers (Tuple[float, ...]): Courant number of each region, left to right.
        label (str): Short description used by renderers.
        interface_position (float, optional): Interface position for two-medium runs (m).
    """
    frames: np.ndarray
    positions: np.ndarray
    time_step: float
    courant_numbers: Tuple[float, ...]
    label: str = ""
    interface_position: Optional[float] = None

    # Configure pydantic model
    model_config = {
        "arbitrary_types_allowed": True,  # Allow numpy arrays
    }

    @model_validator(mode="after")
    def validate_frames(self) -> "FrameSeries":
        """Validate the frame layout and keep read-only copies of the arrays."""
        self.frames = np.array(self.frames, dtype=np.float64, copy=True)
        self.positions = np.array(self.positions, dtype=np.float64, copy=True)
        if self.frames.ndim != 2:
            raise ValueError("Frames must be a 2D array (num_frames, node_count)")
        # end if
        if self.frames.shape[1] != self.positions.shape[0]:
            raise ValueError(
                f"Frames hold {self.frames.shape[1]} nodes but {self.positions.shape[0]} positions were given"
            )
        # end if
        self.frames.flags.writeable = False
        self.positions.flags.writeable = False
        return self
    # end def validate_frames

    @property
    def num_frames(self) -> int:
        """Number of recorded frames."""
        return self.frames.shape[0]
    # end def num_frames

    @property
    def node_count(self) -> int:
        """Number of nodes per frame."""
        return self.frames.shape[1]
    # end def node_count

    @property
    def courant_number(self) -> float:
        """Courant number driving the time step (left region for two media)."""
        return self.courant_numbers[0]
    # end def courant_number

    def times(self) -> np.ndarray:
        """Time of every frame, starting at 0 (s)."""
        return np.arange(self.num_frames) * self.time_step
    # end def times

    def __len__(self) -> int:
        return self.num_frames
    # end def __len__

    def __getitem__(self, index):
        return self.frames[index]
    # end def __getitem__

    def __str__(self):
        r_str = ", ".join(f"{r:.3f}" for r in self.courant_numbers)
        return (
            f"FrameSeries({self.label!r}, frames={self.num_frames}, nodes={self.node_count}, "
            f"dt={self.time_step:.3e}, r=[{r_str}])"
        )
    # end def __str__

# end class FrameSeries


def collect_frames(
        stepper: DisplacementStepper,
        initial_state: InitialState,
        num_frames: int,
        progress: bool = False
) -> np.ndarray:
    """
    Run a stepper and record its frames.

    The frames recorded by the initial-condition builder come first, then one
    frame per call to ``advance`` until ``num_frames`` frames are stored.

    Args:
        stepper (DisplacementStepper): Stepper of the run, reloaded from ``initial_state``.
        initial_state (InitialState): Initial time levels and pre-recorded frames.
        num_frames (int): Total number of frames to record.
        progress (bool, optional): Whether to display a progress bar.

    Returns:
        np.ndarray: Read-only array of shape ``(num_frames, node_count)``.

    Raises:
        ValueError: If ``num_frames`` is not positive.
    """
    if num_frames <= 0:
        raise ValueError(f"Number of frames must be positive, got {num_frames}")
    # end if

    stepper.load(initial_state)
    frames: List[np.ndarray] = [frame.copy() for frame in initial_state.frames[:num_frames]]

    if progress:
        with Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        ) as bar:
            task = bar.add_task("[cyan]Stepping string...", total=num_frames, completed=len(frames))
            while len(frames) < num_frames:
                frames.append(stepper.advance())
                bar.advance(task)
            # end while
        # end with
    else:
        while len(frames) < num_frames:
            frames.append(stepper.advance())
        # end while
    # end if

    series = np.array(frames, dtype=np.float64)
    series.flags.writeable = False
    return series
# end def collect_frames


def run_medium(
        grid: StringGrid,
        medium: Medium,
        initial_state: InitialState,
        num_frames: int,
        label: str = "",
        interface_position: Optional[float] = None,
        progress: bool = False
) -> FrameSeries:
    """
    Run one independent simulation and package its frames.

    Args:
        grid (StringGrid): Spatial grid.
        medium (Medium): Medium configuration, dispatched once to a stepper.
        initial_state (InitialState): Initial time levels.
        num_frames (int): Total number of frames to record.
        label (str, optional): Label of the series.
        interface_position (float, optional): Interface position for renderers.
        progress (bool, optional): Whether to display a progress bar.

    Returns:
        FrameSeries: The recorded run.
    """
    stepper = create_stepper(grid, medium)
    frames = collect_frames(stepper, initial_state, num_frames, progress=progress)
    return FrameSeries(
        frames=frames,
        positions=grid.positions(),
        time_step=medium.time_step(grid),
        courant_numbers=medium.courant_numbers(grid),
        label=label,
        interface_position=interface_position,
    )
# end def run_medium


class Simulator(ABC):
    """
    Abstract base class for string simulators.

    This class defines the interface for string simulators.
    """

    @abstractmethod
    def simulate(self, **kwargs) -> FrameSeries:
        """
        Run the simulation.

        Args:
            **kwargs: Additional arguments for the simulation.

        Returns:
            FrameSeries: The recorded run.
        """
        pass
    # end def simulate

    @abstractmethod
    def visualize(self, results: Union[FrameSeries, Sequence[FrameSeries]], output_path: Path, **kwargs) -> Path:
        """
        Write an HTML animation of the results.

        Args:
            results: The simulation results.
            output_path (Path): Destination HTML file.
            **kwargs: Additional arguments for visualization.

        Returns:
            Path: Path of the written file.
        """
        pass
    # end def visualize

# end class Simulator


class PulseSimulator(Simulator):
    """
    Gaussian pulse released at rest on a homogeneous string.

    Each Courant number of the sweep is an independent run with its own
    buffers and time step.
    """

    def __init__(self, config: Optional[PulseConfig] = None, log: bool = False):
        """
        Args:
            config (PulseConfig, optional): Scenario configuration. Defaults to the
                reference experiment.
            log (bool, optional): If True, print initial conditions and generated files.
        """
        self.config = config if config is not None else PulseConfig()
        self.grid = self.config.grid()
        self.log = log
    # end def __init__

    def initial_state(self) -> InitialState:
        """Pulse at rest on the scenario grid."""
        pulse = self.config.pulse
        return pulse_at_rest(self.grid, pulse.center, pulse.sigma, pulse.amplitude, log=self.log)
    # end def initial_state

    def simulate(
            self,
            courant_number: Optional[float] = None,
            num_frames: Optional[int] = None,
            progress: bool = False
    ) -> FrameSeries:
        """
        Run the pulse at one Courant number.

        Args:
            courant_number (float, optional): Defaults to the first configured value.
            num_frames (int, optional): Defaults to the configured frame count.
            progress (bool, optional): Whether to display a progress bar.

        Returns:
            FrameSeries: The recorded run.
        """
        if courant_number is None:
            courant_number = self.config.courant_numbers[0]
        # end if
        if num_frames is None:
            num_frames = self.config.num_frames
        # end if

        return run_medium(
            grid=self.grid,
            medium=self.config.medium(courant_number),
            initial_state=self.initial_state(),
            num_frames=num_frames,
            label=f"r={courant_number}",
            progress=progress,
        )
    # end def simulate

    def sweep(
            self,
            courant_numbers: Optional[Sequence[float]] = None,
            num_frames: Optional[int] = None,
            progress: bool = False
    ) -> List[FrameSeries]:
        """Run every Courant number of the sweep, in order."""
        if courant_numbers is None:
            courant_numbers = self.config.courant_numbers
        # end if
        return [self.simulate(r, num_frames=num_frames, progress=progress) for r in courant_numbers]
    # end def sweep

    def visualize(self, results: FrameSeries, output_path: Path, **kwargs) -> Path:
        """Write the run as an animated HTML page."""
        from stringwave.rendering import write_animation_html

        title = kwargs.pop("title", f"Waveform with r = {results.courant_number}")
        kwargs.setdefault("log", self.log)
        return write_animation_html([results], output_path, title=title, **kwargs)
    # end def visualize

# end class PulseSimulator


class InterfaceSimulator(Simulator):
    """
    Pulse crossing the interface between two media.

    The left-region Courant number fixes the shared time step; the
    right-region one follows from the slower or faster wave speed.
    """

    def __init__(self, config: Optional[InterfaceConfig] = None, log: bool = False):
        """
        Args:
            config (InterfaceConfig, optional): Scenario configuration. Defaults to the
                reference experiment.
            log (bool, optional): If True, print initial conditions and generated files.
        """
        self.config = config if config is not None else InterfaceConfig()
        self.grid = self.config.grid()
        self.log = log
    # end def __init__

    def initial_state(self) -> InitialState:
        """Pulse at rest in the left medium."""
        pulse = self.config.pulse
        return pulse_at_rest(self.grid, pulse.center, pulse.sigma, pulse.amplitude, log=self.log)
    # end def initial_state

    def simulate(
            self,
            courant_number: Optional[float] = None,
            num_frames: Optional[int] = None,
            progress: bool = False
    ) -> FrameSeries:
        """
        Run the two-medium string at one left-region Courant number.

        Args:
            courant_number (float, optional): Defaults to the first configured value.
            num_frames (int, optional): Defaults to the configured frame count.
            progress (bool, optional): Whether to display a progress bar.

        Returns:
            FrameSeries: The recorded run.
        """
        if courant_number is None:
            courant_number = self.config.courant_numbers[0]
        # end if
        if num_frames is None:
            num_frames = self.config.num_frames
        # end if

        return run_medium(
            grid=self.grid,
            medium=self.config.medium(courant_number),
            initial_state=self.initial_state(),
            num_frames=num_frames,
            label=f"r={courant_number}",
            interface_position=self.config.interface_position,
            progress=progress,
        )
    # end def simulate

    def sweep(
            self,
            courant_numbers: Optional[Sequence[float]] = None,
            num_frames: Optional[int] = None,
            progress: bool = False
    ) -> List[FrameSeries]:
        """Run every left-region Courant number, one series per value."""
        if courant_numbers is None:
            courant_numbers = self.config.courant_numbers
        # end if
        return [self.simulate(r, num_frames=num_frames, progress=progress) for r in courant_numbers]
    # end def sweep

    def visualize(self, results: Sequence[FrameSeries], output_path: Path, **kwargs) -> Path:
        """Write all runs of the sweep as one animated HTML page."""
        from stringwave.rendering import write_animation_html

        title = kwargs.pop(
            "title",
            f"Reflection & Refraction (c₁={self.config.left_speed:g}m/s, "
            f"c₂={self.config.right_speed:g}m/s)"
        )
        kwargs.setdefault("log", self.log)
        return write_animation_html(list(results), output_path, title=title, **kwargs)
    # end def visualize

# end class InterfaceSimulator


class WavePacketSimulator(Simulator):
    """
    Gaussian packet launched with the velocity of a right-going wave.
    """

    def __init__(self, config: Optional[PacketConfig] = None, log: bool = False):
        """
        Args:
            config (PacketConfig, optional): Scenario configuration. Defaults to the
                reference experiment.
            log (bool, optional): If True, print initial conditions and generated files.
        """
        self.config = config if config is not None else PacketConfig()
        self.grid = self.config.grid()
        self.log = log
    # end def __init__

    def initial_state(self, courant_number: Optional[float] = None) -> InitialState:
        """Travelling packet matched to the time step of ``courant_number``."""
        if courant_number is None:
            courant_number = self.config.courant_number
        # end if
        pulse = self.config.pulse
        return traveling_packet(
            self.grid,
            center=pulse.center,
            sigma=pulse.sigma,
            amplitude=pulse.amplitude,
            wave_speed=self.config.wave_speed,
            time_step=self.config.medium(courant_number).time_step(self.grid),
            log=self.log,
        )
    # end def initial_state

    def simulate(
            self,
            courant_number: Optional[float] = None,
            num_frames: Optional[int] = None,
            progress: bool = False
    ) -> FrameSeries:
        """
        Run the travelling packet.

        Args:
            courant_number (float, optional): Defaults to the configured value.
            num_frames (int, optional): Defaults to the configured frame count.
            progress (bool, optional): Whether to display a progress bar.

        Returns:
            FrameSeries: The recorded run.
        """
        if courant_number is None:
            courant_number = self.config.courant_number
        # end if
        if num_frames is None:
            num_frames = self.config.num_frames
        # end if

        return run_medium(
            grid=self.grid,
            medium=self.config.medium(courant_number),
            initial_state=self.initial_state(courant_number),
            num_frames=num_frames,
            label="packet",
            progress=progress,
        )
    # end def simulate

    def visualize(self, results: FrameSeries, output_path: Path, **kwargs) -> Path:
        """Write the packet as an animated HTML page."""
        from stringwave.rendering import write_animation_html

        title = kwargs.pop("title", "One-way Gaussian packet on a fixed string")
        amplitude = abs(self.config.pulse.amplitude)
        kwargs.setdefault("y_limit", 1.3 * amplitude if amplitude > 0 else None)
        kwargs.setdefault("log", self.log)
        return write_animation_html([results], output_path, title=title, **kwargs)
    # end def visualize

# end class WavePacketSimulator
