"""Finite-difference modeling of waves on a fixed-end string."""

from .grid import StringGrid
from .media import HomogeneousMedium, Medium, TwoMediumString

from .initial_conditions import (
    InitialState,
    clamp_endpoints,
    gaussian_profile,
    packet_profile,
    pulse_at_rest,
    traveling_packet,
)

# Import stepper classes
from .string_field import (
    DisplacementStepper,
    HomogeneousStepper,
    InterfaceStepper,
    create_stepper,
    leapfrog_region,
)

# Import configuration classes
from .scenario_config import (
    InterfaceConfig,
    PacketConfig,
    PulseConfig,
    PulseParams,
    SimulationConfig,
    load_config,
)

# Import simulator classes
from .simulator import (
    FrameSeries,
    InterfaceSimulator,
    PulseSimulator,
    Simulator,
    WavePacketSimulator,
    collect_frames,
    run_medium,
)

__all__ = [
    # Grid and media
    "StringGrid",
    "HomogeneousMedium",
    "TwoMediumString",
    "Medium",

    # Initial conditions
    "InitialState",
    "clamp_endpoints",
    "gaussian_profile",
    "packet_profile",
    "pulse_at_rest",
    "traveling_packet",

    # Steppers
    "DisplacementStepper",
    "HomogeneousStepper",
    "InterfaceStepper",
    "create_stepper",
    "leapfrog_region",

    # Configuration
    "PulseParams",
    "PulseConfig",
    "InterfaceConfig",
    "PacketConfig",
    "SimulationConfig",
    "load_config",

    # Simulators
    "FrameSeries",
    "Simulator",
    "PulseSimulator",
    "InterfaceSimulator",
    "WavePacketSimulator",
    "collect_frames",
    "run_medium",
]
