"""
Command-line interface for running stringwave simulations.

This module exposes a Click-based CLI around the simulators of
``stringwave.modeling``. Each command runs one scenario, writes an animated
HTML page per figure of the reference experiments, and optionally stores the
raw frames for later analysis.
"""

# Imports
from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from stringwave.modeling import (
    FrameSeries,
    InterfaceConfig,
    InterfaceSimulator,
    Medium,
    PacketConfig,
    PulseConfig,
    PulseSimulator,
    SimulationConfig,
    StringGrid,
    WavePacketSimulator,
    load_config,
)
from stringwave.rendering import save_frames

# Shared rich console instance to keep styling consistent across commands.
console = Console()

# Rows of the summary table: (scenario, courant numbers, frames, output)
SummaryRow = Tuple[str, str, str, str]


class ClickBaseException(click.ClickException):
    """
    Convert arbitrary exceptions into Click-friendly messages.

    Click expects errors to inherit from ``click.ClickException`` to show user
    friendly output without tracebacks.
    """

    def __init__(self, exc: Exception):
        super().__init__(str(exc))
    # end def __init__

# end class ClickBaseException


@click.group(help="Command-line interface for stringwave simulations.")
def cli() -> None:
    """
    Top-level Click group used as the entry point for all subcommands.
    """
# end def cli


def _load_section_config(config_path: Optional[Path]) -> SimulationConfig:
    """Load the YAML configuration, or the reference experiments when no file is given."""
    if config_path is None:
        return SimulationConfig()
    # end if
    return load_config(config_path)
# end def _load_section_config


def _format_courant(series: FrameSeries) -> str:
    """Courant numbers of a run for display."""
    return ", ".join(f"{r:.3f}" for r in series.courant_numbers)
# end def _format_courant


def _courant_tag(courant_number: float) -> str:
    """
    File-name tag of a Courant number.

    One decimal when that is exact (``0.8``, ``1.0``), otherwise the shortest
    form that keeps the value (``0.75``), so distinct runs never share a file.
    """
    tag = f"{courant_number:.1f}"
    if float(tag) != courant_number:
        tag = repr(float(courant_number))
    # end if
    return tag
# end def _courant_tag


def _warn_if_unstable(medium: Medium, series: FrameSeries, grid: StringGrid) -> None:
    """Print a warning when a region runs above the stability limit."""
    if not medium.is_stable(grid):
        console.print(
            f"[yellow]Warning:[/yellow] Courant number above 1 ({_format_courant(series)}), "
            "the run is expected to diverge."
        )
    # end if
# end def _warn_if_unstable


def _print_summary(title: str, rows: Sequence[SummaryRow]) -> None:
    """Present what was generated and where."""
    info_table = Table(title=title)
    info_table.add_column("Scenario", style="cyan", no_wrap=True)
    info_table.add_column("Courant", style="magenta")
    info_table.add_column("Frames", style="magenta")
    info_table.add_column("Output", style="green")
    for row in rows:
        info_table.add_row(*row)
    # end for
    console.print(info_table)
# end def _print_summary


def run_pulse_scenario(
        config: PulseConfig,
        output_dir: Path,
        html: bool = True,
        save_data: bool = False,
        progress: bool = False,
        verbose: bool = False
) -> List[SummaryRow]:
    """
    Run the pulse sweep and write one page per Courant number.

    Args:
        config: Pulse scenario configuration.
        output_dir: Directory receiving the generated files.
        html: Whether to write the HTML animations.
        save_data: Whether to store the frames as ``.npz`` archives.
        progress: Whether to display progress bars.
        verbose: Whether to print initial conditions and generated files.

    Returns:
        List of summary rows, one per run.
    """
    simulator = PulseSimulator(config, log=verbose)
    rows: List[SummaryRow] = []

    for courant_number in config.courant_numbers:
        console.print(f"[green]Running pulse with r = {courant_number}[/green]")
        series = simulator.simulate(courant_number, progress=progress)
        _warn_if_unstable(config.medium(courant_number), series, simulator.grid)

        tag = _courant_tag(courant_number)
        outputs = []
        if html:
            path = simulator.visualize(series, output_dir / f"wave_r{tag}.html")
            outputs.append(str(path))
        # end if
        if save_data:
            path = save_frames(series, output_dir / f"wave_r{tag}.npz", log=verbose)
            outputs.append(str(path))
        # end if

        rows.append(("pulse", _format_courant(series), str(series.num_frames), ", ".join(outputs) or "-"))
    # end for

    return rows
# end def run_pulse_scenario


def run_interface_scenario(
        config: InterfaceConfig,
        output_dir: Path,
        html: bool = True,
        save_data: bool = False,
        progress: bool = False,
        verbose: bool = False
) -> List[SummaryRow]:
    """
    Run the interface sweep and write a single comparison page.

    Args:
        config: Interface scenario configuration.
        output_dir: Directory receiving the generated files.
        html: Whether to write the HTML animation.
        save_data: Whether to store the frames as ``.npz`` archives.
        progress: Whether to display progress bars.
        verbose: Whether to print initial conditions and generated files.

    Returns:
        List of summary rows, one per run.
    """
    simulator = InterfaceSimulator(config, log=verbose)
    console.print(
        f"[green]Running interface sweep[/green] c1={config.left_speed:g} m/s, "
        f"c2={config.right_speed:g} m/s, interface at node {config.interface_index}"
    )
    all_series = simulator.sweep(progress=progress)

    rows: List[SummaryRow] = []
    for courant_number, series in zip(config.courant_numbers, all_series):
        _warn_if_unstable(config.medium(courant_number), series, simulator.grid)
        output = "-"
        if save_data:
            output = str(save_frames(
                series,
                output_dir / f"wave_interface_r{_courant_tag(courant_number)}.npz",
                log=verbose
            ))
        # end if
        rows.append(("interface", _format_courant(series), str(series.num_frames), output))
    # end for

    if html:
        path = simulator.visualize(all_series, output_dir / "wave_interface.html")
        rows.append(("interface", "all", str(min(s.num_frames for s in all_series)), str(path)))
    # end if

    return rows
# end def run_interface_scenario


def run_packet_scenario(
        config: PacketConfig,
        output_dir: Path,
        html: bool = True,
        save_data: bool = False,
        progress: bool = False,
        verbose: bool = False
) -> List[SummaryRow]:
    """
    Run the travelling packet.

    Args:
        config: Packet scenario configuration.
        output_dir: Directory receiving the generated files.
        html: Whether to write the HTML animation.
        save_data: Whether to store the frames as a ``.npz`` archive.
        progress: Whether to display a progress bar.
        verbose: Whether to print initial conditions and generated files.

    Returns:
        List holding one summary row.
    """
    simulator = WavePacketSimulator(config, log=verbose)
    console.print(f"[green]Running travelling packet with r = {config.courant_number}[/green]")
    series = simulator.simulate(progress=progress)
    _warn_if_unstable(config.medium(config.courant_number), series, simulator.grid)

    outputs = []
    if html:
        path = simulator.visualize(series, output_dir / "wave_packet_simple.html", interval=40)
        outputs.append(str(path))
    # end if
    if save_data:
        path = save_frames(series, output_dir / "wave_packet_simple.npz", log=verbose)
        outputs.append(str(path))
    # end if

    return [("packet", _format_courant(series), str(series.num_frames), ", ".join(outputs) or "-")]
# end def run_packet_scenario


def _common_options(func):
    """Options shared by every scenario command."""
    func = click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Print the initial conditions and every generated file.",
    )(func)
    func = click.option(
        "--progress/--no-progress",
        default=False,
        help="Display a progress bar while stepping.",
    )(func)
    func = click.option(
        "--save-data",
        is_flag=True,
        help="Also store the recorded frames as NumPy .npz archives.",
    )(func)
    func = click.option(
        "--no-html",
        is_flag=True,
        help="Skip writing the HTML animations.",
    )(func)
    func = click.option(
        "--output",
        "output_dir",
        default=".",
        show_default=True,
        type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
        help="Directory where generated files are written.",
    )(func)
    func = click.option(
        "-c",
        "--config",
        "config_path",
        default=None,
        type=click.Path(path_type=Path, exists=True, dir_okay=False),
        help="YAML configuration; the matching section overrides the reference values.",
    )(func)
    return func
# end def _common_options


_ERRORS = (FileNotFoundError, ValueError, ValidationError, OSError, yaml.YAMLError)


@cli.command(help="Gaussian pulse on a homogeneous string, one page per Courant number.")
@_common_options
@click.option(
    "-r",
    "--courant",
    "courant_numbers",
    type=float,
    multiple=True,
    help="Courant number to run. Repeat for a sweep (default: 0.8, 1.0, 1.2).",
)
@click.option(
    "--frames",
    "num_frames",
    type=int,
    default=None,
    help="Number of recorded frames (default: 150).",
)
def pulse(
        config_path: Optional[Path],
        output_dir: Path,
        no_html: bool,
        save_data: bool,
        progress: bool,
        verbose: bool,
        courant_numbers: Sequence[float],
        num_frames: Optional[int],
) -> None:
    """
    Run the pulse sweep.
    """
    try:
        config = _load_section_config(config_path).pulse
        updates = {}
        if courant_numbers:
            updates["courant_numbers"] = list(courant_numbers)
        # end if
        if num_frames is not None:
            updates["num_frames"] = num_frames
        # end if
        config = PulseConfig(**{**config.model_dump(), **updates})
        rows = run_pulse_scenario(config, Path(output_dir), not no_html, save_data, progress, verbose)
    except _ERRORS as exc:
        raise ClickBaseException(exc) from exc
    # end try
    _print_summary("Pulse Simulation Summary", rows)
# end def pulse


@cli.command(help="Pulse crossing the interface between two media.")
@_common_options
@click.option(
    "-r",
    "--courant",
    "courant_numbers",
    type=float,
    multiple=True,
    help="Left-region Courant number. Repeat for a sweep (default: 0.6, 0.8, 1.0).",
)
@click.option(
    "--frames",
    "num_frames",
    type=int,
    default=None,
    help="Number of recorded frames (default: 200).",
)
def interface(
        config_path: Optional[Path],
        output_dir: Path,
        no_html: bool,
        save_data: bool,
        progress: bool,
        verbose: bool,
        courant_numbers: Sequence[float],
        num_frames: Optional[int],
) -> None:
    """
    Run the two-medium interface sweep.
    """
    try:
        config = _load_section_config(config_path).interface
        updates = {}
        if courant_numbers:
            updates["courant_numbers"] = list(courant_numbers)
        # end if
        if num_frames is not None:
            updates["num_frames"] = num_frames
        # end if
        config = InterfaceConfig(**{**config.model_dump(), **updates})
        rows = run_interface_scenario(config, Path(output_dir), not no_html, save_data, progress, verbose)
    except _ERRORS as exc:
        raise ClickBaseException(exc) from exc
    # end try
    _print_summary("Interface Simulation Summary", rows)
# end def interface


@cli.command(help="Gaussian packet travelling in one direction without splitting.")
@_common_options
@click.option(
    "-r",
    "--courant",
    "courant_number",
    type=float,
    default=None,
    help="Courant number (default: 0.8).",
)
@click.option(
    "--frames",
    "num_frames",
    type=int,
    default=None,
    help="Number of recorded frames (default: 200).",
)
def packet(
        config_path: Optional[Path],
        output_dir: Path,
        no_html: bool,
        save_data: bool,
        progress: bool,
        verbose: bool,
        courant_number: Optional[float],
        num_frames: Optional[int],
) -> None:
    """
    Run the travelling packet.
    """
    try:
        config = _load_section_config(config_path).packet
        updates = {}
        if courant_number is not None:
            updates["courant_number"] = courant_number
        # end if
        if num_frames is not None:
            updates["num_frames"] = num_frames
        # end if
        config = PacketConfig(**{**config.model_dump(), **updates})
        rows = run_packet_scenario(config, Path(output_dir), not no_html, save_data, progress, verbose)
    except _ERRORS as exc:
        raise ClickBaseException(exc) from exc
    # end try
    _print_summary("Packet Simulation Summary", rows)
# end def packet


@cli.command(help="Run every enabled scenario of a YAML configuration.")
@_common_options
def run(
        config_path: Optional[Path],
        output_dir: Path,
        no_html: bool,
        save_data: bool,
        progress: bool,
        verbose: bool,
) -> None:
    """
    Run all enabled scenarios, in the order pulse, interface, packet.
    """
    try:
        config = _load_section_config(config_path)
        output_dir = Path(output_dir)
        rows: List[SummaryRow] = []
        if config.pulse.enabled:
            rows += run_pulse_scenario(config.pulse, output_dir, not no_html, save_data, progress, verbose)
        # end if
        if config.interface.enabled:
            rows += run_interface_scenario(config.interface, output_dir, not no_html, save_data, progress, verbose)
        # end if
        if config.packet.enabled:
            rows += run_packet_scenario(config.packet, output_dir, not no_html, save_data, progress, verbose)
        # end if
    except _ERRORS as exc:
        raise ClickBaseException(exc) from exc
    # end try
    _print_summary("String Simulation Summary", rows)
# end def run


def main(
        argv: Optional[Sequence[str]] = None
) -> int:
    """Execute the CLI entry point as expected by ``console_scripts`` hooks.

    Args:
        argv: Optional sequence of command-line arguments. When ``None`` the
            process ``sys.argv`` is used instead.

    Returns:
        Zero on success, or one if a Click-handled exception was raised.
    """
    try:
        cli.main(args=list(argv) if argv is not None else None, prog_name="stringwave", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 1
    # end try
    return 0
# end def main


if __name__ == "__main__":
    raise SystemExit(main())
# end if
