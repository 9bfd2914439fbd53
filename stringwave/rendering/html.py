"""
HTML Animations of String Simulations.

Renders one or several frame series as a matplotlib animation embedded in a
standalone HTML page (JavaScript player with play/step controls), and stores
the raw frames next to it when requested.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib import animation
from rich.console import Console

from stringwave.modeling.simulator import FrameSeries


console = Console()

# Line colors of a sweep, in the order of the requested Courant numbers
SWEEP_COLORS = ("red", "green", "blue")
FALLBACK_COLOR = "black"
SINGLE_COLOR = "blue"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        body {{ font-family: sans-serif; max-width: 1000px; margin: 20px auto; }}
        h1 {{ text-align: center; color: #2c3e50; }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    {animation}
</body>
</html>
"""


def get_color(index: int, total: int = 2) -> str:
    """
    Line color of the ``index``-th series.

    Args:
        index (int): Position of the series in the sweep.
        total (int, optional): Number of series drawn together.

    Returns:
        str: Matplotlib color name.
    """
    if total == 1:
        return SINGLE_COLOR
    # end if
    if 0 <= index < len(SWEEP_COLORS):
        return SWEEP_COLORS[index]
    # end if
    return FALLBACK_COLOR
# end def get_color


def _default_y_limit(series_list: Sequence[FrameSeries]) -> float:
    """Vertical half-range fitted to the initial pulses."""
    peak = max(float(np.max(np.abs(series.frames[0]))) for series in series_list)
    return 1.2 * peak if peak > 0 else 1.0
# end def _default_y_limit


def build_animation(
        series_list: Sequence[FrameSeries],
        y_limit: Optional[float] = None,
        interval: int = 50,
        frame_stride: int = 1,
        figsize=(10, 5),
        dpi: int = 80,
) -> Tuple[plt.Figure, animation.FuncAnimation]:
    """
    Animate several frame series sharing the same grid.

    Args:
        series_list (Sequence[FrameSeries]): Series to draw, one line each.
        y_limit (float, optional): Half-range of the displacement axis. Fitted to
            the initial pulses when None.
        interval (int, optional): Delay between frames (ms).
        frame_stride (int, optional): Only every ``frame_stride``-th frame is drawn.
        figsize (tuple, optional): Figure size in inches.
        dpi (int, optional): Figure resolution.

    Returns:
        Tuple[plt.Figure, animation.FuncAnimation]: The figure and its animation.

    Raises:
        ValueError: If the series list is empty or the series do not share a grid.
    """
    if not series_list:
        raise ValueError("At least one frame series is required")
    # end if
    if frame_stride <= 0:
        raise ValueError(f"Frame stride must be positive, got {frame_stride}")
    # end if

    reference = series_list[0]
    for series in series_list[1:]:
        if series.node_count != reference.node_count:
            raise ValueError("All series must be recorded on the same grid")
        # end if
    # end for

    num_frames = min(series.num_frames for series in series_list)
    if y_limit is None:
        y_limit = _default_y_limit(series_list)
    # end if

    positions = reference.positions
    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)

    lines = []
    for idx, series in enumerate(series_list):
        line, = ax.plot(
            positions,
            series.frames[0],
            color=get_color(idx, len(series_list)),
            linewidth=2,
            label=series.label or None,
        )
        lines.append(line)
    # end for

    if reference.interface_position is not None:
        ax.axvline(reference.interface_position, color="gray", linestyle="--", linewidth=1)
        ax.text(
            reference.interface_position, 0.95 * y_limit, " interface",
            color="gray", va="top"
        )
    # end if

    ax.set_xlim(positions[0], positions[-1])
    ax.set_ylim(-y_limit, y_limit)
    ax.set_xlabel("Position (m)")
    ax.set_ylabel("Displacement (m)")
    ax.grid(True, alpha=0.3)
    if any(series.label for series in series_list):
        ax.legend(loc="upper right")
    # end if

    step_label = ax.text(
        0.02, 0.95, "t=0Δt",
        transform=ax.transAxes,
        va="top",
        bbox=dict(facecolor="white", alpha=0.7)
    )

    def update(frame_index):
        for line, series in zip(lines, series_list):
            line.set_ydata(series.frames[frame_index])
        # end for
        step_label.set_text(f"t={frame_index}Δt")
        return lines + [step_label]
    # end def update

    anim = animation.FuncAnimation(
        fig,
        update,
        frames=range(0, num_frames, frame_stride),
        interval=interval,
        blit=False,
    )
    return fig, anim
# end def build_animation


def write_animation_html(
        series_list: Sequence[FrameSeries],
        output_path: Union[str, Path],
        title: str = "Wave Simulation",
        y_limit: Optional[float] = None,
        interval: int = 50,
        frame_stride: int = 1,
        embed_limit_mb: float = 100.0,
        log: bool = False,
) -> Path:
    """
    Write a standalone HTML page animating the given series.

    Args:
        series_list (Sequence[FrameSeries]): Series to draw together.
        output_path (str or Path): Destination HTML file.
        title (str, optional): Page and heading title.
        y_limit (float, optional): Half-range of the displacement axis.
        interval (int, optional): Delay between frames (ms).
        frame_stride (int, optional): Only every ``frame_stride``-th frame is drawn.
        embed_limit_mb (float, optional): Size limit of the embedded frames (MB).
        log (bool, optional): If True, print the generated file name.

    Returns:
        Path: Path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, anim = build_animation(
        series_list,
        y_limit=y_limit,
        interval=interval,
        frame_stride=frame_stride,
    )
    try:
        with matplotlib.rc_context({"animation.embed_limit": embed_limit_mb}):
            player = anim.to_jshtml(default_mode="loop")
        # end with
    finally:
        plt.close(fig)
    # end try

    output_path.write_text(PAGE_TEMPLATE.format(title=title, animation=player), encoding="utf-8")

    if log:
        console.print(f"[green]Generated:[/green] {output_path}")
    # end if

    return output_path
# end def write_animation_html


def save_frames(
        series: FrameSeries,
        output_path: Union[str, Path],
        log: bool = False,
) -> Path:
    """
    Store the frames of a run with the metadata needed to plot them.

    The archive holds ``frames``, ``positions``, ``times``, ``time_step`` and
    ``courant_numbers``.

    Args:
        series (FrameSeries): Run to store.
        output_path (str or Path): Destination ``.npz`` file.
        log (bool, optional): If True, print the generated file name.

    Returns:
        Path: Path of the written file.
    """
    output_path = Path(output_path)
    if output_path.suffix != ".npz":
        output_path = output_path.with_name(output_path.name + ".npz")
    # end if
    output_path.parent.mkdir(parents=True, exist_ok=True)

    np.savez(
        output_path,
        frames=series.frames,
        positions=series.positions,
        times=series.times(),
        time_step=series.time_step,
        courant_numbers=np.asarray(series.courant_numbers),
    )

    if log:
        console.print(f"[green]Saved frames to[/green] {output_path}")
    # end if

    return output_path
# end def save_frames
