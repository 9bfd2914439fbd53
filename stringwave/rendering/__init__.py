"""Rendering and export of recorded string simulations."""

from .html import (
    build_animation,
    get_color,
    save_frames,
    write_animation_html,
)

__all__ = [
    "build_animation",
    "get_color",
    "save_frames",
    "write_animation_html",
]
