"""
render.py
---------

Matplotlib back end for the path model.

Each `Polyline` becomes one `PathPatch` (its `to_mpl_path()` export, so
smoothed polylines are drawn as Bezier chains). A `ClipGroup` contributes no
visible mask artist: its mask is turned into a clip path that every patch of
its content is clipped to. Matplotlib supports a single clip path per
artist, so a nested `ClipGroup` replaces the enclosing clip for its own
content.

Canvas coordinates follow the y-down screen convention: `render_to_file`
inverts the y axis so (0, 0) is the top-left corner.
"""

from __future__ import annotations

__all__ = ["patch_for", "add_to_axes", "render_to_file"]

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.patches import PathPatch
from matplotlib.transforms import TransformedPath

from .color import WHITE, HSLColor
from .path import ClipGroup, PathGroup, PathItem, Polyline

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
NONE_COLOR = "none"


def _mpl_color(color: Optional[HSLColor]):
    return NONE_COLOR if color is None else color.to_rgba()


def patch_for(path: Polyline, **kwargs) -> PathPatch:
    """Unattached `PathPatch` styled from the polyline's fill and stroke."""
    if not isinstance(path, Polyline):
        raise TypeError(f"Expected a Polyline, got {type(path).__name__}.")
    kwargs.setdefault("facecolor", _mpl_color(path.fill))
    kwargs.setdefault("edgecolor", _mpl_color(path.stroke))
    kwargs.setdefault("linewidth", path.stroke_width if path.stroke is not None else 0.0)
    kwargs.setdefault("joinstyle", "round")
    kwargs.setdefault("capstyle", "round")
    return PathPatch(path.to_mpl_path(), **kwargs)


def add_to_axes(ax: Axes, item: PathItem,
                clip: Optional[TransformedPath] = None) -> list[PathPatch]:
    """Add `item` (recursively) to `ax`; returns the patches in drawing order.

    Empty polylines and clip masks are not drawn.
    """
    patches: list[PathPatch] = []

    if isinstance(item, ClipGroup):
        mask = item.mask
        if len(mask):
            clip = TransformedPath(mask.to_mpl_path(), ax.transData)
        for child in item.content():
            patches.extend(add_to_axes(ax, child, clip))
        return patches

    if isinstance(item, PathGroup):
        for child in item.children():
            patches.extend(add_to_axes(ax, child, clip))
        return patches

    if not isinstance(item, Polyline):
        raise TypeError(f"Expected a Polyline or PathGroup, got {type(item).__name__}.")
    if not len(item) or item.clip_mask:
        return patches

    patch = patch_for(item)
    ax.add_patch(patch)
    if clip is not None:
        patch.set_clip_path(clip)
    patches.append(patch)
    return patches


def render_to_file(items: Iterable[PathItem], output_path: PathLike,
                   size: tuple[int, int] = (1024, 1024), dpi: int = 100,
                   background: Optional[HSLColor] = WHITE) -> Path:
    """Draw `items` on a `size` (pixels) canvas and save it.

    The image format follows the file extension. The figure is always closed.
    """
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    width, height = size

    fig, ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi, frameon=False)
    try:
        ax.set_position([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_aspect("equal")
        ax.axis("off")
        if background is not None:
            fig.patch.set_facecolor(background.to_rgba())
            fig.patch.set_alpha(background.alpha)

        count = 0
        for item in items:
            count += len(add_to_axes(ax, item))

        fig.savefig(out, dpi=dpi, facecolor=fig.get_facecolor(), bbox_inches=None, pad_inches=0)
        logger.info(f"Rendered {count} patches to {out}")
    finally:
        plt.close(fig)
    return out
