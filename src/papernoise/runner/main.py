"""
main.py - Entry point for rendering one demo sheet.

Lays out rocks over a random rectangle packing of the canvas (each hatch
preset is used at least once when there are enough cells), adds a few grainy
growths and flowers, then writes the PNG and a JSON record of the run.
"""

import os
import json
import time
import logging
from pathlib import Path
from dataclasses import asdict
from typing import Optional

import matplotlib
matplotlib.use("Agg")

from ..hatch import HatchPreset
from ..noise import NoiseContext
from ..packing import pack_circles, pack_rectangles
from ..path import Bounds, PathItem
from ..presets import flower
from ..random_utils import random_in_rect
from ..render import render_to_file
from ..utils.logging_utils import configure_logging
from ..utils.rng import RNG, set_global_seed
from .config import RunConfig
from .sketch import draw_growth, draw_rock


def build_sheet(config: RunConfig, rng: RNG, ctx: NoiseContext) -> tuple[list[PathItem], list[dict]]:
    """Scene items in drawing order and their per-item metadata."""
    logger = logging.getLogger("papernoise.runner")
    width, height = config.img_size
    canvas = Bounds(0, 0, width, height)

    items: list[PathItem] = []
    draw_ops: list[dict] = []

    cells = pack_rectangles(canvas.scaled(config.canvas_scale), rng)
    presets = list(HatchPreset)
    for i, cell in enumerate(cells):
        forced = presets[i] if i < len(presets) else None
        if forced is None and rng.random() >= config.rock_probability:
            continue
        group, meta = draw_rock(cell, ctx, rng, preset=forced)
        items.append(group)
        draw_ops.append(meta)
    logger.info(f"Placed {len(draw_ops)} rocks over {len(cells)} cells")

    max_radius = min(width, height) * 0.08
    spots = pack_circles(canvas, rng, max_radius=max_radius, iterations=200,
                         start_radius=max_radius * 0.25)
    spots = sorted(spots, key=lambda c: -c.radius)[:config.blob_count]
    for spot in spots:
        group, meta = draw_growth(spot.center, spot.radius, ctx, rng,
                                   config.grain_points, config.stroke_count)
        items.append(group)
        draw_ops.append(meta)

    for _ in range(config.flower_count):
        group = flower(random_in_rect(rng, canvas), ctx, rng)
        items.append(group)
        draw_ops.append({"kind": "flower", **group.meta})

    return items, draw_ops


def render_sheet(config: Optional[RunConfig] = None,
                 output_name: Optional[str] = None) -> tuple[Path, Path]:
    """Render a demo sheet; returns (image path, metadata path)."""
    config = config or RunConfig()

    log_path = configure_logging(
        level=config.logger_level,
        log_dir=config.output_dir / "logs",
        name="papernoise",
        run_prefix=f"main_{os.getpid()}"
    )
    logger = logging.getLogger("papernoise.runner")
    logger.info(f"RunConfig: {asdict(config)}")

    seed = config.seed if config.seed is not None else os.getpid() ^ int(time.time() * 1e6)
    set_global_seed(seed)
    rng = RNG(seed)
    ctx = NoiseContext.create(rng)
    logger.info(f"Seeded run with {seed}; noise seed offset {ctx.seed:.4f}")

    t0 = time.perf_counter()
    items, draw_ops = build_sheet(config, rng, ctx)
    logger.info(f"Built {len(items)} scene items in {time.perf_counter() - t0:.2f}s")

    ts = time.strftime("%Y%m%d_%H%M%S")
    stem = output_name or f"sheet_{ts}"
    image_path = render_to_file(items, config.output_dir / f"{stem}.png",
                                size=config.img_size, dpi=config.dpi)

    meta = {
        "seed": seed,
        "noise_seed": ctx.seed,
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime()),
        "config": asdict(config),
        "draw_ops": draw_ops,
    }
    meta_path = config.output_dir / f"{stem}.json"
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Image written: {image_path}")
    logger.info(f"Metadata written: {meta_path}")
    logger.info(f"Logs written to: {log_path}")
    return image_path, meta_path


def main(config: Optional[RunConfig] = None) -> None:
    try:
        render_sheet(config)
    except Exception as e:
        logging.getLogger("papernoise.runner").critical(f"Run aborted due to fatal error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
