"""
config.py - Configuration dataclass for the demo sheet renderer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one demo sheet run."""
    logger_level: int = logging.DEBUG
    img_size: Tuple[int, int] = (1024, 1024)
    dpi: int = 100
    output_dir: Path = Path("./out")
    seed: Optional[int] = None
    canvas_scale: float = 0.75      # fraction of the canvas used by the rock layout
    rock_probability: float = 0.75  # chance that a layout cell gets a rock
    blob_count: int = 3
    grain_points: int = 4000
    stroke_count: int = 100       # short paint strokes per growth
    flower_count: int = 8

    def __post_init__(self):
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if not 0 < self.canvas_scale <= 1:
            raise ValueError(f"canvas_scale must be in (0, 1], got {self.canvas_scale}.")
        if not 0 <= self.rock_probability <= 1:
            raise ValueError(f"rock_probability must be in [0, 1], got {self.rock_probability}.")
        # Ensure paths exist for safety
        self.output_dir.mkdir(parents=True, exist_ok=True)
