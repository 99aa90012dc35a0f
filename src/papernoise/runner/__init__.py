"""Demo sheet runner: `python -m papernoise.runner`."""

from .config import RunConfig
from .main import build_sheet, main, render_sheet

__all__ = ["RunConfig", "build_sheet", "render_sheet", "main"]
