"""Responsive merger - fuse three breakpoint component exports into one responsive screen."""

__version__ = "1.0.0"

from .config import MergerConfig, load_config
from .merger import MergeReport, ResponsiveMerger

__all__ = [
    "MergeReport",
    "MergerConfig",
    "ResponsiveMerger",
    "load_config",
    "__version__",
]
