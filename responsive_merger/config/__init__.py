"""Configuration package for the responsive merger."""

from .config_loader import ConfigLoader, load_config
from .models import DEFAULT_IDENTITY_MAP, MergerConfig

__all__ = ["ConfigLoader", "DEFAULT_IDENTITY_MAP", "MergerConfig", "load_config"]
