"""Configuration loading with file, environment and override support."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..cli.errors import ConfigurationError
from ..merger_logging import get_logger
from .models import MergerConfig

logger = get_logger()

ENV_PREFIX = "RESPONSIVE_MERGER_"

# Environment variable suffix -> config field
ENV_FIELDS = {
    "MAX_WORKERS": "max_workers",
    "MEDIA_FEATURE": "utility_media_feature",
    "MEDIUM_PREFIX": "medium_prefix",
    "WIDE_PREFIX": "wide_prefix",
    "CONTINUE_ON_ERROR": "continue_on_error",
}


class ConfigLoader:
    """Configuration loader merging every configuration source."""

    def __init__(self, config_file: Path | None = None):
        self.config_file = Path(config_file) if config_file else None

    def load(self, **overrides: Any) -> MergerConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. JSON config file
        4. Defaults
        """
        config_dict: dict[str, Any] = {}

        if self.config_file is not None:
            config_dict.update(self._load_file(self.config_file))

        env_count = 0
        for suffix, field_name in ENV_FIELDS.items():
            value = os.environ.get(f"{ENV_PREFIX}{suffix}")
            if value is not None:
                config_dict[field_name] = value
                env_count += 1
        if env_count > 0:
            logger.debug(f"Applied {env_count} environment variables")

        config_dict.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return MergerConfig(**config_dict)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid merge configuration: {e.errors()[0]['msg']}",
                config_file=str(self.config_file) if self.config_file else None,
            ) from e

    def _load_file(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}", config_file=str(path)
            )
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Configuration file is not valid JSON: {e}", config_file=str(path)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object", config_file=str(path)
            )
        logger.debug(f"Loaded {len(data)} settings from {path}")
        return data


def load_config(config_file: Path | None = None, **overrides: Any) -> MergerConfig:
    """Load merge configuration (convenience wrapper)."""
    return ConfigLoader(config_file).load(**overrides)
