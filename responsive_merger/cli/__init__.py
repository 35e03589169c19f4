"""CLI support modules: structured errors and output formatting."""

from .errors import (
    BreakpointOrderError,
    CLIError,
    ConfigurationError,
    ErrorCategory,
    ExportNotFoundError,
    InvalidWidthError,
    MissingBreakpointError,
    NoCommonComponentsError,
    handle_exception,
)
from .output import OutputConfig, OutputManager, should_use_color

__all__ = [
    "BreakpointOrderError",
    "CLIError",
    "ConfigurationError",
    "ErrorCategory",
    "ExportNotFoundError",
    "InvalidWidthError",
    "MissingBreakpointError",
    "NoCommonComponentsError",
    "OutputConfig",
    "OutputManager",
    "handle_exception",
    "should_use_color",
]
