"""Structured error types for the CLI with recovery suggestions.

Validation and structural errors abort a merge run before any merge work;
each carries a category, an actionable suggestion and the exit code the
CLI terminates with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of CLI errors for organization and handling."""

    CONFIGURATION = "configuration"  # Invalid config file or values
    FILE_SYSTEM = "file_system"  # Missing export directories or files
    VALIDATION = "validation"  # Invalid arguments, widths, ordering
    STRUCTURE = "structure"  # Inputs that cannot be merged at all
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class CLIError(Exception):
    """Base class for structured CLI errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


# Pre-defined error types for common scenarios


class MissingBreakpointError(CLIError):
    """Error when one of the three breakpoint flags was not given."""

    def __init__(self, role: str, flag: str):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=f"Missing {role} breakpoint",
            suggestion=f"Pass {flag} <width> <export-id>",
            details={"role": role},
            exit_code=1,
        )


class InvalidWidthError(CLIError):
    """Error when a breakpoint width is not a positive pixel value."""

    def __init__(self, value: object, role: str | None = None):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=f"Invalid width: {value!r}",
            suggestion="Use a positive integer, optionally suffixed with 'px' (e.g. 1440px)",
            details={"role": role} if role else None,
            exit_code=1,
        )


class BreakpointOrderError(CLIError):
    """Error when widths are not strictly decreasing wide > medium > narrow."""

    def __init__(self, wide: int, medium: int, narrow: int):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=(
                "Breakpoints must be ordered wide > medium > narrow, "
                f"got {wide}px / {medium}px / {narrow}px"
            ),
            suggestion="Swap the flags so the widest export is passed as --wide",
            details={"wide": wide, "medium": medium, "narrow": narrow},
            exit_code=1,
        )


class ExportNotFoundError(CLIError):
    """Error when a breakpoint export directory or required file is missing."""

    def __init__(self, path: str, role: str | None = None, what: str = "directory"):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Export {what} not found: {path}",
            suggestion="Verify the export id and that the export finished successfully",
            details={"role": role} if role else None,
            exit_code=1,
        )


class NoCommonComponentsError(CLIError):
    """Error when the three breakpoints share no component."""

    def __init__(self, counts: dict[str, int] | None = None):
        super().__init__(
            category=ErrorCategory.STRUCTURE,
            message="No common components found across the three breakpoints",
            suggestion="Check that the exports come from the same design screen",
            details=counts,
            exit_code=1,
        )


class ConfigurationError(CLIError):
    """Error in configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = "Check your configuration file syntax and field values"
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, CLIError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )

    return message, exit_code
