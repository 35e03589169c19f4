"""Click-based CLI interface for the responsive merger."""

import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .breakpoints.loader import ROLES, BreakpointRole, BreakpointSpec, parse_width
from .cli.errors import CLIError, MissingBreakpointError, handle_exception
from .cli.output import OutputConfig, OutputManager
from .config import load_config
from .merger import DEFAULT_EXPORTS_ROOT, DEFAULT_OUTPUT_ROOT, ResponsiveMerger
from .merger_logging import setup_logging
from .pipeline.engine import ResponsivePipeline


def common_options(f: Any) -> Any:
    """Common options for commands."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    f = click.option(
        "--config", type=click.Path(exists=True), help="Configuration file path (JSON)"
    )(f)
    return f


def breakpoint_options(f: Any) -> Any:
    """The three WIDTH ID breakpoint flags, with their legacy aliases."""
    for role, alias in (
        (BreakpointRole.NARROW, "--mobile"),
        (BreakpointRole.MEDIUM, "--tablet"),
        (BreakpointRole.WIDE, "--desktop"),
    ):
        f = click.option(
            role.flag,
            alias,
            role.value,
            nargs=2,
            type=(str, str),
            default=None,
            metavar="WIDTH ID",
            help=f"{role.label} breakpoint: pixel width (1440 or 1440px) and export id",
        )(f)
    return f


def _collect_specs(
    values: dict[BreakpointRole, tuple[str, str] | None],
) -> list[BreakpointSpec]:
    specs = []
    for role in ROLES:
        value = values.get(role)
        if not value:
            raise MissingBreakpointError(role.value, role.flag)
        width, export_id = value
        specs.append(BreakpointSpec(role, parse_width(width, role), export_id))
    return specs


class MergerGroup(click.Group):
    """Command group whose usage errors exit 1 like every other failure."""

    def make_context(self, info_name: Any, args: Any, parent: Any = None, **extra: Any) -> Any:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.group(cls=MergerGroup)
@click.version_option(version=__version__)
def cli() -> None:
    """Responsive merger - fuse three breakpoint exports into one responsive screen."""


@cli.command()
@breakpoint_options
@common_options
@click.option(
    "--exports-root",
    type=click.Path(file_okay=False),
    default=str(DEFAULT_EXPORTS_ROOT),
    show_default=True,
    help="Directory holding the breakpoint exports",
)
@click.option(
    "--output-root",
    type=click.Path(file_okay=False),
    default=str(DEFAULT_OUTPUT_ROOT),
    show_default=True,
    help="Directory receiving timestamped merge directories",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Exact output directory (overrides --output-root)",
)
@click.option("--workers", type=int, default=None, help="Components merged in parallel")
@click.option(
    "--log-file", type=click.Path(dir_okay=False), default=None, help="Log file path"
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Log file format",
)
def merge(
    wide: tuple[str, str] | None,
    medium: tuple[str, str] | None,
    narrow: tuple[str, str] | None,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    config: str | None,
    exports_root: str,
    output_root: str,
    output_dir: str | None,
    workers: int | None,
    log_file: str | None,
    log_format: str,
) -> None:
    """Merge wide, medium and narrow exports into one responsive screen.

    Examples:
        responsive-merger merge --wide 1440 node-1-2 --medium 960 node-3-4 --narrow 420 node-5-6
        responsive-merger merge --desktop 1440px a --tablet 960px b --mobile 420px c --workers 4
    """
    output = OutputManager(
        OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color)
    )
    setup_logging(
        quiet=quiet,
        verbose=verbose,
        log_file=Path(log_file) if log_file else None,
        log_format=log_format,
    )

    try:
        specs = _collect_specs(
            {
                BreakpointRole.WIDE: wide,
                BreakpointRole.MEDIUM: medium,
                BreakpointRole.NARROW: narrow,
            }
        )
        overrides = {"max_workers": workers} if workers is not None else {}
        merger_config = load_config(Path(config) if config else None, **overrides)
        merger = ResponsiveMerger(
            specs,
            exports_root=Path(exports_root),
            output_root=Path(output_root),
            output_dir=Path(output_dir) if output_dir else None,
            config=merger_config,
        )

        output.header("Responsive Merge")
        for spec in specs:
            output.status_line(spec.role.label, f"{spec.export_id} ({spec.width}px)")

        report = merger.run()
    except CLIError as e:
        message, exit_code = handle_exception(e, use_color=not no_color, verbose=verbose)
        click.echo(message, err=True)
        sys.exit(exit_code)
    except OSError as e:
        message, exit_code = handle_exception(e, use_color=not no_color, verbose=verbose)
        output.error(message)
        sys.exit(exit_code)

    for name, error in report.errors.items():
        output.error(f"{name}: {error}")
    if report.page is not None and report.page.fallback:
        output.warning("Page generated with the simple fallback structure")
    output.success(f"Output: {report.output_dir}")
    output.summary(
        total=report.total_components,
        success=report.success_count,
        failed=report.error_count,
        duration_ms=report.duration_ms,
    )


@cli.command("passes")
@common_options
def list_passes(verbose: bool, quiet: bool, no_color: bool, config: str | None) -> None:
    """List the transform passes in execution order."""
    output = OutputManager(
        OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color)
    )
    try:
        merger_config = load_config(Path(config) if config else None)
    except CLIError as e:
        message, exit_code = handle_exception(e, use_color=not no_color, verbose=verbose)
        click.echo(message, err=True)
        sys.exit(exit_code)

    pipeline = ResponsivePipeline(config=merger_config)
    enabled = {p.name for p in pipeline.enabled_passes}
    for transform in pipeline.passes:
        symbol = "success" if transform.name in enabled else "skip"
        output.status_line(
            f"{transform.priority:>3}", f"{transform.name}: {transform.description}", symbol
        )


if __name__ == "__main__":
    cli()
