"""Merge run orchestration.

A run loads the three breakpoint exports, intersects and orders their
components, merges every component (sources through the transform pipeline,
stylesheets through the section merger), assembles the page and writes the
metadata record. Per-component failures are recorded and the run goes on;
validation and structural errors abort it before any output is written.
"""

import logging
import shutil
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .analysis.elements import ComponentTree
from .analysis.tsx_parser import TSXParser
from .breakpoints.components import resolve_component_set
from .breakpoints.loader import (
    ROLES,
    BreakpointExport,
    BreakpointLoader,
    BreakpointRole,
    BreakpointSpec,
    validate_breakpoint_order,
)
from .breakpoints.ordering import resolve_component_order
from .config import MergerConfig
from .css.merger import merge_css
from .css.utility_compiler import UtilityCompiler
from .helpers import HelperLibrary, rewrite_asset_imports
from .metadata import build_metadata, write_metadata, write_text_atomic
from .page import PageAssembler, PageResult
from .performance.timing import PerformanceTimer, timed
from .pipeline.context import TransformContext
from .pipeline.engine import ResponsivePipeline, format_pipeline_stats

logger = logging.getLogger(__name__)

DEFAULT_EXPORTS_ROOT = Path("src/generated/export_figma")
DEFAULT_OUTPUT_ROOT = Path("src/generated/responsive-screens")


@dataclass
class ComponentMergeResult:
    """Outcome of merging one component across the three breakpoints."""

    name: str
    source: str | None = None
    stylesheet: str | None = None
    stats: dict[str, Any] = field(default_factory=dict)
    helpers: list[str] = field(default_factory=list)
    tree: ComponentTree | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def report_stats(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return self.stats


@dataclass
class MergeReport:
    """Result of a merge run."""

    output_dir: Path
    components: list[str]
    results: list[ComponentMergeResult] = field(default_factory=list)
    page: PageResult | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def total_components(self) -> int:
        return len(self.components)

    @property
    def success(self) -> bool:
        return self.error_count == 0

    @property
    def errors(self) -> dict[str, str]:
        return {r.name: r.error for r in self.results if r.error is not None}


class ResponsiveMerger:
    """Fuses three breakpoint exports into one responsive screen.

    Widths are validated on construction, before any file is touched.

    Example usage:
        merger = ResponsiveMerger(
            [
                BreakpointSpec(BreakpointRole.WIDE, 1440, "node-1-2"),
                BreakpointSpec(BreakpointRole.MEDIUM, 960, "node-3-4"),
                BreakpointSpec(BreakpointRole.NARROW, 420, "node-5-6"),
            ],
            exports_root=Path("src/generated/export_figma"),
        )
        report = merger.run()
    """

    def __init__(
        self,
        specs: Iterable[BreakpointSpec],
        exports_root: Path = DEFAULT_EXPORTS_ROOT,
        output_root: Path = DEFAULT_OUTPUT_ROOT,
        output_dir: Path | None = None,
        config: MergerConfig | None = None,
    ):
        self.specs: dict[BreakpointRole, BreakpointSpec] = {s.role: s for s in specs}
        missing = [role.value for role in ROLES if role not in self.specs]
        if missing:
            raise ValueError(f"Missing breakpoint specs: {', '.join(missing)}")
        self.widths = validate_breakpoint_order(self.specs)

        self.exports_root = Path(exports_root)
        self.output_root = Path(output_root)
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.config = config or MergerConfig()
        self.loader = BreakpointLoader(self.exports_root, self.config)

    def run(self) -> MergeReport:
        """Run the whole merge and write every output file.

        Raises:
            ExportNotFoundError: An export directory or required file is missing.
            NoCommonComponentsError: The exports share no component.
        """
        with PerformanceTimer("responsive-merge") as timer:
            exports = self.loader.load_all(self.specs)
            component_set = resolve_component_set(exports)
            wide = exports[BreakpointRole.WIDE]
            components = resolve_component_order(
                wide.layout_tree, component_set.common, self.config.identity_map
            )

            output_dir = self._prepare_output_dir()
            components_dir = output_dir / self.config.components_dir
            components_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Output directory: {output_dir}")

            self.copy_images(wide, output_dir)

            helpers = HelperLibrary.from_file(
                wide.clean_source, exclude=components, config=self.config
            )
            if len(helpers):
                names = ", ".join(helpers.helpers)
                logger.info(f"Found {len(helpers)} helper function(s): {names}")

            report = MergeReport(output_dir=output_dir, components=components)
            report.results = self.merge_components(components, exports, helpers)
            for result in report.results:
                if not result.success:
                    continue
                write_text_atomic(components_dir / f"{result.name}.tsx", result.source or "")
                write_text_atomic(components_dir / f"{result.name}.css", result.stylesheet or "")

            report.page = self.write_page(exports, components, report.results, output_dir)

            report.metadata = build_metadata(
                output_dir,
                exports,
                self.widths,
                components,
                {r.name: r.report_stats for r in report.results},
                report.page.stats,
                report.success_count,
                report.error_count,
                self.config,
            )
            write_metadata(output_dir, report.metadata, self.config)

        report.duration_ms = timer.duration_ms
        logger.info(
            f"Merged {report.success_count}/{report.total_components} components "
            f"in {timer.formatted}"
        )
        return report

    def _prepare_output_dir(self) -> Path:
        if self.output_dir is not None:
            output_dir = self.output_dir
        else:
            stamp = int(time.time() * 1000)
            output_dir = self.output_root / f"{self.config.output_prefix}-{stamp}"
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    def copy_images(self, export: BreakpointExport, output_dir: Path) -> int:
        """Copy the wide export's image files into ``output_dir``."""
        if export.images_dir is None or not export.images_dir.is_dir():
            logger.warning(
                f"No {self.config.images_dir}/ directory in wide export, skipping images"
            )
            return 0
        target = output_dir / self.config.images_dir
        target.mkdir(parents=True, exist_ok=True)
        copied = 0
        for image in sorted(export.images_dir.iterdir()):
            if image.is_file():
                shutil.copy2(image, target / image.name)
                copied += 1
        logger.info(f"Copied {copied} images")
        return copied

    def merge_components(
        self,
        components: list[str],
        exports: dict[BreakpointRole, BreakpointExport],
        helpers: HelperLibrary,
    ) -> list[ComponentMergeResult]:
        """Merge every component, results in canonical order."""
        if self.config.max_workers <= 1 or len(components) <= 1:
            return [self.merge_component(name, exports, helpers) for name in components]

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            # tree-sitter parsers are not shared across threads
            futures = [
                pool.submit(self.merge_component, name, exports, helpers, TSXParser())
                for name in components
            ]
            return [future.result() for future in futures]

    @timed("merge_component")
    def merge_component(
        self,
        name: str,
        exports: dict[BreakpointRole, BreakpointExport],
        helpers: HelperLibrary,
        parser: TSXParser | None = None,
    ) -> ComponentMergeResult:
        """Merge one component's sources and stylesheets.

        Any failure is captured in the result instead of raised.
        """
        parser = parser or helpers.parser
        try:
            trees = {
                role: parser.parse_component(
                    exports[role].component_source(name).read_text(encoding="utf-8"),
                    f"{name} ({role.value})",
                )
                for role in ROLES
            }
            context = TransformContext(
                trees=trees, widths=self.widths, config=self.config, component=name
            )
            ResponsivePipeline(config=self.config).run(context)
            logger.debug(f"{name} pass statistics:\n{format_pipeline_stats(context.stats)}")
            source = context.generate()

            injection = helpers.inject(source, name, parser)
            source = rewrite_asset_imports(injection.source, self.config)

            stylesheet = merge_css(
                exports[BreakpointRole.WIDE].read_component_style(name),
                exports[BreakpointRole.MEDIUM].read_component_style(name),
                exports[BreakpointRole.NARROW].read_component_style(name),
                self.widths,
                name,
                self.config,
            )
        except Exception as e:
            logger.error(f"Error merging {name}: {e}", extra={"component": name})
            return ComponentMergeResult(name=name, error=str(e))

        logger.info(f"{name}.tsx + .css merged", extra={"component": name})
        return ComponentMergeResult(
            name=name,
            source=source,
            stylesheet=stylesheet,
            stats=context.stats,
            helpers=injection.injected,
            tree=context.wide_tree,
        )

    def write_page(
        self,
        exports: dict[BreakpointRole, BreakpointExport],
        components: list[str],
        results: list[ComponentMergeResult],
        output_dir: Path,
    ) -> PageResult:
        """Write ``Page.tsx`` and ``Page.css`` including compiled utilities."""
        assembler = PageAssembler(exports, components, self.widths, self.config)
        page = assembler.assemble()
        write_text_atomic(output_dir / f"{self.config.page_name}.tsx", page.source)

        compiler = UtilityCompiler(self.widths, self.config)
        trees = [page.tree] if page.tree is not None else []
        if self.config.utility_css_per_component:
            compiled = compiler.compile_per_component(output_dir / self.config.components_dir)
            logger.debug(f"Compiled {compiled} utility classes into component stylesheets")
        else:
            trees += [r.tree for r in results if r.tree is not None]

        tokens = compiler.collect_tokens(trees)
        base_css = assembler.build_stylesheet()
        utilities = compiler.compile(tokens, existing_css=base_css)
        write_text_atomic(
            output_dir / f"{self.config.page_name}.css",
            assembler.build_stylesheet(utilities),
        )
        return page
