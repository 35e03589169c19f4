"""Assemble the merged page from the clean whole-page export.

The clean page source renders every section inline. Its three breakpoint
versions are merged with the same transform pipeline as the components,
then each section tagged with a known identity is swapped for a reference
to its merged component and the leftovers (inline component definitions,
props interfaces, unused helpers and imports) are removed.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .analysis.codegen import SourceEditor
from .analysis.declarations import ModuleOutline
from .analysis.elements import ComponentTree
from .analysis.tsx_parser import TreeParseError, TSXParser
from .breakpoints.loader import BreakpointExport, BreakpointRole, BreakpointWidths
from .breakpoints.ordering import normalize_component_name
from .config import MergerConfig
from .css.merger import merge_css
from .pipeline.context import TransformContext
from .pipeline.engine import ResponsivePipeline

logger = logging.getLogger(__name__)

_BLANK_LINES = re.compile(r"\n{3,}")


def component_import(name: str, config: MergerConfig | None = None) -> str:
    config = config or MergerConfig()
    return f"import {name} from './{config.components_dir}/{name}';"


def simple_page(components: Iterable[str], config: MergerConfig | None = None) -> str:
    """A page that renders every component in order inside a fragment."""
    config = config or MergerConfig()
    components = list(components)
    imports = "\n".join(component_import(name, config) for name in components)
    body = "\n".join(f"      <{name} />" for name in components)
    return (
        "import React from 'react';\n"
        f"import './{config.page_name}.css';\n"
        f"{imports}\n"
        "\n"
        f"export default function {config.page_name}() {{\n"
        "  return (\n"
        "    <>\n"
        f"{body}\n"
        "    </>\n"
        "  );\n"
        "}\n"
    )


class IdentityResolver:
    """Maps a section's ``data-name`` to the merged component it stands for."""

    def __init__(self, components: Iterable[str], identity_map: dict[str, str]):
        self.components = list(components)
        available = set(self.components)
        self.static = {k: v for k, v in identity_map.items() if v in available}
        self.normalized = {normalize_component_name(name): name for name in self.components}

    def resolve(self, data_name: str | None) -> str | None:
        if not data_name:
            return None
        if data_name in self.static:
            return self.static[data_name]
        return self.normalized.get(normalize_component_name(data_name))


@dataclass
class PageResult:
    """Generated page source with the statistics of its merge."""

    source: str
    components: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)
    tree: ComponentTree | None = None
    fallback: bool = False


class PageAssembler:
    """Builds ``Page.tsx`` and ``Page.css`` for one merge run.

    Example usage:
        assembler = PageAssembler(exports, components, widths, config)
        page = assembler.assemble()
        stylesheet = assembler.build_stylesheet(utilities_css)
    """

    def __init__(
        self,
        exports: dict[BreakpointRole, BreakpointExport],
        components: list[str],
        widths: BreakpointWidths,
        config: MergerConfig | None = None,
        parser: TSXParser | None = None,
    ):
        self.exports = exports
        self.components = components
        self.widths = widths
        self.config = config or MergerConfig()
        self.parser = parser or TSXParser()
        self.identities = IdentityResolver(components, self.config.identity_map)

    def _clean_sources(self) -> dict[BreakpointRole, str] | None:
        """Clean page source per breakpoint; narrower ones fall back to wider."""
        wide_path = self.exports[BreakpointRole.WIDE].clean_source
        if wide_path is None:
            return None
        sources = {BreakpointRole.WIDE: wide_path.read_text(encoding="utf-8")}
        previous = sources[BreakpointRole.WIDE]
        for role in (BreakpointRole.MEDIUM, BreakpointRole.NARROW):
            path = self.exports[role].clean_source
            previous = path.read_text(encoding="utf-8") if path is not None else previous
            sources[role] = previous
        return sources

    def assemble(self) -> PageResult:
        """Merge the clean page and replace its sections with components.

        Falls back to ``simple_page`` when the clean source is missing or
        cannot be parsed.
        """
        sources = self._clean_sources()
        if sources is None:
            logger.warning(
                f"{self.config.clean_source_name} not found in wide export, "
                "generating a simple page"
            )
            return PageResult(
                simple_page(self.components, self.config), self.components, fallback=True
            )

        try:
            trees = {
                role: self.parser.parse_component(source, f"{role.value} page")
                for role, source in sources.items()
            }
        except TreeParseError as e:
            logger.warning(f"Failed to parse clean page source, generating a simple page: {e}")
            return PageResult(
                simple_page(self.components, self.config),
                self.components,
                stats={"error": str(e)},
                fallback=True,
            )

        context = TransformContext(
            trees=trees, widths=self.widths, config=self.config, component=self.config.page_name
        )
        ResponsivePipeline(config=self.config).run(context)
        tree = context.wide_tree

        used = self._replace_sections(tree)
        merged = tree.generate()
        try:
            source = self._finalize(merged, used)
        except TreeParseError as e:
            logger.warning(f"Merged page source did not parse, generating a simple page: {e}")
            return PageResult(
                simple_page(self.components, self.config),
                self.components,
                stats=context.stats,
                tree=tree,
                fallback=True,
            )

        return PageResult(source, used, stats=context.stats, tree=tree)

    def _replace_sections(self, tree: ComponentTree) -> list[str]:
        """Swap identity-tagged sections for component references."""
        used: set[str] = set()
        replaced: set[int] = set()
        available = set(self.components)
        for element in tree.iter_elements():
            if any(id(ancestor) in replaced for ancestor in _ancestors(element)):
                continue
            if not element.is_intrinsic:
                if element.tag in available:
                    used.add(element.tag)
                continue
            component = self.identities.resolve(element.data_name)
            if component is None:
                continue
            tree.replace_element(element, f"<{component} />")
            replaced.add(id(element))
            used.add(component)
        return [name for name in self.components if name in used]

    def _finalize(self, merged: str, used: list[str]) -> str:
        outline = self.parser.outline(merged, self.config.page_name)
        editor = SourceEditor(merged)
        kept = self._kept_declarations(outline)

        for declaration in outline.declarations:
            if declaration.name not in kept:
                editor.delete(declaration.start_byte, declaration.end_byte)

        referenced: set[str] = set()
        for declaration in outline.declarations:
            if declaration.name in kept:
                referenced |= declaration.identifiers

        imports_block = "\n".join(
            [f"import './{self.config.page_name}.css';"]
            + [component_import(name, self.config) for name in used]
        )
        placed = False
        for imp in outline.imports:
            if imp.source.endswith(".css"):
                if not placed:
                    editor.replace(imp.start_byte, imp.end_byte, imports_block)
                    placed = True
                else:
                    editor.delete(imp.start_byte, imp.end_byte)
            elif imp.source == "react":
                continue
            elif imp.local_names and not set(imp.local_names) & referenced:
                editor.delete(imp.start_byte, imp.end_byte)
        if not placed:
            position = max((imp.end_byte for imp in outline.imports), default=0)
            editor.insert(position, f"\n{imports_block}" if position else f"{imports_block}\n")

        default = outline.default_export
        if default is not None and default.kind == "function":
            editor.replace(
                default.decl_start_byte,
                default.body_start_byte,
                f"function {self.config.page_name}() ",
            )

        source = _BLANK_LINES.sub("\n\n", editor.apply())
        return source.rstrip("\n") + "\n"

    def _kept_declarations(self, outline: ModuleOutline) -> set[str]:
        """Declarations the page still needs after sections became components.

        Inline component definitions and ``*Props`` types always go;
        subroutines survive only when reachable from the default export.
        """
        components = set(self.components)
        candidates = {
            d.name: d
            for d in outline.declarations
            if d.name not in components
            and not (d.kind in ("interface", "type") and d.name.endswith("Props"))
        }
        default = outline.default_export
        roots = [default] if default is not None else []
        roots += [d for d in candidates.values() if not d.is_subroutine]

        kept: set[str] = set()
        queue = list(roots)
        while queue:
            declaration = queue.pop(0)
            if declaration.name in kept:
                continue
            kept.add(declaration.name)
            for name in sorted(declaration.identifiers & set(candidates)):
                if name not in kept:
                    queue.append(candidates[name])
        return kept

    def build_stylesheet(self, utilities_css: str = "") -> str:
        """``Page.css``: component imports, merged clean page styles, utilities."""
        imports = "\n".join(
            f"@import './{self.config.components_dir}/{name}.css';" for name in self.components
        )
        merged = merge_css(
            self.exports[BreakpointRole.WIDE].read_clean_style(),
            self.exports[BreakpointRole.MEDIUM].read_clean_style(),
            self.exports[BreakpointRole.NARROW].read_clean_style(),
            self.widths,
            f"{self.config.page_name} (parent containers)",
            self.config,
        )
        header = f"/* Auto-generated {self.config.page_name}.css */\n/* Component imports */"
        parts = [f"{header}\n{imports}", merged.rstrip("\n")]
        if utilities_css:
            parts.append(utilities_css.rstrip("\n"))
        return "\n\n".join(parts) + "\n"


def _ancestors(element):
    parent = element.parent
    while parent is not None:
        yield parent
        parent = parent.parent
