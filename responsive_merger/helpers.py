"""Helper subroutines shared from the clean page source into components.

Exported components can call small subroutines (formatters, icon renderers)
that the exporter only defined once, in the clean whole-page source. They
are copied into every merged component that needs them, together with their
transitive dependencies and the imports they use.
"""

import logging
import re
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .analysis.codegen import SourceEditor
from .analysis.declarations import ImportStatement, ModuleOutline
from .analysis.tsx_parser import TreeParseError, TSXParser
from .config import MergerConfig

logger = logging.getLogger(__name__)


def rewrite_asset_path(path: str, config: MergerConfig | None = None) -> str:
    config = config or MergerConfig()
    if path.startswith(config.asset_import_prefix):
        return config.asset_import_replacement + path[len(config.asset_import_prefix):]
    return path


def rewrite_asset_imports(code: str, config: MergerConfig | None = None) -> str:
    """Point ``./img/`` module paths at the image directory one level up."""
    config = config or MergerConfig()
    prefix = re.escape(config.asset_import_prefix)
    return re.sub(
        rf"(from\s+|import\s+)(['\"]){prefix}",
        lambda m: f"{m.group(1)}{m.group(2)}{config.asset_import_replacement}",
        code,
    )


@dataclass
class HelperFunction:
    """A top-level subroutine of the clean page source."""

    name: str
    code: str
    references: set[str] = field(default_factory=set)
    imports: list[ImportStatement] = field(default_factory=list)
    position: int = 0


@dataclass
class InjectionResult:
    source: str
    injected: list[str] = field(default_factory=list)
    imports_added: list[str] = field(default_factory=list)
    skipped: bool = False


class HelperLibrary:
    """Helpers available for injection plus the reference graph between them.

    The graph is built once; ``closure`` walks it breadth-first.
    """

    def __init__(
        self,
        helpers: Iterable[HelperFunction] = (),
        parser: TSXParser | None = None,
        config: MergerConfig | None = None,
    ):
        self.helpers: dict[str, HelperFunction] = {h.name: h for h in helpers}
        self.parser = parser or TSXParser()
        self.config = config or MergerConfig()
        self.graph: dict[str, set[str]] = {
            name: {ref for ref in helper.references if ref in self.helpers and ref != name}
            for name, helper in self.helpers.items()
        }

    def __len__(self) -> int:
        return len(self.helpers)

    def __contains__(self, name: str) -> bool:
        return name in self.helpers

    @classmethod
    def from_source(
        cls,
        source: str,
        exclude: Iterable[str] = (),
        parser: TSXParser | None = None,
        config: MergerConfig | None = None,
    ) -> "HelperLibrary":
        """Collect subroutines of ``source`` other than its entry point and ``exclude``."""
        parser = parser or TSXParser()
        try:
            outline = parser.outline(source, "clean page")
        except TreeParseError as e:
            logger.warning(f"Could not parse clean page source for helpers: {e}")
            return cls(parser=parser, config=config)

        excluded = set(exclude)
        helpers = []
        for position, declaration in enumerate(outline.declarations):
            if not declaration.is_subroutine or declaration.is_default:
                continue
            if declaration.name in excluded:
                continue
            imports = [
                imp
                for imp in outline.imports
                if set(imp.local_names) & declaration.identifiers
            ]
            helpers.append(
                HelperFunction(
                    name=declaration.name,
                    code=declaration.code,
                    references=set(declaration.references),
                    imports=imports,
                    position=position,
                )
            )
        logger.debug(f"Found {len(helpers)} helper subroutines in clean page source")
        return cls(helpers, parser=parser, config=config)

    @classmethod
    def from_file(
        cls,
        path: Path | None,
        exclude: Iterable[str] = (),
        parser: TSXParser | None = None,
        config: MergerConfig | None = None,
    ) -> "HelperLibrary":
        if path is None or not path.exists():
            return cls(parser=parser, config=config)
        return cls.from_source(path.read_text(encoding="utf-8"), exclude, parser, config)

    def closure(self, roots: Iterable[str]) -> list[str]:
        """Helpers reachable from ``roots``, in clean-source order."""
        seen: set[str] = set()
        queue = deque(sorted(name for name in set(roots) if name in self.helpers))
        while queue:
            name = queue.popleft()
            if name in seen:
                continue
            seen.add(name)
            queue.extend(sorted(self.graph[name] - seen))
        return sorted(seen, key=lambda n: self.helpers[n].position)

    def used_by(self, outline: ModuleOutline) -> list[str]:
        """Helpers a module needs: direct references plus their dependencies."""
        referenced: set[str] = set()
        for declaration in outline.declarations:
            referenced |= declaration.references
        return self.closure(referenced)

    def inject(
        self, source: str, name: str | None = None, parser: TSXParser | None = None
    ) -> InjectionResult:
        """Add the helpers (and their imports) that ``source`` uses but lacks.

        Imports go after the last import statement, helpers right before
        the default export. A source that fails to parse is returned as is.
        """
        if not self.helpers:
            return InjectionResult(source)
        try:
            outline = (parser or self.parser).outline(source, name)
        except TreeParseError as e:
            logger.warning(f"Skipping helper injection for {name or 'component'}: {e}")
            return InjectionResult(source, skipped=True)

        local_names = outline.declared_names | outline.imported_names
        needed = [h for h in self.used_by(outline) if h not in local_names]
        if not needed:
            return InjectionResult(source)

        known_sources = set(outline.import_sources)
        bound = set(local_names)
        new_imports: list[str] = []
        for helper_name in needed:
            for imp in self.helpers[helper_name].imports:
                import_source = rewrite_asset_path(imp.source, self.config)
                if not imp.local_names:
                    # side-effect import
                    if import_source in known_sources:
                        continue
                    code = imp.code
                else:
                    missing = [n for n in imp.local_names if n not in bound]
                    if not missing:
                        continue
                    if len(missing) == len(imp.local_names):
                        code = imp.code
                    else:
                        code = imp.restricted_to(missing)
                    bound.update(missing)
                known_sources.add(import_source)
                new_imports.append(rewrite_asset_imports(code, self.config))

        editor = SourceEditor(source)
        if new_imports:
            position = max((imp.end_byte for imp in outline.imports), default=0)
            text = "\n".join(new_imports)
            editor.insert(position, f"\n{text}" if position else f"{text}\n")

        helper_code = "\n\n".join(self.helpers[h].code for h in needed)
        default = outline.default_export
        if default is not None:
            editor.insert(default.start_byte, f"{helper_code}\n\n")
        else:
            editor.insert(len(editor.source), f"\n{helper_code}\n")

        logger.debug(f"{name}: injected helpers {', '.join(needed)}")
        return InjectionResult(editor.apply(), injected=needed, imports_added=new_imports)
