"""Top-level module structure of a TSX source: imports and declarations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class ImportStatement:
    """One ``import`` statement and the local bindings it introduces."""

    source: str
    local_names: list[str]
    code: str
    start_byte: int
    end_byte: int
    default_name: str | None = None
    namespace_name: str | None = None
    named: dict[str, str] = field(default_factory=dict)

    def restricted_to(self, names: Iterable[str]) -> str:
        """Rebuild the statement binding only the local names in ``names``.

        ``named`` maps each local name to its specifier text, so aliases
        (``a as b``) survive the rebuild.
        """
        wanted = set(names)
        clauses: list[str] = []
        if self.default_name in wanted:
            clauses.append(self.default_name)
        if self.namespace_name in wanted:
            clauses.append(f"* as {self.namespace_name}")
        specifiers = [text for local, text in self.named.items() if local in wanted]
        if specifiers:
            clauses.append("{ " + ", ".join(specifiers) + " }")
        return f"import {', '.join(clauses)} from '{self.source}';"


@dataclass
class Declaration:
    """A top-level declaration (function, arrow-function const, interface...).

    ``start_byte``/``end_byte`` cover the whole statement including any
    ``export`` keyword; ``code`` is the declaration without it.
    """

    name: str
    kind: str
    code: str
    start_byte: int
    end_byte: int
    exported: bool = False
    is_default: bool = False
    references: set[str] = field(default_factory=set)
    identifiers: set[str] = field(default_factory=set)
    decl_start_byte: int = 0
    body_start_byte: int = 0

    @property
    def is_subroutine(self) -> bool:
        return self.kind in ("function", "arrow_function")


@dataclass
class ModuleOutline:
    """Imports and declarations of one parsed module."""

    source: str
    imports: list[ImportStatement] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)

    @property
    def default_export(self) -> Declaration | None:
        for declaration in self.declarations:
            if declaration.is_default:
                return declaration
        return None

    @property
    def declared_names(self) -> set[str]:
        return {d.name for d in self.declarations}

    @property
    def subroutines(self) -> list[Declaration]:
        return [d for d in self.declarations if d.is_subroutine]

    @property
    def import_sources(self) -> set[str]:
        return {imp.source for imp in self.imports}

    @property
    def imported_names(self) -> set[str]:
        return {name for imp in self.imports for name in imp.local_names}

    def get(self, name: str) -> Declaration | None:
        for declaration in self.declarations:
            if declaration.name == name:
                return declaration
        return None
