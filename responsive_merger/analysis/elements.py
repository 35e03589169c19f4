"""Element tree extracted from a TSX component."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .codegen import SourceEditor


def normalize_class_list(value: str | Iterable[str] | None) -> list[str]:
    """Trim, split on whitespace, dedupe and sort a class list."""
    if value is None:
        return []
    tokens = value.split() if isinstance(value, str) else (
        token for item in value for token in item.split()
    )
    return sorted(set(tokens))


@dataclass
class ClassAttribute:
    """Static string literal of a ``className`` attribute.

    ``start_byte``/``end_byte`` delimit the literal's content (inside the
    quotes). Template literals with substitutions are read-only.
    """

    value: str
    start_byte: int
    end_byte: int
    quote: str = '"'
    editable: bool = True


@dataclass(eq=False)
class Element:
    """One JSX element with its identity, classes and children."""

    tag: str
    start_byte: int
    end_byte: int
    data_name: str | None = None
    node_id: str | None = None
    class_attr: ClassAttribute | None = None
    position: int = 0
    children: list[Element] = field(default_factory=list)
    parent: Element | None = field(default=None, repr=False)
    class_name: str | None = None

    def __post_init__(self) -> None:
        if self.class_name is None and self.class_attr is not None:
            self.class_name = self.class_attr.value

    @property
    def classes(self) -> list[str]:
        return normalize_class_list(self.class_name)

    @property
    def can_update_classes(self) -> bool:
        return self.class_attr is not None and self.class_attr.editable

    @property
    def modified(self) -> bool:
        return self.class_attr is not None and self.class_name != self.class_attr.value

    @property
    def is_intrinsic(self) -> bool:
        """Lowercase tags are host elements, capitalized ones are components."""
        return bool(self.tag) and self.tag[0].islower()

    def set_classes(self, classes: Iterable[str]) -> bool:
        """Replace the class list. Returns False when the literal is not editable."""
        if not self.can_update_classes:
            return False
        self.class_name = " ".join(classes)
        return True

    def iter(self) -> Iterator[Element]:
        """Pre-order traversal including this element."""
        yield self
        for child in self.children:
            yield from child.iter()

    def describe(self) -> str:
        label = self.data_name or self.node_id or f"#{self.position}"
        return f"<{self.tag or 'Fragment'} {label}>"


class ComponentTree:
    """Parsed component: source text plus the JSX element forest.

    The tree is the unit the pipeline mutates. Class edits and element
    replacements are turned back into source text by ``generate()``.
    """

    def __init__(self, source: str, roots: list[Element], name: str | None = None):
        self.source = source
        self.source_bytes = source.encode("utf-8")
        self.roots = roots
        self.name = name
        self._replacements: dict[int, tuple[Element, str]] = {}

    def __iter__(self) -> Iterator[Element]:
        return self.iter_elements()

    def iter_elements(self) -> Iterator[Element]:
        """All elements in document order."""
        for root in self.roots:
            yield from root.iter()

    @property
    def elements(self) -> list[Element]:
        return list(self.iter_elements())

    def find_by_data_name(self, data_name: str) -> list[Element]:
        return [el for el in self.iter_elements() if el.data_name == data_name]

    def data_names(self) -> set[str]:
        return {el.data_name for el in self.iter_elements() if el.data_name}

    def class_tokens(self) -> set[str]:
        tokens: set[str] = set()
        for element in self.iter_elements():
            tokens.update(element.classes)
        return tokens

    def replace_element(self, element: Element, text: str) -> None:
        """Replace an element's whole source range when generating code."""
        self._replacements[id(element)] = (element, text)

    def generate(self) -> str:
        """Regenerate source text with every recorded change applied."""
        editor = SourceEditor(self.source_bytes)
        for element, text in self._replacements.values():
            editor.replace(element.start_byte, element.end_byte, text)
        for element in self.iter_elements():
            if not element.modified or not element.can_update_classes:
                continue
            attr = element.class_attr
            new_value = element.class_name or ""
            if attr.quote in new_value:
                continue
            editor.replace(attr.start_byte, attr.end_byte, new_value)
        if not len(editor):
            return self.source
        return editor.apply()
