"""TSX analysis: tree-sitter parsing, element trees and source editing."""

from .codegen import SourceEditor
from .declarations import Declaration, ImportStatement, ModuleOutline
from .elements import ClassAttribute, ComponentTree, Element, normalize_class_list
from .tsx_parser import TreeParseError, TSXParser

__all__ = [
    "ClassAttribute",
    "ComponentTree",
    "Declaration",
    "Element",
    "ImportStatement",
    "ModuleOutline",
    "SourceEditor",
    "TSXParser",
    "TreeParseError",
    "normalize_class_list",
]
