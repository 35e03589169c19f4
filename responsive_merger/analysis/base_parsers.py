from collections.abc import Callable
from typing import Any

from tree_sitter import Language, Node, Parser, Tree


class TreeSitterParser:
    """Base class for tree-sitter based parsers with common functionality."""

    def __init__(
        self, language_factory: Callable[[], Any], config: dict[str, Any] | None = None
    ):
        self.config = config or {}
        self.parser = Parser(Language(language_factory()))

    def parse_tree(self, content: str) -> Tree:
        """Parse content into tree-sitter AST."""
        return self.parser.parse(bytes(content, "utf8"))

    def extract_node_text(self, node: Node, source: bytes) -> str:
        """Extract text from tree-sitter node using byte offsets."""
        return source[node.start_byte : node.end_byte].decode("utf-8")

    def _has_syntax_errors(self, tree: Tree) -> bool:
        """Check if the parse tree contains syntax errors."""
        return tree.root_node.has_error

    def _first_error_node(self, root: Node) -> Node | None:
        """Locate the first ERROR or missing node for error reporting."""

        def find(node: Node) -> Node | None:
            if node.type == "ERROR" or node.is_missing:
                return node
            for child in node.children:
                if child.has_error or child.is_missing:
                    found = find(child)
                    if found is not None:
                        return found
            return None

        return find(root)
