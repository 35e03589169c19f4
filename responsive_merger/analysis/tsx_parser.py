"""Tree-sitter TSX parser producing element trees and module outlines."""

import logging
from typing import Any

from tree_sitter import Node

from .base_parsers import TreeSitterParser
from .declarations import Declaration, ImportStatement, ModuleOutline
from .elements import ClassAttribute, ComponentTree, Element

logger = logging.getLogger(__name__)

JSX_ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")
FUNCTION_VALUE_TYPES = ("arrow_function", "function_expression", "function")
CLASS_ATTRIBUTES = ("className", "class")


class TreeParseError(Exception):
    """A component source could not be parsed without syntax errors."""

    def __init__(self, message: str, name: str | None = None, line: int | None = None):
        self.name = name
        self.line = line
        location = f" at line {line}" if line is not None else ""
        prefix = f"{name}: " if name else ""
        super().__init__(f"{prefix}{message}{location}")


class TSXParser(TreeSitterParser):
    """Parse TSX components with tree-sitter.

    Two views of one source are offered: ``parse_component`` builds the JSX
    element forest the merge pipeline works on, ``outline`` lists the
    module's imports and top-level declarations for helper and page
    processing. Both raise ``TreeParseError`` on syntax errors.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        import tree_sitter_typescript as tsts

        super().__init__(tsts.language_tsx, config)

    def _parse_checked(self, content: str, name: str | None) -> tuple[Node, bytes]:
        tree = self.parse_tree(content)
        if self._has_syntax_errors(tree):
            error_node = self._first_error_node(tree.root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            raise TreeParseError("syntax error", name=name, line=line)
        return tree.root_node, content.encode("utf-8")

    # ------------------------------------------------------------------
    # Element forest
    # ------------------------------------------------------------------

    def parse_component(self, content: str, name: str | None = None) -> ComponentTree:
        """Parse a component source into a ComponentTree."""
        root, source = self._parse_checked(content, name)
        roots: list[Element] = []
        counter = [0]
        self._collect_elements(root, None, roots, source, counter)
        logger.debug(f"Parsed {name or 'component'}: {counter[0]} elements")
        return ComponentTree(content, roots, name=name)

    def _collect_elements(
        self,
        node: Node,
        parent: Element | None,
        roots: list[Element],
        source: bytes,
        counter: list[int],
    ) -> None:
        for child in node.children:
            if child.type in JSX_ELEMENT_TYPES:
                element = self._build_element(child, source, counter[0])
                counter[0] += 1
                if parent is None:
                    roots.append(element)
                else:
                    element.parent = parent
                    parent.children.append(element)
                self._collect_elements(child, element, roots, source, counter)
            else:
                self._collect_elements(child, parent, roots, source, counter)

    def _opening_node(self, node: Node) -> Node:
        if node.type == "jsx_self_closing_element":
            return node
        for child in node.children:
            if child.type == "jsx_opening_element":
                return child
        return node

    def _build_element(self, node: Node, source: bytes, position: int) -> Element:
        opening = self._opening_node(node)
        name_node = opening.child_by_field_name("name")
        tag = self.extract_node_text(name_node, source) if name_node else ""

        element = Element(
            tag=tag,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            position=position,
        )

        for attribute in opening.named_children:
            if attribute.type != "jsx_attribute" or not attribute.named_children:
                continue
            attr_name = self.extract_node_text(attribute.named_children[0], source)
            value_node = (
                attribute.named_children[1] if len(attribute.named_children) > 1 else None
            )
            if value_node is None:
                continue
            if attr_name in CLASS_ATTRIBUTES and element.class_attr is None:
                element.class_attr = self._class_attribute(value_node, source)
            elif attr_name == "data-name":
                literal = self._static_string(value_node, source)
                element.data_name = literal.value if literal else None
            elif attr_name == "data-node-id":
                literal = self._static_string(value_node, source)
                element.node_id = literal.value if literal else None

        element.class_name = element.class_attr.value if element.class_attr else None
        return element

    def _static_string(self, node: Node, source: bytes) -> ClassAttribute | None:
        """Read a string, expression-wrapped string or template literal."""
        if node.type == "jsx_expression":
            inner = node.named_children[0] if node.named_children else None
            return self._static_string(inner, source) if inner is not None else None

        if node.type == "string":
            start, end = node.start_byte + 1, node.end_byte - 1
            value = source[start:end].decode("utf-8")
            quote = source[node.start_byte : node.start_byte + 1].decode("utf-8")
            return ClassAttribute(
                value=value,
                start_byte=start,
                end_byte=end,
                quote=quote,
                editable="\\" not in value,
            )

        if node.type == "template_string":
            has_substitution = any(
                c.type == "template_substitution" for c in node.named_children
            )
            start, end = node.start_byte + 1, node.end_byte - 1
            if not has_substitution:
                return ClassAttribute(
                    value=source[start:end].decode("utf-8"),
                    start_byte=start,
                    end_byte=end,
                    quote="`",
                    editable=True,
                )
            static_parts = [
                self.extract_node_text(c, source)
                for c in node.named_children
                if c.type == "string_fragment"
            ]
            return ClassAttribute(
                value=" ".join(part.strip() for part in static_parts if part.strip()),
                start_byte=start,
                end_byte=end,
                quote="`",
                editable=False,
            )

        return None

    def _class_attribute(self, node: Node, source: bytes) -> ClassAttribute | None:
        return self._static_string(node, source)

    # ------------------------------------------------------------------
    # Module outline
    # ------------------------------------------------------------------

    def outline(self, content: str, name: str | None = None) -> ModuleOutline:
        """List imports and top-level declarations of a module."""
        root, source = self._parse_checked(content, name)
        outline = ModuleOutline(source=content)
        default_identifier: str | None = None

        for statement in root.named_children:
            if statement.type == "import_statement":
                outline.imports.append(self._import_statement(statement, source))
                continue

            exported = statement.type == "export_statement"
            is_default = exported and any(c.type == "default" for c in statement.children)
            declaration_node = (
                statement.child_by_field_name("declaration") if exported else statement
            )

            if exported and declaration_node is None:
                value = statement.child_by_field_name("value")
                if value is not None and value.type == "identifier":
                    default_identifier = self.extract_node_text(value, source)
                elif value is not None and value.type in FUNCTION_VALUE_TYPES and is_default:
                    name_node = value.child_by_field_name("name")
                    name = self.extract_node_text(name_node, source) if name_node else "default"
                    outline.declarations.append(
                        self._declaration(name, "function", value, statement, source, True, True)
                    )
                continue

            for declaration in self._declarations_from(
                declaration_node, statement, source, exported, is_default
            ):
                outline.declarations.append(declaration)

        if default_identifier is not None:
            for declaration in outline.declarations:
                if declaration.name == default_identifier:
                    declaration.is_default = True

        return outline

    def _declarations_from(
        self,
        node: Node,
        statement: Node,
        source: bytes,
        exported: bool,
        is_default: bool,
    ) -> list[Declaration]:
        if node.type in ("function_declaration", "generator_function_declaration"):
            name_node = node.child_by_field_name("name")
            name = self.extract_node_text(name_node, source) if name_node else "default"
            return [
                self._declaration(name, "function", node, statement, source, exported, is_default)
            ]

        if node.type in ("interface_declaration", "type_alias_declaration"):
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return []
            kind = "interface" if node.type == "interface_declaration" else "type"
            return [
                self._declaration(
                    self.extract_node_text(name_node, source),
                    kind,
                    node,
                    statement,
                    source,
                    exported,
                    is_default,
                )
            ]

        if node.type in ("lexical_declaration", "variable_declaration"):
            declarators = [c for c in node.named_children if c.type == "variable_declarator"]
            if len(declarators) != 1:
                return []
            declarator = declarators[0]
            name_node = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name_node is None or name_node.type != "identifier":
                return []
            kind = (
                "arrow_function"
                if value is not None and value.type in FUNCTION_VALUE_TYPES
                else "variable"
            )
            return [
                self._declaration(
                    self.extract_node_text(name_node, source),
                    kind,
                    node,
                    statement,
                    source,
                    exported,
                    is_default,
                )
            ]

        return []

    def _declaration(
        self,
        name: str,
        kind: str,
        node: Node,
        statement: Node,
        source: bytes,
        exported: bool,
        is_default: bool,
    ) -> Declaration:
        body = node.child_by_field_name("body")
        references, identifiers = self.collect_references(node, source)
        references.discard(name)
        return Declaration(
            name=name,
            kind=kind,
            code=self.extract_node_text(node, source),
            start_byte=statement.start_byte,
            end_byte=statement.end_byte,
            exported=exported,
            is_default=is_default,
            references=references,
            identifiers=identifiers,
            decl_start_byte=node.start_byte,
            body_start_byte=body.start_byte if body is not None else node.end_byte,
        )

    def _import_statement(self, node: Node, source: bytes) -> ImportStatement:
        source_node = node.child_by_field_name("source")
        module = (
            self.extract_node_text(source_node, source).strip("\"'`")
            if source_node is not None
            else ""
        )
        local_names: list[str] = []
        default_name: str | None = None
        namespace_name: str | None = None
        named: dict[str, str] = {}
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    default_name = self.extract_node_text(part, source)
                    local_names.append(default_name)
                elif part.type == "namespace_import":
                    for ident in part.named_children:
                        if ident.type == "identifier":
                            namespace_name = self.extract_node_text(ident, source)
                            local_names.append(namespace_name)
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        bound = spec.child_by_field_name("alias") or spec.child_by_field_name(
                            "name"
                        )
                        if bound is not None:
                            local = self.extract_node_text(bound, source)
                            local_names.append(local)
                            named[local] = self.extract_node_text(spec, source)
        return ImportStatement(
            source=module,
            local_names=local_names,
            code=self.extract_node_text(node, source),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            default_name=default_name,
            namespace_name=namespace_name,
            named=named,
        )

    def collect_references(self, node: Node, source: bytes) -> tuple[set[str], set[str]]:
        """Return (called-or-rendered names, every identifier) under a node.

        A reference is a plain identifier used as a call target or as a
        capitalized JSX tag.
        """
        references: set[str] = set()
        identifiers: set[str] = set()

        def walk(current: Node) -> None:
            if current.type == "call_expression":
                callee = current.child_by_field_name("function")
                if callee is not None and callee.type == "identifier":
                    references.add(self.extract_node_text(callee, source))
            elif current.type in ("jsx_opening_element", "jsx_self_closing_element"):
                tag = current.child_by_field_name("name")
                if tag is not None and tag.type == "identifier":
                    tag_name = self.extract_node_text(tag, source)
                    if tag_name[:1].isupper():
                        references.add(tag_name)
            if current.type in (
                "identifier",
                "type_identifier",
                "shorthand_property_identifier",
            ):
                identifiers.add(self.extract_node_text(current, source))
            for child in current.children:
                walk(child)

        walk(node)
        return references, identifiers

    def class_literals(self, content: str) -> list[str]:
        """All static className values of a source, in document order."""
        tree = self.parse_component(content)
        return [el.class_name for el in tree.iter_elements() if el.class_name]
