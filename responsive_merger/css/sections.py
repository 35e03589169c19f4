"""Split an exported component stylesheet into its sections.

Exported stylesheets are laid out as: font ``@import`` statements, one
``:root`` block of custom properties, a commented block of exporter utility
classes, then numbered sections of component class rules.
"""

import re
from dataclasses import dataclass

IMPORT_PATTERN = re.compile(r"@import\s+(?:url\(['\"].*?['\"]\)|['\"][^'\"]*['\"])[^;]*;")
ROOT_PATTERN = re.compile(r":root\s*\{[^}]+\}", re.DOTALL)
ROOT_VARIABLE_PATTERN = re.compile(r"(--[a-zA-Z0-9_-]+):\s*([^;]+);")
CLASS_RULE_PATTERN = re.compile(r"\.([a-zA-Z0-9_-]+)\s*\{([^}]+)\}")
NEXT_COMMENT_PATTERN = re.compile(r"\n/\*")

DEFAULT_UTILITY_MARKER = r"/\*\s*[^*]*utility classes\s*\*/"
DEFAULT_CUSTOM_MARKER = r"/\*\s*=====\s*[3-9]\..*?\*/"


@dataclass
class StylesheetSections:
    """The four sections of one stylesheet, each as source text."""

    imports: str = ""
    root: str = ""
    utilities: str = ""
    custom_classes: str = ""

    @classmethod
    def parse(
        cls,
        css: str,
        utility_marker: str = DEFAULT_UTILITY_MARKER,
        custom_marker: str = DEFAULT_CUSTOM_MARKER,
    ) -> "StylesheetSections":
        if not css:
            return cls()

        imports = IMPORT_PATTERN.findall(css)
        root_match = ROOT_PATTERN.search(css)
        root = root_match.group(0) if root_match else ""

        utilities = ""
        utility_match = re.search(utility_marker, css)
        if utility_match:
            rest = css[utility_match.end():]
            next_comment = NEXT_COMMENT_PATTERN.search(rest)
            end = utility_match.end() + (next_comment.start() if next_comment else len(rest))
            utilities = css[utility_match.start():end]

        custom_match = re.search(custom_marker, css, re.DOTALL)
        if custom_match:
            custom = css[custom_match.start():]
        else:
            custom = css
            for part in (*imports, root, utilities):
                if part:
                    custom = custom.replace(part, "", 1)

        return cls(
            imports="\n".join(imports),
            root=root,
            utilities=utilities.strip(),
            custom_classes=custom.strip(),
        )

    @property
    def root_variables(self) -> dict[str, str]:
        return dict(ROOT_VARIABLE_PATTERN.findall(self.root))

    def custom_class_rules(self) -> dict[str, str]:
        """Class name to normalized rule text, in first-appearance order."""
        return parse_class_rules(self.custom_classes)


def parse_class_rules(css: str) -> dict[str, str]:
    """Map each ``.class { body }`` rule to ``.class {body}``; later rules win."""
    rules: dict[str, str] = {}
    for match in CLASS_RULE_PATTERN.finditer(css):
        name, body = match.group(1), match.group(2)
        rules[name] = f".{name} {{{body}}}"
    return rules
