"""Breakpoint exports: width parsing, ordering validation and loading."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..cli.errors import BreakpointOrderError, ExportNotFoundError, InvalidWidthError
from ..config import MergerConfig

logger = logging.getLogger(__name__)

_WIDTH_PATTERN = re.compile(r"^\s*(\d+)\s*(?:px)?\s*$", re.IGNORECASE)


class BreakpointRole(str, Enum):
    """The three viewport-width buckets, widest first."""

    WIDE = "wide"
    MEDIUM = "medium"
    NARROW = "narrow"

    @property
    def label(self) -> str:
        return {"wide": "Desktop", "medium": "Tablet", "narrow": "Mobile"}[self.value]

    @property
    def flag(self) -> str:
        return f"--{self.value}"


ROLES: tuple[BreakpointRole, ...] = (
    BreakpointRole.WIDE,
    BreakpointRole.MEDIUM,
    BreakpointRole.NARROW,
)


def parse_width(value: object, role: BreakpointRole | None = None) -> int:
    """Parse ``1440``, ``"1440"`` or ``"1440px"`` into a positive pixel width."""
    role_name = role.value if role else None
    if isinstance(value, bool):
        raise InvalidWidthError(value, role_name)
    if isinstance(value, int):
        width = value
    else:
        match = _WIDTH_PATTERN.match(str(value))
        if not match:
            raise InvalidWidthError(value, role_name)
        width = int(match.group(1))
    if width <= 0:
        raise InvalidWidthError(value, role_name)
    return width


@dataclass(frozen=True)
class BreakpointSpec:
    """A breakpoint as requested on the command line: role, width and export id."""

    role: BreakpointRole
    width: int
    export_id: str


@dataclass(frozen=True)
class BreakpointWidths:
    """Validated pixel widths, strictly decreasing wide > medium > narrow."""

    wide: int
    medium: int
    narrow: int

    def __post_init__(self) -> None:
        if not (self.wide > self.medium > self.narrow):
            raise BreakpointOrderError(self.wide, self.medium, self.narrow)

    def for_role(self, role: BreakpointRole) -> int:
        return getattr(self, role.value)

    def to_dict(self) -> dict[str, int]:
        return {"wide": self.wide, "medium": self.medium, "narrow": self.narrow}


def validate_breakpoint_order(specs: dict[BreakpointRole, BreakpointSpec]) -> BreakpointWidths:
    """Check the width ordering of three breakpoint specs without touching disk."""
    return BreakpointWidths(
        wide=specs[BreakpointRole.WIDE].width,
        medium=specs[BreakpointRole.MEDIUM].width,
        narrow=specs[BreakpointRole.NARROW].width,
    )


@dataclass(frozen=True)
class BreakpointExport:
    """One loaded breakpoint export. Immutable once loaded."""

    role: BreakpointRole
    id: str
    width: int
    height: int
    root: Path
    component_dir: Path
    style_dir: Path
    layout_tree: Path | None
    clean_source: Path | None
    clean_style: Path | None
    images_dir: Path | None

    @property
    def screen_size(self) -> str:
        return f"{self.width}px"

    def component_names(self) -> list[str]:
        """Sorted basenames of the export's ``.tsx`` component files."""
        return sorted(path.stem for path in self.component_dir.glob("*.tsx"))

    def component_source(self, name: str) -> Path:
        return self.component_dir / f"{name}.tsx"

    def component_style(self, name: str) -> Path:
        return self.style_dir / f"{name}.css"

    def read_component_style(self, name: str) -> str:
        path = self.component_style(name)
        return path.read_text(encoding="utf-8") if path.exists() else ""

    def read_clean_style(self) -> str:
        if self.clean_style is None or not self.clean_style.exists():
            return ""
        return self.clean_style.read_text(encoding="utf-8")

    def to_dict(self) -> dict:
        return {
            "testId": self.id,
            "screenSize": self.screen_size,
            "width": self.width,
            "height": self.height,
        }


class BreakpointLoader:
    """Loads and validates the breakpoint exports under one exports root.

    Each export directory must contain a component directory and a
    ``metadata.json`` whose ``dimensions.height`` gives the frame height.
    """

    def __init__(self, exports_root: Path, config: MergerConfig | None = None):
        self.exports_root = Path(exports_root)
        self.config = config or MergerConfig()

    def load(self, spec: BreakpointSpec) -> BreakpointExport:
        root = self.exports_root / spec.export_id
        if not root.is_dir():
            raise ExportNotFoundError(str(root), role=spec.role.value)

        component_dir = root / self.config.components_dir
        if not component_dir.is_dir():
            raise ExportNotFoundError(
                str(component_dir), role=spec.role.value, what="component directory"
            )

        metadata_path = root / self.config.metadata_file
        if not metadata_path.is_file():
            raise ExportNotFoundError(str(metadata_path), role=spec.role.value, what="file")

        height = self._read_height(metadata_path)

        style_dir = root / "modular"
        if not style_dir.is_dir():
            style_dir = component_dir

        def optional(name: str) -> Path | None:
            path = root / name
            return path if path.exists() else None

        export = BreakpointExport(
            role=spec.role,
            id=spec.export_id,
            width=spec.width,
            height=height,
            root=root,
            component_dir=component_dir,
            style_dir=style_dir,
            layout_tree=optional(self.config.layout_file),
            clean_source=optional(self.config.clean_source_name),
            clean_style=optional(self.config.clean_style_name),
            images_dir=optional(self.config.images_dir),
        )
        logger.info(f"{spec.role.label}: {spec.export_id} ({spec.width}px)")
        return export

    def load_all(
        self, specs: dict[BreakpointRole, BreakpointSpec]
    ) -> dict[BreakpointRole, BreakpointExport]:
        """Validate ordering first, then load every export."""
        validate_breakpoint_order(specs)
        return {role: self.load(specs[role]) for role in ROLES}

    def _read_height(self, metadata_path: Path) -> int:
        try:
            metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse {metadata_path}: {e}")
            return 0
        dimensions = metadata.get("dimensions") if isinstance(metadata, dict) else None
        if not isinstance(dimensions, dict):
            return 0
        try:
            return int(dimensions.get("height") or 0)
        except (TypeError, ValueError):
            return 0
