"""
Shared fixtures for the responsive merger test suite.

Provides test fixtures for:
- Parsed component trees and transform contexts
- Three breakpoint export directories written to tmp_path
- Breakpoint specs and widths matching those exports
"""

import json
from pathlib import Path

import pytest

from responsive_merger.analysis.tsx_parser import TSXParser
from responsive_merger.breakpoints.loader import (
    BreakpointRole,
    BreakpointSpec,
    BreakpointWidths,
)
from responsive_merger.config import MergerConfig
from responsive_merger.pipeline.context import TransformContext

WIDE_WIDTH, MEDIUM_WIDTH, NARROW_WIDTH = 1440, 960, 420

# ---------------------------------------------------------------------------
# Component sources
# ---------------------------------------------------------------------------

WIDE_HEADER = """import React from 'react';
import './Header.css';

export default function Header() {
  return (
    <div className="flex flex-row gap-4 justify-between w-full" data-name="header" data-node-id="1:2">
      <span className="shrink-0" data-name="Logo">Brand</span>
      <div className="flex gap-4 justify-between" data-name="Nav">
        <p className="text-sm" data-name="Link">Home</p>
      </div>
      <div className="block" data-name="Search">search</div>
    </div>
  );
}
"""

MEDIUM_HEADER = """import React from 'react';
import './Header.css';

export default function Header() {
  return (
    <div className="flex flex-row gap-4 w-full" data-name="header" data-node-id="3:2">
      <span className="shrink-0" data-name="Logo">Brand</span>
      <div className="flex gap-4" data-name="Nav">
        <p className="text-sm" data-name="Link">Home</p>
      </div>
      <div className="block" data-name="Search">search</div>
    </div>
  );
}
"""

NARROW_HEADER = """import React from 'react';
import './Header.css';

export default function Header() {
  return (
    <div className="flex flex-col gap-4 w-full max-w-custom-360" data-name="header" data-node-id="5:2">
      <span className="shrink-0" data-name="Logo">Brand</span>
      <div className="flex gap-2" data-name="Nav">
        <p className="text-sm" data-name="Link">Home</p>
      </div>
    </div>
  );
}
"""

FOOTER = """import React from 'react';
import './Footer.css';

export default function Footer() {
  return (
    <footer className="flex flex-col p-4" data-name="Footer">
      <p className="text-xs" data-name="Label">{formatLabel('footer')}</p>
    </footer>
  );
}
"""

SIDEBAR = """import React from 'react';

export default function Sidebar() {
  return <aside className="w-custom-240" data-name="Sidebar">links</aside>;
}
"""

CLEAN_PAGE = """import React from 'react';
import './Component-clean.css';
import logo from './img/logo.svg';

function upper(text: string) {
  return text.toUpperCase();
}

function formatLabel(text: string) {
  return upper(text);
}

interface ComponentProps {
  title?: string;
}

function Header() {
  return <div className="flex" data-name="header">inline</div>;
}

export default function Component({ title }: ComponentProps) {
  return (
    <div className="flex flex-col w-full" data-name="Page">
      <div className="flex flex-row gap-4" data-name="header">
        <img src={logo} alt="logo" />
      </div>
      <div className="flex flex-col p-4" data-name="Footer">
        <p>{formatLabel('footer')}</p>
      </div>
    </div>
  );
}
"""


def header_css(spacing: str, title_size: str, extra: str = "") -> str:
    """An exported component stylesheet with every section present."""
    return (
        "@import url('https://fonts.googleapis.com/css2?family=Inter&display=swap');\n"
        "\n"
        ":root {\n"
        "  --brand: #111111;\n"
        f"  --spacing: {spacing};\n"
        "}\n"
        "\n"
        "/* Figma-specific utility classes */\n"
        ".content-start { align-content: flex-start; }\n"
        "\n"
        "/* ===== 3. Component styles ===== */\n"
        ".card { padding: 16px; }\n"
        f".title {{ font-size: {title_size}; }}\n"
        f"{extra}"
    )


FOOTER_CSS = "/* ===== 3. Component styles ===== */\n.footer { padding: 8px; }\n"

LAYOUT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<frame name="Page">
  <frame name="header" />
  <instance name="Sidebar" />
  <frame name="Footer" />
</frame>
"""


def write_export(
    root: Path,
    export_id: str,
    components: dict[str, tuple[str, str | None]],
    clean_source: str | None = None,
    clean_style: str | None = None,
    layout: str | None = None,
    metadata: str | None = None,
    images: dict[str, str] | None = None,
) -> Path:
    """Write one breakpoint export directory and return it."""
    export_dir = root / export_id
    components_dir = export_dir / "components"
    components_dir.mkdir(parents=True)
    for name, (source, stylesheet) in components.items():
        (components_dir / f"{name}.tsx").write_text(source)
        if stylesheet is not None:
            (components_dir / f"{name}.css").write_text(stylesheet)
    if clean_source is not None:
        (export_dir / "Component-clean.tsx").write_text(clean_source)
    if clean_style is not None:
        (export_dir / "Component-clean.css").write_text(clean_style)
    if layout is not None:
        (export_dir / "metadata.xml").write_text(layout)
    (export_dir / "metadata.json").write_text(
        metadata if metadata is not None else json.dumps({"dimensions": {"height": 900}})
    )
    if images:
        image_dir = export_dir / "img"
        image_dir.mkdir()
        for name, content in images.items():
            (image_dir / name).write_text(content)
    return export_dir


# ---------------------------------------------------------------------------
# Parsing fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def parser() -> TSXParser:
    """One tree-sitter TSX parser shared by the session."""
    return TSXParser()


@pytest.fixture()
def widths() -> BreakpointWidths:
    return BreakpointWidths(wide=WIDE_WIDTH, medium=MEDIUM_WIDTH, narrow=NARROW_WIDTH)


@pytest.fixture()
def make_context(parser, widths):
    """Factory building a TransformContext from wide, medium and narrow sources."""

    def factory(
        wide: str, medium: str, narrow: str, config: MergerConfig | None = None
    ) -> TransformContext:
        trees = {
            BreakpointRole.WIDE: parser.parse_component(wide, "wide"),
            BreakpointRole.MEDIUM: parser.parse_component(medium, "medium"),
            BreakpointRole.NARROW: parser.parse_component(narrow, "narrow"),
        }
        return TransformContext(
            trees=trees, widths=widths, config=config or MergerConfig(), component="Test"
        )

    return factory


@pytest.fixture()
def header_sources() -> tuple[str, str, str]:
    """Wide, medium and narrow versions of the Header component."""
    return WIDE_HEADER, MEDIUM_HEADER, NARROW_HEADER


@pytest.fixture()
def clean_page_source() -> str:
    return CLEAN_PAGE


# ---------------------------------------------------------------------------
# Export directory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def exports_root(tmp_path) -> Path:
    """Three breakpoint exports sharing Header and Footer.

    Sidebar exists only in the wide and medium exports, Promo only in wide.
    """
    root = tmp_path / "exports"
    write_export(
        root,
        "wide-1",
        {
            "Header": (WIDE_HEADER, header_css("16px", "32px")),
            "Footer": (FOOTER, FOOTER_CSS),
            "Sidebar": (SIDEBAR, None),
            "Promo": (SIDEBAR.replace("Sidebar", "Promo"), None),
        },
        clean_source=CLEAN_PAGE,
        clean_style="/* ===== 3. Layout ===== */\n.page { display: flex; }\n",
        layout=LAYOUT_XML,
        metadata=json.dumps({"dimensions": {"width": 1440, "height": 2200}}),
        images={"logo.svg": "<svg xmlns='http://www.w3.org/2000/svg'/>"},
    )
    write_export(
        root,
        "medium-1",
        {
            "Header": (MEDIUM_HEADER, header_css("12px", "24px")),
            "Footer": (FOOTER, FOOTER_CSS),
            "Sidebar": (SIDEBAR, None),
        },
        clean_source=CLEAN_PAGE,
        clean_style="/* ===== 3. Layout ===== */\n.page { display: flex; }\n",
        metadata=json.dumps({"dimensions": {"height": 2600}}),
    )
    write_export(
        root,
        "narrow-1",
        {
            "Header": (
                NARROW_HEADER,
                header_css("8px", "18px", extra=".extra { margin: 0; }\n"),
            ),
            "Footer": (FOOTER, FOOTER_CSS),
        },
        clean_source=CLEAN_PAGE,
        clean_style="/* ===== 3. Layout ===== */\n.page { display: block; }\n",
        metadata="{not json",
    )
    return root


@pytest.fixture()
def specs() -> list[BreakpointSpec]:
    return [
        BreakpointSpec(BreakpointRole.WIDE, WIDE_WIDTH, "wide-1"),
        BreakpointSpec(BreakpointRole.MEDIUM, MEDIUM_WIDTH, "medium-1"),
        BreakpointSpec(BreakpointRole.NARROW, NARROW_WIDTH, "narrow-1"),
    ]


@pytest.fixture()
def merge_args(exports_root, tmp_path) -> list[str]:
    """Command-line arguments for a successful ``merge`` invocation."""
    return [
        "merge",
        "--wide",
        str(WIDE_WIDTH),
        "wide-1",
        "--medium",
        f"{MEDIUM_WIDTH}px",
        "medium-1",
        "--narrow",
        str(NARROW_WIDTH),
        "narrow-1",
        "--exports-root",
        str(exports_root),
        "--output-dir",
        str(tmp_path / "out"),
        "--no-color",
    ]
