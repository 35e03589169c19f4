"""The ``responsive-metadata.json`` record of a merge run and atomic file writes."""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .breakpoints.loader import ROLES, BreakpointExport, BreakpointRole, BreakpointWidths
from .config import MergerConfig
from .merger_logging import get_logger

MERGE_TYPE = "responsive-merge"


def write_text_atomic(path: Path, content: str) -> None:
    """Write through a temp file in the same directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def aggregate_transformation_stats(
    component_stats: dict[str, dict[str, Any]],
    page_stats: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Summarize per-pass statistics across components and the page.

    Components whose merge failed (``{"error": ...}``) are skipped, as are
    failed passes.
    """
    summary: dict[str, Any] = {
        "totalElementsProcessed": 0,
        "totalClassesMerged": 0,
        "matchingStrategy": {"byNodeId": 0, "byDataName": 0, "byPosition": 0},
        "conflicts": {"elementsWithConflicts": 0, "totalConflicts": 0},
        "elementsMerged": 0,
        "resetsApplied": 0,
        "visibilityClassesInjected": 0,
        "missingElements": [],
    }

    def passes(stats: dict[str, Any]) -> dict[str, dict[str, Any]]:
        return {
            name: values
            for name, values in stats.items()
            if isinstance(values, dict) and "error" not in values
        }

    def add_matching(stats: dict[str, dict[str, Any]]) -> None:
        correlate = stats.get("correlate-elements", {})
        summary["matchingStrategy"]["byNodeId"] += correlate.get("matchedByNodeId", 0)
        summary["matchingStrategy"]["byDataName"] += correlate.get("matchedByDataName", 0)
        summary["matchingStrategy"]["byPosition"] += correlate.get("matchedByPosition", 0)

    def add_merge(stats: dict[str, dict[str, Any]]) -> None:
        merge = stats.get("merge-classes", {})
        summary["elementsMerged"] += merge.get("elementsMerged", 0)
        summary["totalClassesMerged"] += merge.get("totalClassesMerged", 0)

    missing: list[str] = []
    for raw in component_stats.values():
        if "error" in raw:
            continue
        stats = passes(raw)

        detected = stats.get("detect-missing-elements", {})
        summary["totalElementsProcessed"] += detected.get("elementsDetected", 0)
        missing.extend(detected.get("elements", []))
        missing.extend(detected.get("mediumElements", []))

        identical = stats.get("normalize-identical-classes", {})
        summary["totalElementsProcessed"] += identical.get("elementsProcessed", 0)

        conflicts = stats.get("detect-class-conflicts", {})
        summary["conflicts"]["elementsWithConflicts"] += conflicts.get("elementsWithConflicts", 0)
        summary["conflicts"]["totalConflicts"] += conflicts.get("totalConflicts", 0)

        add_matching(stats)
        add_merge(stats)
        summary["resetsApplied"] += stats.get("reset-dependent-properties", {}).get(
            "totalResetsAdded", 0
        )
        summary["visibilityClassesInjected"] += stats.get("inject-visibility-classes", {}).get(
            "visibilityClassesInjected", 0
        )

    if page_stats and "error" not in page_stats:
        stats = passes(page_stats)
        add_matching(stats)
        add_merge(stats)

    summary["missingElements"] = list(dict.fromkeys(missing))
    return summary


def media_queries(widths: BreakpointWidths, config: MergerConfig) -> dict[str, Any]:
    """Media queries used by merged stylesheets and compiled utilities."""
    feature = config.utility_media_feature
    return {
        "medium": f"@media (max-width: {widths.medium}px)",
        "narrow": f"@media (max-width: {widths.narrow}px)",
        "utilities": {
            "medium": f"@media ({feature}: {widths.medium}px)",
            "wide": f"@media ({feature}: {widths.wide}px)",
        },
    }


def build_metadata(
    output_dir: Path,
    exports: dict[BreakpointRole, BreakpointExport],
    widths: BreakpointWidths,
    components: list[str],
    component_stats: dict[str, dict[str, Any]],
    page_stats: dict[str, Any] | None,
    success_count: int,
    error_count: int,
    config: MergerConfig | None = None,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    config = config or MergerConfig()
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
        "mergeId": output_dir.name,
        "type": MERGE_TYPE,
        "breakpoints": {role.value: exports[role].to_dict() for role in ROLES},
        "mediaQueries": media_queries(widths, config),
        "components": list(components),
        "mainFile": f"{config.page_name}.tsx",
        "mergeStats": {
            "successCount": success_count,
            "errorCount": error_count,
            "totalComponents": len(components),
        },
        "transformations": aggregate_transformation_stats(component_stats, page_stats),
        "detailedStats": {
            "components": component_stats,
            "page": page_stats or {},
        },
    }


def write_metadata(
    output_dir: Path, metadata: dict[str, Any], config: MergerConfig | None = None
) -> Path:
    config = config or MergerConfig()
    path = output_dir / config.report_file
    write_text_atomic(path, json.dumps(metadata, indent=2) + "\n")
    get_logger().debug(f"Wrote {path}")
    return path
