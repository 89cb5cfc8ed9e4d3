"""Human-readable and JSON renderings of a clustering run."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from .clusters import ClusterResult


def underline(text: str) -> str:
    return "-" * len(text)


def format_report(filename: str, result: ClusterResult) -> str:
    """Render *result* for the submission *filename* as plain text."""
    lines: List[str] = [
        filename,
        underline(filename),
        f"Average Max Similarity: {result.mean:.3f}",
        f"Standard Deviation: {result.stddev:.3f}",
        "",
        "",
    ]
    for label, similar in result.clusters.items():
        lines.append(label)
        lines.append(underline(label))
        for other in similar:
            lines.append(f"{other.similarity:.3f} {other.label}")
        lines.append("")
    return "\n".join(lines) + "\n"


def report_to_dict(filename: str, result: ClusterResult) -> Dict[str, Any]:
    return {
        "filename": filename,
        "documents": result.document_count,
        "mean_max_similarity": result.mean,
        "stddev_max_similarity": result.stddev,
        "std_factor": result.std_factor,
        "threshold": result.threshold,
        "clusters": {
            label: [{"label": o.label, "similarity": o.similarity} for o in similar]
            for label, similar in result.clusters.items()
        },
    }


def report_path(out_dir: Union[str, Path], filename: str, suffix: str = ".txt") -> Path:
    """``<out_dir>/<filename stem> Clusters<suffix>``."""
    return Path(out_dir) / f"{Path(filename).stem} Clusters{suffix}"


def write_report(
    out_dir: Union[str, Path],
    filename: str,
    result: ClusterResult,
    *,
    json_report: bool = False,
) -> List[Path]:
    """Write the text report (and optionally a JSON twin); return written paths."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    text_path = report_path(out_dir, filename)
    text_path.write_text(format_report(filename, result), encoding="utf-8")
    written = [text_path]

    if json_report:
        json_path = report_path(out_dir, filename, suffix=".json")
        with json_path.open("w", encoding="utf-8") as f:
            json.dump(report_to_dict(filename, result), f, indent=2)
        written.append(json_path)
    return written
