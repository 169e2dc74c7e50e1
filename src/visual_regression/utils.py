"""Funções utilitárias gerais."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from .compare import ComparisonResult


def result_to_row(result: ComparisonResult, reference: str | Path, current: str | Path) -> Dict[str, Any]:
    """Achata um ``ComparisonResult`` em uma linha de métricas."""

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "reference": str(reference),
        "current": str(current),
        "match": result.match,
        "diff_percentage": round(result.diff_percentage, 5),
        "diff_pixels": result.diff_pixels,
        "total_pixels": result.total_pixels,
        "regions": len(result.regions),
        "diff_path": result.diff_path or "",
        "error": result.error or "",
    }


def save_metrics(metrics: Dict[str, Any], path: Path) -> None:
    """Salva métricas em arquivo CSV append-only."""

    path.parent.mkdir(parents=True, exist_ok=True)
    file_exists = path.exists()
    with open(path, "a", encoding="utf-8", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=list(metrics.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(metrics)
