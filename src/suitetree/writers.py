"""File writers for report documents."""
from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from suitetree.errors import ErrorCode, SuitetreeException
from suitetree.views import EXPORT_COLUMNS, ExportRow

logger = logging.getLogger(__name__)


def _prepare(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SuitetreeException(ErrorCode.E300, f"{path.parent}: {e}") from e


def write_json(path: Path, document: Any) -> Path:
    """Write a JSON document, creating parent directories."""
    _prepare(path)
    try:
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise SuitetreeException(ErrorCode.E303, f"{path}: {e}") from e
    logger.debug("Wrote %s", path)
    return path


def write_csv(path: Path, rows: Sequence[ExportRow]) -> Path:
    """Write export rows as CSV with a header line."""
    _prepare(path)
    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(EXPORT_COLUMNS)
            for row in rows:
                writer.writerow(row.as_row())
    except OSError as e:
        raise SuitetreeException(ErrorCode.E303, f"{path}: {e}") from e
    logger.debug("Wrote %d rows to %s", len(rows), path)
    return path
