"""Load and validate test result files."""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from suitetree import TestRecord
from suitetree.errors import ErrorCode, ResultFileError, SuitetreeException

logger = logging.getLogger(__name__)

RESULT_GLOB = "*-result.json"
SCHEMA_PATH = Path(__file__).parent / "schemas" / "test-result.schema.json"


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def validate_result(data: Any) -> list[str]:
    """Validate result data against the JSON schema. Returns list of errors (empty if valid)."""
    return [f"{error.json_path}: {error.message}" for error in _validator().iter_errors(data)]


def load_result_file(path: Path) -> TestRecord:
    """Load a single result file.

    Raises:
        ResultFileError: If the file is not valid JSON or fails validation
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ResultFileError(str(path), f"invalid JSON: {e}") from e
    except OSError as e:
        raise ResultFileError(str(path), f"cannot read: {e}") from e

    errors = validate_result(data)
    if errors:
        raise ResultFileError(str(path), "; ".join(errors))
    return TestRecord.from_dict(data)


def discover_results(results_dir: Path, pattern: str = RESULT_GLOB) -> list[Path]:
    """List result files in a directory, sorted by file name."""
    return sorted(results_dir.glob(pattern))


def load_results(results_dir: str | Path, strict: bool = False) -> list[TestRecord]:
    """Load every result file in a directory.

    Args:
        results_dir: Directory holding ``*-result.json`` files.
        strict: Raise on the first invalid file instead of skipping it.

    Returns:
        Records in file name order.
    """
    results_dir = Path(results_dir)
    if not results_dir.is_dir():
        raise SuitetreeException(ErrorCode.E005, str(results_dir))

    records: list[TestRecord] = []
    skipped = 0
    for path in discover_results(results_dir):
        try:
            records.append(load_result_file(path))
        except ResultFileError as e:
            if strict:
                raise
            skipped += 1
            logger.warning("Skipping %s: %s", path.name, e.reason)

    logger.info("Loaded %d results from %s (%d skipped)", len(records), results_dir, skipped)
    return records
