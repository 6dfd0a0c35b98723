"""Suitetree Error Code Registry.

Provides structured error codes with helpful messages and next steps.
Each error has:
- Code: ST-EXXX format
- Message: Human-readable description
- Next step: Actionable command or instruction
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Suitetree error codes."""

    # Configuration errors (E001-E004)
    E001 = "E001"  # Config file not found
    E002 = "E002"  # Config file invalid

    # Input errors (E005-E099)
    E005 = "E005"  # Results directory not found

    # Validation errors (E200-E299)
    E201 = "E201"  # Result file invalid

    # File/IO errors (E300-E399)
    E300 = "E300"  # Output directory not writable
    E303 = "E303"  # Cannot write file


@dataclass
class SuitetreeError:
    """Structured error with code, message, and next step."""

    code: ErrorCode
    message: str
    next_step: str
    details: Optional[str] = None

    def __str__(self) -> str:
        lines = [
            f"ST-{self.code.value}: {self.message}",
        ]
        if self.details:
            lines.append(f"  Details: {self.details}")
        lines.append(f"  Next step: {self.next_step}")
        return "\n".join(lines)


ERROR_TEMPLATES: dict[ErrorCode, tuple[str, str]] = {
    # (message_template, next_step)
    ErrorCode.E001: (
        "Config file not found: {details}",
        "Check the --config path or omit it to use defaults",
    ),
    ErrorCode.E002: (
        "Config file is invalid: {details}",
        "Check YAML syntax; 'labels' must be a list of label names",
    ),
    ErrorCode.E005: (
        "Results directory not found: {details}",
        "Point RESULTS_DIR at a directory containing *-result.json files",
    ),
    ErrorCode.E201: (
        "Result file is invalid: {details}",
        "Fix the file or run without --strict to skip it",
    ),
    ErrorCode.E300: (
        "Output directory not writable: {details}",
        "Check permissions or use a different --out path",
    ),
    ErrorCode.E303: (
        "Cannot write file: {details}",
        "Check directory permissions",
    ),
}


class SuitetreeException(Exception):
    """Base exception carrying an error code."""

    def __init__(self, code: ErrorCode, details: Optional[str] = None) -> None:
        self.code = code
        self.details = details
        super().__init__(str(make_error(code, details)))

    @property
    def error(self) -> SuitetreeError:
        return make_error(self.code, self.details)


class ConfigError(SuitetreeException):
    """Configuration could not be loaded."""


class ResultFileError(SuitetreeException):
    """A result file failed to parse or validate."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(ErrorCode.E201, f"{path}: {reason}")


def make_error(code: ErrorCode, details: Optional[str] = None) -> SuitetreeError:
    """Create a SuitetreeError from a code with optional details.

    Args:
        code: The error code
        details: Optional details to include in the message

    Returns:
        SuitetreeError instance ready to print
    """
    template = ERROR_TEMPLATES.get(code, ("Unknown error", "Run with --verbose"))
    message_template, next_step = template

    if details and "{details}" in message_template:
        message = message_template.format(details=details)
    elif details:
        message = f"{message_template}: {details}"
    else:
        message = message_template.replace(": {details}", "")

    return SuitetreeError(
        code=code,
        message=message,
        next_step=next_step,
        details=details if "{details}" not in message_template else None,
    )

