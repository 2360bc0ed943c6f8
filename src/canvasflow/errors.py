"""
Error types for canvasflow.

Every failure in the pipeline is a caller-input defect: nothing here is
retryable. The CLI maps these to process exit codes with ``as_exit_code``.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4


class CanvasFlowError(Exception):
    """Base error for the canvas conversion pipeline."""


class ValidationError(CanvasFlowError):
    """Raised when canvas data is structurally or field-level invalid."""


class ConfigError(CanvasFlowError):
    """Raised for invalid color overrides, directions or config files."""


class CyclicHierarchyError(CanvasFlowError):
    """Raised when group containment loops back on itself."""


def as_exit_code(exc: BaseException) -> int:
    if isinstance(exc, ValidationError):
        return int(ExitCode.VALIDATION_ERROR)
    if isinstance(exc, ConfigError):
        return int(ExitCode.CONFIG_ERROR)
    if isinstance(exc, CanvasFlowError):
        return int(ExitCode.RUNTIME_ERROR)
    return 1
