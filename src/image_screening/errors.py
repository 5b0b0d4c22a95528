"""Exception hierarchy for the screening pipeline."""

from __future__ import annotations


class ScreeningError(Exception):
    """Base class for every error raised by this package."""


class ImageDecodeError(ScreeningError):
    """The image bytes could not be rasterized."""


class StageExecutionError(ScreeningError):
    """A stage failed while computing its result."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage} stage failed: {message}")
        self.stage = stage


class InvalidTransitionError(ScreeningError):
    """An operation was invoked from a phase that does not permit it."""

    def __init__(self, operation: str, phase: str) -> None:
        super().__init__(f"cannot {operation} while pipeline is {phase}")
        self.operation = operation
        self.phase = phase
