from __future__ import annotations

"""Build exception classes.

Stage-level errors are designed to be caught at the stage boundary by
:class:`~lp_toolkit.core.services.BuildService` and reported without stopping
sibling stages.  Only a failure to prepare the output directory is allowed to
abort the whole run.
"""

from typing import Optional


class BuildError(Exception):
    """Base exception for all build-related errors."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    def __str__(self) -> str:
        if self.stage:
            return f"[Stage: {self.stage}] {super().__str__()}"
        return super().__str__()


class StageError(BuildError):
    """Raised when one build stage (html, css, js, favicon...) fails."""

    def __init__(self, stage: str, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message, stage=stage, cause=cause)


class ConfigurationError(BuildError):
    """Raised when the output directory cannot be prepared.

    This is the only error that aborts a whole build.  Unusable optional inputs
    (an invalid ``.image-dimensions.json``, a missing ``.env``) are logged and
    replaced by empty values instead.
    """


class AssetError(BuildError):
    """Raised when a source asset a stage depends on is missing or unreadable."""

    def __init__(self, path: str, stage: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.path = path
        super().__init__(f"Source asset not found: {path}", stage=stage, cause=cause)


__all__ = [
    "BuildError",
    "StageError",
    "ConfigurationError",
    "AssetError",
]
