"""Build error taxonomy: recoverable document failures vs fatal output failures"""

from pathlib import Path


class BuildError(Exception):
    """Base class for content pipeline failures."""


class DocumentError(BuildError):
    """A single article could not be read or compiled; the build skips it."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class OutputError(BuildError):
    """An output artifact could not be written; the build aborts."""

    def __init__(self, stage: str, path: Path, cause: Exception):
        super().__init__(f"[{stage}] cannot write {path}: {cause}")
        self.stage = stage
        self.path = path
        self.cause = cause
