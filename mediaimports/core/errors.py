"""Exception hierarchy raised while resolving media references."""

from __future__ import annotations


class MediaImportError(Exception):
    """Base class for every failure raised by the resolution engine."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigurationError(MediaImportError):
    """Options could not be normalized into a ``ResolutionConfig``."""


class ResolutionError(MediaImportError):
    """A relative reference has neither an originating file nor a root."""


class ProbeUnavailable(MediaImportError):
    """The external probing tool (``ffprobe``) is not installed."""


class ProbeFailed(MediaImportError):
    """The probe report was malformed or the asset could not be read."""


class UnsupportedDigestAlgorithm(MediaImportError):
    def __init__(self, algorithm: str, path: str | None = None) -> None:
        super().__init__(f"Unsupported digest algorithm: {algorithm}", path)
        self.algorithm = algorithm


class MediaIOError(MediaImportError):
    """Reading, writing or creating directories failed."""


class EmitFailed(MediaIOError):
    """Copying an asset below ``outputRoot`` failed."""
