"""Custom exception classes for coherence verification."""
from __future__ import annotations


class CoherenceError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "Coherence error") -> None:
        self.detail = detail
        super().__init__(detail)


class DuplicatePackageError(CoherenceError):
    """Two input records share a package id (case-insensitive)."""

    def __init__(self, existing: object, duplicate: object) -> None:
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            "Multiple copies of the following package were found:\n"
            f"{existing}\n{duplicate}"
        )


class ConfigurationError(CoherenceError):
    """Raised for configuration issues (bad behavior names, bad config)."""

    def __init__(self, detail: str = "Configuration error") -> None:
        super().__init__(detail=detail)


class ManifestError(CoherenceError):
    """Raised when a package manifest cannot be read or validated."""

    def __init__(self, detail: str = "Manifest error") -> None:
        super().__init__(detail=detail)


class VersionParseError(CoherenceError, ValueError):
    """Raised when a version or version range string is malformed."""

    def __init__(self, detail: str = "Invalid version") -> None:
        super().__init__(detail=detail)


class FrameworkParseError(CoherenceError, ValueError):
    """Raised when a target framework moniker is malformed."""

    def __init__(self, detail: str = "Invalid target framework") -> None:
        super().__init__(detail=detail)
