"""Custom exceptions for pkghealth."""

from __future__ import annotations


class PkgHealthError(Exception):
    """Base exception for all pkghealth errors."""


class ValidationError(PkgHealthError):
    """Raised when a package or version identifier is rejected before any network call."""


class ParseError(PkgHealthError):
    """Raised when a license expression, version, threshold or payload cannot be parsed."""


class ConfigError(PkgHealthError):
    """Raised when configuration cannot be loaded or validated."""


class ManifestError(PkgHealthError):
    """Raised when the project manifest is missing or malformed."""


class RegistryError(PkgHealthError):
    """Raised when the package registry returns an unexpected response."""

    def __init__(self, message: str, package: str | None = None, status_code: int | None = None):
        self.package = package
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(RegistryError):
    """Raised when the registry answers 404 for a package."""


class RateLimitError(RegistryError):
    """Raised when the registry or source host throttles us (403/429)."""

    def __init__(
        self,
        message: str,
        package: str | None = None,
        status_code: int | None = None,
        retry_after: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, package, status_code)


class RequestTimeoutError(RegistryError):
    """Raised when a request exceeds its per-call timeout."""


class NetworkError(RegistryError):
    """Raised when the transport fails before a response is received."""


class SourceHostError(PkgHealthError):
    """Raised by the source-host client for any failed lookup."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class CircularDependencyError(PkgHealthError):
    """Raised when a cycle is found and the tree build is configured to stop on cycles."""

    def __init__(self, path: list[str]):
        self.path = path
        super().__init__(f"Circular dependency detected: {' -> '.join(path)}")
