from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ZccError(Exception):
    """Base exception for zcc.

    Every domain error carries a machine-readable ``code`` and an optional
    human-readable ``suggestion`` describing how to recover.
    """

    default_code = "ZCC_ERROR"

    code: str
    suggestion: Optional[str]
    context: Dict[str, Any]

    def __init__(
        self,
        message: str = "",
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.suggestion = suggestion
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    @property
    def message(self) -> str:
        return str(self)

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        payload: Dict[str, Any] = {
            "message": str(self),
            "code": self.code,
            "context": self.context,
        }
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        return payload


class FileSystemError(ZccError):
    """Raised when a file system operation fails."""

    default_code = "FS_ERROR"


class ConfigurationError(ZccError):
    """Raised for invalid or unreadable configuration."""

    default_code = "CONFIG_ERROR"


class ValidationError(ZccError):
    """Raised when validation of a manifest or input fails."""

    default_code = "VALIDATION_ERROR"


class NetworkError(ZccError):
    """Raised when a remote request fails."""

    default_code = "NETWORK_ERROR"

    def __init__(
        self,
        message: str = "",
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
        *,
        status: Optional[int] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if status is not None:
            ctx["status"] = status
        super().__init__(message, code, suggestion, context=ctx)
        self.status = status


# ---------------------------------------------------------------------------
# Packs
# ---------------------------------------------------------------------------


class PackError(ZccError):
    """Base error for starter pack loading and installation.

    Codes used by pack sources: ``PACK_NOT_FOUND``, ``MANIFEST_NOT_FOUND``,
    ``COMPONENTS_NOT_FOUND``, ``INVALID_MANIFEST``, ``INVALID_JSON`` and
    ``PACK_LOAD_ERROR``.
    """

    default_code = "PACK_ERROR"


class PackNotFoundError(PackError):
    """Raised when no source provides the requested pack."""

    default_code = "PACK_NOT_FOUND"


class ComponentInstallError(PackError):
    """Raised when a single pack component cannot be installed."""

    default_code = "COMPONENT_INSTALL_ERROR"


class ComponentRemovalError(PackError):
    """Raised when a single pack component cannot be removed."""

    default_code = "COMPONENT_REMOVAL_ERROR"


class RegistryNotLoadedError(ZccError):
    """Raised when the file registry is saved before being loaded."""

    default_code = "REGISTRY_NOT_LOADED"


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class SourceError(ZccError):
    """Raised for invalid pack source operations."""

    default_code = "SOURCE_ERROR"


class SourceNotFoundError(SourceError):
    """Raised when a pack source id is unknown."""

    default_code = "SOURCE_NOT_FOUND"


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class HookError(ZccError):
    """Raised for hook definition or execution failures."""

    default_code = "HOOK_ERROR"


class HookNotFoundError(HookError):
    """Raised when a hook id cannot be found."""

    default_code = "HOOK_NOT_FOUND"


__all__ = [
    "ZccError",
    "FileSystemError",
    "ConfigurationError",
    "ValidationError",
    "NetworkError",
    "PackError",
    "PackNotFoundError",
    "ComponentInstallError",
    "ComponentRemovalError",
    "RegistryNotLoadedError",
    "SourceError",
    "SourceNotFoundError",
    "HookError",
    "HookNotFoundError",
]
