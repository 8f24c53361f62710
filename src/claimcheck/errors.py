"""Exception hierarchy for claimcheck.

Structural errors abort a whole run. Service errors are captured inside the
``CheckResult`` of the one service that raised them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from claimcheck.services.base import ServiceDescriptor


class ClaimcheckError(Exception):
    """Base class for every error raised by claimcheck."""


class StructuralError(ClaimcheckError):
    """A run could not start, so no report is produced."""


class EmptyNameError(StructuralError):
    def __init__(self) -> None:
        super().__init__("Name must not be empty")


class NoServicesFoundError(StructuralError):
    def __init__(self) -> None:
        super().__init__("No services found")


class RegistryLoadError(StructuralError):
    """Service discovery failed."""


class ServiceError(ClaimcheckError):
    """A single service check failed."""

    def __init__(self, message: str, descriptor: ServiceDescriptor | None = None) -> None:
        super().__init__(message)
        self.descriptor = descriptor


class ServiceTransportError(ServiceError):
    """Network-level failure: timeout, DNS, refused connection."""


class ServiceProtocolError(ServiceError):
    """The service answered, but not in a way the strategy understands."""


class RejectedResponseError(ServiceProtocolError):
    def __init__(
        self,
        status_code: int,
        reason: str = "",
        descriptor: ServiceDescriptor | None = None,
    ) -> None:
        message = f"Unexpected status code: {status_code}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, descriptor)
        self.status_code = status_code
        self.reason = reason


class ResponseInterpretationError(ServiceProtocolError):
    """The response interpreter could not make sense of an accepted response."""


class ConfigError(ClaimcheckError, ValueError):
    """A .claimcheck.yaml file exists but cannot be used."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigSyntaxError(ConfigError):
    """The file is not well-formed YAML."""
