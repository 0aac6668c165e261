"""Errors raised while discovering and binding Thrift controllers.

Every error here is a configuration-time error: nothing is retried, and each
one names the handler and the stage that failed.
"""
from __future__ import annotations

from typing import Any, Optional


def _qualified(cls: Any) -> str:
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or repr(cls)
    return f"{module}.{qualname}" if module else qualname


class RegistrarError(Exception):
    """Base class for registrar errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "RegistrarError",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(self.message)


class ScopeResolutionError(RegistrarError):
    """Never raised: scope resolution always falls back to the origin package."""

    def __init__(self, message: str = "Cannot resolve scan scope") -> None:
        super().__init__(message, error_type="ScopeResolution")


class ContractResolutionError(RegistrarError):
    """A handler has no usable Iface / enclosing service / Processor."""

    STAGES = ("interface", "enclosing", "dispatcher")

    def __init__(self, handler_type: type, stage: str, message: str) -> None:
        self.handler_type = handler_type
        self.stage = stage
        super().__init__(
            f"{_qualified(handler_type)}: {message}",
            error_type="ContractResolution",
            details={"handler": _qualified(handler_type), "stage": stage},
        )


class RegistrationBuildError(RegistrarError):
    """Constructing the handler, codec, proxy or dispatcher failed."""

    def __init__(self, handler_type: type, cause: BaseException, stage: str = "build") -> None:
        self.handler_type = handler_type
        self.cause = cause
        self.stage = stage
        super().__init__(
            f"{_qualified(handler_type)}: couldn't build endpoint registration ({stage}): {cause}",
            error_type="RegistrationBuild",
            details={"handler": _qualified(handler_type), "stage": stage, "cause": repr(cause)},
        )


class ProxyFrozenError(RegistrarError):
    def __init__(self, interface: type) -> None:
        super().__init__(
            f"Proxy configuration for {_qualified(interface)} is frozen",
            error_type="ProxyFrozen",
            details={"interface": _qualified(interface)},
        )


class DuplicateEntryError(RegistrarError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"An entry named {name!r} is already registered",
            error_type="DuplicateEntry",
            details={"name": name},
        )


class UnknownEntryError(RegistrarError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"No entry named {name!r}",
            error_type="UnknownEntry",
            details={"name": name},
        )

    def __str__(self) -> str:
        return self.message
