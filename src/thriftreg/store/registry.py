from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Protocol

from thriftreg.errors import DuplicateEntryError, RegistrarError, RegistrationBuildError, UnknownEntryError
from thriftreg.logging_config import get_logger

logger = get_logger(__name__)

_UNSET = object()


class ComponentRegistry(Protocol):
    """What the registrar needs from its host container."""

    def generate_unique_name(self, candidate: str) -> str: ...

    def register_entry(self, name: str, factory: Callable[[], Any]) -> None: ...


@dataclass
class _Entry:
    name: str
    factory: Callable[[], Any]
    value: Any = field(default=_UNSET, repr=False)

    @property
    def initialized(self) -> bool:
        return self.value is not _UNSET


class DefinitionRegistry:
    """
    Two-phase component registry.

    Phase 1 (``register_entry``) records the name and a factory; phase 2
    (``get``) calls the factory at most once and keeps the result. A factory
    that raises leaves nothing behind, so no half-built entry is ever visible.
    """

    SEPARATOR = "#"

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def generate_unique_name(self, candidate: str) -> str:
        # candidate#0, candidate#1, ...
        counter = 0
        while f"{candidate}{self.SEPARATOR}{counter}" in self._entries:
            counter += 1
        return f"{candidate}{self.SEPARATOR}{counter}"

    def register_entry(self, name: str, factory: Callable[[], Any]) -> None:
        if name in self._entries:
            raise DuplicateEntryError(name)
        self._entries[name] = _Entry(name=name, factory=factory)

    def contains(self, name: str) -> bool:
        return name in self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def names(self) -> list[str]:
        return list(self._entries)

    def is_initialized(self, name: str) -> bool:
        return self._entry(name).initialized

    def get(self, name: str) -> Any:
        entry = self._entry(name)
        if not entry.initialized:
            entry.value = entry.factory()
        return entry.value

    def preinstantiate(self) -> list[RegistrarError]:
        """Build every entry; return the build errors instead of stopping at the first."""
        errors: list[RegistrarError] = []
        for name in self.names():
            try:
                self.get(name)
            except RegistrationBuildError as e:
                logger.error("registration_build_failed", entry=name, error=e.message)
                errors.append(e)
            else:
                logger.debug("registration_built", entry=name)
        return errors

    def _entry(self, name: str) -> _Entry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownEntryError(name) from None
