from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Iterable, Iterator

from thriftreg.classpath.ignore import should_ignore_module
from thriftreg.domain.markers import find_routing_marker
from thriftreg.domain.models import DiscoveryRecord
from thriftreg.logging_config import get_logger

logger = get_logger(__name__)


class ClassPathScanner:
    """
    Finds concrete classes carrying a ``@thrift_controller`` marker.

    Scanning imports modules but keeps no state of its own, so every call
    starts over and yields the same records for an unchanged import path.
    """

    def find_annotated(self, package: str) -> Iterator[DiscoveryRecord]:
        seen: set[int] = set()
        for module in self._iter_modules(package):
            for cls in _classes_defined_in(module):
                if id(cls) in seen:
                    continue
                if not _is_candidate(cls):
                    continue
                seen.add(id(cls))
                logger.debug("handler_discovered", handler=f"{cls.__module__}.{cls.__qualname__}", package=package)
                yield DiscoveryRecord(handler_type=cls, source_package=package)

    def scan(self, packages: Iterable[str]) -> Iterator[DiscoveryRecord]:
        for package in packages:
            yield from self.find_annotated(package)

    def _iter_modules(self, package: str) -> Iterator[ModuleType]:
        try:
            root = importlib.import_module(package)
        except ImportError as e:
            logger.warning("scan_root_unresolvable", package=package, error=str(e))
            return

        yield root
        yield from self._walk(root)

    def _walk(self, package: ModuleType) -> Iterator[ModuleType]:
        # ignored names are pruned before import, so their subpackages are never reached
        path = getattr(package, "__path__", None)
        if path is None:
            return

        for info in pkgutil.iter_modules(path, prefix=f"{package.__name__}."):
            if should_ignore_module(info.name):
                continue
            try:
                module = importlib.import_module(info.name)
            except Exception as e:
                logger.warning("module_import_failed", module=info.name, error=str(e))
                continue
            yield module
            if info.ispkg:
                yield from self._walk(module)


def _classes_defined_in(module: ModuleType) -> Iterator[type]:
    # top-level classes of the module plus classes nested in them
    stack = [
        obj
        for obj in vars(module).values()
        if isinstance(obj, type) and obj.__module__ == module.__name__ and obj.__qualname__ == obj.__name__
    ]
    stack.reverse()
    while stack:
        cls = stack.pop()
        yield cls
        nested = [
            obj
            for obj in vars(cls).values()
            if isinstance(obj, type) and obj.__qualname__ == f"{cls.__qualname__}.{obj.__name__}"
        ]
        stack.extend(reversed(nested))


def _is_candidate(cls: type) -> bool:
    return find_routing_marker(cls) is not None and not inspect.isabstract(cls)
