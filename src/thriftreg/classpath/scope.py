from __future__ import annotations

import sys
from typing import Any, Optional

from thriftreg.domain.models import EnableThriftControllers


def package_of(cls: Any) -> str:
    """
    Package containing the module a class is defined in.

    A class defined in a package ``__init__`` belongs to that package; a class
    in a top-level module belongs to the module itself.
    """
    module_name = cls.__module__
    module = sys.modules.get(module_name)
    if module is not None:
        if hasattr(module, "__path__"):
            return module_name
        pkg = getattr(module, "__package__", None)
        if pkg:
            return pkg
    parent, _, _ = module_name.rpartition(".")
    return parent or module_name


def resolve_scan_packages(marker: Optional[EnableThriftControllers], origin: Any) -> list[str]:
    """
    Packages to scan for controllers.

    No explicit input: the origin's own package. Otherwise ``value`` then
    ``base_packages`` then the package of each ``base_package_classes`` entry.
    Duplicates are kept; the scanner tolerates them.
    """
    if marker is None or marker.is_empty():
        return [origin if isinstance(origin, str) else package_of(origin)]

    packages: list[str] = []
    packages.extend(marker.value)
    packages.extend(marker.base_packages)
    packages.extend(package_of(c) for c in marker.base_package_classes)
    return packages
