"""
Decorators that attach routing metadata to classes.

    @thrift_controller("/thrift")
    class ExampleController(ExampleService.Iface):
        def execute(self):
            ...

    @enable_thrift_controllers
    class ExampleConfiguration:
        pass
"""
from __future__ import annotations

from typing import Any, Optional

from thrift.protocol.TJSONProtocol import TJSONProtocolFactory

from thriftreg.domain.models import EnableThriftControllers, RoutingMarker

ROUTING_MARKER_ATTR = "__thrift_controller__"
ENABLE_MARKER_ATTR = "__enable_thrift_controllers__"


def thrift_controller(*paths: Any, codec_factory: type = TJSONProtocolFactory):
    """Mark a class as a Thrift controller mounted at ``paths``.

    Usable bare (``@thrift_controller``) or called with zero or more paths.
    """
    if len(paths) == 1 and isinstance(paths[0], type):
        return thrift_controller(codec_factory=codec_factory)(paths[0])

    marker = RoutingMarker(paths=tuple(str(p) for p in paths), codec_factory=codec_factory)

    def decorator(cls: type) -> type:
        setattr(cls, ROUTING_MARKER_ATTR, marker)
        return cls

    return decorator


def enable_thrift_controllers(
    *value: Any,
    base_packages: tuple[str, ...] | list[str] = (),
    base_package_classes: tuple[type, ...] | list[type] = (),
):
    """Mark a configuration class as the origin of a controller scan.

    With no arguments the scan covers the configuration class's own package.
    """
    if len(value) == 1 and isinstance(value[0], type):
        return enable_thrift_controllers()(value[0])

    marker = EnableThriftControllers(
        value=tuple(value),
        base_packages=tuple(base_packages),
        base_package_classes=tuple(base_package_classes),
    )

    def decorator(cls: type) -> type:
        setattr(cls, ENABLE_MARKER_ATTR, marker)
        return cls

    return decorator


def find_routing_marker(cls: type) -> Optional[RoutingMarker]:
    # getattr: subclasses inherit the marker
    marker = getattr(cls, ROUTING_MARKER_ATTR, None)
    return marker if isinstance(marker, RoutingMarker) else None


def find_enable_marker(cls: Any) -> Optional[EnableThriftControllers]:
    marker = getattr(cls, ENABLE_MARKER_ATTR, None)
    return marker if isinstance(marker, EnableThriftControllers) else None
