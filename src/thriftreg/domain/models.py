from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Union

from thrift.protocol.TJSONProtocol import TJSONProtocolFactory

from thriftreg.transport.servlet import ThriftServlet

# Outer class of a nested Iface, or the generated service module itself.
ServiceOwner = Union[type, ModuleType]


@dataclass(frozen=True)
class RoutingMarker:
    """Mount paths and wire codec declared by ``@thrift_controller``."""

    paths: tuple[str, ...] = ()
    codec_factory: type = TJSONProtocolFactory


@dataclass(frozen=True)
class EnableThriftControllers:
    """Scan roots declared by ``@enable_thrift_controllers``."""

    value: tuple[str, ...] = ()
    base_packages: tuple[str, ...] = ()
    base_package_classes: tuple[type, ...] = ()

    def is_empty(self) -> bool:
        return not (self.value or self.base_packages or self.base_package_classes)


@dataclass(frozen=True)
class DiscoveryRecord:
    handler_type: type
    source_package: str

    @property
    def qualified_name(self) -> str:
        return f"{self.handler_type.__module__}.{self.handler_type.__qualname__}"


@dataclass(frozen=True)
class ServiceContract:
    interface_type: type
    enclosing_service_type: ServiceOwner
    dispatcher_type: type


@dataclass(frozen=True)
class DispatcherBinding:
    handler: Any
    proxy: Any
    dispatcher: Any
    codec: Any


@dataclass(frozen=True)
class EndpointRegistration:
    name: str                     # display/mount name, e.g. ExampleControllerServlet
    url_mappings: tuple[str, ...]
    dispatcher: Any
    codec: Any
    handler_type: type
    load_on_startup: int = 1

    def servlet(self) -> ThriftServlet:
        return ThriftServlet(self.dispatcher, self.codec)


@dataclass
class ScanReport:
    packages: list[str]
    registered: list[str] = field(default_factory=list)
    failures: list[Exception] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
