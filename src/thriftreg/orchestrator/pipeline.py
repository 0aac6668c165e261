from __future__ import annotations

from functools import partial
from typing import Any, Optional

from thriftreg.classpath.scanner import ClassPathScanner
from thriftreg.classpath.scope import resolve_scan_packages
from thriftreg.config import RegistrarSettings, get_settings
from thriftreg.contracts.builder import build_dispatcher
from thriftreg.contracts.resolver import ServiceConvention, resolve_contract
from thriftreg.domain.markers import find_enable_marker, find_routing_marker
from thriftreg.domain.models import (
    DiscoveryRecord,
    DispatcherBinding,
    EndpointRegistration,
    RoutingMarker,
    ScanReport,
    ServiceContract,
)
from thriftreg.errors import ContractResolutionError
from thriftreg.logging_config import get_logger
from thriftreg.store.registry import ComponentRegistry, DefinitionRegistry

logger = get_logger(__name__)


def find_url_mappings(handler_type: type, marker: Optional[RoutingMarker]) -> tuple[str, ...]:
    """The marker's paths, or ``/<ClassName>`` when it declares none."""
    if marker is not None and marker.paths:
        return tuple(marker.paths)
    return (f"/{handler_type.__name__}",)


def create_registration(
    handler_type: type,
    binding: DispatcherBinding,
    marker: Optional[RoutingMarker],
    servlet_suffix: str = "Servlet",
    load_on_startup: int = 1,
) -> EndpointRegistration:
    return EndpointRegistration(
        name=f"{handler_type.__name__}{servlet_suffix}",
        url_mappings=find_url_mappings(handler_type, marker),
        dispatcher=binding.dispatcher,
        codec=binding.codec,
        handler_type=handler_type,
        load_on_startup=load_on_startup,
    )


class ControllerRegistrar:
    """
    Scans for ``@thrift_controller`` classes and registers one deferred
    ``EndpointRegistration`` factory per handler with the host registry.

    Contracts are resolved during the scan so misconfigured handlers are
    reported right away; the handler, proxy, codec and dispatcher are built
    when the registry first asks for the entry.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        settings: Optional[RegistrarSettings] = None,
        scanner: Optional[ClassPathScanner] = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or get_settings()
        self.scanner = scanner or ClassPathScanner()
        self.convention = ServiceConvention.from_settings(self.settings.convention)

    def register(self, origin: Any) -> ScanReport:
        """``origin`` is a configuration class (optionally marked) or a package name."""
        marker = None if isinstance(origin, str) else find_enable_marker(origin)
        packages = resolve_scan_packages(marker, origin)
        report = ScanReport(packages=packages)

        logger.info("scan_started", packages=packages)
        for record in self.scanner.scan(packages):
            try:
                contract = resolve_contract(record.handler_type, self.convention)
            except ContractResolutionError as e:
                logger.warning("contract_unresolved", handler=record.qualified_name, stage=e.stage, error=e.message)
                if self.settings.fail_fast:
                    raise
                report.failures.append(e)
                continue

            name = self._register(record, contract)
            report.registered.append(name)

        logger.info(
            "scan_finished",
            packages=packages,
            registered=len(report.registered),
            failed=len(report.failures),
        )
        return report

    def _register(self, record: DiscoveryRecord, contract: ServiceContract) -> str:
        name = self.registry.generate_unique_name(record.qualified_name)
        factory = partial(self.build_registration, record.handler_type, contract)
        self.registry.register_entry(name, factory)
        logger.info("endpoint_registered", entry=name, handler=record.qualified_name)
        return name

    def build_registration(self, handler_type: type, contract: ServiceContract) -> EndpointRegistration:
        marker = find_routing_marker(handler_type)
        binding = build_dispatcher(handler_type, contract, marker)
        return create_registration(
            handler_type,
            binding,
            marker,
            servlet_suffix=self.settings.servlet_suffix,
            load_on_startup=self.settings.load_on_startup,
        )


def bootstrap(
    origin: Any,
    registry: Optional[DefinitionRegistry] = None,
    settings: Optional[RegistrarSettings] = None,
) -> tuple[DefinitionRegistry, ScanReport]:
    """Register every controller reachable from ``origin`` and, if configured, build them."""
    settings = settings or get_settings()
    registry = registry if registry is not None else DefinitionRegistry()

    report = ControllerRegistrar(registry, settings=settings).register(origin)

    if settings.eager_init:
        errors = registry.preinstantiate()
        if errors and settings.fail_fast:
            raise errors[0]
        report.failures.extend(errors)

    return registry, report
