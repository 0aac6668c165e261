"""
Navigate the structure emitted by the Thrift Python generator.

Given a controller ``class ExampleController(ExampleService.Iface)``, find
``ExampleService.Iface``, then ``ExampleService`` (the generated module, or an
outer class when the service is written as nested classes), then
``ExampleService.Processor``.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterator, Optional

from thrift.Thrift import TProcessor

from thriftreg.config import ConventionSettings
from thriftreg.domain.models import ServiceContract, ServiceOwner
from thriftreg.errors import ContractResolutionError
from thriftreg.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ServiceConvention:
    interface_suffix: str = "Iface"
    dispatcher_suffix: str = "Processor"
    processor_base: type = TProcessor

    @classmethod
    def from_settings(cls, settings: ConventionSettings) -> "ServiceConvention":
        return cls(
            interface_suffix=settings.interface_suffix,
            dispatcher_suffix=settings.dispatcher_suffix,
        )


DEFAULT_CONVENTION = ServiceConvention()


def iter_interfaces(handler_type: type) -> Iterator[type]:
    """All bases of ``handler_type`` in MRO order, excluding itself and ``object``."""
    for base in handler_type.__mro__[1:]:
        if base is not object:
            yield base


def enclosing_type_of(interface: type) -> Optional[ServiceOwner]:
    """
    Outer class declaring ``interface``, or its module when it is top-level.
    None for classes defined inside a function or in an unloaded module.
    """
    qualname = interface.__qualname__
    if "<locals>" in qualname:
        return None

    owner: object = sys.modules.get(interface.__module__)
    if owner is None:
        return None

    for part in qualname.split(".")[:-1]:
        owner = getattr(owner, part, None)
        if owner is None:
            return None
    return owner  # type: ignore[return-value]


def declared_types(owner: ServiceOwner) -> list[type]:
    """Types declared directly in ``owner``, in definition order."""
    if isinstance(owner, type):
        prefix = f"{owner.__qualname__}."
        return [
            obj
            for obj in vars(owner).values()
            if isinstance(obj, type) and obj.__qualname__ == prefix + obj.__name__
        ]
    return [
        obj
        for obj in vars(owner).values()
        if isinstance(obj, type) and obj.__module__ == owner.__name__ and obj.__qualname__ == obj.__name__
    ]


def suffixed_interfaces(handler_type: type, convention: ServiceConvention = DEFAULT_CONVENTION) -> list[type]:
    return [i for i in iter_interfaces(handler_type) if i.__name__.endswith(convention.interface_suffix)]


def dispatcher_in(owner: ServiceOwner, convention: ServiceConvention = DEFAULT_CONVENTION) -> Optional[type]:
    """First type declared in ``owner`` named ``*Processor`` that is a processor."""
    for candidate in declared_types(owner):
        if candidate.__name__.endswith(convention.dispatcher_suffix) and issubclass(
            candidate, convention.processor_base
        ):
            return candidate
    return None


def find_interface(handler_type: type, convention: ServiceConvention = DEFAULT_CONVENTION) -> tuple[type, ServiceOwner]:
    """First suffixed base in MRO order that has an enclosing service."""
    suffixed = suffixed_interfaces(handler_type, convention)
    if not suffixed:
        raise ContractResolutionError(
            handler_type,
            "interface",
            f"No Thrift interface class available (no base named *{convention.interface_suffix})",
        )

    for interface in suffixed:
        owner = enclosing_type_of(interface)
        if owner is not None:
            return interface, owner

    raise ContractResolutionError(
        handler_type,
        "enclosing",
        f"No Thrift service class available for {suffixed[0].__qualname__}",
    )


def _owner_name(owner: ServiceOwner) -> str:
    return getattr(owner, "__qualname__", None) or owner.__name__


def resolve_contract(handler_type: type, convention: ServiceConvention = DEFAULT_CONVENTION) -> ServiceContract:
    """
    Bind ``handler_type`` to the first interface in its MRO that has both an
    enclosing service and a dispatcher declared next to it. Bases that merely
    share the suffix (mixins, marker classes) are passed over.
    """
    # raises "interface" or "enclosing" when no suffixed base has an owner
    _, first_owner = find_interface(handler_type, convention)

    contract = None
    for interface in suffixed_interfaces(handler_type, convention):
        owner = enclosing_type_of(interface)
        if owner is None:
            continue
        dispatcher = dispatcher_in(owner, convention)
        if dispatcher is not None:
            contract = ServiceContract(
                interface_type=interface,
                enclosing_service_type=owner,
                dispatcher_type=dispatcher,
            )
            break

    if contract is None:
        raise ContractResolutionError(
            handler_type,
            "dispatcher",
            f"No Thrift processor class available in {_owner_name(first_owner)}",
        )

    logger.debug(
        "contract_resolved",
        handler=handler_type.__qualname__,
        interface=contract.interface_type.__qualname__,
        dispatcher=contract.dispatcher_type.__qualname__,
    )
    return contract
