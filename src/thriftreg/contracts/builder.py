from __future__ import annotations

import inspect
from typing import Any

from thriftreg.contracts.proxy import ProxyFactory
from thriftreg.domain.models import DispatcherBinding, RoutingMarker, ServiceContract
from thriftreg.errors import RegistrationBuildError


def _check_single_argument_constructor(dispatcher_type: type, interface: type) -> None:
    """
    The dispatcher must be constructible from exactly one positional argument,
    the service interface (``Processor(handler)``).
    """
    try:
        sig = inspect.signature(dispatcher_type)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot inspect constructor of {dispatcher_type.__qualname__}: {e}") from e

    positional = [
        p
        for p in sig.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    required = [
        p
        for p in sig.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if len(positional) != 1 or len(required) != 1 or required[0] is not positional[0]:
        raise TypeError(
            f"{dispatcher_type.__qualname__} has no constructor accepting a single "
            f"{interface.__qualname__} argument (signature {sig})"
        )

    annotation = positional[0].annotation
    if annotation is inspect.Parameter.empty or not isinstance(annotation, type):
        return
    if not issubclass(interface, annotation):
        raise TypeError(
            f"{dispatcher_type.__qualname__} expects {annotation.__qualname__}, "
            f"not {interface.__qualname__}"
        )


def _construct(handler_type: type, stage: str, factory: Any, *args: Any) -> Any:
    try:
        return factory(*args)
    except Exception as e:
        raise RegistrationBuildError(handler_type, e, stage=stage) from e


def build_dispatcher(handler_type: type, contract: ServiceContract, marker: RoutingMarker) -> DispatcherBinding:
    """
    Instantiate the handler, wrap it in a frozen interface proxy, construct the
    codec and bind a dispatcher to the proxy.
    """
    if marker is None:
        raise RegistrationBuildError(
            handler_type,
            LookupError(f"Cannot retrieve routing marker on {handler_type.__qualname__}"),
            stage="marker",
        )

    handler = _construct(handler_type, "handler", handler_type)

    proxy_factory = ProxyFactory(contract.interface_type, handler, optimize=True, frozen=True)
    proxy = _construct(handler_type, "proxy", proxy_factory.get_proxy)

    codec = _construct(handler_type, "codec", marker.codec_factory)

    try:
        _check_single_argument_constructor(contract.dispatcher_type, contract.interface_type)
    except TypeError as e:
        raise RegistrationBuildError(handler_type, e, stage="dispatcher") from e

    dispatcher = _construct(handler_type, "dispatcher", contract.dispatcher_type, proxy)

    return DispatcherBinding(handler=handler, proxy=proxy, dispatcher=dispatcher, codec=codec)
