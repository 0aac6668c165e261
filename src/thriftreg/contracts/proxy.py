"""
Interface proxies with an interceptor chain.

The proxy is an instance of a generated subclass of the Thrift ``Iface``. Each
public interface method forwards to the target through the interceptors, so
cross-cutting behaviour can be added without touching generated code.
"""
from __future__ import annotations

import inspect
import types
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional

from thriftreg.errors import ProxyFrozenError


@dataclass
class MethodInvocation:
    target: Any
    method_name: str
    args: tuple
    kwargs: dict
    interceptors: tuple["Interceptor", ...] = ()
    _index: int = field(default=0, repr=False)

    def proceed(self) -> Any:
        if self._index < len(self.interceptors):
            interceptor = self.interceptors[self._index]
            self._index += 1
            return interceptor(self)
        return getattr(self.target, self.method_name)(*self.args, **self.kwargs)


Interceptor = Callable[[MethodInvocation], Any]


def interface_methods(interface: type) -> list[str]:
    """Public callables declared on ``interface`` or its bases, sorted by name."""
    names = []
    for name, value in inspect.getmembers(interface):
        if name.startswith("_"):
            continue
        if inspect.isroutine(value):
            names.append(name)
    return names


def _forwarder(name: str):
    def method(self, *args, **kwargs):
        return self._invoke(name, args, kwargs)

    method.__name__ = name
    return method


def _build_forwarder_class(interface: type) -> type:
    def body(ns: dict) -> None:
        for name in interface_methods(interface):
            ns[name] = _forwarder(name)

        def _invoke(self, name, args, kwargs):
            invocation = MethodInvocation(
                target=self._target,
                method_name=name,
                args=args,
                kwargs=kwargs,
                interceptors=self._interceptors,
            )
            return invocation.proceed()

        def __repr__(self):
            return f"<{interface.__qualname__} proxy for {self._target!r}>"

        ns["_invoke"] = _invoke
        ns["__repr__"] = __repr__
        ns["__module__"] = interface.__module__

    return types.new_class(f"{interface.__name__}Proxy", (interface,), exec_body=body)


_cached_forwarder_class = lru_cache(maxsize=None)(_build_forwarder_class)


class ProxyFactory:
    """
    Builds a proxy implementing ``interface`` around a single ``target``.

    ``optimize`` reuses the generated forwarder class per interface; ``frozen``
    rejects further interceptors.
    """

    def __init__(
        self,
        interface: type,
        target: Any,
        interceptors: Iterable[Interceptor] = (),
        optimize: bool = False,
        frozen: bool = False,
    ) -> None:
        self.interface = interface
        self.target = target
        self.optimize = optimize
        self._interceptors: list[Interceptor] = list(interceptors)
        self._frozen = frozen

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add_interceptor(self, interceptor: Interceptor) -> None:
        if self._frozen:
            raise ProxyFrozenError(self.interface)
        self._interceptors.append(interceptor)

    def get_proxy(self) -> Any:
        cls = _cached_forwarder_class(self.interface) if self.optimize else _build_forwarder_class(self.interface)
        # skip the interface's own __init__; the proxy carries no state of its own
        proxy = object.__new__(cls)
        proxy._target = self.target
        proxy._interceptors = tuple(self._interceptors)
        return proxy


def unwrap_proxy(obj: Any) -> Optional[Any]:
    """Target behind a proxy built by ``ProxyFactory``, or None."""
    return getattr(obj, "_target", None)
