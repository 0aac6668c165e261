import abc

import pytest

from thriftreg.contracts.proxy import ProxyFactory, interface_methods, unwrap_proxy
from thriftreg.errors import ProxyFrozenError

from thrift_fixtures.example.controllers import ExampleController
from thrift_fixtures.gen.calculator import CalculatorService
from thrift_fixtures.gen.example import ExampleService


class Adder(CalculatorService.Iface):
    def add(self, a, b):
        return a + b


def test_proxy_implements_interface_and_forwards():
    handler = ExampleController()
    proxy = ProxyFactory(ExampleService.Iface, handler).get_proxy()

    assert isinstance(proxy, ExampleService.Iface)
    assert not isinstance(proxy, ExampleController)

    proxy.execute()
    proxy.execute()
    assert handler.calls == 2
    assert unwrap_proxy(proxy) is handler


def test_interceptors_wrap_calls_in_order():
    seen = []

    def outer(invocation):
        seen.append(("outer", invocation.method_name, invocation.args))
        return invocation.proceed() * 10

    def inner(invocation):
        seen.append(("inner", invocation.method_name, invocation.args))
        return invocation.proceed() + 1

    factory = ProxyFactory(CalculatorService.Iface, Adder(), interceptors=[outer])
    factory.add_interceptor(inner)
    proxy = factory.get_proxy()

    assert proxy.add(2, 3) == 60
    assert seen == [("outer", "add", (2, 3)), ("inner", "add", (2, 3))]


def test_frozen_factory_rejects_interceptors():
    factory = ProxyFactory(CalculatorService.Iface, Adder(), frozen=True)
    assert factory.frozen

    with pytest.raises(ProxyFrozenError):
        factory.add_interceptor(lambda invocation: invocation.proceed())


def test_proxy_snapshot_is_not_affected_by_later_interceptors():
    factory = ProxyFactory(CalculatorService.Iface, Adder())
    proxy = factory.get_proxy()
    factory.add_interceptor(lambda invocation: -1)

    assert proxy.add(1, 1) == 2
    assert factory.get_proxy().add(1, 1) == -1


def test_optimize_reuses_generated_class():
    a = ProxyFactory(ExampleService.Iface, ExampleController(), optimize=True).get_proxy()
    b = ProxyFactory(ExampleService.Iface, ExampleController(), optimize=True).get_proxy()
    c = ProxyFactory(ExampleService.Iface, ExampleController()).get_proxy()

    assert type(a) is type(b)
    assert type(c) is not type(a)
    assert unwrap_proxy(a) is not unwrap_proxy(b)


def test_abstract_interface_can_be_proxied():
    class Greeter(abc.ABC):
        @abc.abstractmethod
        def greet(self, name):
            ...

    class English(Greeter):
        def greet(self, name):
            return f"hello {name}"

    assert interface_methods(Greeter) == ["greet"]
    proxy = ProxyFactory(Greeter, English()).get_proxy()
    assert proxy.greet("bob") == "hello bob"
