from thriftreg.domain.markers import enable_thrift_controllers

from thrift_fixtures.example.controllers import ExampleController


@enable_thrift_controllers
class ExampleConfiguration:
    pass


@enable_thrift_controllers("thrift_fixtures.example", base_package_classes=[ExampleController])
class DuplicateScanConfiguration:
    pass


@enable_thrift_controllers("thrift_fixtures.example")
class ExplicitConfiguration:
    pass
