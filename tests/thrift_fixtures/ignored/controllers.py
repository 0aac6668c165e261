from thriftreg.domain.markers import thrift_controller

from thrift_fixtures.gen.example import ExampleService


@thrift_controller("/kept")
class KeptController(ExampleService.Iface):
    def execute(self):
        pass
