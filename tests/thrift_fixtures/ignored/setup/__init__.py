from thriftreg.domain.markers import thrift_controller

from thrift_fixtures.gen.example import ExampleService


@thrift_controller("/setup")
class SetupController(ExampleService.Iface):
    def execute(self):
        pass
