from thrift.protocol import TBinaryProtocol
from thrift.Thrift import TMessageType
from thrift.transport import TTransport

from thriftreg.config import RegistrarSettings
from thriftreg.contracts.proxy import unwrap_proxy
from thriftreg.contracts.resolver import resolve_contract
from thriftreg.domain.markers import thrift_controller
from thriftreg.orchestrator.pipeline import ControllerRegistrar
from thriftreg.store.registry import DefinitionRegistry

from thrift_fixtures.example.controllers import ExampleController
from thrift_fixtures.gen.example import ExampleService


@thrift_controller("/binary", codec_factory=TBinaryProtocol.TBinaryProtocolFactory)
class BinaryExampleController(ExampleController):
    pass


def _request(name: str, seqid: int) -> bytes:
    trans = TTransport.TMemoryBuffer()
    prot = TBinaryProtocol.TBinaryProtocol(trans)
    prot.writeMessageBegin(name, TMessageType.CALL, seqid)
    ExampleService.execute_args().write(prot)
    prot.writeMessageEnd()
    return trans.getvalue()


def _registration():
    registrar = ControllerRegistrar(DefinitionRegistry(), settings=RegistrarSettings())
    return registrar.build_registration(BinaryExampleController, resolve_contract(BinaryExampleController))


def test_servlet_dispatches_through_proxy_to_handler():
    reg = _registration()
    assert isinstance(reg.codec, TBinaryProtocol.TBinaryProtocolFactory)

    reply = reg.servlet().handle(_request("execute", 7))

    iprot = TBinaryProtocol.TBinaryProtocol(TTransport.TMemoryBuffer(reply))
    name, mtype, seqid = iprot.readMessageBegin()
    assert (name, mtype, seqid) == ("execute", TMessageType.REPLY, 7)

    handler = unwrap_proxy(reg.dispatcher._handler)
    assert handler.calls == 1


def test_servlet_reports_unknown_methods():
    reg = _registration()

    reply = reg.servlet().handle(_request("nope", 3))

    iprot = TBinaryProtocol.TBinaryProtocol(TTransport.TMemoryBuffer(reply))
    name, mtype, seqid = iprot.readMessageBegin()
    assert (name, mtype, seqid) == ("nope", TMessageType.EXCEPTION, 3)
