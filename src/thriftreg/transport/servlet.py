from __future__ import annotations

from typing import Any

from thrift.transport import TTransport


class ThriftServlet:
    """
    One request body in, one reply body out.

    Mounting this on an HTTP server is left to the host; ``handle`` is what a
    POST handler would call with the raw request body.
    """

    def __init__(self, processor: Any, protocol_factory: Any) -> None:
        self.processor = processor
        self.protocol_factory = protocol_factory

    def handle(self, body: bytes) -> bytes:
        itrans = TTransport.TMemoryBuffer(body)
        otrans = TTransport.TMemoryBuffer()
        iprot = self.protocol_factory.getProtocol(itrans)
        oprot = self.protocol_factory.getProtocol(otrans)
        self.processor.process(iprot, oprot)
        return otrans.getvalue()
