# src/pinstore/rpc/errors.py
"""RPC-level failure carrying a gRPC status code."""

import grpc


class RpcError(Exception):
    """Raised by the servicer to fail a call with a specific status.

    The server glue converts this to ``context.abort(code, details)``;
    servicer code never touches the ServicerContext directly.

    Attributes:
        code: gRPC status code for the failure
        details: Human-readable message returned to the caller
    """

    def __init__(self, code: grpc.StatusCode, details: str) -> None:
        super().__init__(f"{code.name}: {details}")
        self.code = code
        self.details = details
