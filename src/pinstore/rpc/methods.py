# src/pinstore/rpc/methods.py
"""Method table for the pinstore.v1.IPFSService wire surface.

Shared by the server (handler registration) and the client stub, so both
sides agree on method paths and message types.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from pinstore.contracts.messages import (
    GetContentRequest,
    GetContentResponse,
    GetGatewayURLRequest,
    GetGatewayURLResponse,
    GetProtoRequest,
    GetProtoResponse,
    PinContentRequest,
    PinContentResponse,
    UnpinContentRequest,
    UnpinContentResponse,
    UploadContentRequest,
    UploadContentResponse,
    UploadProtoRequest,
    UploadProtoResponse,
)
from pinstore.rpc.servicer import SERVICE_NAME


@dataclass(frozen=True, slots=True)
class RpcMethod:
    """One unary RPC.

    Attributes:
        name: Wire method name (e.g. "UploadContent")
        handler: StorageServicer attribute implementing it
        request_type: Request message class
        response_type: Response message class
    """

    name: str
    handler: str
    request_type: type[BaseModel]
    response_type: type[BaseModel]

    @property
    def path(self) -> str:
        return f"/{SERVICE_NAME}/{self.name}"


METHODS: tuple[RpcMethod, ...] = (
    RpcMethod("UploadContent", "upload_content", UploadContentRequest, UploadContentResponse),
    RpcMethod("UploadProto", "upload_proto", UploadProtoRequest, UploadProtoResponse),
    RpcMethod("GetContent", "get_content", GetContentRequest, GetContentResponse),
    RpcMethod("GetProto", "get_proto", GetProtoRequest, GetProtoResponse),
    RpcMethod("PinContent", "pin_content", PinContentRequest, PinContentResponse),
    RpcMethod("UnpinContent", "unpin_content", UnpinContentRequest, UnpinContentResponse),
    RpcMethod("GetGatewayURL", "get_gateway_url", GetGatewayURLRequest, GetGatewayURLResponse),
)


def serialize_message(message: BaseModel) -> bytes:
    return message.model_dump_json().encode("utf-8")
