# src/pinstore/rpc/client.py
"""Typed client for the pinstore.v1.IPFSService.

Example:
    with grpc.insecure_channel("localhost:9093") as channel:
        client = StorageServiceClient(channel)
        response = client.upload_content(UploadContentRequest(data=b"hello"))
        print(response.cid)

Failures surface as grpc.RpcError with the server's status code.
"""

from __future__ import annotations

import grpc

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
from pinstore.rpc.methods import METHODS, serialize_message


class StorageServiceClient:
    """Thin stub: one method per RPC, each taking an optional timeout in seconds."""

    def __init__(self, channel: grpc.Channel) -> None:
        self._calls = {
            m.handler: channel.unary_unary(
                m.path,
                request_serializer=serialize_message,
                response_deserializer=m.response_type.model_validate_json,
            )
            for m in METHODS
        }

    def upload_content(self, request: UploadContentRequest, timeout: float | None = None) -> UploadContentResponse:
        return self._calls["upload_content"](request, timeout=timeout)

    def upload_proto(self, request: UploadProtoRequest, timeout: float | None = None) -> UploadProtoResponse:
        return self._calls["upload_proto"](request, timeout=timeout)

    def get_content(self, request: GetContentRequest, timeout: float | None = None) -> GetContentResponse:
        return self._calls["get_content"](request, timeout=timeout)

    def get_proto(self, request: GetProtoRequest, timeout: float | None = None) -> GetProtoResponse:
        return self._calls["get_proto"](request, timeout=timeout)

    def pin_content(self, request: PinContentRequest, timeout: float | None = None) -> PinContentResponse:
        return self._calls["pin_content"](request, timeout=timeout)

    def unpin_content(self, request: UnpinContentRequest, timeout: float | None = None) -> UnpinContentResponse:
        return self._calls["unpin_content"](request, timeout=timeout)

    def get_gateway_url(self, request: GetGatewayURLRequest, timeout: float | None = None) -> GetGatewayURLResponse:
        return self._calls["get_gateway_url"](request, timeout=timeout)
