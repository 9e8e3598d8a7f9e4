# src/pinstore/rpc/servicer.py
"""Translation layer between RPC messages and a StorageClient.

Each operation validates required fields, fills in default filenames,
delegates to the injected client, and maps outcomes:

    validation failure          -> INVALID_ARGUMENT (client never called)
    upload/pin/unpin failure    -> INTERNAL
    fetch failure of any kind   -> NOT_FOUND

No retries and no payload transformation happen here.
"""

from __future__ import annotations

import grpc
import structlog

from pinstore.contracts.context import CallContext
from pinstore.contracts.errors import StorageError
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
from pinstore.contracts.storage import StorageClient, UploadResult
from pinstore.rpc.errors import RpcError

logger = structlog.get_logger(__name__)

SERVICE_NAME = "pinstore.v1.IPFSService"

DEFAULT_CONTENT_FILENAME = "content"
DEFAULT_PROTO_FILENAME = "data.pb"


def _require(value: bytes | str, field: str) -> None:
    if not value:
        raise RpcError(grpc.StatusCode.INVALID_ARGUMENT, f"{field} is required")


def proto_filename(proto_type: str) -> str:
    """Filename recorded for a structured upload of the given type tag."""
    return f"{proto_type}.pb" if proto_type else DEFAULT_PROTO_FILENAME


class StorageServicer:
    """Implements the pinstore.v1.IPFSService operations over a StorageClient.

    Methods take a request message and the CallContext for the inbound RPC,
    and either return a response message or raise RpcError.
    """

    def __init__(self, client: StorageClient) -> None:
        self._client = client

    def _upload(self, ctx: CallContext, data: bytes, filename: str, action: str) -> UploadResult:
        try:
            return self._client.upload(ctx, data, filename)
        except StorageError as e:
            logger.warning("upload_failed", filename=filename, error=str(e))
            raise RpcError(grpc.StatusCode.INTERNAL, f"failed to {action}: {e}") from e

    def _fetch(self, ctx: CallContext, cid: str, action: str) -> bytes:
        try:
            return self._client.fetch(ctx, cid)
        except StorageError as e:
            logger.info("fetch_failed", cid=cid, error=str(e))
            raise RpcError(grpc.StatusCode.NOT_FOUND, f"failed to {action}: {e}") from e

    def upload_content(self, request: UploadContentRequest, ctx: CallContext) -> UploadContentResponse:
        _require(request.data, "data")
        filename = request.filename or DEFAULT_CONTENT_FILENAME

        result = self._upload(ctx, request.data, filename, "upload content")
        logger.debug("upload_content", cid=result.cid, size=result.size)
        return UploadContentResponse(cid=result.cid, size_bytes=result.size)

    def upload_proto(self, request: UploadProtoRequest, ctx: CallContext) -> UploadProtoResponse:
        _require(request.proto_data, "proto_data")
        filename = proto_filename(request.proto_type)

        result = self._upload(ctx, request.proto_data, filename, "upload proto")
        logger.debug("upload_proto", cid=result.cid, size=result.size, proto_type=request.proto_type)
        return UploadProtoResponse(cid=result.cid, size_bytes=result.size)

    def get_content(self, request: GetContentRequest, ctx: CallContext) -> GetContentResponse:
        _require(request.cid, "cid")

        data = self._fetch(ctx, request.cid, "get content")
        logger.debug("get_content", cid=request.cid, size=len(data))
        # Size comes from the bytes actually returned, not backend metadata
        return GetContentResponse(data=data, size_bytes=len(data))

    def get_proto(self, request: GetProtoRequest, ctx: CallContext) -> GetProtoResponse:
        _require(request.cid, "cid")

        data = self._fetch(ctx, request.cid, "get proto")
        logger.debug("get_proto", cid=request.cid, size=len(data))
        return GetProtoResponse(proto_data=data)

    def pin_content(self, request: PinContentRequest, ctx: CallContext) -> PinContentResponse:
        _require(request.cid, "cid")

        try:
            self._client.pin(ctx, request.cid)
        except StorageError as e:
            logger.warning("pin_failed", cid=request.cid, error=str(e))
            raise RpcError(grpc.StatusCode.INTERNAL, f"failed to pin content: {e}") from e
        logger.debug("pin_content", cid=request.cid)
        return PinContentResponse(success=True)

    def unpin_content(self, request: UnpinContentRequest, ctx: CallContext) -> UnpinContentResponse:
        _require(request.cid, "cid")

        try:
            self._client.unpin(ctx, request.cid)
        except StorageError as e:
            logger.warning("unpin_failed", cid=request.cid, error=str(e))
            raise RpcError(grpc.StatusCode.INTERNAL, f"failed to unpin content: {e}") from e
        logger.debug("unpin_content", cid=request.cid)
        return UnpinContentResponse(success=True)

    def get_gateway_url(self, request: GetGatewayURLRequest, ctx: CallContext) -> GetGatewayURLResponse:
        _require(request.cid, "cid")

        return GetGatewayURLResponse(url=self._client.gateway_url(request.cid))
