# src/pinstore/rpc/server.py
"""gRPC server bootstrap for the pinstore service.

One worker thread serves each in-flight RPC. Messages travel as JSON
(see pinstore.contracts.messages); the standard gRPC health service is
registered alongside the storage service.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable
from concurrent import futures
from typing import Any

import grpc
import structlog
from grpc_health.v1 import health, health_pb2, health_pb2_grpc
from pydantic import BaseModel

from pinstore.clients.factory import create_storage_client
from pinstore.contracts.context import CallContext
from pinstore.core.config import DEFAULT_MAX_MESSAGE_BYTES, ServiceSettings, redacted_settings
from pinstore.rpc.errors import RpcError
from pinstore.rpc.methods import METHODS, serialize_message
from pinstore.rpc.servicer import SERVICE_NAME, StorageServicer

logger = structlog.get_logger(__name__)


def call_context_from_grpc(context: grpc.ServicerContext) -> CallContext:
    """Build a CallContext that follows the RPC's deadline and termination."""
    ctx = CallContext(timeout=context.time_remaining())
    if not context.add_callback(ctx.cancel):
        # RPC already terminated
        ctx.cancel()
    return ctx


def _unary_handler(
    method: Callable[[Any, CallContext], BaseModel],
    request_type: type[BaseModel],
) -> grpc.RpcMethodHandler:
    def handle(request: BaseModel, context: grpc.ServicerContext) -> BaseModel:
        ctx = call_context_from_grpc(context)
        try:
            return method(request, ctx)
        except RpcError as e:
            context.abort(e.code, e.details)
            raise  # abort() raises; never reached

    return grpc.unary_unary_rpc_method_handler(
        handle,
        request_deserializer=request_type.model_validate_json,
        response_serializer=serialize_message,
    )


def build_server(
    servicer: StorageServicer,
    *,
    address: str,
    max_workers: int = 10,
    max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES,
) -> tuple[grpc.Server, int]:
    """Create (but do not start) a gRPC server exposing the servicer.

    Args:
        servicer: Storage servicer to expose
        address: Bind address, e.g. "[::]:9093" ("[::]:0" for an ephemeral port)
        max_workers: Thread pool size, i.e. concurrent RPCs
        max_message_bytes: Max send/receive message size

    Returns:
        (server, bound_port)

    Raises:
        RuntimeError: If the address cannot be bound
    """
    server = grpc.server(
        futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pinstore-rpc"),
        options=[
            ("grpc.max_receive_message_length", max_message_bytes),
            ("grpc.max_send_message_length", max_message_bytes),
        ],
    )

    handlers = {m.name: _unary_handler(getattr(servicer, m.handler), m.request_type) for m in METHODS}
    server.add_generic_rpc_handlers((grpc.method_handlers_generic_handler(SERVICE_NAME, handlers),))

    health_servicer = health.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_servicer, server)
    health_servicer.set("", health_pb2.HealthCheckResponse.SERVING)
    health_servicer.set(SERVICE_NAME, health_pb2.HealthCheckResponse.SERVING)

    port = server.add_insecure_port(address)
    if port == 0:
        raise RuntimeError(f"Failed to bind gRPC server to {address}")
    return server, port


def _wait_for_shutdown_signal() -> None:
    """Block until SIGINT or SIGTERM arrives."""
    stop = threading.Event()
    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}

    def _handle(signum: int, frame: Any) -> None:
        logger.info("Received shutdown signal", signal=signal.Signals(signum).name)
        stop.set()

    for sig in previous:
        signal.signal(sig, _handle)
    try:
        stop.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def serve(settings: ServiceSettings) -> None:
    """Run the service until SIGINT/SIGTERM, then stop gracefully."""
    logger.info("Starting pinstore", settings=redacted_settings(settings))
    client = create_storage_client(settings)
    try:
        server, port = build_server(
            StorageServicer(client),
            address=f"[::]:{settings.grpc_port}",
            max_workers=settings.max_workers,
            max_message_bytes=settings.max_message_bytes,
        )
        server.start()
        logger.info("IPFS gRPC server listening", port=port, remote_backend=settings.use_remote_backend)

        _wait_for_shutdown_signal()

        logger.info("Shutting down IPFS service")
        server.stop(settings.shutdown_grace_seconds).wait()
        logger.info("IPFS service stopped")
    finally:
        client.close()
