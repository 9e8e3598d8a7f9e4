# src/pinstore/contracts/messages.py
"""Request and response messages for the pinstore gRPC service.

Messages follow proto3 conventions: every field has a zero-value default
(empty bytes, empty string, False, 0) and "unset" is indistinguishable from
"empty". Required-field checks are the servicer's job, not the schema's.

On the wire each message is JSON with bytes fields base64-encoded.
"""

from pydantic import BaseModel


class _Message(BaseModel):
    """Base for all service messages: frozen, strict about unknown fields."""

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "ser_json_bytes": "base64",
        "val_json_bytes": "base64",
    }


class UploadContentRequest(_Message):
    data: bytes = b""
    filename: str = ""


class UploadContentResponse(_Message):
    cid: str = ""
    size_bytes: int = 0


class UploadProtoRequest(_Message):
    proto_data: bytes = b""
    proto_type: str = ""


class UploadProtoResponse(_Message):
    cid: str = ""
    size_bytes: int = 0


class GetContentRequest(_Message):
    cid: str = ""


class GetContentResponse(_Message):
    data: bytes = b""
    size_bytes: int = 0


class GetProtoRequest(_Message):
    cid: str = ""


class GetProtoResponse(_Message):
    proto_data: bytes = b""


class PinContentRequest(_Message):
    cid: str = ""


class PinContentResponse(_Message):
    success: bool = False


class UnpinContentRequest(_Message):
    cid: str = ""


class UnpinContentResponse(_Message):
    success: bool = False


class GetGatewayURLRequest(_Message):
    cid: str = ""


class GetGatewayURLResponse(_Message):
    url: str = ""
