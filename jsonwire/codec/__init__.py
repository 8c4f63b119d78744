"""Parameter marshaling: operation signatures, request decoding, reply encoding."""

from jsonwire.codec.signature import (
    VOID,
    BodyStyle,
    OperationSignature,
    Parameter,
    TypeDescriptor,
    validate_signature,
)
from jsonwire.codec.enums import decode_enum, encode_enum
from jsonwire.codec.converter import from_wire, to_wire
from jsonwire.codec.decoder import RequestDecoder, decode
from jsonwire.codec.encoder import JSON_MEDIA_TYPE, WireMessage, dump_bytes, encode

__all__ = [
    "VOID",
    "BodyStyle",
    "OperationSignature",
    "Parameter",
    "TypeDescriptor",
    "validate_signature",
    "decode_enum",
    "encode_enum",
    "from_wire",
    "to_wire",
    "RequestDecoder",
    "decode",
    "JSON_MEDIA_TYPE",
    "WireMessage",
    "dump_bytes",
    "encode",
]
