"""
okkomm: OK.KOMM client for Python.

Builds ZKOCXML requests, carries them in the SOAP callApplicationByte call
and decodes the replies into metadata plus the opaque DATEN fragment.
"""

from okkomm.client import OkKommAktion, OkKommClient, decode_response
from okkomm.errors import (
    Base64DecodeError,
    OkKommError,
    ResponseError,
    SchemaDecodeError,
    TextEncodingError,
    TransportError,
    XmlWriteError,
)
from okkomm.fragment import read_message
from okkomm.models.okkomm import OkKommCallApplicationByte, OkKommCallApplicationByteResponse
from okkomm.models.payloads import (
    BytesRequest,
    ContentContainer,
    ContentContainerAttachment,
    ContentContainerMessage,
    ElementRequest,
    RawBase64,
    RawRequest,
)
from okkomm.models.zkocxml import AppsInfo, ZkocxmlError, ZkocxmlInfo, all_fields_present_error_policy
from okkomm.request import Request
from okkomm.transport.envelope import SoapRequest, SoapResponse
from okkomm.xml import NoPayload, WriteXml, XmlModel

__version__ = "0.1.0"
__all__ = [
    "OkKommClient",
    "OkKommAktion",
    "decode_response",
    "Request",
    "AppsInfo",
    "ZkocxmlInfo",
    "ZkocxmlError",
    "all_fields_present_error_policy",
    "RawRequest",
    "BytesRequest",
    "ElementRequest",
    "RawBase64",
    "ContentContainer",
    "ContentContainerMessage",
    "ContentContainerAttachment",
    "OkKommCallApplicationByte",
    "OkKommCallApplicationByteResponse",
    "SoapRequest",
    "SoapResponse",
    "read_message",
    "NoPayload",
    "WriteXml",
    "XmlModel",
    "OkKommError",
    "XmlWriteError",
    "SchemaDecodeError",
    "Base64DecodeError",
    "TextEncodingError",
    "TransportError",
    "ResponseError",
]
