"""
OK.KOMM error types.

Application errors reported inside a decoded ANTWORT/FEHLER block are data,
not exceptions; see ZkocxmlInfo.error().
"""

from typing import Any, Optional


class OkKommError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class XmlWriteError(OkKommError):
    def __init__(self, message: str):
        super().__init__("xml_write_error", message)


class SchemaDecodeError(OkKommError):
    """The text does not match the expected typed structure."""

    def __init__(self, message: str, text: str, details: Optional[dict[str, Any]] = None):
        super().__init__("schema_decode_error", message, details)
        self.text = text


class Base64DecodeError(OkKommError):
    def __init__(self, message: str, data: str):
        super().__init__("base64_decode_error", message)
        self.data = data


class TextEncodingError(OkKommError):
    def __init__(self, message: str, data: bytes):
        super().__init__("text_encoding_error", message)
        self.data = data


class TransportError(OkKommError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("transport_error", message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code


class ResponseError(OkKommError):
    """A structurally valid reply that carries no usable result."""

    def __init__(self, message: str, info: Any = None):
        super().__init__("response_error", message)
        self.info = info
