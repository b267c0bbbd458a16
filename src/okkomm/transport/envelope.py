"""
SOAP envelope construction and parsing.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar, Union

from lxml import etree
from pydantic import BaseModel, ValidationError

from okkomm.errors import SchemaDecodeError
from okkomm.models.envelope import ResponseEnvelope
from okkomm.xml import WriteXml, element_to_data, parse_document, render

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
XSD_NS = "http://www.w3.org/2001/XMLSchema"

B = TypeVar("B", bound=WriteXml)
T = TypeVar("T", bound=BaseModel)


class SoapRequest(Generic[B]):
    def __init__(self, body: B):
        self.body = body

    def write_xml(self, parent: etree._Element) -> None:
        envelope = etree.SubElement(parent, f"{{{SOAP_ENV_NS}}}Envelope", nsmap={"SOAP-ENV": SOAP_ENV_NS})
        etree.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Header")
        body = etree.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body", nsmap={"xsd": XSD_NS})
        self.body.write_xml(body)

    def to_message(self) -> bytes:
        return render(self)


class SoapResponse(Generic[T]):
    def __init__(self, envelope: ResponseEnvelope[T]):
        self.envelope = envelope

    @classmethod
    def from_str(cls, payload: Union[str, bytes], body_model: type[T]) -> SoapResponse[T]:
        root = parse_document(payload)
        data = element_to_data(root)
        if not isinstance(data, dict):
            data = {}
        header = _child(root, "Header")
        if header is not None:
            data["Header"] = "".join(header.itertext())
        try:
            envelope = ResponseEnvelope[body_model].model_validate(data)
        except ValidationError as e:
            text = payload.decode("utf-8", "replace") if isinstance(payload, bytes) else payload
            raise SchemaDecodeError(
                f"SOAP envelope does not match {body_model.__name__}: {e.error_count()} error(s)", text,
                details={"errors": e.errors(include_url=False)},
            )
        return cls(envelope)

    @property
    def header(self) -> Optional[str]:
        return self.envelope.header

    def into_inner(self) -> Optional[T]:
        """The typed body, or None when the envelope carries no Body."""
        return self.envelope.body


def _child(element: etree._Element, localname: str) -> Optional[etree._Element]:
    for child in element:
        if isinstance(child.tag, str) and etree.QName(child).localname == localname:
            return child
    return None


def build_envelope(body: WriteXml) -> bytes:
    """Wrap a payload in a SOAP envelope, ready to POST."""
    return SoapRequest(body).to_message()


def parse_envelope(payload: Union[str, bytes], body_model: type[T]) -> Optional[T]:
    """Parse a SOAP envelope. Returns None if it has no Body."""
    return SoapResponse.from_str(payload, body_model).into_inner()
