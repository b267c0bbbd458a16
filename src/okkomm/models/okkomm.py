"""
OK.KOMM callApplicationByte request element and response body.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from lxml import etree
from pydantic import Field

from okkomm.errors import Base64DecodeError, TextEncodingError
from okkomm.fragment import read_message
from okkomm.models.payloads import b64encode
from okkomm.models.zkocxml import ZkocxmlInfo
from okkomm.xml import XmlModel, parse_model

OKK_NS = "urn:akdb:ok.komm:komm-service"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"


@dataclass(frozen=True)
class OkKommCallApplicationByte:
    """The byte call: a whole XML document as base64 in okk:xmlParameter."""

    body: Union[str, bytes]

    def write_xml(self, parent: etree._Element) -> None:
        call = etree.SubElement(parent, f"{{{OKK_NS}}}callApplicationByte", nsmap={"okk": OKK_NS})
        param = etree.SubElement(call, f"{{{OKK_NS}}}xmlParameter", nsmap={"xsi": XSI_NS})
        param.set(f"{{{XSI_NS}}}type", "xsd:base64Binary")
        param.text = b64encode(self.body)


class Base64Body(XmlModel):
    xml_tag: ClassVar[str] = "callApplicationByteResponse"

    inner: Optional[str] = Field(default=None, alias="xmlParameter")
    byte_return: Optional[str] = Field(default=None, alias="callApplicationByteReturn")


def decode_base64_text(value: str) -> str:
    """Decode a base64 payload into the XML document text it carries."""
    compact = "".join(value.split())
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise Base64DecodeError(f"Invalid base64 payload: {e}", value)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextEncodingError(f"Payload is not valid UTF-8: {e}", raw)


class SoapFault(XmlModel):
    xml_tag: ClassVar[str] = "Fault"

    code: Optional[str] = Field(default=None, alias="faultcode")
    message: Optional[str] = Field(default=None, alias="faultstring")


class OkKommCallApplicationByteResponse(XmlModel):
    xml_tag: ClassVar[str] = "Body"

    response: Optional[Base64Body] = Field(default=None, alias="callApplicationByteResponse")
    fault: Optional[SoapFault] = Field(default=None, alias="Fault")

    def payload(self) -> Optional[str]:
        """The base64 text, from xmlParameter or else callApplicationByteReturn."""
        if self.response is None:
            return None
        if self.response.inner is not None:
            return self.response.inner
        return self.response.byte_return

    def decode(self) -> tuple[Optional[ZkocxmlInfo], Optional[str]]:
        """Return (metadata, DATEN fragment); (None, None) if there is no payload."""
        encoded = self.payload()
        if encoded is None:
            return None, None
        xml = decode_base64_text(encoded)
        info = parse_model(ZkocxmlInfo, xml)
        return info, read_message(xml)
