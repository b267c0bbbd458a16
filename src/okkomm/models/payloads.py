"""
Payloads that can be embedded in a ZKOCXML document.

Inline payloads are written as-is into the SUCHE/DATEN slot. RawBase64 and
ContentContainer carry an already rendered XML document as base64 text.
"""

from __future__ import annotations

import base64
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Union

from lxml import etree

from okkomm.xml import WriteXml, XmlModel, append_raw, render_to_string

RAW_BASE64_TAG = "OK_KOMM_RAW_BASE64"


def b64encode(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("ascii")


@dataclass(frozen=True)
class RawRequest:
    """Text or serialized XML inserted verbatim into its slot."""

    body: str

    def write_xml(self, parent: etree._Element) -> None:
        append_raw(parent, self.body)


@dataclass(frozen=True)
class BytesRequest:
    body: bytes

    def write_xml(self, parent: etree._Element) -> None:
        append_raw(parent, self.body.decode("utf-8"))


@dataclass(frozen=True)
class ElementRequest:
    """A typed payload: an lxml element or an XmlModel."""

    element: Union[etree._Element, XmlModel]

    def write_xml(self, parent: etree._Element) -> None:
        if isinstance(self.element, XmlModel):
            self.element.write_xml(parent)
        else:
            element = deepcopy(self.element)
            element.tail = None
            parent.append(element)


@dataclass(frozen=True)
class RawBase64:
    """A serialized XML document carried as base64 inside CDATA."""

    body: str

    @classmethod
    def of(cls, payload: WriteXml) -> RawBase64:
        return cls(body=render_to_string(payload))

    def write_xml(self, parent: etree._Element) -> None:
        etree.SubElement(parent, RAW_BASE64_TAG).text = etree.CDATA(b64encode(self.body))


@dataclass(frozen=True)
class ContentContainerMessage:
    content_type: str
    ref_id: str
    content: str


@dataclass(frozen=True)
class ContentContainerAttachment:
    content_type: str
    ref_id: str
    content: bytes


def _write_item(group: etree._Element, tag: str, content_type: str, ref_id: str, content: Union[str, bytes]) -> None:
    item = etree.SubElement(group, tag)
    item.set("contentType", content_type)
    item.set("refId", ref_id)
    etree.SubElement(item, RAW_BASE64_TAG).text = etree.CDATA(b64encode(content))


@dataclass(frozen=True)
class ContentContainer:
    messages: tuple[ContentContainerMessage, ...] = ()
    attachments: tuple[ContentContainerAttachment, ...] = field(default=())

    def write_xml(self, parent: etree._Element) -> None:
        container = etree.SubElement(parent, "OK_KOMM_CONTENTCONTAINER")
        messages = etree.SubElement(container, "MESSAGES", type="include")
        for message in self.messages:
            _write_item(messages, "MESSAGE", message.content_type, message.ref_id, message.content)
        if self.attachments:
            attachments = etree.SubElement(container, "ATTACHMENTS", type="include")
            for attachment in self.attachments:
                _write_item(attachments, "ATTACHMENT", attachment.content_type, attachment.ref_id, attachment.content)


def content_container_for(
    payload: WriteXml,
    ref_id: str,
    attachments: Optional[list[ContentContainerAttachment]] = None,
) -> ContentContainer:
    """Wrap a rendered payload as the single text/xml message of a container."""
    return ContentContainer(
        messages=(ContentContainerMessage(content_type="text/xml", ref_id=ref_id, content=render_to_string(payload)),),
        attachments=tuple(attachments or ()),
    )
