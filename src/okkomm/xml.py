"""
XML building blocks shared by the OK.KOMM codecs.

Documents are assembled as lxml trees and serialized once. Anything that can
be embedded in a document implements the WriteXml protocol: it appends its
own markup to a parent element.
"""

from __future__ import annotations

import re
import typing
from typing import Any, ClassVar, Optional, Protocol, TypeVar, Union, runtime_checkable

from lxml import etree
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from okkomm.errors import SchemaDecodeError, XmlWriteError

XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8"?>'
XML_DECLARATION_STANDALONE = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

RAW_SLOT_TAG = "OKKOMM_RAW_SLOT"
RAW_SLOT_ATTR = "markup"
# lxml escapes ">" in attribute values, so a slot ends at the first "/>"
_RAW_SLOT_RE = re.compile(rb"<" + RAW_SLOT_TAG.encode("ascii") + rb"\b[^>]*/>")

M = TypeVar("M", bound=BaseModel)


@runtime_checkable
class WriteXml(Protocol):
    def write_xml(self, parent: etree._Element) -> None: ...


class NoPayload:
    """Renders nothing. Stands in for an empty payload slot."""

    def write_xml(self, parent: etree._Element) -> None:
        return None


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True)


def write_field(parent: etree._Element, name: str, value: Optional[str]) -> etree._Element:
    """Write `<name>value</name>`, or `<name/>` when value is None."""
    el = etree.SubElement(parent, name)
    if value is not None:
        el.text = value
    return el


def append_raw(parent: etree._Element, markup: str) -> etree._Element:
    """Reserve a slot in parent for markup that is written out unchanged.

    The slot is an empty placeholder element holding the markup in an
    attribute; serialize() replaces it with the markup itself.
    """
    return etree.SubElement(parent, RAW_SLOT_TAG, {RAW_SLOT_ATTR: markup})


def serialize(element: etree._Element) -> bytes:
    try:
        raw = [slot.get(RAW_SLOT_ATTR).encode("utf-8") for slot in element.iter(RAW_SLOT_TAG)]
        out = etree.tostring(element, encoding="UTF-8", xml_declaration=False, with_tail=False)
    except (etree.LxmlError, ValueError) as e:
        raise XmlWriteError(f"Failed to serialize <{element.tag}>: {e}")
    if not raw:
        return out
    # slots serialize in document order, the same order iter() found them
    markup = iter(raw)
    return _RAW_SLOT_RE.sub(lambda _: next(markup), out)


def _write_into_holder(payload: WriteXml) -> etree._Element:
    holder = etree.Element("holder")
    try:
        payload.write_xml(holder)
    except (etree.LxmlError, ValueError, TypeError) as e:
        raise XmlWriteError(f"Failed to write {type(payload).__name__}: {e}")
    return holder


def render(payload: WriteXml, declaration: Optional[bytes] = XML_DECLARATION) -> bytes:
    """Serialize the single root element a payload writes as a document."""
    holder = _write_into_holder(payload)
    if len(holder) != 1:
        raise XmlWriteError(f"{type(payload).__name__} must write exactly one root element, wrote {len(holder)}")
    return (declaration or b"") + serialize(holder[0])


def render_to_string(payload: WriteXml) -> str:
    """Serialize the markup a payload writes, without a wrapping element."""
    holder = _write_into_holder(payload)
    parts = [holder.text or ""]
    for child in holder:
        parts.append(serialize(child).decode("utf-8"))
        parts.append(child.tail or "")
    return "".join(parts)


def element_to_data(element: etree._Element) -> Union[str, dict[str, Any]]:
    """Map an element to plain data for model validation.

    Leaf elements become their text ("" when empty). Elements with children
    become a dict keyed by local tag name; the first occurrence of a repeated
    tag wins.
    """
    children = [c for c in element if isinstance(c.tag, str)]
    if not children:
        return element.text or ""
    data: dict[str, Any] = {}
    for child in children:
        data.setdefault(etree.QName(child).localname, element_to_data(child))
    return data


def parse_document(text: Union[str, bytes]) -> etree._Element:
    if isinstance(text, str):
        text = text.encode("utf-8")
    try:
        return etree.fromstring(text, _parser())
    except etree.XMLSyntaxError as e:
        raise SchemaDecodeError(f"Malformed XML: {e}", text.decode("utf-8", "replace"))


def parse_model(model: type[M], text: Union[str, bytes]) -> M:
    """Decode an XML document into model, ignoring the root element's name."""
    root = parse_document(text)
    data = element_to_data(root)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raw = text.decode("utf-8", "replace") if isinstance(text, bytes) else text
        raise SchemaDecodeError(
            f"XML does not match {model.__name__}: {e.error_count()} error(s)", raw,
            details={"errors": e.errors(include_url=False)},
        )


def _section_type(annotation: Any) -> Optional[type[XmlModel]]:
    for candidate in (annotation, *typing.get_args(annotation)):
        if isinstance(candidate, type) and issubclass(candidate, XmlModel):
            return candidate
    return None


class XmlModel(BaseModel):
    """Immutable XML section.

    Field aliases are the child tag names; fields are written in declaration
    order. Leaf fields are always written (see write_field), nested sections
    only when set.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    xml_tag: ClassVar[str] = ""

    @model_validator(mode="before")
    @classmethod
    def empty_section(cls, data: Any) -> Any:
        # <ANTWORT></ANTWORT> decodes as text and means a section with no values
        if isinstance(data, str) and not data.strip():
            return {}
        return data

    def write_xml(self, parent: etree._Element, tag: Optional[str] = None) -> None:
        el = etree.SubElement(parent, tag or self.xml_tag)
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            child_tag = field.alias or name
            if isinstance(value, XmlModel):
                value.write_xml(el, child_tag)
            elif value is None and _section_type(field.annotation) is not None:
                continue
            else:
                write_field(el, child_tag, value)
