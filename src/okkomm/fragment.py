"""
Verbatim extraction of a named block (DATEN by default) from a ZKOCXML document.

The content of the block belongs to the called application and has no schema
here, so it is copied as markup instead of being decoded into models.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, Optional, Union
from xml.sax.saxutils import escape

from lxml import etree

from okkomm.errors import SchemaDecodeError

logger = logging.getLogger(__name__)

DATA_TAG = "DATEN"


class _State(enum.Enum):
    SEARCHING = "searching"
    COPYING = "copying"
    DONE = "done"


class FragmentCopier:
    """Depth-tracking state machine over (event, element) pairs from an lxml pull parser."""

    def __init__(self, tag: str = DATA_TAG):
        self.tag = tag
        self.state = _State.SEARCHING
        self._depth = 0
        self._target_depth = 0
        self._target: Optional[etree._Element] = None
        self._fragment: Optional[str] = None

    def feed(self, events: Iterable[tuple[str, etree._Element]]) -> None:
        for event, element in events:
            if event == "start":
                self._depth += 1
                if self.state is _State.SEARCHING:
                    if etree.QName(element).localname == self.tag:
                        self.state = _State.COPYING
                        self._target = element
                        self._target_depth = self._depth
                    else:
                        logger.debug("Skipping <%s>", element.tag)
            elif event == "end":
                if self.state is _State.COPYING and self._depth == self._target_depth:
                    self._close()
                self._depth -= 1

    def finish(self) -> Optional[str]:
        """End of document. An open block is closed implicitly."""
        if self.state is _State.COPYING:
            logger.debug("Document ended inside <%s>, returning partial content", self.tag)
            self._close()
        return self._fragment

    def _close(self) -> None:
        target = self._target
        parts = [_text(target.text)]
        for child in target:
            parts.append(etree.tostring(child, encoding="unicode", with_tail=False))
            parts.append(_text(child.tail))
        self._fragment = "".join(parts)
        self._target = None
        self.state = _State.DONE


def _text(value: Optional[str]) -> str:
    # whitespace between elements is not significant
    if not value or not value.strip():
        return ""
    return escape(value.strip())


def read_message(xml: Union[str, bytes], tag: str = DATA_TAG) -> Optional[str]:
    """Return the inner markup of the first <tag> block in xml, or None if there is none."""
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    parser = etree.XMLPullParser(
        events=("start", "end"), resolve_entities=False, no_network=True, strip_cdata=False,
    )
    copier = FragmentCopier(tag)
    error: Optional[etree.XMLSyntaxError] = None
    try:
        parser.feed(data)
    except etree.XMLSyntaxError as e:
        error = e
    copier.feed(parser.read_events())
    if error is None:
        try:
            parser.close()
        except etree.XMLSyntaxError as e:
            error = e
        else:
            copier.feed(parser.read_events())
    if error is not None and copier.state is not _State.COPYING:
        raise SchemaDecodeError(f"Malformed XML while looking for <{tag}>: {error}", data.decode("utf-8", "replace"))
    return copier.finish()
