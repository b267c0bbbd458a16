"""
ZKOCXML request document: metadata, search payload, optional data payload.
"""

from __future__ import annotations

from typing import Any, Optional

from lxml import etree
from pydantic import BaseModel, ConfigDict

from okkomm.models.zkocxml import AppsInfo, Clock, ZkocxmlInfo
from okkomm.xml import XML_DECLARATION_STANDALONE, WriteXml, render

PROFILE_TAG = "XML_PROFIL"
SEARCH_TAG = "SUCHE"
DATA_SECTION_TAG = "XML_DATEN"
DATA_TAG = "DATEN"


class Request(BaseModel):
    """A ZKOCXML request. Builders return a new Request; the original is never changed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    info: ZkocxmlInfo
    request: Optional[Any] = None
    data: Optional[Any] = None

    @classmethod
    def new(
        cls,
        request: Optional[WriteXml] = None,
        apps_info: Optional[AppsInfo] = None,
        clock: Optional[Clock] = None,
    ) -> Request:
        return cls(info=ZkocxmlInfo.default(apps_info, clock), request=request)

    def _with_aktion(self, **update: Any) -> Request:
        aktion = self.info.system.aktion.model_copy(update=update)
        return self.model_copy(update={"info": self.info.with_system(aktion=aktion)})

    def with_procedure(self, verfahren: Any) -> Request:
        return self._with_aktion(verfahren=str(verfahren))

    def with_type(self, typ: Any) -> Request:
        return self._with_aktion(typ=str(typ))

    def with_execution_mode(self, ausfuehrung: Any) -> Request:
        return self._with_aktion(ausfuehrung=str(ausfuehrung))

    def with_target_region(self, ziel_ags: Any) -> Request:
        """Set AKT_ZIEL_AGS and mirror it into APPS_AGS in one update."""
        ziel_ags = str(ziel_ags)
        system = self.info.system
        info = self.info.with_system(
            aktion=system.aktion.model_copy(update={"ziel_ags": ziel_ags}),
            apps_info=system.apps_info.model_copy(update={"ags": ziel_ags}),
        )
        return self.model_copy(update={"info": info})

    def with_action(self, aktion: Any) -> Request:
        """Apply verfahren, typ, ausfuehrung and ziel_ags from an OkKommAktion."""
        return (
            self.with_procedure(aktion.verfahren)
            .with_type(aktion.typ)
            .with_execution_mode(aktion.ausfuehrung)
            .with_target_region(aktion.ziel_ags)
        )

    def with_data_payload(self, data: Optional[WriteXml]) -> Request:
        return self.model_copy(update={"data": data})

    def write_xml(self, parent: etree._Element) -> None:
        root = etree.SubElement(parent, ZkocxmlInfo.xml_tag)
        self.info.xml_system.write_xml(root)

        search = etree.SubElement(etree.SubElement(root, PROFILE_TAG), SEARCH_TAG)
        if self.request is not None:
            self.request.write_xml(search)

        if self.data is not None:
            data = etree.SubElement(etree.SubElement(root, DATA_SECTION_TAG), DATA_TAG)
            self.data.write_xml(data)

    def to_message(self) -> bytes:
        return render(self, XML_DECLARATION_STANDALONE)
