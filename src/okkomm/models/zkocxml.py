"""
ZKOCXML metadata sections: XML_SYSTEM/SYSTEM/{AKTION, AKT_LOGIN, ANTWORT, APPS_INFO}.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, ClassVar, Optional
from zoneinfo import ZoneInfo

from pydantic import Field

from okkomm.xml import XmlModel

BERLIN = ZoneInfo("Europe/Berlin")

APPS_TYP = "DGS"
APPS_NAME = "Digital Gov as a Service"
APPS_VERSION = "2023.4.0"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AppsInfo(XmlModel):
    xml_tag: ClassVar[str] = "APPS_INFO"

    typ: Optional[str] = Field(default=None, alias="APPS_TYP")
    name: Optional[str] = Field(default=None, alias="APPS_NAME")
    version: Optional[str] = Field(default=None, alias="APPS_VERSION")
    ags: Optional[str] = Field(default=None, alias="APPS_AGS")
    datum: Optional[str] = Field(default=None, alias="APPS_DATUM")
    uhrzeit: Optional[str] = Field(default=None, alias="APPS_UHRZEIT")
    request_id: Optional[str] = Field(default=None, alias="APPS_REQUEST_ID")
    source_id: Optional[str] = Field(default=None, alias="APPS_SOURCE_ID")
    kennung: Optional[str] = Field(default=None, alias="APPS_KENNUNG")
    ip_adresse: Optional[str] = Field(default=None, alias="APPS_IP_ADRESSE")
    ziel_url: Optional[str] = Field(default=None, alias="APPS_ZIEL_URL")
    return_queue: Optional[str] = Field(default=None, alias="APPS_RETURN_QUEUE")

    @classmethod
    def default(cls, clock: Optional[Clock] = None) -> AppsInfo:
        """Default application info, stamped with the current Berlin civil time."""
        now = (clock or utc_now)().astimezone(BERLIN)
        return cls(
            typ=APPS_TYP,
            name=APPS_NAME,
            version=APPS_VERSION,
            ags="",
            datum=now.strftime("%d.%m.%Y"),
            uhrzeit=now.strftime("%H:%M:%S"),
            request_id="",
            source_id="",
            kennung="",
            ip_adresse="",
            ziel_url="",
            return_queue="",
        )


class Fehler(XmlModel):
    xml_tag: ClassVar[str] = "FEHLER"

    typ: Optional[str] = Field(default=None, alias="FEH_TYP")
    text: Optional[str] = Field(default=None, alias="FEH_TEXT")
    wert: Optional[str] = Field(default=None, alias="FEH_WERT")
    feld: Optional[str] = Field(default=None, alias="FEH_FELD")


class Aktion(XmlModel):
    xml_tag: ClassVar[str] = "AKTION"

    verfahren: Optional[str] = Field(default=None, alias="AKT_VERFAHREN")
    typ: Optional[str] = Field(default=None, alias="AKT_TYP")
    ausfuehrung: Optional[str] = Field(default=None, alias="AKT_AUSFUEHRUNG")
    ziel_ags: Optional[str] = Field(default=None, alias="AKT_ZIEL_AGS")


class Login(XmlModel):
    xml_tag: ClassVar[str] = "AKT_LOGIN"

    techuser: Optional[str] = Field(default=None, alias="AKT_TECHUSER")
    techpwd: Optional[str] = Field(default=None, alias="AKT_TECHPWD")


class Antwort(XmlModel):
    xml_tag: ClassVar[str] = "ANTWORT"

    typ: Optional[str] = Field(default=None, alias="ANT_TYP")
    apps: Optional[str] = Field(default=None, alias="ANT_APPS")
    struktur: Optional[str] = Field(default=None, alias="ANT_STRUKTUR")
    datum: Optional[str] = Field(default=None, alias="ANT_DATUM")
    uhrzeit: Optional[str] = Field(default=None, alias="ANT_UHRZEIT")
    fehler: Optional[Fehler] = Field(default=None, alias="FEHLER")


class System(XmlModel):
    xml_tag: ClassVar[str] = "SYSTEM"

    aktion: Optional[Aktion] = Field(default=None, alias="AKTION")
    akt_login: Optional[Login] = Field(default=None, alias="AKT_LOGIN")
    antwort: Optional[Antwort] = Field(default=None, alias="ANTWORT")
    apps_info: Optional[AppsInfo] = Field(default=None, alias="APPS_INFO")


class XmlSystem(XmlModel):
    xml_tag: ClassVar[str] = "XML_SYSTEM"

    system: System = Field(alias="SYSTEM")


@dataclass(frozen=True)
class ZkocxmlError:
    """An application error reported in ANTWORT/FEHLER."""

    typ: str
    text: str
    wert: str
    feld: str


ErrorPolicy = Callable[[Fehler], Optional[ZkocxmlError]]


def all_fields_present_error_policy(fehler: Fehler) -> Optional[ZkocxmlError]:
    """Report an error only if all four FEH_* fields are present and one is non-empty.

    A FEHLER block with any field missing is not reported at all, even when
    the other fields carry values.
    """
    if fehler.typ is None or fehler.text is None or fehler.wert is None or fehler.feld is None:
        return None
    if not (fehler.typ or fehler.text or fehler.wert or fehler.feld):
        return None
    return ZkocxmlError(typ=fehler.typ, text=fehler.text, wert=fehler.wert, feld=fehler.feld)


class ZkocxmlInfo(XmlModel):
    """Metadata part of a ZKOCXML document."""

    xml_tag: ClassVar[str] = "ZKOCXML"

    xml_system: XmlSystem = Field(alias="XML_SYSTEM")

    @classmethod
    def default(cls, apps_info: Optional[AppsInfo] = None, clock: Optional[Clock] = None) -> ZkocxmlInfo:
        return cls(
            xml_system=XmlSystem(
                system=System(
                    aktion=Aktion(verfahren="", typ="", ausfuehrung="", ziel_ags=""),
                    akt_login=Login(techuser="", techpwd=""),
                    antwort=Antwort(typ="", apps="", struktur="", datum="", uhrzeit=""),
                    apps_info=apps_info if apps_info is not None else AppsInfo.default(clock),
                )
            )
        )

    @property
    def system(self) -> System:
        return self.xml_system.system

    def with_system(self, **update) -> ZkocxmlInfo:
        system = self.system.model_copy(update=update)
        return self.model_copy(update={"xml_system": self.xml_system.model_copy(update={"system": system})})

    def error(self, policy: ErrorPolicy = all_fields_present_error_policy) -> Optional[ZkocxmlError]:
        antwort = self.system.antwort
        if antwort is None or antwort.fehler is None:
            return None
        return policy(antwort.fehler)
