import base64

SOAP_NS = "http://schemas.xmlsoap.org/soap/envelope/"
OKK_NS = "urn:akdb:ok.komm:komm-service"


def soap_reply(document, field="callApplicationByteReturn"):
    """A SOAP reply as OK.KOMM sends it, carrying document as base64."""
    if isinstance(document, str):
        document = document.encode("utf-8")
    encoded = base64.b64encode(document).decode("ascii")
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<soapenv:Envelope xmlns:soapenv="{SOAP_NS}"><soapenv:Body>'
        f'<ns1:callApplicationByteResponse xmlns:ns1="{OKK_NS}">'
        f"<{field}>{encoded}</{field}>"
        f"</ns1:callApplicationByteResponse></soapenv:Body></soapenv:Envelope>"
    ).encode("utf-8")


def zkocxml_reply(daten=None, fehler=""):
    """A ZKOCXML reply document with an optional DATEN block."""
    data = f"<XML_DATEN><DATEN>{daten}</DATEN></XML_DATEN>" if daten is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        "<ZKOCXML><XML_SYSTEM><SYSTEM>"
        "<AKTION><AKT_VERFAHREN>EWO</AKT_VERFAHREN><AKT_TYP>WEBWAHLSCHEIN</AKT_TYP>"
        "<AKT_AUSFUEHRUNG>ABRUFEN</AKT_AUSFUEHRUNG><AKT_ZIEL_AGS>09000011</AKT_ZIEL_AGS></AKTION>"
        "<AKT_LOGIN><AKT_TECHUSER></AKT_TECHUSER><AKT_TECHPWD></AKT_TECHPWD></AKT_LOGIN>"
        f"<ANTWORT><ANT_TYP>OK</ANT_TYP>{fehler}</ANTWORT>"
        "<APPS_INFO><APPS_TYP>DGS</APPS_TYP><APPS_AGS>09000011</APPS_AGS></APPS_INFO>"
        "</SYSTEM></XML_SYSTEM>"
        "<XML_PROFIL><SUCHE/></XML_PROFIL>"
        f"{data}</ZKOCXML>"
    )
