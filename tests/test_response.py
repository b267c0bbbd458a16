"""Decoding callApplicationByte replies."""

import base64

import pytest

from okkomm import (
    Base64DecodeError,
    OkKommCallApplicationByteResponse,
    ResponseError,
    SchemaDecodeError,
    TextEncodingError,
    decode_response,
)
from okkomm.models.okkomm import Base64Body
from okkomm.models.zkocxml import Fehler, ZkocxmlError, all_fields_present_error_policy

from helpers import SOAP_NS, soap_reply, zkocxml_reply


def test_decode_metadata_and_fragment():
    info, fragment = decode_response(soap_reply(zkocxml_reply("<FOO>bar</FOO>")))
    assert info.system.aktion.verfahren == "EWO"
    assert info.system.apps_info.ags == "09000011"
    assert info.system.antwort.typ == "OK"
    assert info.error() is None
    assert fragment == "<FOO>bar</FOO>"


def test_decode_without_data_block():
    info, fragment = decode_response(soap_reply(zkocxml_reply()))
    assert info.system.aktion.typ == "WEBWAHLSCHEIN"
    assert fragment is None


def test_xml_parameter_field_is_accepted():
    info, fragment = decode_response(soap_reply(zkocxml_reply("<A/>"), field="xmlParameter"))
    assert info is not None
    assert fragment == "<A/>"


def test_xml_parameter_takes_precedence():
    first = base64.b64encode(zkocxml_reply("<FIRST/>").encode()).decode()
    second = base64.b64encode(zkocxml_reply("<SECOND/>").encode()).decode()
    body = OkKommCallApplicationByteResponse(response=Base64Body(inner=first, byte_return=second))
    assert body.decode()[1] == "<FIRST/>"


def test_no_payload_field():
    body = OkKommCallApplicationByteResponse.model_validate({"callApplicationByteResponse": ""})
    assert body.decode() == (None, None)
    assert OkKommCallApplicationByteResponse().decode() == (None, None)


def test_soap_fault_has_no_payload():
    fault = (
        f'<e:Envelope xmlns:e="{SOAP_NS}"><e:Body><e:Fault><faultcode>e:Server</faultcode>'
        "<faultstring>boom</faultstring></e:Fault></e:Body></e:Envelope>"
    )
    assert decode_response(fault) == (None, None)


def test_envelope_without_body():
    with pytest.raises(ResponseError):
        decode_response(f'<e:Envelope xmlns:e="{SOAP_NS}"><e:Header/></e:Envelope>')


def test_base64_is_allowed_to_wrap_lines():
    encoded = base64.encodebytes(zkocxml_reply("<A/>").encode()).decode()
    assert "\n" in encoded
    body = OkKommCallApplicationByteResponse(response=Base64Body(byte_return=encoded))
    assert body.decode()[1] == "<A/>"


def test_invalid_base64():
    body = OkKommCallApplicationByteResponse(response=Base64Body(byte_return="!!not base64!!"))
    with pytest.raises(Base64DecodeError) as exc:
        body.decode()
    assert exc.value.data == "!!not base64!!"


def test_invalid_utf8():
    body = OkKommCallApplicationByteResponse(response=Base64Body(byte_return="//4="))
    with pytest.raises(TextEncodingError) as exc:
        body.decode()
    assert exc.value.data == b"\xff\xfe"


def test_schema_mismatch_keeps_text():
    document = "<ZKOCXML><XML_PROFIL/></ZKOCXML>"
    with pytest.raises(SchemaDecodeError) as exc:
        decode_response(soap_reply(document))
    assert exc.value.text == document


def test_schema_mismatch_in_section():
    document = "<ZKOCXML><XML_SYSTEM><SYSTEM><AKTION>oops</AKTION></SYSTEM></XML_SYSTEM></ZKOCXML>"
    with pytest.raises(SchemaDecodeError):
        decode_response(soap_reply(document))


def test_empty_antwort_section():
    document = "<ZKOCXML><XML_SYSTEM><SYSTEM><ANTWORT></ANTWORT></SYSTEM></XML_SYSTEM></ZKOCXML>"
    info, fragment = decode_response(soap_reply(document))
    assert info.system.antwort.typ is None
    assert info.system.aktion is None
    assert fragment is None


def test_pretty_printed_reply():
    document = (
        "<ZKOCXML>\n  <XML_SYSTEM>\n    <SYSTEM>\n"
        "      <AKTION>\n        <AKT_VERFAHREN>EWO</AKT_VERFAHREN>\n      </AKTION>\n"
        "      <ANTWORT>\n      </ANTWORT>\n"
        "    </SYSTEM>\n  </XML_SYSTEM>\n"
        "  <XML_DATEN>\n    <DATEN>\n      <FOO>bar</FOO>\n    </DATEN>\n  </XML_DATEN>\n"
        "</ZKOCXML>\n"
    )
    info, fragment = decode_response(soap_reply(document))
    assert info.system.aktion.verfahren == "EWO"
    assert info.system.antwort.typ is None
    assert fragment == "<FOO>bar</FOO>"


def test_error_not_reported_when_a_field_is_missing():
    fehler = "<FEHLER><FEH_TYP></FEH_TYP><FEH_TEXT></FEH_TEXT><FEH_WERT></FEH_WERT></FEHLER>"
    info, _ = decode_response(soap_reply(zkocxml_reply(fehler=fehler)))
    assert info.system.antwort.fehler.feld is None
    assert info.error() is None


def test_error_reported_when_all_fields_present():
    fehler = "<FEHLER><FEH_TYP>E</FEH_TYP><FEH_TEXT></FEH_TEXT><FEH_WERT></FEH_WERT><FEH_FELD></FEH_FELD></FEHLER>"
    info, _ = decode_response(soap_reply(zkocxml_reply(fehler=fehler)))
    assert info.error() == ZkocxmlError(typ="E", text="", wert="", feld="")


def test_error_policy():
    assert all_fields_present_error_policy(Fehler(typ="", text="", wert="", feld="")) is None
    assert all_fields_present_error_policy(Fehler(typ="E", text="Fehler", wert="1")) is None
    assert all_fields_present_error_policy(Fehler(typ="", text="", wert="", feld="ID")) == ZkocxmlError("", "", "", "ID")


def test_custom_error_policy():
    fehler = "<FEHLER><FEH_TYP>E</FEH_TYP><FEH_TEXT>kaputt</FEH_TEXT></FEHLER>"
    info, _ = decode_response(soap_reply(zkocxml_reply(fehler=fehler)))
    assert info.error() is None

    def typ_and_text(f):
        if f.typ or f.text:
            return ZkocxmlError(f.typ or "", f.text or "", f.wert or "", f.feld or "")
        return None

    assert info.error(policy=typ_and_text).text == "kaputt"
