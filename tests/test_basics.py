"""Basic unit tests for the okkomm package."""

from okkomm import (
    Base64DecodeError,
    OkKommClient,
    OkKommError,
    Request,
    ResponseError,
    SchemaDecodeError,
    TextEncodingError,
    TransportError,
    XmlWriteError,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert OkKommClient is not None
    assert Request is not None


def test_error_hierarchy():
    for cls in (XmlWriteError, SchemaDecodeError, Base64DecodeError, TextEncodingError, TransportError, ResponseError):
        assert issubclass(cls, OkKommError)


def test_error_attributes():
    err = OkKommError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    decode = SchemaDecodeError("bad xml", text="<A>")
    assert decode.code == "schema_decode_error"
    assert decode.text == "<A>"

    transport = TransportError("HTTP 502", status_code=502)
    assert transport.code == "transport_error"
    assert transport.status_code == 502
    assert transport.details == {"status_code": 502}

    encoding = TextEncodingError("not utf-8", data=b"\xff")
    assert encoding.data == b"\xff"
