"""
OkKommClient: builds ZKOCXML requests, sends them and decodes the replies.
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar, Union

import httpx
from pydantic import BaseModel

from okkomm.errors import ResponseError
from okkomm.models.okkomm import OkKommCallApplicationByte, OkKommCallApplicationByteResponse
from okkomm.models.payloads import ContentContainerAttachment, RawBase64, content_container_for
from okkomm.models.zkocxml import AppsInfo, Clock, ZkocxmlInfo
from okkomm.request import Request
from okkomm.transport.envelope import SoapRequest, SoapResponse
from okkomm.transport.http import OkKommTransport
from okkomm.xml import WriteXml, parse_model

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class OkKommAktion(BaseModel):
    """Which procedure to run, and where (AKTION section)."""

    verfahren: str
    typ: str
    ausfuehrung: str
    ziel_ags: str


def _response_body(payload: Union[str, bytes]) -> OkKommCallApplicationByteResponse:
    body = SoapResponse.from_str(payload, OkKommCallApplicationByteResponse).into_inner()
    if body is None:
        raise ResponseError("SOAP response from OK.KOMM has no body")
    return body


def decode_response(payload: Union[str, bytes]) -> tuple[Optional[ZkocxmlInfo], Optional[str]]:
    """Unwrap a SOAP reply and decode its ZKOCXML payload into (metadata, fragment)."""
    return _response_body(payload).decode()


class OkKommClient:
    def __init__(
        self,
        url: str,
        tls_root_certificates: Optional[list[bytes]] = None,
        timeout: float = 30.0,
        clock: Optional[Clock] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._clock = clock
        self._tls_root_certificates = tls_root_certificates
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[OkKommTransport] = None

    @property
    def http(self) -> OkKommTransport:
        """The HTTP transport, created on first use; building requests never needs it."""
        if self._http is None:
            self._http = OkKommTransport(
                self.url, self._tls_root_certificates, timeout=self._timeout, transport=self._transport,
            )
        return self._http

    async def __aenter__(self) -> OkKommClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None

    def soap_body(
        self,
        info: OkKommAktion,
        request: Optional[WriteXml] = None,
        data: Optional[WriteXml] = None,
        apps_info: Optional[AppsInfo] = None,
    ) -> SoapRequest[OkKommCallApplicationByte]:
        zkocxml = (
            Request.new(request, apps_info, clock=self._clock)
            .with_action(info)
            .with_data_payload(data)
            .to_message()
        )
        return SoapRequest(OkKommCallApplicationByte(zkocxml))

    def request_soap(self, soap_request: SoapRequest) -> bytes:
        return soap_request.to_message()

    def request(self, info: OkKommAktion, body: WriteXml, apps_info: Optional[AppsInfo] = None) -> bytes:
        """Request with body written inline into SUCHE."""
        return self.request_soap(self.soap_body(info, body, None, apps_info))

    def request_xml_base64(self, info: OkKommAktion, body: WriteXml, apps_info: Optional[AppsInfo] = None) -> bytes:
        """Request with body rendered, then carried as base64 in OK_KOMM_RAW_BASE64."""
        return self.request(info, RawBase64.of(body), apps_info)

    def request_xml_in_content_container(
        self,
        info: OkKommAktion,
        body: WriteXml,
        attachments: Optional[list[ContentContainerAttachment]],
        ref_id: str,
        apps_info: Optional[AppsInfo] = None,
    ) -> bytes:
        """Request with body as the single text/xml message of a content container."""
        return self.request(info, content_container_for(body, ref_id, attachments), apps_info)

    @staticmethod
    def handle_response(payload: Union[str, bytes], response_model: Optional[type[R]] = None):
        """Decode a SOAP reply into the DATEN fragment, or into response_model when given."""
        body = _response_body(payload)
        if body.fault is not None:
            raise ResponseError(f"SOAP fault from OK.KOMM: {body.fault.code}: {body.fault.message}")
        info, xml = body.decode()
        if info is not None:
            error = info.error()
            if error is not None:
                logger.warning("OK.KOMM reported an error: %s %s (%s=%s)", error.typ, error.text, error.feld, error.wert)
        if xml is None:
            raise ResponseError(f"OK.KOMM result cannot be parsed: {info!r}", info)
        if response_model is None:
            return xml
        return parse_model(response_model, xml)

    async def _send(self, message: bytes, response_model: Optional[type[R]]):
        payload = await self.http.post(message)
        return self.handle_response(payload, response_model)

    async def send_request_xml(
        self,
        info: OkKommAktion,
        body: WriteXml,
        response_model: Optional[type[R]] = None,
        apps_info: Optional[AppsInfo] = None,
    ):
        return await self._send(self.request(info, body, apps_info), response_model)

    async def send_request_xml_base64(
        self,
        info: OkKommAktion,
        body: WriteXml,
        response_model: Optional[type[R]] = None,
        apps_info: Optional[AppsInfo] = None,
    ):
        return await self._send(self.request_xml_base64(info, body, apps_info), response_model)

    async def send_request_xml_in_content_container(
        self,
        info: OkKommAktion,
        body: WriteXml,
        attachments: Optional[list[ContentContainerAttachment]],
        ref_id: str,
        response_model: Optional[type[R]] = None,
        apps_info: Optional[AppsInfo] = None,
    ):
        message = self.request_xml_in_content_container(info, body, attachments, ref_id, apps_info)
        return await self._send(message, response_model)
