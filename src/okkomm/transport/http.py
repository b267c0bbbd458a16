"""
HTTP transport for OK.KOMM SOAP calls.
"""

import logging
import ssl
from typing import Optional

import httpx

from okkomm.errors import TransportError

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=utf-8"
USER_AGENT = "okkomm/0.1.0"


def ssl_context(tls_root_certificates: Optional[list[bytes]] = None) -> ssl.SSLContext:
    """Default trust store plus any extra PEM root certificates."""
    context = ssl.create_default_context()
    for cert in tls_root_certificates or []:
        try:
            context.load_verify_locations(cadata=cert.decode("ascii"))
        except (ssl.SSLError, UnicodeDecodeError, ValueError) as e:
            logger.error("Error while parsing certificate: %s", e)
    return context


def _is_xml(resp: httpx.Response) -> bool:
    return "xml" in resp.headers.get("content-type", "").lower()


class OkKommTransport:
    def __init__(
        self,
        url: str,
        tls_root_certificates: Optional[list[bytes]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._client = httpx.AsyncClient(
            headers={"Content-Type": CONTENT_TYPE, "User-Agent": USER_AGENT},
            timeout=timeout,
            trust_env=False,
            verify=ssl_context(tls_root_certificates),
            transport=transport,
        )

    async def post(self, body: bytes) -> bytes:
        logger.debug("POST %s (%d bytes)", self.url, len(body))
        try:
            resp = await self._client.post(self.url, content=body)
        except httpx.HTTPError as e:
            raise TransportError(f"Error while sending SOAP request to OK.KOMM: {e}")
        if resp.status_code == 500 and _is_xml(resp):
            # a SOAP fault; the caller decodes the envelope
            logger.warning("OK.KOMM answered HTTP 500 with an XML body (%d bytes)", len(resp.content))
            return resp.content
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", resp.status_code)
        logger.debug("Response from %s: HTTP %d (%d bytes)", self.url, resp.status_code, len(resp.content))
        return resp.content

    async def close(self) -> None:
        await self._client.aclose()
