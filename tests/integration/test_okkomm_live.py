"""
Integration tests against a real OK.KOMM test endpoint.

Requires environment variables:
  OKKOMM_URL          KomService endpoint, e.g. http://localhost:8380/okkommetest/services/KomService
  OKKOMM_ZIEL_AGS     (optional) target AGS, defaults to 09000011
  OKKOMM_CA_FILE      (optional) extra PEM root certificate

Run: OKKOMM_INTEGRATION=1 pytest tests/integration/ -v
"""

import os
from pathlib import Path

import pytest

from okkomm import OkKommAktion, OkKommClient, RawRequest, decode_response

SKIP = not os.environ.get("OKKOMM_INTEGRATION")
URL = os.environ.get("OKKOMM_URL", "http://localhost:8380/okkommetest/services/KomService")
ZIEL_AGS = os.environ.get("OKKOMM_ZIEL_AGS", "09000011")
CA_FILE = os.environ.get("OKKOMM_CA_FILE")

pytestmark = pytest.mark.skipif(SKIP, reason="OKKOMM_INTEGRATION not set")

ACTION = OkKommAktion(verfahren="EWO", typ="WEBWAHLSCHEIN", ausfuehrung="ABRUFEN", ziel_ags=ZIEL_AGS)


def make_client() -> OkKommClient:
    certs = [Path(CA_FILE).read_bytes()] if CA_FILE else None
    return OkKommClient(URL, tls_root_certificates=certs)


class TestMandantenanfrage:
    @pytest.mark.asyncio
    async def test_reply_decodes(self):
        async with make_client() as client:
            message = client.request(ACTION, RawRequest("<MANDANTENANFRAGE></MANDANTENANFRAGE>"))
            reply = await client.http.post(message)

        info, _ = decode_response(reply)
        assert info is not None
        assert info.system.aktion.verfahren == "EWO"
