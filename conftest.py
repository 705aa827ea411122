import json
from typing import Any, Dict, List, Mapping, Optional

import pytest

from zatca_service.core.http_client import HttpResponse


class FakeHttpClient:
    """
    Transporte de teste: guarda as requisições e devolve respostas pré-definidas.
    """

    def __init__(self, status_code: int = 200, body: Any = None, raises: Optional[Exception] = None):
        self.status_code = status_code
        self.body = {} if body is None else body
        self.raises = raises
        self.calls: List[Dict[str, Any]] = []

    def send(self, method: str, url: str, headers: Mapping[str, str], body: Optional[str]) -> HttpResponse:
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if self.raises is not None:
            raise self.raises
        text = self.body if isinstance(self.body, str) else json.dumps(self.body)
        return HttpResponse(status_code=self.status_code, text=text)

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last["body"])


@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture
def make_http():
    return FakeHttpClient


@pytest.fixture
def signed_invoice_xml():
    return """<?xml version="1.0" encoding="UTF-8"?>
<Invoice xmlns="urn:oasis:names:specification:ubl:schema:xsd:Invoice-2"
         xmlns:cac="urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2"
         xmlns:cbc="urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2"
         xmlns:ext="urn:oasis:names:specification:ubl:schema:xsd:CommonExtensionComponents-2"
         xmlns:ds="http://www.w3.org/2000/09/xmldsig#">
  <ext:UBLExtensions>
    <ext:UBLExtension>
      <ext:ExtensionContent>
        <ds:Signature Id="signature">
          <ds:SignedInfo>
            <ds:Reference Id="invoiceSignedData" URI="">
              <ds:DigestMethod Algorithm="http://www.w3.org/2001/04/xmlenc#sha256"/>
              <ds:DigestValue>V4U5qlZ3yXQ/Si1AHFxs7Rg1I5NbQMk7LOLEmZ8R4Gc=</ds:DigestValue>
            </ds:Reference>
            <ds:Reference Type="http://www.w3.org/2000/09/xmldsig#SignatureProperties" URI="#xadesSignedProperties">
              <ds:DigestValue>ZmFrZS1zaWduZWQtcHJvcGVydGllcw==</ds:DigestValue>
            </ds:Reference>
          </ds:SignedInfo>
        </ds:Signature>
      </ext:ExtensionContent>
    </ext:UBLExtension>
  </ext:UBLExtensions>
  <cbc:ProfileID>reporting:1.0</cbc:ProfileID>
  <cbc:ID>SME00010</cbc:ID>
  <cbc:UUID>8e6000cf-1a98-4174-b3e7-b5d5954bc10d</cbc:UUID>
  <cac:BillingReference>
    <cac:InvoiceDocumentReference>
      <cbc:UUID>00000000-0000-0000-0000-000000000000</cbc:UUID>
    </cac:InvoiceDocumentReference>
  </cac:BillingReference>
</Invoice>
"""
