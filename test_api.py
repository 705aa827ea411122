# test_api.py

import base64

import pytest

from zatca_service.api import ZatcaApi, build_invoice_payload
from zatca_service.core.exceptions import ZatcaRequestException
from zatca_service.core.responses import (
    ClearanceResponse,
    ComplianceCertificateResponse,
    ComplianceResponse,
    ProductionCertificateResponse,
    RenewalProductionCertificateResponse,
    ReportingResponse,
)

BASE = "https://gw-fatoora.zatca.gov.sa/e-invoicing/simulation/"
CERT = "TUlJRDNqQ0NBNFNnQXdJQkFnSVRFUUFBT0FQRg=="
SECRET = "CkYsEXfV8c1gFHAtFWoZv73pGMvh/Qyo4LzKM2h/8Hg="
INVOICE = "<Invoice>assinada</Invoice>"
UUID = "8e6000cf-1a98-4174-b3e7-b5d5954bc10d"
CSR = "-----BEGIN CERTIFICATE REQUEST-----\nMIIB\n-----END CERTIFICATE REQUEST-----"


def b64(value):
    return base64.b64encode(value.encode()).decode()


def _api(http, **kwargs):
    kwargs.setdefault("certificate", CERT)
    kwargs.setdefault("secret", SECRET)
    return ZatcaApi("simulation", http, **kwargs)


def _auth():
    return "Basic " + b64(f"{CERT}:{SECRET}")


# ----------------------------------------------------------------------
# Montagem das requisições
# ----------------------------------------------------------------------


def test_reporting_request(fake_http):
    resp = _api(fake_http).reporting(INVOICE, "hash==", UUID, clearance_status=True)

    call = fake_http.last
    assert isinstance(resp, ReportingResponse)
    assert call["url"] == BASE + "invoices/reporting/single"
    assert call["headers"]["Clearance-Status"] == "1"
    assert call["headers"]["Authorization"] == _auth()
    assert fake_http.last_json == {"invoice": b64(INVOICE), "invoiceHash": "hash==", "uuid": UUID}


def test_reporting_clearance_status_false(fake_http):
    _api(fake_http).reporting(INVOICE, "hash==", UUID, clearance_status=False)
    assert fake_http.last["headers"]["Clearance-Status"] == "0"


def test_clearance_request(fake_http):
    resp = _api(fake_http).clearance(INVOICE.encode(), "hash==", UUID)

    assert isinstance(resp, ClearanceResponse)
    assert fake_http.last["url"] == BASE + "invoices/clearance/single"
    assert fake_http.last["headers"]["Clearance-Status"] == "1"
    assert fake_http.last["headers"]["Authorization"] == _auth()
    assert fake_http.last_json["invoice"] == b64(INVOICE)


def test_clearance_status_false(fake_http):
    _api(fake_http).clearance(INVOICE, "hash==", UUID, clearance_status=False)
    assert fake_http.last["headers"]["Clearance-Status"] == "0"


def test_compliance_request(fake_http):
    resp = _api(fake_http).compliance(INVOICE, "hash==", UUID)

    assert isinstance(resp, ComplianceResponse)
    assert fake_http.last["url"] == BASE + "compliance/invoices"
    assert fake_http.last["headers"]["Authorization"] == _auth()
    assert "Clearance-Status" not in fake_http.last["headers"]
    assert fake_http.last_json == {"invoice": b64(INVOICE), "invoiceHash": "hash==", "uuid": UUID}


@pytest.mark.parametrize("invoice_hash", [None, ""])
def test_empty_invoice_hash_is_replaced(fake_http, invoice_hash):
    _api(fake_http).compliance(INVOICE, invoice_hash, UUID)
    assert fake_http.last_json["invoiceHash"] == "MA=="


def test_compliance_certificate_request(fake_http):
    resp = ZatcaApi("sandbox", fake_http).compliance_certificate(CSR, "123345")

    call = fake_http.last
    assert isinstance(resp, ComplianceCertificateResponse)
    assert call["url"].endswith("/developer-portal/compliance")
    assert call["headers"]["OTP"] == "123345"
    assert "Authorization" not in call["headers"]
    assert fake_http.last_json == {"csr": b64(CSR)}


def test_compliance_certificate_ignores_stored_credentials(fake_http):
    _api(fake_http).compliance_certificate(CSR, "123345")
    assert "Authorization" not in fake_http.last["headers"]


def test_production_certificate_request(fake_http):
    resp = _api(fake_http).production_certificate("1234567890123")

    call = fake_http.last
    assert isinstance(resp, ProductionCertificateResponse)
    assert call["url"] == BASE + "production/csids"
    assert call["headers"]["Authorization"] == _auth()
    assert "OTP" not in call["headers"]
    assert fake_http.last_json == {"compliance_request_id": "1234567890123"}


def test_renew_production_certificate_request(fake_http):
    resp = _api(fake_http).renew_production_certificate(CSR, "654321")

    call = fake_http.last
    assert isinstance(resp, RenewalProductionCertificateResponse)
    assert call["url"] == BASE + "production/csids"
    assert call["headers"]["OTP"] == "654321"
    assert "Authorization" not in call["headers"]
    assert fake_http.last_json == {"csr": b64(CSR)}


def test_auth_operations_require_credentials(fake_http):
    api = ZatcaApi("sandbox", fake_http)

    with pytest.raises(ZatcaRequestException):
        api.reporting(INVOICE, "hash==", UUID)
    with pytest.raises(ZatcaRequestException):
        api.production_certificate("1")
    assert fake_http.calls == []


def test_build_invoice_payload():
    assert build_invoice_payload(b"<x/>", "", UUID) == {
        "invoiceHash": "MA==",
        "uuid": UUID,
        "invoice": b64("<x/>"),
    }


# ----------------------------------------------------------------------
# Tratamento de `errors`
# ----------------------------------------------------------------------

OPERATIONS = [
    ("reporting", (INVOICE, "hash==", UUID)),
    ("clearance", (INVOICE, "hash==", UUID)),
    ("compliance", (INVOICE, "hash==", UUID)),
    ("compliance_certificate", (CSR, "123345")),
    ("production_certificate", ("1234567890123",)),
    ("renew_production_certificate", (CSR, "123345")),
]


@pytest.mark.parametrize("operation, args", OPERATIONS)
def test_errors_raise_request_exception(make_http, operation, args):
    errors = [{"code": "X"}]
    http = make_http(status_code=400, body={"errors": errors})

    with pytest.raises(ZatcaRequestException) as info:
        getattr(_api(http), operation)(*args)

    assert str(info.value) == "Request failed."
    assert info.value.context() == {"errors": errors}


@pytest.mark.parametrize("operation, args", OPERATIONS)
@pytest.mark.parametrize("body", [{}, {"errors": []}])
def test_no_errors_returns_wrapper(make_http, operation, args, body):
    http = make_http(body=body)

    resp = getattr(_api(http), operation)(*args)

    assert resp.errors() is None


def test_successful_certificate_flow(make_http):
    token = b64("MIICertificateBody")
    http = make_http(
        body={
            "requestID": 1234567890123,
            "dispositionMessage": "ISSUED",
            "binarySecurityToken": token,
            "secret": "novo-segredo",
            "errors": None,
        }
    )

    resp = ZatcaApi("production", http).compliance_certificate(CSR, "123345")

    assert resp.request_id == "1234567890123"
    assert resp.certificate == "MIICertificateBody"
    assert resp.secret == "novo-segredo"


def test_credentials_hidden_from_repr(fake_http):
    text = repr(_api(fake_http))
    assert SECRET not in text
    assert CERT not in text


def test_builtin_timeout_is_request_exception(make_http):
    http = make_http(raises=TimeoutError("read timed out"))

    with pytest.raises(ZatcaRequestException) as info:
        ZatcaApi("sandbox", http).compliance_certificate(CSR, "123345")

    assert isinstance(info.value.__cause__, TimeoutError)
