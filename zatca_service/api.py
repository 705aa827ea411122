# zatca_service/api.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from zatca_service.core.base_service import ZatcaBaseService
from zatca_service.core.enums import ZatcaEndpoint
from zatca_service.core.exceptions import ZatcaRequestException
from zatca_service.core.responses import (
    ClearanceResponse,
    ComplianceCertificateResponse,
    ComplianceResponse,
    ProductionCertificateResponse,
    RenewalProductionCertificateResponse,
    ReportingResponse,
    ZatcaResponse,
)
from zatca_service.core.utils import b64encode_text, normalize_invoice_hash

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=ZatcaResponse)


def build_invoice_payload(
    signed_invoice: Union[str, bytes],
    invoice_hash: Optional[str],
    uuid: str,
) -> Dict[str, str]:
    """
    Payload comum de reporting / clearance / compliance:
      - invoice: XML assinado em Base64
      - invoiceHash: hash da fatura (base64("0") se vier vazio)
      - uuid: UUID da fatura
    """
    return {
        "invoiceHash": normalize_invoice_hash(invoice_hash),
        "uuid": uuid,
        "invoice": b64encode_text(signed_invoice),
    }


def clearance_status_header(clearance_status: bool) -> Dict[str, str]:
    return {"Clearance-Status": "1" if clearance_status else "0"}


@dataclass(frozen=True)
class ZatcaApi(ZatcaBaseService):
    """
    Cliente do gateway Fatoora (ZATCA).

    Cada método monta payload + headers, envia, embrulha o JSON na
    resposta correspondente e levanta ZatcaRequestException se a ZATCA
    devolver `errors`.

    Exemplo:
        api = ZatcaApi("sandbox", certificate=cert, secret=secret)
        resp = api.reporting(xml_assinado, invoice_hash, uuid)
    """

    # ---------------------------- faturas ----------------------------

    def reporting(
        self,
        signed_invoice: Union[str, bytes],
        invoice_hash: Optional[str],
        uuid: str,
        clearance_status: bool = True,
    ) -> ReportingResponse:
        """Reporting de fatura simplificada (B2C)."""
        return self._call(
            ReportingResponse,
            endpoint=ZatcaEndpoint.REPORTING,
            payload=build_invoice_payload(signed_invoice, invoice_hash, uuid),
            headers=clearance_status_header(clearance_status),
            auth_token=True,
        )

    def clearance(
        self,
        signed_invoice: Union[str, bytes],
        invoice_hash: Optional[str],
        uuid: str,
        clearance_status: bool = True,
    ) -> ClearanceResponse:
        """Clearance de fatura padrão (B2B)."""
        return self._call(
            ClearanceResponse,
            endpoint=ZatcaEndpoint.CLEARANCE,
            payload=build_invoice_payload(signed_invoice, invoice_hash, uuid),
            headers=clearance_status_header(clearance_status),
            auth_token=True,
        )

    def compliance(
        self,
        signed_invoice: Union[str, bytes],
        invoice_hash: Optional[str],
        uuid: str,
    ) -> ComplianceResponse:
        """Checagem de conformidade de uma fatura (etapa de onboarding)."""
        return self._call(
            ComplianceResponse,
            endpoint=ZatcaEndpoint.COMPLIANCE,
            payload=build_invoice_payload(signed_invoice, invoice_hash, uuid),
            auth_token=True,
        )

    # -------------------------- certificados --------------------------

    def compliance_certificate(self, csr: Union[str, bytes], otp: str) -> ComplianceCertificateResponse:
        """
        Emite o CSID de compliance a partir do CSR.
        Autenticação por OTP (não usa certificado/segredo).
        """
        return self._call(
            ComplianceCertificateResponse,
            endpoint=ZatcaEndpoint.COMPLIANCE_CERTIFICATE,
            payload={"csr": b64encode_text(csr)},
            headers={"OTP": otp},
            auth_token=False,
        )

    def production_certificate(self, compliance_request_id: str) -> ProductionCertificateResponse:
        """
        Emite o CSID de produção.
        Usa as credenciais do CSID de compliance.
        """
        return self._call(
            ProductionCertificateResponse,
            endpoint=ZatcaEndpoint.PRODUCTION_CERTIFICATE,
            payload={"compliance_request_id": compliance_request_id},
            auth_token=True,
        )

    def renew_production_certificate(
        self,
        csr: Union[str, bytes],
        otp: str,
    ) -> RenewalProductionCertificateResponse:
        """Renova o CSID de produção com novo CSR + OTP."""
        return self._call(
            RenewalProductionCertificateResponse,
            endpoint=ZatcaEndpoint.PRODUCTION_CERTIFICATE,
            payload={"csr": b64encode_text(csr)},
            headers={"OTP": otp},
            auth_token=False,
        )

    # ------------------------------------------------------------------

    def _call(
        self,
        response_class: Type[R],
        *,
        endpoint: ZatcaEndpoint,
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, Any]] = None,
        auth_token: bool,
        method: str = "POST",
    ) -> R:
        raw = self.request(
            endpoint=endpoint,
            payload=payload,
            headers=headers,
            auth_token=auth_token,
            method=method,
        )
        response = response_class(raw)

        errors = response.errors()
        if errors:
            logger.warning("ZATCA %s returned %d error(s)", endpoint.value, len(errors))
            raise ZatcaRequestException("Request failed.", context={"errors": errors})

        return response
