# zatca_api/main.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, NoReturn, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from zatca_service.api import ZatcaApi
from zatca_service.config import ZatcaSettings
from zatca_service.core.exceptions import (
    ZatcaException,
    ZatcaRequestException,
    ZatcaResponseException,
)
from zatca_service.core.responses import ZatcaResponse
from zatca_service.core.xml_utils import extract_invoice_hash, extract_invoice_uuid

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# CONFIGURAÇÃO (VARIÁVEIS DE AMBIENTE ZATCA_*)
# -------------------------------------------------------------------

@lru_cache
def get_settings() -> ZatcaSettings:
    return ZatcaSettings.from_env()


get_settings().configure_logging()


def get_api() -> ZatcaApi:
    """Dependência FastAPI: cliente montado a partir das variáveis de ambiente."""
    return get_settings().build_api()


# -------------------------------------------------------------------
# FASTAPI APP
# -------------------------------------------------------------------

app = FastAPI(
    title="ZATCA Service API",
    version="1.0.0",
    description="API para reporting, clearance, compliance e emissão de CSID na ZATCA (Fatoora).",
)

# -------------------------------------------------------------------
# MODELOS Pydantic PARA REQUESTS/RESPONSES
# -------------------------------------------------------------------


class InvoiceRequest(BaseModel):
    signed_invoice: str = Field(..., min_length=1, description="XML da fatura já assinada (UBL 2.1)")
    invoice_hash: Optional[str] = Field(
        None,
        description="Hash da fatura (Base64). Se omitido, é lido do DigestValue de invoiceSignedData",
    )
    uuid: Optional[str] = Field(None, description="UUID da fatura. Se omitido, é lido do <cbc:UUID>")


class InvoiceSubmissionRequest(InvoiceRequest):
    clearance_status: bool = Field(True, description="Header Clearance-Status: true=1, false=0")


class ComplianceCertificateRequest(BaseModel):
    csr: str = Field(..., min_length=1, description="CSR em texto (PEM); o serviço codifica em Base64")
    otp: str = Field(..., min_length=1, description="OTP gerado no portal Fatoora")


class ProductionCertificateRequest(BaseModel):
    compliance_request_id: str = Field(..., min_length=1, description="requestID do CSID de compliance")


class ZatcaDataResponse(BaseModel):
    data: Dict[str, Any]


# -------------------------------------------------------------------
# HELPERS
# -------------------------------------------------------------------


def _invoice_fields(payload: InvoiceRequest) -> Tuple[str, Optional[str]]:
    """
    Completa uuid / invoice_hash a partir do XML assinado quando não vierem no request.
    """
    uuid = payload.uuid or extract_invoice_uuid(payload.signed_invoice)
    if not uuid:
        raise ValueError("UUID não informado e não encontrado no XML da fatura.")
    invoice_hash = payload.invoice_hash or extract_invoice_hash(payload.signed_invoice)
    return uuid, invoice_hash


def _raise_http(exc: Exception) -> NoReturn:
    if isinstance(exc, ZatcaRequestException) and exc.context().get("errors"):
        raise HTTPException(
            status_code=422,
            detail={"message": exc.message, "errors": exc.context()["errors"]},
        )
    if isinstance(exc, (ZatcaRequestException, ZatcaResponseException)):
        logger.error("Falha na comunicação com a ZATCA: %s", exc)
        raise HTTPException(status_code=502, detail=f"Erro na comunicação com a ZATCA: {exc}")
    if isinstance(exc, ValueError):
        raise HTTPException(status_code=400, detail=str(exc))
    raise exc


def _data(response: ZatcaResponse) -> ZatcaDataResponse:
    return ZatcaDataResponse(data=response.to_dict())


# -------------------------------------------------------------------
# ROTAS
# -------------------------------------------------------------------


@app.post("/invoices/reporting", response_model=ZatcaDataResponse, summary="Reporting de fatura simplificada")
def reporting(payload: InvoiceSubmissionRequest, api: ZatcaApi = Depends(get_api)):
    try:
        uuid, invoice_hash = _invoice_fields(payload)
        resp = api.reporting(payload.signed_invoice, invoice_hash, uuid, payload.clearance_status)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)


@app.post("/invoices/clearance", response_model=ZatcaDataResponse, summary="Clearance de fatura padrão")
def clearance(payload: InvoiceSubmissionRequest, api: ZatcaApi = Depends(get_api)):
    try:
        uuid, invoice_hash = _invoice_fields(payload)
        resp = api.clearance(payload.signed_invoice, invoice_hash, uuid, payload.clearance_status)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)


@app.post("/compliance/invoices", response_model=ZatcaDataResponse, summary="Checagem de conformidade da fatura")
def compliance(payload: InvoiceRequest, api: ZatcaApi = Depends(get_api)):
    try:
        uuid, invoice_hash = _invoice_fields(payload)
        resp = api.compliance(payload.signed_invoice, invoice_hash, uuid)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)


@app.post("/compliance/certificate", response_model=ZatcaDataResponse, summary="Emitir CSID de compliance")
def compliance_certificate(payload: ComplianceCertificateRequest, api: ZatcaApi = Depends(get_api)):
    try:
        resp = api.compliance_certificate(payload.csr, payload.otp)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)


@app.post("/production/certificate", response_model=ZatcaDataResponse, summary="Emitir CSID de produção")
def production_certificate(payload: ProductionCertificateRequest, api: ZatcaApi = Depends(get_api)):
    try:
        resp = api.production_certificate(payload.compliance_request_id)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)


@app.post(
    "/production/certificate/renew",
    response_model=ZatcaDataResponse,
    summary="Renovar CSID de produção",
)
def renew_production_certificate(payload: ComplianceCertificateRequest, api: ZatcaApi = Depends(get_api)):
    try:
        resp = api.renew_production_certificate(payload.csr, payload.otp)
    except (ZatcaException, ValueError) as exc:
        _raise_http(exc)
    return _data(resp)
