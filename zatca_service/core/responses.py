# zatca_service/core/responses.py
from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ZatcaResponseException
from .utils import b64decode_bytes, b64decode_text


# --------------------------- MODELOS TIPADOS --------------------------- #

class ErrorDetail(BaseModel):
    """Item de `errors` / `warnings` devolvido pela ZATCA."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    code: Optional[str] = None
    category: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None


class ValidationMessage(ErrorDetail):
    """Item de infoMessages / warningMessages / errorMessages."""


class ValidationResults(BaseModel):
    """Bloco `validationResults` (reporting, clearance e compliance)."""
    model_config = ConfigDict(extra="allow")

    infoMessages: List[ValidationMessage] = Field(default_factory=list)
    warningMessages: List[ValidationMessage] = Field(default_factory=list)
    errorMessages: List[ValidationMessage] = Field(default_factory=list)
    status: Optional[str] = None


def _as_list(value: Any) -> List[Any]:
    # a ZATCA às vezes devolve um objeto único em vez de lista
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


# --------------------------- WRAPPERS --------------------------- #

class ZatcaResponse:
    """
    Visão somente-leitura do JSON decodificado.
    Os acessores apenas projetam chaves do corpo capturado na construção.
    """

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(data)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._data)!r})"

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(dict(self._data))

    def get_optional_attribute(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def get_required_attribute(self, key: str) -> Any:
        if key not in self._data:
            raise ZatcaResponseException(
                f"Missing required attribute {key!r} in ZATCA response.",
                context={"key": key},
            )
        return self._data[key]

    def _decode_base64(self, key: str, value: Any, as_text: bool = True) -> Any:
        try:
            return b64decode_text(value) if as_text else b64decode_bytes(value)
        except (TypeError, ValueError) as exc:
            raise ZatcaResponseException(
                f"Invalid Base64 in attribute {key!r} of ZATCA response.",
                context={"key": key},
            ) from exc

    def errors(self) -> Optional[List[Any]]:
        """Lista `errors` se presente e não vazia; senão None (sucesso)."""
        value = self._data.get("errors")
        return _as_list(value) if value else None

    def warnings(self) -> Optional[List[Any]]:
        value = self._data.get("warnings")
        return _as_list(value) if value else None

    def error_details(self) -> List[ErrorDetail]:
        return [
            ErrorDetail.model_validate(item) if isinstance(item, Mapping) else ErrorDetail(message=str(item))
            for item in self.errors() or []
        ]


class _InvoiceResponse(ZatcaResponse):
    """Campos comuns às respostas de envio de fatura."""

    @property
    def validation_results(self) -> Optional[ValidationResults]:
        raw = self.get_optional_attribute("validationResults")
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            raise ZatcaResponseException(
                "validationResults is not a JSON object.",
                context={"key": "validationResults"},
            )
        try:
            return ValidationResults.model_validate(
                {
                    **raw,
                    "infoMessages": _as_list(raw.get("infoMessages")),
                    "warningMessages": _as_list(raw.get("warningMessages")),
                    "errorMessages": _as_list(raw.get("errorMessages")),
                }
            )
        except ValidationError as exc:
            raise ZatcaResponseException(
                f"Invalid validationResults in ZATCA response: {exc.error_count()} error(s).",
                context={"key": "validationResults"},
            ) from exc


class ReportingResponse(_InvoiceResponse):
    @property
    def reporting_status(self) -> Optional[str]:
        return self.get_optional_attribute("reportingStatus")


class ClearanceResponse(_InvoiceResponse):
    @property
    def clearance_status(self) -> Optional[str]:
        return self.get_optional_attribute("clearanceStatus")

    @property
    def cleared_invoice(self) -> Optional[str]:
        """XML liberado pela ZATCA, em Base64."""
        return self.get_optional_attribute("clearedInvoice")

    def cleared_invoice_xml(self) -> Optional[bytes]:
        """XML liberado, decodificado (bytes, como assinado pela ZATCA)."""
        cleared = self.cleared_invoice
        if not cleared:
            return None
        return self._decode_base64("clearedInvoice", cleared, as_text=False)


class ComplianceResponse(_InvoiceResponse):
    @property
    def reporting_status(self) -> Optional[str]:
        return self.get_optional_attribute("reportingStatus")

    @property
    def clearance_status(self) -> Optional[str]:
        return self.get_optional_attribute("clearanceStatus")

    @property
    def qr_seller_status(self) -> Optional[str]:
        # grafia da própria API ("Sellert")
        return self.get_optional_attribute("qrSellertStatus")

    @property
    def qr_buyer_status(self) -> Optional[str]:
        return self.get_optional_attribute("qrBuyertStatus")


class CertificateResponse(ZatcaResponse):
    """
    Resposta dos serviços de CSID (compliance / production).
    """

    @property
    def request_id(self) -> Optional[str]:
        value = self.get_optional_attribute("requestID")
        return None if value is None else str(value)

    @property
    def disposition_message(self) -> Optional[str]:
        return self.get_optional_attribute("dispositionMessage")

    @property
    def binary_security_token(self) -> str:
        return self.get_required_attribute("binarySecurityToken")

    @property
    def secret(self) -> str:
        return self.get_required_attribute("secret")

    @property
    def certificate(self) -> str:
        """Certificado (corpo PEM em Base64) extraído do binarySecurityToken."""
        return self._decode_base64("binarySecurityToken", self.binary_security_token)


class ComplianceCertificateResponse(CertificateResponse):
    pass


class ProductionCertificateResponse(CertificateResponse):
    pass


class RenewalProductionCertificateResponse(ProductionCertificateResponse):
    @property
    def token_type(self) -> Optional[str]:
        return self.get_optional_attribute("tokenType")
