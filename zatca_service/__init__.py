from .api import ZatcaApi
from .core.enums import ZatcaEndpoint, ZatcaEnvironment
from .core.exceptions import (
    ZatcaException,
    ZatcaRequestException,
    ZatcaResponseException,
)
from .core.http_client import HttpClient, HttpResponse, RequestsHttpClient
from .core.responses import (
    CertificateResponse,
    ClearanceResponse,
    ComplianceCertificateResponse,
    ComplianceResponse,
    ProductionCertificateResponse,
    RenewalProductionCertificateResponse,
    ReportingResponse,
    ZatcaResponse,
)

__version__ = "1.0.0"

__all__ = [
    "ZatcaApi",
    "ZatcaEndpoint",
    "ZatcaEnvironment",
    "ZatcaException",
    "ZatcaRequestException",
    "ZatcaResponseException",
    "HttpClient",
    "HttpResponse",
    "RequestsHttpClient",
    "ZatcaResponse",
    "ReportingResponse",
    "ClearanceResponse",
    "ComplianceResponse",
    "CertificateResponse",
    "ComplianceCertificateResponse",
    "ProductionCertificateResponse",
    "RenewalProductionCertificateResponse",
]
