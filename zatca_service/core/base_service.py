from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import requests

from .enums import ZatcaEndpoint, ZatcaEnvironment
from .exceptions import ZatcaRequestException, ZatcaResponseException
from .http_client import HttpClient, HttpResponse, RequestsHttpClient
from .utils import basic_auth_token

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Accept-Version": "V2",
    "Accept-Language": "en",
}


@dataclass(frozen=True)
class ZatcaBaseService:
    """
    Base para a comunicação com o gateway Fatoora.

    - environment: sandbox | simulation | production (string ou enum)
    - http_client: transporte HTTP (padrão: RequestsHttpClient)
    - certificate / secret: credenciais do CSID, usadas no Basic-Auth

    Ambiente e credenciais são fixos depois da construção.
    """
    environment: ZatcaEnvironment
    http_client: Optional[HttpClient] = None
    certificate: Optional[str] = field(default=None, repr=False)
    secret: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "environment", ZatcaEnvironment.from_value(self.environment))
        if self.http_client is None:
            object.__setattr__(self, "http_client", RequestsHttpClient())

    @property
    def base_url(self) -> str:
        return self.environment.url

    @property
    def has_credentials(self) -> bool:
        return bool(self.certificate) and bool(self.secret)

    def build_url(self, endpoint: Union[ZatcaEndpoint, str]) -> str:
        """Junta base URL + caminho do serviço, com uma única barra entre eles."""
        path = endpoint.value if isinstance(endpoint, ZatcaEndpoint) else str(endpoint)
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def build_headers(
        self,
        headers: Optional[Mapping[str, Any]] = None,
        auth_token: bool = False,
    ) -> Dict[str, str]:
        """
        Headers padrão + Authorization (se auth_token) + headers do chamador.
        Os do chamador (Clearance-Status, OTP, ...) sobrescrevem os padrão.
        """
        result = dict(DEFAULT_HEADERS)

        if auth_token:
            if not self.has_credentials:
                raise ZatcaRequestException(
                    "Certificate and secret are required for this request.",
                    context={"auth_token": True},
                )
            result["Authorization"] = f"Basic {basic_auth_token(self.certificate, self.secret)}"

        for key, value in (headers or {}).items():
            result[key] = str(value)

        return result

    def request(
        self,
        endpoint: Union[ZatcaEndpoint, str],
        payload: Mapping[str, Any],
        headers: Optional[Mapping[str, Any]] = None,
        auth_token: bool = False,
        method: str = "POST",
    ) -> Dict[str, Any]:
        """
        Monta e envia a requisição; devolve o corpo JSON decodificado.

        Status != 2xx não gera erro aqui: a ZATCA devolve o JSON de erro
        no corpo, e quem interpreta é o chamador.
        """
        url = self.build_url(endpoint)
        request_headers = self.build_headers(headers, auth_token=auth_token)
        body = json.dumps(dict(payload))

        logger.debug("ZATCA request: %s %s", method, url)
        try:
            response = self.http_client.send(method, url, request_headers, body)
        except (requests.RequestException, OSError) as exc:
            raise ZatcaRequestException(
                f"Request to ZATCA failed: {exc}",
                context={"method": method, "url": url},
            ) from exc

        logger.debug("ZATCA response: %s %s -> %s", method, url, response.status_code)
        return self._decode_body(response)

    @staticmethod
    def _decode_body(response: HttpResponse) -> Dict[str, Any]:
        context = {"status_code": response.status_code, "body": response.text}

        try:
            data = json.loads(response.text)
        except (TypeError, ValueError) as exc:
            raise ZatcaResponseException("Invalid JSON in ZATCA response.", context=context) from exc

        if not isinstance(data, dict):
            raise ZatcaResponseException("ZATCA response is not a JSON object.", context=context)

        return data
