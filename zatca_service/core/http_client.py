# zatca_service/core/http_client.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

import requests


@dataclass(frozen=True)
class HttpResponse:
    """Resposta crua do transporte: status HTTP + corpo em texto."""
    status_code: int
    text: str


class HttpClient(Protocol):
    """
    Contrato do transporte HTTP usado pelo ZatcaApi.
    Qualquer objeto com send() serve (útil para testes).
    Falhas de rede devem ser levantadas como requests.RequestException.
    """

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str],
    ) -> HttpResponse:
        ...


@dataclass
class RequestsHttpClient:
    """
    Transporte padrão baseado em requests.
    - Não faz retry e não trata status != 2xx (a ZATCA devolve JSON de erro em 4xx).
    """

    timeout: float = 30         # Timeout padrão (segundos)
    verify: bool = True         # Validação TLS
    session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """
        Usa a sessão injetada ou cria uma nova para a chamada.
        """
        return self.session or requests.Session()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str],
    ) -> HttpResponse:
        """
        Envia a requisição e devolve status + texto, sem raise_for_status().
        """
        session = self._get_session()
        try:
            response = session.request(
                method=method,
                url=url,
                data=body.encode("utf-8") if body is not None else None,
                headers=dict(headers),
                timeout=self.timeout,
                verify=self.verify,
            )
        finally:
            # sessão criada aqui não é reaproveitada
            if self.session is None:
                session.close()

        return HttpResponse(status_code=response.status_code, text=response.text)
