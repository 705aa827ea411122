# zatca_service/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from zatca_service.api import ZatcaApi
from zatca_service.core.enums import ZatcaEnvironment
from zatca_service.core.http_client import RequestsHttpClient

# -------------------------------------------------------------------
# CONFIGURAÇÃO VIA VARIÁVEIS DE AMBIENTE
#   ZATCA_ENVIRONMENT   sandbox | simulation | production
#   ZATCA_CERTIFICATE   binarySecurityToken do CSID
#   ZATCA_SECRET        segredo do CSID
#   ZATCA_TIMEOUT       timeout das requisições (segundos)
#   ZATCA_LOG_LEVEL     nível de log do serviço HTTP (zatca_api)
# -------------------------------------------------------------------


@dataclass(frozen=True)
class ZatcaSettings:
    environment: ZatcaEnvironment = ZatcaEnvironment.SANDBOX
    certificate: Optional[str] = field(default=None, repr=False)
    secret: Optional[str] = field(default=None, repr=False)
    timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ZatcaSettings":
        env = os.environ if environ is None else environ

        raw_timeout = env.get("ZATCA_TIMEOUT", "30")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"ZATCA_TIMEOUT inválido: {raw_timeout!r}") from None
        if timeout <= 0:
            raise ValueError(f"ZATCA_TIMEOUT deve ser maior que zero: {raw_timeout!r}")

        return cls(
            environment=ZatcaEnvironment.from_value(env.get("ZATCA_ENVIRONMENT", "sandbox")),
            certificate=env.get("ZATCA_CERTIFICATE") or None,
            secret=env.get("ZATCA_SECRET") or None,
            timeout=timeout,
            log_level=(env.get("ZATCA_LOG_LEVEL") or "INFO").upper(),
        )

    def build_api(self) -> ZatcaApi:
        return ZatcaApi(
            environment=self.environment,
            http_client=RequestsHttpClient(timeout=self.timeout),
            certificate=self.certificate,
            secret=self.secret,
        )

    def configure_logging(self) -> None:
        """Configura o logging raiz do processo com `log_level`."""
        logging.basicConfig(
            level=self.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
