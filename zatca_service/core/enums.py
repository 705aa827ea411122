# zatca_service/core/enums.py
from __future__ import annotations

from enum import Enum
from typing import List, Union


class ZatcaEnvironment(str, Enum):
    """
    Ambientes do gateway Fatoora.

    - SANDBOX: developer-portal (testes livres, sem cadastro)
    - SIMULATION: simulação (no portal antigo chamado de "emulation")
    - PRODUCTION: core
    """
    SANDBOX = "sandbox"
    SIMULATION = "simulation"
    PRODUCTION = "production"

    @classmethod
    def from_value(cls, value: Union[str, "ZatcaEnvironment"]) -> "ZatcaEnvironment":
        """
        Converte o nome do ambiente (sem diferenciar maiúsculas) no enum.
        Aceita "emulation" como sinônimo de "simulation".
        """
        if isinstance(value, cls):
            return value

        nome = str(value or "").strip().lower()
        nome = ENVIRONMENT_ALIASES.get(nome, nome)
        try:
            return cls(nome)
        except ValueError:
            raise ValueError(f"Invalid environment: {value!r}") from None

    @property
    def url(self) -> str:
        return ENVIRONMENT_URLS[self]


ENVIRONMENT_ALIASES = {
    "emulation": ZatcaEnvironment.SIMULATION.value,
}

ENVIRONMENT_URLS = {
    ZatcaEnvironment.SANDBOX: "https://gw-fatoora.zatca.gov.sa/e-invoicing/developer-portal/",
    ZatcaEnvironment.SIMULATION: "https://gw-fatoora.zatca.gov.sa/e-invoicing/simulation/",
    ZatcaEnvironment.PRODUCTION: "https://gw-fatoora.zatca.gov.sa/e-invoicing/core/",
}


def environment_url(environment: Union[str, ZatcaEnvironment]) -> str:
    """Base URL do gateway para o ambiente informado."""
    return ZatcaEnvironment.from_value(environment).url


class ZatcaEndpoint(str, Enum):
    """
    Caminhos dos serviços, relativos à base URL do ambiente.
    """
    REPORTING = "invoices/reporting/single"
    CLEARANCE = "invoices/clearance/single"
    COMPLIANCE = "compliance/invoices"
    COMPLIANCE_CERTIFICATE = "compliance"
    PRODUCTION_CERTIFICATE = "production/csids"

    @classmethod
    def values(cls) -> List[str]:
        return [endpoint.value for endpoint in cls]
