# zatca_service/core/exceptions.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ZatcaException(Exception):
    """
    Exceção base da biblioteca.

    Carrega um dicionário de contexto (ex.: {"errors": [...]}) para
    diagnóstico. O contexto só cresce: with_context() mescla, nunca substitui.
    """

    def __init__(self, message: str = "", context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self._context: Dict[str, Any] = dict(context or {})

    def with_context(self, context: Mapping[str, Any]) -> "ZatcaException":
        self._context.update(context)
        return self

    def context(self) -> Dict[str, Any]:
        return dict(self._context)


class ZatcaRequestException(ZatcaException):
    """Falha de transporte ou resposta da ZATCA com `errors` preenchido."""


class ZatcaResponseException(ZatcaException):
    """Corpo de resposta inválido (não-JSON) ou campo obrigatório ausente."""
