# zatca_service/core/utils.py
from __future__ import annotations

from typing import Optional, Union

import base64

# base64("0"): enviado no lugar de um invoiceHash vazio
EMPTY_INVOICE_HASH = base64.b64encode(b"0").decode("ascii")


def to_bytes(value: Union[str, bytes]) -> bytes:
    """
    Aceita str (codificada em UTF-8) ou bytes.
    """
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def b64encode_text(value: Union[str, bytes]) -> str:
    """
    Codifica em Base64 e retorna string ASCII.
    Formato usado para o XML assinado (invoice) e para o CSR.
    """
    return base64.b64encode(to_bytes(value)).decode("ascii")


def b64decode_bytes(value: Union[str, bytes]) -> bytes:
    """
    Decodifica Base64 estrito: caracteres fora do alfabeto ou padding
    incorreto geram binascii.Error (subclasse de ValueError).
    """
    return base64.b64decode(value, validate=True)


def b64decode_text(value: Union[str, bytes]) -> str:
    """
    Decodifica Base64 para texto UTF-8 (ex.: binarySecurityToken -> certificado).
    """
    return b64decode_bytes(value).decode("utf-8")


def normalize_invoice_hash(invoice_hash: Optional[str]) -> str:
    """
    A ZATCA não aceita invoiceHash vazio: nesse caso envia base64("0").
    Qualquer outro valor segue sem alteração.
    """
    if not invoice_hash:
        return EMPTY_INVOICE_HASH
    return invoice_hash


def basic_auth_token(certificate: str, secret: str) -> str:
    """
    Token do header Authorization: base64("certificado:segredo").
    """
    return b64encode_text(f"{certificate}:{secret}")
