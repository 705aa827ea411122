from __future__ import annotations

from typing import Optional, Union

from lxml import etree

from .utils import to_bytes


def _parse_xml_root(xml: Union[str, bytes]) -> etree._Element:
    """Parse do XML assinado (UBL 2.1), retornando o root."""
    try:
        parser = etree.XMLParser(remove_blank_text=False, resolve_entities=False)
        return etree.fromstring(to_bytes(xml), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"XML inválido: {exc}") from exc


def _text(el: Optional[etree._Element]) -> Optional[str]:
    if el is not None and el.text is not None:
        return el.text.strip() or None
    return None


def extract_invoice_uuid(xml: Union[str, bytes]) -> Optional[str]:
    """
    Lê o <cbc:UUID> da fatura, independente de namespace.
    """
    root = _parse_xml_root(xml)
    nodes = root.xpath("/*/*[local-name()='UUID']")
    return _text(nodes[0]) if nodes else None


def extract_invoice_hash(xml: Union[str, bytes]) -> Optional[str]:
    """
    Lê o hash da fatura já assinada:

    <ds:Reference Id="invoiceSignedData" URI="">
      ...
      <ds:DigestValue>...</ds:DigestValue>
    </ds:Reference>
    """
    root = _parse_xml_root(xml)
    nodes = root.xpath(
        "//*[local-name()='Reference'][@Id='invoiceSignedData']"
        "/*[local-name()='DigestValue']"
    )
    return _text(nodes[0]) if nodes else None
