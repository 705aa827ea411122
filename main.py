import logging
from pathlib import Path

from zatca_service.config import ZatcaSettings
from zatca_service.core.exceptions import ZatcaException
from zatca_service.core.xml_utils import extract_invoice_hash, extract_invoice_uuid


def main():
    logging.basicConfig(level=logging.DEBUG)

    # 1. Ler XML já assinado
    xml_path = Path("exemplos/fatura_simplificada_assinada.xml")
    if not xml_path.exists():
        print(f"Arquivo XML não encontrado: {xml_path}")
        return

    xml_assinado = xml_path.read_text(encoding="utf-8")

    # 2. UUID e hash saem do próprio XML assinado
    uuid = extract_invoice_uuid(xml_assinado)
    invoice_hash = extract_invoice_hash(xml_assinado)

    print("=== FATURA ===")
    print("UUID:", uuid)
    print("Hash:", invoice_hash)
    print("-" * 80)

    # 3. Cliente montado a partir de ZATCA_ENVIRONMENT / ZATCA_CERTIFICATE / ZATCA_SECRET
    api = ZatcaSettings.from_env().build_api()

    # 4. Compliance check (onboarding) e reporting
    try:
        compliance = api.compliance(xml_assinado, invoice_hash, uuid)
        print("=== COMPLIANCE ===")
        print(compliance.validation_results)

        reporting = api.reporting(xml_assinado, invoice_hash, uuid, clearance_status=False)
        print("=== REPORTING ===")
        print(reporting.reporting_status)
    except ZatcaException as exc:
        print("=== ERRO ZATCA ===")
        print(exc)
        print(exc.context())


if __name__ == "__main__":
    main()
