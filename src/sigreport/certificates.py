"""Сертификаты подписи для отчёта: содержимое в base64 DER, CN и роль в цепочке."""

import base64
import binascii
import logging
from typing import Iterable, List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from sigreport.models import Certificate, CertificateType, SubjectDistinguishedName

logger = logging.getLogger(__name__)


def _to_der(content: str) -> bytes:
    """Сертификат из фактов движка: base64 DER или PEM. Вернуть DER."""
    data = content.strip()
    if data.startswith("-----BEGIN"):
        lines = [line.strip() for line in data.splitlines() if "-----" not in line]
        return binascii.a2b_base64("".join(lines))
    # base64 от Java-движков бывает разбит на строки по 64/76 символов
    return base64.b64decode("".join(data.split()), validate=True)


def _load(content: str) -> x509.Certificate:
    return x509.load_der_x509_certificate(_to_der(content))


def _attribute(name: x509.Name, oid) -> Optional[str]:
    values = name.get_attributes_for_oid(oid)
    if not values:
        return None
    return str(values[0].value)


def normalize_content(content: str) -> str:
    """Привести к base64 DER без переносов; нечитаемое вернуть как есть."""
    try:
        return base64.b64encode(_to_der(content)).decode("ascii")
    except (ValueError, binascii.Error):
        return content.strip()


def common_name(content: str) -> str:
    # Нечитаемый сертификат или DN не должен ломать отчёт
    try:
        return _attribute(_load(content).subject, NameOID.COMMON_NAME) or ""
    except (ValueError, binascii.Error) as e:
        logger.debug("Cannot read common name from certificate: %s", e)
        return ""


def subject_distinguished_name(content: Optional[str]) -> SubjectDistinguishedName:
    if not content:
        return SubjectDistinguishedName()
    try:
        subject = _load(content).subject
    except (ValueError, binascii.Error) as e:
        logger.debug("Cannot read subject DN from certificate: %s", e)
        return SubjectDistinguishedName()
    return SubjectDistinguishedName(
        common_name=_attribute(subject, NameOID.COMMON_NAME),
        serial_number=_attribute(subject, NameOID.SERIAL_NUMBER),
        given_name=_attribute(subject, NameOID.GIVEN_NAME),
        surname=_attribute(subject, NameOID.SURNAME),
    )


def certificate_entry(content: str, cert_type: CertificateType) -> Certificate:
    return Certificate(content=normalize_content(content), common_name=common_name(content), type=cert_type)


def classify_certificates(
    signing: Optional[str],
    revocations: Iterable[str] = (),
    timestamp: Optional[str] = None,
) -> List[Certificate]:
    certificates = []
    if signing:
        certificates.append(certificate_entry(signing, CertificateType.SIGNING))
    for revocation in revocations:
        if revocation:
            certificates.append(certificate_entry(revocation, CertificateType.REVOCATION))
    if timestamp:
        certificates.append(certificate_entry(timestamp, CertificateType.SIGNATURE_TIMESTAMP))
    return certificates
