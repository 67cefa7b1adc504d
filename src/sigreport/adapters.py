"""Форматно-зависимые стратегии извлечения данных для общего сборщика отчёта.

Каждый вариант создаётся заново на один запрос проверки и не хранит
изменяемого состояния между запросами.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from sigreport.certificates import certificate_entry
from sigreport.evidence import first_revocation, first_timestamp, ocsp_nonce_imprint, timestamp_imprint
from sigreport.indications import is_passed
from sigreport.models import Certificate, CertificateType, ValidationWarning
from sigreport.policies import PolicyDefinition
from sigreport.raw import RawSignature, RawSimpleReportEntry, RawValidationResult, ValidationDocument

ASICE_SIGNATURE_FORM = "ASiC-E"
XADES_FORMAT_PREFIX = "XAdES_BASELINE_"
DIGIDOC_XML_PREFIX = "DIGIDOC_XML"
HASHCODE_SUFFIX = "_hashcode"

# DDOC: у DataFile нет xmlns, но альтернативный дайджест совпал
DDOC_DATAFILE_XMLNS_MISSING = 173


class ContainerFormatAdapter(ABC):
    applies_level_policy = True

    def __init__(self, raw: RawValidationResult, document: ValidationDocument, policy: PolicyDefinition):
        self.raw = raw
        self.document = document
        self.policy = policy

    @abstractmethod
    def raw_indication(self, signature: RawSignature) -> str:
        ...

    @abstractmethod
    def raw_sub_indication(self, signature: RawSignature) -> Optional[str]:
        ...

    @abstractmethod
    def signature_level_label(self, signature: RawSignature) -> str:
        ...

    @abstractmethod
    def signature_form(self) -> Optional[str]:
        ...

    @abstractmethod
    def signature_format(self, signature: RawSignature) -> str:
        ...

    def extra_certificates(self, signature: RawSignature) -> List[Certificate]:
        return []

    def extra_warnings(self) -> List[ValidationWarning]:
        return [ValidationWarning(content=w.message) for w in self.raw.container_warnings]

    def data_file_names(self) -> List[str]:
        return [f.name for f in self.raw.data_files]

    def message_imprint(self, signature: RawSignature) -> str:
        timestamp = first_timestamp(signature)
        if timestamp is not None:
            return timestamp_imprint(timestamp)
        return ocsp_nonce_imprint(first_revocation(signature))

    def signature_errors(self, signature: RawSignature) -> List[str]:
        return [e.message for e in signature.errors]

    def signature_warnings(self, signature: RawSignature) -> List[str]:
        return [w.message for w in signature.warnings]


class TimemarkContainerAdapter(ContainerFormatAdapter):
    """BDOC/ASiC-E с отметкой времени: уровень и индикация из встроенного простого отчёта."""

    def _simple_report(self, signature: RawSignature) -> Optional[RawSimpleReportEntry]:
        return self.raw.simple_reports.get(signature.id)

    def raw_indication(self, signature: RawSignature) -> str:
        if is_passed(signature.indication):
            return signature.indication
        entry = self._simple_report(signature)
        if entry is not None and entry.indication.strip().upper() == "INDETERMINATE":
            return entry.indication
        return "TOTAL_FAILED"

    def raw_sub_indication(self, signature: RawSignature) -> Optional[str]:
        entry = self._simple_report(signature)
        if entry is not None and entry.sub_indication:
            return entry.sub_indication
        return signature.sub_indication

    def signature_level_label(self, signature: RawSignature) -> str:
        entry = self._simple_report(signature)
        return (entry.qualification if entry is not None else None) or ""

    def signature_form(self) -> Optional[str]:
        return ASICE_SIGNATURE_FORM

    def signature_format(self, signature: RawSignature) -> str:
        if signature.profile:
            return XADES_FORMAT_PREFIX + signature.profile
        return signature.signature_format or ""

    def extra_certificates(self, signature: RawSignature) -> List[Certificate]:
        timestamp = first_timestamp(signature)
        if timestamp is None or not timestamp.certificate:
            return []
        return [certificate_entry(timestamp.certificate, CertificateType.SIGNATURE_TIMESTAMP)]

    def message_imprint(self, signature: RawSignature) -> str:
        if (signature.profile or "").upper().endswith("TM"):
            return ocsp_nonce_imprint(first_revocation(signature))
        return timestamp_imprint(first_timestamp(signature))


class DigidocXmlAdapter(ContainerFormatAdapter):
    """DIGIDOC-XML, включая хэшкод-варианты: уровня квалификации нет."""

    applies_level_policy = False

    def _version_suffix(self) -> str:
        version = (self.raw.format_version or "").strip()
        return f"_{version}" if version else ""

    def raw_indication(self, signature: RawSignature) -> str:
        # Подпись DDOC валидна, когда после переноса 173 в предупреждения ошибок не осталось
        return "TOTAL_FAILED" if self.signature_errors(signature) else "TOTAL_PASSED"

    def raw_sub_indication(self, signature: RawSignature) -> Optional[str]:
        return None

    def signature_level_label(self, signature: RawSignature) -> str:
        return ""

    def signature_form(self) -> Optional[str]:
        form = DIGIDOC_XML_PREFIX + self._version_suffix()
        return form + HASHCODE_SUFFIX if self.raw.hashcode else form

    def signature_format(self, signature: RawSignature) -> str:
        return DIGIDOC_XML_PREFIX + self._version_suffix()

    def message_imprint(self, signature: RawSignature) -> str:
        return ocsp_nonce_imprint(first_revocation(signature))

    def signature_errors(self, signature: RawSignature) -> List[str]:
        return [e.message for e in signature.errors if e.code != DDOC_DATAFILE_XMLNS_MISSING]

    def signature_warnings(self, signature: RawSignature) -> List[str]:
        moved = [e.message for e in signature.errors if e.code == DDOC_DATAFILE_XMLNS_MISSING]
        return [w.message for w in signature.warnings] + moved


class GenericContainerAdapter(ContainerFormatAdapter):
    """Контейнеры и подписи, уровень которых даёт сам движок (ASiC-E/S, PAdES, XAdES, CAdES)."""

    def raw_indication(self, signature: RawSignature) -> str:
        return signature.indication

    def raw_sub_indication(self, signature: RawSignature) -> Optional[str]:
        return signature.sub_indication

    def signature_level_label(self, signature: RawSignature) -> str:
        return signature.qualification or ""

    def signature_form(self) -> Optional[str]:
        return self.raw.container_type

    def signature_format(self, signature: RawSignature) -> str:
        return signature.signature_format or ""

    def extra_certificates(self, signature: RawSignature) -> List[Certificate]:
        return [
            certificate_entry(t.certificate, CertificateType.SIGNATURE_TIMESTAMP)
            for t in signature.timestamps
            if t.certificate
        ]


class DetachedDataAdapter(GenericContainerAdapter):
    """Хэшкод-подпись: файлы данных переданы отдельно от подписи."""

    def signature_form(self) -> Optional[str]:
        return None

    def data_file_names(self) -> List[str]:
        return list(self.document.data_files)
