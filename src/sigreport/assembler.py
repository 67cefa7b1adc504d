"""Сборка отчёта о проверке из сырых фактов движка.

Алгоритм общий для всех форматов; всё форматно-зависимое берётся у адаптера.
"""

import base64
import hashlib
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sigreport import indications
from sigreport.adapters import ContainerFormatAdapter
from sigreport.certificates import classify_certificates, subject_distinguished_name
from sigreport.evidence import first_revocation, first_timestamp, format_time, ocsp_creation_time
from sigreport.models import (
    DetailedReport,
    DiagnosticReport,
    Indication,
    Info,
    Reports,
    ReportType,
    SignatureError,
    SignatureProductionPlace,
    SignatureValidationData,
    SignatureWarning,
    SignerRole,
    SimpleReport,
    ValidatedDocument,
    ValidationConclusion,
)
from sigreport.policies import PolicyDefinition
from sigreport.raw import RawSignature
from sigreport.scopes import resolve_scopes

logger = logging.getLogger(__name__)

SIGNATURE_PROCESSING_ERROR = "Signature could not be processed"
HASH_ALGO = "SHA256"


def create_validated_document(report_signature_enabled: bool, filename: str, content: bytes) -> ValidatedDocument:
    if not report_signature_enabled:
        return ValidatedDocument(filename=filename)
    file_hash = base64.b64encode(hashlib.sha256(content).digest()).decode("ascii")
    return ValidatedDocument(filename=filename, file_hash=file_hash, hash_algo=HASH_ALGO)


class ReportAssembler:
    def __init__(
        self,
        adapter: ContainerFormatAdapter,
        policy: PolicyDefinition,
        report_signature_enabled: bool = False,
        container_errors: Iterable[str] = (),
    ):
        self.adapter = adapter
        self.raw = adapter.raw
        self.document = adapter.document
        self.policy = policy
        self.report_signature_enabled = report_signature_enabled
        # Ошибки движка и проверки контейнера могут совпадать по тексту
        merged = [e.message for e in self.raw.container_errors] + list(container_errors)
        self.container_errors = list(dict.fromkeys(merged))

    def build(self, report_type: ReportType = ReportType.SIMPLE, validation_time: Optional[datetime] = None) -> Reports:
        conclusion = self.build_conclusion(validation_time)
        # Глубокие слои заполняются только по запросу, сама структура есть всегда
        validation_process = self.raw.validation_process if report_type == ReportType.DETAILED else None
        diagnostic_data = self.raw.diagnostic_data if report_type == ReportType.DIAGNOSTIC else None
        return Reports(
            simple_report=SimpleReport(validation_conclusion=conclusion),
            detailed_report=DetailedReport(validation_conclusion=conclusion, validation_process=validation_process),
            diagnostic_report=DiagnosticReport(validation_conclusion=conclusion, diagnostic_data=diagnostic_data),
        )

    def build_conclusion(self, validation_time: Optional[datetime] = None) -> ValidationConclusion:
        data_file_names = self.adapter.data_file_names()
        self._warn_duplicate_ids()
        signatures = [self._signature_or_failure(s, data_file_names) for s in self.raw.signatures]
        conclusion = ValidationConclusion(
            policy=self.policy.to_policy(),
            validation_time=format_time(validation_time or datetime.now(timezone.utc)),
            validated_document=create_validated_document(
                self.report_signature_enabled, self.document.filename, self.document.content,
            ),
            signature_form=self.adapter.signature_form(),
            signatures=signatures,
            validation_warnings=self.adapter.extra_warnings(),
        )
        logger.info(
            "Report built for %s: policy=%s signatures=%d valid=%d",
            self.document.filename,
            self.policy.name,
            conclusion.signatures_count,
            conclusion.valid_signatures_count,
        )
        return conclusion

    def _warn_duplicate_ids(self) -> None:
        seen = set()
        for signature in self.raw.signatures:
            if signature.id in seen:
                logger.warning("Duplicate signature id %s in %s", signature.id, self.document.filename)
            seen.add(signature.id)

    def _signature_or_failure(self, signature: RawSignature, data_file_names: List[str]) -> SignatureValidationData:
        # Сбой одной подписи не прерывает обработку остальных
        try:
            return self._signature(signature, data_file_names)
        except Exception:
            logger.exception("Failed to build report entry for signature %s", signature.id)
            return SignatureValidationData(
                id=signature.id,
                indication=Indication.TOTAL_FAILED,
                errors=[SignatureError(content=e) for e in [SIGNATURE_PROCESSING_ERROR] + self.container_errors],
            )

    def _signature(self, signature: RawSignature, data_file_names: List[str]) -> SignatureValidationData:
        adapter = self.adapter
        level = adapter.signature_level_label(signature)
        outcome = indications.resolve(
            level,
            adapter.raw_indication(signature),
            adapter.raw_sub_indication(signature),
            bool(self.container_errors),
            self.policy,
            apply_policy=adapter.applies_level_policy,
        )

        errors = adapter.signature_errors(signature)
        errors += [e for e in self.container_errors if e not in errors]
        errors += outcome.errors
        warnings = adapter.signature_warnings(signature) + outcome.warnings

        indication = outcome.indication
        if errors and indication == Indication.TOTAL_PASSED:
            logger.warning("Signature %s reported as passed with errors, marking as failed", signature.id)
            indication = Indication.TOTAL_FAILED

        certificates = classify_certificates(
            signature.signing_certificate,
            [r.certificate for r in signature.revocations if r.certificate],
        )
        certificates += adapter.extra_certificates(signature)

        subject = subject_distinguished_name(signature.signing_certificate)
        return SignatureValidationData(
            id=signature.id,
            signature_format=adapter.signature_format(signature),
            signature_method=signature.signature_method,
            signature_level=level,
            signed_by=subject.common_name or "",
            subject_distinguished_name=subject,
            indication=indication,
            sub_indication=outcome.sub_indication if indication != Indication.TOTAL_PASSED else "",
            claimed_signing_time=format_time(signature.claimed_signing_time) or "",
            warnings=[SignatureWarning(content=w) for w in warnings],
            errors=[SignatureError(content=e) for e in errors],
            signature_scopes=resolve_scopes(signature.references, data_file_names),
            certificates=certificates,
            info=self._info(signature),
        )

    def _info(self, signature: RawSignature) -> Info:
        timestamp = first_timestamp(signature)
        place = signature.production_place
        return Info(
            best_signature_time=format_time(signature.best_signature_time),
            ocsp_response_creation_time=format_time(ocsp_creation_time(first_revocation(signature))),
            timestamp_creation_time=format_time(timestamp.creation_time if timestamp is not None else None),
            time_assertion_message_imprint=self.adapter.message_imprint(signature),
            signer_role=[SignerRole(claimed_role=role) for role in signature.signer_roles],
            signature_production_place=SignatureProductionPlace(**place.model_dump()) if place is not None else None,
        )
