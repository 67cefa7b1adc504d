import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from sigreport.assembler import ReportAssembler
from sigreport.dispatcher import adapter_for, container_validator_for
from sigreport.models import Reports, ReportType
from sigreport.policies import PolicyDefinition, resolve_policy
from sigreport.raw import RawValidationResult, ValidationDocument, load_raw_result
from sigreport.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def validate_document(
    document: ValidationDocument,
    raw_payload: Union[RawValidationResult, bytes, str, Dict[str, Any]],
    policy_id: Optional[str] = None,
    report_type: ReportType = ReportType.SIMPLE,
    settings: Optional[Settings] = None,
    policies: Optional[Mapping[str, PolicyDefinition]] = None,
    validation_time: Optional[datetime] = None,
) -> Reports:
    """Построить отчёты для одного документа.

    Политика и факты движка проверяются до сборки: неизвестная политика и
    нечитаемые факты прерывают запрос, частичный отчёт не строится.
    """
    settings = settings or get_settings()
    policy = resolve_policy(policy_id, policies, default=settings.default_policy)
    raw = raw_payload if isinstance(raw_payload, RawValidationResult) else load_raw_result(raw_payload)

    container_errors = container_validator_for(raw, document).validate()
    adapter = adapter_for(raw, document, policy)
    logger.debug(
        "Validating %s: format=%s adapter=%s policy=%s",
        document.filename, raw.document_format, type(adapter).__name__, policy.name,
    )
    assembler = ReportAssembler(
        adapter,
        policy,
        report_signature_enabled=settings.report_signature_enabled,
        container_errors=container_errors,
    )
    return assembler.build(report_type, validation_time=validation_time)
