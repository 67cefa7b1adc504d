"""Сырые факты внешнего движка проверки: то, что приходит на вход сборщику отчёта.

Движок уже проверил криптографию, цепочки и OCSP/TSP; здесь только
результаты этих проверок в виде, удобном для классификации.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from sigreport.errors import MalformedDocumentError

logger = logging.getLogger(__name__)


class RawModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RawIssue(RawModel):
    message: str
    code: Optional[int] = None


class RawTimestamp(RawModel):
    certificate: Optional[str] = None
    creation_time: Optional[datetime] = None
    message_imprint: Optional[str] = None


class RawRevocation(RawModel):
    certificate: Optional[str] = None
    creation_time: Optional[datetime] = None
    # DER OCSP-ответа в base64, если движок его отдаёт
    response: Optional[str] = None


class RawProductionPlace(RawModel):
    country_name: str = ""
    state_or_province: str = ""
    city: str = ""
    postal_code: str = ""


class RawSignature(RawModel):
    id: str
    indication: str = "TOTAL_FAILED"
    sub_indication: Optional[str] = None
    qualification: Optional[str] = None
    profile: Optional[str] = None
    signature_format: Optional[str] = None
    signature_method: str = ""
    claimed_signing_time: Optional[datetime] = None
    best_signature_time: Optional[datetime] = None
    signing_certificate: Optional[str] = None
    revocations: List[RawRevocation] = Field(default_factory=list)
    timestamps: List[RawTimestamp] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    signer_roles: List[str] = Field(default_factory=list)
    production_place: Optional[RawProductionPlace] = None
    errors: List[RawIssue] = Field(default_factory=list)
    warnings: List[RawIssue] = Field(default_factory=list)


class RawSimpleReportEntry(RawModel):
    indication: str
    sub_indication: Optional[str] = None
    qualification: Optional[str] = None


class RawDataFile(RawModel):
    name: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    declared_size: Optional[int] = None
    content: Optional[str] = None


class RawValidationResult(RawModel):
    document_format: str
    container_type: Optional[str] = None
    format_version: Optional[str] = None
    hashcode: bool = False
    signatures: List[RawSignature] = Field(default_factory=list)
    simple_reports: Dict[str, RawSimpleReportEntry] = Field(default_factory=dict)
    container_errors: List[RawIssue] = Field(default_factory=list)
    container_warnings: List[RawIssue] = Field(default_factory=list)
    data_files: List[RawDataFile] = Field(default_factory=list)
    validation_process: Optional[Dict[str, Any]] = None
    diagnostic_data: Optional[Dict[str, Any]] = None


class ValidationDocument(RawModel):
    filename: str
    content: bytes = b""
    content_type: Optional[str] = None
    # Имена файлов данных, переданных отдельно от хэшкод-подписи
    data_files: List[str] = Field(default_factory=list)


def load_raw_result(payload: Union[bytes, str, Dict[str, Any]]) -> RawValidationResult:
    """Разобрать факты движка. Любой нечитаемый ввод даёт MalformedDocumentError."""
    try:
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        if isinstance(payload, str):
            payload = json.loads(payload)
        if not isinstance(payload, dict):
            raise MalformedDocumentError()
        return RawValidationResult.model_validate(payload)
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError, RecursionError) as e:
        logger.info("Raw validation facts rejected: %s", e)
        raise MalformedDocumentError() from e
